"""Unit tests for the BPE primitives."""

from collections import Counter

from wordtok._bpe import (
    WORD_START,
    apply_merges,
    count_pairs,
    merge_corpus,
    merge_pair,
    pieces_to_word,
    strip_marker,
    word_to_pieces,
)


# Word representation
# ---------------------------------------------------------------------------


def test_word_to_pieces_marks_first_code_point():
    """One piece per code point, the first carries the marker."""
    assert word_to_pieces("hello") == ("▁h", "e", "l", "l", "o")


def test_word_to_pieces_uses_code_points_not_bytes():
    """Multi-byte characters stay whole."""
    assert word_to_pieces("日本🎉") == ("▁日", "本", "🎉")


def test_word_to_pieces_empty():
    """An empty word has no pieces."""
    assert word_to_pieces("") == ()


def test_pieces_to_word_strips_markers():
    """Joining pieces removes every word-start marker."""
    assert pieces_to_word(["▁lo", "w", "▁er"]) == "lower"
    assert strip_marker("abc") == "abc"
    assert strip_marker(WORD_START) == ""


# Pair counting
# ---------------------------------------------------------------------------


def test_count_pairs_weights_by_word_frequency():
    """Each adjacent pair is counted once per occurrence times word frequency."""
    word_counts = Counter({("▁a", "b", "a", "b"): 3, ("▁b", "a"): 2})
    counts = count_pairs(word_counts, min_frequency=1)
    assert counts == Counter({("▁a", "b"): 3, ("b", "a"): 3, ("a", "b"): 3, ("▁b", "a"): 2})


def test_count_pairs_skips_rare_words():
    """Words below the floor are excluded."""
    word_counts = Counter({("▁a", "b"): 1, ("▁c", "d"): 2})
    assert count_pairs(word_counts, min_frequency=2) == Counter({("▁c", "d"): 2})


def test_count_pairs_returns_fresh_table():
    """Every call builds a new table."""
    word_counts = Counter({("▁a", "b"): 1})
    first = count_pairs(word_counts, 1)
    first[("▁a", "b")] += 10
    assert count_pairs(word_counts, 1)[("▁a", "b")] == 1


# Pair merging
# ---------------------------------------------------------------------------


def test_merge_pair_is_non_overlapping_left_to_right():
    """Overlapping occurrences merge from the left."""
    assert merge_pair(("a", "a", "a"), ("a", "a")) == ("aa", "a")
    assert merge_pair(("a", "a", "a", "a"), ("a", "a")) == ("aa", "aa")


def test_merge_pair_does_not_reexamine_new_piece():
    """A freshly merged piece is not merged again in the same pass."""
    assert merge_pair(("a", "b", "b"), ("a", "b")) == ("ab", "b")


def test_merge_pair_short_sequences():
    """Sequences with fewer than two pieces are returned unchanged."""
    assert merge_pair(("▁a",), ("▁a", "b")) == ("▁a",)
    assert merge_pair((), ("▁a", "b")) == ()


def test_merge_corpus_keeps_frequencies():
    """Merging rewrites keys but keeps their counts."""
    word_counts = Counter({("▁a", "b"): 2, ("▁c", "a", "b"): 1})
    merged = merge_corpus(word_counts, ("a", "b"))
    assert merged == Counter({("▁a", "b"): 2, ("▁c", "ab"): 1})


# Encode-time merge application
# ---------------------------------------------------------------------------


def test_apply_merges_respects_rank():
    """A lower rank wins over a pair further left in the word."""
    ranks = {("a", "b"): 0, ("b", "c"): 1}
    assert apply_merges("xabc", ranks) == ["▁x", "ab", "c"]

    ranks = {("b", "c"): 0, ("a", "b"): 1}
    assert apply_merges("xabc", ranks) == ["▁x", "a", "bc"]


def test_apply_merges_leftmost_on_equal_rank():
    """Among occurrences of the same pair the leftmost merges first."""
    assert apply_merges("xaaa", {("a", "a"): 0}) == ["▁x", "aa", "a"]


def test_apply_merges_rescans_after_each_merge():
    """New pieces can take part in later merges."""
    ranks = {("a", "b"): 0, ("▁x", "ab"): 1}
    assert apply_merges("xab", ranks) == ["▁xab"]


def test_apply_merges_without_rules():
    """No rules leaves one piece per code point."""
    assert apply_merges("abc", {}) == ["▁a", "b", "c"]
    assert apply_merges("", {}) == []


def test_apply_merges_ignores_rank_gaps():
    """Ranks need not be contiguous."""
    ranks = {("▁a", "b"): 0, ("▁ab", "c"): 7}
    assert apply_merges("abc", ranks) == ["▁abc"]
