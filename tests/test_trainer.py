"""Unit tests for BPE training: determinism, limits, pruning and tie-breaks."""

from collections import Counter

import pytest

from wordtok._bpe import apply_merges, merge_corpus
from wordtok.errors import TrainingError
from wordtok.special import DEFAULT_SPECIAL_TOKENS
from wordtok.trainer import (
    TrainingConfig,
    count_words,
    select_pair,
    train_bpe,
)


SPECIALS = list(DEFAULT_SPECIAL_TOKENS)

CORPUS = (
    "the cat sat on the mat\n"
    "the other cat sat there\n"
    "then the brother sat on these mats\n"
)


def _train(text, min_frequency=2, max_merges=100, lower=True):
    return train_bpe(
        text,
        SPECIALS,
        TrainingConfig(min_frequency=min_frequency, max_merges=max_merges),
        lower=lower,
    )


# Configuration
# ---------------------------------------------------------------------------


def test_config_defaults():
    """Defaults match the command line defaults."""
    config = TrainingConfig()
    assert config.min_frequency == 2
    assert config.max_merges == 10_000


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_frequency": 0},
        {"min_frequency": -3},
        {"max_merges": -1},
        {"min_frequency": True},
        {"max_merges": 2.5},
    ],
)
def test_config_rejects_invalid_values(kwargs):
    """Frequencies below one, negative budgets and non-ints are rejected."""
    with pytest.raises(TrainingError):
        TrainingConfig(**kwargs)


# Word counting
# ---------------------------------------------------------------------------


def test_count_words_marks_word_starts_and_keeps_order():
    """Words become marked code point sequences, in first-seen order."""
    counts = count_words("Hi there\r\nhi  THERE\n\n", lower=True)
    assert list(counts.items()) == [
        (("▁h", "i"), 2),
        (("▁t", "h", "e", "r", "e"), 2),
    ]


def test_count_words_without_lowering():
    """Case is kept when lowering is off."""
    counts = count_words("Hi hi", lower=False)
    assert counts == Counter({("▁H", "i"): 1, ("▁h", "i"): 1})


# Pair selection
# ---------------------------------------------------------------------------


def test_select_pair_prefers_highest_count():
    """The strictly highest count wins."""
    counts = Counter({("a", "b"): 2, ("c", "d"): 5, ("e", "f"): 3})
    assert select_pair(counts) == (("c", "d"), 5)


def test_select_pair_ties_go_to_first_inserted():
    """Among equal counts the first pair inserted wins."""
    counts = Counter()
    counts[("x", "y")] = 4
    counts[("a", "b")] = 4
    assert select_pair(counts) == (("x", "y"), 4)


def test_select_pair_empty():
    """No pairs means nothing to select."""
    assert select_pair(Counter()) is None


def test_tie_broken_by_first_word_in_corpus():
    """Equal pair counts resolve to the pair met first in the corpus."""
    result = _train("cd ab cd ab", min_frequency=1, max_merges=1)
    assert result.merges == [("▁c", "d")]


# Training loop
# ---------------------------------------------------------------------------


def test_training_is_deterministic():
    """Two runs produce the same merges and the same ids."""
    first = _train(CORPUS)
    second = _train(CORPUS)
    assert first.merges == second.merges
    assert first.vocab.to_dict() == second.vocab.to_dict()
    assert list(first.vocab) == list(second.vocab)


@pytest.mark.parametrize("max_merges", [0, 1, 3, 10, 1000])
@pytest.mark.parametrize("min_frequency", [1, 2, 3])
def test_merge_limits_are_respected(min_frequency, max_merges):
    """Never more merges than allowed, never a merge below the frequency floor."""
    result = _train(CORPUS, min_frequency=min_frequency, max_merges=max_merges)
    assert result.n_merges_completed == len(result.merges) <= max_merges
    assert len(result.merge_counts) == len(result.merges)
    assert all(cnt >= min_frequency for cnt in result.merge_counts)


def test_merge_counts_are_non_increasing_for_simple_corpus():
    """Each merge is the most frequent pair at the time it was chosen."""
    result = _train("aaaa aaaa aaaa", min_frequency=1, max_merges=10)
    assert result.merges == [("a", "a"), ("▁a", "aa"), ("▁aaa", "a")]
    assert result.merge_counts == [6, 3, 3]


def test_zero_merges_keeps_single_code_points():
    """A zero budget leaves the vocabulary at specials plus code points."""
    result = _train("abc abc", max_merges=0)
    assert result.merges == []
    assert list(result.vocab) == SPECIALS + ["▁a", "b", "c"]


def test_rare_words_are_pruned_from_pair_counts():
    """Words below the frequency floor contribute no pairs."""
    result = _train("ab cd cd", min_frequency=2)
    assert result.merges == [("▁c", "d")]
    # the rare word still reaches the vocabulary
    assert "▁a" in result.vocab
    assert "b" in result.vocab


def test_no_pairs_above_floor_stops_at_step_zero():
    """A corpus without frequent pairs learns nothing."""
    result = _train("a b c", min_frequency=2)
    assert result.merges == []
    assert list(result.vocab) == SPECIALS + ["▁a", "▁b", "▁c"]


def test_empty_corpus_is_not_an_error(caplog):
    """An empty corpus yields only special tokens."""
    result = _train("")
    assert result.merges == []
    assert result.n_merges_completed == 0
    assert list(result.vocab) == SPECIALS
    assert "no words" in caplog.text


def test_fully_merged_intermediate_pieces_leave_the_vocab():
    """Only pieces present after the last merge are in the vocabulary."""
    result = _train("low low", min_frequency=2)
    assert result.merges == [("▁l", "o"), ("▁lo", "w")]
    assert list(result.vocab) == SPECIALS + ["▁low"]


def test_verbose_logs_each_merge(caplog):
    """Verbose training logs every learned merge."""
    caplog.set_level("INFO", logger="wordtok.trainer")
    train_bpe("ab ab", SPECIALS, TrainingConfig(min_frequency=1), verbose=True)
    assert "merge 1/" in caplog.text


def test_non_string_corpus_raises():
    """The corpus must be a string."""
    with pytest.raises(TrainingError):
        train_bpe(b"ab ab", SPECIALS, TrainingConfig())


# Agreement with encode-time merging
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("min_frequency", [1, 2])
def test_apply_merges_reproduces_training_segmentation(min_frequency):
    """Replaying the merge table on each word gives the pieces training ended with."""
    result = _train(CORPUS, min_frequency=min_frequency, max_merges=50)
    ranks = {pair: rank for rank, pair in enumerate(result.merges)}

    word_counts = count_words(CORPUS, lower=True)
    for pair in result.merges:
        word_counts = merge_corpus(word_counts, pair)

    for pieces in word_counts:
        word = "".join(pieces)[1:]
        assert apply_merges(word, ranks) == list(pieces)
