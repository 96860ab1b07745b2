"""
Core Byte Pair Encoding (BPE) operations over Unicode pieces.
"""

from collections import Counter
from typing import Final

from .types import Piece, PiecePair, Word, WordCounts

# marks the first piece of every word
WORD_START: Final[str] = "▁"


def word_to_pieces(word: str) -> Word:
    """
    Split a word into one piece per code point, marking the first piece.

    e.g. ``"hello" -> ("▁h", "e", "l", "l", "o")``
    """
    if not word:
        return ()
    return (WORD_START + word[0], *word[1:])


def strip_marker(piece: Piece) -> str:
    """Return ``piece`` without its word-start marker, if it has one."""
    if piece.startswith(WORD_START):
        return piece[len(WORD_START) :]
    return piece


def pieces_to_word(pieces: list[Piece] | Word) -> str:
    """Join pieces back into text, dropping word-start markers."""
    return "".join(strip_marker(p) for p in pieces)


def count_pairs(word_counts: WordCounts, min_frequency: int) -> Counter[PiecePair]:
    """
    Count adjacent piece pairs across all words, weighted by word frequency.

    Words seen fewer than ``min_frequency`` times contribute nothing. Pairs
    are inserted in the order they are first met while scanning
    ``word_counts``, so ties can be broken by first appearance.
    """
    counts: Counter[PiecePair] = Counter()
    for pieces, freq in word_counts.items():
        # rare words are pruned from pair statistics but stay in the corpus
        if freq < min_frequency:
            continue
        for pair in zip(pieces, pieces[1:]):
            counts[pair] += freq
    return counts


def merge_pair(pieces: Word, target: PiecePair) -> Word:
    """
    Replace every non-overlapping occurrence of ``target`` with one merged piece.

    Scans left to right; a freshly merged piece is not considered again
    within the same pass.
    """
    if len(pieces) < 2:
        return pieces

    merged = target[0] + target[1]
    out: list[Piece] = []
    i = 0
    n = len(pieces)

    while i < n:
        # check if we can form a pair and it matches the target
        if i < n - 1 and pieces[i] == target[0] and pieces[i + 1] == target[1]:
            out.append(merged)
            i += 2
        else:
            out.append(pieces[i])
            i += 1

    return tuple(out)


def merge_corpus(word_counts: WordCounts, target: PiecePair) -> WordCounts:
    """Apply :func:`merge_pair` to every word, keeping scan order and frequencies."""
    merged: WordCounts = Counter()
    for pieces, freq in word_counts.items():
        merged[merge_pair(pieces, target)] += freq
    return merged


def apply_merges(word: str, ranks: dict[PiecePair, int]) -> list[Piece]:
    """
    Apply ranked merges to a single word.

    At each step the adjacent pair with the lowest rank is merged; among
    equal ranks the leftmost occurrence wins. The scan restarts after every
    merge because the new piece may form pairs of its own. Stops when no
    adjacent pair has a rank.

    :param word: Word to segment, without whitespace.
    :param ranks: Merge pair -> priority rank (0 is applied first).
    :return: Pieces of the segmented word.
    """
    pieces = list(word_to_pieces(word))

    while len(pieces) > 1:
        best_pos = -1
        best_rank: int | None = None
        for i, pair in enumerate(zip(pieces, pieces[1:])):
            rank = ranks.get(pair)
            if rank is None:
                continue
            # strict comparison keeps the leftmost of equally ranked pairs
            if best_rank is None or rank < best_rank:
                best_rank = rank
                best_pos = i

        if best_rank is None:
            break

        pieces[best_pos : best_pos + 2] = [pieces[best_pos] + pieces[best_pos + 1]]

    return pieces


__all__ = [
    "WORD_START",
    "word_to_pieces",
    "strip_marker",
    "pieces_to_word",
    "count_pairs",
    "merge_pair",
    "merge_corpus",
    "apply_merges",
]
