"""Standalone BPE training module."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Final
import logging

from ._bpe import count_pairs, merge_corpus, word_to_pieces
from .errors import TrainingError
from .pretokenize import split_words
from .types import MergeTable, PiecePair, WordCounts
from .vocab import Vocabulary

DEFAULT_MIN_FREQUENCY: Final[int] = 2
DEFAULT_MAX_MERGES: Final[int] = 10_000

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingConfig:
    """Training limits: pair frequency floor and merge budget."""

    min_frequency: int = DEFAULT_MIN_FREQUENCY
    max_merges: int = DEFAULT_MAX_MERGES

    def __post_init__(self) -> None:
        # bool is an int subclass, reject it explicitly
        if not isinstance(self.min_frequency, int) or isinstance(self.min_frequency, bool):
            raise TrainingError("min_frequency must be an int", value=self.min_frequency)
        if not isinstance(self.max_merges, int) or isinstance(self.max_merges, bool):
            raise TrainingError("max_merges must be an int", value=self.max_merges)
        if self.min_frequency < 1:
            raise TrainingError("min_frequency must be at least 1", value=self.min_frequency)
        if self.max_merges < 0:
            raise TrainingError("max_merges must not be negative", value=self.max_merges)


@dataclass
class BPETrainingResult:
    """Results from one BPE training run."""

    merges: MergeTable
    vocab: Vocabulary
    n_merges_completed: int
    # pair frequency observed when each merge was selected, aligned with merges
    merge_counts: list[int] = field(default_factory=list)


def count_words(text: str, lower: bool) -> WordCounts:
    """
    Count distinct words of a corpus as piece sequences.

    Keys keep the order in which words first appear in the corpus.
    """
    word_counts: WordCounts = Counter()
    for word in split_words(text, lower):
        word_counts[word_to_pieces(word)] += 1
    return word_counts


def select_pair(pair_counts: Counter[PiecePair]) -> tuple[PiecePair, int] | None:
    """
    Pick the most frequent pair.

    Ties go to the pair inserted first into ``pair_counts``, which for
    :func:`count_pairs` is the pair met first while scanning the corpus.
    """
    best: PiecePair | None = None
    best_count = 0
    for pair, cnt in pair_counts.items():
        if cnt > best_count:
            best = pair
            best_count = cnt
    if best is None:
        return None
    return best, best_count


def train_bpe(
    text: str,
    special_toks: list[str],
    config: TrainingConfig,
    lower: bool = True,
    verbose: bool = False,
) -> BPETrainingResult:
    """
    Learn an ordered merge table and vocabulary from a corpus.

    Each iteration rebuilds pair counts from scratch, merges the most
    frequent pair everywhere in the corpus and records it. Training stops
    after ``config.max_merges`` merges, when no pairs remain, or when the
    best pair is seen fewer than ``config.min_frequency`` times.

    :param text: Raw training corpus.
    :param special_toks: Special tokens that take the lowest ids.
    :param config: Frequency floor and merge budget.
    :param lower: Apply NFC + lowercasing before splitting.
    :param verbose: Log each learned merge when ``True``.
    :returns: Merge table, vocabulary and per-merge frequencies.
    """
    if not isinstance(text, str):
        raise TrainingError("training corpus must be a string", value=type(text).__name__)

    word_counts = count_words(text, lower)
    if not word_counts:
        log.warning("corpus contains no words, no merges learned")

    log.debug(f"corpus has {len(word_counts)} distinct words")

    merges: MergeTable = []
    merge_counts: list[int] = []

    for _ in range(config.max_merges):
        pair_counts = count_pairs(word_counts, config.min_frequency)
        selected = select_pair(pair_counts)
        # nothing left to merge
        if selected is None:
            break

        pair, cnt = selected
        if cnt < config.min_frequency:
            break

        merges.append(pair)
        merge_counts.append(cnt)
        word_counts = merge_corpus(word_counts, pair)

        if verbose:
            log.info(
                "merge %d/%d: %s + %s -> %s (count %d)",
                len(merges),
                config.max_merges,
                pair[0],
                pair[1],
                pair[0] + pair[1],
                cnt,
            )

    # special tokens first, then every surviving piece in corpus scan order
    vocab = Vocabulary(special_toks)
    for pieces in word_counts:
        for piece in pieces:
            vocab.insert(piece)

    return BPETrainingResult(
        merges=merges,
        vocab=vocab,
        n_merges_completed=len(merges),
        merge_counts=merge_counts,
    )


__all__ = [
    "DEFAULT_MIN_FREQUENCY",
    "DEFAULT_MAX_MERGES",
    "TrainingConfig",
    "BPETrainingResult",
    "count_words",
    "select_pair",
    "train_bpe",
]
