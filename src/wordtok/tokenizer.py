"""
Word-level BPE tokenizer: training, encoding, decoding and persistence.
"""

from pathlib import Path
from typing import Any
import logging

from ._bpe import apply_merges, pieces_to_word
from ._decorators import measure_time
from .artifact import Artifact, read_artifact, write_artifact
from .errors import UnknownIdError, UnknownTokenError
from .pretokenize import is_whitespace, split_keep_whitespace
from .special import (
    BOS_TOKEN,
    DEFAULT_SPECIAL_TOKENS,
    EOS_TOKEN,
    UNK_TOKEN,
    space_token,
    validate_special_tokens,
)
from .trainer import (
    DEFAULT_MAX_MERGES,
    DEFAULT_MIN_FREQUENCY,
    TrainingConfig,
    train_bpe,
)
from .types import MergeTable, Piece, PiecePair, TokenId
from .vocab import Vocabulary

log = logging.getLogger(__name__)


class Tokenizer:
    """
    BPE tokenizer over Unicode code points with a word-start marker.

    Learns an ordered merge table from a corpus, then segments words by
    replaying those merges in rank order. Vocabulary and merges are only
    replaced wholesale by :meth:`train` or a load.
    """

    def __init__(
        self,
        lower: bool = True,
        special_toks: list[str] | None = None,
    ) -> None:
        """
        :param lower: Apply NFC + lowercasing to training and input text.
        :param special_toks: Ordered special tokens; must include the unknown,
            begin and end tokens. Defaults to ``DEFAULT_SPECIAL_TOKENS``.
        :raises SpecialTokenError: If ``special_toks`` is invalid.
        """
        if special_toks is None:
            special_toks = list(DEFAULT_SPECIAL_TOKENS)
        self.lower: bool = lower
        self.special_toks: list[str] = validate_special_tokens(special_toks)
        self.merges: MergeTable = []
        self.vocab: Vocabulary = Vocabulary(self.special_toks)
        # merge pair -> rank, rebuilt whenever merges change
        self._ranks: dict[PiecePair, int] = {}
        self._special_set: frozenset[str] = frozenset(self.special_toks)

    @measure_time
    def train(
        self,
        text: str,
        min_frequency: int = DEFAULT_MIN_FREQUENCY,
        max_merges: int = DEFAULT_MAX_MERGES,
        verbose: bool = False,
    ) -> None:
        """
        Learn merges and vocabulary from a corpus, replacing any previous state.

        :param text: Training corpus.
        :param min_frequency: Words and pairs seen fewer times are ignored.
        :param max_merges: Upper bound on learned merges.
        :param verbose: Log each learned merge when ``True``.
        :raises TrainingError: If the configuration is invalid.
        """
        config = TrainingConfig(min_frequency=min_frequency, max_merges=max_merges)
        log.info(
            f"training tokenizer (min_frequency={config.min_frequency}, "
            f"max_merges={config.max_merges})"
        )

        result = train_bpe(
            text, self.special_toks, config, lower=self.lower, verbose=verbose
        )

        if result.n_merges_completed < config.max_merges:
            log.warning(
                f"no more pairs to merge after {result.n_merges_completed} merges "
                f"(requested {config.max_merges}) stopping early"
            )

        self._set_state(result.merges, result.vocab)
        log.info(
            f"learned {len(self.merges)} merges, vocabulary has {len(self.vocab)} tokens"
        )

    def tokenize(self, text: str) -> list[Piece]:
        """
        Split text into pieces.

        Words are segmented with the learned merges; whitespace runs are
        emitted unchanged so spacing is visible to :meth:`encode`.
        """
        out: list[Piece] = []
        for chunk in split_keep_whitespace(text, self.lower):
            if is_whitespace(chunk):
                out.append(chunk)
            else:
                out.extend(apply_merges(chunk, self._ranks))
        return out

    def encode(
        self,
        text: str,
        add_boundary_markers: bool = True,
        keep_whitespace: bool = True,
    ) -> list[TokenId]:
        """
        Encode text into token ids.

        Pieces missing from the vocabulary map to the unknown token. With
        ``keep_whitespace`` each whitespace run maps to ``<SPACE>n`` for a run
        of length n. Training never learns those tokens, so unless they were
        added to the vocabulary by hand whitespace encodes as unknown.

        :param text: Text to encode.
        :param add_boundary_markers: Wrap the ids in begin/end tokens.
        :param keep_whitespace: Emit an id for each whitespace run instead of
            dropping it.
        """
        ids: list[TokenId] = []
        if add_boundary_markers:
            ids.append(self.vocab.id_of(BOS_TOKEN))

        for piece in self.tokenize(text):
            if is_whitespace(piece):
                if keep_whitespace:
                    ids.append(self.token_to_id(space_token(piece)))
                continue
            ids.append(self.token_to_id(piece))

        if add_boundary_markers:
            ids.append(self.vocab.id_of(EOS_TOKEN))
        return ids

    def decode(self, ids: list[TokenId], skip_special_tokens: bool = True) -> str:
        """
        Decode token ids back into text.

        Unknown ids decode as the unknown token. Word-start markers are
        stripped without reinserting the space that preceded the word, so
        words come back joined together.

        :param ids: Token ids to decode.
        :param skip_special_tokens: Drop special tokens, including the unknown
            token, from the output.
        """
        parts: list[Piece] = []
        for tok in ids:
            piece = self.id_to_token(tok)
            if skip_special_tokens and piece in self._special_set:
                continue
            parts.append(piece)
        return pieces_to_word(parts)

    def token_to_id(self, piece: Piece) -> TokenId:
        """Return the id of ``piece``, or the unknown token id."""
        try:
            return self.vocab.id_of(piece)
        except UnknownTokenError:
            return self.vocab.id_of(UNK_TOKEN)

    def id_to_token(self, tok: TokenId) -> Piece:
        """Return the piece for ``tok``, or the unknown token."""
        try:
            return self.vocab.token_of(tok)
        except UnknownIdError:
            return UNK_TOKEN

    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return len(self.vocab)

    def n_merges(self) -> int:
        """Return the number of learned merge rules."""
        return len(self.merges)

    def get_merges(self, limit: int | None = None) -> MergeTable:
        """Return merge rules in rank order, optionally only the first ``limit``."""
        if limit is None:
            return list(self.merges)
        return self.merges[: max(0, limit)]

    def to_artifact(self) -> Artifact:
        """Snapshot the tokenizer state as an :class:`Artifact`."""
        return Artifact(
            lower=self.lower,
            special_toks=list(self.special_toks),
            vocab=Vocabulary.from_mapping(self.special_toks, self.vocab.to_dict()),
            merges=list(self.merges),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the tokenizer state as plain ``meta``/``vocab``/``merges`` data."""
        return self.to_artifact().to_dict()

    def load_artifact(self, artifact: Artifact) -> None:
        """Replace all tokenizer state with the contents of ``artifact``."""
        self.lower = artifact.lower
        self.special_toks = list(artifact.special_toks)
        self._special_set = frozenset(self.special_toks)
        self._set_state(list(artifact.merges), artifact.vocab)

    def load_dict(self, obj: object) -> None:
        """
        Validate plain artifact data and load it.

        :raises MalformedArtifactError: If ``obj`` does not match the schema.
        """
        self.load_artifact(Artifact.from_dict(obj))

    @classmethod
    def from_dict(cls, obj: object) -> "Tokenizer":
        """Build a tokenizer from plain artifact data."""
        artifact = Artifact.from_dict(obj)
        tokenizer = cls(lower=artifact.lower, special_toks=artifact.special_toks)
        tokenizer.load_artifact(artifact)
        return tokenizer

    def save(self, path: str | Path) -> None:
        """
        Save tokenizer state to a JSON artifact file.

        :param path: Output file path; parent directories are created.
        """
        log.info(f"saving tokenizer to {path}")
        write_artifact(path, self.to_artifact())
        log.info("tokenizer saved successfully")

    def load(self, path: str | Path) -> None:
        """
        Load tokenizer state from a JSON artifact file.

        State is only replaced once the whole file has been validated.

        :raises ModelLoadError: If the file is missing or not JSON.
        :raises MalformedArtifactError: If the contents do not match the schema.
        """
        log.info(f"loading tokenizer from {path}")
        self.load_artifact(read_artifact(path))
        log.info(
            f"tokenizer loaded successfully: {len(self.special_toks)} special tokens, "
            f"{len(self.merges)} merge rules, {len(self.vocab)} total tokens"
        )

    def _set_state(self, merges: MergeTable, vocab: Vocabulary) -> None:
        """Install a merge table and vocabulary and rebuild the rank lookup."""
        ranks: dict[PiecePair, int] = {}
        for rank, pair in enumerate(merges):
            # a repeated pair keeps its first (highest priority) rank
            ranks.setdefault(pair, rank)
        self.merges = merges
        self.vocab = vocab
        self._ranks = ranks

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(lower={self.lower}, "
            f"vocab_size={self.vocab_size()}, n_merges={self.n_merges()})"
        )


__all__ = ["Tokenizer"]
