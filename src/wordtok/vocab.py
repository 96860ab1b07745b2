"""
Bidirectional piece <-> id mapping with reserved special tokens.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping

from .errors import MalformedArtifactError, UnknownIdError, UnknownTokenError
from .types import Piece, TokenId

log = logging.getLogger(__name__)


class Vocabulary:
    """
    Bijective mapping between pieces and integer ids.

    Special tokens always occupy ids ``0..n-1`` in declaration order; every
    other piece gets the next free id when first inserted.
    """

    def __init__(self, special_toks: Iterable[Piece] = ()) -> None:
        # piece -> id
        self._tok_to_id: dict[Piece, TokenId] = {}
        # id -> piece
        self._id_to_tok: dict[TokenId, Piece] = {}
        self._next_id: TokenId = 0
        self.initialize_specials(special_toks)

    def initialize_specials(self, special_toks: Iterable[Piece]) -> None:
        """Drop all state and assign ids ``0..n-1`` to ``special_toks`` in order."""
        self._tok_to_id.clear()
        self._id_to_tok.clear()
        self._next_id = 0
        for seq in special_toks:
            self.insert(seq)

    def insert(self, piece: Piece) -> TokenId:
        """Return the id of ``piece``, assigning the next free id if it is new."""
        if piece in self._tok_to_id:
            return self._tok_to_id[piece]
        tok = self._next_id
        self._tok_to_id[piece] = tok
        self._id_to_tok[tok] = piece
        self._next_id += 1
        return tok

    def id_of(self, piece: Piece) -> TokenId:
        """
        Look up the id of a piece.

        :raises UnknownTokenError: If ``piece`` is not in the vocabulary.
        """
        try:
            return self._tok_to_id[piece]
        except KeyError:
            raise UnknownTokenError("piece not in vocabulary", invalid_tok=piece) from None

    def token_of(self, tok: TokenId) -> Piece:
        """
        Look up the piece for an id.

        :raises UnknownIdError: If ``tok`` is not assigned.
        """
        try:
            return self._id_to_tok[tok]
        except KeyError:
            raise UnknownIdError("id not in vocabulary", invalid_tok=tok) from None

    def to_dict(self) -> dict[Piece, TokenId]:
        """Return a copy of the piece -> id mapping in insertion order."""
        return dict(self._tok_to_id)

    @classmethod
    def from_mapping(
        cls, special_toks: list[Piece], mapping: Mapping[str, object]
    ) -> "Vocabulary":
        """
        Rebuild a vocabulary from a serialized piece -> id mapping.

        Ids that are not non-negative integers (or digit strings) are skipped,
        as are ids already claimed by an earlier piece. Every special token
        must survive with an id.

        :raises MalformedArtifactError: If a special token has no valid id.
        """
        vocab = cls()
        for piece, raw_id in mapping.items():
            tok = _coerce_id(raw_id)
            if tok is None:
                log.warning(f"skipping non-numeric id {raw_id!r} for piece {piece!r}")
                continue
            if tok in vocab._id_to_tok:
                log.warning(
                    f"skipping duplicate id {tok} for piece {piece!r} "
                    f"(already used by {vocab._id_to_tok[tok]!r})"
                )
                continue
            vocab._tok_to_id[piece] = tok
            vocab._id_to_tok[tok] = piece

        missing = [seq for seq in special_toks if seq not in vocab._tok_to_id]
        if missing:
            raise MalformedArtifactError(
                f"special tokens missing from vocab: {', '.join(missing)}",
                field="vocab",
            )

        vocab._next_id = max(vocab._id_to_tok, default=-1) + 1
        log.debug(f"rebuilt vocabulary with {len(vocab)} tokens")
        return vocab

    def __contains__(self, piece: object) -> bool:
        return piece in self._tok_to_id

    def __len__(self) -> int:
        return len(self._tok_to_id)

    def __iter__(self) -> Iterator[Piece]:
        return iter(self._tok_to_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vocabulary):
            return NotImplemented
        return self._tok_to_id == other._tok_to_id

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={len(self)})"


def _coerce_id(raw_id: object) -> TokenId | None:
    """Return ``raw_id`` as a non-negative int, or ``None`` if it is not one."""
    # bool is an int subclass but never a valid id
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        return raw_id if raw_id >= 0 else None
    if isinstance(raw_id, str) and raw_id.strip().isdecimal():
        return int(raw_id.strip())
    return None
