"""Special token names and validation."""

from typing import Final

from .errors import SpecialTokenError

PAD_TOKEN: Final[str] = "<PAD>"
UNK_TOKEN: Final[str] = "<UNK>"
BOS_TOKEN: Final[str] = "<BOS>"
EOS_TOKEN: Final[str] = "<EOS>"
SEP_TOKEN: Final[str] = "<SEP>"

DEFAULT_SPECIAL_TOKENS: Final[tuple[str, ...]] = (
    PAD_TOKEN,
    UNK_TOKEN,
    BOS_TOKEN,
    EOS_TOKEN,
    SEP_TOKEN,
)

# tokens the encoder and decoder look up by role
REQUIRED_SPECIAL_TOKENS: Final[tuple[str, ...]] = (UNK_TOKEN, BOS_TOKEN, EOS_TOKEN)

# a whitespace run of length n maps to "<SPACE>n"
SPACE_PREFIX: Final[str] = "<SPACE>"


def space_token(run: str) -> str:
    """Return the length-specific token name for a whitespace run."""
    return f"{SPACE_PREFIX}{len(run)}"


def validate_special_tokens(special_toks: object) -> list[str]:
    """
    Check a special token list and return it as a fresh list.

    :raises SpecialTokenError: If the value is not a list of unique non-empty
        strings containing the unknown, begin and end tokens.
    """
    if isinstance(special_toks, str) or not isinstance(special_toks, (list, tuple)):
        raise SpecialTokenError("special tokens must be a list of strings")

    bad = {repr(seq) for seq in special_toks if not isinstance(seq, str) or not seq}
    if bad:
        raise SpecialTokenError("special tokens must be non-empty strings", found_tokens=bad)

    seen: set[str] = set()
    duplicates: set[str] = set()
    for seq in special_toks:
        if seq in seen:
            duplicates.add(seq)
        seen.add(seq)
    if duplicates:
        raise SpecialTokenError("duplicate special tokens", found_tokens=duplicates)

    missing = {seq for seq in REQUIRED_SPECIAL_TOKENS if seq not in seen}
    if missing:
        raise SpecialTokenError("required special tokens missing", found_tokens=missing)

    return list(special_toks)


__all__ = [
    "PAD_TOKEN",
    "UNK_TOKEN",
    "BOS_TOKEN",
    "EOS_TOKEN",
    "SEP_TOKEN",
    "DEFAULT_SPECIAL_TOKENS",
    "REQUIRED_SPECIAL_TOKENS",
    "SPACE_PREFIX",
    "space_token",
    "validate_special_tokens",
]
