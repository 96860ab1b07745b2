"""
Text normalisation and word splitting shared by training and encoding.
"""

import unicodedata

import regex as re

# line breaks, with optional carriage return
LINE_PAT = re.compile(r"\r?\n")
# one or more whitespace characters
WHITESPACE_PAT = re.compile(r"\s+")
# the capturing group keeps whitespace runs in the split result
KEEP_WHITESPACE_PAT = re.compile(r"(\s+)")


def normalise(text: str, lower: bool) -> str:
    """Apply NFC composition then lowercase when case folding is enabled."""
    if not lower:
        return text
    return unicodedata.normalize("NFC", text).lower()


def is_whitespace(chunk: str) -> bool:
    """Return ``True`` if ``chunk`` is a non-empty run of whitespace."""
    return WHITESPACE_PAT.fullmatch(chunk) is not None


def split_words(text: str, lower: bool) -> list[str]:
    """
    Split a training corpus into words.

    The corpus is split into lines, each line is normalised, then split on
    whitespace runs. Empty words are discarded.
    """
    words: list[str] = []
    for line in LINE_PAT.split(text):
        line = normalise(line, lower)
        words.extend(w for w in WHITESPACE_PAT.split(line) if w)
    return words


def split_keep_whitespace(text: str, lower: bool) -> list[str]:
    """
    Split text into alternating word and whitespace chunks.

    Whitespace runs are kept verbatim so that spacing survives tokenization.
    Empty chunks are discarded.
    """
    src = normalise(text, lower)
    return [chunk for chunk in KEEP_WHITESPACE_PAT.split(src) if chunk]


__all__ = [
    "normalise",
    "is_whitespace",
    "split_words",
    "split_keep_whitespace",
]
