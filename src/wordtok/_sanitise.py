"""
Utilities for rendering pieces as displayable strings.
"""

import unicodedata

from .types import PiecePair


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def render_piece(piece: str) -> str:
    """Return ``piece`` with control characters escaped."""
    return _escape_ctrl_chars(piece)


def render_merge(pair: PiecePair) -> str:
    """Render a merge rule as ``left+right``."""
    return f"{render_piece(pair[0])}+{render_piece(pair[1])}"
