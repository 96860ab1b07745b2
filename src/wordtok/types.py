"""
Core types for tokenization.
"""

from collections import Counter
from typing import TypeAlias

Piece: TypeAlias = str
TokenId: TypeAlias = int
PiecePair: TypeAlias = tuple[Piece, Piece]
Word: TypeAlias = tuple[Piece, ...]
MergeTable: TypeAlias = list[PiecePair]
WordCounts: TypeAlias = Counter[Word]
