"""
Opening book lookup contract.

A book maps canonical position keys to precomputed strong scores. The solver
asks the book at each node it searches; a hit replaces the subtree search.
There is no on-disk book format: books are built in memory.
"""

from typing import Optional, Protocol

from connect4_solver.game.position import Position


class OpeningBook(Protocol):
    def lookup(self, key: int) -> Optional[int]:
        """Precomputed strong score for a canonical key, or None if unknown."""
        ...


class NullBook:
    """Book with no entries."""

    def lookup(self, key: int) -> Optional[int]:
        return None

    def __len__(self) -> int:
        return 0


class MappingBook:
    """In-memory book backed by a dict of canonical key -> strong score."""

    def __init__(self, scores: Optional[dict[int, int]] = None):
        self.scores: dict[int, int] = dict(scores) if scores else {}

    def add(self, position: Position, score: int):
        """Record the strong score of `position` (from its mover's view)."""
        self.scores[position.canonical_key()] = score

    def lookup(self, key: int) -> Optional[int]:
        return self.scores.get(key)

    def __len__(self) -> int:
        return len(self.scores)
