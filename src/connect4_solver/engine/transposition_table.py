"""
Transposition table for caching exact-solver bounds.

The solver explores the same position through many move orders, and the
null-window bisection re-searches the same subtrees with shifted windows.
Storing the bound found for each position lets those repeats cut off early.

Key concepts:
- Bound types: LOWER (fail-high/beta cutoff), UPPER (fail-low, all moves searched)
- Index: splitmix64 mix of the canonical key, masked to a power-of-2 table
- Replacement policy: always overwrite the slot
- The full key is stored and compared on probe, so collisions never return
  another position's value
"""

from enum import Enum
from typing import NamedTuple, Optional


_MASK64 = 0xFFFFFFFFFFFFFFFF


class BoundType(Enum):
    """Type of bound stored in transposition table entry."""
    LOWER = 1   # Lower bound (beta cutoff, actual value >= stored value)
    UPPER = 2   # Upper bound (every move failed low, actual value <= stored value)


class TTEntry(NamedTuple):
    """
    Transposition table entry.

    Attributes:
        key: Full canonical position key
        bound: Type of bound (LOWER/UPPER)
        value: Score bound
    """
    key: int
    bound: BoundType
    value: int


def _mix64(key: int) -> int:
    """splitmix64 finalizer: spreads nearby bitboard keys over the table."""
    z = (key + 0x9E3779B97F4A7C15) & _MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    return z ^ (z >> 31)


class TranspositionTable:
    """
    Fixed-size transposition table.

    Implementation:
    - 2 ** log2_size slots, index via bit masking
    - Always-replace on store
    - Hit/miss/store/overwrite counters for search statistics
    """

    def __init__(self, log2_size: int = 20):
        """
        Initialize transposition table.

        Args:
            log2_size: Table holds 2 ** log2_size entries
        """
        if log2_size < 1:
            raise ValueError(f"log2_size must be positive, got {log2_size}")

        self.num_entries = 1 << log2_size
        self.index_mask = self.num_entries - 1
        self.table: list[Optional[TTEntry]] = [None] * self.num_entries

        # Statistics
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.overwrites = 0

    def _get_index(self, key: int) -> int:
        return _mix64(key) & self.index_mask

    def get(self, key: int) -> Optional[TTEntry]:
        """
        Look up the entry stored for `key`.

        Returns:
            The entry if the slot holds this exact key, None otherwise
        """
        entry = self.table[self._get_index(key)]
        if entry is not None and entry.key == key:
            self.hits += 1
            return entry
        self.misses += 1
        return None

    def put(self, key: int, bound: BoundType, value: int):
        """Store a bound for `key`, replacing whatever occupied the slot."""
        index = self._get_index(key)
        existing = self.table[index]
        if existing is not None and existing.key != key:
            self.overwrites += 1
        self.table[index] = TTEntry(key, bound, value)
        self.stores += 1

    def reset(self):
        """Clear all entries and statistics."""
        self.table = [None] * self.num_entries
        self._reset_stats()

    def _reset_stats(self):
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.overwrites = 0

    def get_stats(self) -> dict:
        """
        Get transposition table statistics.

        Returns:
            Dictionary with hits, misses, hit rate, stores, overwrites
        """
        total_queries = self.hits + self.misses
        hit_rate = self.hits / total_queries if total_queries > 0 else 0.0

        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
            'stores': self.stores,
            'overwrites': self.overwrites,
            'size_entries': self.num_entries,
        }

    def get_fill_rate(self) -> float:
        """Percentage of table slots occupied (0-100)."""
        occupied = sum(1 for entry in self.table if entry is not None)
        return (occupied / self.num_entries) * 100.0
