"""
Unit tests for the transposition table.
"""

import pytest

from connect4_solver.engine.transposition_table import BoundType, TranspositionTable, TTEntry
from connect4_solver.game.position import Position


class TestTranspositionTable:
    """Test transposition table functionality."""

    def test_store_and_probe(self):
        tt = TranspositionTable(log2_size=10)
        key = Position.from_sequence("4453").canonical_key()

        tt.put(key, BoundType.LOWER, 3)
        entry = tt.get(key)

        assert entry == TTEntry(key, BoundType.LOWER, 3)
        assert entry.bound is BoundType.LOWER
        assert entry.value == 3

    def test_missing_key(self):
        tt = TranspositionTable(log2_size=10)
        assert tt.get(12345) is None
        assert tt.get_stats()['misses'] == 1

    def test_size_power_of_two(self):
        tt = TranspositionTable(log2_size=12)
        assert tt.num_entries == 4096
        assert tt.index_mask == 4095

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            TranspositionTable(log2_size=0)

    def test_full_key_verified(self):
        """A slot holding another key is a miss, never a false hit."""
        tt = TranspositionTable(log2_size=1)
        keys = [Position.from_sequence(s).key() for s in ["1", "2", "3", "4", "5"]]

        for i, key in enumerate(keys):
            tt.put(key, BoundType.UPPER, i)

        found = 0
        for i, key in enumerate(keys):
            entry = tt.get(key)
            if entry is not None:
                assert entry.key == key
                assert entry.value == i
                found += 1

        # Two slots, five keys: at most two survive
        assert found <= 2
        assert tt.get_stats()['overwrites'] >= 3

    def test_overwrite_same_key(self):
        tt = TranspositionTable(log2_size=4)
        tt.put(42, BoundType.LOWER, 1)
        tt.put(42, BoundType.UPPER, -2)

        assert tt.get(42) == TTEntry(42, BoundType.UPPER, -2)
        assert tt.get_stats()['overwrites'] == 0

    def test_reset(self):
        tt = TranspositionTable(log2_size=4)
        tt.put(42, BoundType.LOWER, 1)
        tt.reset()

        assert tt.get_fill_rate() == 0.0
        assert tt.get(42) is None

    def test_stats(self):
        tt = TranspositionTable(log2_size=4)
        tt.put(7, BoundType.LOWER, 1)
        tt.get(7)
        tt.get(8)

        stats = tt.get_stats()
        assert stats['hits'] == 1
        assert stats['misses'] == 1
        assert stats['hit_rate'] == 0.5
        assert stats['stores'] == 1
        assert stats['size_entries'] == 16
        assert tt.get_fill_rate() == pytest.approx(100.0 / 16)
