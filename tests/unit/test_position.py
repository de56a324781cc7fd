"""
Unit tests for the bitboard position.

Tests verify:
1. Sequence replay stops at illegal and game-ending moves
2. Keys are unique and mirror-symmetric
3. Move generation filters moves that lose immediately
4. Board array view matches the bitboards
"""

import numpy as np
import pytest

from connect4_solver.errors import GameAlreadyWon, InvalidMoveSequence
from connect4_solver.game.position import (
    BOARD_SIZE,
    HEIGHT,
    MAX_SCORE,
    MIN_SCORE,
    WIDTH,
    Position,
    popcount,
)


def columns(bits: int) -> set[int]:
    """One-indexed columns that have a bit set in `bits`."""
    return {col + 1 for col in range(WIDTH) if bits & Position.column_mask(col)}


def mirror(sequence: str) -> str:
    return "".join(str(WIDTH + 1 - int(c)) for c in sequence)


class TestConstants:
    def test_geometry(self):
        assert WIDTH == 7
        assert HEIGHT == 6
        assert BOARD_SIZE == 42

    def test_score_range(self):
        assert MIN_SCORE == -18
        assert MAX_SCORE == 18


class TestPlay:
    """Test sequence replay."""

    def test_empty_sequence(self):
        position = Position()
        assert position.play("") == 0
        assert position.nb_moves() == 0

    def test_full_legal_sequence(self):
        position = Position()
        assert position.play("1234567") == 7
        assert position.nb_moves() == 7

    @pytest.mark.parametrize("sequence, expected", [
        ("0", 0),
        ("8", 0),
        ("12a", 2),
        ("4444444", 6),
    ])
    def test_stops_at_invalid_move(self, sequence, expected):
        position = Position()
        assert position.play(sequence) == expected
        assert position.nb_moves() == expected

    def test_stops_before_winning_move(self):
        """The fourth stone in a row ends the game and is not applied."""
        position = Position()
        assert position.play("1122334") == 6
        assert position.nb_moves() == 6
        assert position.is_winning_move(3)

    def test_moves_after_win_are_ignored(self):
        position = Position()
        assert position.play("112233445") == 6

    def test_full_column(self):
        position = Position()
        assert position.play("444444") == 6
        assert not position.can_play(3)
        for col in (0, 1, 2, 4, 5, 6):
            assert position.can_play(col)

    def test_play_col_full_column_raises(self):
        position = Position()
        position.play("444444")
        with pytest.raises(ValueError):
            position.play_col(3)

    def test_play_move_matches_play_col(self):
        by_col = Position()
        by_col.play_col(3)

        by_move = Position()
        by_move.play_move(by_move.possible() & Position.column_mask(3))

        assert by_col == by_move


class TestFromSequence:
    def test_valid(self):
        position = Position.from_sequence("4453")
        assert position.nb_moves() == 4

    def test_invalid_digit(self):
        with pytest.raises(InvalidMoveSequence) as exc_info:
            Position.from_sequence("12a")
        assert exc_info.value.ply == 3
        assert exc_info.value.sequence == "12a"
        assert str(exc_info.value) == 'Invalid move 3 "12a"'

    def test_full_column(self):
        with pytest.raises(InvalidMoveSequence) as exc_info:
            Position.from_sequence("4444444")
        assert exc_info.value.ply == 7

    def test_winning_move(self):
        with pytest.raises(GameAlreadyWon) as exc_info:
            Position.from_sequence("1122334")
        assert exc_info.value.ply == 7
        assert exc_info.value.column == 4


class TestKeys:
    """Test position keys."""

    def test_known_keys(self):
        assert Position.from_sequence("44").key() == 8388608
        assert Position.from_sequence("112233").key() == 66052

    def test_keys_differ(self):
        keys = {Position.from_sequence(s).key() for s in ["", "4", "44", "43", "34"]}
        assert len(keys) == 5

    def test_transposition_same_key(self):
        """Same stones reached through different move orders."""
        a = Position.from_sequence("4352")
        b = Position.from_sequence("5342")
        assert a.key() == b.key()
        assert a == b
        assert hash(a) == hash(b)

    def test_mirror_key(self):
        position = Position.from_sequence("112233")
        mirrored = Position.from_sequence(mirror("112233"))
        assert position.mirror_key() == mirrored.key()
        assert mirrored.mirror_key() == position.key()

    def test_canonical_key_shared_by_mirrors(self):
        sequence = "7422341735647741166133573473242566"
        a = Position.from_sequence(sequence)
        b = Position.from_sequence(mirror(sequence))
        assert a.canonical_key() == b.canonical_key()
        assert a.canonical_key() == min(a.key(), a.mirror_key())

    def test_symmetric_position_mirror_key(self):
        position = Position.from_sequence("44")
        assert position.mirror_key() == position.key()


class TestMoveAnalysis:
    """Test win detection and move generation."""

    def test_horizontal_win(self):
        position = Position.from_sequence("112233")
        assert position.can_win_next()
        assert position.is_winning_move(3)
        assert not position.is_winning_move(4)

    def test_vertical_win(self):
        position = Position.from_sequence("121212")
        assert position.is_winning_move(0)
        assert not position.is_winning_move(1)

    def test_diagonal_win(self):
        # First player holds (0,0), (1,1), (2,2); (3,3) is reachable next
        position = Position.from_sequence("1223433464")
        assert position.is_winning_move(3)

    def test_anti_diagonal_win(self):
        position = Position.from_sequence(mirror("1223433464"))
        assert position.is_winning_move(3)

    def test_is_winning_move_has_no_side_effects(self):
        position = Position.from_sequence("112233")
        before = (position.current_position, position.mask, position.moves)
        position.is_winning_move(3)
        assert (position.current_position, position.mask, position.moves) == before

    def test_is_winning_move_out_of_range(self):
        position = Position.from_sequence("112233")
        assert not position.is_winning_move(-1)
        assert not position.is_winning_move(WIDTH)

    def test_empty_board_moves(self):
        position = Position()
        assert popcount(position.possible()) == WIDTH
        assert not position.can_win_next()
        assert position.non_losing_moves() == position.possible()

    def test_non_losing_moves_subset(self):
        for sequence in ["", "4", "112233", "7422341735647741166133573473242566",
                         "31646455662571314673736735"]:
            position = Position()
            position.play(sequence)
            non_losing = position.non_losing_moves()
            assert non_losing & ~position.possible() == 0
            assert position.possible_non_losing_moves() & ~position.possible() == 0

    def test_forced_block(self):
        """Opponent threatens column 4: blocking it is the only non-losing move."""
        position = Position.from_sequence("1122331")
        assert columns(position.non_losing_moves()) == {4}

    def test_non_losing_moves_known_position(self):
        position = Position.from_sequence("7422341735647741166133573473242566")
        assert columns(position.non_losing_moves()) == {1, 2, 6}

    def test_every_move_loses(self):
        position = Position.from_sequence("31646455662571314673736735")
        assert position.non_losing_moves() == 0
        assert position.possible_non_losing_moves() == position.possible()
        assert columns(position.possible()) == {1, 2, 3, 4, 5, 7}

    def test_move_score(self):
        position = Position()
        move = position.possible() & Position.column_mask(3)
        assert position.move_score(move) == 0

        # Third stone in a row opens both ends
        position = Position.from_sequence("2233")
        move = position.possible() & Position.column_mask(3)
        assert position.move_score(move) == 2

    def test_popcount(self):
        assert popcount(0) == 0
        assert popcount(0b1011) == 3


class TestCopy:
    def test_copy_is_independent(self):
        position = Position.from_sequence("44")
        child = position.copy()
        child.play_col(2)
        assert position.nb_moves() == 2
        assert child.nb_moves() == 3
        assert position != child


class TestToArray:
    def test_shape_and_dtype(self):
        grid = Position().to_array()
        assert grid.shape == (HEIGHT, WIDTH)
        assert grid.dtype == np.int8
        assert not grid.any()

    def test_stones(self):
        grid = Position.from_sequence("443").to_array()
        assert grid[HEIGHT - 1, 3] == 1     # first player, bottom of column 4
        assert grid[HEIGHT - 2, 3] == -1    # second player above it
        assert grid[HEIGHT - 1, 2] == 1
        assert np.count_nonzero(grid) == 3

    def test_player_colours_stable(self):
        """Stone values do not depend on whose turn it is."""
        a = Position.from_sequence("4").to_array()
        b = Position.from_sequence("43").to_array()
        assert a[HEIGHT - 1, 3] == b[HEIGHT - 1, 3] == 1
