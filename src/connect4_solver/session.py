"""
Interactive game against the solver.

The user submits moves as digits, appended to everything accepted so far. The
full game is replayed from the empty board on every turn, then the computer
answers with one move.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from connect4_solver.driver import Driver, TurnResult
from connect4_solver.errors import Connect4Error, GameAlreadyWon, InvalidMoveSequence
from connect4_solver.game.position import BOARD_SIZE, Position

logger = logging.getLogger(__name__)


class Outcome(Enum):
    CONTINUE = "continue"
    USER_WINS = "user_wins"
    COMPUTER_WINS = "computer_wins"
    DRAW = "draw"


@dataclass
class TurnReport:
    """
    What happened during one submit().

    Attributes:
        user_sequence: Accepted game so far including the user's new moves
        turn: Driver evaluation, None when the user won before the computer moved
        computer_move: One-indexed column the computer played, if any
        outcome: Game state after this turn
        board: Board after this turn (see Position.to_array)
    """
    user_sequence: str
    turn: Optional[TurnResult]
    computer_move: Optional[int]
    outcome: Outcome
    board: np.ndarray


class GameSession:
    """One interactive game. `line` holds every accepted move, user and computer."""

    def __init__(self, driver: Driver):
        self.driver = driver
        self.line = ""
        self.outcome = Outcome.CONTINUE

    @property
    def finished(self) -> bool:
        return self.outcome is not Outcome.CONTINUE

    def submit(self, user_line: str) -> TurnReport:
        """
        Apply the user's moves and answer with the computer's move.

        Args:
            user_line: Digits of the user's new moves (1-indexed columns)

        Returns:
            TurnReport for this turn

        Raises:
            InvalidMoveSequence: a move is out of range or names a full column;
                the session is left unchanged
            Connect4Error: the game is already over
        """
        if self.finished:
            raise Connect4Error(f"Game is over ({self.outcome.value})")

        new_line = self.line + user_line
        try:
            position = Position.from_sequence(new_line)
        except GameAlreadyWon as e:
            logger.info("User completed four in column %d", e.column)
            self.line = new_line
            self.outcome = Outcome.USER_WINS
            winning = Position()
            winning.play(new_line)
            winning.play_col(e.column - 1)
            return TurnReport(new_line, None, None, self.outcome, winning.to_array())

        self.line = new_line
        turn = self.driver.evaluate(position)

        if turn.chosen_column is None:
            self.outcome = Outcome.DRAW
            return TurnReport(new_line, turn, None, self.outcome, position.to_array())

        position.play_col(turn.chosen_column - 1)
        self.line += str(turn.chosen_column)

        if turn.winning:
            self.outcome = Outcome.COMPUTER_WINS
        else:
            # The accepted line must still replay from scratch
            replayed = Position()
            if replayed.play(self.line) != len(self.line):
                raise InvalidMoveSequence(replayed.nb_moves() + 1, self.line)
            if position.nb_moves() == BOARD_SIZE:
                self.outcome = Outcome.DRAW

        return TurnReport(new_line, turn, turn.chosen_column, self.outcome, position.to_array())
