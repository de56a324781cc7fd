"""
Computer move selection.

For each column the driver either takes an immediate win, solves the
position after the move, or marks the column as not worth playing. The
computer plays uniformly at random among the best scoring columns.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from connect4_solver.engine.solver import Solver, win_score
from connect4_solver.game.position import WIDTH, Position

logger = logging.getLogger(__name__)


class CandidateStatus(Enum):
    SCORED = "scored"
    WINNING = "winning"
    NOT_POSSIBLE = "not_possible"


@dataclass
class CandidateResult:
    """Evaluation of one column (1-indexed)."""
    column: int
    status: CandidateStatus
    score: Optional[int] = None
    time_us: Optional[int] = None


@dataclass
class TurnResult:
    """Result of evaluating every column for one computer turn."""
    candidates: list[CandidateResult] = field(default_factory=list)
    best_score: Optional[int] = None
    best_columns: list[int] = field(default_factory=list)
    chosen_column: Optional[int] = None
    winning: bool = False


class Driver:
    """
    Picks the computer's move.

    Columns are examined from the rightmost to the leftmost. The solver
    statistics are reset before each column; its transposition table is
    shared across columns and turns.
    """

    def __init__(
        self,
        solver: Solver,
        rng: Optional[np.random.Generator] = None,
        weak: bool = False
    ):
        """
        Args:
            solver: Solver used to score each column
            rng: Random generator for tie-breaks (seed it for reproducible play)
            weak: Score columns as win/draw/loss only
        """
        self.solver = solver
        self.rng = rng if rng is not None else np.random.default_rng()
        self.weak = weak

    def evaluate(self, position: Position) -> TurnResult:
        """
        Evaluate every column and choose a move.

        Args:
            position: Position with the computer to move (not modified)

        Returns:
            TurnResult; chosen_column is None when no column is playable
        """
        result = TurnResult()
        candidates = position.possible_non_losing_moves()

        for col in reversed(range(WIDTH)):
            self.solver.reset()

            if position.is_winning_move(col):
                result.candidates.append(CandidateResult(col + 1, CandidateStatus.WINNING))
                result.best_score = 1 if self.weak else win_score(position)
                result.best_columns = [col + 1]
                result.winning = True
                break

            if candidates & Position.column_mask(col):
                child = position.copy()
                child.play_col(col)
                start = time.perf_counter()
                score = -self.solver.solve(child, self.weak)
                elapsed_us = int((time.perf_counter() - start) * 1_000_000)
                result.candidates.append(
                    CandidateResult(col + 1, CandidateStatus.SCORED, score, elapsed_us)
                )

                if result.best_score is None or score > result.best_score:
                    result.best_score = score
                    result.best_columns = [col + 1]
                elif score == result.best_score:
                    result.best_columns.append(col + 1)
            else:
                result.candidates.append(CandidateResult(col + 1, CandidateStatus.NOT_POSSIBLE))

        if result.best_columns:
            result.chosen_column = int(self.rng.choice(result.best_columns))
            logger.debug(
                "Best score %s in columns %s, chose %d",
                result.best_score, result.best_columns, result.chosen_column,
            )
        else:
            logger.debug("No playable column")

        return result
