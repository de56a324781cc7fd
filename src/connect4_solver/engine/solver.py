"""
Exact Connect Four solver.

Negamax with alpha-beta pruning, searched to the end of the game (no depth
limit, no evaluation function). The score of a position is read off the
number of moves left when the game is decided.

Score convention, from the point of view of the player to move:
- 0: draw with best play
- positive: forced win; winning with your k-th stone (counting from the
  start of the game) scores (WIDTH * HEIGHT + 1) // 2 + 1 - k, so a sooner
  win has a larger magnitude
- negative: forced loss, same scale with the sign flipped
- weak mode collapses the score to -1, 0 or 1

Algorithm overview:

    def solve(P):
        lo, hi = score bracket for P
        while lo < hi:
            med = midpoint of [lo, hi], pulled toward 0
            r = negamax(P, med, med + 1)    # null window: is score > med?
            if r <= med: hi = r
            else: lo = r
        return lo

Each null-window probe prunes much harder than a single wide-window search,
and the transposition table carries bounds from one probe to the next.
"""

import logging
import time
from typing import Optional

from connect4_solver.engine.move_ordering import order_moves
from connect4_solver.engine.opening_book import OpeningBook
from connect4_solver.engine.transposition_table import BoundType, TranspositionTable
from connect4_solver.game.position import BOARD_SIZE, WIDTH, Position

logger = logging.getLogger(__name__)


def win_score(position: Position) -> int:
    """Score of the mover winning with their next stone."""
    return (BOARD_SIZE + 1 - position.nb_moves()) // 2


def _sign(score: int) -> int:
    return (score > 0) - (score < 0)


class Solver:
    """
    Exact solver with a persistent transposition table.

    The table survives between solve() calls, so solving sibling positions
    one after the other reuses work. Call clear_table() for isolated runs.
    """

    def __init__(self, tt_log2_size: int = 20, book: Optional[OpeningBook] = None):
        """
        Initialize solver.

        Args:
            tt_log2_size: Transposition table holds 2 ** tt_log2_size entries
            book: Optional opening book consulted at every searched node
        """
        self.tt = TranspositionTable(log2_size=tt_log2_size)
        self.book = book
        self.node_count = 0
        self.last_time_ms = 0.0

    def reset(self):
        """Reset per-call statistics. The transposition table is kept."""
        self.node_count = 0
        self.last_time_ms = 0.0

    def clear_table(self):
        self.tt.reset()

    def solve(self, position: Position, weak: bool = False) -> int:
        """
        Compute the exact score of a position.

        The position must not be already won (the previous move must not have
        completed four in a row). It is not modified.

        Args:
            position: Position to solve
            weak: Only compute win/draw/loss

        Returns:
            Score from the mover's perspective (-1/0/1 in weak mode)
        """
        start = time.perf_counter()
        moves = position.nb_moves()

        if moves >= BOARD_SIZE:
            return 0
        if position.can_win_next():
            return 1 if weak else win_score(position)

        if weak:
            lo, hi = -1, 1
        else:
            lo = -((BOARD_SIZE - moves) // 2)
            hi = (BOARD_SIZE + 1 - moves) // 2

        # Null-window bisection over [lo, hi]
        while lo < hi:
            med = lo + (hi - lo) // 2
            # Probe closer to 0 first: near-zero windows resolve fastest
            if med <= 0 and int(lo / 2) < med:
                med = int(lo / 2)
            elif med >= 0 and int(hi / 2) > med:
                med = int(hi / 2)

            r = self.negamax(position, med, med + 1)
            if r <= med:
                hi = r
            else:
                lo = r

        self.last_time_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "Solved ply %d: score=%d nodes=%d time=%.1fms",
            moves, lo, self.node_count, self.last_time_ms,
        )

        return _sign(lo) if weak else lo

    def negamax(self, position: Position, alpha: int, beta: int) -> int:
        """
        Alpha-beta negamax search.

        Returns the exact score when it lies strictly inside (alpha, beta),
        an upper bound <= alpha when every move fails low, and a lower bound
        >= beta on cutoff.

        Args:
            position: Position to search (not modified)
            alpha: Lower bound of the window
            beta: Upper bound of the window (alpha < beta)

        Returns:
            Score or bound from the mover's perspective
        """
        self.node_count += 1
        moves = position.nb_moves()

        if moves >= BOARD_SIZE:
            return 0
        if position.can_win_next():
            return win_score(position)

        candidates = position.non_losing_moves()
        if candidates == 0:
            # Every move hands the opponent an immediate win
            best = None
            for col in range(WIDTH):
                if position.can_play(col):
                    child = position.copy()
                    child.play_col(col)
                    score = -self.negamax(child, -beta, -alpha)
                    if best is None or score > best:
                        best = score
            return best

        if moves >= BOARD_SIZE - 2:
            # Both remaining stones are forced and nobody can win with them
            return 0

        # The opponent cannot win with their next stone
        lower = -((BOARD_SIZE - 2 - moves) // 2)
        if alpha < lower:
            alpha = lower
            if alpha >= beta:
                return alpha

        # The mover cannot win with their next stone
        upper = (BOARD_SIZE - 1 - moves) // 2

        key = position.canonical_key()
        entry = self.tt.get(key)
        if entry is not None:
            if entry.bound is BoundType.LOWER:
                if alpha < entry.value:
                    alpha = entry.value
                    if alpha >= beta:
                        return alpha
            elif entry.value < upper:
                upper = entry.value

        if self.book is not None:
            book_score = self.book.lookup(key)
            if book_score is not None:
                return book_score

        if beta > upper:
            beta = upper
            if alpha >= beta:
                return beta

        for move in order_moves(position, candidates):
            child = position.copy()
            child.play_move(move)
            score = -self.negamax(child, -beta, -alpha)

            if score >= beta:
                self.tt.put(key, BoundType.LOWER, score)
                return score
            if score > alpha:
                alpha = score

        self.tt.put(key, BoundType.UPPER, alpha)
        return alpha

    def analyze(self, position: Position, weak: bool = False) -> list[Optional[int]]:
        """
        Score every column from the mover's perspective.

        Args:
            position: Position to analyze (not modified)
            weak: Only compute win/draw/loss

        Returns:
            One entry per column, None for full columns
        """
        scores: list[Optional[int]] = [None] * WIDTH
        for col in range(WIDTH):
            if not position.can_play(col):
                continue
            if position.is_winning_move(col):
                scores[col] = 1 if weak else win_score(position)
            else:
                child = position.copy()
                child.play_col(col)
                scores[col] = -self.solve(child, weak)
        return scores

    def get_stats(self) -> dict:
        """
        Get search statistics.

        Returns:
            Dictionary with node count, last solve time and table statistics
        """
        return {
            'nodes': self.node_count,
            'time_ms': self.last_time_ms,
            'tt_stats': self.tt.get_stats(),
        }
