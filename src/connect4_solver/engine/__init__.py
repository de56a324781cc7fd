"""
Exact search engine for Connect Four.

This module contains the solver components:
- Transposition table for caching search bounds
- Move ordering for the alpha-beta search
- Opening book lookup contract
- Negamax solver with null-window score bisection
"""

from connect4_solver.engine.transposition_table import TranspositionTable, BoundType, TTEntry
from connect4_solver.engine.move_ordering import COLUMN_ORDER, MoveSorter, order_moves
from connect4_solver.engine.opening_book import OpeningBook, NullBook, MappingBook
from connect4_solver.engine.solver import Solver, win_score

__all__ = [
    'TranspositionTable',
    'BoundType',
    'TTEntry',
    'COLUMN_ORDER',
    'MoveSorter',
    'order_moves',
    'OpeningBook',
    'NullBook',
    'MappingBook',
    'Solver',
    'win_score',
]
