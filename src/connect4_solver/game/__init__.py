"""
Connect Four board representation and rendering.
"""

from connect4_solver.game.position import Position, WIDTH, HEIGHT, MIN_SCORE, MAX_SCORE
from connect4_solver.game.rendering import render_board, board_text

__all__ = ['Position', 'WIDTH', 'HEIGHT', 'MIN_SCORE', 'MAX_SCORE', 'render_board', 'board_text']
