"""
Board rendering for terminals.

Both renderers take a Position or a board array as returned by
Position.to_array() (row 0 on top, first player 1, second player -1).
"""

from typing import Union

import numpy as np
from rich.text import Text

from connect4_solver.game.position import WIDTH, Position


SYMBOLS = {1: "X", -1: "O", 0: "."}
STYLES = {1: "bold red", -1: "bold yellow", 0: "dim"}


def _grid(board: Union[Position, np.ndarray]) -> np.ndarray:
    if isinstance(board, Position):
        return board.to_array()
    return board


def render_board(board: Union[Position, np.ndarray]) -> str:
    """
    Plain text board, top row first, with 1-indexed column numbers below.

    First player stones are X, second player stones are O.
    """
    lines = []
    for row in _grid(board):
        lines.append("| " + " ".join(SYMBOLS[int(cell)] for cell in row) + " |")
    lines.append("  " + "-" * (2 * WIDTH - 1))
    lines.append("  " + " ".join(str(col + 1) for col in range(WIDTH)))
    return "\n".join(lines)


def board_text(board: Union[Position, np.ndarray]) -> Text:
    """Coloured board for a rich Console."""
    text = Text()
    for row in _grid(board):
        text.append("| ")
        for col, cell in enumerate(row):
            cell = int(cell)
            text.append(SYMBOLS[cell], style=STYLES[cell])
            if col < WIDTH - 1:
                text.append(" ")
        text.append(" |\n")
    text.append("  " + "-" * (2 * WIDTH - 1) + "\n")
    text.append("  " + " ".join(str(col + 1) for col in range(WIDTH)))
    return text
