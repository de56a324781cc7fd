"""
Error types for move-sequence handling.

Position and Solver never raise for bad input: they report how far a sequence
could be replayed and leave interpretation to the caller. These exceptions are
raised one layer up (Position.from_sequence, GameSession) and are caught by the
command-line loop, which prints a diagnostic and keeps reading.
"""


class Connect4Error(Exception):
    """Base class for connect4_solver errors."""


class InvalidMoveSequence(Connect4Error):
    """
    A move sequence contains an illegal move.

    Attributes:
        ply: One-indexed position of the offending move
        sequence: The full sequence that was submitted
    """

    def __init__(self, ply: int, sequence: str):
        self.ply = ply
        self.sequence = sequence
        super().__init__(f'Invalid move {ply} "{sequence}"')


class GameAlreadyWon(Connect4Error):
    """
    A move sequence contains a move that completes four in a row.

    Not a failure: the game ended on that move, so nothing after it (and not
    the move itself) is applied to the position.

    Attributes:
        ply: One-indexed position of the winning move
        sequence: The full sequence that was submitted
        column: One-indexed column of the winning move
    """

    def __init__(self, ply: int, sequence: str, column: int):
        self.ply = ply
        self.sequence = sequence
        self.column = column
        super().__init__(f'Winning move {ply} in column {column} "{sequence}"')
