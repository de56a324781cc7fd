import numpy as np

from connect4_solver.errors import GameAlreadyWon, InvalidMoveSequence


WIDTH = 7
HEIGHT = 6
BOARD_SIZE = WIDTH * HEIGHT

MIN_SCORE = -(BOARD_SIZE // 2) + 3
MAX_SCORE = (BOARD_SIZE + 1) // 2 - 3

# Each column uses HEIGHT + 1 bits; the top bit is a sentinel that stays empty
COLUMN_BITS = HEIGHT + 1
COLUMN_CHUNK = (1 << COLUMN_BITS) - 1


def _bottom_mask() -> int:
    mask = 0
    for col in range(WIDTH):
        mask |= 1 << (col * COLUMN_BITS)
    return mask


BOTTOM_MASK = _bottom_mask()
BOARD_MASK = BOTTOM_MASK * ((1 << HEIGHT) - 1)


def popcount(bits: int) -> int:
    return bin(bits).count("1")


def winning_cells(position: int, mask: int) -> int:
    """
    Empty cells that would complete four in a row for the stones in `position`.

    Shifts by 1 walk a column, by HEIGHT + 1 walk a row, by HEIGHT and
    HEIGHT + 2 walk the two diagonals. Left shifts can run past the board;
    the final mask drops those bits along with occupied cells.

    Args:
        position: Bitmask of one player's stones
        mask: Bitmask of all occupied cells

    Returns:
        Bitmask of empty cells completing an alignment
    """
    # vertical
    r = (position << 1) & (position << 2) & (position << 3)

    for step in (HEIGHT + 1, HEIGHT, HEIGHT + 2):
        p = (position << step) & (position << 2 * step)
        r |= p & (position << 3 * step)
        r |= p & (position >> step)
        p = (position >> step) & (position >> 2 * step)
        r |= p & (position << step)
        r |= p & (position >> 3 * step)

    return r & (BOARD_MASK ^ mask)


class Position:
    """
    Connect Four position (7 columns x 6 rows) encoded as two bitboards.

    Bit `col * (HEIGHT + 1) + row` is the cell at column `col`, `row` rows up
    from the bottom.

    Attributes:
        current_position: Stones of the player to move
        mask: All occupied cells
        moves: Number of stones played so far (ply)

    Moves passed as ints to play_col/is_winning_move are 0-indexed columns;
    move sequences are strings of 1-indexed column digits.
    """

    __slots__ = ("current_position", "mask", "moves")

    def __init__(self):
        self.current_position = 0
        self.mask = 0
        self.moves = 0

    @classmethod
    def from_sequence(cls, sequence: str) -> "Position":
        """
        Build a position by replaying a move sequence from the empty board.

        Raises:
            GameAlreadyWon: a move in the sequence completes four in a row
            InvalidMoveSequence: a move is out of range or names a full column
        """
        position = cls()
        played = position.play(sequence)
        if played != len(sequence):
            col = ord(sequence[played]) - ord("1")
            if position.is_winning_move(col):
                raise GameAlreadyWon(played + 1, sequence, col + 1)
            raise InvalidMoveSequence(played + 1, sequence)
        return position

    def copy(self) -> "Position":
        position = Position.__new__(Position)
        position.current_position = self.current_position
        position.mask = self.mask
        position.moves = self.moves
        return position

    def __eq__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.current_position == other.current_position and self.mask == other.mask

    def __hash__(self) -> int:
        return hash((self.current_position, self.mask))

    def __repr__(self) -> str:
        return f"Position(moves={self.moves}, key={self.key()})"

    # ---- Column masks ----

    @staticmethod
    def top_mask_col(col: int) -> int:
        return 1 << (HEIGHT - 1 + col * COLUMN_BITS)

    @staticmethod
    def bottom_mask_col(col: int) -> int:
        return 1 << (col * COLUMN_BITS)

    @staticmethod
    def column_mask(col: int) -> int:
        return ((1 << HEIGHT) - 1) << (col * COLUMN_BITS)

    # ---- Playing moves ----

    def can_play(self, col: int) -> bool:
        return (self.mask & self.top_mask_col(col)) == 0

    def play_move(self, move: int):
        """Play a move given as a single-bit mask (a cell returned by possible())."""
        self.current_position ^= self.mask
        self.mask |= move
        self.moves += 1

    def play_col(self, col: int):
        """
        Drop a stone for the player to move in a 0-indexed column.

        Raises:
            ValueError: the column is full
        """
        if not self.can_play(col):
            raise ValueError(f"Column {col} is full")
        self.play_move((self.mask + self.bottom_mask_col(col)) & self.column_mask(col))

    def play(self, sequence: str) -> int:
        """
        Play a sequence of 1-indexed column digits.

        Stops before the first character that is not a column digit, names a
        full column, or would complete four in a row (the game would be over,
        so any following move is meaningless).

        Args:
            sequence: Moves such as "4453"

        Returns:
            Number of moves actually played
        """
        for i, char in enumerate(sequence):
            col = ord(char) - ord("1")
            if col < 0 or col >= WIDTH or not self.can_play(col) or self.is_winning_move(col):
                return i
            self.play_col(col)
        return len(sequence)

    # ---- Move analysis ----

    def possible(self) -> int:
        """Cells where a stone can be dropped, one per non-full column."""
        return (self.mask + BOTTOM_MASK) & BOARD_MASK

    def winning_position(self) -> int:
        return winning_cells(self.current_position, self.mask)

    def opponent_winning_position(self) -> int:
        return winning_cells(self.current_position ^ self.mask, self.mask)

    def can_win_next(self) -> bool:
        return bool(self.winning_position() & self.possible())

    def is_winning_move(self, col: int) -> bool:
        """True if dropping a stone in `col` completes four for the player to move."""
        if col < 0 or col >= WIDTH:
            return False
        return bool(self.winning_position() & self.possible() & self.column_mask(col))

    def non_losing_moves(self) -> int:
        """
        Playable cells that do not give the opponent an immediate win.

        Returns 0 when every move loses: the opponent has two immediate
        threats, or the only block lets the opponent win right above it.
        Does not look for the mover's own immediate wins.
        """
        possible_mask = self.possible()
        opponent_win = self.opponent_winning_position()
        forced_moves = possible_mask & opponent_win
        if forced_moves:
            if forced_moves & (forced_moves - 1):
                return 0
            possible_mask = forced_moves
        # never play directly below an opponent winning cell
        return possible_mask & ~(opponent_win >> 1)

    def possible_non_losing_moves(self) -> int:
        """
        Like non_losing_moves(), but falls back to every playable cell when all
        moves lose, so callers always get the moves that still have to be
        searched to size the loss.
        """
        moves = self.non_losing_moves()
        if moves == 0:
            return self.possible()
        return moves

    def move_score(self, move: int) -> int:
        """Number of open winning cells the mover keeps after playing `move`."""
        return popcount(winning_cells(self.current_position | move, self.mask))

    def nb_moves(self) -> int:
        return self.moves

    # ---- Keys ----

    def key(self) -> int:
        """Unique encoding: mover stones plus one extra bit on top of each column."""
        return self.current_position + self.mask

    def mirror_key(self) -> int:
        """key() of the position reflected left to right."""
        key = self.key()
        mirrored = 0
        for col in range(WIDTH):
            chunk = (key >> (col * COLUMN_BITS)) & COLUMN_CHUNK
            mirrored |= chunk << ((WIDTH - 1 - col) * COLUMN_BITS)
        return mirrored

    def canonical_key(self) -> int:
        """Key shared by a position and its mirror image."""
        return min(self.key(), self.mirror_key())

    # ---- Board views ----

    def to_array(self) -> np.ndarray:
        """
        Board as a (HEIGHT, WIDTH) int8 array.

        Row 0 is the top row. First player stones are 1, second player
        stones are -1, empty cells 0.
        """
        if self.moves % 2 == 0:
            first = self.current_position
        else:
            first = self.current_position ^ self.mask

        grid = np.zeros((HEIGHT, WIDTH), dtype=np.int8)
        for col in range(WIDTH):
            for row in range(HEIGHT):
                bit = 1 << (col * COLUMN_BITS + row)
                if self.mask & bit:
                    grid[HEIGHT - 1 - row, col] = 1 if first & bit else -1
        return grid
