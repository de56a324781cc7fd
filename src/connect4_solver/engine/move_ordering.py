"""
Move ordering for the exact solver.

Good move ordering is critical for alpha-beta pruning efficiency: the null
window probes cut off as soon as one child beats beta, so the strongest
candidate should be searched first.

Ordering priority (high to low):
1. Moves keeping the most open winning cells for the mover (Position.move_score)
2. Column position, centre first: 3, 2, 4, 1, 5, 0, 6
"""

from connect4_solver.game.position import WIDTH, Position


# Centre columns take part in more alignments
COLUMN_ORDER = [3, 2, 4, 1, 5, 0, 6]


class MoveSorter:
    """
    Small insertion-sorted container of (move, score) pairs.

    Holds at most one move per column. Entries are kept in increasing score
    order; a new entry goes after existing entries of equal score, so among
    ties the entry added last is returned first by get_next().
    """

    def __init__(self):
        self.entries: list[tuple[int, int]] = []

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, move: int, score: int):
        """
        Insert a move keeping entries sorted by score.

        Args:
            move: Single-bit move mask
            score: Ordering score (higher is searched first)
        """
        if len(self.entries) >= WIDTH:
            raise ValueError("MoveSorter holds at most one move per column")
        pos = len(self.entries)
        while pos > 0 and self.entries[pos - 1][1] > score:
            pos -= 1
        self.entries.insert(pos, (move, score))

    def get_next(self) -> int:
        """Pop the highest scoring move, or 0 when empty."""
        if not self.entries:
            return 0
        return self.entries.pop()[0]

    def reset(self):
        self.entries.clear()


def order_moves(position: Position, candidates: int) -> list[int]:
    """
    Order candidate moves for search.

    Args:
        position: Position to move from
        candidates: Bitmask of candidate cells (e.g. non_losing_moves())

    Returns:
        List of single-bit move masks, best first
    """
    sorter = MoveSorter()
    # Added from the edges inward so ties come out centre first
    for col in reversed(COLUMN_ORDER):
        move = candidates & Position.column_mask(col)
        if move:
            sorter.add(move, position.move_score(move))

    ordered = []
    move = sorter.get_next()
    while move:
        ordered.append(move)
        move = sorter.get_next()
    return ordered
