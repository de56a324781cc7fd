"""
Batch position analysis.

Reads one move sequence per line and writes one line per position:

    <sequence> <score> <nodes> <time_us>

or, in per-column mode, the score of each column (`-` for full columns):

    <sequence> <score_col1> ... <score_col7> <nodes> <time_us>

Invalid sequences (illegal move, or a move after the game was won) are
reported on the log and produce an empty output line, so output lines stay
aligned with input lines. Blank lines are echoed as empty lines.
"""

import logging
import time
from typing import Iterable, Iterator, Optional, TextIO

from tqdm import tqdm

from connect4_solver.engine.solver import Solver
from connect4_solver.errors import Connect4Error
from connect4_solver.game.position import Position

logger = logging.getLogger(__name__)


def analyze_line(sequence: str, solver: Solver, weak: bool = False, per_column: bool = False) -> str:
    """
    Solve one position and format its result line.

    Raises:
        InvalidMoveSequence, GameAlreadyWon: the sequence does not replay
    """
    position = Position.from_sequence(sequence)

    solver.reset()
    start = time.perf_counter()
    if per_column:
        scores = solver.analyze(position, weak)
        result = " ".join("-" if score is None else str(score) for score in scores)
    else:
        result = str(solver.solve(position, weak))
    elapsed_us = int((time.perf_counter() - start) * 1_000_000)

    return f"{sequence} {result} {solver.node_count} {elapsed_us}"


def analyze_lines(
    lines: Iterable[str],
    solver: Solver,
    weak: bool = False,
    per_column: bool = False
) -> Iterator[str]:
    """Yield one result line per input line (empty for invalid input)."""
    for line_number, line in enumerate(lines, start=1):
        sequence = line.strip()
        if not sequence:
            yield ""
            continue
        try:
            yield analyze_line(sequence, solver, weak, per_column)
        except Connect4Error as e:
            logger.error("Line %d: %s", line_number, e)
            yield ""


def run_analysis(
    source: TextIO,
    out: TextIO,
    solver: Solver,
    weak: bool = False,
    per_column: bool = False,
    progress: bool = False,
    total: Optional[int] = None
) -> int:
    """
    Analyze every line of `source`, writing results to `out`.

    Args:
        progress: Show a tqdm progress bar (on stderr)
        total: Number of lines, for the progress bar

    Returns:
        Number of lines processed
    """
    lines: Iterable[str] = source
    if progress:
        lines = tqdm(source, total=total, desc="Solving positions", ncols=80)

    count = 0
    for result in analyze_lines(lines, solver, weak, per_column):
        out.write(result + "\n")
        out.flush()
        count += 1
    return count
