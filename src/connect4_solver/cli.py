"""
Command-line entry point.

Interactive mode (default): each input line holds the user's new moves; the
program prints its evaluation of every column, its own move and the board.

    User Playing <moves so far>
    <moves so far>.<column>, s: <score>, t: <microseconds>
    <moves so far>.<column>, s: not possible
    ...
    Computer Playing <column>

Analysis mode (--analyze): one position per input line, one result line each.
"""

import argparse
import logging
import sys
from typing import Optional, TextIO

import numpy as np
from rich.console import Console

from connect4_solver.analysis import run_analysis
from connect4_solver.config import get_solver_config
from connect4_solver.driver import CandidateStatus, Driver
from connect4_solver.engine.solver import Solver
from connect4_solver.errors import InvalidMoveSequence
from connect4_solver.game.rendering import board_text
from connect4_solver.logging_setup import setup_logging
from connect4_solver.session import GameSession, Outcome, TurnReport

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = get_solver_config()
    parser = argparse.ArgumentParser(
        prog="connect4-solver",
        description="Exact Connect Four solver and computer opponent",
    )
    parser.add_argument('-w', '--weak', action='store_true', default=None,
                        help='Only compute win/draw/loss, not the distance to the end')
    parser.add_argument('-b', '--book', default=None,
                        help=f'Opening book path (default: {defaults.opening_book}; not loaded)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for the tie-break random generator')
    parser.add_argument('--analyze', action='store_true',
                        help='Score one position per input line instead of playing')
    parser.add_argument('--analyze-columns', action='store_true',
                        help='Like --analyze, but print the score of every column')
    parser.add_argument('--input', default=None,
                        help='Read input lines from this file instead of stdin')
    parser.add_argument('--tt-log2-size', type=int, default=None,
                        help=f'Transposition table size as a power of 2 (default: {defaults.tt_log2_size})')
    parser.add_argument('--log-level', default=None,
                        help='Logging level (DEBUG, INFO, WARNING, ...)')
    return parser


def print_turn(report: TurnReport, out: TextIO):
    """Print the per-column lines of one computer turn."""
    if report.turn is None:
        return
    for candidate in report.turn.candidates:
        prefix = f"{report.user_sequence}.{candidate.column}, s: "
        if candidate.status is CandidateStatus.WINNING:
            print(prefix + "Winning", file=out)
        elif candidate.status is CandidateStatus.SCORED:
            print(prefix + f"{candidate.score}, t: {candidate.time_us}", file=out)
        else:
            print(prefix + "not possible", file=out)


def play_interactive(session: GameSession, source: TextIO, out: TextIO) -> int:
    """
    Run the interactive loop until a game result or end of input.

    Returns:
        Process exit code
    """
    console = Console(file=out, highlight=False)

    for raw in source:
        user_line = raw.strip()
        print(f"User Playing {session.line + user_line}", file=out)

        try:
            report = session.submit(user_line)
        except InvalidMoveSequence as e:
            print(f'User Invalid move {e.ply} "{e.sequence}"', file=out)
            continue

        print_turn(report, out)

        if report.outcome is Outcome.USER_WINS:
            print("Winning move!", file=out)
            print("User wins!", file=out)
        elif report.computer_move is not None:
            print(f"Computer Playing {report.computer_move}", file=out)
            if report.outcome is Outcome.COMPUTER_WINS:
                print("Winning move!", file=out)

        if report.outcome is Outcome.DRAW:
            print("Draw!", file=out)

        console.print(board_text(report.board))

        if session.finished:
            return 0

    return 0


def main(argv: Optional[list[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)

    setup_logging(args.log_level)
    if unknown:
        logger.warning("Ignoring unknown arguments: %s", " ".join(unknown))

    config = get_solver_config().with_overrides(
        weak=args.weak,
        opening_book=args.book,
        seed=args.seed,
        tt_log2_size=args.tt_log2_size,
    )
    logger.info("Opening book %s not loaded (no book format is supported)", config.opening_book)

    source = stdin if stdin is not None else sys.stdin
    out = stdout if stdout is not None else sys.stdout
    solver = Solver(tt_log2_size=config.tt_log2_size)

    if args.analyze or args.analyze_columns:
        if args.input:
            with open(args.input) as f:
                total = sum(1 for _ in f)
            with open(args.input) as f:
                count = run_analysis(f, out, solver, config.weak, args.analyze_columns,
                                     progress=True, total=total)
        else:
            count = run_analysis(source, out, solver, config.weak, args.analyze_columns)
        logger.info("Analyzed %d positions", count)
        return 0

    driver = Driver(solver, rng=np.random.default_rng(config.seed), weak=config.weak)
    session = GameSession(driver)

    if args.input:
        with open(args.input) as f:
            return play_interactive(session, f, out)
    return play_interactive(session, source, out)


if __name__ == "__main__":
    sys.exit(main())
