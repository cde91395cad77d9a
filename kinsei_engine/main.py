import argparse
import json
import logging
import sys

from kinsei_engine.board import Board
from kinsei_engine.config import CFG, configure_logging
from kinsei_engine.generator import create_random
from kinsei_engine.reports import generate_violation_report
from kinsei_engine.solver import brute_force_solve, logic_solve

DEFAULT_ROWS = [
    "x.o...",
    "......",
    "x.....",
    ".....x",
    "......",
    "..x...",
]
DEFAULT_SECTIONS = [
    [0, 0, 1, 1, 1, 2],
    [0, 0, 1, 1, 3, 2],
    [5, 5, 5, 6, 3, 4],
    [5, 7, 6, 6, 3, 4],
    [7, 7, 8, 8, 10, 10],
    [9, 9, 8, 8, 10, 10],
]
DEFAULT_X_PER_SECTION = [2, 2, 1, 2, 1, 2, 2, 2, 1, 1, 2]


def load_puzzle(path):
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    return data["rows"], data["sections"], data["x_per_section"]


def print_board(board: Board):
    print(board.pretty())
    print()


def main(argv=None):
    p = argparse.ArgumentParser(description="Solve or generate Kinsei binary-grid puzzles.")
    p.add_argument("--mode", choices=["logic", "brute", "random"], default="logic",
                   help="logic: propagation only; brute: backtracking; random: generate")
    p.add_argument("--puzzle", help="JSON file with rows, sections, x_per_section")
    p.add_argument("--size", type=int, default=CFG.DEFAULT_SIZE, help="Board size for --mode random")
    p.add_argument("--seed", type=int, default=None, help="Random seed for --mode random")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG")
    args = p.parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG if args.verbose > 1 else logging.INFO)
    else:
        configure_logging()

    try:
        if args.mode == "random":
            result = create_random(args.size, args.seed)
        else:
            if args.puzzle:
                rows, sections, x_per_section = load_puzzle(args.puzzle)
            else:
                rows, sections, x_per_section = DEFAULT_ROWS, DEFAULT_SECTIONS, DEFAULT_X_PER_SECTION
            solve = logic_solve if args.mode == "logic" else brute_force_solve
            result = solve(rows, sections, x_per_section)
    except (OSError, KeyError, ValueError) as e:
        p.error(str(e))

    if not result.is_solvable or result.board is None:
        print("Cannot solve!")
        if result.reason and result.reason != "Cannot solve!":
            print(result.reason)
        return 1

    print_board(result.board)
    report = generate_violation_report(result.board)
    print("VALIDATION:", "FAIL" if report.has_violation else "PASS")
    return 0


if __name__ == "__main__":
    sys.exit(main())
