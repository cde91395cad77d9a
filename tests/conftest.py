import logging

import pytest

from kinsei_engine.board import Board


FIXTURE_ROWS = [
    "x.o...",
    "......",
    "x.....",
    ".....x",
    "......",
    "..x...",
]
FIXTURE_SECTIONS = [
    [0, 0, 1, 1, 1, 2],
    [0, 0, 1, 1, 3, 2],
    [5, 5, 5, 6, 3, 4],
    [5, 7, 6, 6, 3, 4],
    [7, 7, 8, 8, 10, 10],
    [9, 9, 8, 8, 10, 10],
]
FIXTURE_X_PER_SECTION = [2, 2, 1, 2, 1, 2, 2, 2, 1, 1, 2]

FIXTURE_SOLUTION = [
    "xooxox",
    "oxoxxo",
    "xoxoxo",
    "ooxxox",
    "xxooxo",
    "oxxoox",
]


def blank(size):
    return ["." * size for _ in range(size)]


def one_section(size):
    return [[0] * size for _ in range(size)]


def check_filled_board(board: Board, check_sections: bool = True):
    """Independent check of all four rules on a fully decided board."""
    n = board.size
    grid = board.starting_rows()
    assert all("." not in row for row in grid)

    cols = ["".join(grid[r][c] for r in range(n)) for c in range(n)]
    for line in grid + cols:
        assert line.count("x") == n // 2
        assert line.count("o") == n // 2
        assert "xxx" not in line
        assert "ooo" not in line

    for r in range(n - 1):
        for c in range(n - 1):
            block = {grid[r][c], grid[r][c + 1], grid[r + 1][c], grid[r + 1][c + 1]}
            assert len(block) == 2, f"monochrome square at ({r}, {c})"

    if check_sections:
        xs = [0] * len(board.x_per_section)
        for r in range(n):
            for c in range(n):
                if grid[r][c] == "x":
                    xs[board.sections[r][c]] += 1
        assert xs == board.x_per_section


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger("kinsei_engine")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def fixture_puzzle():
    return FIXTURE_ROWS, FIXTURE_SECTIONS, FIXTURE_X_PER_SECTION


@pytest.fixture
def assert_valid():
    return check_filled_board
