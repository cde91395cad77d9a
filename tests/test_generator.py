import random

import pytest

from kinsei_engine.generator import create_random, fill_random_sections
from kinsei_engine.models import BoardConstructionError, ConstructionErrorKind
from kinsei_engine.solver import brute_force_solve


def _is_connected(sections, section):
    cells = {(i, j) for i, line in enumerate(sections) for j, s in enumerate(line) if s == section}
    start = next(iter(cells))
    seen = {start}
    todo = [start]
    while todo:
        i, j = todo.pop()
        for (di, dj) in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nxt = (i + di, j + dj)
            if nxt in cells and nxt not in seen:
                seen.add(nxt)
                todo.append(nxt)
    return seen == cells


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_fill_random_sections_covers_grid(seed):
    size, count = 6, 10
    sections = fill_random_sections(random.Random(seed), size, count, size * size // count)
    flat = [s for line in sections for s in line]
    assert len(flat) == size * size
    assert set(flat) == set(range(count))
    for s in range(count):
        assert _is_connected(sections, s)


def test_fill_random_sections_with_tight_cap_terminates():
    sections = fill_random_sections(random.Random(7), 8, 2, 1)
    assert {s for line in sections for s in line} == {0, 1}


def test_fill_random_sections_is_reproducible():
    a = fill_random_sections(random.Random(42), 8, 14, 4)
    b = fill_random_sections(random.Random(42), 8, 14, 4)
    assert a == b


def test_create_random_8_seed_0(assert_valid):
    result = create_random(8, seed=0)
    assert result.is_solvable
    board = result.board
    assert board.size == 8
    assert_valid(board)
    assert sum(board.x_per_section) == 32
    assert 12 <= len(board.x_per_section) < 20


@pytest.mark.parametrize("size", [2, 4, 6])
def test_create_random_sizes(size, assert_valid):
    result = create_random(size, seed=size)
    assert result.is_solvable
    assert_valid(result.board)


def test_create_random_same_seed_same_board():
    a = create_random(6, seed=123).board
    b = create_random(6, seed=123).board
    assert a.starting_rows() == b.starting_rows()
    assert a.sections == b.sections
    assert a.x_per_section == b.x_per_section


def test_create_random_without_seed_is_valid(assert_valid):
    result = create_random(4)
    assert result.is_solvable
    assert_valid(result.board)


def test_generated_puzzle_can_be_solved_again(assert_valid):
    board = create_random(4, seed=9).board
    puzzle = board.cleared()
    result = brute_force_solve(puzzle.starting_rows(), puzzle.sections, puzzle.x_per_section)
    assert result.is_solvable
    assert result.board.x_per_section == board.x_per_section
    assert_valid(result.board)


@pytest.mark.parametrize("size", [0, 3, -2])
def test_create_random_rejects_bad_size(size):
    with pytest.raises(BoardConstructionError) as exc:
        create_random(size, seed=1)
    assert exc.value.kind == ConstructionErrorKind.INVALID_SIZE_PARITY
