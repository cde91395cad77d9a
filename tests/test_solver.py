import random

import pytest

from conftest import FIXTURE_SOLUTION, blank, one_section
from kinsei_engine.board import Board
from kinsei_engine.models import BoardConstructionError, TraversalOrder
from kinsei_engine.rules import rules_for_creating, rules_for_solving
from kinsei_engine.solver import (
    backtrack,
    brute_force_solve,
    logic_solve,
    solve_by_logic,
)

QUADRANTS = [
    [0, 0, 1, 1],
    [0, 0, 1, 1],
    [2, 2, 3, 3],
    [2, 2, 3, 3],
]


def test_logic_solve_fixture(fixture_puzzle, assert_valid):
    result = logic_solve(*fixture_puzzle)
    assert result.is_solvable
    assert result.board.undecided_count() == 0
    assert result.board.starting_rows() == FIXTURE_SOLUTION
    assert_valid(result.board)


def test_brute_force_matches_logic(fixture_puzzle, assert_valid):
    result = brute_force_solve(*fixture_puzzle)
    assert result.is_solvable
    assert result.board.starting_rows() == FIXTURE_SOLUTION
    assert_valid(result.board)


def test_brute_force_empty_single_section(assert_valid):
    result = brute_force_solve(blank(4), one_section(4), [8])
    assert result.is_solvable
    assert_valid(result.board)


def test_brute_force_empty_quadrants(assert_valid):
    result = brute_force_solve(blank(4), QUADRANTS, [2, 2, 2, 2])
    assert result.is_solvable
    assert_valid(result.board)


def test_brute_force_is_deterministic():
    first = brute_force_solve(blank(6), one_section(6), [18])
    second = brute_force_solve(blank(6), one_section(6), [18])
    assert first.board.starting_rows() == second.board.starting_rows()


def test_logic_solve_stops_without_guessing():
    result = logic_solve(blank(4), one_section(4), [8])
    assert not result.is_solvable
    assert result.board is None
    assert result.reason


@pytest.mark.parametrize("solve", [logic_solve, brute_force_solve])
def test_givens_with_triple_never_succeed(solve):
    rows = ["xxx.", "....", "....", "...."]
    result = solve(rows, one_section(4), [8])
    assert not result.is_solvable
    assert result.board is None
    assert "Three" in result.reason


@pytest.mark.parametrize("solve", [logic_solve, brute_force_solve])
def test_bad_input_raises(solve):
    with pytest.raises(BoardConstructionError):
        solve(["x.o", "...", "..."], one_section(3), [4])


def test_impossible_quota_exhausts_search():
    result = brute_force_solve(blank(4), one_section(4), [7])
    assert not result.is_solvable
    assert result.board is None


@pytest.mark.parametrize("order", list(TraversalOrder))
def test_failed_search_restores_decisions(order):
    rows = ["x...", "....", "..o.", "...."]
    board = Board(rows, one_section(4), [7], rules_for_solving())
    before = board.decided_cells()

    assert not backtrack(board, order)
    assert board.decided_cells() == before
    assert board.undecided_count() == 14


@pytest.mark.parametrize("order", list(TraversalOrder))
def test_backtrack_with_random_order(order, assert_valid):
    board = Board(blank(6), one_section(6), [18], rules_for_creating())
    assert backtrack(board, order, random.Random(5))
    assert_valid(board, check_sections=False)


def test_backtrack_random_order_is_reproducible():
    grids = []
    for _ in range(2):
        board = Board(blank(6), one_section(6), [18], rules_for_creating())
        backtrack(board, TraversalOrder.COLUMN_MAJOR, random.Random(11))
        grids.append(board.starting_rows())
    assert grids[0] == grids[1]


def test_backtrack_keeps_givens(fixture_puzzle):
    rows, sections, xs = fixture_puzzle
    board = Board(rows, sections, xs, rules_for_solving())
    givens = board.decided_cells()
    assert backtrack(board)
    solved = board.decided_cells()
    assert all(solved[rc] == symbol for rc, symbol in givens.items())


def test_solve_by_logic_on_board(fixture_puzzle):
    rows, sections, xs = fixture_puzzle
    board = Board(rows, sections, xs, rules_for_solving())
    assert solve_by_logic(board)
    assert board.is_solved()
