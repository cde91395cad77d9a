from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from kinsei_engine.board import Board
from kinsei_engine.models import CellState, SolutionResult, Symbol, TraversalOrder
from kinsei_engine.reports import generate_violation_report
from kinsei_engine.rules import rules_for_solving

logger = logging.getLogger(__name__)


# ------------------ logic solving ------------------
def solve_by_logic(board: Board) -> bool:
    """
    Propagate, then decide every cell left with a single possible symbol.
    Returns False when a pass decides nothing while cells remain open.
    """
    passes = 0
    while True:
        if board.undecided_count() == 0:
            logger.debug("logic solve finished after %d passes", passes)
            return True

        passes += 1
        solved_any = False
        board.propagate()
        for (i, j) in board.coords():
            cell = board.cells[i][j]
            if cell.is_decided:
                continue
            possible = cell.possible_symbols()
            if len(possible) == 1:
                board.decide(i, j, possible[0])
                solved_any = True
        if not solved_any:
            logger.debug(
                "logic solve stuck after %d passes, %d cells open",
                passes, board.undecided_count(),
            )
            return False


# ------------------ backtracking ------------------
@dataclass
class _DecisionPoint:
    index: int
    i: int
    j: int
    snapshot: CellState
    pending: List[Symbol]


def _symbol_order(rng: Optional[random.Random]) -> List[Symbol]:
    if rng is None or rng.random() < 0.5:
        return [Symbol.X, Symbol.O]
    return [Symbol.O, Symbol.X]


def _has_dead_cell(board: Board) -> bool:
    return any(
        cell.is_undecided and not (cell.can_x or cell.can_o)
        for line in board.cells for cell in line
    )


def _try_next(board: Board, point: _DecisionPoint) -> bool:
    while point.pending:
        symbol = point.pending.pop(0)
        if board.cell(point.i, point.j).can_place(symbol):
            board.decide(point.i, point.j, symbol)
            logger.debug("guess (%d, %d) = %s", point.i, point.j, symbol.name)
            return True
    return False


def backtrack(
    board: Board,
    order: TraversalOrder = TraversalOrder.ROW_MAJOR,
    rng: Optional[random.Random] = None,
) -> bool:
    """
    Depth-first search over the cells in `order`, using propagate() to prune.
    With rng=None X is tried before O; otherwise each decision flips a coin.
    Decision points live on an explicit stack. A failed branch restores its
    cell to the pre-decision state and re-propagates before the sibling is
    tried, so a False return leaves the decided cells as they were.
    """
    path = list(board.coords(order))
    stack: List[_DecisionPoint] = []
    index = 0

    while True:
        while index < len(path) and board.cell(*path[index]).is_decided:
            index += 1
        if index == len(path):
            return True

        i, j = path[index]
        board.propagate()
        point: Optional[_DecisionPoint] = None
        if not _has_dead_cell(board):
            point = _DecisionPoint(index, i, j, board.cells[i][j], _symbol_order(rng))

        while point is None or not _try_next(board, point):
            if not stack:
                return False
            point = stack.pop()
            logger.debug("backtrack (%d, %d)", point.i, point.j)
            board.set_cell(point.i, point.j, point.snapshot)
            board.propagate()

        stack.append(point)
        index = point.index + 1


# ------------------ public API ------------------
def _new_board(rows: Sequence[str], sections: Sequence[Sequence[int]], x_per_section: Sequence[int]) -> Board:
    return Board(rows, sections, x_per_section, rules_for_solving())


def _solve(board: Board, mode: str, search) -> SolutionResult:
    start = time.time()
    logger.info("[%s] solve start (%dx%d)", mode, board.size, board.size)

    givens = generate_violation_report(board)
    if givens.has_violation:
        logger.info("[%s] givens break a rule", mode)
        return SolutionResult(False, None, givens.explanation)

    solved = search(board)
    duration_ms = int((time.time() - start) * 1000)
    if not solved:
        logger.info("[%s] no solution after %d ms", mode, duration_ms)
        return SolutionResult(False, None, "Cannot solve!")

    final = generate_violation_report(board)
    if final.has_violation:
        logger.info("[%s] filled board breaks a rule", mode)
        return SolutionResult(False, None, final.explanation)

    logger.info("[%s] solved in %d ms", mode, duration_ms)
    return SolutionResult(True, board)


def logic_solve(rows: Sequence[str], sections: Sequence[Sequence[int]], x_per_section: Sequence[int]) -> SolutionResult:
    """Deterministic, guess-free solve. Raises BoardConstructionError on bad input."""
    return _solve(_new_board(rows, sections, x_per_section), "logic", solve_by_logic)


def brute_force_solve(rows: Sequence[str], sections: Sequence[Sequence[int]], x_per_section: Sequence[int]) -> SolutionResult:
    """Row-major backtracking, X before O. Raises BoardConstructionError on bad input."""
    return _solve(_new_board(rows, sections, x_per_section), "brute", backtrack)
