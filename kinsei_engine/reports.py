from __future__ import annotations
from typing import List, Optional, Tuple

from kinsei_engine.board import Board
from kinsei_engine.models import RC, ConflictType, Symbol, ViolationReport


def _cells_1_indexed(cells: List[RC]) -> List[Tuple[int, int]]:
    return [(r + 1, c + 1) for (r, c) in cells]


def _same_decided(board: Board, cells: List[RC]) -> Optional[Symbol]:
    first = board.cell(*cells[0]).decided_symbol()
    if first is None:
        return None
    if all(board.cell(r, c).is_symbol(first) for (r, c) in cells[1:]):
        return first
    return None


def _find_triple(board: Board) -> Optional[ViolationReport]:
    n = board.size
    for horizontal in (True, False):
        for a in range(n):
            for b in range(n - 2):
                cells = [(a, b + k) if horizontal else (b + k, a) for k in range(3)]
                symbol = _same_decided(board, cells)
                if symbol is not None:
                    unit = "row" if horizontal else "column"
                    return ViolationReport(
                        has_violation=True,
                        violation_type=ConflictType.THREE_IN_A_ROW,
                        conflict_cells=cells,
                        explanation=(
                            f"Three {symbol.name}s in a row in {unit} {a+1}.\n"
                            f"Conflict cells (1-indexed): {_cells_1_indexed(cells)}.\n"
                            "Rule: no three consecutive equal symbols in a row or column."
                        )
                    )
    return None


def _find_square(board: Board) -> Optional[ViolationReport]:
    n = board.size
    for r in range(n - 1):
        for c in range(n - 1):
            cells = [(r, c), (r, c + 1), (r + 1, c), (r + 1, c + 1)]
            symbol = _same_decided(board, cells)
            if symbol is not None:
                return ViolationReport(
                    has_violation=True,
                    violation_type=ConflictType.SQUARE,
                    conflict_cells=cells,
                    explanation=(
                        f"2x2 block of {symbol.name}s.\n"
                        f"Conflict cells (1-indexed): {_cells_1_indexed(cells)}.\n"
                        "Rule: no 2x2 block may hold a single symbol."
                    )
                )
    return None


def _find_overfull_line(board: Board) -> Optional[ViolationReport]:
    n = board.size
    half = n // 2
    for horizontal in (True, False):
        for a in range(n):
            cells = [(a, b) if horizontal else (b, a) for b in range(n)]
            for symbol in Symbol:
                hits = [rc for rc in cells if board.cell(*rc).is_symbol(symbol)]
                if len(hits) > half:
                    unit = "Row" if horizontal else "Column"
                    return ViolationReport(
                        has_violation=True,
                        violation_type=ConflictType.ROW if horizontal else ConflictType.COL,
                        conflict_cells=hits,
                        explanation=(
                            f"{unit} rule violation: {len(hits)} {symbol.name}s in "
                            f"{unit.lower()} {a+1}, at most {half} allowed.\n"
                            f"Conflict cells (1-indexed): {_cells_1_indexed(hits)}."
                        )
                    )
    return None


def _find_section_overflow(board: Board) -> Optional[ViolationReport]:
    members: List[List[RC]] = [[] for _ in board.section_count]
    for (r, c) in board.coords():
        members[board.sections[r][c]].append((r, c))

    for s, cells in enumerate(members):
        for symbol, quota in ((Symbol.X, board.x_per_section[s]), (Symbol.O, board.o_per_section[s])):
            hits = [rc for rc in cells if board.cell(*rc).is_symbol(symbol)]
            if len(hits) > quota:
                return ViolationReport(
                    has_violation=True,
                    violation_type=ConflictType.SECTION,
                    conflict_cells=hits,
                    explanation=(
                        f"Section rule violation: section {s} holds {len(hits)} "
                        f"{symbol.name}s, quota is {quota}.\n"
                        f"Conflict cells (1-indexed): {_cells_1_indexed(hits)}."
                    )
                )
    return None


def generate_violation_report(board: Board, check_sections: bool = True) -> ViolationReport:
    """
    Returns the FIRST broken rule among the decided cells of the board:
    1) three in a row  2) 2x2 square  3) row/column over half
    4) section over its quota (skipped with check_sections=False)
    On a fully decided board, no violation means the board is solved.
    """
    checks = [_find_triple, _find_square, _find_overfull_line]
    if check_sections:
        checks.append(_find_section_overflow)

    for check in checks:
        report = check(board)
        if report is not None:
            return report
    return ViolationReport(False, ConflictType.NONE, [])
