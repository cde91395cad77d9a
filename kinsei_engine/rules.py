from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from kinsei_engine.models import CellState, RuleNotInitializedError, Symbol

if TYPE_CHECKING:
    from kinsei_engine.board import Board


class RuleKind(str, Enum):
    THREE_IN_A_ROW = "THREE_IN_A_ROW"
    NO_SQUARES = "NO_SQUARES"
    MAX_PER_ROW_COLUMN = "MAX_PER_ROW_COLUMN"
    COUNT_PER_SECTION = "COUNT_PER_SECTION"


class Tally:
    """Decided X/O counts per unit (row, column or section) for one pass."""

    def __init__(self, units: int):
        self.x = [0] * units
        self.o = [0] * units

    def add(self, unit: int, cell: CellState) -> None:
        if cell.is_x:
            self.x[unit] += 1
        if cell.is_o:
            self.o[unit] += 1


# ------------------ per-kind narrowing ------------------
# (di, dj) pairs of the other two cells of each 3-cell window through (i, j)
_TRIPLE_WINDOWS = (
    ((-2, 0), (-1, 0)),
    ((-1, 0), (1, 0)),
    ((1, 0), (2, 0)),
    ((0, -2), (0, -1)),
    ((0, -1), (0, 1)),
    ((0, 1), (0, 2)),
)

#    -1  0   1
# -1  a  b  c
#  0  d  .  e
#  1  f  g  h
_SQUARE_WINDOWS = (
    ((-1, -1), (-1, 0), (0, -1)),  # up-left
    ((1, -1), (1, 0), (0, -1)),    # down-left
    ((-1, 1), (-1, 0), (0, 1)),    # up-right
    ((1, 1), (1, 0), (0, 1)),      # down-right
)


def _all_decided(board: "Board", i: int, j: int, offsets, symbol: Symbol) -> bool:
    return all(board.cell(i + di, j + dj).is_symbol(symbol) for (di, dj) in offsets)


def _three_in_a_row(rule: "Rule", board: "Board", i: int, j: int, cell: CellState) -> CellState:
    for offsets in _TRIPLE_WINDOWS:
        for symbol in Symbol:
            cell = cell.forbid_if(symbol, _all_decided(board, i, j, offsets, symbol))
    return cell


def _no_squares(rule: "Rule", board: "Board", i: int, j: int, cell: CellState) -> CellState:
    for offsets in _SQUARE_WINDOWS:
        for symbol in Symbol:
            cell = cell.forbid_if(symbol, _all_decided(board, i, j, offsets, symbol))
    return cell


def _max_per_row_column(rule: "Rule", board: "Board", i: int, j: int, cell: CellState) -> CellState:
    rows, cols = rule.require_tallies()
    half = board.size // 2
    cell = cell.forbid_if(Symbol.X, rows.x[i] >= half or cols.x[j] >= half)
    cell = cell.forbid_if(Symbol.O, rows.o[i] >= half or cols.o[j] >= half)
    return cell


def _count_per_section(rule: "Rule", board: "Board", i: int, j: int, cell: CellState) -> CellState:
    (sections,) = rule.require_tallies()
    section = board.sections[i][j]
    allowed_x = board.get_x_per_section(section)
    allowed_o = board.get_o_per_section(section)
    cell = cell.forbid_if(Symbol.X, not cell.is_x and sections.x[section] >= allowed_x)
    cell = cell.forbid_if(Symbol.O, not cell.is_o and sections.o[section] >= allowed_o)
    return cell


_Narrower = Callable[["Rule", "Board", int, int, CellState], CellState]

_NARROWERS: Dict[RuleKind, _Narrower] = {
    RuleKind.THREE_IN_A_ROW: _three_in_a_row,
    RuleKind.NO_SQUARES: _no_squares,
    RuleKind.MAX_PER_ROW_COLUMN: _max_per_row_column,
    RuleKind.COUNT_PER_SECTION: _count_per_section,
}


class Rule:
    """
    One constraint of the puzzle. Rules never read the possibility bits of
    the cell they narrow, only decided cells, and never re-allow a symbol.
    """

    def __init__(self, kind: RuleKind):
        self.kind = kind
        self._tallies: Optional[tuple] = None

    def __repr__(self) -> str:
        return f"Rule({self.kind.value})"

    def initialize(self, board: "Board") -> None:
        if self.kind == RuleKind.MAX_PER_ROW_COLUMN:
            rows = Tally(board.size)
            cols = Tally(board.size)
            for i in range(board.size):
                for j in range(board.size):
                    cell = board.cells[i][j]
                    rows.add(i, cell)
                    cols.add(j, cell)
            self._tallies = (rows, cols)
        elif self.kind == RuleKind.COUNT_PER_SECTION:
            sections = Tally(len(board.section_count))
            for i in range(board.size):
                for j in range(board.size):
                    sections.add(board.sections[i][j], board.cells[i][j])
            self._tallies = (sections,)

    def require_tallies(self) -> tuple:
        if self._tallies is None:
            raise RuleNotInitializedError(
                f"{self.kind.value}: initialize() must run before update_cell_state()"
            )
        return self._tallies

    def update_cell_state(self, board: "Board", i: int, j: int, cell: CellState) -> CellState:
        return _NARROWERS[self.kind](self, board, i, j, cell)


SOLVING_ORDER = (
    RuleKind.THREE_IN_A_ROW,
    RuleKind.NO_SQUARES,
    RuleKind.MAX_PER_ROW_COLUMN,
    RuleKind.COUNT_PER_SECTION,
)

# Section quotas are an output of generation, not an input.
CREATING_ORDER = SOLVING_ORDER[:3]


def rules_for_solving() -> List[Rule]:
    return [Rule(kind) for kind in SOLVING_ORDER]


def rules_for_creating() -> List[Rule]:
    return [Rule(kind) for kind in CREATING_ORDER]
