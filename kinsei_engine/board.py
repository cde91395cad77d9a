from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence

from kinsei_engine.models import (
    OUT_OF_BOUNDS,
    RC,
    BoardConstructionError,
    CellState,
    ConstructionErrorKind,
    Symbol,
    TraversalOrder,
)
from kinsei_engine.rules import Rule

logger = logging.getLogger(__name__)

EMPTY = "."
GLYPHS = {Symbol.X: "x", Symbol.O: "o"}


def _check_dimensions(rows: Sequence[str], sections: Sequence[Sequence[int]]) -> int:
    size = len(rows)
    row_lengths = {len(row) for row in rows}
    if (
        size == 0 or row_lengths != {size}
        or len(sections) != size or any(len(line) != size for line in sections)
    ):
        raise BoardConstructionError(
            ConstructionErrorKind.INVALID_DIMENSIONS,
            "Grid must be square and sections and starting values must match size",
        )
    if size % 2 != 0:
        raise BoardConstructionError(
            ConstructionErrorKind.INVALID_SIZE_PARITY,
            "The size must be perfectly divisible by 2",
        )
    return size


def _parse_cell(ch: str, section: int) -> CellState:
    cell = CellState.default(section)
    if ch == EMPTY:
        return cell
    for symbol, glyph in GLYPHS.items():
        if ch == glyph:
            return cell.decide(symbol)
    raise BoardConstructionError(
        ConstructionErrorKind.INVALID_CHARACTER,
        f"Invalid character '{ch}' in board.",
    )


class Board:
    """
    Kinsei board:
    - cells[i][j] = CellState (possibility + decision bits, section id)
    - sections[i][j] = section id, fixed at construction
    - x_per_section / o_per_section = per-section quotas
    - rules = constraints applied by propagate(), in order
    """

    def __init__(
        self,
        rows: Sequence[str],
        sections: Sequence[Sequence[int]],
        x_per_section: Sequence[int],
        rules: Sequence[Rule],
    ):
        size = _check_dimensions(rows, sections)

        section_count = [0] * len(x_per_section)
        cells: List[List[CellState]] = []
        for i in range(size):
            line: List[CellState] = []
            for j in range(size):
                section = sections[i][j]
                if not 0 <= section < len(section_count):
                    raise BoardConstructionError(
                        ConstructionErrorKind.INVALID_SECTION,
                        f"Section id {section} at ({i}, {j}) has no quota.",
                    )
                line.append(_parse_cell(rows[i][j], section))
                section_count[section] += 1
            cells.append(line)

        for s, quota in enumerate(x_per_section):
            if not 0 <= quota <= section_count[s]:
                raise BoardConstructionError(
                    ConstructionErrorKind.INVALID_SECTION,
                    f"Section {s}: X quota {quota} outside 0..{section_count[s]}.",
                )

        self.size = size
        self.cells = cells
        self.sections = [list(line) for line in sections]
        self.rules = list(rules)
        self.section_count = section_count
        self.x_per_section = list(x_per_section)
        self.o_per_section = [
            section_count[s] - self.x_per_section[s] for s in range(len(section_count))
        ]

    # ---------- cell access ----------
    def in_bounds(self, i: int, j: int) -> bool:
        return 0 <= i < self.size and 0 <= j < self.size

    def cell(self, i: int, j: int) -> CellState:
        if self.in_bounds(i, j):
            return self.cells[i][j]
        return OUT_OF_BOUNDS

    def set_cell(self, i: int, j: int, state: CellState) -> None:
        self.cells[i][j] = state

    def decide(self, i: int, j: int, symbol: Symbol) -> None:
        self.cells[i][j] = self.cells[i][j].decide(symbol)

    def get_x_per_section(self, section: int) -> int:
        return self.x_per_section[section] if section >= 0 else 0

    def get_o_per_section(self, section: int) -> int:
        return self.o_per_section[section] if section >= 0 else 0

    def coords(self, order: TraversalOrder = TraversalOrder.ROW_MAJOR) -> Iterator[RC]:
        for a in range(self.size):
            for b in range(self.size):
                yield (a, b) if order == TraversalOrder.ROW_MAJOR else (b, a)

    def snapshot(self) -> List[List[CellState]]:
        return [line[:] for line in self.cells]

    def decided_cells(self) -> Dict[RC, Symbol]:
        return {
            (i, j): self.cells[i][j].decided_symbol()
            for (i, j) in self.coords()
            if self.cells[i][j].is_decided
        }

    def undecided_count(self) -> int:
        return sum(1 for (i, j) in self.coords() if self.cells[i][j].is_undecided)

    def is_solved(self) -> bool:
        return self.undecided_count() == 0

    # ---------- propagation ----------
    def propagate(self) -> None:
        """
        One sweep of every rule over every undecided cell. Possibility bits
        are recomputed from scratch; decisions are never changed here.
        """
        for (i, j) in self.coords():
            cell = self.cells[i][j]
            if cell.is_undecided:
                self.cells[i][j] = cell.reset_possibilities()

        for rule in self.rules:
            rule.initialize(self)

        for (i, j) in self.coords():
            cell = self.cells[i][j]
            if cell.is_decided:
                continue
            for rule in self.rules:
                cell = rule.update_cell_state(self, i, j, cell)
            self.cells[i][j] = cell

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("after propagate:\n%s", self.render_cells())

    # ---------- derived boards ----------
    def starting_rows(self) -> List[str]:
        rows = []
        for line in self.cells:
            symbols = [cell.decided_symbol() for cell in line]
            rows.append("".join(GLYPHS[s] if s is not None else EMPTY for s in symbols))
        return rows

    def cleared(self, rules: Optional[Sequence[Rule]] = None) -> "Board":
        blank = [EMPTY * self.size for _ in range(self.size)]
        fresh = [Rule(rule.kind) for rule in (rules if rules is not None else self.rules)]
        return Board(blank, self.sections, self.x_per_section, fresh)

    # ---------- printing ----------
    @staticmethod
    def glyph(cell: CellState) -> str:
        if cell.is_x:
            return "X"
        if cell.is_o:
            return "O"
        if cell.can_x and cell.can_o:
            return "."
        if cell.can_x or cell.can_o:
            return "?"
        return "!"

    def _separator(self) -> str:
        return "-" * (self.size * 2 - 1)

    def render_cells(self) -> str:
        return "\n".join(" ".join(self.glyph(cell) for cell in line) for line in self.cells)

    def render_sections(self) -> str:
        return "\n".join(" ".join(f"{s:03d}" for s in line) for line in self.sections)

    def render_quotas(self) -> str:
        return "\n".join(
            f"Section {s}: Xs={self.x_per_section[s]}, Os={self.o_per_section[s]}, "
            f"Total={self.section_count[s]}"
            for s in range(len(self.section_count))
        )

    def pretty(self) -> str:
        sep = self._separator()
        return "\n".join([
            sep, self.render_cells(),
            sep, self.render_sections(),
            sep, self.render_quotas(),
            sep,
        ])
