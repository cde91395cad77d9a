from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from kinsei_engine.board import Board

RC = Tuple[int, int]  # (row, col)

CAN_X = 0b0001
CAN_O = 0b0010
IS_X = 0b0100
IS_O = 0b1000
BOTH_POSSIBLE = CAN_X | CAN_O


class Symbol(str, Enum):
    X = "x"
    O = "o"


def can_bit(symbol: Symbol) -> int:
    return CAN_X if symbol is Symbol.X else CAN_O


def is_bit(symbol: Symbol) -> int:
    return IS_X if symbol is Symbol.X else IS_O


@dataclass(frozen=True)
class CellState:
    """
    Possibility/decision bits of one cell:
    - value bit 0/1 = X/O still possible
    - value bit 2/3 = X/O decided
    Instances are immutable; every operation returns the new state.
    """
    value: int
    section: int

    @staticmethod
    def default(section: int) -> "CellState":
        return CellState(BOTH_POSSIBLE, section)

    @property
    def can_x(self) -> bool:
        return (self.value & CAN_X) != 0

    @property
    def can_o(self) -> bool:
        return (self.value & CAN_O) != 0

    @property
    def is_x(self) -> bool:
        return (self.value & IS_X) != 0

    @property
    def is_o(self) -> bool:
        return (self.value & IS_O) != 0

    @property
    def is_decided(self) -> bool:
        return (self.value & (IS_X | IS_O)) != 0

    @property
    def is_undecided(self) -> bool:
        return not self.is_decided

    def can_place(self, symbol: Symbol) -> bool:
        return (self.value & can_bit(symbol)) != 0

    def is_symbol(self, symbol: Symbol) -> bool:
        return (self.value & is_bit(symbol)) != 0

    def possible_symbols(self) -> List[Symbol]:
        return [s for s in Symbol if self.can_place(s)]

    def decided_symbol(self) -> Optional[Symbol]:
        if self.is_x:
            return Symbol.X
        if self.is_o:
            return Symbol.O
        return None

    def decide(self, symbol: Symbol) -> "CellState":
        return CellState(is_bit(symbol) | can_bit(symbol), self.section)

    def forbid(self, symbol: Symbol) -> "CellState":
        return CellState(self.value & ~can_bit(symbol), self.section)

    def forbid_if(self, symbol: Symbol, test: bool) -> "CellState":
        return self.forbid(symbol) if test else self

    def reset_possibilities(self) -> "CellState":
        return CellState(self.value | BOTH_POSSIBLE, self.section)

    def with_value(self, value: int) -> "CellState":
        return CellState(value, self.section)


# Reads outside the grid: neither symbol present, no section.
OUT_OF_BOUNDS = CellState(0, -1)


class ConstructionErrorKind(str, Enum):
    INVALID_DIMENSIONS = "INVALID_DIMENSIONS"
    INVALID_SIZE_PARITY = "INVALID_SIZE_PARITY"
    INVALID_CHARACTER = "INVALID_CHARACTER"
    INVALID_SECTION = "INVALID_SECTION"


class BoardConstructionError(ValueError):
    def __init__(self, kind: ConstructionErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class RuleNotInitializedError(RuntimeError):
    pass


class ConflictType(str, Enum):
    THREE_IN_A_ROW = "THREE_IN_A_ROW"
    SQUARE = "SQUARE"
    ROW = "ROW"
    COL = "COL"
    SECTION = "SECTION"
    NONE = "NONE"


class TraversalOrder(str, Enum):
    ROW_MAJOR = "ROW_MAJOR"
    COLUMN_MAJOR = "COLUMN_MAJOR"


@dataclass(frozen=True)
class ViolationReport:
    has_violation: bool
    violation_type: ConflictType = ConflictType.NONE
    conflict_cells: List[RC] = None
    explanation: str = ""


@dataclass(frozen=True)
class SolutionResult:
    is_solvable: bool
    board: Optional["Board"] = None
    reason: str = ""
