from __future__ import annotations

import logging
import random
from typing import List, Optional

from kinsei_engine.board import EMPTY, Board
from kinsei_engine.models import (
    BoardConstructionError,
    ConstructionErrorKind,
    SolutionResult,
    TraversalOrder,
)
from kinsei_engine.rules import rules_for_creating, rules_for_solving
from kinsei_engine.solver import backtrack

logger = logging.getLogger(__name__)

UNASSIGNED = -1
DELTAS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def fill_random_sections(
    rng: random.Random, size: int, section_count: int, max_per_section: int
) -> List[List[int]]:
    """
    Grow `section_count` regions from random seed cells until every cell
    belongs to one. A cell joins the first assigned neighbour (in shuffled
    order) whose section is below `max_per_section`; after a sweep that
    assigns nothing, the next sweep ignores the cap.
    """
    sections = [[UNASSIGNED] * size for _ in range(size)]
    counts = [0] * section_count

    seeded = 0
    while seeded < section_count:
        i = rng.randrange(size)
        j = rng.randrange(size)
        if sections[i][j] == UNASSIGNED:
            sections[i][j] = seeded
            counts[seeded] += 1
            seeded += 1

    capped = True
    remaining = size * size - section_count
    while remaining > 0:
        progress = False
        for i in range(size):
            for j in range(size):
                if sections[i][j] != UNASSIGNED:
                    continue
                deltas = list(DELTAS)
                rng.shuffle(deltas)
                for (di, dj) in deltas:
                    ni, nj = i + di, j + dj
                    if not (0 <= ni < size and 0 <= nj < size):
                        continue
                    section = sections[ni][nj]
                    if section == UNASSIGNED:
                        continue
                    if capped and counts[section] >= max_per_section:
                        continue
                    sections[i][j] = section
                    counts[section] += 1
                    remaining -= 1
                    progress = True
                    break
        capped = progress
    return sections


def create_random(size: int, seed: Optional[int] = None) -> SolutionResult:
    """
    Random section partition + randomized backtracking fill.
    The per-section X quotas are read back from the filled grid, and the
    returned board carries the full solving rule set.
    """
    if size <= 0 or size % 2 != 0:
        raise BoardConstructionError(
            ConstructionErrorKind.INVALID_SIZE_PARITY,
            f"Size must be a positive even number, got {size}.",
        )

    rng = random.Random(seed) if seed is not None else random.Random()

    section_count = rng.randrange(size + size // 2, size * 2 + size // 2)
    max_per_section = (size * size) // section_count
    sections = fill_random_sections(rng, size, section_count, max_per_section)
    logger.info(
        "generating %dx%d board with %d sections (seed=%s)",
        size, size, section_count, seed,
    )

    empty = [EMPTY * size for _ in range(size)]
    board = Board(empty, sections, [0] * section_count, rules_for_creating())
    if not backtrack(board, TraversalOrder.COLUMN_MAJOR, rng):
        logger.info("generation failed for seed=%s", seed)
        return SolutionResult(False, None, "No board produced.")

    x_per_section = [0] * section_count
    for (i, j) in board.coords():
        if board.cells[i][j].is_x:
            x_per_section[sections[i][j]] += 1

    solved = Board(board.starting_rows(), sections, x_per_section, rules_for_solving())
    return SolutionResult(True, solved)
