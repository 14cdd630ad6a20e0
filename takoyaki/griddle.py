"""Griddle cell state machine.

empty -> battered -> (octopus) -> flipped -> moved to plate, with a discard
escape once a ball burns. Every transition is a guarded no-op when its
precondition does not hold.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from config import GRIDDLE_COLS, GRIDDLE_ROWS
from takoyaki.cooking import classify, refresh
from takoyaki.entities import CookingLevel, GriddleCell
from takoyaki.plates import PlatePool

# Results of a stick action
FLIPPED = "flip"
PLATED = "plate"
DISCARDED = "discard"
PLATES_FULL = "plates_full"


def add_batter(cell: GriddleCell, now: int) -> bool:
    if cell.has_batter:
        return False
    cell.has_batter = True
    cell.cooking_start_time = now
    cell.cooking_level = CookingLevel.RAW
    return True


def add_octopus(cell: GriddleCell) -> bool:
    if not cell.has_batter or cell.has_octopus:
        return False
    cell.has_octopus = True
    return True


def flip(cell: GriddleCell, now: int) -> bool:
    if not (cell.has_batter and cell.has_octopus) or cell.is_flipped:
        return False
    if classify(cell, now) != CookingLevel.RAW:
        return False
    cell.is_flipped = True
    return True


def move_to_plate(cell: GriddleCell, now: int, plates: PlatePool) -> Optional[bool]:
    """Move a perfect ball onto the plate pool.

    Returns ``True`` on success, ``False`` when the cell is not ready and
    ``None`` when the pool is full (the cell keeps its ball).
    """
    if not cell.has_octopus or classify(cell, now) != CookingLevel.PERFECT:
        return False
    if plates.add(CookingLevel.PERFECT) is None:
        return None
    cell.reset()
    return True


def discard(cell: GriddleCell, now: int) -> bool:
    if classify(cell, now) != CookingLevel.BURNT:
        return False
    cell.reset()
    return True


def use_stick(cell: GriddleCell, now: int, plates: PlatePool) -> str:
    """Apply the stick tool: flip a raw ball, plate a perfect one, toss a burnt one."""
    if not cell.has_batter:
        return ""
    level = classify(cell, now)
    if level == CookingLevel.RAW:
        return FLIPPED if flip(cell, now) else ""
    if level == CookingLevel.PERFECT:
        moved = move_to_plate(cell, now, plates)
        if moved is None:
            return PLATES_FULL
        return PLATED if moved else ""
    return DISCARDED if discard(cell, now) else ""


class Griddle:
    def __init__(self, rows: int = GRIDDLE_ROWS, cols: int = GRIDDLE_COLS) -> None:
        self.rows = rows
        self.cols = cols
        self.cells: List[List[GriddleCell]] = [[GriddleCell() for _ in range(cols)] for _ in range(rows)]

    def cell(self, row: int, col: int) -> Optional[GriddleCell]:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            return None
        return self.cells[row][col]

    def positions(self) -> Iterator[Tuple[int, int, GriddleCell]]:
        for row, cells in enumerate(self.cells):
            for col, cell in enumerate(cells):
                yield row, col, cell

    def refresh_all(self, now: int) -> int:
        """Recompute every cached doneness level; returns how many changed."""
        return sum(1 for _, _, cell in self.positions() if refresh(cell, now))

    def clear(self) -> None:
        for _, _, cell in self.positions():
            cell.reset()
