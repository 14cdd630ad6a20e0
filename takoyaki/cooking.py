"""Cooking clock: doneness as a pure function of elapsed time.

Flipping is cosmetic and never changes the timing.
"""
from __future__ import annotations

from config import BURNT_TIME_MS, PERFECT_TIME_MS
from takoyaki.entities import CookingLevel, GriddleCell


def classify(cell: GriddleCell, now: int) -> CookingLevel:
    """Return the doneness of ``cell`` at ``now``.

    Boundary instants belong to the later category. Cells without batter or
    without a recorded start time are always raw.
    """
    if not cell.has_batter or cell.cooking_start_time is None:
        return CookingLevel.RAW

    elapsed = now - cell.cooking_start_time
    if elapsed < PERFECT_TIME_MS:
        return CookingLevel.RAW
    if elapsed < BURNT_TIME_MS:
        return CookingLevel.PERFECT
    return CookingLevel.BURNT


def refresh(cell: GriddleCell, now: int) -> bool:
    """Write the live classification back into the cell cache.

    Returns ``True`` when the cached level changed.
    """
    level = classify(cell, now)
    if level == cell.cooking_level:
        return False
    cell.cooking_level = level
    return True
