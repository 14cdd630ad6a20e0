"""Centralised configuration constants for Takoyaki Tycoon.

All times are integer milliseconds.
"""
from __future__ import annotations

from pathlib import Path

from difficulty_catalog import DIFFICULTY_FILE, load_difficulty_curve

# ---------------------------------------------------------------------------
# Griddle / display
# ---------------------------------------------------------------------------
GRIDDLE_ROWS: int = 3
GRIDDLE_COLS: int = 3
CELL: int = 96

# ---------------------------------------------------------------------------
# File paths
# ---------------------------------------------------------------------------
TOPPINGS_FILE: Path = Path("data/toppings.json")

# ---------------------------------------------------------------------------
# Cooking clock thresholds (elapsed time since batter was poured)
# ---------------------------------------------------------------------------
PERFECT_TIME_MS: int = 5000
BURNT_TIME_MS: int = 10000

# ---------------------------------------------------------------------------
# Plate pool
# ---------------------------------------------------------------------------
PLATE_CAPACITY: int = 10

# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
PATIENCE_MAX: int = 100
PATIENCE_STEP: int = 1                 # patience lost per patience tick
CUSTOMER_RESPAWN_DELAY_MS: int = 1000  # empty-slot pause after a customer leaves

# Mood is a pure function of patience: >= HAPPY is happy, >= NEUTRAL is neutral
MOOD_HAPPY_MIN_PATIENCE: int = 60
MOOD_NEUTRAL_MIN_PATIENCE: int = 30

# ---------------------------------------------------------------------------
# Tick intervals
# ---------------------------------------------------------------------------
COOKING_TICK_MS: int = 100
PATIENCE_TICK_MS: int = 1000
COUNTDOWN_TICK_MS: int = 1000

# ---------------------------------------------------------------------------
# Match
# ---------------------------------------------------------------------------
MATCH_DURATION_MS: int = 180_000
STARTING_LEVEL: int = 1
EVENT_LOG_SIZE: int = 12

# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------
POINTS_PER_CORRECT: int = 100
BONUS_PER_ITEM: int = 50               # per item of the whole order, happy completions only

# Final score → rating title, checked top-down
RATING_TIERS: list[tuple[int, str]] = [
    (2000, "Takoyaki Master"),
    (1500, "Great Cook"),
    (1000, "Solid Skills"),
    (500, "Getting There"),
    (0, "Keep Practicing"),
]

# ---------------------------------------------------------------------------
# Difficulty curve (level → order size and topping complexity)
# Loaded from the data-driven difficulty catalog with safe defaults.
# ---------------------------------------------------------------------------
DIFFICULTY_CURVE: dict[str, str | int | float] = load_difficulty_curve(DIFFICULTY_FILE)
