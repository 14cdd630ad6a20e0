"""Order generator: randomized, level-scaled takoyaki orders."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Optional

from config import DIFFICULTY_CURVE
from takoyaki.entities import CustomerOrder, Topping, ToppingBreakdown

ORDER_TOPPINGS = (Topping.NEGI, Topping.KATSUOBUSHI, Topping.NORI, Topping.NONE)


@dataclass(frozen=True)
class LevelOrderConfig:
    min_quantity: int
    max_quantity: int
    topping_complexity: float


def level_order_config(level: int, curve: Optional[Dict] = None) -> LevelOrderConfig:
    """Order size range and topping complexity for ``level``.

    The three values are clamped independently, so ``min_quantity`` is only
    guaranteed not to exceed ``max_quantity`` for levels >= 1.
    """
    curve = curve or DIFFICULTY_CURVE
    min_quantity = min(int(curve["min_base"]) + level // int(curve["min_divisor"]), int(curve["min_cap"]))
    max_quantity = min(int(curve["max_base"]) + level * int(curve["max_step"]), int(curve["max_cap"]))
    complexity = min(
        float(curve["complexity_base"]) + (level - 1) * float(curve["complexity_step"]),
        float(curve["complexity_cap"]),
    )
    return LevelOrderConfig(min_quantity, max_quantity, complexity)


def distribute_toppings(
    total_quantity: int,
    complexity: float,
    rng: random.Random,
    curve: Optional[Dict] = None,
) -> ToppingBreakdown:
    """Spread ``total_quantity`` units over the four topping categories.

    Each unit lands in exactly one category, so the counts always sum to
    ``total_quantity``. Low-complexity orders seed one unit first.
    """
    curve = curve or DIFFICULTY_CURVE
    breakdown = ToppingBreakdown()
    remaining = total_quantity

    if remaining > 0 and complexity <= float(curve["seed_threshold"]):
        breakdown.add(rng.choice(ORDER_TOPPINGS))
        remaining -= 1

    while remaining > 0:
        breakdown.add(rng.choice(ORDER_TOPPINGS))
        remaining -= 1

    return breakdown


def generate_order(level: int, rng: random.Random, curve: Optional[Dict] = None) -> CustomerOrder:
    config = level_order_config(level, curve)
    total_quantity = rng.randint(config.min_quantity, max(config.min_quantity, config.max_quantity))
    breakdown = distribute_toppings(total_quantity, config.topping_complexity, rng, curve)
    return CustomerOrder.from_breakdown(breakdown)
