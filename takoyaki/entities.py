"""Core enums and dataclasses for the Takoyaki Tycoon engine."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class CookingLevel(str, Enum):
    RAW = "raw"
    PERFECT = "perfect"
    BURNT = "burnt"


class Topping(str, Enum):
    """Topping categories; ``NONE`` is the plain category and is never applied."""

    NEGI = "negi"
    KATSUOBUSHI = "katsuobushi"
    NORI = "nori"
    NONE = "none"


APPLICABLE_TOPPINGS = (Topping.NEGI, Topping.KATSUOBUSHI, Topping.NORI)


class Mood(str, Enum):
    HAPPY = "happy"
    NEUTRAL = "neutral"
    ANGRY = "angry"


class MatchPhase(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    ENDED = "ended"


class Tool(str, Enum):
    BATTER = "batter"
    OCTOPUS = "octopus"
    STICK = "stick"
    SAUCE = "sauce"
    NEGI = "negi"
    KATSUOBUSHI = "katsuobushi"
    NORI = "nori"
    SERVE = "serve"


@dataclass
class GriddleCell:
    """A single slot on the griddle.

    ``cooking_level`` is a cache refreshed by the cooking tick; the source of
    truth is :func:`takoyaki.cooking.classify`.
    """

    has_batter: bool = False
    has_octopus: bool = False
    is_flipped: bool = False
    cooking_start_time: Optional[int] = None
    cooking_level: CookingLevel = CookingLevel.RAW
    is_moved_to_plate: bool = False

    def reset(self) -> None:
        self.has_batter = False
        self.has_octopus = False
        self.is_flipped = False
        self.cooking_start_time = None
        self.cooking_level = CookingLevel.RAW
        self.is_moved_to_plate = False

    @property
    def is_empty(self) -> bool:
        return not self.has_batter


@dataclass
class PlatedItem:
    """A finished ball sitting in the serving area."""

    cooking_level: CookingLevel = CookingLevel.PERFECT
    sauce: bool = False
    topping: Topping = Topping.NONE


@dataclass
class ToppingBreakdown:
    negi: int = 0
    katsuobushi: int = 0
    nori: int = 0
    none: int = 0

    def get(self, topping: Topping | str) -> int:
        return getattr(self, Topping(topping).value)

    def set(self, topping: Topping | str, value: int) -> None:
        setattr(self, Topping(topping).value, value)

    def add(self, topping: Topping | str, amount: int = 1) -> None:
        self.set(topping, self.get(topping) + amount)

    def total(self) -> int:
        return self.negi + self.katsuobushi + self.nori + self.none

    def copy(self) -> "ToppingBreakdown":
        return ToppingBreakdown(self.negi, self.katsuobushi, self.nori, self.none)

    def as_dict(self) -> Dict[str, int]:
        return {topping.value: self.get(topping) for topping in Topping}


@dataclass
class CustomerOrder:
    total_quantity: int
    remaining_quantity: int
    topping_breakdown: ToppingBreakdown
    remaining_topping_breakdown: ToppingBreakdown

    @classmethod
    def from_breakdown(cls, breakdown: ToppingBreakdown) -> "CustomerOrder":
        total = breakdown.total()
        return cls(
            total_quantity=total,
            remaining_quantity=total,
            topping_breakdown=breakdown,
            remaining_topping_breakdown=breakdown.copy(),
        )

    @property
    def is_complete(self) -> bool:
        return self.remaining_quantity <= 0


@dataclass
class Customer:
    id: str
    order: CustomerOrder
    patience: int = 100


@dataclass
class SessionStats:
    """Per-match customer outcome counters."""

    served_customers: int = 0
    happy_customers: int = 0
    neutral_customers: int = 0
    angry_customers: int = 0
    angry_departures: int = 0
    happy_bonus: int = 0
    items_served: int = 0
    items_correct: int = 0
    items_discarded: int = 0
