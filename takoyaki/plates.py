"""Plate pool: finished balls waiting to be dressed and served."""
from __future__ import annotations

from typing import List, Optional

from config import PLATE_CAPACITY
from takoyaki.entities import APPLICABLE_TOPPINGS, CookingLevel, PlatedItem, Topping


class PlatePool:
    """Bounded, ordered store of :class:`PlatedItem`.

    Dressing is first-write-wins: sauce and topping can each be set once and
    never removed, and a topping needs sauce underneath it.
    """

    def __init__(self, capacity: int = PLATE_CAPACITY) -> None:
        self.capacity = capacity
        self.items: List[PlatedItem] = []

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.capacity

    def get(self, index: int) -> Optional[PlatedItem]:
        if not 0 <= index < len(self.items):
            return None
        return self.items[index]

    def add(self, cooking_level: CookingLevel = CookingLevel.PERFECT) -> Optional[PlatedItem]:
        """Append a fresh, undressed item; ``None`` when the pool is full."""
        if self.is_full:
            return None
        item = PlatedItem(cooking_level=cooking_level)
        self.items.append(item)
        return item

    def take(self, count: int) -> List[PlatedItem]:
        """Remove and return up to ``count`` items from the front."""
        taken = self.items[:count]
        del self.items[:count]
        return taken

    def clear(self) -> None:
        self.items.clear()


def add_sauce(item: PlatedItem) -> bool:
    if item.sauce:
        return False
    item.sauce = True
    return True


def add_topping(item: PlatedItem, topping: Topping | str) -> bool:
    try:
        topping = Topping(topping)
    except ValueError:
        return False
    if topping not in APPLICABLE_TOPPINGS:
        return False
    if not item.sauce or item.topping != Topping.NONE:
        return False
    item.topping = topping
    return True
