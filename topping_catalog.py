from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable

TOPPINGS_FILE = Path("data/toppings.json")
TOPPING_KEYS = ("negi", "katsuobushi", "nori", "none")
MAX_LABEL_LENGTH = 24


@dataclass(frozen=True)
class ToppingDefinition:
    key: str
    display_name: str
    short_label: str
    hud_order: int = 0

    def to_runtime_dict(self) -> Dict[str, str | int]:
        return {
            "display_name": self.display_name,
            "short_label": self.short_label,
            "hud_order": self.hud_order,
        }


DEFAULT_TOPPINGS: Dict[str, ToppingDefinition] = {
    "negi": ToppingDefinition("negi", "Green Onion", "Negi", 0),
    "katsuobushi": ToppingDefinition("katsuobushi", "Bonito Flakes", "Katsuo", 1),
    "nori": ToppingDefinition("nori", "Seaweed", "Nori", 2),
    "none": ToppingDefinition("none", "No Topping", "Plain", 3),
}


def _is_label(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip()) and len(value.strip()) <= MAX_LABEL_LENGTH


def _parse_topping_entry(key: str, entry: Dict[str, Any]) -> ToppingDefinition | None:
    if key not in TOPPING_KEYS:
        return None

    display_name = entry.get("display_name")
    short_label = entry.get("short_label", display_name)
    hud_order = entry.get("hud_order", DEFAULT_TOPPINGS[key].hud_order)

    if not _is_label(display_name) or not _is_label(short_label):
        return None
    if isinstance(hud_order, bool) or not isinstance(hud_order, int) or hud_order < 0:
        return None

    return ToppingDefinition(
        key=key,
        display_name=display_name.strip(),
        short_label=short_label.strip(),
        hud_order=hud_order,
    )


def _ordered_runtime_catalog(toppings: Iterable[ToppingDefinition]) -> Dict[str, Dict[str, str | int]]:
    ordered = sorted(toppings, key=lambda topping: (topping.hud_order, topping.key))
    return {topping.key: topping.to_runtime_dict() for topping in ordered}


def load_topping_catalog(path: Path = TOPPINGS_FILE) -> Dict[str, Dict[str, str | int]]:
    """Load topping labels; entries missing from the file keep their defaults.

    Every topping category always has an entry, so HUD code can index the
    result by any topping key.
    """
    defaults = _ordered_runtime_catalog(DEFAULT_TOPPINGS.values())
    if not path.exists():
        return defaults

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return defaults

    if not isinstance(raw, dict):
        return defaults

    merged: Dict[str, ToppingDefinition] = dict(DEFAULT_TOPPINGS)
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            continue
        topping = _parse_topping_entry(key, entry)
        if topping is None:
            continue
        merged[key] = topping

    return _ordered_runtime_catalog(merged.values())
