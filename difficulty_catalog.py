from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable

DIFFICULTY_FILE = Path("data/difficulty.json")
CURVE_ID_RE = re.compile(r"^[a-z][a-z0-9_]*$")
DEFAULT_CURVE_KEY = "standard"


@dataclass(frozen=True)
class DifficultyCurve:
    """Coefficients of the level → order size / topping complexity curve.

    ``min_quantity = min(min_base + level // min_divisor, min_cap)``,
    ``max_quantity = min(max_base + level * max_step, max_cap)`` and
    ``complexity = min(complexity_base + (level - 1) * complexity_step, complexity_cap)``.
    Orders whose complexity is at or below ``seed_threshold`` get one seeded
    unit before the random spread.
    """

    key: str
    display_name: str
    min_base: int = 3
    min_divisor: int = 2
    min_cap: int = 15
    max_base: int = 6
    max_step: int = 2
    max_cap: int = 27
    complexity_base: float = 0.2
    complexity_step: float = 0.08
    complexity_cap: float = 1.0
    seed_threshold: float = 0.3

    def to_runtime_dict(self) -> Dict[str, str | int | float]:
        return {
            "display_name": self.display_name,
            "min_base": self.min_base,
            "min_divisor": self.min_divisor,
            "min_cap": self.min_cap,
            "max_base": self.max_base,
            "max_step": self.max_step,
            "max_cap": self.max_cap,
            "complexity_base": self.complexity_base,
            "complexity_step": self.complexity_step,
            "complexity_cap": self.complexity_cap,
            "seed_threshold": self.seed_threshold,
        }


DEFAULT_DIFFICULTY_CURVES: Dict[str, DifficultyCurve] = {
    DEFAULT_CURVE_KEY: DifficultyCurve(key=DEFAULT_CURVE_KEY, display_name="Standard"),
}

_INT_FIELDS = ("min_base", "min_divisor", "min_cap", "max_base", "max_step", "max_cap")
_FLOAT_FIELDS = ("complexity_base", "complexity_step", "complexity_cap", "seed_threshold")


def _coerce_int(value: Any, *, minimum: int) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    else:
        return None
    return result if result >= minimum else None


def _coerce_unit_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        return None
    return float(value)


def _parse_curve_entry(key: str, entry: Dict[str, Any]) -> DifficultyCurve | None:
    if not isinstance(key, str) or not CURVE_ID_RE.fullmatch(key):
        return None

    display_name = entry.get("display_name")
    if not isinstance(display_name, str) or not display_name.strip():
        return None

    defaults = DifficultyCurve(key=key, display_name=display_name)
    values: Dict[str, int | float] = {}
    for name in _INT_FIELDS:
        # divisor 0 would divide by zero; the others may start at 0
        parsed = _coerce_int(entry.get(name, getattr(defaults, name)), minimum=1 if name == "min_divisor" else 0)
        if parsed is None:
            return None
        values[name] = parsed
    for name in _FLOAT_FIELDS:
        parsed_float = _coerce_unit_float(entry.get(name, getattr(defaults, name)))
        if parsed_float is None:
            return None
        values[name] = parsed_float

    if values["min_cap"] < 1 or values["max_cap"] < values["min_cap"]:
        return None

    return DifficultyCurve(key=key, display_name=display_name.strip(), **values)


def _ordered_runtime_catalog(curves: Iterable[DifficultyCurve]) -> Dict[str, Dict[str, str | int | float]]:
    ordered = sorted(curves, key=lambda curve: curve.key)
    return {curve.key: curve.to_runtime_dict() for curve in ordered}


def load_difficulty_catalog(path: Path = DIFFICULTY_FILE) -> Dict[str, Dict[str, str | int | float]]:
    defaults = _ordered_runtime_catalog(DEFAULT_DIFFICULTY_CURVES.values())
    if not path.exists():
        return defaults

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return defaults

    if not isinstance(raw, dict):
        return defaults

    curves: Dict[str, DifficultyCurve] = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            continue
        curve = _parse_curve_entry(key, entry)
        if curve is None:
            continue
        curves[key] = curve

    if not curves:
        return defaults

    return _ordered_runtime_catalog(curves.values())


def load_difficulty_curve(path: Path = DIFFICULTY_FILE, key: str = DEFAULT_CURVE_KEY) -> Dict[str, str | int | float]:
    """Return the named curve, or the first available one when the key is unknown."""
    catalog = load_difficulty_catalog(path)
    if key in catalog:
        return catalog[key]
    return catalog[next(iter(catalog))]
