"""TakoyakiSession: the single owner of all match state.

The griddle, the plate pool, the customer slot, the level, the score and the
statistics all live here and change only through the methods below. Every
time-dependent method takes ``now`` in milliseconds; the engine never reads
a clock itself, so identical inputs and seed give identical matches.
"""
from __future__ import annotations

import logging
import math
import random
from dataclasses import asdict
from typing import Dict, List, Optional

from config import (
    COOKING_TICK_MS,
    COUNTDOWN_TICK_MS,
    CUSTOMER_RESPAWN_DELAY_MS,
    DIFFICULTY_CURVE,
    EVENT_LOG_SIZE,
    MATCH_DURATION_MS,
    PATIENCE_MAX,
    PATIENCE_STEP,
    PATIENCE_TICK_MS,
    STARTING_LEVEL,
    TOPPINGS_FILE,
)
from takoyaki import griddle as griddle_ops
from takoyaki.cooking import classify
from takoyaki.entities import (
    Customer,
    CustomerOrder,
    MatchPhase,
    Mood,
    SessionStats,
    Tool,
    Topping,
)
from takoyaki.griddle import Griddle
from takoyaki.orders import generate_order
from takoyaki.plates import PlatePool, add_sauce, add_topping
from takoyaki.scoring import (
    ServeOutcome,
    count_servable,
    mood_for_patience,
    mood_message,
    rating_for_score,
    reconcile,
)
from topping_catalog import load_topping_catalog

logger = logging.getLogger(__name__)

TOPPINGS = load_topping_catalog(TOPPINGS_FILE)

TOPPING_TOOLS: Dict[Tool, Topping] = {
    Tool.NEGI: Topping.NEGI,
    Tool.KATSUOBUSHI: Topping.KATSUOBUSHI,
    Tool.NORI: Topping.NORI,
}


def format_time(remaining_ms: int) -> str:
    """``M:SS``, rounding partial seconds up so 0:00 only shows at the end."""
    total_seconds = max(0, math.ceil(remaining_ms / 1000))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_remaining_order(order: CustomerOrder) -> str:
    lines = ["Remaining order"]
    for key, entry in TOPPINGS.items():
        count = order.remaining_topping_breakdown.get(key)
        if count > 0:
            lines.append(f"{entry['short_label']} : {count}")
    return "\n".join(lines)


class TakoyakiSession:
    """One match of Takoyaki Tycoon.

    Lifecycle: ``not_started`` -> ``running`` (:meth:`start_match`) ->
    ``ended`` (countdown reaches zero or :meth:`stop_match`). Once ended every
    tick and player action is a no-op until the next :meth:`start_match`.
    """

    def __init__(self, seed: int = 7, curve: Optional[Dict] = None) -> None:
        self.rng = random.Random(seed)
        self.curve: Dict = curve or DIFFICULTY_CURVE
        self.reset_session()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset_session(self) -> None:
        self.griddle = Griddle()
        self.plates = PlatePool()
        self.tool: Tool = Tool.BATTER
        self.customer: Optional[Customer] = None
        self.customers_spawned: int = 0
        self.phase: MatchPhase = MatchPhase.NOT_STARTED
        self.level: int = STARTING_LEVEL
        self.score: int = 0
        self.stats = SessionStats()
        self.started_at: Optional[int] = None
        self.remaining_ms: int = MATCH_DURATION_MS
        self.next_spawn_at: int = 0
        self._last_cooking_tick: int = 0
        self._last_patience_tick: int = 0
        self._last_countdown_tick: int = 0
        self.event_log: List[str] = []

    @property
    def is_running(self) -> bool:
        return self.phase == MatchPhase.RUNNING

    def start_match(self, now: int) -> None:
        self.reset_session()
        self.phase = MatchPhase.RUNNING
        self.started_at = now
        self._last_cooking_tick = now
        self._last_patience_tick = now
        self._last_countdown_tick = now
        self.next_spawn_at = now
        self._log_event("Match started")
        self.spawn_customer(now)

    def stop_match(self) -> bool:
        if not self.is_running:
            return False
        self._end_match()
        return True

    def _end_match(self) -> None:
        self.phase = MatchPhase.ENDED
        self.customer = None
        self._log_event(f"Match over: {self.score} pts ({rating_for_score(self.score)})")

    def _log_event(self, message: str) -> None:
        logger.debug(message)
        self.event_log.append(message)
        self.event_log = self.event_log[-EVENT_LOG_SIZE:]

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def spawn_customer(self, now: int) -> bool:
        if not self.is_running or self.customer is not None:
            return False
        if now < self.next_spawn_at:
            return False
        self.customers_spawned += 1
        self.customer = Customer(
            id=f"customer_{self.customers_spawned}",
            order=generate_order(self.level, self.rng, self.curve),
            patience=PATIENCE_MAX,
        )
        self._log_event(f"{self.customer.id} wants {self.customer.order.total_quantity} takoyaki")
        return True

    def _release_customer(self, now: int) -> None:
        self.customer = None
        self.next_spawn_at = now + CUSTOMER_RESPAWN_DELAY_MS

    @property
    def current_mood(self) -> Optional[Mood]:
        if self.customer is None:
            return None
        return mood_for_patience(self.customer.patience)

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def tick_cooking(self, now: int) -> int:
        if not self.is_running:
            return 0
        return self.griddle.refresh_all(now)

    def tick_patience(self, now: int) -> bool:
        """Age the current customer; returns ``True`` if they walked out."""
        if not self.is_running or self.customer is None:
            return False
        self.customer.patience -= PATIENCE_STEP
        if self.customer.patience > 0:
            return False
        self.stats.angry_customers += 1
        self.stats.angry_departures += 1
        self._log_event(f"{self.customer.id} left angry")
        self._release_customer(now)
        return True

    def remaining_time(self, now: int) -> int:
        if self.started_at is None:
            return MATCH_DURATION_MS
        return max(0, MATCH_DURATION_MS - (now - self.started_at))

    def tick_countdown(self, now: int) -> bool:
        """Advance the match clock; returns ``True`` once the match has ended."""
        if self.phase == MatchPhase.ENDED:
            return True
        if not self.is_running:
            return False
        self.remaining_ms = self.remaining_time(now)
        if self.remaining_ms <= 0:
            self._end_match()
            return True
        return False

    def update(self, now: int) -> None:
        """Fire every fixed-interval tick that is due at ``now``."""
        if not self.is_running:
            return
        if now - self._last_cooking_tick >= COOKING_TICK_MS:
            self._last_cooking_tick = now
            self.tick_cooking(now)
        while now - self._last_patience_tick >= PATIENCE_TICK_MS:
            self._last_patience_tick += PATIENCE_TICK_MS
            self.tick_patience(self._last_patience_tick)
        if now - self._last_countdown_tick >= COUNTDOWN_TICK_MS:
            self._last_countdown_tick = now
            if self.tick_countdown(now):
                return
        if self.customer is None:
            self.spawn_customer(now)

    @property
    def formatted_time(self) -> str:
        return format_time(self.remaining_ms)

    # ------------------------------------------------------------------
    # Griddle actions
    # ------------------------------------------------------------------

    def add_batter(self, row: int, col: int, now: int) -> bool:
        cell = self.griddle.cell(row, col)
        if not self.is_running or cell is None:
            return False
        return griddle_ops.add_batter(cell, now)

    def add_octopus(self, row: int, col: int) -> bool:
        cell = self.griddle.cell(row, col)
        if not self.is_running or cell is None:
            return False
        return griddle_ops.add_octopus(cell)

    def flip_or_move(self, row: int, col: int, now: int) -> str:
        cell = self.griddle.cell(row, col)
        if not self.is_running or cell is None:
            return ""
        action = griddle_ops.use_stick(cell, now, self.plates)
        if action == griddle_ops.PLATES_FULL:
            self._log_event(f"Plates are full (max {self.plates.capacity})")
        elif action == griddle_ops.DISCARDED:
            self.stats.items_discarded += 1
            self._log_event(f"Burnt takoyaki at [{row},{col}] thrown away")
        return action

    def discard(self, row: int, col: int, now: int) -> bool:
        cell = self.griddle.cell(row, col)
        if not self.is_running or cell is None:
            return False
        if not griddle_ops.discard(cell, now):
            return False
        self.stats.items_discarded += 1
        return True

    # ------------------------------------------------------------------
    # Plate actions
    # ------------------------------------------------------------------

    def add_sauce(self, index: int) -> bool:
        item = self.plates.get(index)
        if not self.is_running or item is None:
            return False
        return add_sauce(item)

    def add_topping(self, index: int, topping: Topping | str) -> bool:
        item = self.plates.get(index)
        if not self.is_running or item is None:
            return False
        return add_topping(item, topping)

    # ------------------------------------------------------------------
    # Tool dispatch
    # ------------------------------------------------------------------

    def select_tool(self, tool: Tool | str) -> bool:
        try:
            self.tool = Tool(tool)
        except ValueError:
            return False
        return True

    def click_cell(self, row: int, col: int, now: int) -> str:
        if self.tool == Tool.BATTER:
            return "batter" if self.add_batter(row, col, now) else ""
        if self.tool == Tool.OCTOPUS:
            return "octopus" if self.add_octopus(row, col) else ""
        if self.tool == Tool.STICK:
            return self.flip_or_move(row, col, now)
        return ""

    def click_plate(self, index: int) -> bool:
        if self.tool == Tool.SAUCE:
            return self.add_sauce(index)
        if self.tool in TOPPING_TOOLS:
            return self.add_topping(index, TOPPING_TOOLS[self.tool])
        return False

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    def attempt_serve(self, now: int, customer_mood: Optional[Mood] = None) -> ServeOutcome:
        """Hand the whole plate pool to the current customer.

        ``customer_mood`` is the mood the view is showing; it defaults to the
        mood implied by the customer's patience and only matters when the
        serve looks like it completes the order.
        """
        if not self.is_running:
            return ServeOutcome(success=False, message="The shop is closed.")
        customer = self.customer
        if customer is None:
            return ServeOutcome(success=False, message="No customer is waiting.")
        if not self.plates.items:
            return ServeOutcome(success=False, message="There is nothing to serve.")

        order = customer.order
        will_complete = order.remaining_quantity <= count_servable(self.plates.items)
        final_mood = customer_mood if customer_mood is not None else mood_for_patience(customer.patience)
        result = reconcile(
            order,
            self.plates.items,
            customer.patience,
            final_mood if will_complete else None,
            will_complete,
        )

        order.remaining_quantity -= result.correct_count
        for topping, tally in result.breakdown.tallies.items():
            order.remaining_topping_breakdown.add(topping, -tally.correct)
        self.score += result.score
        self.plates.take(result.served_count)
        self.stats.items_served += result.served_count
        self.stats.items_correct += result.correct_count

        if not order.is_complete:
            message = (
                f"{result.correct_count} served right! "
                f"({order.remaining_quantity} to go) +{result.score} pts"
            )
            self._log_event(message)
            return ServeOutcome(success=True, message=message, result=result, order_completed=False)

        self.level += 1
        self.stats.served_customers += 1
        if result.mood == Mood.HAPPY:
            self.stats.happy_customers += 1
            self.stats.happy_bonus += result.bonus_score
        elif result.mood == Mood.NEUTRAL:
            self.stats.neutral_customers += 1
        else:
            self.stats.angry_customers += 1
        self._release_customer(now)

        message = f"Order complete! Level {self.level}! {result.correct_count} right, +{result.score} pts"
        if result.bonus_score:
            message += f" (bonus +{result.bonus_score})"
        self._log_event(message)
        return ServeOutcome(success=True, message=message, result=result, order_completed=True)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def summary(self) -> Dict:
        return {
            "score": self.score,
            "level": self.level,
            "rating": rating_for_score(self.score),
            **asdict(self.stats),
        }

    def snapshot(self, now: int) -> Dict:
        """JSON-compatible picture of everything the view draws."""
        cells = []
        for row, col, cell in self.griddle.positions():
            data = asdict(cell)
            data.update(row=row, col=col, cooking_level=classify(cell, now).value)
            cells.append(data)

        customer = None
        if self.customer is not None:
            mood = mood_for_patience(self.customer.patience)
            customer = {
                "id": self.customer.id,
                "patience": self.customer.patience,
                "mood": mood.value,
                "message": mood_message(mood),
                "total_quantity": self.customer.order.total_quantity,
                "remaining_quantity": self.customer.order.remaining_quantity,
                "topping_breakdown": self.customer.order.topping_breakdown.as_dict(),
                "remaining_topping_breakdown": self.customer.order.remaining_topping_breakdown.as_dict(),
                "order_text": format_remaining_order(self.customer.order),
            }

        return {
            "phase": self.phase.value,
            "tool": self.tool.value,
            "cells": cells,
            "plates": [
                {"cooking_level": item.cooking_level.value, "sauce": item.sauce, "topping": item.topping.value}
                for item in self.plates.items
            ],
            "customer": customer,
            "score": self.score,
            "level": self.level,
            "time": self.formatted_time,
            "stats": asdict(self.stats),
            "events": list(self.event_log),
        }
