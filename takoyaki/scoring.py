"""Mood, order reconciliation and scoring.

Reconciliation matches a batch of plated items against a customer's
remaining order. It never mutates its inputs; the session applies the
returned counts to the order, the plate pool and the running score.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from config import (
    BONUS_PER_ITEM,
    MOOD_HAPPY_MIN_PATIENCE,
    MOOD_NEUTRAL_MIN_PATIENCE,
    POINTS_PER_CORRECT,
    RATING_TIERS,
)
from takoyaki.entities import CookingLevel, CustomerOrder, Mood, PlatedItem, Topping

MOOD_MESSAGES: Dict[Mood, str] = {
    Mood.HAPPY: "Mmm, these are going to be delicious!",
    Mood.NEUTRAL: "Are they ready yet?",
    Mood.ANGRY: "Hurry up already!",
}


def mood_for_patience(patience: float) -> Mood:
    if patience >= MOOD_HAPPY_MIN_PATIENCE:
        return Mood.HAPPY
    if patience >= MOOD_NEUTRAL_MIN_PATIENCE:
        return Mood.NEUTRAL
    return Mood.ANGRY


def mood_message(mood: Mood) -> str:
    return MOOD_MESSAGES[Mood(mood)]


def completion_bonus(mood: Optional[Mood], total_quantity: int) -> int:
    """Only happy completions earn a bonus; neutral and angry earn nothing."""
    if mood == Mood.HAPPY:
        return total_quantity * BONUS_PER_ITEM
    return 0


def rating_for_score(score: int) -> str:
    for threshold, title in RATING_TIERS:
        if score >= threshold:
            return title
    return RATING_TIERS[-1][1]


@dataclass
class ToppingTally:
    requested: int
    correct: int = 0


@dataclass
class ServeBreakdown:
    tallies: Dict[Topping, ToppingTally]
    sauce_issues: int = 0
    cooking_issues: int = 0

    def tally(self, topping: Topping | str) -> ToppingTally:
        return self.tallies[Topping(topping)]

    def as_dict(self) -> Dict[str, Dict[str, int] | int]:
        data: Dict[str, Dict[str, int] | int] = {
            topping.value: {"requested": tally.requested, "correct": tally.correct}
            for topping, tally in self.tallies.items()
        }
        data["sauce_issues"] = self.sauce_issues
        data["cooking_issues"] = self.cooking_issues
        return data


@dataclass
class ReconciliationResult:
    correct_count: int
    served_count: int
    mood: Mood
    score: int
    bonus_score: int
    breakdown: ServeBreakdown

    @property
    def wasted_count(self) -> int:
        """Items that were neither correct nor a defect."""
        defects = self.breakdown.sauce_issues + self.breakdown.cooking_issues
        return self.served_count - self.correct_count - defects


@dataclass
class ServeOutcome:
    """What a serve attempt returns to the view."""

    success: bool
    message: str
    result: Optional[ReconciliationResult] = None
    order_completed: bool = False


def count_servable(items: Sequence[PlatedItem]) -> int:
    """Items that could count toward an order: sauced and perfectly cooked."""
    return sum(1 for item in items if item.sauce and item.cooking_level == CookingLevel.PERFECT)


def reconcile(
    order: CustomerOrder,
    plated_items: Sequence[PlatedItem],
    current_patience: float,
    final_mood: Optional[Mood] = None,
    is_order_completing: bool = False,
) -> ReconciliationResult:
    """Match ``plated_items`` against the remaining order, in sequence order.

    A missing sauce is reported before a bad cooking level. A sauced, perfect
    item whose topping category is already satisfied (or was never ordered)
    is silently wasted: it is neither correct nor a defect.
    """
    breakdown = ServeBreakdown(
        tallies={
            topping: ToppingTally(requested=order.remaining_topping_breakdown.get(topping))
            for topping in Topping
        }
    )

    for item in plated_items:
        if not item.sauce:
            breakdown.sauce_issues += 1
            continue
        if item.cooking_level != CookingLevel.PERFECT:
            breakdown.cooking_issues += 1
            continue
        tally = breakdown.tally(item.topping or Topping.NONE)
        if tally.correct < tally.requested:
            tally.correct += 1

    correct_count = sum(tally.correct for tally in breakdown.tallies.values())
    base_score = correct_count * POINTS_PER_CORRECT
    bonus_score = completion_bonus(final_mood, order.total_quantity) if is_order_completing else 0

    return ReconciliationResult(
        correct_count=correct_count,
        served_count=len(plated_items),
        mood=mood_for_patience(current_patience),
        score=base_score + bonus_score,
        bonus_score=bonus_score,
        breakdown=breakdown,
    )
