"""Tests for mood, reconciliation and scoring."""
from __future__ import annotations

import unittest

from takoyaki.entities import CookingLevel, CustomerOrder, Mood, PlatedItem, Topping, ToppingBreakdown
from takoyaki.scoring import (
    completion_bonus,
    count_servable,
    mood_for_patience,
    mood_message,
    rating_for_score,
    reconcile,
)


def _order(negi: int = 0, katsuobushi: int = 0, nori: int = 0, none: int = 0) -> CustomerOrder:
    return CustomerOrder.from_breakdown(ToppingBreakdown(negi, katsuobushi, nori, none))


def _item(topping: Topping = Topping.NONE, sauce: bool = True, level: CookingLevel = CookingLevel.PERFECT) -> PlatedItem:
    return PlatedItem(cooking_level=level, sauce=sauce, topping=topping)


class TestMood(unittest.TestCase):
    def test_thresholds(self):
        self.assertEqual(mood_for_patience(100), Mood.HAPPY)
        self.assertEqual(mood_for_patience(60), Mood.HAPPY)
        self.assertEqual(mood_for_patience(59), Mood.NEUTRAL)
        self.assertEqual(mood_for_patience(30), Mood.NEUTRAL)
        self.assertEqual(mood_for_patience(29), Mood.ANGRY)
        self.assertEqual(mood_for_patience(0), Mood.ANGRY)

    def test_every_mood_has_a_message(self):
        for mood in Mood:
            self.assertTrue(mood_message(mood))
        self.assertEqual(mood_message("angry"), mood_message(Mood.ANGRY))

    def test_completion_bonus_only_for_happy(self):
        self.assertEqual(completion_bonus(Mood.HAPPY, 4), 200)
        self.assertEqual(completion_bonus(Mood.NEUTRAL, 4), 0)
        self.assertEqual(completion_bonus(Mood.ANGRY, 4), 0)
        self.assertEqual(completion_bonus(None, 4), 0)


class TestReconcile(unittest.TestCase):
    def test_full_happy_completion_scores_450(self):
        order = _order(negi=1, katsuobushi=1, nori=1)
        items = [_item(Topping.NEGI), _item(Topping.KATSUOBUSHI), _item(Topping.NORI)]

        result = reconcile(order, items, 80, Mood.HAPPY, True)

        self.assertEqual(result.correct_count, 3)
        self.assertEqual(result.served_count, 3)
        self.assertEqual(result.score, 450)
        self.assertEqual(result.bonus_score, 150)
        self.assertEqual(result.mood, Mood.HAPPY)
        self.assertEqual(result.breakdown.sauce_issues, 0)
        self.assertEqual(result.breakdown.cooking_issues, 0)
        self.assertEqual(result.wasted_count, 0)

    def test_missing_sauce_is_reported_before_burnt(self):
        order = _order(none=2)
        result = reconcile(order, [_item(sauce=False, level=CookingLevel.BURNT)], 80)

        self.assertEqual(result.breakdown.sauce_issues, 1)
        self.assertEqual(result.breakdown.cooking_issues, 0)
        self.assertEqual(result.correct_count, 0)

    def test_sauced_burnt_item_is_a_cooking_issue(self):
        result = reconcile(_order(none=1), [_item(level=CookingLevel.BURNT)], 80)
        self.assertEqual(result.breakdown.sauce_issues, 0)
        self.assertEqual(result.breakdown.cooking_issues, 1)

    def test_over_requested_topping_is_capped_and_wasted(self):
        order = _order(negi=1, nori=2)
        items = [_item(Topping.NEGI), _item(Topping.NEGI), _item(Topping.NEGI)]

        result = reconcile(order, items, 80)

        self.assertEqual(result.breakdown.tally(Topping.NEGI).correct, 1)
        self.assertEqual(result.correct_count, 1)
        self.assertEqual(result.served_count, 3)
        self.assertEqual(result.breakdown.sauce_issues, 0)
        self.assertEqual(result.breakdown.cooking_issues, 0)
        self.assertEqual(result.wasted_count, 2)

    def test_plain_items_fill_the_plain_category(self):
        result = reconcile(_order(none=2, negi=1), [_item(), _item(), _item()], 80)
        self.assertEqual(result.breakdown.tally(Topping.NONE).correct, 2)
        self.assertEqual(result.correct_count, 2)

    def test_bonus_gating(self):
        order = _order(negi=1)
        items = [_item(Topping.NEGI)]
        self.assertEqual(reconcile(order, items, 80, Mood.HAPPY, True).bonus_score, 50)
        for mood, completing in (
            (Mood.HAPPY, False),
            (Mood.NEUTRAL, True),
            (Mood.ANGRY, True),
            (None, True),
            (Mood.NEUTRAL, False),
        ):
            result = reconcile(order, items, 80, mood, completing)
            self.assertEqual(result.bonus_score, 0, f"{mood} {completing}")
            self.assertEqual(result.score, 100)

    def test_mood_ignores_accuracy(self):
        wrong = reconcile(_order(negi=2), [_item(Topping.NORI)], 80)
        self.assertEqual(wrong.correct_count, 0)
        self.assertEqual(wrong.mood, Mood.HAPPY)

        right = reconcile(_order(negi=1), [_item(Topping.NEGI)], 10)
        self.assertEqual(right.correct_count, 1)
        self.assertEqual(right.mood, Mood.ANGRY)

    def test_empty_input(self):
        result = reconcile(_order(negi=1), [], 80, Mood.HAPPY, False)
        self.assertEqual(result.correct_count, 0)
        self.assertEqual(result.served_count, 0)
        self.assertEqual(result.score, 0)
        self.assertEqual(result.breakdown.sauce_issues, 0)
        self.assertEqual(result.breakdown.cooking_issues, 0)

    def test_inputs_are_not_mutated(self):
        order = _order(negi=1, none=1)
        items = [_item(Topping.NEGI), _item()]
        reconcile(order, items, 80, Mood.HAPPY, True)
        self.assertEqual(order.remaining_quantity, 2)
        self.assertEqual(order.remaining_topping_breakdown, ToppingBreakdown(negi=1, none=1))
        self.assertEqual(len(items), 2)

    def test_requested_counts_come_from_remaining_breakdown(self):
        order = _order(negi=3)
        order.remaining_topping_breakdown.set(Topping.NEGI, 1)
        order.remaining_quantity = 1
        result = reconcile(order, [_item(Topping.NEGI), _item(Topping.NEGI)], 80)
        self.assertEqual(result.breakdown.tally(Topping.NEGI).requested, 1)
        self.assertEqual(result.correct_count, 1)

    def test_breakdown_as_dict(self):
        result = reconcile(_order(nori=1), [_item(Topping.NORI), _item(sauce=False)], 80)
        data = result.breakdown.as_dict()
        self.assertEqual(data["nori"], {"requested": 1, "correct": 1})
        self.assertEqual(data["sauce_issues"], 1)
        self.assertEqual(data["cooking_issues"], 0)


def test_count_servable_skips_unsauced_and_burnt():
    items = [
        _item(),
        _item(sauce=False),
        _item(level=CookingLevel.BURNT),
        _item(Topping.NORI),
    ]
    assert count_servable(items) == 2


def test_rating_tiers():
    assert rating_for_score(2500) == "Takoyaki Master"
    assert rating_for_score(2000) == "Takoyaki Master"
    assert rating_for_score(1999) == "Great Cook"
    assert rating_for_score(1000) == "Solid Skills"
    assert rating_for_score(500) == "Getting There"
    assert rating_for_score(0) == "Keep Practicing"
