"""Tests for the cooking clock."""
from __future__ import annotations

import unittest

from config import BURNT_TIME_MS, PERFECT_TIME_MS
from takoyaki.cooking import classify, refresh
from takoyaki.entities import CookingLevel, GriddleCell

START = 1000


def _cell(**overrides) -> GriddleCell:
    fields = {"has_batter": True, "cooking_start_time": START}
    fields.update(overrides)
    return GriddleCell(**fields)


class TestClassifyGuards(unittest.TestCase):
    def test_no_batter_is_raw(self):
        cell = _cell(has_batter=False)
        self.assertEqual(classify(cell, START + PERFECT_TIME_MS), CookingLevel.RAW)

    def test_no_start_time_is_raw(self):
        cell = _cell(cooking_start_time=None)
        self.assertEqual(classify(cell, START + BURNT_TIME_MS), CookingLevel.RAW)

    def test_empty_cell_is_raw_for_any_time(self):
        cell = GriddleCell()
        for now in (0, START, START + BURNT_TIME_MS * 10):
            self.assertEqual(classify(cell, now), CookingLevel.RAW)


class TestClassifyBoundaries(unittest.TestCase):
    def test_zero_elapsed_is_raw(self):
        self.assertEqual(classify(_cell(), START), CookingLevel.RAW)

    def test_one_ms_before_perfect_is_raw(self):
        self.assertEqual(classify(_cell(), START + PERFECT_TIME_MS - 1), CookingLevel.RAW)

    def test_exactly_perfect_time_is_perfect(self):
        self.assertEqual(classify(_cell(), START + PERFECT_TIME_MS), CookingLevel.PERFECT)

    def test_one_ms_before_burnt_is_perfect(self):
        self.assertEqual(classify(_cell(), START + BURNT_TIME_MS - 1), CookingLevel.PERFECT)

    def test_exactly_burnt_time_is_burnt(self):
        self.assertEqual(classify(_cell(), START + BURNT_TIME_MS), CookingLevel.BURNT)

    def test_long_after_burnt_stays_burnt(self):
        self.assertEqual(classify(_cell(), START + BURNT_TIME_MS + 10_000), CookingLevel.BURNT)

    def test_flip_does_not_change_timing(self):
        flipped = _cell(has_octopus=True, is_flipped=True)
        plain = _cell(has_octopus=True)
        for offset in (0, PERFECT_TIME_MS - 1, PERFECT_TIME_MS, BURNT_TIME_MS):
            self.assertEqual(classify(flipped, START + offset), classify(plain, START + offset))

    def test_classification_never_goes_backwards(self):
        order = [CookingLevel.RAW, CookingLevel.PERFECT, CookingLevel.BURNT]
        cell = _cell()
        ranks = [order.index(classify(cell, START + t)) for t in range(0, BURNT_TIME_MS + 2000, 250)]
        self.assertEqual(ranks, sorted(ranks))


class TestRefresh(unittest.TestCase):
    def test_refresh_writes_back_and_reports_change(self):
        cell = _cell()
        self.assertTrue(refresh(cell, START + PERFECT_TIME_MS))
        self.assertEqual(cell.cooking_level, CookingLevel.PERFECT)

    def test_refresh_reports_no_change(self):
        cell = _cell()
        self.assertFalse(refresh(cell, START + 10))
        self.assertEqual(cell.cooking_level, CookingLevel.RAW)
