"""Tests for 2d6 probability tables and roll providers."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from heistcity.core.results import DiceRollResult
from heistcity.systems.dice import (
    ROLL_COUNTS,
    all_2d6_outcomes,
    expected_save_reduction,
    expected_success_margin,
    probability_2d6,
    probability_2d6_gte,
)
from heistcity.systems.rng import scripted_rolls


class TestProbabilities:
    def test_roll_counts_cover_all_outcomes(self):
        assert sum(ROLL_COUNTS.values()) == 36
        totals = [r.total for r in all_2d6_outcomes()]
        assert len(totals) == 36
        for total, ways in ROLL_COUNTS.items():
            assert totals.count(total) == ways

    def test_strictly_greater(self):
        assert probability_2d6(7) == pytest.approx(15 / 36)
        assert probability_2d6(1) == 1.0
        assert probability_2d6(12) == 0.0
        assert probability_2d6(11) == pytest.approx(1 / 36)

    def test_greater_or_equal(self):
        assert probability_2d6_gte(7) == pytest.approx(21 / 36)
        assert probability_2d6_gte(2) == 1.0
        assert probability_2d6_gte(13) == 0.0
        assert probability_2d6_gte(12) == pytest.approx(1 / 36)

    def test_expected_margin(self):
        assert expected_success_margin(6) == pytest.approx(56 / 21)
        assert expected_success_margin(11) == pytest.approx(1.0)
        assert expected_success_margin(12) == 0.0

    def test_save_reduction_counts_the_free_point(self):
        assert expected_save_reduction(7) == pytest.approx(expected_success_margin(6))


class TestRollResults:
    def test_from_total(self):
        assert DiceRollResult.from_total(8) == DiceRollResult(6, 2)
        assert DiceRollResult.from_total(2) == DiceRollResult(1, 1)
        assert DiceRollResult.from_total(12).total == 12

    def test_from_total_rejects_impossible(self):
        with pytest.raises(ValueError):
            DiceRollResult.from_total(1)
        with pytest.raises(ValueError):
            DiceRollResult.from_total(13)

    def test_scripted_rolls_replay_in_order(self):
        provider = scripted_rolls([9, 3])
        assert provider().total == 9
        assert provider().total == 3
        with pytest.raises(RuntimeError):
            provider()

    def test_to_dict(self):
        assert DiceRollResult(4, 3).to_dict() == {"die1": 4, "die2": 3, "total": 7}
