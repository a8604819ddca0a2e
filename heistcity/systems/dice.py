"""Exact 2d6 probability tables for dice-free planning."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from heistcity.core.results import DiceRollResult

# Ways to roll each total on 2d6 (out of 36).
ROLL_COUNTS: Mapping[int, int] = MappingProxyType({
    2: 1, 3: 2, 4: 3, 5: 4, 6: 5, 7: 6,
    8: 5, 9: 4, 10: 3, 11: 2, 12: 1,
})


def probability_2d6(target: int) -> float:
    """P(total > target)."""
    if target < 2:
        return 1.0
    if target >= 12:
        return 0.0
    ways = sum(ROLL_COUNTS[t] for t in range(target + 1, 13))
    return ways / 36


def probability_2d6_gte(target: int) -> float:
    """P(total >= target)."""
    if target <= 2:
        return 1.0
    if target > 12:
        return 0.0
    ways = sum(ROLL_COUNTS[t] for t in range(target, 13))
    return ways / 36


def expected_success_margin(target: int) -> float:
    """E[total - target | total > target]; 0 when success is impossible."""
    if target >= 12:
        return 0.0
    total_margin = 0
    total_ways = 0
    for roll in range(max(target + 1, 2), 13):
        ways = ROLL_COUNTS[roll]
        total_margin += (roll - target) * ways
        total_ways += ways
    return total_margin / total_ways if total_ways else 0.0


def expected_save_reduction(defense_target: int) -> float:
    """Average damage prevented by a successful save against *defense_target*.

    A save on ``roll >= T`` prevents ``1 + (roll - T)``, which equals the
    margin over ``T - 1``.
    """
    return expected_success_margin(defense_target - 1)


def all_2d6_outcomes() -> list[DiceRollResult]:
    return [DiceRollResult(d1, d2) for d1 in range(1, 7) for d2 in range(1, 7)]
