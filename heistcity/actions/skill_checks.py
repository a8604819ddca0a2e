"""Hack / charm checks and opposed rolls."""

from __future__ import annotations

from heistcity.core.enums import SkillStat
from heistcity.core.equipment import effective_stats
from heistcity.core.models import CharacterToken
from heistcity.core.results import DiceRollResult, OpposedRollResult, SkillCheckResult
from heistcity.core.states import get_state_modifiers


def _stat_value(character: CharacterToken, stat: SkillStat) -> int:
    stats = effective_stats(character.stats, character.equipment)
    return stats.hack if stat == SkillStat.HACK else stats.con


def resolve_hack_check(
    character: CharacterToken,
    roll: DiceRollResult,
    difficulty: int = 0,
) -> SkillCheckResult:
    target = _stat_value(character, SkillStat.HACK) + difficulty + get_state_modifiers(character.state).hack
    return SkillCheckResult(success=roll.total > target, roll=roll, target_number=target)


def resolve_charm_check(
    character: CharacterToken,
    roll: DiceRollResult,
    difficulty: int = 0,
) -> SkillCheckResult:
    target = _stat_value(character, SkillStat.CON) + difficulty + get_state_modifiers(character.state).charm
    return SkillCheckResult(success=roll.total > target, roll=roll, target_number=target)


def resolve_opposed_roll(
    attacker: CharacterToken,
    defender: CharacterToken,
    stat: SkillStat,
    attacker_roll: DiceRollResult,
    defender_roll: DiceRollResult,
) -> OpposedRollResult:
    """Higher margin over the stat wins; ties go to the defender."""
    attacker_margin = attacker_roll.total - _stat_value(attacker, stat)
    defender_margin = defender_roll.total - _stat_value(defender, stat)
    winner = attacker.id if attacker_margin > defender_margin else defender.id
    return OpposedRollResult(
        winner_id=winner,
        attacker_margin=attacker_margin,
        defender_margin=defender_margin,
    )
