"""Action resolution: combat and skill checks."""

from heistcity.actions.combat import (
    apply_combat_result,
    apply_damage,
    expected_damage,
    resolve_combat,
    resolve_defense_save,
    resolve_melee_attack,
    resolve_ranged_attack,
)
from heistcity.actions.skill_checks import resolve_charm_check, resolve_hack_check, resolve_opposed_roll

__all__ = [
    "apply_combat_result",
    "apply_damage",
    "expected_damage",
    "resolve_charm_check",
    "resolve_combat",
    "resolve_defense_save",
    "resolve_hack_check",
    "resolve_melee_attack",
    "resolve_opposed_roll",
    "resolve_ranged_attack",
]
