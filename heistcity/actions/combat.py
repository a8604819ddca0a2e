"""Combat resolution: attack roll, defense save, damage and wound states.

Pipeline: attack -> (on hit) defense save -> damage application.  Every
function is pure; results describe the outcome and callers apply it with
``apply_combat_result``.

Target numbers are "roll over": an attack hits on ``2d6 > target_number``.
A defense save succeeds on ``2d6 + state bonus + cover >= defense``.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from heistcity.core.enums import AttackType, CharacterState
from heistcity.core.equipment import effective_stats, get_equipment_by_id
from heistcity.core.models import CharacterToken
from heistcity.core.results import (
    AttackResult,
    CombatResult,
    DamageOutcome,
    DefenseResult,
    DiceRollResult,
)
from heistcity.core.states import get_state_modifiers, wound_state_transition
from heistcity.systems.dice import expected_save_reduction, probability_2d6, probability_2d6_gte

logger = logging.getLogger(__name__)

FIST_DAMAGE = 1
INTO_MELEE_PENALTY = 1


# ---------------------------------------------------------------------------
# Attack
# ---------------------------------------------------------------------------

def attack_target_number(
    attacker: CharacterToken,
    attack_type: AttackType,
    repeat_penalty: int = 0,
    into_melee: bool = False,
) -> int:
    stats = effective_stats(attacker.stats, attacker.equipment)
    mods = get_state_modifiers(attacker.state)

    if attack_type == AttackType.RANGED:
        target = stats.ballistic_skill
        if attacker.state == CharacterState.HIDDEN:
            target += mods.hit
        if into_melee:
            target += INTO_MELEE_PENALTY
    else:
        target = stats.melee_skill
        if attacker.state in (CharacterState.HIDDEN, CharacterState.DISGUISED):
            target += mods.hit
    return target + repeat_penalty


def attack_damage(
    attacker: CharacterToken,
    target: CharacterToken,
    weapon_id: str,
    attack_type: AttackType,
) -> int:
    """Damage dealt on a hit, before the defense save."""
    weapon = get_equipment_by_id(weapon_id)
    if attack_type == AttackType.RANGED:
        if weapon is None:
            return 0
        damage = weapon.damage
    else:
        damage = weapon.damage if weapon is not None else FIST_DAMAGE

    # Hidden first strike against an unhurt target.
    if attacker.state == CharacterState.HIDDEN and target.stats.at_full_wounds:
        damage += get_state_modifiers(CharacterState.HIDDEN).damage
    if attacker.state == CharacterState.DISGUISED and attack_type == AttackType.MELEE:
        damage += get_state_modifiers(CharacterState.DISGUISED).damage
    return damage


def _resolve_attack(
    attacker: CharacterToken,
    target: CharacterToken,
    weapon_id: str,
    roll: DiceRollResult,
    attack_type: AttackType,
    repeat_penalty: int,
    into_melee: bool,
) -> AttackResult:
    target_number = attack_target_number(attacker, attack_type, repeat_penalty, into_melee)
    hit = roll.total > target_number
    damage = attack_damage(attacker, target, weapon_id, attack_type) if hit else 0
    logger.debug(
        "%s %s attack on %s: rolled %d vs %d -> %s",
        attacker.id, attack_type.value, target.id, roll.total, target_number,
        "hit" if hit else "miss",
    )
    return AttackResult(
        hit=hit,
        roll=roll,
        target_number=target_number,
        damage=damage,
        weapon_id=weapon_id,
        attack_type=attack_type,
        attacker_state=attacker.state,
    )


def resolve_ranged_attack(
    attacker: CharacterToken,
    target: CharacterToken,
    weapon_id: str,
    roll: DiceRollResult,
    repeat_penalty: int = 0,
    into_melee: bool = False,
) -> AttackResult:
    return _resolve_attack(attacker, target, weapon_id, roll, AttackType.RANGED, repeat_penalty, into_melee)


def resolve_melee_attack(
    attacker: CharacterToken,
    target: CharacterToken,
    weapon_id: str,
    roll: DiceRollResult,
    repeat_penalty: int = 0,
) -> AttackResult:
    return _resolve_attack(attacker, target, weapon_id, roll, AttackType.MELEE, repeat_penalty, False)


# ---------------------------------------------------------------------------
# Defense & damage
# ---------------------------------------------------------------------------

def resolve_defense_save(
    defender: CharacterToken,
    incoming_damage: int,
    roll: DiceRollResult,
    cover_bonus: int = 0,
) -> DefenseResult:
    """Meeting the defense value prevents 1 damage, each point over prevents 1 more."""
    defense = effective_stats(defender.stats, defender.equipment).defense
    effective_roll = roll.total + get_state_modifiers(defender.state).defense + cover_bonus

    saved = effective_roll >= defense
    reduced = 1 + (effective_roll - defense) if saved else 0
    return DefenseResult(
        saved=saved,
        roll=roll,
        target_number=defense,
        damage_reduced=reduced,
        final_damage=max(0, incoming_damage - reduced),
    )


def apply_damage(target: CharacterToken, final_damage: int) -> tuple[CharacterToken, DamageOutcome]:
    """Return the damaged character and a summary of what changed.

    The victory point flag is raised only the first time a character who
    was never downed drops from positive wounds to zero.
    """
    wounds_before = target.stats.wounds
    wounds_after = max(0, wounds_before - final_damage)
    new_state = wound_state_transition(target, wounds_after, final_damage)

    updated = replace(target, stats=target.stats.with_wounds(wounds_after))
    if new_state is not None:
        updated = replace(updated, state=new_state, was_stunned=True)

    vp_awarded = wounds_before > 0 and wounds_after == 0 and not target.was_stunned
    if new_state is not None:
        logger.info("%s is now %s", target.display_name, new_state.value)

    return updated, DamageOutcome(
        wounds_after=wounds_after,
        state_after=updated.state,
        state_changed=new_state is not None,
        vp_awarded=vp_awarded,
    )


def finish_attack(
    target: CharacterToken,
    attack: AttackResult,
    defense_roll: DiceRollResult,
    cover_bonus: int = 0,
) -> CombatResult:
    """Defense and damage steps for an already-resolved attack."""
    if not attack.hit:
        return CombatResult(
            attack=attack,
            defense=None,
            target_wounds_after=target.stats.wounds,
            target_state_after=target.state,
            target_downed=False,
        )

    defense = resolve_defense_save(target, attack.damage, defense_roll, cover_bonus)
    _, outcome = apply_damage(target, defense.final_damage)
    return CombatResult(
        attack=attack,
        defense=defense,
        target_wounds_after=outcome.wounds_after,
        target_state_after=outcome.state_after,
        target_downed=outcome.vp_awarded,
    )


def resolve_combat(
    attacker: CharacterToken,
    target: CharacterToken,
    weapon_id: str,
    attack_roll: DiceRollResult,
    defense_roll: DiceRollResult,
    attack_type: AttackType,
    repeat_penalty: int = 0,
    into_melee: bool = False,
    cover_bonus: int = 0,
) -> CombatResult:
    """Full attack -> defense -> damage; a miss skips the defense roll."""
    attack = _resolve_attack(
        attacker, target, weapon_id, attack_roll, attack_type, repeat_penalty, into_melee,
    )
    return finish_attack(target, attack, defense_roll, cover_bonus)


def apply_combat_result(target: CharacterToken, result: CombatResult) -> CharacterToken:
    """Write a combat result's wounds and state onto *target*."""
    if result.defense is None:
        return target
    updated, _ = apply_damage(target, result.defense.final_damage)
    return updated


# ---------------------------------------------------------------------------
# Expected damage (dice-free planning)
# ---------------------------------------------------------------------------

def expected_damage_against(
    attack_target_number: int,
    base_damage: int,
    defender: CharacterToken,
    cover_bonus: int = 0,
) -> float:
    """P(hit) * max(0, damage - P(save) * average reduction on a save)."""
    p_hit = probability_2d6(attack_target_number)

    defense = effective_stats(defender.stats, defender.equipment).defense
    save_target = defense - get_state_modifiers(defender.state).defense - cover_bonus
    p_save = probability_2d6_gte(save_target)
    reduction = expected_save_reduction(save_target)

    return p_hit * max(0.0, base_damage - p_save * reduction)


def expected_damage(
    attacker: CharacterToken,
    target: CharacterToken,
    weapon_id: str,
    attack_type: AttackType,
    repeat_penalty: int = 0,
    into_melee: bool = False,
    cover_bonus: int = 0,
) -> float:
    if attack_type == AttackType.RANGED and get_equipment_by_id(weapon_id) is None:
        return 0.0
    target_number = attack_target_number(attacker, attack_type, repeat_penalty, into_melee)
    damage = attack_damage(attacker, target, weapon_id, attack_type)
    return expected_damage_against(target_number, damage, target, cover_bonus)
