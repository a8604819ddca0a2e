"""Character state rules: per-state modifiers and state transitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Literal, Mapping

from heistcity.core.enums import CharacterState
from heistcity.core.equipment import get_equipment_by_id
from heistcity.core.models import CharacterToken

logger = logging.getLogger(__name__)

WAKE_UP_WOUNDS = 4

ActionOutcome = Literal["hit", "miss", "success", "fail"]


@dataclass(frozen=True, slots=True)
class StateModifiers:
    """Modifiers a state applies. Negative hit/hack/charm values lower the target number."""

    hit: int = 0
    damage: int = 0
    defense: int = 0
    hack: int = 0
    charm: int = 0


STATE_MODIFIERS: Mapping[CharacterState, StateModifiers] = MappingProxyType({
    CharacterState.OVERT: StateModifiers(defense=1),
    CharacterState.HIDDEN: StateModifiers(hit=-1, damage=1, hack=-1),
    CharacterState.DISGUISED: StateModifiers(hit=-1, damage=1, charm=-1),  # melee only
    CharacterState.STUNNED: StateModifiers(),
    CharacterState.UNCONSCIOUS: StateModifiers(),
})


def get_state_modifiers(state: CharacterState) -> StateModifiers:
    return STATE_MODIFIERS[state]


def preserves_hidden(weapon_id: str | None) -> bool:
    weapon = get_equipment_by_id(weapon_id)
    return weapon is not None and weapon.notice_hidden


def preserves_disguised(weapon_id: str | None) -> bool:
    weapon = get_equipment_by_id(weapon_id)
    return weapon is not None and weapon.notice_disguised


def wound_state_transition(
    character: CharacterToken,
    wounds_after: int,
    final_damage: int,
) -> CharacterState | None:
    """State a character falls into after taking *final_damage*, or None.

    Only a damaging hit that leaves the character at 0 wounds changes
    state: Stunned the first time, Unconscious once already downed.
    """
    if final_damage <= 0 or wounds_after > 0:
        return None
    if character.was_stunned or character.state == CharacterState.STUNNED:
        return CharacterState.UNCONSCIOUS
    return CharacterState.STUNNED


def ability_state_transition(
    character: CharacterToken,
    action_id: str,
    weapon_id: str | None = None,
    outcome: ActionOutcome | None = None,
) -> CharacterState | None:
    """State change triggered by an ability or attack, or None."""
    current = character.state

    match action_id:
        case "Face Off":
            return CharacterState.DISGUISED
        case "Ninja Vanish":
            return CharacterState.HIDDEN
        case "Go Loud":
            if current in (CharacterState.HIDDEN, CharacterState.DISGUISED):
                return CharacterState.OVERT
            return None
        case "Wake Up":
            if current == CharacterState.STUNNED:
                return CharacterState.OVERT
            return None

    # Attacking breaks stealth unless the weapon is quiet enough.
    if weapon_id and outcome in ("hit", "miss"):
        if current == CharacterState.HIDDEN and not preserves_hidden(weapon_id):
            return CharacterState.OVERT
        if current == CharacterState.DISGUISED and not preserves_disguised(weapon_id):
            return CharacterState.OVERT
    return None


def apply_state_transition(character: CharacterToken, new_state: CharacterState) -> CharacterToken:
    """Return *character* in *new_state*; waking from Stunned restores wounds."""
    if new_state == CharacterState.OVERT and character.state == CharacterState.STUNNED:
        stats = character.stats.with_wounds(WAKE_UP_WOUNDS)
        return replace(character, state=new_state, stats=stats)
    return replace(character, state=new_state)
