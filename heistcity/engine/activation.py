"""Per-turn action slots.

Each character records up to three actions per activation.  Repeating an
action raises its difficulty by one for every earlier use this turn.
"""

from __future__ import annotations

from dataclasses import replace

from heistcity.core.enums import CharacterState
from heistcity.core.models import CharacterToken
from heistcity.engine.turns import TurnState

ACTION_SLOTS = 3


def get_remaining_slots(character: CharacterToken) -> int:
    return max(0, ACTION_SLOTS - len(character.actions))


def get_first_empty_slot(character: CharacterToken) -> int:
    """Index of the next free slot, or -1 when all slots are used."""
    used = len(character.actions)
    return used if used < ACTION_SLOTS else -1


def can_activate(character: CharacterToken, turn: TurnState) -> bool:
    if character.state == CharacterState.UNCONSCIOUS:
        return False
    if character.exhausted:
        return False
    return turn.needs_activation(character.id)


def get_repeat_penalty(character: CharacterToken, action_id: str) -> int:
    return sum(1 for a in character.actions if action_id in a)


def record_action(character: CharacterToken, action_id: str) -> CharacterToken:
    """Write *action_id* into the first free slot.

    Raises ``ValueError`` when every slot is already used.
    """
    if get_first_empty_slot(character) < 0:
        raise ValueError(f"{character.display_name} has no action slots left")
    return replace(character, actions=character.actions + (action_id,))
