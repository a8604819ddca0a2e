"""Tests for character state modifiers and transitions."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from heistcity.core.enums import CharacterState
from heistcity.core.equipment import EquipmentItem, register_equipment
from heistcity.core.states import (
    WAKE_UP_WOUNDS,
    ability_state_transition,
    apply_state_transition,
    get_state_modifiers,
    wound_state_transition,
)
from tests.helpers.board import make_character

register_equipment(EquipmentItem(id="test-garrote", kind="Melee", damage=1, notice_hidden=True))
register_equipment(EquipmentItem(id="test-poison-pen", kind="Melee", damage=1, notice_disguised=True))


class TestModifiers:
    def test_overt_defends_better(self):
        assert get_state_modifiers(CharacterState.OVERT).defense == 1
        assert get_state_modifiers(CharacterState.HIDDEN).defense == 0

    def test_stealth_states(self):
        hidden = get_state_modifiers(CharacterState.HIDDEN)
        assert (hidden.hit, hidden.damage, hidden.hack) == (-1, 1, -1)
        disguised = get_state_modifiers(CharacterState.DISGUISED)
        assert (disguised.hit, disguised.damage, disguised.charm) == (-1, 1, -1)

    def test_downed_states_have_no_modifiers(self):
        assert get_state_modifiers(CharacterState.STUNNED) == get_state_modifiers(CharacterState.UNCONSCIOUS)


class TestWoundTransitions:
    def test_still_standing(self):
        assert wound_state_transition(make_character("c"), 2, 3) is None

    def test_first_drop_stuns(self):
        assert wound_state_transition(make_character("c"), 0, 1) == CharacterState.STUNNED

    def test_already_downed_goes_unconscious(self):
        c = make_character("c", was_stunned=True)
        assert wound_state_transition(c, 0, 1) == CharacterState.UNCONSCIOUS
        stunned = make_character("c", state=CharacterState.STUNNED)
        assert wound_state_transition(stunned, 0, 1) == CharacterState.UNCONSCIOUS

    def test_no_damage_no_change(self):
        assert wound_state_transition(make_character("c", wounds=0), 0, 0) is None


class TestAbilityTransitions:
    def test_named_abilities(self):
        c = make_character("c")
        assert ability_state_transition(c, "Face Off") == CharacterState.DISGUISED
        assert ability_state_transition(c, "Ninja Vanish") == CharacterState.HIDDEN

    def test_go_loud(self):
        hidden = make_character("c", state=CharacterState.HIDDEN)
        assert ability_state_transition(hidden, "Go Loud") == CharacterState.OVERT
        assert ability_state_transition(make_character("c"), "Go Loud") is None

    def test_wake_up(self):
        stunned = make_character("c", state=CharacterState.STUNNED)
        assert ability_state_transition(stunned, "Wake Up") == CharacterState.OVERT
        assert ability_state_transition(make_character("c"), "Wake Up") is None

    def test_attacking_reveals_hidden(self):
        hidden = make_character("c", state=CharacterState.HIDDEN)
        assert ability_state_transition(hidden, "melee", "fists", "hit") == CharacterState.OVERT
        assert ability_state_transition(hidden, "melee", "fists", "miss") == CharacterState.OVERT

    def test_quiet_weapons_keep_stealth(self):
        hidden = make_character("c", state=CharacterState.HIDDEN)
        disguised = make_character("c", state=CharacterState.DISGUISED)
        assert ability_state_transition(hidden, "melee", "test-garrote", "hit") is None
        assert ability_state_transition(disguised, "melee", "test-poison-pen", "hit") is None
        assert ability_state_transition(disguised, "melee", "test-garrote", "hit") == CharacterState.OVERT

    def test_non_attack_outcomes_keep_state(self):
        hidden = make_character("c", state=CharacterState.HIDDEN)
        assert ability_state_transition(hidden, "hack", "fists", "success") is None


class TestApplyTransition:
    def test_waking_restores_wounds(self):
        stunned = make_character("c", state=CharacterState.STUNNED, wounds=0, was_stunned=True)
        awake = apply_state_transition(stunned, CharacterState.OVERT)
        assert awake.state == CharacterState.OVERT
        assert awake.stats.wounds == WAKE_UP_WOUNDS
        assert awake.was_stunned

    def test_plain_change_keeps_wounds(self):
        c = make_character("c", wounds=2)
        hidden = apply_state_transition(c, CharacterState.HIDDEN)
        assert hidden.state == CharacterState.HIDDEN
        assert hidden.stats.wounds == 2
