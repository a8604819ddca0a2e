"""Tests for the alert level."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from heistcity.core.enums import CharacterState
from heistcity.engine.alert import (
    compute_alert_level,
    count_revealed_units,
    level_for_total,
    npc_action_count,
    predict_alert_level,
    should_spawn_elites,
)
from tests.helpers.board import make_board, make_character


def _crew(*states):
    return make_board([make_character(f"c{i}", pos=(i, 0), state=s) for i, s in enumerate(states)])


class TestThresholds:
    @pytest.mark.parametrize("total,level", [
        (0, 0), (2, 0), (3, 1), (5, 1), (6, 2), (7, 2), (8, 3), (12, 3), (-1, 0),
    ])
    def test_level_for_total(self, total, level):
        assert level_for_total(total) == level

    def test_actions_per_level(self):
        assert [npc_action_count(lvl) for lvl in range(4)] == [0, 1, 2, 2]
        assert npc_action_count(7) == 2

    def test_elites_only_at_max(self):
        assert not should_spawn_elites(2)
        assert should_spawn_elites(3)


class TestRevealedUnits:
    def test_stealthy_states_do_not_count(self):
        board = _crew(
            CharacterState.OVERT, CharacterState.HIDDEN, CharacterState.DISGUISED,
            CharacterState.STUNNED, CharacterState.UNCONSCIOUS,
        )
        assert count_revealed_units(board) == 3

    def test_compute_with_modifier(self):
        board = _crew(CharacterState.OVERT, CharacterState.OVERT, CharacterState.HIDDEN)
        alert = compute_alert_level(board, modifier=1)
        assert alert.units_revealed == 2
        assert alert.total == 3
        assert alert.level == 1
        assert alert.npc_actions_per_activation == 1

    def test_prediction(self):
        board = _crew(CharacterState.OVERT, CharacterState.HIDDEN)
        assert compute_alert_level(board).level == 0
        assert predict_alert_level(board, 0, 5).level == 2

    def test_to_dict(self):
        data = compute_alert_level(_crew(CharacterState.OVERT), modifier=2).to_dict()
        assert data == {
            "level": 1, "unitsRevealed": 1, "modifier": 2, "total": 3, "npcActionsPerActivation": 1,
        }
