"""Tests for victory points and per-turn action slots."""

import sys
import os
from dataclasses import replace

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from heistcity.core.enums import CharacterState, VPEventType
from heistcity.core.models import MapZone, Position
from heistcity.engine.activation import (
    can_activate,
    get_first_empty_slot,
    get_remaining_slots,
    get_repeat_penalty,
    record_action,
)
from heistcity.engine.turns import create_initial_turn_state
from heistcity.engine.victory import (
    apply_vp,
    award_vp,
    calculate_escape_vp,
    calculate_team_vp,
    find_deployment_zone,
)
from tests.helpers.board import make_board, make_character


def _zone(label, x=0, y=0, width=3, height=1):
    return MapZone(id=label.lower().replace(" ", "-"), label=label, position=Position(x, y), width=width, height=height)


class TestAwards:
    def test_default_points(self):
        assert award_vp("a", VPEventType.DOWN_ENEMY, 2).points == 1
        assert award_vp("a", VPEventType.INFO_DROP_EXTRACT, 2).points == 3

    def test_explicit_points(self):
        assert award_vp("a", VPEventType.MOB_INTEL, 1, points=4).points == 4

    def test_apply_and_total(self):
        board = make_board([
            make_character("a", player=1), make_character("b", player=1, pos=(1, 0)),
            make_character("z", player=2, pos=(5, 0)),
        ])
        board = apply_vp(board, award_vp("a", VPEventType.INFO_DROP_EXTRACT, 1))
        board = apply_vp(board, award_vp("b", VPEventType.HACK_COMPUTER, 1))
        assert board.character("a").victory_points == 3
        assert calculate_team_vp(board, 1) == 4
        assert calculate_team_vp(board, 2) == 0

    def test_event_to_dict(self):
        data = award_vp("a", VPEventType.ESCAPE, 5, "out").to_dict()
        assert data == {"type": "escape", "characterId": "a", "points": 1, "turnNumber": 5, "description": "out"}


class TestDeploymentZones:
    def test_labelled_zone(self):
        zones = [_zone("Player 2 Deployment"), _zone("Player 1 Deployment")]
        assert find_deployment_zone(zones, 1).label == "Player 1 Deployment"
        assert find_deployment_zone(zones, 2).label == "Player 2 Deployment"

    def test_short_labels(self):
        assert find_deployment_zone([_zone("P2 start")], 2) is not None

    def test_generic_deployment_fallback(self):
        zones = [_zone("Vault"), _zone("Deployment")]
        assert find_deployment_zone(zones, 1).label == "Deployment"

    def test_generic_fallback_skips_other_players_zone(self):
        assert find_deployment_zone([_zone("Player 2 Deployment")], 1) is None

    def test_no_zone(self):
        assert find_deployment_zone([], 1) is None


class TestEscape:
    def _board(self):
        return make_board(
            [
                make_character("in", player=1, pos=(0, 0)),
                make_character("out", player=1, pos=(8, 8)),
                make_character("ko", player=1, pos=(1, 0), state=CharacterState.UNCONSCIOUS),
                make_character("stun", player=1, pos=(2, 0), state=CharacterState.STUNNED),
            ],
            zones=[_zone("Player 1 Deployment")],
        )

    def test_only_on_final_turn(self):
        assert calculate_escape_vp(self._board(), 4, 1) == []

    def test_conscious_characters_in_zone(self):
        events = calculate_escape_vp(self._board(), 5, 1)
        assert sorted(e.character_id for e in events) == ["in", "stun"]
        assert all(e.type == VPEventType.ESCAPE and e.points == 1 for e in events)

    def test_no_zone_no_escape(self):
        assert calculate_escape_vp(self._board(), 5, 2) == []


class TestActionSlots:
    def test_slots(self):
        c = make_character("c")
        assert get_remaining_slots(c) == 3
        assert get_first_empty_slot(c) == 0
        c = record_action(record_action(c, "move"), "melee")
        assert c.actions == ("move", "melee")
        assert get_first_empty_slot(c) == 2
        full = record_action(c, "hack")
        assert get_remaining_slots(full) == 0
        assert get_first_empty_slot(full) == -1
        with pytest.raises(ValueError):
            record_action(full, "move")

    def test_repeat_penalty(self):
        c = make_character("c", actions=("ranged", "move"))
        assert get_repeat_penalty(c, "ranged") == 1
        assert get_repeat_penalty(c, "melee") == 0

    def test_can_activate(self):
        board = make_board([
            make_character("ok"),
            make_character("ko", pos=(1, 0), state=CharacterState.UNCONSCIOUS),
        ])
        turn = create_initial_turn_state(board)
        assert can_activate(board.character("ok"), turn)
        assert not can_activate(board.character("ko"), turn)
        assert not can_activate(replace(board.character("ok"), exhausted=True), turn)
