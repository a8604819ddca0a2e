"""Tests for the Match coordinator, the MatchManager and the API layer."""

import sys
import os

import pytest
from fastapi import HTTPException

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from heistcity.api.app import create_app
from heistcity.api.dependencies import get_match_manager, require_match_in_progress, set_match_manager
from heistcity.api.match_manager import MatchManager
from heistcity.api.routes.config import get_config
from heistcity.api.routes.events import get_events
from heistcity.api.routes.match import get_match_state, move_character
from heistcity.api.routes.npc import end_turn as end_turn_route
from heistcity.api.routes.npc import preview_npc_phase as preview_route
from heistcity.api.routes.npc import run_npc_phase as run_npc_phase_route
from heistcity.api.schemas import MoveRequest
from heistcity.config import EngineConfig
from heistcity.core.enums import AttackType, CharacterState, MoveKind, TurnPhase, VPEventType
from heistcity.core.models import MapZone, Position
from heistcity.engine.match import Match
from heistcity.engine.turns import get_next_activating_player
from heistcity.systems.rng import scripted_rolls
from tests.helpers.board import make_board, make_character, wall


class RecordingEmitters:
    """Collects everything the match publishes."""

    def __init__(self):
        self.updates = []
        self.rolls = []
        self.boards = []

    def update_character(self, character_id, fields):
        self.updates.append((character_id, fields))

    def record_dice_roll(self, die1, die2, total):
        self.rolls.append(total)

    def replace_map_state(self, map_state):
        self.boards.append(map_state)


def _duel(b_pos=(1, 0), rolls=(), config=None, items=(), zones=(), a=None, b=None):
    a = a or make_character("a", player=1, equipment=("test-pistol",))
    b = b or make_character("b", player=2, pos=b_pos)
    board = make_board([a, b], items, zones)
    emitters = RecordingEmitters()
    match = Match(config or EngineConfig(), board, scripted_rolls(rolls), emitters)
    return match, emitters


def _finish_turn(match):
    for cid in ("a", "b"):
        if match.turn.needs_activation(cid):
            match.end_activation(cid)
    match.run_npc_phase()
    return match.end_turn()


# ---------------------------------------------------------------------------
# Movement & activation
# ---------------------------------------------------------------------------

class TestMatchMovement:
    def test_move_records_action(self):
        match, emitters = _duel(b_pos=(6, 0))
        outcome = match.move_character("a", Position(3, 0))
        assert outcome.ok
        assert len(outcome.path) == 4
        assert match.active_character_id == "a"
        a = match.map_state.character("a")
        assert a.position == Position(3, 0)
        assert a.actions == ("move",)
        assert emitters.updates[-1][0] == "a"

    def test_other_side_must_wait(self):
        match, _ = _duel(b_pos=(6, 0))
        outcome = match.move_character("b", Position(6, 1))
        assert not outcome.ok
        assert "player 1" in outcome.reason

    def test_active_character_blocks_teammates_and_opponents(self):
        match, _ = _duel(b_pos=(6, 0))
        match.move_character("a", Position(1, 0))
        outcome = match.move_character("b", Position(6, 1))
        assert not outcome.ok
        assert "a must end its activation first" in outcome.reason
        assert not match.end_activation("b").ok

    def test_rejected_move_changes_nothing(self):
        match, emitters = _duel(b_pos=(6, 0))
        before = match.map_state
        assert not match.move_character("a", Position(5, 0)).ok
        assert match.map_state is before
        assert match.active_character_id is None
        assert emitters.updates == []

    def test_move_respects_configured_board_size(self):
        match, _ = _duel(
            b_pos=(-3, 0), config=EngineConfig(hex_map_radius=5), a=make_character("a", movement=12),
        )
        assert match.grid.in_bounds(Position(5, 0))
        outcome = match.move_character("a", Position(10, 0))
        assert not outcome.ok
        assert "out of bounds" in outcome.reason
        assert match.move_character("a", Position(5, 0)).ok

    def test_slots_run_out(self):
        match, _ = _duel(b_pos=(6, 0))
        for x in (1, 2, 3):
            assert match.move_character("a", Position(x, 0), MoveKind.MOVE_IT_ALONG).ok
        outcome = match.move_character("a", Position(4, 0), MoveKind.MOVE_IT_ALONG)
        assert not outcome.ok
        assert "no action slots" in outcome.reason

    def test_end_activation_hands_over(self):
        match, _ = _duel(b_pos=(6, 0))
        match.move_character("a", Position(1, 0))
        assert match.end_activation("a").ok
        assert match.active_character_id is None
        assert match.turn.active_player_number == 2
        assert match.move_character("b", Position(6, 1)).ok


# ---------------------------------------------------------------------------
# Attacks
# ---------------------------------------------------------------------------

class TestMatchAttacks:
    def test_melee_hit(self):
        match, emitters = _duel(rolls=[8, 2])
        outcome = match.attack("a", "b", AttackType.MELEE)
        assert outcome.ok
        assert outcome.combat.defense.final_damage == 1
        assert match.map_state.character("b").stats.wounds == 4
        assert match.map_state.character("a").actions == ("melee",)
        assert emitters.rolls == [8, 2]

    def test_miss_rolls_once(self):
        match, emitters = _duel(rolls=[5])
        outcome = match.attack("a", "b", AttackType.MELEE)
        assert outcome.ok
        assert outcome.combat.defense is None
        assert emitters.rolls == [5]
        assert match.map_state.character("b").stats.wounds == 5

    def test_invalid_targets(self):
        match, _ = _duel()
        assert "Unknown target" in match.attack("a", "nobody", AttackType.MELEE).reason
        match2, _ = _duel(b=make_character("b", player=1, pos=(1, 0)))
        assert "teammate" in match2.attack("a", "b", AttackType.MELEE).reason
        match3, _ = _duel(b=make_character("b", player=2, pos=(1, 0), state=CharacterState.UNCONSCIOUS))
        assert "unconscious" in match3.attack("a", "b", AttackType.MELEE).reason

    def test_melee_reach(self):
        match, _ = _duel(b_pos=(2, 0))
        outcome = match.attack("a", "b", AttackType.MELEE)
        assert not outcome.ok
        assert "reach is 1" in outcome.reason

    def test_ranged_hit(self):
        match, _ = _duel(b_pos=(4, 0), rolls=[10, 2])
        outcome = match.attack("a", "b", AttackType.RANGED, "test-pistol")
        assert outcome.ok
        assert match.map_state.character("b").stats.wounds == 3
        assert match.map_state.character("a").actions == ("ranged",)

    def test_ranged_weapon_checks(self):
        match, _ = _duel(b_pos=(4, 0))
        assert "not a ranged weapon" in match.attack("a", "b", AttackType.RANGED, "fists").reason
        unarmed, _ = _duel(b_pos=(4, 0), a=make_character("a", player=1))
        assert "does not carry" in unarmed.attack("a", "b", AttackType.RANGED, "test-pistol").reason

    def test_wall_blocks_shot(self):
        match, _ = _duel(b_pos=(4, 0), items=[wall("w", (2, 0))])
        outcome = match.attack("a", "b", AttackType.RANGED, "test-pistol")
        assert not outcome.ok
        assert "line of sight" in outcome.reason

    def test_downing_scores(self):
        match, _ = _duel(rolls=[8, 2], b=make_character("b", player=2, pos=(1, 0), wounds=1))
        outcome = match.attack("a", "b", AttackType.MELEE)
        assert [e.type for e in outcome.vp_events] == [VPEventType.DOWN_ENEMY]
        assert match.map_state.character("b").state == CharacterState.STUNNED
        assert match.map_state.character("a").victory_points == 1
        assert len(match.vp_log) == 1

    def test_attacking_breaks_stealth(self):
        match, _ = _duel(rolls=[2], a=make_character("a", player=1, state=CharacterState.HIDDEN))
        match.attack("a", "b", AttackType.MELEE)
        assert match.map_state.character("a").state == CharacterState.OVERT

    def test_repeat_penalty(self):
        match, _ = _duel(rolls=[9, 2, 9, 2])
        first = match.attack("a", "b", AttackType.MELEE)
        second = match.attack("a", "b", AttackType.MELEE)
        assert first.combat.attack.target_number == 7
        assert second.combat.attack.target_number == 8


# ---------------------------------------------------------------------------
# Turn flow
# ---------------------------------------------------------------------------

class TestMatchTurnFlow:
    def test_npc_phase_requires_activations(self):
        match, _ = _duel()
        with pytest.raises(RuntimeError):
            match.run_npc_phase()
        with pytest.raises(RuntimeError):
            match.end_turn()

    def test_full_turn(self):
        match, emitters = _duel(b_pos=(6, 0))
        match.move_character("a", Position(1, 0))
        _finish_turn(match)
        assert match.turn.turn_number == 2
        assert match.turn.initiative_player == 2
        assert match.map_state.character("a").actions == ()
        assert emitters.boards

    def test_nobody_able_to_activate(self):
        match, _ = _duel(
            a=make_character("a", player=1, state=CharacterState.UNCONSCIOUS),
            b=make_character("b", player=2, pos=(4, 0), state=CharacterState.UNCONSCIOUS),
        )
        match.run_npc_phase()
        assert match.turn.phase == TurnPhase.END_OF_TURN

    def test_escape_on_final_turn(self):
        zone = MapZone("deploy-1", "Player 1 Deployment", Position(0, 0), hex_cells=(Position(0, 0),))
        match, _ = _duel(b_pos=(6, 0), config=EngineConfig(max_turns=1), zones=[zone])
        events = _finish_turn(match)
        assert [(e.character_id, e.type) for e in events] == [("a", VPEventType.ESCAPE)]
        assert match.game_over
        assert match.map_state.character("a").victory_points == 1

    def test_alert_uses_configured_modifier(self):
        match, _ = _duel(config=EngineConfig(alert_modifier=3))
        alert = match.alert()
        assert alert.units_revealed == 2
        assert alert.level == 1

    def test_snapshot(self):
        match, _ = _duel()
        snap = match.snapshot()
        assert set(snap) == {"turn", "alert", "activeCharacterId", "mapState", "vpLog"}
        assert snap["turn"]["phase"] == "player-activation"


# ---------------------------------------------------------------------------
# MatchManager & API
# ---------------------------------------------------------------------------

def _manager(tmp_path, **overrides):
    config = EngineConfig(replay_file=str(tmp_path / "replay.json"), **overrides)
    return MatchManager(config)


def _pass_all(manager):
    match = manager.match
    while match.turn.phase == TurnPhase.PLAYER_ACTIVATION:
        player = get_next_activating_player(match.turn, match.map_state)
        pending = [
            c.id for c in match.map_state.characters
            if c.player_number == player and match.turn.needs_activation(c.id)
        ]
        manager.end_activation(pending[0])


class TestMatchManager:
    def test_demo_match(self, tmp_path):
        view = _manager(tmp_path).state()
        assert view.turn.turn_number == 1
        assert len(view.map_state.characters) == 6
        assert view.alert.level == 0

    def test_turn_cycle_feeds_log_and_replay(self, tmp_path):
        manager = _manager(tmp_path, alert_modifier=3)
        _pass_all(manager)
        alert, _ = manager.run_npc_phase()
        assert alert.level == 1
        manager.end_turn()
        categories = {e.category for e in manager.event_log.latest(500)}
        assert {"activation", "map", "turn"} <= categories
        assert manager.replay.phases_recorded == 1
        manager.save_replay()
        assert (tmp_path / "replay.json").exists()

    def test_reset(self, tmp_path):
        manager = _manager(tmp_path)
        manager.move("p1-face", Position(-6, 7), MoveKind.MOVE)
        manager.reset()
        assert len(manager.event_log) == 0
        assert manager.state().map_state.character("p1-face").position == Position(-6, 8)

    def test_reset_starts_a_fresh_replay(self, tmp_path):
        manager = _manager(tmp_path, alert_modifier=3)
        _pass_all(manager)
        manager.run_npc_phase()
        assert manager.replay.phases_recorded == 1

        manager.reset()
        assert manager.replay.phases_recorded == 0

    def test_custom_board(self, tmp_path):
        board = make_board([make_character("solo")])
        manager = MatchManager(EngineConfig(replay_file=str(tmp_path / "r.json")), board)
        assert manager.state().map_state is board


class TestRoutes:
    def test_state_and_move(self, tmp_path):
        manager = _manager(tmp_path)
        state = get_match_state(manager)
        assert state.turn.phase_description == "Player Activation"
        assert state.team_vp == {1: 0, 2: 0}
        assert len(state.turn.pending_activations) == 6

        response = move_character(MoveRequest(character_id="p1-face", x=-6, y=7), manager)
        assert response.ok
        assert response.path[-1].x == -6 and response.path[-1].y == 7

        events = get_events(since_turn=None, limit=100, manager=manager)
        assert events[-1].category == "move"

    def test_npc_routes(self, tmp_path):
        manager = _manager(tmp_path)
        assert preview_route(manager) == []
        with pytest.raises(HTTPException) as exc:
            run_npc_phase_route(manager)
        assert exc.value.status_code == 409
        with pytest.raises(HTTPException):
            end_turn_route(manager)

        _pass_all(manager)
        response = run_npc_phase_route(manager)
        assert response.alert.level == 0
        control = end_turn_route(manager)
        assert control.turn == 2

    def test_config(self, tmp_path):
        cfg = get_config(_manager(tmp_path, seed=7))
        assert cfg.seed == 7
        assert cfg.grid_type == "hex"

    def test_dependency_guard(self, tmp_path):
        set_match_manager(None)
        with pytest.raises(RuntimeError):
            get_match_manager()
        manager = _manager(tmp_path)
        set_match_manager(manager)
        assert get_match_manager() is manager
        set_match_manager(None)

    def test_finished_match_refuses_commands(self, tmp_path):
        manager = _manager(tmp_path, max_turns=1)
        assert require_match_in_progress(manager) is manager
        _pass_all(manager)
        manager.run_npc_phase()
        manager.end_turn()
        assert manager.match.game_over

        with pytest.raises(HTTPException) as exc:
            require_match_in_progress(manager)
        assert exc.value.status_code == 409
        assert "turn 1" in exc.value.detail

        manager.reset()
        assert require_match_in_progress(manager) is manager

    def test_app_routes(self):
        app = create_app(EngineConfig())
        paths = set(app.openapi()["paths"])
        assert {
            "/api/v1/match", "/api/v1/match/move", "/api/v1/match/attack",
            "/api/v1/match/end-activation", "/api/v1/npc/preview", "/api/v1/npc/phase",
            "/api/v1/turn/end", "/api/v1/events", "/api/v1/config",
        } <= paths
        assert app.title == "Heist City Tactical Engine"
