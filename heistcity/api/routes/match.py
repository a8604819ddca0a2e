"""GET/POST /api/v1/match: board state and player commands."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from heistcity.api.dependencies import get_match_manager, require_match_in_progress
from heistcity.api.match_manager import MatchManager
from heistcity.api.schemas import (
    ActionResponse,
    ActivationRequest,
    AlertSchema,
    AttackRequest,
    CharacterSchema,
    CombatSchema,
    ControlResponse,
    ItemSchema,
    MatchStateResponse,
    MoveRequest,
    PositionSchema,
    TurnSchema,
    VPEventSchema,
    ZoneSchema,
)
from heistcity.core.models import CharacterToken, MapItem, MapZone, Position
from heistcity.core.results import CombatResult
from heistcity.engine.alert import AlertLevelState
from heistcity.engine.match import ActionOutcome
from heistcity.engine.turns import phase_description
from heistcity.engine.victory import calculate_team_vp

router = APIRouter()


# ---------------------------------------------------------------------------
# Serializers (shared with the NPC routes)
# ---------------------------------------------------------------------------

def serialize_character(c: CharacterToken) -> CharacterSchema:
    return CharacterSchema(
        id=c.id,
        player_number=c.player_number,
        name=c.name,
        role=c.role,
        x=c.position.x,
        y=c.position.y,
        state=c.state.value,
        wounds=c.stats.wounds,
        max_wounds=c.stats.max_wounds,
        equipment=list(c.equipment),
        actions=list(c.actions),
        exhausted=c.exhausted,
        victory_points=c.victory_points,
        was_stunned=c.was_stunned,
    )


def _serialize_item(item: MapItem) -> ItemSchema:
    return ItemSchema(
        id=item.id, type=item.type.value, x=item.position.x, y=item.position.y,
        provide_cover=item.provide_cover,
    )


def _serialize_zone(zone: MapZone) -> ZoneSchema:
    return ZoneSchema(
        id=zone.id,
        label=zone.label,
        x=zone.position.x,
        y=zone.position.y,
        width=zone.width,
        height=zone.height,
        hex_cells=[PositionSchema(x=p.x, y=p.y) for p in zone.hex_cells],
    )


def serialize_alert(alert: AlertLevelState) -> AlertSchema:
    return AlertSchema(
        level=alert.level,
        units_revealed=alert.units_revealed,
        modifier=alert.modifier,
        total=alert.total,
        npc_actions_per_activation=alert.npc_actions_per_activation,
    )


def serialize_combat(result: CombatResult) -> CombatSchema:
    d = result.defense
    return CombatSchema(
        hit=result.attack.hit,
        attack_roll=result.attack.roll.total,
        attack_target_number=result.attack.target_number,
        damage=result.attack.damage,
        saved=d.saved if d else None,
        defense_roll=d.roll.total if d else None,
        defense_target_number=d.target_number if d else None,
        final_damage=d.final_damage if d else 0,
        target_wounds_after=result.target_wounds_after,
        target_state_after=result.target_state_after.value,
        target_downed=result.target_downed,
    )


def _serialize_outcome(outcome: ActionOutcome) -> ActionResponse:
    return ActionResponse(
        ok=outcome.ok,
        reason=outcome.reason,
        path=[PositionSchema(x=p.x, y=p.y) for p in outcome.path],
        combat=serialize_combat(outcome.combat) if outcome.combat else None,
        vp_events=[
            VPEventSchema(
                type=e.type.value, character_id=e.character_id, points=e.points,
                turn_number=e.turn_number, description=e.description,
            )
            for e in outcome.vp_events
        ],
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("/match", response_model=MatchStateResponse)
def get_match_state(manager: MatchManager = Depends(get_match_manager)) -> MatchStateResponse:
    view = manager.state()
    turn = view.turn
    return MatchStateResponse(
        turn=TurnSchema(
            turn_number=turn.turn_number,
            phase=turn.phase.value,
            phase_description=phase_description(turn.phase),
            active_player_number=turn.active_player_number,
            initiative_player=turn.initiative_player,
            pending_activations=sorted(cid for cid, pending in turn.activations_remaining.items() if pending),
            npc_phase_complete=turn.npc_phase_complete,
        ),
        alert=serialize_alert(view.alert),
        active_character_id=view.active_character_id,
        characters=[serialize_character(c) for c in view.map_state.characters],
        items=[_serialize_item(i) for i in view.map_state.items],
        zones=[_serialize_zone(z) for z in view.map_state.zones],
        team_vp={p: calculate_team_vp(view.map_state, p) for p in (1, 2)},
    )


@router.post("/match/move", response_model=ActionResponse)
def move_character(
    body: MoveRequest,
    manager: MatchManager = Depends(require_match_in_progress),
) -> ActionResponse:
    outcome = manager.move(body.character_id, Position(body.x, body.y), body.kind)
    return _serialize_outcome(outcome)


@router.post("/match/attack", response_model=ActionResponse)
def attack(
    body: AttackRequest,
    manager: MatchManager = Depends(require_match_in_progress),
) -> ActionResponse:
    outcome = manager.attack(body.attacker_id, body.target_id, body.attack_type, body.weapon_id)
    return _serialize_outcome(outcome)


@router.post("/match/end-activation", response_model=ActionResponse)
def end_activation(
    body: ActivationRequest,
    manager: MatchManager = Depends(require_match_in_progress),
) -> ActionResponse:
    return _serialize_outcome(manager.end_activation(body.character_id))


@router.post("/match/reset", response_model=ControlResponse)
def reset_match(manager: MatchManager = Depends(get_match_manager)) -> ControlResponse:
    manager.reset()
    return ControlResponse(status="ok", message="Match reset.", turn=manager.state().turn.turn_number)
