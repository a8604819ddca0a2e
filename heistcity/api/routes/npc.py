"""POST /api/v1/npc/*: security phase preview, execution and end of turn."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from heistcity.api.dependencies import get_match_manager, require_match_in_progress
from heistcity.api.match_manager import MatchManager
from heistcity.api.routes.match import serialize_alert, serialize_combat
from heistcity.api.schemas import (
    ControlResponse,
    NPCLogEntrySchema,
    NPCPhaseResponse,
    NPCPreviewSchema,
    PositionSchema,
    StateChangeSchema,
)

router = APIRouter()


@router.get("/npc/preview", response_model=list[NPCPreviewSchema])
def preview_npc_phase(manager: MatchManager = Depends(get_match_manager)) -> list[NPCPreviewSchema]:
    return [
        NPCPreviewSchema(
            npc_id=p.npc_id,
            target_id=p.target_id,
            expected_damage=round(p.expected_damage, 4),
            would_reach_target=p.would_reach_target,
        )
        for p in manager.preview_npc_phase()
    ]


@router.post("/npc/phase", response_model=NPCPhaseResponse)
def run_npc_phase(manager: MatchManager = Depends(require_match_in_progress)) -> NPCPhaseResponse:
    try:
        alert, result = manager.run_npc_phase()
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return NPCPhaseResponse(
        alert=serialize_alert(alert),
        combat_log=[
            NPCLogEntrySchema(
                npc_id=e.npc_id,
                archetype=e.archetype.value,
                action=e.action.value,
                target_id=e.target_id,
                new_position=PositionSchema(x=e.new_position.x, y=e.new_position.y) if e.new_position else None,
                combat=serialize_combat(e.result) if e.result else None,
            )
            for e in result.combat_log
        ],
        state_changes=[
            StateChangeSchema(
                character_id=s.character_id,
                old_state=s.old_state.value,
                new_state=s.new_state.value,
                cause=s.cause,
            )
            for s in result.state_changes
        ],
        elites_spawned=[e.id for e in result.elites_spawned],
        downed=list(result.downed),
    )


@router.post("/turn/end", response_model=ControlResponse)
def end_turn(manager: MatchManager = Depends(require_match_in_progress)) -> ControlResponse:
    try:
        events = manager.end_turn()
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    view = manager.state()
    escaped = ", ".join(e.character_id for e in events)
    message = f"Now {view.turn.phase.value}."
    if escaped:
        message += f" Escaped: {escaped}."
    return ControlResponse(status="ok", message=message, turn=view.turn.turn_number)
