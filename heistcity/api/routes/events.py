"""GET /api/v1/events: the match event feed."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from heistcity.api.dependencies import get_match_manager
from heistcity.api.match_manager import MatchManager
from heistcity.api.schemas import EventSchema

router = APIRouter()


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since_turn: int | None = Query(None, ge=1, description="Only events from this turn onward"),
    limit: int = Query(100, ge=1, le=1000),
    manager: MatchManager = Depends(get_match_manager),
) -> list[EventSchema]:
    log = manager.event_log
    events = log.since_turn(since_turn)[-limit:] if since_turn is not None else log.latest(limit)
    return [
        EventSchema(turn=e.turn, category=e.category, message=e.message, character_ids=list(e.character_ids))
        for e in events
    ]
