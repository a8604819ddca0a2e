"""FastAPI dependencies: the hosted MatchManager and the in-progress guard."""

from __future__ import annotations

from fastapi import Depends, HTTPException

from heistcity.api.match_manager import MatchManager
from heistcity.core.enums import TurnPhase

_match_manager: MatchManager | None = None


def set_match_manager(manager: MatchManager | None) -> None:
    global _match_manager
    _match_manager = manager


def get_match_manager() -> MatchManager:
    if _match_manager is None:
        raise RuntimeError("No match is hosted: the app lifespan has not started one.")
    return _match_manager


def require_match_in_progress(manager: MatchManager = Depends(get_match_manager)) -> MatchManager:
    """Command routes only: a finished match answers 409 until it is reset."""
    turn = manager.state().turn
    if turn.phase == TurnPhase.GAME_OVER:
        raise HTTPException(
            status_code=409,
            detail=f"Match ended after turn {turn.turn_number - 1}; reset to play again",
        )
    return manager
