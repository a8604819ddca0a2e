"""Versioned API route modules."""

from fastapi import APIRouter

from heistcity.api.routes.config import router as config_router
from heistcity.api.routes.events import router as events_router
from heistcity.api.routes.match import router as match_router
from heistcity.api.routes.npc import router as npc_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(match_router, tags=["Match"])
api_router.include_router(npc_router, tags=["NPC"])
api_router.include_router(events_router, tags=["Events"])
api_router.include_router(config_router, tags=["Config"])

__all__ = ["api_router"]
