"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from heistcity import __version__
from heistcity.api.dependencies import set_match_manager
from heistcity.api.match_manager import MatchManager
from heistcity.api.routes import api_router
from heistcity.config import EngineConfig
from heistcity.core.models import MapState
from heistcity.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: EngineConfig | None = None, map_state: MapState | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = EngineConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = MatchManager(_config, map_state)
        set_match_manager(manager)
        logger.info("API server started: match ready.")
        yield
        manager.save_replay()
        set_match_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Heist City Tactical Engine",
        description=(
            "Rules engine for two-player heist skirmishes with automated security.\n\n"
            "## API Groups\n\n"
            "- **Match** - Board state and player commands: move, attack, end activation\n"
            "- **NPC** - Security phase preview and execution, end of turn\n"
            "- **Events** - Match event feed\n"
            "- **Config** - Read-only engine configuration\n"
        ),
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Match", "description": "Characters, items, zones, turn and alert state; player commands."},
            {"name": "NPC", "description": "Dice-free preview of the security phase, running it, and ending the turn."},
            {"name": "Events", "description": "Chronological feed of moves, attacks, dice rolls and scoring."},
            {"name": "Config", "description": "Read-only engine configuration (seed, grid type, turn limit, search budgets)."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
