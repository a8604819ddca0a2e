"""GET /api/v1/config: expose engine configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from heistcity.api.dependencies import get_match_manager
from heistcity.api.match_manager import MatchManager
from heistcity.api.schemas import MatchConfigResponse

router = APIRouter()


@router.get("/config", response_model=MatchConfigResponse)
def get_config(manager: MatchManager = Depends(get_match_manager)) -> MatchConfigResponse:
    cfg = manager.config
    return MatchConfigResponse(
        seed=cfg.seed,
        grid_type=cfg.grid_type.value,
        max_turns=cfg.max_turns,
        alert_modifier=cfg.alert_modifier,
        hex_map_radius=cfg.hex_map_radius,
        square_map_size=cfg.square_map_size,
        pixel_scale=cfg.pixel_scale,
        npc_path_search_multiplier=cfg.npc_path_search_multiplier,
    )
