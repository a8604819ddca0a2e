"""NPC movement toward a target, stopping one cell short."""

from __future__ import annotations

from dataclasses import dataclass

from heistcity.core.grid import GridSpec, get_grid
from heistcity.core.models import CharacterToken, MapItem, MapState, Position
from heistcity.spatial.pathfinding import find_path
from heistcity.systems.spatial_index import build_wall_map

DEFAULT_SEARCH_MULTIPLIER = 3


@dataclass(frozen=True, slots=True)
class NPCMoveResult:
    new_position: Position
    path: tuple[Position, ...]
    distance_moved: int


def is_adjacent_to_target(npc_position: Position, target_position: Position, grid_type: GridSpec) -> bool:
    return get_grid(grid_type).distance(npc_position, target_position) <= 1


def calculate_npc_move(
    npc: MapItem,
    movement: int,
    target: CharacterToken,
    map_state: MapState,
    grid_type: GridSpec,
    search_multiplier: int = DEFAULT_SEARCH_MULTIPLIER,
) -> NPCMoveResult | None:
    """Advance up to *movement* cells along a path to *target*.

    Returns None for stationary NPCs, when already adjacent, or when no
    path exists within ``movement * search_multiplier``.
    """
    if movement <= 0:
        return None
    if is_adjacent_to_target(npc.position, target.position, grid_type):
        return None

    full_path = find_path(
        npc.position,
        target.position,
        build_wall_map(map_state),
        map_state,
        grid_type,
        movement * search_multiplier,
        exclude_id=target.id,
    )
    if not full_path or len(full_path) <= 1:
        return None

    # Path includes start and goal; never step onto the goal.
    steps = min(movement, max(0, len(full_path) - 2))
    if steps <= 0:
        return None

    travel = tuple(full_path[: steps + 1])
    return NPCMoveResult(new_position=travel[-1], path=travel, distance_moved=steps)
