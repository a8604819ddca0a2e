"""Movement budgets and move validation for player characters."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from heistcity.core.enums import MoveKind
from heistcity.core.equipment import effective_stats
from heistcity.core.grid import GridSpec, get_grid
from heistcity.core.models import CharacterToken, MapState, Position
from heistcity.spatial.pathfinding import get_reachable_positions
from heistcity.systems.spatial_index import WallMap, build_occupancy_map

logger = logging.getLogger(__name__)

_FIXED_BUDGETS: dict[MoveKind, int] = {
    MoveKind.NINJA_VANISH: 3,
    MoveKind.CQC_TECHNIQUE: 3,
    MoveKind.MOVE_IT_ALONG: 1,
    MoveKind.ALL_ACCORDING_TO_PLAN: 1,
}


@dataclass(frozen=True, slots=True)
class MoveValidation:
    valid: bool
    reason: str = ""
    path: tuple[Position, ...] = ()
    distance: int = 0


def get_effective_movement(character: CharacterToken, kind: MoveKind = MoveKind.MOVE) -> int:
    """Movement budget for *kind*; M includes equipment bonuses."""
    fixed = _FIXED_BUDGETS.get(kind)
    if fixed is not None:
        return fixed

    m = effective_stats(character.stats, character.equipment).movement
    match kind:
        case MoveKind.HUSTLE:
            return 2 * m + 2
        case MoveKind.SPRINT:
            return 3 * m + 4
        case _:
            return m


def validate_move(
    character: CharacterToken,
    destination: Position,
    wall_map: WallMap,
    map_state: MapState,
    grid_type: GridSpec,
    kind: MoveKind = MoveKind.MOVE,
) -> MoveValidation:
    """Check *destination* is a free cell reachable within the *kind* budget."""
    grid = get_grid(grid_type)
    budget = get_effective_movement(character, kind)

    if not grid.in_bounds(destination):
        return _reject(character, f"Destination {destination} is out of bounds")
    if destination in wall_map:
        return _reject(character, f"Destination {destination} is blocked")
    if destination in build_occupancy_map(map_state, exclude_id=character.id):
        return _reject(character, f"Destination {destination} is occupied")

    reachable = get_reachable_positions(
        character.position, budget, wall_map, map_state, grid_type, exclude_id=character.id,
    )
    cell = reachable.get(destination)
    if cell is None:
        return _reject(
            character,
            f"Destination is not reachable within {budget} movement (action: {kind.value})",
        )
    return MoveValidation(valid=True, path=cell.path, distance=cell.distance)


def validate_move_and_attack(
    character: CharacterToken,
    move_destination: Position,
    target_position: Position,
    wall_map: WallMap,
    map_state: MapState,
    grid_type: GridSpec,
    kind: MoveKind = MoveKind.CQC_TECHNIQUE,
) -> MoveValidation:
    """Validate a move-then-melee: CQC budget, target adjacent to the destination."""
    if kind != MoveKind.CQC_TECHNIQUE:
        return _reject(character, f"Move-and-attack requires {MoveKind.CQC_TECHNIQUE.value}, got {kind.value}")

    result = validate_move(character, move_destination, wall_map, map_state, grid_type, kind)
    if not result.valid:
        return result

    distance = get_grid(grid_type).distance(move_destination, target_position)
    if distance > 1:
        return _reject(
            character,
            f"Target is {distance} cells from move destination, must be adjacent (1 cell)",
        )
    return result


def _reject(character: CharacterToken, reason: str) -> MoveValidation:
    logger.debug("Move rejected for %s: %s", character.id, reason)
    return MoveValidation(valid=False, reason=reason)
