"""Range, adjacency and targeting queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from heistcity.core.enums import CharacterState
from heistcity.core.grid import GridSpec, get_grid
from heistcity.core.models import CharacterToken, MapItem, MapState, Position
from heistcity.spatial.line_of_sight import has_line_of_sight
from heistcity.systems.spatial_index import ItemMap, WallMap


@dataclass(frozen=True, slots=True)
class TargetResult:
    in_range: bool
    has_los: bool
    has_cover: bool
    distance: int

    @property
    def targetable(self) -> bool:
        return self.in_range and self.has_los


def get_characters_in_range(
    position: Position,
    max_range: int,
    map_state: MapState,
    grid_type: GridSpec,
    predicate: Callable[[CharacterToken], bool] | None = None,
) -> list[CharacterToken]:
    grid = get_grid(grid_type)
    return [
        c for c in map_state.characters
        if grid.distance(position, c.position) <= max_range
        and (predicate is None or predicate(c))
    ]


def get_items_in_range(
    position: Position,
    max_range: int,
    map_state: MapState,
    grid_type: GridSpec,
    predicate: Callable[[MapItem], bool] | None = None,
) -> list[MapItem]:
    grid = get_grid(grid_type)
    return [
        it for it in map_state.items
        if grid.distance(position, it.position) <= max_range
        and (predicate is None or predicate(it))
    ]


def get_enemies_in_range(
    position: Position,
    max_range: int,
    map_state: MapState,
    grid_type: GridSpec,
) -> list[MapItem]:
    """NPC units within *max_range* of *position*."""
    return get_items_in_range(position, max_range, map_state, grid_type, lambda it: it.is_npc)


def can_target(
    attacker_position: Position,
    target_position: Position,
    weapon_range: int,
    los_blockers: WallMap,
    item_map: ItemMap,
    grid_type: GridSpec,
) -> TargetResult:
    distance = get_grid(grid_type).distance(attacker_position, target_position)
    if distance > weapon_range:
        return TargetResult(in_range=False, has_los=False, has_cover=False, distance=distance)

    los = has_line_of_sight(attacker_position, target_position, los_blockers, item_map, grid_type)
    return TargetResult(
        in_range=True,
        has_los=los.clear,
        has_cover=bool(los.cover_positions),
        distance=distance,
    )


def get_adjacent_characters(
    position: Position,
    map_state: MapState,
    grid_type: GridSpec,
) -> list[CharacterToken]:
    return get_characters_in_range(
        position, 1, map_state, grid_type, lambda c: c.position != position,
    )


def is_target_in_melee(
    attacker: CharacterToken,
    target: CharacterToken,
    map_state: MapState,
    grid_type: GridSpec,
) -> bool:
    """True when a conscious ally of *attacker* stands adjacent to *target*."""
    for char in get_adjacent_characters(target.position, map_state, grid_type):
        if char.id == attacker.id or char.id == target.id:
            continue
        if char.player_number == attacker.player_number and char.state != CharacterState.UNCONSCIOUS:
            return True
    return False
