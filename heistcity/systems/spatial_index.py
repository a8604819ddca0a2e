"""O(1) obstruction, cover and occupancy lookups built from a MapState.

Walls block movement and sight; tables block movement and grant cover but
not sight; characters never block sight.  Every builder is a pure function
of the snapshot and must be re-run after the snapshot changes.
"""

from __future__ import annotations

from typing import Mapping

from heistcity.core.enums import ItemType
from heistcity.core.models import MapItem, MapState, Position

WallMap = frozenset[Position]
ItemMap = Mapping[Position, MapItem]

_MOVEMENT_BLOCKERS = frozenset({ItemType.WALL, ItemType.TABLE})


def build_wall_map(map_state: MapState) -> WallMap:
    """Cells that block movement (walls and tables)."""
    return frozenset(it.position for it in map_state.items if it.type in _MOVEMENT_BLOCKERS)


def build_los_blockers(map_state: MapState) -> WallMap:
    """Cells that block sight (walls only)."""
    return frozenset(it.position for it in map_state.items if it.type == ItemType.WALL)


def build_item_position_map(map_state: MapState) -> dict[Position, MapItem]:
    """Position -> item; a later item on the same cell wins."""
    return {it.position: it for it in map_state.items}


def build_occupancy_map(map_state: MapState, exclude_id: str | None = None) -> dict[Position, str]:
    """Position -> id of the character or NPC standing there.

    Unconscious characters stay on the board and still occupy their cell.
    """
    occupied: dict[Position, str] = {}
    for item in map_state.items:
        if item.is_npc and item.id != exclude_id:
            occupied[item.position] = item.id
    for char in map_state.characters:
        if char.id != exclude_id:
            occupied[char.position] = char.id
    return occupied


def is_blocked(position: Position, wall_map: WallMap) -> bool:
    return position in wall_map


def get_cover_at(position: Position, item_map: ItemMap) -> MapItem | None:
    item = item_map.get(position)
    if item is not None and item.grants_cover:
        return item
    return None

