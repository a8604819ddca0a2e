"""Board set-up: the built-in demo heist and JSON map loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from heistcity.core.enums import CharacterState, GridType, ItemType
from heistcity.core.models import CharacterStats, CharacterToken, MapItem, MapState, MapZone, Position

logger = logging.getLogger(__name__)

# Square boards are indexed from the corner, hex boards from the centre.
_SQUARE_OFFSET = 18

# (id, player, x, y, name, role, state)
_CREW: tuple[tuple[str, int, int, int, str, str, CharacterState], ...] = (
    ("p1-face", 1, -6, 8, "Vera", "Face", CharacterState.DISGUISED),
    ("p1-ghost", 1, -5, 8, "Milo", "Infiltrator", CharacterState.HIDDEN),
    ("p1-muscle", 1, -4, 8, "Brick", "Muscle", CharacterState.OVERT),
    ("p2-face", 2, 6, -8, "Iris", "Face", CharacterState.DISGUISED),
    ("p2-ghost", 2, 5, -8, "Dax", "Infiltrator", CharacterState.HIDDEN),
    ("p2-muscle", 2, 4, -8, "Knox", "Muscle", CharacterState.OVERT),
)

# (id, type, x, y, provides cover)
_FIXTURES: tuple[tuple[str, ItemType, int, int, bool], ...] = (
    ("wall-1", ItemType.WALL, -2, 0, False),
    ("wall-2", ItemType.WALL, -1, 0, False),
    ("wall-3", ItemType.WALL, 0, 0, False),
    ("wall-4", ItemType.WALL, 1, 0, False),
    ("table-1", ItemType.TABLE, -3, 3, True),
    ("table-2", ItemType.TABLE, 3, -3, True),
    ("computer-1", ItemType.COMPUTER, 0, 2, False),
    ("computer-2", ItemType.COMPUTER, 0, -2, False),
    ("info-drop-1", ItemType.INFO_DROP, 4, 2, False),
    ("portal-1", ItemType.TELEPORTER, -7, 0, False),
    ("portal-2", ItemType.TELEPORTER, 7, 0, False),
    ("guard-1", ItemType.ENEMY_SECURITY_GUARD, -3, 1, False),
    ("guard-2", ItemType.ENEMY_SECURITY_GUARD, 3, -1, False),
    ("turret-1", ItemType.ENEMY_CAMERA, 0, 4, False),
)


def _place(x: int, y: int, grid_type: GridType) -> Position:
    if grid_type == GridType.SQUARE:
        return Position(x + _SQUARE_OFFSET, y + _SQUARE_OFFSET)
    return Position(x, y)


def _deployment_zone(player: int, y: int, grid_type: GridType) -> MapZone:
    corner = _place(-7, y, grid_type)
    cells = tuple(_place(x, y, grid_type) for x in range(-7, 0)) if grid_type == GridType.HEX else ()
    return MapZone(
        id=f"deploy-{player}",
        label=f"Player {player} Deployment",
        position=corner if grid_type == GridType.SQUARE else cells[0],
        width=7,
        height=1,
        hex_cells=cells,
    )


def build_demo_map(grid_type: GridType = GridType.HEX) -> MapState:
    """A small two-crew heist: walls, cover, guards, a turret and two portals."""
    characters = tuple(
        CharacterToken(
            id=cid,
            player_number=player,
            position=_place(x, y, grid_type),
            stats=CharacterStats(),
            state=state,
            name=name,
            role=role,
        )
        for cid, player, x, y, name, role, state in _CREW
    )
    items = tuple(
        MapItem(id=iid, type=itype, position=_place(x, y, grid_type), provide_cover=cover)
        for iid, itype, x, y, cover in _FIXTURES
    )
    zones = (
        _deployment_zone(1, 8, grid_type),
        _shifted_zone(_deployment_zone(2, -8, grid_type), 7, grid_type),
    )
    return MapState(items=items, characters=characters, zones=zones)


def _shifted_zone(zone: MapZone, dx: int, grid_type: GridType) -> MapZone:
    """Player 2 deploys on the opposite flank."""
    cells = tuple(Position(c.x + dx, c.y) for c in zone.hex_cells)
    position = Position(zone.position.x + dx, zone.position.y)
    return MapZone(zone.id, zone.label, position, zone.width, zone.height, cells)


def load_map_file(path: str | Path) -> MapState:
    """Read a saved board (the camelCase JSON produced by ``MapState.to_dict``)."""
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    state = MapState.from_dict(data)
    logger.info(
        "Loaded map %s: %d characters, %d items, %d zones",
        path, len(state.characters), len(state.items), len(state.zones),
    )
    return state
