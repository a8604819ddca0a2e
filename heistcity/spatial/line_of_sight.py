"""Line of sight between two cells.

Only interior cells of the sight line are inspected; the endpoints never
block.  Walls block sight outright, cover items are noted for defense.
"""

from __future__ import annotations

from dataclasses import dataclass

from heistcity.core.enums import GridType
from heistcity.core.grid import GridSpec, get_grid, hex_line_draw, square_line_draw
from heistcity.core.models import Position
from heistcity.systems.spatial_index import ItemMap, WallMap, get_cover_at, is_blocked

__all__ = [
    "LOSResult",
    "get_visible_positions",
    "has_line_of_sight",
    "hex_line_draw",
    "sight_line",
    "square_line_draw",
]


@dataclass(frozen=True, slots=True)
class LOSResult:
    clear: bool
    blocked_by: Position | None = None
    cover_positions: tuple[Position, ...] = ()


def sight_line(start: Position, end: Position, grid_type: GridSpec = GridType.HEX) -> list[Position]:
    if get_grid(grid_type).grid_type == GridType.SQUARE:
        return square_line_draw(start, end)
    return hex_line_draw(start, end)


def has_line_of_sight(
    start: Position,
    end: Position,
    los_blockers: WallMap,
    item_map: ItemMap,
    grid_type: GridSpec = GridType.HEX,
) -> LOSResult:
    line = sight_line(start, end, grid_type)
    cover: list[Position] = []

    for pos in line[1:-1]:
        if is_blocked(pos, los_blockers):
            return LOSResult(clear=False, blocked_by=pos, cover_positions=tuple(cover))
        if get_cover_at(pos, item_map) is not None:
            cover.append(pos)

    return LOSResult(clear=True, cover_positions=tuple(cover))


def get_visible_positions(
    start: Position,
    max_range: int,
    los_blockers: WallMap,
    item_map: ItemMap,
    grid_type: GridSpec = GridType.HEX,
) -> set[Position]:
    """Every in-bounds cell within *max_range* of *start* with a clear line.

    The origin is always visible.
    """
    grid = get_grid(grid_type)
    visible: set[Position] = {start}
    for cell in grid.cells_in_range(start, max_range):
        if cell == start:
            continue
        if has_line_of_sight(start, cell, los_blockers, item_map, grid_type).clear:
            visible.add(cell)
    return visible
