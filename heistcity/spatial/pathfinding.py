"""A* shortest path and BFS reachability on the active grid.

Every step costs 1.  Searches never expand a node whose path cost has
reached the caller's ``max_distance``, which bounds the work by the
mover's budget.

Tie-breaking between equally short paths is deterministic: the open heap
is ordered by (f, h, x, y), so among equal f the node nearer the goal is
expanded first, then the lexicographically smaller cell; neighbours are
always visited in the grid's fixed direction order.
"""

from __future__ import annotations

import heapq
from collections import deque
from dataclasses import dataclass

from heistcity.core.grid import GridSpec, get_grid
from heistcity.core.models import MapState, Position
from heistcity.systems.spatial_index import WallMap, build_occupancy_map


@dataclass(frozen=True, slots=True)
class ReachableCell:
    position: Position
    distance: int
    path: tuple[Position, ...]


# ---------------------------------------------------------------------------
# A* Pathfinder
# ---------------------------------------------------------------------------

def find_path(
    start: Position,
    goal: Position,
    wall_map: WallMap,
    map_state: MapState,
    grid_type: GridSpec,
    max_distance: int,
    exclude_id: str | None = None,
) -> list[Position] | None:
    """Shortest path from *start* to *goal*, both included, or None.

    *exclude_id* names one character or NPC whose cell is not treated as
    occupied (typically the mover's own target).
    """
    grid = get_grid(grid_type)
    occupied = build_occupancy_map(map_state, exclude_id)

    if not grid.in_bounds(goal) or goal in wall_map or goal in occupied:
        return None
    if start == goal:
        return [start]

    open_heap: list[tuple[int, int, int, int]] = []
    h0 = grid.distance(start, goal)
    heapq.heappush(open_heap, (h0, h0, start.x, start.y))

    g_score: dict[Position, int] = {start: 0}
    came_from: dict[Position, Position] = {}
    closed: set[Position] = set()

    while open_heap:
        _, _, cx, cy = heapq.heappop(open_heap)
        current = Position(cx, cy)

        if current == goal:
            return _reconstruct(came_from, current)

        if current in closed:
            continue
        closed.add(current)

        current_g = g_score[current]
        if current_g >= max_distance:
            continue

        for neighbor in grid.neighbors(current):
            if neighbor in closed or not grid.in_bounds(neighbor):
                continue
            if neighbor in wall_map or neighbor in occupied:
                continue

            tentative_g = current_g + 1
            if tentative_g < g_score.get(neighbor, max_distance + 1):
                g_score[neighbor] = tentative_g
                came_from[neighbor] = current
                h = grid.distance(neighbor, goal)
                heapq.heappush(open_heap, (tentative_g + h, h, neighbor.x, neighbor.y))

    return None


def _reconstruct(came_from: dict[Position, Position], current: Position) -> list[Position]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


# ---------------------------------------------------------------------------
# BFS flood fill
# ---------------------------------------------------------------------------

def get_reachable_positions(
    start: Position,
    max_distance: int,
    wall_map: WallMap,
    map_state: MapState,
    grid_type: GridSpec,
    exclude_id: str | None = None,
) -> dict[Position, ReachableCell]:
    """Every cell reachable within *max_distance* steps, with one shortest path each.

    The start cell is always included at distance 0.
    """
    grid = get_grid(grid_type)
    occupied = build_occupancy_map(map_state, exclude_id)

    result: dict[Position, ReachableCell] = {
        start: ReachableCell(start, 0, (start,)),
    }
    queue: deque[Position] = deque([start])

    while queue:
        current = queue.popleft()
        cell = result[current]
        if cell.distance >= max_distance:
            continue

        for neighbor in grid.neighbors(current):
            if neighbor in result or not grid.in_bounds(neighbor):
                continue
            if neighbor in wall_map or neighbor in occupied:
                continue
            result[neighbor] = ReachableCell(neighbor, cell.distance + 1, cell.path + (neighbor,))
            queue.append(neighbor)

    return result
