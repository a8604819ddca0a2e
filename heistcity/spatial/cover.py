"""Cover detection and cover-seeking position search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from heistcity.core.enums import GridType
from heistcity.core.grid import GridSpec
from heistcity.core.models import Position
from heistcity.spatial.line_of_sight import has_line_of_sight
from heistcity.spatial.pathfinding import ReachableCell
from heistcity.systems.spatial_index import ItemMap, WallMap

COVER_DEFENSE_BONUS = 1


@dataclass(frozen=True, slots=True)
class CoverResult:
    covered: bool
    defense_bonus: int = 0


def has_cover(
    attacker_position: Position,
    target_position: Position,
    los_blockers: WallMap,
    item_map: ItemMap,
    grid_type: GridSpec = GridType.HEX,
) -> CoverResult:
    """Cover against a shot from *attacker_position*.

    A wall on the line counts as cover too, so a blocked shot still
    reports the bonus.
    """
    los = has_line_of_sight(attacker_position, target_position, los_blockers, item_map, grid_type)
    if not los.clear or los.cover_positions:
        return CoverResult(covered=True, defense_bonus=COVER_DEFENSE_BONUS)
    return CoverResult(covered=False)


def find_best_cover_position(
    threats: Iterable[Position],
    reachable: Mapping[Position, ReachableCell],
    los_blockers: WallMap,
    item_map: ItemMap,
    grid_type: GridSpec = GridType.HEX,
) -> Position | None:
    """Reachable cell covered from the most threats, nearest first on ties.

    Returns None when no reachable cell is covered from any threat.
    """
    threat_list = list(threats)
    if not threat_list:
        return None

    best: ReachableCell | None = None
    best_score = 0
    for cell in sorted(reachable.values(), key=lambda c: (c.distance, c.position)):
        score = sum(
            1 for t in threat_list
            if has_cover(t, cell.position, los_blockers, item_map, grid_type).covered
        )
        if score > best_score:
            best, best_score = cell, score

    return best.position if best is not None else None
