"""Spatial queries: line of sight, pathfinding, movement, range and cover."""

from heistcity.spatial.cover import CoverResult, find_best_cover_position, has_cover
from heistcity.spatial.line_of_sight import LOSResult, get_visible_positions, has_line_of_sight, hex_line_draw
from heistcity.spatial.movement import (
    MoveValidation,
    get_effective_movement,
    validate_move,
    validate_move_and_attack,
)
from heistcity.spatial.pathfinding import ReachableCell, find_path, get_reachable_positions
from heistcity.spatial.range_queries import (
    TargetResult,
    can_target,
    get_adjacent_characters,
    get_characters_in_range,
    get_enemies_in_range,
    get_items_in_range,
    is_target_in_melee,
)

__all__ = [
    "CoverResult",
    "LOSResult",
    "MoveValidation",
    "ReachableCell",
    "TargetResult",
    "can_target",
    "find_best_cover_position",
    "find_path",
    "get_adjacent_characters",
    "get_characters_in_range",
    "get_effective_movement",
    "get_enemies_in_range",
    "get_items_in_range",
    "get_reachable_positions",
    "get_visible_positions",
    "has_cover",
    "has_line_of_sight",
    "hex_line_draw",
    "is_target_in_melee",
    "validate_move",
    "validate_move_and_attack",
]
