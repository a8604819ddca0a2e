"""Core data model, grid geometry and character rules."""

from heistcity.core.enums import (
    AttackType,
    CharacterState,
    Domain,
    GridType,
    ItemType,
    MoveKind,
    NPCActionType,
    NPCArchetype,
    SkillStat,
    TurnPhase,
    VPEventType,
)
from heistcity.core.grid import GridGeometry, HexGrid, SquareGrid, get_grid, make_grid
from heistcity.core.models import CharacterStats, CharacterToken, MapItem, MapState, MapZone, Position
from heistcity.core.results import (
    AttackResult,
    CombatResult,
    DamageOutcome,
    DefenseResult,
    DiceRollResult,
    OpposedRollResult,
    SkillCheckResult,
)

__all__ = [
    "AttackResult",
    "AttackType",
    "CharacterState",
    "CharacterStats",
    "CharacterToken",
    "CombatResult",
    "DamageOutcome",
    "DefenseResult",
    "DiceRollResult",
    "Domain",
    "GridGeometry",
    "GridType",
    "HexGrid",
    "ItemType",
    "MapItem",
    "MapState",
    "MapZone",
    "MoveKind",
    "NPCActionType",
    "NPCArchetype",
    "OpposedRollResult",
    "Position",
    "SkillCheckResult",
    "SkillStat",
    "SquareGrid",
    "TurnPhase",
    "VPEventType",
    "get_grid",
    "make_grid",
]
