"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class GridType(str, Enum):
    """Board topology, chosen once per map."""

    HEX = "hex"
    SQUARE = "square"


@unique
class CharacterState(str, Enum):
    """Mutually exclusive visibility / condition state of a character."""

    OVERT = "Overt"
    HIDDEN = "Hidden"
    DISGUISED = "Disguised"
    STUNNED = "Stunned"
    UNCONSCIOUS = "Unconscious"


@unique
class ItemType(str, Enum):
    """Map entity kinds."""

    WALL = "wall"
    TABLE = "table"
    COMPUTER = "computer"
    GEAR = "gear"
    TELEPORTER = "teleporter"
    INFO_DROP = "info-drop"
    ENEMY_CAMERA = "enemy-camera"
    ENEMY_ELITE = "enemy-elite"
    ENEMY_SECURITY_GUARD = "enemy-security-guard"


@unique
class AttackType(str, Enum):
    MELEE = "melee"
    RANGED = "ranged"


@unique
class MoveKind(str, Enum):
    """Movement actions and the budget rule each one uses."""

    MOVE = "move"                              # M
    HUSTLE = "hustle"                          # 2M + 2
    SPRINT = "sprint"                          # 3M + 4
    NINJA_VANISH = "ninja-vanish"              # fixed 3
    CQC_TECHNIQUE = "cqc-technique"            # fixed 3, then melee
    MOVE_IT_ALONG = "move-it-along"            # fixed 1
    ALL_ACCORDING_TO_PLAN = "all-according-to-plan"  # fixed 1


@unique
class SkillStat(str, Enum):
    HACK = "hack"
    CON = "con"


@unique
class TurnPhase(str, Enum):
    """Phases of a game turn."""

    PLAYER_ACTIVATION = "player-activation"
    NPC_PHASE = "npc-phase"
    END_OF_TURN = "end-of-turn"
    GAME_OVER = "game-over"


@unique
class NPCArchetype(str, Enum):
    """Closed set of NPC behaviours; each carries a fixed stat profile."""

    SECURITY_GUARD = "security-guard"
    TURRET = "turret"
    ELITE = "elite"


@unique
class NPCActionType(str, Enum):
    MOVE = "move"
    MELEE_ATTACK = "melee-attack"
    RANGED_ATTACK = "ranged-attack"
    IDLE = "idle"


@unique
class VPEventType(str, Enum):
    """Victory-point scoring events."""

    HACK_COMPUTER = "hack-computer"
    HACK_INFO_DROP = "hack-info-drop"
    INFO_DROP_EXTRACT = "info-drop-extract"
    DOWN_ENEMY = "down-enemy"
    REVEAL_HIDDEN = "reveal-hidden"
    REVEAL_DISGUISED = "reveal-disguised"
    MOB_INTEL = "mob-intel"
    ESCAPE = "escape"


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    PLAYER_ATTACK = 0
    PLAYER_DEFENSE = 1
    NPC_PHASE = 2
    SKILL_CHECK = 3
    TIEBREAK = 4
