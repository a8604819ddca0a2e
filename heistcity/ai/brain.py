"""NPC action selection and attack resolution.

Each archetype has a handler class registered in ``ARCHETYPE_HANDLERS``.
Handlers read an ``NPCContext`` that lazily computes the distance to the
target and whether a ranged shot is available.

  security guard : melee if adjacent, else move
  turret         : ranged if in range with clear sight, else idle
  elite          : ranged if possible, else melee if adjacent, else move
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from heistcity.actions.combat import finish_attack
from heistcity.ai.archetypes import NPCProfile
from heistcity.core.enums import AttackType, CharacterState, NPCActionType, NPCArchetype
from heistcity.core.grid import GridSpec, get_grid
from heistcity.core.models import CharacterToken, MapItem, MapState
from heistcity.core.results import AttackResult, CombatResult, DiceRollResult
from heistcity.spatial.line_of_sight import LOSResult, has_line_of_sight
from heistcity.systems.spatial_index import build_item_position_map, build_los_blockers

logger = logging.getLogger(__name__)

AUTO_MISS_TARGET = 99


# =====================================================================
# NPC context
# =====================================================================

@dataclass(slots=True)
class NPCContext:
    """Everything an archetype handler needs to pick one action."""

    npc: MapItem
    profile: NPCProfile
    target: CharacterToken
    map_state: MapState
    grid_type: GridSpec

    _distance: int | None = field(default=None, repr=False)
    _los: LOSResult | None = field(default=None, repr=False)

    @property
    def distance(self) -> int:
        if self._distance is None:
            self._distance = get_grid(self.grid_type).distance(self.npc.position, self.target.position)
        return self._distance

    @property
    def adjacent(self) -> bool:
        return self.distance <= 1

    @property
    def in_range(self) -> bool:
        return self.profile.can_ranged and self.distance <= self.profile.range

    @property
    def los(self) -> LOSResult:
        if self._los is None:
            self._los = has_line_of_sight(
                self.npc.position,
                self.target.position,
                build_los_blockers(self.map_state),
                build_item_position_map(self.map_state),
                self.grid_type,
            )
        return self._los

    @property
    def can_shoot(self) -> bool:
        return self.in_range and self.los.clear

    @property
    def can_strike(self) -> bool:
        return self.adjacent and self.profile.can_melee


# =====================================================================
# Archetype handlers
# =====================================================================

class ArchetypeHandler(ABC):
    @abstractmethod
    def select(self, ctx: NPCContext) -> NPCActionType:
        """Choose one action for this NPC against ``ctx.target``."""


class SecurityGuardHandler(ArchetypeHandler):
    def select(self, ctx: NPCContext) -> NPCActionType:
        if ctx.can_strike:
            return NPCActionType.MELEE_ATTACK
        return NPCActionType.MOVE


class TurretHandler(ArchetypeHandler):
    def select(self, ctx: NPCContext) -> NPCActionType:
        if ctx.can_shoot:
            return NPCActionType.RANGED_ATTACK
        return NPCActionType.IDLE


class EliteHandler(ArchetypeHandler):
    def select(self, ctx: NPCContext) -> NPCActionType:
        if ctx.can_shoot:
            return NPCActionType.RANGED_ATTACK
        if ctx.can_strike:
            return NPCActionType.MELEE_ATTACK
        return NPCActionType.MOVE


ARCHETYPE_HANDLERS: dict[NPCArchetype, ArchetypeHandler] = {
    NPCArchetype.SECURITY_GUARD: SecurityGuardHandler(),
    NPCArchetype.TURRET: TurretHandler(),
    NPCArchetype.ELITE: EliteHandler(),
}


def select_npc_action(
    npc: MapItem,
    profile: NPCProfile,
    target: CharacterToken,
    map_state: MapState,
    grid_type: GridSpec,
) -> NPCActionType:
    ctx = NPCContext(npc, profile, target, map_state, grid_type)
    return ARCHETYPE_HANDLERS[profile.archetype].select(ctx)


def attack_type_for(action: NPCActionType) -> AttackType | None:
    match action:
        case NPCActionType.MELEE_ATTACK:
            return AttackType.MELEE
        case NPCActionType.RANGED_ATTACK:
            return AttackType.RANGED
        case _:
            return None


# =====================================================================
# Attack resolution
# =====================================================================

def roll_npc_attack(
    npc: MapItem,
    profile: NPCProfile,
    attack_type: AttackType,
    attack_roll: DiceRollResult,
) -> AttackResult:
    """Attack step only: ``2d6 > skill``; a disallowed attack type always misses."""
    info = profile.attack_profile(attack_type)
    weapon_id = f"npc-{attack_type.value}"

    if info is None:
        logger.debug("%s cannot make a %s attack; automatic miss", npc.id, attack_type.value)
        return AttackResult(
            hit=False, roll=attack_roll, target_number=AUTO_MISS_TARGET, damage=0,
            weapon_id=weapon_id, attack_type=attack_type, attacker_state=CharacterState.OVERT,
        )

    hit = attack_roll.total > info.skill
    return AttackResult(
        hit=hit, roll=attack_roll, target_number=info.skill,
        damage=info.damage if hit else 0,
        weapon_id=weapon_id, attack_type=attack_type, attacker_state=CharacterState.OVERT,
    )


def resolve_npc_attack(
    npc: MapItem,
    profile: NPCProfile,
    target: CharacterToken,
    attack_type: AttackType,
    attack_roll: DiceRollResult,
    defense_roll: DiceRollResult,
    cover_bonus: int = 0,
) -> CombatResult:
    """Full NPC attack against *target* using the NPC's fixed skill and damage."""
    attack = roll_npc_attack(npc, profile, attack_type, attack_roll)
    return finish_attack(target, attack, defense_roll, cover_bonus)
