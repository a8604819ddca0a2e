"""NPC archetypes and their fixed stat profiles."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from heistcity.core.enums import AttackType, ItemType, NPCArchetype
from heistcity.core.models import MapItem


@dataclass(frozen=True, slots=True)
class AttackProfile:
    skill: int
    damage: int
    range: int | None = None


@dataclass(frozen=True, slots=True)
class NPCProfile:
    """Stat block shared by every NPC of one archetype.

    A ``None`` skill means the archetype cannot make that kind of attack.
    """

    archetype: NPCArchetype
    movement: int
    melee_skill: int | None
    ballistic_skill: int | None
    wounds: int
    defense: int
    range: int | None
    damage: int

    @property
    def stationary(self) -> bool:
        return self.movement <= 0

    @property
    def can_melee(self) -> bool:
        return self.melee_skill is not None

    @property
    def can_ranged(self) -> bool:
        return self.ballistic_skill is not None and self.range is not None

    def attack_profile(self, attack_type: AttackType) -> AttackProfile | None:
        """Skill and damage for *attack_type*, or None if not allowed."""
        if attack_type == AttackType.MELEE:
            if self.melee_skill is None:
                return None
            return AttackProfile(self.melee_skill, self.damage)
        if not self.can_ranged:
            return None
        return AttackProfile(self.ballistic_skill, self.damage, self.range)


NPC_PROFILES: Mapping[NPCArchetype, NPCProfile] = MappingProxyType({
    NPCArchetype.SECURITY_GUARD: NPCProfile(
        archetype=NPCArchetype.SECURITY_GUARD,
        movement=4, melee_skill=7, ballistic_skill=None,
        wounds=1, defense=10, range=None, damage=2,
    ),
    NPCArchetype.TURRET: NPCProfile(
        archetype=NPCArchetype.TURRET,
        movement=0, melee_skill=None, ballistic_skill=7,
        wounds=1, defense=8, range=12, damage=2,
    ),
    NPCArchetype.ELITE: NPCProfile(
        archetype=NPCArchetype.ELITE,
        movement=4, melee_skill=7, ballistic_skill=9,
        wounds=1, defense=7, range=7, damage=3,
    ),
})

ITEM_ARCHETYPES: Mapping[ItemType, NPCArchetype] = MappingProxyType({
    ItemType.ENEMY_SECURITY_GUARD: NPCArchetype.SECURITY_GUARD,
    ItemType.ENEMY_CAMERA: NPCArchetype.TURRET,
    ItemType.ENEMY_ELITE: NPCArchetype.ELITE,
})


def archetype_for(item: MapItem) -> NPCArchetype | None:
    return ITEM_ARCHETYPES.get(item.type)


def get_npc_profile(item: MapItem) -> NPCProfile | None:
    archetype = ITEM_ARCHETYPES.get(item.type)
    if archetype is None:
        return None
    return NPC_PROFILES[archetype]
