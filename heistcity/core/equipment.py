"""Equipment definitions and stat-bonus lookups.

The host loads equipment records once (``load_equipment``) and the engine
only reads them through ``get_equipment_by_id`` / ``effective_stats``.

Skill stats (MS, BS, D, H, C) are target numbers, so a negative bonus is
an improvement; movement and wounds bonuses are positive-is-better.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable

from pydantic import TypeAdapter
from pydantic.dataclasses import dataclass as pydantic_dataclass

from heistcity.core.models import CharacterStats

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class StatBonus:
    """Additive stat modifiers granted by one equipped item."""

    movement: int = 0
    melee_skill: int = 0
    ballistic_skill: int = 0
    max_wounds: int = 0
    defense: int = 0
    hack: int = 0
    con: int = 0
    inventory_slots: int = 0


@pydantic_dataclass(frozen=True)
class EquipmentItem:
    """Immutable equipment blueprint, referenced by id from a character's loadout."""

    id: str
    kind: str = "Tool"            # Ranged | Melee | Thrown | Tool
    cost: int = 0
    damage: int = 0
    range: int = 0
    attacks: int = 1
    notice_hidden: bool = False     # attacking with it keeps the wielder Hidden
    notice_disguised: bool = False  # attacking with it keeps the wielder Disguised
    blocks_mob_sight: bool = False  # mobs ignore the wearer (security uniform)
    stat_bonus: StatBonus = StatBonus()
    description: str = ""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

EQUIPMENT_REGISTRY: dict[str, EquipmentItem] = {}

_item_list_ta = TypeAdapter(list[EquipmentItem])


def register_equipment(item: EquipmentItem) -> EquipmentItem:
    EQUIPMENT_REGISTRY[item.id] = item
    return item


def get_equipment_by_id(item_id: str | None) -> EquipmentItem | None:
    if item_id is None:
        return None
    return EQUIPMENT_REGISTRY.get(item_id)


def _normalise_record(raw: dict[str, Any]) -> dict[str, Any]:
    """Map a content-table record (``Damage``, ``Notice``...) to field names."""
    notice = raw.get("Notice") or {}
    bonus = raw.get("StatBonus") or {}
    special = raw.get("Special") or {}
    return {
        "id": raw["id"],
        "kind": raw.get("type", "Tool"),
        "cost": raw.get("Cost", 0),
        "damage": raw.get("Damage", 0),
        "range": raw.get("Range", 0),
        "attacks": raw.get("Attacks", 1),
        "notice_hidden": bool(notice.get("Hidden", False)),
        "notice_disguised": bool(notice.get("Disguised", False)),
        "blocks_mob_sight": bool(special.get("BlocksMobSight", False)),
        "stat_bonus": {
            "movement": bonus.get("movement", 0),
            "melee_skill": bonus.get("meleeSkill", 0),
            "ballistic_skill": bonus.get("ballisticSkill", 0),
            "max_wounds": bonus.get("maxWounds", 0),
            "defense": bonus.get("defense", 0),
            "hack": bonus.get("hack", 0),
            "con": bonus.get("con", 0),
            "inventory_slots": bonus.get("inventorySlots", 0),
        },
        "description": raw.get("Description", ""),
    }


def load_equipment(records: Iterable[dict[str, Any]]) -> list[EquipmentItem]:
    """Validate content-table records and register them, replacing same ids."""
    items = _item_list_ta.validate_python([_normalise_record(r) for r in records])
    for item in items:
        register_equipment(item)
    logger.info("Loaded %d equipment definitions", len(items))
    return items


def effective_stats(stats: CharacterStats, equipment_ids: Iterable[str]) -> CharacterStats:
    """Base stats plus the summed bonuses of every known equipped item."""
    movement = stats.movement
    melee = stats.melee_skill
    ballistic = stats.ballistic_skill
    max_wounds = stats.max_wounds
    defense = stats.defense
    hack = stats.hack
    con = stats.con

    for item_id in equipment_ids:
        item = EQUIPMENT_REGISTRY.get(item_id)
        if item is None:
            continue
        b = item.stat_bonus
        movement += b.movement
        melee += b.melee_skill
        ballistic += b.ballistic_skill
        max_wounds += b.max_wounds
        defense += b.defense
        hack += b.hack
        con += b.con

    return replace(
        stats,
        movement=max(0, movement),
        melee_skill=melee,
        ballistic_skill=ballistic,
        max_wounds=max_wounds,
        wounds=min(stats.wounds, max_wounds),
        defense=defense,
        hack=hack,
        con=con,
    )


def wears_mob_sight_blocker(equipment_ids: Iterable[str]) -> bool:
    for item_id in equipment_ids:
        item = EQUIPMENT_REGISTRY.get(item_id)
        if item is not None and item.blocks_mob_sight:
            return True
    return False


# ---------------------------------------------------------------------------
# Built-in items the rules reference by id
# ---------------------------------------------------------------------------

FISTS = register_equipment(EquipmentItem(
    id="fists", kind="Melee", damage=1,
    description="Unarmed strike.",
))

SECURITY_UNIFORM = register_equipment(EquipmentItem(
    id="security-uniform", kind="Tool", cost=1, blocks_mob_sight=True,
    description="Mobs treat the wearer as one of their own.",
))
