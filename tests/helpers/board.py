"""Board builders shared by the test modules.

Usage:
    hero = make_character("a", player=1, pos=(0, 0))
    board = make_board([hero], [guard("g1", (3, 0))])
"""

from __future__ import annotations

import sys
import os
from typing import Iterable

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from heistcity.core.enums import CharacterState, ItemType
from heistcity.core.equipment import EquipmentItem, register_equipment
from heistcity.core.models import CharacterStats, CharacterToken, MapItem, MapState, MapZone, Position


def make_character(
    cid: str,
    player: int = 1,
    pos: tuple[int, int] = (0, 0),
    state: CharacterState = CharacterState.OVERT,
    equipment: tuple[str, ...] = (),
    actions: tuple[str, ...] = (),
    was_stunned: bool = False,
    **stats: int,
) -> CharacterToken:
    """Character with default stats (M4 MS7 BS7 W5 D8 H8 C8) unless overridden."""
    return CharacterToken(
        id=cid,
        player_number=player,
        position=Position(*pos),
        stats=CharacterStats(**stats),
        state=state,
        equipment=equipment,
        actions=actions,
        was_stunned=was_stunned,
    )


def make_item(iid: str, item_type: ItemType, pos: tuple[int, int], cover: bool = False) -> MapItem:
    return MapItem(id=iid, type=item_type, position=Position(*pos), provide_cover=cover)


def wall(iid: str, pos: tuple[int, int]) -> MapItem:
    return make_item(iid, ItemType.WALL, pos)


def table(iid: str, pos: tuple[int, int]) -> MapItem:
    return make_item(iid, ItemType.TABLE, pos)


def guard(iid: str, pos: tuple[int, int]) -> MapItem:
    return make_item(iid, ItemType.ENEMY_SECURITY_GUARD, pos)


def turret(iid: str, pos: tuple[int, int]) -> MapItem:
    return make_item(iid, ItemType.ENEMY_CAMERA, pos)


def elite(iid: str, pos: tuple[int, int]) -> MapItem:
    return make_item(iid, ItemType.ENEMY_ELITE, pos)


def portal(iid: str, pos: tuple[int, int]) -> MapItem:
    return make_item(iid, ItemType.TELEPORTER, pos)


def make_board(
    characters: Iterable[CharacterToken] = (),
    items: Iterable[MapItem] = (),
    zones: Iterable[MapZone] = (),
) -> MapState:
    return MapState(items=tuple(items), characters=tuple(characters), zones=tuple(zones))


# Ranged weapon shared by combat and match tests.
TEST_PISTOL = register_equipment(EquipmentItem(id="test-pistol", kind="Ranged", damage=2, range=8))
