"""Core data models: Position, CharacterToken, MapItem, MapState.

Every model is a frozen value. Engine functions never mutate a snapshot;
they build a new one with ``dataclasses.replace`` or the ``with_*`` helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from heistcity.core.enums import CharacterState, ItemType

NPC_ITEM_TYPES: frozenset[ItemType] = frozenset({
    ItemType.ENEMY_SECURITY_GUARD,
    ItemType.ENEMY_CAMERA,
    ItemType.ENEMY_ELITE,
})


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Immutable integer cell coordinate (axial q/r on hex, x/y on square)."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Position) -> Position:
        return Position(self.x - other.x, self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        return cls(int(data["x"]), int(data["y"]))


@dataclass(frozen=True, slots=True)
class CharacterStats:
    """Stat block of a player character."""

    movement: int = 4
    melee_skill: int = 7
    ballistic_skill: int = 7
    wounds: int = 5
    max_wounds: int = 5
    defense: int = 8
    hack: int = 8
    con: int = 8

    def with_wounds(self, wounds: int) -> CharacterStats:
        return replace(self, wounds=max(0, min(wounds, self.max_wounds)))

    @property
    def at_full_wounds(self) -> bool:
        return self.wounds == self.max_wounds


@dataclass(frozen=True, slots=True)
class CharacterToken:
    """A player-controlled unit."""

    id: str
    player_number: int
    position: Position
    stats: CharacterStats = field(default_factory=CharacterStats)
    state: CharacterState = CharacterState.OVERT
    name: str = ""
    role: str = ""
    color: str = ""
    equipment: tuple[str, ...] = ()
    actions: tuple[str, ...] = ()
    exhausted: bool = False
    victory_points: int = 0
    was_stunned: bool = False  # downed to Stunned at least once this game

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def active(self) -> bool:
        return self.state != CharacterState.UNCONSCIOUS

    def moved_to(self, position: Position) -> CharacterToken:
        return replace(self, position=position)

    def to_dict(self) -> dict[str, Any]:
        s = self.stats
        return {
            "id": self.id,
            "playerNumber": self.player_number,
            "position": self.position.to_dict(),
            "name": self.name,
            "role": self.role,
            "color": self.color,
            "state": self.state.value,
            "stats": {
                "movement": s.movement, "meleeSkill": s.melee_skill,
                "ballisticSkill": s.ballistic_skill, "wounds": s.wounds,
                "maxWounds": s.max_wounds, "defense": s.defense,
                "hack": s.hack, "con": s.con,
            },
            "equipment": list(self.equipment),
            "actions": list(self.actions),
            "exhausted": self.exhausted,
            "victoryPoints": self.victory_points,
            "wasStunned": self.was_stunned,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CharacterToken:
        raw = data.get("stats", {})
        max_wounds = int(raw.get("maxWounds", raw.get("wounds", 5)))
        stats = CharacterStats(
            movement=int(raw.get("movement", 4)),
            melee_skill=int(raw.get("meleeSkill", 7)),
            ballistic_skill=int(raw.get("ballisticSkill", 7)),
            wounds=int(raw.get("wounds", max_wounds)),
            max_wounds=max_wounds,
            defense=int(raw.get("defense", 8)),
            hack=int(raw.get("hack", 8)),
            con=int(raw.get("con", 8)),
        )
        return cls(
            id=str(data["id"]),
            player_number=int(data["playerNumber"]),
            position=Position.from_dict(data["position"]),
            stats=stats,
            state=CharacterState(data.get("state", CharacterState.OVERT.value)),
            name=data.get("name", ""),
            role=data.get("role", ""),
            color=data.get("color", ""),
            equipment=tuple(data.get("equipment") or ()),
            actions=tuple(a for a in (data.get("actions") or ()) if a),
            exhausted=bool(data.get("exhausted", False)),
            victory_points=int(data.get("victoryPoints", 0)),
            was_stunned=bool(data.get("wasStunned", False)),
        )


@dataclass(frozen=True, slots=True)
class MapItem:
    """Static or semi-static map entity: walls, cover, NPCs, portals."""

    id: str
    type: ItemType
    position: Position
    provide_cover: bool = False

    @property
    def is_npc(self) -> bool:
        return self.type in NPC_ITEM_TYPES

    @property
    def grants_cover(self) -> bool:
        return self.type == ItemType.TABLE or self.provide_cover

    def moved_to(self, position: Position) -> MapItem:
        return replace(self, position=position)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "position": self.position.to_dict(),
            "provideCover": self.provide_cover,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapItem:
        return cls(
            id=str(data["id"]),
            type=ItemType(data["type"]),
            position=Position.from_dict(data["position"]),
            provide_cover=bool(data.get("provideCover", False)),
        )


@dataclass(frozen=True, slots=True)
class MapZone:
    """Labelled board region (deployment zones, objectives)."""

    id: str
    label: str
    position: Position
    width: int = 1
    height: int = 1
    hex_cells: tuple[Position, ...] = ()

    def contains(self, pos: Position) -> bool:
        if self.hex_cells:
            return pos in self.hex_cells
        return (
            self.position.x <= pos.x < self.position.x + self.width
            and self.position.y <= pos.y < self.position.y + self.height
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "position": self.position.to_dict(),
            "width": self.width,
            "height": self.height,
            "hexCells": [c.to_dict() for c in self.hex_cells],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapZone:
        return cls(
            id=str(data["id"]),
            label=data.get("label", ""),
            position=Position.from_dict(data["position"]),
            width=int(data.get("width", 1)),
            height=int(data.get("height", 1)),
            hex_cells=tuple(Position.from_dict(c) for c in data.get("hexCells") or ()),
        )


@dataclass(frozen=True, slots=True)
class MapState:
    """Full board snapshot. Treated as an immutable value."""

    items: tuple[MapItem, ...] = ()
    characters: tuple[CharacterToken, ...] = ()
    zones: tuple[MapZone, ...] = ()
    spawned_portals: frozenset[str] = frozenset()

    # -- lookups --

    def character(self, character_id: str) -> CharacterToken:
        """Return the character with *character_id*; KeyError if absent."""
        for char in self.characters:
            if char.id == character_id:
                return char
        raise KeyError(f"No character {character_id!r} in map state")

    def find_character(self, character_id: str) -> CharacterToken | None:
        for char in self.characters:
            if char.id == character_id:
                return char
        return None

    def item(self, item_id: str) -> MapItem:
        for it in self.items:
            if it.id == item_id:
                return it
        raise KeyError(f"No item {item_id!r} in map state")

    def find_item(self, item_id: str) -> MapItem | None:
        for it in self.items:
            if it.id == item_id:
                return it
        return None

    def npcs(self) -> list[MapItem]:
        return [it for it in self.items if it.is_npc]

    def items_of_type(self, item_type: ItemType) -> list[MapItem]:
        return [it for it in self.items if it.type == item_type]

    # -- copy-on-write helpers --

    def with_character(self, updated: CharacterToken) -> MapState:
        chars = tuple(updated if c.id == updated.id else c for c in self.characters)
        return replace(self, characters=chars)

    def replace_characters(self, characters: Iterable[CharacterToken]) -> MapState:
        return replace(self, characters=tuple(characters))

    def with_item(self, updated: MapItem) -> MapState:
        items = tuple(updated if it.id == updated.id else it for it in self.items)
        return replace(self, items=items)

    def add_items(self, new_items: Iterable[MapItem]) -> MapState:
        return replace(self, items=self.items + tuple(new_items))

    def mark_portals_spawned(self, portal_ids: Iterable[str]) -> MapState:
        return replace(self, spawned_portals=self.spawned_portals | frozenset(portal_ids))

    @property
    def elites_triggered(self) -> bool:
        """True once the one-time elite reinforcement has landed this game."""
        return bool(self.spawned_portals) or any(it.type == ItemType.ENEMY_ELITE for it in self.items)

    # -- serialization --

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [it.to_dict() for it in self.items],
            "characters": [c.to_dict() for c in self.characters],
            "zones": [z.to_dict() for z in self.zones],
            "spawnedPortals": sorted(self.spawned_portals),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapState:
        """Build a snapshot from pre-validated map records."""
        return cls(
            items=tuple(MapItem.from_dict(it) for it in data.get("items", ())),
            characters=tuple(CharacterToken.from_dict(c) for c in data.get("characters", ())),
            zones=tuple(MapZone.from_dict(z) for z in data.get("zones", ())),
            spawned_portals=frozenset(data.get("spawnedPortals", ())),
        )
