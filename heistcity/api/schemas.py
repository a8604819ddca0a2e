"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from heistcity.core.enums import AttackType, MoveKind


# --- Board ---

class PositionSchema(BaseModel):
    x: int
    y: int


class CharacterSchema(BaseModel):
    id: str
    player_number: int
    name: str = ""
    role: str = ""
    x: int
    y: int
    state: str
    wounds: int
    max_wounds: int
    equipment: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    exhausted: bool = False
    victory_points: int = 0
    was_stunned: bool = False


class ItemSchema(BaseModel):
    id: str
    type: str
    x: int
    y: int
    provide_cover: bool = False


class ZoneSchema(BaseModel):
    id: str
    label: str
    x: int
    y: int
    width: int = 1
    height: int = 1
    hex_cells: list[PositionSchema] = Field(default_factory=list)


# --- Turn & alert ---

class AlertSchema(BaseModel):
    level: int
    units_revealed: int
    modifier: int
    total: int
    npc_actions_per_activation: int


class TurnSchema(BaseModel):
    turn_number: int
    phase: str
    phase_description: str
    active_player_number: int
    initiative_player: int
    pending_activations: list[str] = Field(default_factory=list)
    npc_phase_complete: bool = False


class MatchStateResponse(BaseModel):
    turn: TurnSchema
    alert: AlertSchema
    active_character_id: str | None = None
    characters: list[CharacterSchema]
    items: list[ItemSchema]
    zones: list[ZoneSchema]
    team_vp: dict[int, int]


# --- Commands ---

class MoveRequest(BaseModel):
    character_id: str
    x: int
    y: int
    kind: MoveKind = MoveKind.MOVE


class AttackRequest(BaseModel):
    attacker_id: str
    target_id: str
    attack_type: AttackType = AttackType.MELEE
    weapon_id: str = "fists"


class ActivationRequest(BaseModel):
    character_id: str


class CombatSchema(BaseModel):
    hit: bool
    attack_roll: int
    attack_target_number: int
    damage: int
    saved: bool | None = None
    defense_roll: int | None = None
    defense_target_number: int | None = None
    final_damage: int = 0
    target_wounds_after: int
    target_state_after: str
    target_downed: bool = False


class VPEventSchema(BaseModel):
    type: str
    character_id: str
    points: int
    turn_number: int
    description: str = ""


class ActionResponse(BaseModel):
    ok: bool
    reason: str = ""
    path: list[PositionSchema] = Field(default_factory=list)
    combat: CombatSchema | None = None
    vp_events: list[VPEventSchema] = Field(default_factory=list)


# --- NPCs ---

class NPCPreviewSchema(BaseModel):
    npc_id: str
    target_id: str | None = None
    expected_damage: float
    would_reach_target: bool


class NPCLogEntrySchema(BaseModel):
    npc_id: str
    archetype: str
    action: str
    target_id: str | None = None
    new_position: PositionSchema | None = None
    combat: CombatSchema | None = None


class StateChangeSchema(BaseModel):
    character_id: str
    old_state: str
    new_state: str
    cause: str


class NPCPhaseResponse(BaseModel):
    alert: AlertSchema
    combat_log: list[NPCLogEntrySchema] = Field(default_factory=list)
    state_changes: list[StateChangeSchema] = Field(default_factory=list)
    elites_spawned: list[str] = Field(default_factory=list)
    downed: list[str] = Field(default_factory=list)


# --- Events & control ---

class EventSchema(BaseModel):
    turn: int
    category: str
    message: str
    character_ids: list[str] = Field(default_factory=list)


class ControlResponse(BaseModel):
    status: str
    message: str
    turn: int = 0


# --- Config ---

class MatchConfigResponse(BaseModel):
    seed: int
    grid_type: str
    max_turns: int
    alert_modifier: int
    hex_map_radius: int
    square_map_size: int
    pixel_scale: int
    npc_path_search_multiplier: int
