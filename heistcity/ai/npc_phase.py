"""Automated NPC phase: every NPC acts, then the host applies the result.

``execute_npc_phase`` resolves real attacks with rolls drawn from the
injected provider.  ``preview_npc_phase`` runs the same decisions without
dice and reports expected damage instead.

Before every single action the NPC's position and target are re-read from
the working snapshot, so damage dealt earlier in the phase is respected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from heistcity.actions.combat import apply_combat_result, expected_damage_against, finish_attack
from heistcity.ai.archetypes import NPCProfile, get_npc_profile
from heistcity.ai.brain import attack_type_for, roll_npc_attack, select_npc_action
from heistcity.ai.movement import calculate_npc_move
from heistcity.ai.spawner import apply_elite_spawn, spawn_elites
from heistcity.ai.targeting import select_mob_target
from heistcity.core.enums import AttackType, CharacterState, NPCActionType, NPCArchetype
from heistcity.core.grid import GridSpec
from heistcity.core.models import CharacterToken, MapItem, MapState, Position
from heistcity.core.results import CombatResult
from heistcity.engine.alert import AlertLevelState, should_spawn_elites
from heistcity.spatial.cover import has_cover
from heistcity.systems.rng import RollProvider
from heistcity.systems.spatial_index import build_item_position_map, build_los_blockers

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class NPCCombatLogEntry:
    npc_id: str
    archetype: NPCArchetype
    action: NPCActionType
    target_id: str | None = None
    result: CombatResult | None = None
    new_position: Position | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "npcId": self.npc_id,
            "archetype": self.archetype.value,
            "action": self.action.value,
            "targetId": self.target_id,
        }
        if self.new_position is not None:
            data["newPosition"] = self.new_position.to_dict()
        if self.result is not None:
            attack = self.result.attack
            data["attack"] = {
                "hit": attack.hit,
                "roll": attack.roll.to_dict(),
                "targetNumber": attack.target_number,
                "damage": attack.damage,
            }
            if self.result.defense is not None:
                d = self.result.defense
                data["defense"] = {
                    "saved": d.saved,
                    "roll": d.roll.to_dict(),
                    "targetNumber": d.target_number,
                    "damageReduced": d.damage_reduced,
                    "finalDamage": d.final_damage,
                }
            data["targetWoundsAfter"] = self.result.target_wounds_after
            data["targetStateAfter"] = self.result.target_state_after.value
        return data


@dataclass(frozen=True, slots=True)
class StateChangeEntry:
    character_id: str
    old_state: CharacterState
    new_state: CharacterState
    cause: str


@dataclass(frozen=True, slots=True)
class NPCPhaseResult:
    map_state: MapState
    combat_log: tuple[NPCCombatLogEntry, ...] = ()
    state_changes: tuple[StateChangeEntry, ...] = ()
    elites_spawned: tuple[MapItem, ...] = ()
    downed: tuple[str, ...] = field(default=())  # characters dropped to 0 wounds for the first time


@dataclass(frozen=True, slots=True)
class NPCPhasePreview:
    npc_id: str
    target_id: str | None
    expected_damage: float
    would_reach_target: bool


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _ranged_cover_bonus(npc: MapItem, target: CharacterToken, state: MapState, grid_type: GridSpec) -> int:
    cover = has_cover(
        npc.position, target.position,
        build_los_blockers(state), build_item_position_map(state), grid_type,
    )
    return cover.defense_bonus


def _npc_units(state: MapState) -> list[tuple[str, NPCProfile]]:
    units: list[tuple[str, NPCProfile]] = []
    for item in state.npcs():
        profile = get_npc_profile(item)
        if profile is not None:
            units.append((item.id, profile))
    return units


# ---------------------------------------------------------------------------
# Phase execution
# ---------------------------------------------------------------------------

def execute_npc_phase(
    map_state: MapState,
    alert: AlertLevelState,
    grid_type: GridSpec,
    roll_provider: RollProvider,
    search_multiplier: int = 3,
) -> NPCPhaseResult:
    """Run every NPC's actions for this phase against a working snapshot.

    A defense roll is drawn only when an attack hits.
    """
    if alert.level == 0:
        logger.debug("Alert level 0: NPCs stay passive")
        return NPCPhaseResult(map_state=map_state)

    state = map_state
    log: list[NPCCombatLogEntry] = []
    changes: list[StateChangeEntry] = []
    downed: list[str] = []
    spawned: list[MapItem] = []

    if should_spawn_elites(alert.level):
        spawned = spawn_elites(state)
        state = apply_elite_spawn(state, spawned)

    for npc_id, profile in _npc_units(state):
        for _ in range(alert.npc_actions_per_activation):
            npc = state.item(npc_id)
            target = select_mob_target(npc, state, grid_type)
            if target is None:
                break

            action = select_npc_action(npc, profile, target, state, grid_type)

            if action == NPCActionType.MOVE:
                move = calculate_npc_move(npc, profile.movement, target, state, grid_type, search_multiplier)
                if move is None:
                    log.append(NPCCombatLogEntry(npc_id, profile.archetype, NPCActionType.IDLE, target.id))
                    continue
                state = state.with_item(npc.moved_to(move.new_position))
                log.append(NPCCombatLogEntry(
                    npc_id, profile.archetype, NPCActionType.MOVE, target.id,
                    new_position=move.new_position,
                ))
                continue

            attack_type = attack_type_for(action)
            if attack_type is None:
                log.append(NPCCombatLogEntry(npc_id, profile.archetype, NPCActionType.IDLE, target.id))
                continue

            attack = roll_npc_attack(npc, profile, attack_type, roll_provider())
            if attack.hit:
                cover = _ranged_cover_bonus(npc, target, state, grid_type) if attack_type == AttackType.RANGED else 0
                result = finish_attack(target, attack, roll_provider(), cover)
            else:
                result = finish_attack(target, attack, attack.roll)

            updated = apply_combat_result(target, result)
            if updated is not target:
                state = state.with_character(updated)
            if result.target_state_after != target.state:
                changes.append(StateChangeEntry(
                    target.id, target.state, result.target_state_after,
                    f"{profile.archetype.value} {attack_type.value} attack",
                ))
            if result.target_downed:
                downed.append(target.id)

            log.append(NPCCombatLogEntry(npc_id, profile.archetype, action, target.id, result=result))

    logger.info(
        "NPC phase at alert %d: %d action(s), %d state change(s), %d elite(s) spawned",
        alert.level, len(log), len(changes), len(spawned),
    )
    return NPCPhaseResult(
        map_state=state,
        combat_log=tuple(log),
        state_changes=tuple(changes),
        elites_spawned=tuple(spawned),
        downed=tuple(downed),
    )


# ---------------------------------------------------------------------------
# Dice-free preview
# ---------------------------------------------------------------------------

def preview_npc_phase(
    map_state: MapState,
    alert: AlertLevelState,
    grid_type: GridSpec,
    search_multiplier: int = 3,
) -> list[NPCPhasePreview]:
    """Per-NPC projection of target, reach and expected damage.

    Moves are simulated on a working copy; attacks add expected damage but
    never change wounds.  Elites that would spawn are not included.
    """
    if alert.level == 0:
        return []

    state = map_state
    previews: list[NPCPhasePreview] = []

    for npc_id, profile in _npc_units(state):
        npc = state.item(npc_id)
        target = select_mob_target(npc, state, grid_type)
        if target is None:
            previews.append(NPCPhasePreview(npc_id, None, 0.0, False))
            continue

        total = 0.0
        reached = False
        for _ in range(alert.npc_actions_per_activation):
            npc = state.item(npc_id)
            action = select_npc_action(npc, profile, target, state, grid_type)

            if action == NPCActionType.MOVE:
                move = calculate_npc_move(npc, profile.movement, target, state, grid_type, search_multiplier)
                if move is not None:
                    state = state.with_item(npc.moved_to(move.new_position))
                continue

            attack_type = attack_type_for(action)
            info = profile.attack_profile(attack_type) if attack_type is not None else None
            if info is None:
                continue
            reached = True
            cover = _ranged_cover_bonus(npc, target, state, grid_type) if attack_type == AttackType.RANGED else 0
            total += expected_damage_against(info.skill, info.damage, target, cover)

        if not reached:
            # Ended the budget within striking distance.
            final = select_npc_action(state.item(npc_id), profile, target, state, grid_type)
            reached = attack_type_for(final) is not None

        previews.append(NPCPhasePreview(npc_id, target.id, total, reached))

    return previews
