"""Match coordinator: owns the authoritative snapshot and the turn state.

Engine functions are pure and never talk to the host.  ``Match`` is the
single place where their results are applied and pushed out through a
``MatchEmitters`` implementation (a websocket bridge, a UI store, or the
API's event log).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from heistcity.actions.combat import apply_damage, finish_attack, resolve_melee_attack, resolve_ranged_attack
from heistcity.ai.npc_phase import NPCPhasePreview, NPCPhaseResult, execute_npc_phase, preview_npc_phase
from heistcity.config import EngineConfig
from heistcity.core.enums import AttackType, MoveKind, TurnPhase, VPEventType
from heistcity.core.equipment import get_equipment_by_id
from heistcity.core.grid import make_grid
from heistcity.core.models import CharacterToken, MapState, Position
from heistcity.core.results import CombatResult, DiceRollResult
from heistcity.core.states import ability_state_transition, apply_state_transition
from heistcity.engine.activation import get_first_empty_slot, get_repeat_penalty, record_action
from heistcity.engine.alert import AlertLevelState, compute_alert_level
from heistcity.engine.turns import (
    TurnState,
    advance_to_end_of_turn,
    advance_to_npc_phase,
    all_players_activated,
    advance_to_next_turn,
    create_initial_turn_state,
    get_end_of_turn_updates,
    is_final_turn,
    mark_activated,
    validate_activation,
)
from heistcity.engine.victory import VPEvent, apply_vp, award_vp, calculate_escape_vp
from heistcity.spatial.cover import has_cover
from heistcity.spatial.movement import validate_move
from heistcity.spatial.range_queries import can_target, is_target_in_melee
from heistcity.systems.rng import RollProvider
from heistcity.systems.spatial_index import build_item_position_map, build_los_blockers, build_wall_map

logger = logging.getLogger(__name__)

MELEE_RANGE = 1
_RANGED_KINDS = frozenset({"Ranged", "Thrown"})


class MatchEmitters(Protocol):
    """Host callbacks that publish state changes."""

    def update_character(self, character_id: str, fields: dict[str, Any]) -> None: ...

    def record_dice_roll(self, die1: int, die2: int, total: int) -> None: ...

    def replace_map_state(self, map_state: MapState) -> None: ...


class NullEmitters:
    """Emitter that discards everything (CLI runs, tests)."""

    def update_character(self, character_id: str, fields: dict[str, Any]) -> None:
        pass

    def record_dice_roll(self, die1: int, die2: int, total: int) -> None:
        pass

    def replace_map_state(self, map_state: MapState) -> None:
        pass


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Result of a player command. ``ok=False`` means nothing changed."""

    ok: bool
    reason: str = ""
    path: tuple[Position, ...] = ()
    combat: CombatResult | None = None
    vp_events: tuple[VPEvent, ...] = ()


def _rejected(reason: str) -> ActionOutcome:
    logger.debug("Command rejected: %s", reason)
    return ActionOutcome(ok=False, reason=reason)


class Match:
    """One game between two players on a single board."""

    def __init__(
        self,
        config: EngineConfig,
        map_state: MapState,
        roll_provider: RollProvider,
        emitters: MatchEmitters | None = None,
    ) -> None:
        self.config = config
        self._map_state = map_state
        self._roll_provider = roll_provider
        self._emitters: MatchEmitters = emitters or NullEmitters()
        self.grid = make_grid(config.grid_type, config)
        self._turn = create_initial_turn_state(map_state)
        # character currently mid-activation, if any
        self._active_character_id: str | None = None
        self._vp_log: list[VPEvent] = []

    # -- read access --

    @property
    def map_state(self) -> MapState:
        return self._map_state

    @property
    def turn(self) -> TurnState:
        return self._turn

    @property
    def active_character_id(self) -> str | None:
        return self._active_character_id

    @property
    def vp_log(self) -> list[VPEvent]:
        return list(self._vp_log)

    @property
    def game_over(self) -> bool:
        return self._turn.phase == TurnPhase.GAME_OVER

    def alert(self) -> AlertLevelState:
        return compute_alert_level(self._map_state, self.config.alert_modifier)

    # -- internals --

    def _roll(self) -> DiceRollResult:
        roll = self._roll_provider()
        self._emitters.record_dice_roll(roll.die1, roll.die2, roll.total)
        return roll

    def _set_character(self, updated: CharacterToken, fields: dict[str, Any]) -> None:
        self._map_state = self._map_state.with_character(updated)
        self._emitters.update_character(updated.id, fields)

    def _award(self, character_id: str, event_type: VPEventType, description: str) -> VPEvent:
        event = award_vp(character_id, event_type, self._turn.turn_number, description)
        self._map_state = apply_vp(self._map_state, event)
        self._vp_log.append(event)
        char = self._map_state.character(character_id)
        self._emitters.update_character(character_id, {"victoryPoints": char.victory_points})
        return event

    def _begin_action(self, character_id: str) -> CharacterToken | ActionOutcome:
        """Return the acting character, or a rejection when it may not act now."""
        if self._active_character_id is not None and self._active_character_id != character_id:
            return _rejected(f"{self._active_character_id} must end its activation first")

        if self._active_character_id is None:
            check = validate_activation(self._turn, self._map_state, character_id)
            if not check.allowed:
                return _rejected(check.reason)

        char = self._map_state.character(character_id)
        if char.exhausted:
            return _rejected(f"{char.display_name} is exhausted")
        if get_first_empty_slot(char) < 0:
            return _rejected(f"{char.display_name} has no action slots left")
        return char

    # -- player commands --

    def move_character(self, character_id: str, destination: Position, kind: MoveKind = MoveKind.MOVE) -> ActionOutcome:
        acting = self._begin_action(character_id)
        if isinstance(acting, ActionOutcome):
            return acting

        check = validate_move(
            acting, destination, build_wall_map(self._map_state), self._map_state,
            self.grid, kind,
        )
        if not check.valid:
            return _rejected(check.reason)

        self._active_character_id = acting.id
        updated = record_action(acting.moved_to(destination), kind.value)
        self._set_character(updated, {"position": destination.to_dict(), "actions": list(updated.actions)})
        logger.info("%s moves to %s (%d)", updated.display_name, destination, check.distance)
        return ActionOutcome(ok=True, path=check.path)

    def attack(
        self,
        attacker_id: str,
        target_id: str,
        attack_type: AttackType,
        weapon_id: str = "fists",
    ) -> ActionOutcome:
        """Resolve a player attack against an opposing character."""
        acting = self._begin_action(attacker_id)
        if isinstance(acting, ActionOutcome):
            return acting

        target = self._map_state.find_character(target_id)
        if target is None:
            return _rejected(f"Unknown target {target_id!r}")
        if target.player_number == acting.player_number:
            return _rejected("Cannot attack a teammate")
        if not target.active:
            return _rejected(f"{target.display_name} is already unconscious")

        weapon = get_equipment_by_id(weapon_id)
        if weapon_id != "fists" and weapon_id not in acting.equipment:
            return _rejected(f"{acting.display_name} does not carry {weapon_id}")

        if attack_type == AttackType.RANGED:
            if weapon is None or weapon.kind not in _RANGED_KINDS or weapon.range <= 0:
                return _rejected(f"{weapon_id} is not a ranged weapon")
            reach = weapon.range
        else:
            reach = MELEE_RANGE

        los_blockers = build_los_blockers(self._map_state)
        item_map = build_item_position_map(self._map_state)
        grid = self.grid
        targeting = can_target(acting.position, target.position, reach, los_blockers, item_map, grid)
        if not targeting.in_range:
            return _rejected(f"Target is {targeting.distance} away, weapon reach is {reach}")
        if not targeting.has_los:
            return _rejected("No line of sight to target")

        cover_bonus = 0
        into_melee = False
        if attack_type == AttackType.RANGED:
            cover_bonus = has_cover(acting.position, target.position, los_blockers, item_map, grid).defense_bonus
            into_melee = is_target_in_melee(acting, target, self._map_state, grid)

        self._active_character_id = acting.id
        penalty = get_repeat_penalty(acting, attack_type.value)
        attack_roll = self._roll()
        if attack_type == AttackType.RANGED:
            attack = resolve_ranged_attack(acting, target, weapon_id, attack_roll, penalty, into_melee)
        else:
            attack = resolve_melee_attack(acting, target, weapon_id, attack_roll, penalty)
        # The defense die is only thrown when the attack lands.
        defense_roll = self._roll() if attack.hit else attack_roll
        result = finish_attack(target, attack, defense_roll, cover_bonus)

        events: list[VPEvent] = []
        if result.defense is not None:
            damaged, outcome = apply_damage(target, result.defense.final_damage)
            self._set_character(damaged, {
                "wounds": damaged.stats.wounds,
                "state": damaged.state.value,
                "wasStunned": damaged.was_stunned,
            })
            if outcome.vp_awarded:
                events.append(self._award(
                    acting.id, VPEventType.DOWN_ENEMY, f"{acting.display_name} downed {target.display_name}",
                ))

        acting = self._map_state.character(acting.id)
        new_state = ability_state_transition(
            acting, attack_type.value, weapon_id, "hit" if result.attack.hit else "miss",
        )
        if new_state is not None:
            acting = apply_state_transition(acting, new_state)
        acting = record_action(acting, attack_type.value)
        self._set_character(acting, {"state": acting.state.value, "actions": list(acting.actions)})

        return ActionOutcome(ok=True, combat=result, vp_events=tuple(events))

    def end_activation(self, character_id: str) -> ActionOutcome:
        if self._active_character_id not in (None, character_id):
            return _rejected(f"{self._active_character_id} is the active character")
        if self._active_character_id is None:
            check = validate_activation(self._turn, self._map_state, character_id)
            if not check.allowed:
                return _rejected(check.reason)

        self._turn = mark_activated(self._turn, character_id, self._map_state)
        self._active_character_id = None
        return ActionOutcome(ok=True)

    # -- NPC phase & turn flow --

    def preview_npc_phase(self) -> list[NPCPhasePreview]:
        return preview_npc_phase(
            self._map_state, self.alert(), self.grid, self.config.npc_path_search_multiplier,
        )

    def run_npc_phase(self) -> NPCPhaseResult:
        """Execute the NPC phase. Raises ``RuntimeError`` outside the NPC phase."""
        if self._turn.phase == TurnPhase.PLAYER_ACTIVATION and all_players_activated(self._turn, self._map_state):
            # nobody left standing to activate
            self._turn = advance_to_npc_phase(self._turn)
        if self._turn.phase != TurnPhase.NPC_PHASE:
            raise RuntimeError(f"NPC phase cannot run during {self._turn.phase.value}")

        result = execute_npc_phase(
            self._map_state, self.alert(), self.grid, self._roll,
            self.config.npc_path_search_multiplier,
        )
        self._map_state = result.map_state
        self._emitters.replace_map_state(self._map_state)
        self._turn = advance_to_end_of_turn(self._turn)
        return result

    def end_turn(self) -> list[VPEvent]:
        """Score escapes on the final turn, reset per-turn state and advance."""
        if self._turn.phase != TurnPhase.END_OF_TURN:
            raise RuntimeError(f"Turn cannot end during {self._turn.phase.value}")

        events: list[VPEvent] = []
        if is_final_turn(self._turn, self.config.max_turns):
            for player in (1, 2):
                for event in calculate_escape_vp(
                    self._map_state, self._turn.turn_number, player, self.config.max_turns,
                ):
                    self._map_state = apply_vp(self._map_state, event)
                    self._vp_log.append(event)
                    events.append(event)

        self._map_state = self._map_state.replace_characters(get_end_of_turn_updates(self._map_state))
        self._emitters.replace_map_state(self._map_state)
        self._turn = advance_to_next_turn(self._turn, self._map_state, self.config.max_turns)
        return events

    def snapshot(self) -> dict[str, Any]:
        return {
            "turn": self._turn.to_dict(),
            "alert": self.alert().to_dict(),
            "activeCharacterId": self._active_character_id,
            "mapState": self._map_state.to_dict(),
            "vpLog": [e.to_dict() for e in self._vp_log],
        }

