"""MatchManager: singleton wrapper around one running Match.

Commands are serialized with a lock; every state change reaches the
event feed through the ``EventLogEmitters`` bridge.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from heistcity.ai.npc_phase import NPCPhasePreview, NPCPhaseResult
from heistcity.core.enums import AttackType, Domain, MoveKind
from heistcity.core.models import MapState, Position
from heistcity.engine.alert import AlertLevelState
from heistcity.engine.match import ActionOutcome, Match
from heistcity.engine.scenario import build_demo_map
from heistcity.engine.turns import TurnState
from heistcity.engine.victory import VPEvent
from heistcity.systems.rng import DeterministicRNG, DiceRoller
from heistcity.utils.event_log import EventLog, MatchEvent
from heistcity.utils.logging import set_log_turn
from heistcity.utils.replay import ReplayRecorder

if TYPE_CHECKING:
    from heistcity.config import EngineConfig

logger = logging.getLogger(__name__)


class EventLogEmitters:
    """Publishes match updates into an ``EventLog``."""

    __slots__ = ("_log", "_turn")

    def __init__(self, log: EventLog) -> None:
        self._log = log
        self._turn = 1

    def set_turn(self, turn: int) -> None:
        self._turn = turn

    def update_character(self, character_id: str, fields: dict[str, Any]) -> None:
        changes = ", ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        self._log.append(MatchEvent(self._turn, "character", changes, (character_id,)))

    def record_dice_roll(self, die1: int, die2: int, total: int) -> None:
        self._log.append(MatchEvent(self._turn, "dice", f"{die1} + {die2} = {total}"))

    def replace_map_state(self, map_state: MapState) -> None:
        self._log.append(MatchEvent(
            self._turn, "map", f"board updated ({len(map_state.items)} items)",
        ))


@dataclass(frozen=True, slots=True)
class MatchView:
    """Consistent read of the match taken under the manager lock."""

    turn: TurnState
    alert: AlertLevelState
    active_character_id: str | None
    map_state: MapState


class MatchManager:
    """Owns the match, its dice and its event feed."""

    def __init__(self, config: EngineConfig, map_state: MapState | None = None) -> None:
        self.config = config
        self._initial_map = map_state
        self._lock = threading.Lock()
        self._event_log = EventLog()
        self._emitters = EventLogEmitters(self._event_log)
        self._replay = ReplayRecorder(config.replay_file, config.seed)
        self._match: Match | None = None
        self._build()

    # -- public properties --

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def replay(self) -> ReplayRecorder:
        return self._replay

    @property
    def match(self) -> Match:
        assert self._match is not None
        return self._match

    # -- internals --

    def _build(self) -> None:
        rng = DeterministicRNG(self.config.seed)
        rolls = DiceRoller(rng, Domain.NPC_PHASE)
        board = self._initial_map or build_demo_map(self.config.grid_type)
        self._match = Match(self.config, board, rolls, self._emitters)
        self._emitters.set_turn(1)
        set_log_turn(1)
        logger.info(
            "Match ready: %s grid, %d characters, seed %d",
            self.config.grid_type.value, len(board.characters), self.config.seed,
        )

    def _log(self, category: str, message: str, *character_ids: str) -> None:
        self._event_log.append(MatchEvent(self.match.turn.turn_number, category, message, character_ids))

    # -- queries --

    def state(self) -> MatchView:
        with self._lock:
            m = self.match
            return MatchView(m.turn, m.alert(), m.active_character_id, m.map_state)

    def preview_npc_phase(self) -> list[NPCPhasePreview]:
        with self._lock:
            return self.match.preview_npc_phase()

    # -- commands --

    def move(self, character_id: str, destination: Position, kind: MoveKind) -> ActionOutcome:
        with self._lock:
            outcome = self.match.move_character(character_id, destination, kind)
            if outcome.ok:
                self._log("move", f"{character_id} {kind.value} to {destination}", character_id)
            return outcome

    def attack(self, attacker_id: str, target_id: str, attack_type: AttackType, weapon_id: str) -> ActionOutcome:
        with self._lock:
            outcome = self.match.attack(attacker_id, target_id, attack_type, weapon_id)
            if outcome.ok and outcome.combat is not None:
                verdict = "hit" if outcome.combat.attack.hit else "miss"
                self._log("attack", f"{attacker_id} {attack_type.value} on {target_id}: {verdict}", attacker_id, target_id)
            return outcome

    def end_activation(self, character_id: str) -> ActionOutcome:
        with self._lock:
            outcome = self.match.end_activation(character_id)
            if outcome.ok:
                self._log("activation", f"{character_id} ends activation", character_id)
            return outcome

    def run_npc_phase(self) -> tuple[AlertLevelState, NPCPhaseResult]:
        """Run the phase; returns the alert level it ran at and the result.

        Raises ``RuntimeError`` outside the NPC phase.
        """
        with self._lock:
            turn = self.match.turn.turn_number
            alert = self.match.alert()
            result = self.match.run_npc_phase()
            self._replay.record_phase(turn, alert, result)
            for entry in result.combat_log:
                ids = (entry.target_id,) if entry.target_id else ()
                self._log("npc", f"{entry.npc_id} {entry.action.value}", *ids)
            return alert, result

    def end_turn(self) -> list[VPEvent]:
        """Raises ``RuntimeError`` unless the NPC phase has finished."""
        with self._lock:
            events = self.match.end_turn()
            for event in events:
                self._log("vp", f"{event.character_id} +{event.points} ({event.type.value})", event.character_id)
            self._emitters.set_turn(self.match.turn.turn_number)
            set_log_turn(self.match.turn.turn_number)
            self._log("turn", f"phase: {self.match.turn.phase.value}")
            return events

    def reset(self) -> None:
        with self._lock:
            self._event_log.clear()
            self._replay = ReplayRecorder(self.config.replay_file, self.config.seed)
            self._build()
        logger.info("MatchManager reset.")

    def save_replay(self) -> None:
        with self._lock:
            self._replay.flush()
