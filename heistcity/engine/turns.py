"""Turn / activation state machine.

  player-activation -> npc-phase -> end-of-turn -> player-activation (next turn)
                                                -> game-over (after the final turn)

Sides alternate activating one character at a time.  When one side has no
characters left to activate, the other side keeps going.  Every transition
returns a new ``TurnState``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from heistcity.core.enums import CharacterState, TurnPhase
from heistcity.core.models import CharacterToken, MapState

logger = logging.getLogger(__name__)

MAX_TURNS = 5
PLAYER_NUMBERS = (1, 2)

_PHASE_DESCRIPTIONS: Mapping[TurnPhase, str] = MappingProxyType({
    TurnPhase.PLAYER_ACTIVATION: "Player Activation",
    TurnPhase.NPC_PHASE: "NPC Phase",
    TurnPhase.END_OF_TURN: "End of Turn",
    TurnPhase.GAME_OVER: "Game Over",
})


@dataclass(frozen=True, slots=True)
class TurnState:
    turn_number: int = 1
    phase: TurnPhase = TurnPhase.PLAYER_ACTIVATION
    active_player_number: int = 1
    # character id -> True while the character still needs to activate
    activations_remaining: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))
    npc_phase_complete: bool = False
    initiative_player: int = 1

    def needs_activation(self, character_id: str) -> bool:
        return self.activations_remaining.get(character_id, False)

    def to_dict(self) -> dict[str, object]:
        return {
            "turnNumber": self.turn_number,
            "phase": self.phase.value,
            "activePlayerNumber": self.active_player_number,
            "activationsRemaining": dict(self.activations_remaining),
            "npcPhaseComplete": self.npc_phase_complete,
            "initiativePlayer": self.initiative_player,
        }


@dataclass(frozen=True, slots=True)
class ActivationCheck:
    allowed: bool
    reason: str = ""


def _other(player: int) -> int:
    return 2 if player == 1 else 1


def _fresh_activations(map_state: MapState) -> Mapping[str, bool]:
    return MappingProxyType({
        c.id: True for c in map_state.characters if c.state != CharacterState.UNCONSCIOUS
    })


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def get_activatable_characters(
    turn: TurnState,
    map_state: MapState,
    player_number: int,
) -> list[CharacterToken]:
    return [
        c for c in map_state.characters
        if c.player_number == player_number
        and c.state != CharacterState.UNCONSCIOUS
        and turn.needs_activation(c.id)
    ]


def get_next_activating_player(turn: TurnState, map_state: MapState) -> int:
    """Side to act next, from remaining counts rather than a blind toggle."""
    p1 = len(get_activatable_characters(turn, map_state, 1))
    p2 = len(get_activatable_characters(turn, map_state, 2))
    if p1 == 0 and p2 > 0:
        return 2
    if p2 == 0 and p1 > 0:
        return 1
    return turn.active_player_number


def all_players_activated(turn: TurnState, map_state: MapState) -> bool:
    return not any(
        turn.needs_activation(c.id)
        for c in map_state.characters
        if c.state != CharacterState.UNCONSCIOUS
    )


def validate_activation(turn: TurnState, map_state: MapState, character_id: str) -> ActivationCheck:
    """Whether *character_id* may activate right now, with a reason if not."""
    if turn.phase != TurnPhase.PLAYER_ACTIVATION:
        return ActivationCheck(False, f"Cannot activate during {phase_description(turn.phase)}")

    char = map_state.find_character(character_id)
    if char is None:
        return ActivationCheck(False, f"Unknown character {character_id!r}")
    if char.state == CharacterState.UNCONSCIOUS:
        return ActivationCheck(False, f"{char.display_name} is unconscious")
    if not turn.needs_activation(char.id):
        return ActivationCheck(False, f"{char.display_name} has already activated this turn")

    expected = get_next_activating_player(turn, map_state)
    if char.player_number != expected:
        return ActivationCheck(False, f"It is player {expected}'s activation")
    return ActivationCheck(True)


def is_final_turn(turn: TurnState, max_turns: int = MAX_TURNS) -> bool:
    return turn.turn_number >= max_turns


def phase_description(phase: TurnPhase) -> str:
    return _PHASE_DESCRIPTIONS[phase]


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def create_initial_turn_state(map_state: MapState, initiative_player: int = 1) -> TurnState:
    return TurnState(
        turn_number=1,
        phase=TurnPhase.PLAYER_ACTIVATION,
        active_player_number=initiative_player,
        activations_remaining=_fresh_activations(map_state),
        npc_phase_complete=False,
        initiative_player=initiative_player,
    )


def mark_activated(turn: TurnState, character_id: str, map_state: MapState) -> TurnState:
    """Record *character_id* as activated and hand over to the next side.

    Characters that are not pending are ignored.  The last activation of
    the turn moves the machine into the NPC phase.
    """
    if turn.phase != TurnPhase.PLAYER_ACTIVATION or not turn.needs_activation(character_id):
        logger.debug("Ignoring activation of %s (not pending)", character_id)
        return turn

    activations = dict(turn.activations_remaining)
    activations[character_id] = False
    updated = replace(
        turn,
        activations_remaining=MappingProxyType(activations),
        active_player_number=_other(turn.active_player_number),
    )
    updated = replace(updated, active_player_number=get_next_activating_player(updated, map_state))

    if all_players_activated(updated, map_state):
        logger.info("Turn %d: all characters activated", turn.turn_number)
        return advance_to_npc_phase(updated)
    return updated


def advance_to_npc_phase(turn: TurnState) -> TurnState:
    return replace(turn, phase=TurnPhase.NPC_PHASE)


def advance_to_end_of_turn(turn: TurnState) -> TurnState:
    return replace(turn, phase=TurnPhase.END_OF_TURN, npc_phase_complete=True)


def get_end_of_turn_updates(map_state: MapState) -> list[CharacterToken]:
    """Characters with per-turn actions and exhaustion cleared (Unconscious untouched)."""
    return [
        c if c.state == CharacterState.UNCONSCIOUS else replace(c, actions=(), exhausted=False)
        for c in map_state.characters
    ]


def advance_to_next_turn(turn: TurnState, map_state: MapState, max_turns: int = MAX_TURNS) -> TurnState:
    next_turn = turn.turn_number + 1
    if next_turn > max_turns:
        logger.info("Turn %d complete: game over", turn.turn_number)
        return replace(turn, turn_number=next_turn, phase=TurnPhase.GAME_OVER)

    initiative = _other(turn.initiative_player)
    logger.info("Turn %d begins; player %d has initiative", next_turn, initiative)
    return TurnState(
        turn_number=next_turn,
        phase=TurnPhase.PLAYER_ACTIVATION,
        active_player_number=initiative,
        activations_remaining=_fresh_activations(map_state),
        npc_phase_complete=False,
        initiative_player=initiative,
    )
