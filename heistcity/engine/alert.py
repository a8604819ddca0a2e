"""Alert level: a value derived from how many units are revealed.

Never cached; recompute from the current snapshot whenever it is needed.

  total 0-2 -> level 0 (NPCs passive)
  total 3-5 -> level 1 (1 NPC action each)
  total 6-7 -> level 2 (2 NPC actions each)
  total 8+  -> level 3 (2 NPC actions each, elites arrive)
"""

from __future__ import annotations

from dataclasses import dataclass

from heistcity.core.enums import CharacterState
from heistcity.core.models import MapState

MAX_ALERT_LEVEL = 3

_REVEALED_STATES = frozenset({
    CharacterState.OVERT,
    CharacterState.STUNNED,
    CharacterState.UNCONSCIOUS,
})

_NPC_ACTIONS = (0, 1, 2, 2)


@dataclass(frozen=True, slots=True)
class AlertLevelState:
    level: int
    units_revealed: int
    modifier: int
    total: int
    npc_actions_per_activation: int

    def to_dict(self) -> dict[str, int]:
        return {
            "level": self.level,
            "unitsRevealed": self.units_revealed,
            "modifier": self.modifier,
            "total": self.total,
            "npcActionsPerActivation": self.npc_actions_per_activation,
        }


def count_revealed_units(map_state: MapState) -> int:
    return sum(1 for c in map_state.characters if c.state in _REVEALED_STATES)


def level_for_total(total: int) -> int:
    if total <= 2:
        return 0
    if total <= 5:
        return 1
    if total <= 7:
        return 2
    return 3


def npc_action_count(level: int) -> int:
    return _NPC_ACTIONS[max(0, min(level, MAX_ALERT_LEVEL))]


def should_spawn_elites(level: int) -> bool:
    return level >= MAX_ALERT_LEVEL


def alert_from_revealed(units_revealed: int, modifier: int = 0) -> AlertLevelState:
    total = units_revealed + modifier
    level = level_for_total(total)
    return AlertLevelState(
        level=level,
        units_revealed=units_revealed,
        modifier=modifier,
        total=total,
        npc_actions_per_activation=npc_action_count(level),
    )


def compute_alert_level(map_state: MapState, modifier: int = 0) -> AlertLevelState:
    return alert_from_revealed(count_revealed_units(map_state), modifier)


def predict_alert_level(map_state: MapState, modifier: int, additional_overt: int) -> AlertLevelState:
    """Alert level if *additional_overt* more characters were revealed."""
    return alert_from_revealed(count_revealed_units(map_state) + additional_overt, modifier)
