"""Replay serialization: records each NPC phase for later inspection."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from heistcity.ai.npc_phase import NPCPhaseResult
    from heistcity.engine.alert import AlertLevelState

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates NPC phase logs and flushes them to a JSON replay file."""

    __slots__ = ("_path", "_phases", "_seed")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._phases: list[dict[str, Any]] = []

    @property
    def phases_recorded(self) -> int:
        return len(self._phases)

    def record_phase(self, turn: int, alert: AlertLevelState, result: NPCPhaseResult) -> None:
        characters = [
            {
                "id": c.id,
                "pos": [c.position.x, c.position.y],
                "wounds": c.stats.wounds,
                "state": c.state.value,
            }
            for c in result.map_state.characters
        ]
        self._phases.append(
            {
                "turn": turn,
                "alert": alert.to_dict(),
                "actions": [entry.to_dict() for entry in result.combat_log],
                "stateChanges": [
                    {
                        "characterId": s.character_id,
                        "from": s.old_state.value,
                        "to": s.new_state.value,
                        "cause": s.cause,
                    }
                    for s in result.state_changes
                ],
                "elitesSpawned": [e.id for e in result.elites_spawned],
                "characters": characters,
            }
        )

    def flush(self) -> None:
        """Write accumulated data to disk."""
        replay = {
            "version": "1.0",
            "seed": self._seed,
            "total_phases": len(self._phases),
            "phases": self._phases,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d NPC phases)", self._path, len(self._phases))
