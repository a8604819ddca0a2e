"""Thread-safe match event feed exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class MatchEvent:
    """A single entry in the match feed."""

    turn: int
    category: str  # move | attack | activation | npc | dice | vp | turn
    message: str
    character_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "turn": self.turn,
            "category": self.category,
            "message": self.message,
            "characterIds": list(self.character_ids),
        }


class EventLog:
    """Unbounded event log. Writers append; readers get copies.

    Kept until ``clear()``; a lock guards every access.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self) -> None:
        self._buffer: deque[MatchEvent] = deque()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def append(self, event: MatchEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def append_many(self, events: list[MatchEvent]) -> None:
        with self._lock:
            self._buffer.extend(events)

    def since_turn(self, turn: int) -> list[MatchEvent]:
        """Return all events with turn >= *turn*."""
        with self._lock:
            return [e for e in self._buffer if e.turn >= turn]

    def latest(self, count: int = 50) -> list[MatchEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
