"""Logging for match runs: every line is stamped with the current turn."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_current_turn = 1


def set_log_turn(turn: int) -> None:
    """Turn number stamped on subsequent records (the host updates it)."""
    global _current_turn
    _current_turn = turn


class TurnFilter(logging.Filter):
    """Adds ``record.turn`` so formatters can print ``T<n>``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.turn = _current_turn
        return True


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Route heistcity and uvicorn output through one turn-stamped handler."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(numeric_level)
    handler.addFilter(TurnFilter())
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s T%(turn)-2d [%(levelname)-5s] %(name)-28s | %(message)s",
        datefmt="%H:%M:%S",
    ))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    # Per-request access lines drown out the match log.
    logging.getLogger("uvicorn.access").setLevel(max(numeric_level, logging.WARNING))
