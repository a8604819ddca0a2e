"""Heist City tactical engine: combat, NPC automation, turn order and grid queries."""

__version__ = "0.1.0"
