"""Engine configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass

from heistcity.core.enums import GridType


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration for a match."""

    # Match
    seed: int = 42
    grid_type: GridType = GridType.HEX
    max_turns: int = 5
    alert_modifier: int = 0

    # Grid geometry
    hex_map_radius: int = 15           # 16 hexes per side
    hex_size_inches: float = 0.6       # corner-to-centre radius
    square_map_size: int = 36          # cells per side, 1 inch each
    pixel_scale: int = 25              # pixels per inch (900px / 36")

    # Search budgets
    npc_path_search_multiplier: int = 3  # NPC A* depth = movement * multiplier

    # Logging / replay
    log_level: str = "INFO"
    replay_file: str = "npc_replay.json"
