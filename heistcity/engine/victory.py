"""Victory point events and scoring."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Mapping

from heistcity.core.enums import CharacterState, VPEventType
from heistcity.core.models import MapState, MapZone

logger = logging.getLogger(__name__)

ESCAPE_TURN = 5

VP_AMOUNTS: Mapping[VPEventType, int] = MappingProxyType({
    VPEventType.HACK_COMPUTER: 1,
    VPEventType.HACK_INFO_DROP: 1,
    VPEventType.INFO_DROP_EXTRACT: 3,
    VPEventType.DOWN_ENEMY: 1,
    VPEventType.REVEAL_HIDDEN: 1,
    VPEventType.REVEAL_DISGUISED: 1,
    VPEventType.MOB_INTEL: 1,
    VPEventType.ESCAPE: 1,
})


@dataclass(frozen=True, slots=True)
class VPEvent:
    type: VPEventType
    character_id: str
    points: int
    turn_number: int
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "characterId": self.character_id,
            "points": self.points,
            "turnNumber": self.turn_number,
            "description": self.description,
        }


def award_vp(
    character_id: str,
    event_type: VPEventType,
    turn_number: int,
    description: str = "",
    points: int | None = None,
) -> VPEvent:
    return VPEvent(
        type=event_type,
        character_id=character_id,
        points=VP_AMOUNTS[event_type] if points is None else points,
        turn_number=turn_number,
        description=description,
    )


def apply_vp(map_state: MapState, event: VPEvent) -> MapState:
    char = map_state.character(event.character_id)
    logger.info("%s scores %d VP (%s)", char.display_name, event.points, event.type.value)
    return map_state.with_character(replace(char, victory_points=char.victory_points + event.points))


def calculate_team_vp(map_state: MapState, player_number: int) -> int:
    return sum(c.victory_points for c in map_state.characters if c.player_number == player_number)


def find_deployment_zone(zones: tuple[MapZone, ...] | list[MapZone], player_number: int) -> MapZone | None:
    """Zone labelled for the player, else an unlabelled "deployment" zone.

    A generic deployment zone that names the other player never matches.
    """
    own = (f"player {player_number}", f"p{player_number}")
    other = 2 if player_number == 1 else 1
    foreign = (f"player {other}", f"p{other}")

    for zone in zones:
        label = zone.label.lower()
        if any(tag in label for tag in own):
            return zone
    for zone in zones:
        label = zone.label.lower()
        if "deployment" in label and not any(tag in label for tag in foreign):
            return zone
    return None


def calculate_escape_vp(
    map_state: MapState,
    turn_number: int,
    player_number: int,
    final_turn: int = ESCAPE_TURN,
) -> list[VPEvent]:
    """Escape awards for conscious characters standing in their deployment zone on the last turn."""
    if turn_number < final_turn:
        return []

    zone = find_deployment_zone(map_state.zones, player_number)
    if zone is None:
        return []

    return [
        award_vp(c.id, VPEventType.ESCAPE, turn_number, f"{c.display_name} escaped to deployment zone")
        for c in map_state.characters
        if c.player_number == player_number
        and c.state != CharacterState.UNCONSCIOUS
        and zone.contains(c.position)
    ]
