"""Elite reinforcements arriving through security portals."""

from __future__ import annotations

import logging

from heistcity.core.enums import ItemType
from heistcity.core.models import MapItem, MapState
from heistcity.systems.spatial_index import build_occupancy_map

logger = logging.getLogger(__name__)


def find_security_portals(map_state: MapState) -> list[MapItem]:
    return map_state.items_of_type(ItemType.TELEPORTER)


def elite_id_for(portal: MapItem) -> str:
    return f"elite-{portal.id}"


def spawn_elites(map_state: MapState) -> list[MapItem]:
    """One elite per free portal, the first time the reinforcement fires.

    Once any elite has arrived the trigger is spent: portals that were
    occupied at that moment never spawn later.  Returns the new items; the
    caller adds them with ``apply_elite_spawn``.
    """
    if map_state.elites_triggered:
        return []

    occupied = build_occupancy_map(map_state)
    elites: list[MapItem] = []

    for portal in find_security_portals(map_state):
        if portal.position in occupied:
            logger.debug("Portal %s is occupied; it is skipped for this game", portal.id)
            continue
        elites.append(MapItem(id=elite_id_for(portal), type=ItemType.ENEMY_ELITE, position=portal.position))

    return elites


def apply_elite_spawn(map_state: MapState, elites: list[MapItem]) -> MapState:
    if not elites:
        return map_state
    portal_ids = [e.id.removeprefix("elite-") for e in elites]
    logger.info("Alert level 3: %d elite(s) arrive", len(elites))
    return map_state.add_items(elites).mark_portals_spawned(portal_ids)
