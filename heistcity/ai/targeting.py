"""Mob target selection."""

from __future__ import annotations

from typing import Mapping, Sequence

from heistcity.core.enums import CharacterState
from heistcity.core.equipment import effective_stats, wears_mob_sight_blocker
from heistcity.core.grid import GridSpec, get_grid
from heistcity.core.models import CharacterToken, MapItem, MapState

SECURITY_UNIFORM_ID = "security-uniform"
IN_PLAIN_SIGHT_ACTION = "in-plain-sight"

_UNSEEN_STATES = frozenset({
    CharacterState.HIDDEN,
    CharacterState.DISGUISED,
    CharacterState.STUNNED,
    CharacterState.UNCONSCIOUS,
})


def is_visible_to_mob(character: CharacterToken) -> bool:
    if character.state in _UNSEEN_STATES:
        return False
    if SECURITY_UNIFORM_ID in character.equipment or wears_mob_sight_blocker(character.equipment):
        return False
    if IN_PLAIN_SIGHT_ACTION in character.actions:
        return False
    return True


def select_mob_target(
    npc: MapItem,
    map_state: MapState,
    grid_type: GridSpec,
) -> CharacterToken | None:
    """Nearest visible character; ties by lower defense, then id."""
    grid = get_grid(grid_type)
    candidates = [c for c in map_state.characters if is_visible_to_mob(c)]
    if not candidates:
        return None

    return min(
        candidates,
        key=lambda c: (
            grid.distance(npc.position, c.position),
            effective_stats(c.stats, c.equipment).defense,
            c.id,
        ),
    )


def resolve_mob_target_tiebreak(
    candidates: Sequence[CharacterToken],
    rolls: Mapping[str, int],
) -> CharacterToken:
    """Pick the candidate with the lowest contest roll.

    Candidates without a roll are never preferred; the first candidate
    wins an exact tie.
    """
    if not candidates:
        raise ValueError("resolve_mob_target_tiebreak needs at least one candidate")

    worst = candidates[0]
    worst_roll = rolls.get(worst.id, float("inf"))
    for cand in candidates[1:]:
        roll = rolls.get(cand.id, float("inf"))
        if roll < worst_roll:
            worst, worst_roll = cand, roll
    return worst
