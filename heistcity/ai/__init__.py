"""NPC automation: archetypes, targeting, movement, action selection, phases."""

from heistcity.ai.archetypes import NPC_PROFILES, NPCProfile, get_npc_profile
from heistcity.ai.brain import resolve_npc_attack, select_npc_action
from heistcity.ai.movement import calculate_npc_move
from heistcity.ai.npc_phase import NPCPhasePreview, NPCPhaseResult, execute_npc_phase, preview_npc_phase
from heistcity.ai.spawner import spawn_elites
from heistcity.ai.targeting import is_visible_to_mob, resolve_mob_target_tiebreak, select_mob_target

__all__ = [
    "NPCPhasePreview",
    "NPCPhaseResult",
    "NPCProfile",
    "NPC_PROFILES",
    "calculate_npc_move",
    "execute_npc_phase",
    "get_npc_profile",
    "is_visible_to_mob",
    "preview_npc_phase",
    "resolve_mob_target_tiebreak",
    "resolve_npc_attack",
    "select_mob_target",
    "select_npc_action",
    "spawn_elites",
]
