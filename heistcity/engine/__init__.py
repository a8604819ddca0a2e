"""Turn flow, alert level, scoring and board set-up.

``heistcity.engine.match`` is imported directly; it depends on the AI
package, which itself reads the alert level from here.
"""

from heistcity.engine.activation import ACTION_SLOTS, can_activate, get_repeat_penalty, record_action
from heistcity.engine.alert import AlertLevelState, compute_alert_level, predict_alert_level
from heistcity.engine.scenario import build_demo_map, load_map_file
from heistcity.engine.turns import (
    ActivationCheck,
    TurnState,
    advance_to_next_turn,
    create_initial_turn_state,
    mark_activated,
    validate_activation,
)
from heistcity.engine.victory import VPEvent, award_vp, calculate_escape_vp, calculate_team_vp

__all__ = [
    "ACTION_SLOTS",
    "ActivationCheck",
    "AlertLevelState",
    "TurnState",
    "VPEvent",
    "advance_to_next_turn",
    "award_vp",
    "build_demo_map",
    "calculate_escape_vp",
    "calculate_team_vp",
    "can_activate",
    "compute_alert_level",
    "create_initial_turn_state",
    "get_repeat_penalty",
    "load_map_file",
    "mark_activated",
    "predict_alert_level",
    "record_action",
    "validate_activation",
]
