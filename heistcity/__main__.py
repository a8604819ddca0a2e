"""Entry point: ``python -m heistcity``.

Supports two modes:
  - ``python -m heistcity``        -> Launch the FastAPI match server
  - ``python -m heistcity cli``    -> Headless match: crews pass, security acts
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Heist City Tactical Engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI match server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--grid", type=str, default="hex", choices=["hex", "square"])
    srv.add_argument("--map", type=str, default=None, help="Board JSON file (defaults to the demo heist)")
    srv.add_argument("--alert-modifier", type=int, default=0)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless match")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--grid", type=str, default="hex", choices=["hex", "square"])
    cli.add_argument("--map", type=str, default=None, help="Board JSON file (defaults to the demo heist)")
    cli.add_argument("--turns", type=int, default=5)
    cli.add_argument("--alert-modifier", type=int, default=1)
    cli.add_argument("--replay", type=str, default="npc_replay.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from heistcity.api.app import create_app
    from heistcity.config import EngineConfig
    from heistcity.core.enums import GridType
    from heistcity.engine.scenario import load_map_file

    config = EngineConfig(
        seed=args.seed,
        grid_type=GridType(args.grid),
        alert_modifier=args.alert_modifier,
        log_level=args.log_level,
    )
    board = load_map_file(args.map) if args.map else None
    app = create_app(config, board)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from heistcity.api.match_manager import MatchManager
    from heistcity.config import EngineConfig
    from heistcity.core.enums import GridType, TurnPhase
    from heistcity.engine.scenario import load_map_file
    from heistcity.engine.turns import get_next_activating_player
    from heistcity.engine.victory import calculate_team_vp
    from heistcity.utils.logging import setup_logging

    config = EngineConfig(
        seed=args.seed,
        grid_type=GridType(args.grid),
        max_turns=args.turns,
        alert_modifier=args.alert_modifier,
        replay_file=args.replay,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)

    board = load_map_file(args.map) if args.map else None
    manager = MatchManager(config, board)
    match = manager.match

    while not match.game_over:
        # Crews pass: each side ends activations in the order the turn allows.
        while match.turn.phase == TurnPhase.PLAYER_ACTIVATION:
            player = get_next_activating_player(match.turn, match.map_state)
            pending = [
                c.id for c in match.map_state.characters
                if c.player_number == player and match.turn.needs_activation(c.id)
            ]
            if not pending:
                break
            manager.end_activation(pending[0])

        alert, result = manager.run_npc_phase()
        logger.info(
            "Turn %d: alert %d, %d NPC action(s), %d downed",
            match.turn.turn_number, alert.level, len(result.combat_log), len(result.downed),
        )
        manager.end_turn()

    manager.save_replay()
    logger.info(
        "Match over. VP: player 1 = %d, player 2 = %d. Replay written to %s",
        calculate_team_vp(match.map_state, 1), calculate_team_vp(match.map_state, 2), config.replay_file,
    )


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            # Re-parse with serve defaults
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
