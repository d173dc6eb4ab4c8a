"""Entry point: ``python -m idle_combat``.

Supports two modes:
  - ``python -m idle_combat``        → Launch the FastAPI server with the combat running
  - ``python -m idle_combat cli``    → Headless fixed-tick run with a summary at the end
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Idle RPG combat engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--enemy", type=str, default="skeleton")
    srv.add_argument("--rules", type=str, default="", help="JSON rules file (created on first save)")
    srv.add_argument("--paused", action="store_true", help="Start with the combat paused")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless combat session")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--ticks", type=int, default=6000, help="Ticks to run (50 ms each by default)")
    cli.add_argument("--enemy", type=str, default="skeleton")
    cli.add_argument("--rules", type=str, default="")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from idle_combat.api.app import create_app
    from idle_combat.config import CombatConfig

    config = CombatConfig(
        seed=args.seed,
        enemy_type=args.enemy,
        rules_file=args.rules,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )
    app = create_app(config, autostart=not args.paused)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from idle_combat.config import CombatConfig
    from idle_combat.core.rules import default_rules
    from idle_combat.engine.combat_loop import CombatEngine
    from idle_combat.utils.logging import setup_logging
    from idle_combat.utils.rules_store import JsonRuleStore

    config = CombatConfig(
        seed=args.seed,
        enemy_type=args.enemy,
        rules_file=args.rules,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)

    rules = JsonRuleStore(config.rules_file).load() if config.rules_file else default_rules()
    engine = CombatEngine(config, rules=rules)

    logger.info("=== Combat started (seed=%d, enemy=%s) ===", config.seed, config.enemy_type)
    tally = engine.run(args.ticks)
    snap = engine.create_snapshot()

    logger.info(
        "=== Combat finished at tick %d (%.1fs of combat) ===",
        snap.tick, snap.elapsed_ms / 1000,
    )
    logger.info(
        "Kills: %d  Deaths: %d  Gold: %d (earned %d, lost %d)  Items found: %d",
        tally.kills, tally.deaths, snap.player.gold,
        tally.gold_earned, tally.gold_lost, tally.items_found,
    )


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
