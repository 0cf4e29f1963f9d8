"""CLI entrypoint for running the delivery strategy on simulated scenarios."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from src.cli.helpers import _configure_logging
from src.cli.options import LogFormat, build_arg_parser
from src.config.environment import load_environment_file
from src.config.loader import Config, load_config
from src.core.loop import TurnLoop
from src.core.metrics import MetricsCollector
from src.simulation.scenario import load_scenario
from src.strategy.delivery import DeliveryStrategy
from src.world.beliefs import GridBeliefs
from src.world.pathfinder import GridPathfinder

logger = logging.getLogger(__name__)


def _resolve_config(args: argparse.Namespace) -> Config:
    """Load config and apply explicit CLI overrides on top of file/env values."""
    config = load_config(args.config)
    updates: dict[str, dict[str, object]] = {}
    if args.max_turns is not None:
        updates["loop"] = {"max_turns": args.max_turns}
    if args.log_level is not None or args.log_format is not None:
        updates["logging"] = {
            key: value
            for key, value in (("level", args.log_level), ("format", args.log_format))
            if value is not None
        }
    if not updates:
        return config
    merged = config.model_dump()
    for section, values in updates.items():
        merged[section].update(values)
    return Config.model_validate(merged)


def run_command(args: argparse.Namespace) -> int:
    """Run one scenario and print the resulting metrics as JSON."""
    load_environment_file(args.env_file)
    config = _resolve_config(args)
    _configure_logging(level=config.logging.level, log_format=config.logging.format)

    world = load_scenario(args.scenario)
    beliefs = GridBeliefs(world.grid)
    pathfinder = GridPathfinder(
        world.grid,
        beliefs=beliefs,
        avoid_agents=config.pathfinding.avoid_agents,
    )
    metrics = MetricsCollector()
    strategy = DeliveryStrategy(
        beliefs,
        pathfinder,
        config=config.delivery.to_strategy_config(),
        event_sink=metrics.record_event,
    )
    loop = TurnLoop(
        world,
        strategy,
        beliefs,
        metrics=metrics,
        config=config.loop.to_loop_config(),
    )

    logger.info("[BOOT] Running scenario %s", args.scenario)
    result = loop.run()

    summary = {
        "scenario": str(args.scenario),
        "score": world.score,
        "carried_remaining": len(world.carried_by(world.agent_id)),
        "metrics": result.model_dump(),
    }
    print(json.dumps(summary, indent=2, sort_keys=True))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint function."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    # Configure a sane bootstrap logger before config loading.
    _configure_logging(
        level="INFO",
        log_format=str(getattr(args, "log_format", None) or LogFormat.READABLE.value),
    )

    try:
        if args.command == "run":
            return run_command(args)
        raise ValueError(f"Unsupported command: {args.command}")
    except Exception as exc:
        logger.error("[BOOT] CLI execution failed: %s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
