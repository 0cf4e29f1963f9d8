"""CLI option models and parser helpers."""

from __future__ import annotations

import argparse
from enum import StrEnum


class LogFormat(StrEnum):
    """CLI log formatter mode."""

    READABLE = "readable"
    JSON = "json"


def build_arg_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(prog="courier", description="Parcel delivery agent simulator")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run the delivery strategy on a scenario")
    run_parser.add_argument("--scenario", type=str, required=True, help="Scenario YAML file")
    run_parser.add_argument("--config", type=str, default=None, help="Config YAML file (default: configs/default.yaml)")
    run_parser.add_argument("--env-file", type=str, default=None, help="Dotenv file with COURIER_* overrides")
    run_parser.add_argument("--max-turns", type=int, default=None, help="Override loop.max_turns")
    run_parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override logging.level",
    )
    run_parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        choices=[fmt.value for fmt in LogFormat],
        help="Terminal log format (overrides logging.format)",
    )

    return parser
