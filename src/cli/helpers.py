"""Shared helper utilities for CLI orchestration."""

from __future__ import annotations

import json
import logging

from src.cli.options import LogFormat

# Per-turn search and bookkeeping chatter that drowns out [DELIVERY] decisions.
_NOISY_LOGGERS = (
    "src.world.pathfinder",
    "src.world.beliefs",
    "src.simulation.world",
    "src.core.metrics",
)


class _JSONLogFormatter(logging.Formatter):
    """Compact JSON formatter for machine-readable logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=True)


def _configure_logging(
    level: str = "INFO",
    log_format: str = LogFormat.READABLE.value,
    quiet_search: bool = True,
) -> None:
    """Configure process-wide logging; re-running replaces only our handler.

    At DEBUG the pathfinder, belief store and simulated world log every
    search and tick. With ``quiet_search`` they stay at INFO so the
    strategy's decisions remain readable.
    """
    normalized_level = level.upper()
    resolved_level = getattr(logging, normalized_level, logging.INFO)
    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not getattr(h, "_courier_handler", False)]

    handler = logging.StreamHandler()
    handler._courier_handler = True  # type: ignore[attr-defined]
    if log_format == LogFormat.JSON.value:
        formatter: logging.Formatter = _JSONLogFormatter(datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(resolved_level)

    quiet = quiet_search and resolved_level < logging.INFO
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if quiet else logging.NOTSET)
