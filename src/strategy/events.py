"""Decision events emitted by the delivery strategy.

Events are observability only: they are logged and forwarded to an optional
sink (for example the metrics collector) and never influence decisions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class DeliveryEventType(StrEnum):
    """Decision stages that produce an event."""

    DETOUR_CONSIDERED = "detour_considered"
    DETOUR_SELECTED = "detour_selected"
    PATH_RECALCULATED = "path_recalculated"
    BLOCKED = "blocked"
    BLOCK_TIMEOUT = "block_timeout"
    PATH_CLEARED = "path_cleared"
    STEP_UNRESOLVED = "step_unresolved"
    DELIVERY_UNREACHABLE = "delivery_unreachable"
    NO_DELIVERY_TILE = "no_delivery_tile"
    POSITION_UNKNOWN = "position_unknown"


# Stages that indicate the agent is degraded rather than progressing.
_WARNING_EVENTS = frozenset(
    {
        DeliveryEventType.BLOCK_TIMEOUT,
        DeliveryEventType.STEP_UNRESOLVED,
        DeliveryEventType.DELIVERY_UNREACHABLE,
        DeliveryEventType.NO_DELIVERY_TILE,
        DeliveryEventType.POSITION_UNKNOWN,
    }
)
_INFO_EVENTS = frozenset(
    {
        DeliveryEventType.DETOUR_SELECTED,
        DeliveryEventType.PATH_RECALCULATED,
        DeliveryEventType.PATH_CLEARED,
        DeliveryEventType.BLOCKED,
    }
)


@dataclass(frozen=True)
class DeliveryEvent:
    """A single decision event with stage-specific details."""

    type: DeliveryEventType
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def log_level(self) -> int:
        """Logging level used when this event is written to the log."""
        if self.type in _WARNING_EVENTS:
            return logging.WARNING
        if self.type in _INFO_EVENTS:
            return logging.INFO
        return logging.DEBUG

    def describe(self) -> str:
        """Render as ``stage key=value ...`` for log lines."""
        if not self.details:
            return self.type.value
        fields = " ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.type.value} {fields}"


EventSink = Callable[[DeliveryEvent], None]
