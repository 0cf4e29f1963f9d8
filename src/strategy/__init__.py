"""Strategy package: per-turn delivery decisions."""

from src.strategy.delivery import (
    BlockState,
    DeliveryConfig,
    DeliveryStrategy,
    DetourCandidate,
    is_at_position,
    is_path_leading_to,
)
from src.strategy.events import DeliveryEvent, DeliveryEventType, EventSink

__all__ = [
    "BlockState",
    "DeliveryConfig",
    "DeliveryEvent",
    "DeliveryEventType",
    "DeliveryStrategy",
    "DetourCandidate",
    "EventSink",
    "is_at_position",
    "is_path_leading_to",
]
