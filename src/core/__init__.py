"""Core runtime package.

This package provides:
- TurnLoop: Sense-decide-act loop over a simulated world
- LoopConfig: Configuration for the turn loop
- LoopState: Loop state enumeration
- DeliveryMetrics: Snapshot of collected metrics
- MetricsCollector: Metrics collection for monitoring
"""

from src.core.loop import LoopConfig, LoopState, TurnLoop
from src.core.metrics import DeliveryMetrics, MetricsCollector

__all__ = [
    "DeliveryMetrics",
    "LoopConfig",
    "LoopState",
    "MetricsCollector",
    "TurnLoop",
]
