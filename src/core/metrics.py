"""Metrics collection for the turn loop.

This module provides metrics tracking for:
- Turn count and decision timing
- Actions by type, including waits and rejected actions
- Deliveries and delivered reward
- Route recalculations, blocked turns and route clears (from decision events)

Example:
    >>> from src.core.metrics import MetricsCollector
    >>>
    >>> metrics = MetricsCollector()
    >>> strategy = DeliveryStrategy(beliefs, pathfinder, event_sink=metrics.record_event)
    >>> metrics.record_action(Action.putdown(), success=True)
    >>> metrics.record_delivery(count=2, reward=40.0)
    >>>
    >>> stats = metrics.get_metrics()
    >>> print(f"Delivered: {stats.parcels_delivered}")
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from pydantic import BaseModel, Field

from src.models.actions import Action, ActionType
from src.strategy.events import DeliveryEvent, DeliveryEventType

logger = logging.getLogger(__name__)


class DeliveryMetrics(BaseModel):
    """Snapshot of delivery metrics at a point in time.

    Immutable and safe to serialize.

    Attributes:
        turns: Turns executed.
        avg_decision_time_ms: Average time spent deciding per turn.
        actions_by_type: Count of actions returned, keyed by action type.
        actions_failed: Actions the world rejected.
        parcels_delivered: Parcels delivered on delivery tiles.
        reward_delivered: Total reward of delivered parcels.
        path_recalculations: Routes (re)computed by the strategy.
        blocked_turns: Turns spent waiting on an occupied next tile.
        block_timeouts: Routes abandoned after a persistent blockage.
        path_clears: Routes dropped for any reason.
        detours_selected: Turns on which a detour parcel was chosen.
    """

    turns: int = Field(default=0, ge=0)
    avg_decision_time_ms: float = Field(default=0.0, ge=0.0)

    actions_by_type: dict[str, int] = Field(default_factory=dict)
    actions_failed: int = Field(default=0, ge=0)

    parcels_delivered: int = Field(default=0, ge=0)
    reward_delivered: float = Field(default=0.0, ge=0.0)

    path_recalculations: int = Field(default=0, ge=0)
    blocked_turns: int = Field(default=0, ge=0)
    block_timeouts: int = Field(default=0, ge=0)
    path_clears: int = Field(default=0, ge=0)
    detours_selected: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @property
    def actions_total(self) -> int:
        return sum(self.actions_by_type.values())

    @property
    def wait_ratio(self) -> float:
        """Fraction of actions that were waits (0.0 to 1.0)."""
        total = self.actions_total
        if total == 0:
            return 0.0
        return self.actions_by_type.get(ActionType.WAIT.value, 0) / total


@dataclass
class _TimingStats:
    """Internal helper for tracking timing statistics."""

    total_ms: float = 0.0
    count: int = 0

    def record(self, duration_ms: float) -> None:
        """Record a timing measurement."""
        self.total_ms += duration_ms
        self.count += 1

    @property
    def average_ms(self) -> float:
        """Get average duration in milliseconds."""
        if self.count == 0:
            return 0.0
        return self.total_ms / self.count


class MetricsCollector:
    """Collects metrics during turn loop execution.

    Thread-safe, so a monitor may read snapshots while the loop runs.
    ``record_event`` matches the strategy's event sink signature.
    """

    def __init__(self) -> None:
        """Initialize the metrics collector."""
        self._lock = threading.Lock()
        self._decision_timing = _TimingStats()
        self._turns = 0
        self._actions_by_type: dict[str, int] = {}
        self._actions_failed = 0
        self._parcels_delivered = 0
        self._reward_delivered = 0.0
        self._event_counts: dict[DeliveryEventType, int] = {}

        logger.debug("MetricsCollector initialized")

    def reset(self) -> None:
        """Reset all metrics to initial state."""
        with self._lock:
            self._decision_timing = _TimingStats()
            self._turns = 0
            self._actions_by_type.clear()
            self._actions_failed = 0
            self._parcels_delivered = 0
            self._reward_delivered = 0.0
            self._event_counts.clear()

            logger.debug("Metrics reset")

    def record_turn(self) -> None:
        with self._lock:
            self._turns += 1

    def record_action(self, action: Action, success: bool) -> None:
        """Record an action returned by the strategy.

        Args:
            action: The action that was applied.
            success: Whether the world accepted it.
        """
        with self._lock:
            key = action.type.value
            self._actions_by_type[key] = self._actions_by_type.get(key, 0) + 1
            if not success:
                self._actions_failed += 1

    def record_delivery(self, count: int, reward: float) -> None:
        """Record parcels delivered in one put-down.

        Args:
            count: Number of parcels delivered.
            reward: Sum of their rewards.
        """
        with self._lock:
            self._parcels_delivered += count
            self._reward_delivered += reward

    def record_event(self, event: DeliveryEvent) -> None:
        """Count a strategy decision event."""
        with self._lock:
            self._event_counts[event.type] = self._event_counts.get(event.type, 0) + 1

    @contextmanager
    def time_decision(self) -> Iterator[None]:
        """Context manager to time a decision.

        Example:
            >>> with metrics.time_decision():
            ...     action = strategy.get_delivery_action()
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            with self._lock:
                self._decision_timing.record(duration_ms)

    def get_metrics(self) -> DeliveryMetrics:
        """Get a snapshot of all current metrics."""
        with self._lock:
            events = self._event_counts
            blocked = events.get(DeliveryEventType.BLOCKED, 0)
            timeouts = events.get(DeliveryEventType.BLOCK_TIMEOUT, 0)
            return DeliveryMetrics(
                turns=self._turns,
                avg_decision_time_ms=self._decision_timing.average_ms,
                actions_by_type=dict(self._actions_by_type),
                actions_failed=self._actions_failed,
                parcels_delivered=self._parcels_delivered,
                reward_delivered=self._reward_delivered,
                path_recalculations=events.get(DeliveryEventType.PATH_RECALCULATED, 0),
                # The timeout turn is also spent waiting on the blocked tile.
                blocked_turns=blocked + timeouts,
                block_timeouts=timeouts,
                path_clears=events.get(DeliveryEventType.PATH_CLEARED, 0),
                detours_selected=events.get(DeliveryEventType.DETOUR_SELECTED, 0),
            )
