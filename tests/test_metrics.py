"""Tests for the DeliveryMetrics and MetricsCollector classes."""

from __future__ import annotations

import threading
import time

import pytest
from pydantic import ValidationError

from src.core.metrics import DeliveryMetrics, MetricsCollector, _TimingStats
from src.models.actions import Action, Direction
from src.strategy.events import DeliveryEvent, DeliveryEventType


class TestTimingStats:
    """Tests for _TimingStats internal class."""

    def test_initial_state(self) -> None:
        stats = _TimingStats()
        assert stats.total_ms == 0.0
        assert stats.count == 0
        assert stats.average_ms == 0.0

    def test_record_multiple(self) -> None:
        """Test recording multiple timings."""
        stats = _TimingStats()
        stats.record(100.0)
        stats.record(200.0)
        stats.record(300.0)
        assert stats.total_ms == 600.0
        assert stats.count == 3
        assert stats.average_ms == 200.0


class TestDeliveryMetrics:
    """Tests for DeliveryMetrics Pydantic model."""

    def test_default_values(self) -> None:
        metrics = DeliveryMetrics()
        assert metrics.turns == 0
        assert metrics.actions_by_type == {}
        assert metrics.actions_total == 0
        assert metrics.wait_ratio == 0.0
        assert metrics.parcels_delivered == 0

    def test_wait_ratio(self) -> None:
        metrics = DeliveryMetrics(actions_by_type={"move": 3, "wait": 1})
        assert metrics.actions_total == 4
        assert metrics.wait_ratio == 0.25

    def test_immutable(self) -> None:
        metrics = DeliveryMetrics()
        with pytest.raises(ValidationError):
            metrics.turns = 5  # type: ignore[misc]

    def test_validation(self) -> None:
        with pytest.raises(ValidationError):
            DeliveryMetrics(turns=-1)

    def test_serialization(self) -> None:
        data = DeliveryMetrics(turns=3, reward_delivered=12.5).model_dump()
        assert data["turns"] == 3
        assert data["reward_delivered"] == 12.5


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_records_actions(self) -> None:
        collector = MetricsCollector()
        collector.record_action(Action.move(Direction.UP), success=True)
        collector.record_action(Action.move(Direction.UP), success=False)
        collector.record_action(Action.wait(), success=True)

        metrics = collector.get_metrics()

        assert metrics.actions_by_type == {"move": 2, "wait": 1}
        assert metrics.actions_failed == 1

    def test_records_turns_and_deliveries(self) -> None:
        collector = MetricsCollector()
        collector.record_turn()
        collector.record_turn()
        collector.record_delivery(count=2, reward=30.0)
        collector.record_delivery(count=1, reward=5.5)

        metrics = collector.get_metrics()

        assert metrics.turns == 2
        assert metrics.parcels_delivered == 3
        assert metrics.reward_delivered == 35.5

    def test_counts_events(self) -> None:
        collector = MetricsCollector()
        for event_type in [
            DeliveryEventType.PATH_RECALCULATED,
            DeliveryEventType.PATH_RECALCULATED,
            DeliveryEventType.BLOCKED,
            DeliveryEventType.BLOCKED,
            DeliveryEventType.BLOCK_TIMEOUT,
            DeliveryEventType.PATH_CLEARED,
            DeliveryEventType.DETOUR_SELECTED,
            DeliveryEventType.DETOUR_CONSIDERED,
        ]:
            collector.record_event(DeliveryEvent(event_type))

        metrics = collector.get_metrics()

        assert metrics.path_recalculations == 2
        assert metrics.blocked_turns == 3
        assert metrics.block_timeouts == 1
        assert metrics.path_clears == 1
        assert metrics.detours_selected == 1

    def test_time_decision(self) -> None:
        collector = MetricsCollector()

        with collector.time_decision():
            time.sleep(0.01)

        assert collector.get_metrics().avg_decision_time_ms >= 5.0

    def test_time_decision_records_on_error(self) -> None:
        collector = MetricsCollector()

        with pytest.raises(RuntimeError), collector.time_decision():
            raise RuntimeError("boom")

        assert collector.get_metrics().avg_decision_time_ms >= 0.0
        assert collector._decision_timing.count == 1

    def test_reset(self) -> None:
        collector = MetricsCollector()
        collector.record_turn()
        collector.record_action(Action.wait(), success=True)
        collector.record_event(DeliveryEvent(DeliveryEventType.BLOCKED))

        collector.reset()

        assert collector.get_metrics() == DeliveryMetrics()

    def test_snapshot_is_detached(self) -> None:
        collector = MetricsCollector()
        collector.record_action(Action.wait(), success=True)
        snapshot = collector.get_metrics()

        collector.record_action(Action.wait(), success=True)

        assert snapshot.actions_by_type == {"wait": 1}

    def test_thread_safety(self) -> None:
        collector = MetricsCollector()

        def worker() -> None:
            for _ in range(100):
                collector.record_turn()
                collector.record_event(DeliveryEvent(DeliveryEventType.PATH_RECALCULATED))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        metrics = collector.get_metrics()
        assert metrics.turns == 400
        assert metrics.path_recalculations == 400
