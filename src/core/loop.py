"""Turn loop driving the delivery strategy against a simulated world.

Each turn follows the pattern: Sense → Update carried → Decide → Apply

Example:
    >>> from src.core.loop import TurnLoop, LoopConfig
    >>> from src.core.metrics import MetricsCollector
    >>>
    >>> metrics = MetricsCollector()
    >>> strategy = DeliveryStrategy(beliefs, pathfinder, event_sink=metrics.record_event)
    >>> loop = TurnLoop(world, strategy, beliefs, metrics=metrics)
    >>> result = loop.run()
    >>> print(result.parcels_delivered)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from src.core.metrics import DeliveryMetrics, MetricsCollector
from src.models.actions import Action, ActionType

if TYPE_CHECKING:
    from src.simulation.world import GridWorld
    from src.strategy.delivery import DeliveryStrategy
    from src.world.beliefs import GridBeliefs

logger = logging.getLogger(__name__)


class LoopState(StrEnum):
    """Possible states of the turn loop."""

    READY = "ready"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass
class LoopConfig:
    """Configuration for the turn loop.

    Attributes:
        max_turns: Hard cap on turns per run.
        stop_when_idle: Stop as soon as nothing is carried any more.
    """

    max_turns: int = 200
    stop_when_idle: bool = True

    def __post_init__(self) -> None:
        if self.max_turns < 1:
            raise ValueError(f"max_turns must be >= 1, got {self.max_turns}")


class TurnLoop:
    """Runs the sense-decide-act cycle one turn at a time.

    The loop is synchronous: a turn completes, including the world update,
    before the next one starts. The strategy's own state is never touched
    from here.
    """

    def __init__(
        self,
        world: GridWorld,
        strategy: DeliveryStrategy,
        beliefs: GridBeliefs,
        metrics: MetricsCollector | None = None,
        config: LoopConfig | None = None,
    ) -> None:
        """Initialize the turn loop.

        Args:
            world: Simulated world holding ground truth.
            strategy: Delivery strategy deciding each action.
            beliefs: Belief store the strategy reads from; refreshed every turn.
            metrics: Metrics collector. Creates new one if None.
            config: Loop configuration. Uses defaults if None.
        """
        self._world = world
        self._strategy = strategy
        self._beliefs = beliefs
        self._metrics = metrics or MetricsCollector()
        self._config = config or LoopConfig()

        self._state = LoopState.READY
        self._turn = 0
        self._last_action: Action | None = None
        self._on_turn_complete: Callable[[int, Action], None] | None = None

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def turn(self) -> int:
        """Number of turns executed so far."""
        return self._turn

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def last_action(self) -> Action | None:
        """Get the last action (for debugging)."""
        return self._last_action

    def set_callback(self, on_turn_complete: Callable[[int, Action], None] | None) -> None:
        """Set a callback invoked after each turn with (turn number, action)."""
        self._on_turn_complete = on_turn_complete

    def sense(self) -> None:
        """Push the world's current state into the belief store."""
        position = self._world.position
        self._beliefs.update_self(self._world.agent_id, position.x, position.y)
        self._beliefs.update_agents(self._world.agents)
        self._beliefs.update_parcels(self._world.parcels)

    def step(self) -> Action:
        """Run a single turn and return the action taken."""
        self._turn += 1
        self.sense()
        self._strategy.update_carried_parcels(self._beliefs.available_parcels)

        with self._metrics.time_decision():
            action = self._strategy.get_delivery_action()

        delivered_before = self._world.delivered_count
        score_before = self._world.score
        success = self._world.apply(self._world.agent_id, action)

        self._metrics.record_turn()
        self._metrics.record_action(action, success=success)
        if action.type == ActionType.PUTDOWN and self._world.delivered_count > delivered_before:
            self._metrics.record_delivery(
                count=self._world.delivered_count - delivered_before,
                reward=self._world.score - score_before,
            )
        if not success:
            logger.warning("[LOOP] Turn %s: world rejected %s", self._turn, action.type.value)
        else:
            logger.debug("[LOOP] Turn %s: %s", self._turn, action.description or action.type.value)

        self._last_action = action
        if self._on_turn_complete is not None:
            try:
                self._on_turn_complete(self._turn, action)
            except Exception as e:
                logger.warning("[LOOP] Turn callback error: %s", e)
        return action

    def run(self) -> DeliveryMetrics:
        """Run turns until the turn cap or, if configured, until idle.

        Returns:
            Metrics snapshot after the last turn.
        """
        self._state = LoopState.RUNNING
        logger.info("[LOOP] Starting run: max_turns=%s", self._config.max_turns)

        while self._turn < self._config.max_turns:
            if self._config.stop_when_idle and not self._world.carried_by(self._world.agent_id):
                logger.info("[LOOP] Nothing carried, stopping after %s turns", self._turn)
                break
            self.step()

        self._state = LoopState.FINISHED
        snapshot = self._metrics.get_metrics()
        logger.info(
            "[LOOP] Finished: turns=%s delivered=%s reward=%.1f",
            snapshot.turns,
            snapshot.parcels_delivered,
            snapshot.reward_delivered,
        )
        return snapshot
