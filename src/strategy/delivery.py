"""Delivery decision engine for a parcel-carrying agent.

Decides one action per turn while the agent carries parcels:
1) put down when standing on a delivery tile
2) pick up or route to a nearby valuable parcel when the detour is cheap
3) follow the committed route toward the nearest delivery tile

Routes are recomputed lazily, only when empty or no longer ending at the
wanted target. An agent standing on the next route tile is waited out for a
bounded number of turns, after which the route is dropped and replanned.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from src.models.actions import Action
from src.models.world import ParcelRecord, PathStep, Position
from src.strategy.events import DeliveryEvent, DeliveryEventType, EventSink

if TYPE_CHECKING:
    from src.interfaces.beliefs import Beliefs
    from src.interfaces.pathfinding import Pathfinder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryConfig:
    """Configuration for delivery behavior.

    ``max_detour_distance`` bounds both the heuristic pre-filter on parcel
    distance and the route-length increase a detour may add.
    """

    delivery_threshold: float = 10.0
    max_detour_distance: int = 5
    blocked_timeout: int = 3
    emit_events: bool = True

    def __post_init__(self) -> None:
        if self.delivery_threshold < 0:
            raise ValueError(f"delivery_threshold must be >= 0, got {self.delivery_threshold}")
        if self.max_detour_distance < 0:
            raise ValueError(f"max_detour_distance must be >= 0, got {self.max_detour_distance}")
        if self.blocked_timeout < 1:
            raise ValueError(f"blocked_timeout must be >= 1, got {self.blocked_timeout}")


@dataclass
class BlockState:
    """Consecutive turns the next route tile has been occupied by another agent."""

    blocked_target_tile: Position | None = None
    blocked_counter: int = 0

    def reset(self) -> None:
        self.blocked_target_tile = None
        self.blocked_counter = 0

    @property
    def is_blocked(self) -> bool:
        return self.blocked_target_tile is not None


@dataclass(frozen=True)
class DetourCandidate:
    """A parcel worth picking up on the way, with its scoring."""

    parcel: ParcelRecord
    added_steps: int
    score: float


def is_path_leading_to(path: Sequence[Position], x: int, y: int) -> bool:
    """True if the route's final step is the given cell."""
    if not path:
        return False
    final_step = path[-1]
    return final_step.x == x and final_step.y == y


def is_at_position(x1: int, y1: int, x2: int, y2: int) -> bool:
    """Exact cell equality."""
    return x1 == x2 and y1 == y2


class DeliveryStrategy:
    """Turn-by-turn delivery decisions for carried parcels.

    - update_carried_parcels: refresh what the agent carries (call first each turn)
    - get_delivery_action: the single action for this turn
    - evaluate_detour_parcels: best parcel worth a bounded detour, if any
    - follow_delivery_path: consume the committed route with blocking recovery

    World anomalies never raise; they produce a wait action and, where the
    committed route can no longer be trusted, clear it so the next turn
    replans from scratch.
    """

    def __init__(
        self,
        beliefs: Beliefs,
        pathfinder: Pathfinder,
        config: DeliveryConfig | None = None,
        event_sink: EventSink | None = None,
    ) -> None:
        self._beliefs = beliefs
        self._pathfinder = pathfinder
        self._config = config or DeliveryConfig()
        self._event_sink = event_sink

        self._carried_parcels: tuple[ParcelRecord, ...] = ()
        self._delivery_path: deque[PathStep] = deque()
        self._block_state = BlockState()

    @property
    def config(self) -> DeliveryConfig:
        return self._config

    @property
    def carried_parcels(self) -> tuple[ParcelRecord, ...]:
        """Parcels currently carried by this agent."""
        return self._carried_parcels

    @property
    def delivery_path(self) -> tuple[PathStep, ...]:
        """Snapshot of the committed route; first element is the next step."""
        return tuple(self._delivery_path)

    @property
    def block_state(self) -> BlockState:
        """Copy of the current blocking state."""
        return replace(self._block_state)

    def should_deliver(self) -> bool:
        """Deliver whenever anything is carried."""
        return len(self._carried_parcels) > 0

    def update_carried_parcels(self, all_parcels: Sequence[ParcelRecord]) -> None:
        """Recompute carried parcels from the full parcel list.

        Dropping the last parcel invalidates the route, since its target was
        chosen for a delivery that has now happened.
        """
        my_id = self._beliefs.my_id
        if my_id is None:
            self._carried_parcels = ()
            return

        self._carried_parcels = tuple(p for p in all_parcels if p.carried_by == my_id)
        if not self._carried_parcels and self._delivery_path:
            self._clear_path("delivered")

    def get_delivery_action(self) -> Action:
        """Decide this turn's action. Returns a wait action when there is nothing to do."""
        if not self.should_deliver():
            return Action.wait("Nothing to deliver")

        current = self._beliefs.my_position
        if current is None:
            self._emit(DeliveryEventType.POSITION_UNKNOWN)
            return Action.wait("Own position unknown")

        if self._beliefs.is_delivery_tile(current.x, current.y):
            self._clear_path("arrived")
            return Action.putdown(f"Deliver {len(self._carried_parcels)} parcel(s)")

        detour = self.evaluate_detour_parcels()
        if detour is not None:
            parcel = detour.parcel
            cell = parcel.cell
            if is_at_position(current.x, current.y, cell.x, cell.y):
                return Action.pickup(parcel.id, f"Pick up detour parcel {parcel.id}")
            self._ensure_path_to(current, cell, purpose="detour")
            return self.follow_delivery_path(current)

        delivery_tile = self._beliefs.get_closest_delivery_tile(current.x, current.y)
        if delivery_tile is None:
            self._emit(DeliveryEventType.NO_DELIVERY_TILE, x=current.x, y=current.y)
            self._clear_path("no_delivery_tile")
            return Action.wait("No delivery tile known")

        self._ensure_path_to(current, delivery_tile, purpose="delivery")
        return self.follow_delivery_path(current)

    def evaluate_detour_parcels(self) -> DetourCandidate | None:
        """Pick the uncarried parcel with the best reward per added step.

        Only parcels above the reward threshold and within the detour
        distance are routed. Does not touch the route or blocking state.
        """
        current = self._beliefs.my_position
        if current is None:
            return None

        delivery_tile = self._beliefs.get_closest_delivery_tile(current.x, current.y)
        if delivery_tile is None:
            return None

        base_path_length = self._route_length(current, delivery_tile)
        if base_path_length is None:
            self._emit(
                DeliveryEventType.DELIVERY_UNREACHABLE,
                tile=delivery_tile.as_tuple(),
                origin=current.as_tuple(),
            )
            return None

        best: DetourCandidate | None = None
        for parcel in self._detour_candidates():
            cell = parcel.cell
            to_parcel = self._route_length(current, cell)
            if to_parcel is None:
                continue
            to_delivery = self._route_length(cell, delivery_tile)
            if to_delivery is None:
                continue

            # Clamped: with agent avoidance the base route may be longer than
            # the detour legs combined.
            added_steps = max(0, to_parcel + to_delivery - base_path_length)
            if added_steps > self._config.max_detour_distance:
                continue

            score = parcel.reward / (added_steps + 1)
            self._emit(
                DeliveryEventType.DETOUR_CONSIDERED,
                parcel=parcel.id,
                added_steps=added_steps,
                score=round(score, 3),
            )
            if best is None or score > best.score:
                best = DetourCandidate(parcel=parcel, added_steps=added_steps, score=score)

        if best is not None:
            self._emit(
                DeliveryEventType.DETOUR_SELECTED,
                parcel=best.parcel.id,
                added_steps=best.added_steps,
                score=round(best.score, 3),
            )
        return best

    def follow_delivery_path(self, current: Position) -> Action:
        """Advance one step along the committed route, or wait if blocked."""
        if not self._delivery_path:
            self._block_state.reset()
            return Action.wait("No route to follow")

        next_step = self._delivery_path[0]
        target_x, target_y = next_step.x, next_step.y

        if self._is_blocked_by_other_agent(target_x, target_y):
            return self._wait_while_blocked(target_x, target_y)

        self._block_state.reset()
        direction = self._pathfinder.get_action_to_next_step(current.x, current.y, target_x, target_y)
        if direction is None:
            self._emit(
                DeliveryEventType.STEP_UNRESOLVED,
                origin=current.as_tuple(),
                step=(target_x, target_y),
            )
            self._clear_path("step_unresolved")
            return Action.wait("Next step not adjacent")

        self._delivery_path.popleft()
        return Action.move(direction, f"Move {direction.value} to ({target_x}, {target_y})")

    def _wait_while_blocked(self, target_x: int, target_y: int) -> Action:
        state = self._block_state
        tile = state.blocked_target_tile
        if tile is not None and is_at_position(tile.x, tile.y, target_x, target_y):
            state.blocked_counter += 1
            if state.blocked_counter >= self._config.blocked_timeout:
                self._emit(
                    DeliveryEventType.BLOCK_TIMEOUT,
                    tile=(target_x, target_y),
                    turns=state.blocked_counter,
                )
                self._clear_path("blocked")
                return Action.wait("Blocked too long, replanning next turn")
        else:
            state.blocked_target_tile = Position(x=target_x, y=target_y)
            state.blocked_counter = 1

        self._emit(DeliveryEventType.BLOCKED, tile=(target_x, target_y), turns=state.blocked_counter)
        return Action.wait(f"Waiting for ({target_x}, {target_y}) to clear")

    def _is_blocked_by_other_agent(self, x: int, y: int) -> bool:
        my_id = self._beliefs.my_id
        if my_id is None:
            return False
        for agent in self._beliefs.agents:
            if agent.id == my_id:
                continue
            cell = agent.cell
            if cell.x == x and cell.y == y:
                return True
        return False

    def _detour_candidates(self) -> list[ParcelRecord]:
        threshold = self._config.delivery_threshold
        max_distance = self._config.max_detour_distance
        return [
            parcel
            for parcel in self._beliefs.available_parcels
            if not parcel.is_carried
            and parcel.reward > threshold
            # Cheap heuristic check before routing.
            and self._beliefs.calculate_distance(parcel.x, parcel.y) <= max_distance
        ]

    def _route_length(self, origin: Position, destination: Position) -> int | None:
        """Steps from origin to destination, or None when unreachable."""
        steps = self._pathfinder.find_path(origin.x, origin.y, destination.x, destination.y)
        if not steps and not is_at_position(origin.x, origin.y, destination.x, destination.y):
            return None
        return len(steps)

    def _ensure_path_to(self, current: Position, target: Position, *, purpose: str) -> None:
        if is_path_leading_to(self._delivery_path, target.x, target.y):
            return
        self._delivery_path = deque(
            self._pathfinder.find_path(current.x, current.y, target.x, target.y)
        )
        self._emit(
            DeliveryEventType.PATH_RECALCULATED,
            purpose=purpose,
            target=target.as_tuple(),
            steps=len(self._delivery_path),
        )

    def _clear_path(self, reason: str) -> None:
        had_state = bool(self._delivery_path) or self._block_state.is_blocked
        self._delivery_path.clear()
        self._block_state.reset()
        if had_state:
            self._emit(DeliveryEventType.PATH_CLEARED, reason=reason)

    def _emit(self, event_type: DeliveryEventType, **details: Any) -> None:
        if not self._config.emit_events:
            return
        event = DeliveryEvent(type=event_type, details=details)
        logger.log(event.log_level, "[DELIVERY] %s", event.describe())
        if self._event_sink is None:
            return
        try:
            self._event_sink(event)
        except Exception as exc:
            logger.warning("[DELIVERY] Event sink failed for %s: %s", event_type.value, exc)
