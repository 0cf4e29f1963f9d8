"""Deterministic turn simulator for a single courier agent.

The simulator owns ground truth: positions, parcels and delivered score.
Other agents are stationary obstacles unless moved explicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.models.actions import Action, ActionType
from src.models.world import AgentRecord, ParcelRecord, Position
from src.world.grid import GridMap

logger = logging.getLogger(__name__)


class GridWorld:
    """Ground-truth state of the grid and rules for applying actions."""

    def __init__(
        self,
        grid: GridMap,
        agent_id: str,
        start: Position,
        agents: Iterable[AgentRecord] = (),
        parcels: Iterable[ParcelRecord] = (),
    ) -> None:
        if not grid.is_walkable(start.x, start.y):
            raise ValueError(f"Agent start {start.as_tuple()} is not walkable")
        self.grid = grid
        self.agent_id = agent_id
        self._position = start
        self._agents: dict[str, AgentRecord] = {a.id: a for a in agents if a.id != agent_id}
        self._parcels: dict[str, ParcelRecord] = {p.id: p for p in parcels}
        self.score = 0.0
        self.delivered_count = 0

    @property
    def position(self) -> Position:
        return self._position

    @property
    def agents(self) -> list[AgentRecord]:
        """Other agents."""
        return list(self._agents.values())

    @property
    def parcels(self) -> list[ParcelRecord]:
        """Parcels still in play, carried or on the ground."""
        return list(self._parcels.values())

    def carried_by(self, agent_id: str) -> list[ParcelRecord]:
        return [p for p in self._parcels.values() if p.carried_by == agent_id]

    def move_agent(self, agent_id: str, x: float, y: float) -> None:
        """Reposition another agent (used by scripted scenarios and tests)."""
        agent = self._agents.get(agent_id)
        if agent is None:
            raise KeyError(f"Agent not found: {agent_id}")
        self._agents[agent_id] = agent.model_copy(update={"x": x, "y": y})

    def remove_agent(self, agent_id: str) -> None:
        self._agents.pop(agent_id, None)

    def apply(self, agent_id: str, action: Action) -> bool:
        """Apply one action for the controlled agent.

        Returns:
            True if the action took effect, False if the world rejected it.
        """
        if agent_id != self.agent_id:
            raise KeyError(f"Agent {agent_id} is not controlled by this world")

        if action.type == ActionType.WAIT:
            return True
        if action.type == ActionType.MOVE:
            return self._move(action)
        if action.type == ActionType.PICKUP:
            return self._pickup(action)
        if action.type == ActionType.PUTDOWN:
            return self._putdown()
        raise ValueError(f"Unsupported action type: {action.type}")

    def _move(self, action: Action) -> bool:
        assert action.direction is not None
        dx, dy = action.direction.delta
        nx, ny = self._position.x + dx, self._position.y + dy
        if not self.grid.is_walkable(nx, ny):
            logger.debug("[WORLD] Move %s into wall/edge at (%s, %s)", action.direction.value, nx, ny)
            return False
        if any(agent.cell.as_tuple() == (nx, ny) for agent in self._agents.values()):
            logger.debug("[WORLD] Move %s into occupied cell (%s, %s)", action.direction.value, nx, ny)
            return False
        self._position = Position(x=nx, y=ny)
        for parcel in self.carried_by(self.agent_id):
            self._parcels[parcel.id] = parcel.model_copy(update={"x": float(nx), "y": float(ny)})
        return True

    def _pickup(self, action: Action) -> bool:
        here = self._position.as_tuple()
        on_cell = [p for p in self._parcels.values() if not p.is_carried and p.cell.as_tuple() == here]
        if not any(p.id == action.target for p in on_cell):
            logger.debug("[WORLD] Pickup target %s not on cell %s", action.target, here)
            return False
        for parcel in on_cell:
            self._parcels[parcel.id] = parcel.model_copy(
                update={"carried_by": self.agent_id, "x": float(here[0]), "y": float(here[1])}
            )
        return True

    def _putdown(self) -> bool:
        carried = self.carried_by(self.agent_id)
        if not carried:
            return False
        x, y = self._position.as_tuple()
        if self.grid.is_delivery_tile(x, y):
            for parcel in carried:
                del self._parcels[parcel.id]
                self.score += parcel.reward
                self.delivered_count += 1
            logger.info("[WORLD] Delivered %s parcel(s) at (%s, %s)", len(carried), x, y)
            return True
        for parcel in carried:
            self._parcels[parcel.id] = parcel.model_copy(
                update={"carried_by": None, "x": float(x), "y": float(y)}
            )
        return True

