"""Belief store interface for the agent's model of the world."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from src.models.world import AgentRecord, ParcelRecord, Position


class Beliefs(ABC):
    """Abstract interface for the agent's beliefs about the world.

    The belief store is responsible for:
    - Tracking the agent's own id and position
    - Tracking other agents' positions
    - Tracking known parcels and who carries them
    - Answering delivery-tile and distance queries

    Decision components only read from it.
    """

    @property
    @abstractmethod
    def my_id(self) -> str | None:
        """The agent's own id, or None before it is known."""
        ...

    @property
    @abstractmethod
    def my_position(self) -> Position | None:
        """The agent's current cell, or None before it is known."""
        ...

    @property
    @abstractmethod
    def agents(self) -> Sequence[AgentRecord]:
        """Last sensed agents. May include the agent itself."""
        ...

    @property
    @abstractmethod
    def available_parcels(self) -> Sequence[ParcelRecord]:
        """All known parcels, carried or not."""
        ...

    @abstractmethod
    def is_delivery_tile(self, x: int, y: int) -> bool:
        """Check whether a cell is a delivery tile.

        Args:
            x: Cell column.
            y: Cell row.

        Returns:
            True if parcels can be delivered on this cell.
        """
        ...

    @abstractmethod
    def get_closest_delivery_tile(self, x: int, y: int) -> Position | None:
        """Find the delivery tile nearest to a cell.

        Args:
            x: Cell column.
            y: Cell row.

        Returns:
            The nearest delivery tile, or None if none is known.
        """
        ...

    @abstractmethod
    def calculate_distance(self, x: float, y: float) -> float:
        """Heuristic distance from the agent's position to a point.

        Args:
            x: Target column.
            y: Target row.

        Returns:
            Estimated distance in steps.
        """
        ...
