"""In-memory belief store fed by per-turn sensing."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from src.interfaces.beliefs import Beliefs
from src.models.world import AgentRecord, ParcelRecord, Position
from src.world.grid import GridMap

logger = logging.getLogger(__name__)


class GridBeliefs(Beliefs):
    """Belief store backed by a known grid map.

    Sensing updates replace the previous snapshot wholesale: an agent or
    parcel missing from the latest update is no longer believed to exist.
    """

    def __init__(self, grid: GridMap) -> None:
        self._grid = grid
        self._my_id: str | None = None
        self._my_position: Position | None = None
        self._agents: tuple[AgentRecord, ...] = ()
        self._parcels: tuple[ParcelRecord, ...] = ()

    @property
    def grid(self) -> GridMap:
        return self._grid

    @property
    def my_id(self) -> str | None:
        return self._my_id

    @property
    def my_position(self) -> Position | None:
        return self._my_position

    @property
    def agents(self) -> Sequence[AgentRecord]:
        return self._agents

    @property
    def available_parcels(self) -> Sequence[ParcelRecord]:
        return self._parcels

    def update_self(self, agent_id: str, x: float, y: float) -> None:
        """Record own id and position; fractional coordinates are truncated."""
        self._my_id = agent_id
        self._my_position = Position(x=math.floor(x), y=math.floor(y))

    def update_agents(self, agents: Iterable[AgentRecord]) -> None:
        self._agents = tuple(agents)

    def update_parcels(self, parcels: Iterable[ParcelRecord]) -> None:
        self._parcels = tuple(parcels)

    def is_delivery_tile(self, x: int, y: int) -> bool:
        return self._grid.is_delivery_tile(x, y)

    def get_closest_delivery_tile(self, x: int, y: int) -> Position | None:
        """Nearest delivery tile by Manhattan distance, ties broken by (x, y)."""
        if not self._grid.delivery_tiles:
            return None
        origin = Position(x=x, y=y)
        return min(
            self._grid.delivery_tiles,
            key=lambda tile: (origin.manhattan(tile), tile.x, tile.y),
        )

    def calculate_distance(self, x: float, y: float) -> float:
        """Manhattan distance from own position; infinite while it is unknown."""
        if self._my_position is None:
            logger.debug("[BELIEFS] Distance requested before own position is known")
            return math.inf
        return abs(self._my_position.x - x) + abs(self._my_position.y - y)
