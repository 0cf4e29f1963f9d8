"""A* pathfinder over a grid map."""

from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING

from src.interfaces.pathfinding import Pathfinder
from src.models.actions import Direction
from src.models.world import PathStep
from src.world.grid import GridMap

if TYPE_CHECKING:
    from src.interfaces.beliefs import Beliefs

logger = logging.getLogger(__name__)

Cell = tuple[int, int]

_DIRECTION_BY_DELTA: dict[Cell, Direction] = {direction.delta: direction for direction in Direction}


class GridPathfinder(Pathfinder):
    """Shortest 4-connected routes on a GridMap.

    With ``avoid_agents`` the route first avoids cells occupied by other
    agents (from the belief store) and falls back to a plain route when
    they wall the destination off, since agents may move away.
    """

    def __init__(
        self,
        grid: GridMap,
        beliefs: Beliefs | None = None,
        avoid_agents: bool = False,
    ) -> None:
        if avoid_agents and beliefs is None:
            raise ValueError("avoid_agents requires a belief store")
        self._grid = grid
        self._beliefs = beliefs
        self._avoid_agents = avoid_agents

    def find_path(self, x1: int, y1: int, x2: int, y2: int) -> list[PathStep]:
        start = (x1, y1)
        goal = (x2, y2)
        if start == goal:
            return []
        if not self._grid.is_walkable(x1, y1) or not self._grid.is_walkable(x2, y2):
            logger.debug("[PATH] Endpoint not walkable: %s -> %s", start, goal)
            return []

        cells: list[Cell] = []
        if self._avoid_agents:
            cells = self._shortest_path(start, goal, blocked=self._occupied_cells() - {goal})
        if not cells:
            cells = self._shortest_path(start, goal, blocked=frozenset())
        return [PathStep(x=x, y=y) for x, y in cells]

    def get_action_to_next_step(
        self,
        cur_x: int,
        cur_y: int,
        next_x: int,
        next_y: int,
    ) -> Direction | None:
        return _DIRECTION_BY_DELTA.get((next_x - cur_x, next_y - cur_y))

    def _occupied_cells(self) -> frozenset[Cell]:
        assert self._beliefs is not None
        my_id = self._beliefs.my_id
        return frozenset(
            agent.cell.as_tuple() for agent in self._beliefs.agents if agent.id != my_id
        )

    def _shortest_path(self, start: Cell, goal: Cell, blocked: frozenset[Cell]) -> list[Cell]:
        """A* with Manhattan heuristic; returns cells after start, or [] if unreachable."""

        def heuristic(cell: Cell) -> int:
            return abs(cell[0] - goal[0]) + abs(cell[1] - goal[1])

        tie_breaker = 0
        open_set: list[tuple[int, int, Cell]] = [(heuristic(start), tie_breaker, start)]
        came_from: dict[Cell, Cell | None] = {start: None}
        g_score: dict[Cell, int] = {start: 0}

        while open_set:
            _, _, current = heapq.heappop(open_set)
            if current == goal:
                return _reconstruct_path(came_from, current)

            current_g = g_score[current]
            for neighbor in self._grid.neighbors(*current):
                if neighbor in blocked:
                    continue
                tentative_g = current_g + 1
                if tentative_g < g_score.get(neighbor, tentative_g + 1):
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative_g
                    tie_breaker += 1
                    heapq.heappush(open_set, (tentative_g + heuristic(neighbor), tie_breaker, neighbor))

        return []


def _reconstruct_path(came_from: dict[Cell, Cell | None], current: Cell) -> list[Cell]:
    path: list[Cell] = []
    previous = came_from[current]
    while previous is not None:
        path.append(current)
        current = previous
        previous = came_from[current]
    path.reverse()
    return path
