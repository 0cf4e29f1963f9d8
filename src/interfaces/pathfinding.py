"""Pathfinder interface for route computation on the grid."""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.actions import Direction
from src.models.world import PathStep


class Pathfinder(ABC):
    """Abstract interface for route computation.

    The pathfinder is responsible for:
    - Computing shortest tile sequences between two cells
    - Converting a single adjacent step into a primitive move
    """

    @abstractmethod
    def find_path(self, x1: int, y1: int, x2: int, y2: int) -> list[PathStep]:
        """Compute a route between two cells.

        Args:
            x1: Origin column.
            y1: Origin row.
            x2: Destination column.
            y2: Destination row.

        Returns:
            Steps after the origin, ending at the destination. An empty list
            means unreachable, unless origin and destination are the same cell.
        """
        ...

    @abstractmethod
    def get_action_to_next_step(
        self,
        cur_x: int,
        cur_y: int,
        next_x: int,
        next_y: int,
    ) -> Direction | None:
        """Resolve the move that advances from one cell to the next.

        Args:
            cur_x: Current column.
            cur_y: Current row.
            next_x: Next step column.
            next_y: Next step row.

        Returns:
            The direction to move, or None if the cells are not adjacent.
        """
        ...
