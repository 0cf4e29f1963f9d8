"""Static grid map: walkable cells, walls and delivery tiles."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from src.models.actions import Direction
from src.models.world import Position

WALKABLE = "."
WALL = "#"
DELIVERY = "D"

_TILE_CHARS = frozenset({WALKABLE, WALL, DELIVERY})


class MapError(ValueError):
    """Raised when a map description cannot be parsed."""


@dataclass(frozen=True)
class GridMap:
    """Immutable description of the playing field.

    Cells are addressed as (x, y) with 0 <= x < width and 0 <= y < height.
    Delivery tiles are always walkable.
    """

    width: int
    height: int
    walls: frozenset[Position] = frozenset()
    delivery_tiles: frozenset[Position] = frozenset()

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> GridMap:
        """Parse a map from text rows; row index is the y coordinate.

        ``.`` is a walkable cell, ``#`` a wall and ``D`` a delivery tile.
        """
        if not rows:
            raise MapError("Map has no rows")
        width = len(rows[0])
        if width == 0:
            raise MapError("Map rows are empty")

        walls: set[Position] = set()
        delivery: set[Position] = set()
        for y, row in enumerate(rows):
            if len(row) != width:
                raise MapError(f"Row {y} has width {len(row)}, expected {width}")
            for x, char in enumerate(row):
                if char not in _TILE_CHARS:
                    raise MapError(f"Unknown tile {char!r} at ({x}, {y})")
                if char == WALL:
                    walls.add(Position(x=x, y=y))
                elif char == DELIVERY:
                    delivery.add(Position(x=x, y=y))

        return cls(
            width=width,
            height=len(rows),
            walls=frozenset(walls),
            delivery_tiles=frozenset(delivery),
        )

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and Position(x=x, y=y) not in self.walls

    def is_delivery_tile(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and Position(x=x, y=y) in self.delivery_tiles

    def neighbors(self, x: int, y: int) -> Iterator[tuple[int, int]]:
        """Walkable 4-connected neighbours of a cell."""
        for direction in Direction:
            dx, dy = direction.delta
            nx, ny = x + dx, y + dy
            if self.is_walkable(nx, ny):
                yield nx, ny

