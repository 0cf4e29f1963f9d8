"""Grid world collaborators: map, belief store and pathfinder."""

from src.world.beliefs import GridBeliefs
from src.world.grid import GridMap, MapError
from src.world.pathfinder import GridPathfinder

__all__ = [
    "GridBeliefs",
    "GridMap",
    "GridPathfinder",
    "MapError",
]
