"""Interface definitions for the courier agent's collaborators.

The decision core depends only on these contracts, which keeps it testable
with mocks and independent of any particular map or sensing backend.
"""

from src.interfaces.beliefs import Beliefs
from src.interfaces.pathfinding import Pathfinder

__all__ = [
    "Beliefs",
    "Pathfinder",
]
