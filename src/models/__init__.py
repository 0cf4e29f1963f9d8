"""Shared data models for the courier agent.

All models use Pydantic for validation and serialization.
"""

from src.models.actions import Action, ActionType, Direction
from src.models.world import AgentRecord, ParcelRecord, PathStep, Position

__all__ = [
    "Action",
    "ActionType",
    "AgentRecord",
    "Direction",
    "ParcelRecord",
    "PathStep",
    "Position",
]
