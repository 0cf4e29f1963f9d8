"""World models for grid positions, parcels and other agents."""

from __future__ import annotations

import math
from typing import Annotated

from pydantic import BaseModel, Field


class Position(BaseModel):
    """A grid cell."""

    x: Annotated[int, Field(ge=0)] = Field(..., description="Column")
    y: Annotated[int, Field(ge=0)] = Field(..., description="Row")

    model_config = {"frozen": True}

    def as_tuple(self) -> tuple[int, int]:
        """Return the cell as an (x, y) tuple."""
        return (self.x, self.y)

    def manhattan(self, other: Position) -> int:
        """Manhattan distance to another cell."""
        return abs(self.x - other.x) + abs(self.y - other.y)


class PathStep(Position):
    """One cell of a planned route. The first step is the next cell to enter."""


class ParcelRecord(BaseModel):
    """A parcel known to the belief store."""

    id: str = Field(..., min_length=1, description="Unique parcel identifier")
    x: float = Field(..., ge=0, description="X coordinate")
    y: float = Field(..., ge=0, description="Y coordinate")
    reward: float = Field(default=0.0, ge=0, description="Current reward value")
    carried_by: str | None = Field(default=None, description="Id of the carrying agent, if any")

    model_config = {"frozen": True}

    @property
    def cell(self) -> Position:
        """Cell holding this parcel (coordinates truncated)."""
        return Position(x=math.floor(self.x), y=math.floor(self.y))

    @property
    def is_carried(self) -> bool:
        """Whether some agent is carrying this parcel."""
        return bool(self.carried_by)


class AgentRecord(BaseModel):
    """Another agent as last sensed.

    Coordinates can be fractional while the agent is between cells.
    """

    id: str = Field(..., min_length=1, description="Unique agent identifier")
    x: float = Field(..., ge=0, description="X coordinate")
    y: float = Field(..., ge=0, description="Y coordinate")
    name: str | None = Field(default=None, description="Display name")

    model_config = {"frozen": True}

    @property
    def cell(self) -> Position:
        """Cell this agent occupies (coordinates truncated)."""
        return Position(x=math.floor(self.x), y=math.floor(self.y))
