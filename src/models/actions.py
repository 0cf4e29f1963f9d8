"""Action models for representing the agent's per-turn decision."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class ActionType(StrEnum):
    """Types of actions the agent can perform in one turn."""

    MOVE = "move"
    PICKUP = "pickup"
    PUTDOWN = "putdown"
    WAIT = "wait"


class Direction(StrEnum):
    """Primitive move directions on the grid.

    ``up`` increases y and ``right`` increases x.
    """

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Cell offset (dx, dy) produced by moving in this direction."""
        return _DELTAS[self]


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, 1),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class Action(BaseModel):
    """An action returned to the runtime for the current turn.

    Actions are immutable. ``wait`` is the explicit "do nothing this turn"
    variant, so every decision produces exactly one Action.
    """

    type: ActionType = Field(..., description="The type of action to perform")
    direction: Direction | None = Field(default=None, description="Direction for move actions")
    target: str | None = Field(default=None, description="Parcel id for pickup actions")
    description: str | None = Field(default=None, description="Human-readable description")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_payload(self) -> Action:
        if self.type == ActionType.MOVE and self.direction is None:
            raise ValueError("move action requires a direction")
        if self.type == ActionType.PICKUP and not self.target:
            raise ValueError("pickup action requires a target parcel id")
        return self

    @property
    def is_wait(self) -> bool:
        """True for the no-action variant."""
        return self.type == ActionType.WAIT

    @classmethod
    def move(cls, direction: Direction | str, description: str | None = None) -> Action:
        """Create a move action."""
        return cls(type=ActionType.MOVE, direction=Direction(direction), description=description)

    @classmethod
    def pickup(cls, parcel_id: str, description: str | None = None) -> Action:
        """Create a pickup action targeting a parcel on the current tile."""
        return cls(type=ActionType.PICKUP, target=parcel_id, description=description)

    @classmethod
    def putdown(cls, description: str | None = None) -> Action:
        """Create a put-down action for all carried parcels."""
        return cls(type=ActionType.PUTDOWN, description=description)

    @classmethod
    def wait(cls, description: str | None = None) -> Action:
        """Create a wait (no-action) action."""
        return cls(type=ActionType.WAIT, description=description)
