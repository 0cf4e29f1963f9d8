"""Tests for action and world models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.models.actions import Action, ActionType, Direction
from src.models.world import AgentRecord, ParcelRecord, PathStep, Position


class TestDirection:
    """Direction deltas follow the grid convention."""

    def test_deltas(self) -> None:
        assert Direction.UP.delta == (0, 1)
        assert Direction.DOWN.delta == (0, -1)
        assert Direction.LEFT.delta == (-1, 0)
        assert Direction.RIGHT.delta == (1, 0)

    def test_string_values(self) -> None:
        assert Direction("left") is Direction.LEFT
        assert str(Direction.UP) == "up"


class TestAction:
    """Tests for the Action model and its constructors."""

    def test_move(self) -> None:
        action = Action.move("right", "step")
        assert action.type == ActionType.MOVE
        assert action.direction == Direction.RIGHT
        assert action.description == "step"
        assert not action.is_wait

    def test_pickup(self) -> None:
        action = Action.pickup("p1")
        assert action.type == ActionType.PICKUP
        assert action.target == "p1"

    def test_putdown_and_wait(self) -> None:
        assert Action.putdown().type == ActionType.PUTDOWN
        assert Action.wait().is_wait

    def test_move_requires_direction(self) -> None:
        with pytest.raises(ValidationError):
            Action(type=ActionType.MOVE)

    def test_pickup_requires_target(self) -> None:
        with pytest.raises(ValidationError):
            Action(type=ActionType.PICKUP)

    def test_invalid_direction_rejected(self) -> None:
        with pytest.raises(ValueError):
            Action.move("diagonal")

    def test_action_is_frozen(self) -> None:
        action = Action.wait()
        with pytest.raises(ValidationError):
            action.description = "changed"  # type: ignore[misc]

    def test_serialization(self) -> None:
        data = Action.move(Direction.UP).model_dump()
        assert data["type"] == "move"
        assert data["direction"] == "up"


class TestPosition:
    """Tests for Position and PathStep."""

    def test_manhattan(self) -> None:
        assert Position(x=1, y=2).manhattan(Position(x=4, y=0)) == 5

    def test_negative_coordinates_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Position(x=-1, y=0)

    def test_hashable(self) -> None:
        cells = {Position(x=1, y=1), Position(x=1, y=1)}
        assert len(cells) == 1

    def test_path_step_is_a_position(self) -> None:
        step = PathStep(x=2, y=3)
        assert isinstance(step, Position)
        assert step.as_tuple() == (2, 3)


class TestRecords:
    """Tests for ParcelRecord and AgentRecord."""

    def test_parcel_cell_truncates(self) -> None:
        parcel = ParcelRecord(id="p1", x=2.9, y=0.4, reward=5)
        assert parcel.cell == Position(x=2, y=0)

    def test_parcel_carried(self) -> None:
        assert ParcelRecord(id="p1", x=0, y=0, carried_by="a1").is_carried
        assert not ParcelRecord(id="p1", x=0, y=0).is_carried

    def test_parcel_defaults(self) -> None:
        parcel = ParcelRecord(id="p1", x=0, y=0)
        assert parcel.reward == 0.0
        assert parcel.carried_by is None

    def test_parcel_rejects_negative_reward(self) -> None:
        with pytest.raises(ValidationError):
            ParcelRecord(id="p1", x=0, y=0, reward=-1)

    def test_parcel_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            ParcelRecord(id="", x=0, y=0)

    def test_agent_cell(self) -> None:
        agent = AgentRecord(id="a1", x=3.5, y=1.0, name="rival")
        assert agent.cell == Position(x=3, y=1)
