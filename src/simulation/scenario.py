"""YAML scenario loading for the turn simulator.

Example scenario::

    map:
      - "....D"
      - ".##.."
    agent: {id: courier, x: 0, y: 0}
    agents:
      - {id: rival, x: 3, y: 1}
    parcels:
      - {id: p1, x: 0, y: 0, reward: 20, carried_by: courier}
      - {id: p2, x: 1, y: 0, reward: 50}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from src.models.world import AgentRecord, ParcelRecord, Position
from src.simulation.world import GridWorld
from src.world.grid import GridMap, MapError


class ScenarioError(ValueError):
    """Raised when a scenario file is missing fields or inconsistent."""


class ScenarioAgent(BaseModel):
    """The controlled agent's identity and start cell."""

    id: str = Field(..., min_length=1)
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)


class Scenario(BaseModel):
    """Validated scenario document."""

    name: str = Field(default="scenario")
    map: list[str] = Field(..., min_length=1)
    agent: ScenarioAgent
    agents: list[AgentRecord] = Field(default_factory=list)
    parcels: list[ParcelRecord] = Field(default_factory=list)


def build_world(data: dict[str, Any]) -> GridWorld:
    """Build a GridWorld from an already-parsed scenario mapping."""
    try:
        scenario = Scenario.model_validate(data)
        grid = GridMap.from_rows(scenario.map)
    except (ValidationError, MapError) as exc:
        raise ScenarioError(f"Invalid scenario: {exc}") from exc

    start = Position(x=scenario.agent.x, y=scenario.agent.y)
    for parcel in scenario.parcels:
        if not grid.in_bounds(parcel.cell.x, parcel.cell.y):
            raise ScenarioError(f"Parcel {parcel.id} is outside the map")
        if parcel.carried_by == scenario.agent.id and parcel.cell != start:
            raise ScenarioError(f"Carried parcel {parcel.id} must start on the agent's cell")

    try:
        return GridWorld(
            grid=grid,
            agent_id=scenario.agent.id,
            start=start,
            agents=scenario.agents,
            parcels=scenario.parcels,
        )
    except ValueError as exc:
        raise ScenarioError(str(exc)) from exc


def load_scenario(path: str | Path) -> GridWorld:
    """Load a scenario YAML file into a GridWorld.

    Raises:
        FileNotFoundError: If the file does not exist.
        ScenarioError: If the content is not a valid scenario.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ScenarioError(f"Scenario must be a mapping: {path}")
    return build_world(data)
