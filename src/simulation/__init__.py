"""Turn simulator used to exercise the delivery strategy end to end."""

from src.simulation.scenario import ScenarioError, build_world, load_scenario
from src.simulation.world import GridWorld

__all__ = [
    "GridWorld",
    "ScenarioError",
    "build_world",
    "load_scenario",
]
