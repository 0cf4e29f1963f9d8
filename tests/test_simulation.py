"""Tests for the turn simulator and scenario loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from src.models.actions import Action, Direction
from src.models.world import AgentRecord, ParcelRecord, Position
from src.simulation.scenario import ScenarioError, build_world, load_scenario
from src.simulation.world import GridWorld
from src.world.grid import GridMap

SCENARIOS = Path(__file__).parent.parent / "configs" / "scenarios"


def _world(
    rows: list[str] | None = None,
    *,
    start: tuple[int, int] = (0, 0),
    agents: list[AgentRecord] | None = None,
    parcels: list[ParcelRecord] | None = None,
) -> GridWorld:
    return GridWorld(
        GridMap.from_rows(rows or ["...D"]),
        agent_id="me",
        start=Position(x=start[0], y=start[1]),
        agents=agents or [],
        parcels=parcels or [],
    )


class TestGridWorld:
    """Tests for applying actions to the world."""

    def test_rejects_unwalkable_start(self) -> None:
        with pytest.raises(ValueError):
            _world([".#"], start=(1, 0))

    def test_controlled_agent_excluded_from_agents(self) -> None:
        world = _world(agents=[AgentRecord(id="me", x=0, y=0), AgentRecord(id="rival", x=2, y=0)])
        assert [a.id for a in world.agents] == ["rival"]

    def test_wait_always_succeeds(self) -> None:
        assert _world().apply("me", Action.wait())

    def test_unknown_agent_raises(self) -> None:
        with pytest.raises(KeyError):
            _world().apply("rival", Action.wait())

    def test_move(self) -> None:
        world = _world()
        assert world.apply("me", Action.move(Direction.RIGHT))
        assert world.position == Position(x=1, y=0)

    def test_move_into_edge_or_wall_fails(self) -> None:
        world = _world([".#"])
        assert not world.apply("me", Action.move(Direction.LEFT))
        assert not world.apply("me", Action.move(Direction.RIGHT))
        assert world.position == Position(x=0, y=0)

    def test_move_into_agent_fails(self) -> None:
        world = _world(agents=[AgentRecord(id="rival", x=1, y=0)])
        assert not world.apply("me", Action.move(Direction.RIGHT))

        world.move_agent("rival", 2, 0)
        assert world.apply("me", Action.move(Direction.RIGHT))

    def test_move_unknown_agent_raises(self) -> None:
        with pytest.raises(KeyError):
            _world().move_agent("ghost", 1, 0)

    def test_remove_agent(self) -> None:
        world = _world(agents=[AgentRecord(id="rival", x=1, y=0)])
        world.remove_agent("rival")
        assert world.agents == []
        world.remove_agent("rival")

    def test_carried_parcels_move_with_agent(self) -> None:
        world = _world(parcels=[ParcelRecord(id="p1", x=0, y=0, carried_by="me")])
        world.apply("me", Action.move(Direction.RIGHT))
        assert world.carried_by("me")[0].cell == Position(x=1, y=0)

    def test_pickup_takes_all_parcels_on_cell(self) -> None:
        world = _world(
            parcels=[
                ParcelRecord(id="p1", x=0, y=0, reward=5),
                ParcelRecord(id="p2", x=0.5, y=0, reward=7),
                ParcelRecord(id="p3", x=1, y=0, reward=9),
            ]
        )

        assert world.apply("me", Action.pickup("p1"))

        assert sorted(p.id for p in world.carried_by("me")) == ["p1", "p2"]

    def test_pickup_missing_target_fails(self) -> None:
        world = _world(parcels=[ParcelRecord(id="p3", x=1, y=0)])
        assert not world.apply("me", Action.pickup("p3"))
        assert not world.apply("me", Action.pickup("nope"))

    def test_putdown_on_delivery_tile_scores(self, caplog: pytest.LogCaptureFixture) -> None:
        world = _world(
            start=(3, 0),
            parcels=[
                ParcelRecord(id="p1", x=3, y=0, reward=20, carried_by="me"),
                ParcelRecord(id="p2", x=3, y=0, reward=5, carried_by="me"),
            ],
        )

        with caplog.at_level(logging.INFO, logger="src.simulation.world"):
            assert world.apply("me", Action.putdown())

        assert world.score == 25.0
        assert world.delivered_count == 2
        assert world.parcels == []
        assert any("[WORLD] Delivered 2" in r.getMessage() for r in caplog.records)

    def test_putdown_elsewhere_drops_parcels(self) -> None:
        world = _world(parcels=[ParcelRecord(id="p1", x=0, y=0, reward=20, carried_by="me")])

        assert world.apply("me", Action.putdown())

        assert world.carried_by("me") == []
        assert world.parcels[0].cell == Position(x=0, y=0)
        assert world.score == 0.0

    def test_putdown_with_nothing_fails(self) -> None:
        assert not _world().apply("me", Action.putdown())


class TestScenarioLoading:
    """Tests for build_world and load_scenario."""

    def _data(self, **overrides: object) -> dict[str, object]:
        data: dict[str, object] = {
            "map": ["..D"],
            "agent": {"id": "me", "x": 0, "y": 0},
            "parcels": [{"id": "p1", "x": 0, "y": 0, "reward": 10, "carried_by": "me"}],
        }
        data.update(overrides)
        return data

    def test_build_world(self) -> None:
        world = build_world(self._data(agents=[{"id": "rival", "x": 1, "y": 0}]))

        assert world.agent_id == "me"
        assert world.position == Position(x=0, y=0)
        assert [a.id for a in world.agents] == ["rival"]
        assert [p.id for p in world.carried_by("me")] == ["p1"]

    def test_missing_agent_rejected(self) -> None:
        data = self._data()
        del data["agent"]
        with pytest.raises(ScenarioError):
            build_world(data)

    def test_bad_map_rejected(self) -> None:
        with pytest.raises(ScenarioError):
            build_world(self._data(map=["..", "."]))

    def test_parcel_outside_map_rejected(self) -> None:
        with pytest.raises(ScenarioError, match="outside"):
            build_world(self._data(parcels=[{"id": "p9", "x": 7, "y": 0}]))

    def test_carried_parcel_must_start_with_agent(self) -> None:
        parcels = [{"id": "p1", "x": 1, "y": 0, "carried_by": "me"}]
        with pytest.raises(ScenarioError, match="agent's cell"):
            build_world(self._data(parcels=parcels))

    def test_unwalkable_start_rejected(self) -> None:
        with pytest.raises(ScenarioError):
            build_world(self._data(map=["#.D"], parcels=[]))

    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "scenario.yaml"
        path.write_text(yaml.safe_dump(self._data()))

        world = load_scenario(path)

        assert world.grid.width == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_scenario(tmp_path / "missing.yaml")

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "scenario.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ScenarioError):
            load_scenario(path)

    @pytest.mark.parametrize("name", ["corridor.yaml", "detour.yaml", "blocked.yaml"])
    def test_bundled_scenarios_load(self, name: str) -> None:
        world = load_scenario(SCENARIOS / name)
        assert world.carried_by(world.agent_id)
