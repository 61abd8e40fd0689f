"""Tests for pixelgarden.simulation — engine, snapshots and config loading."""

from pathlib import Path

import numpy as np
import pytest

from pixelgarden.plants.mutations import Mutations
from pixelgarden.plants.types import PlantType, Stage
from pixelgarden.simulation.config import SimulationConfig
from pixelgarden.simulation.engine import SimulationEngine
from pixelgarden.simulation.snapshot import GardenDataError, PlantRecord
from pixelgarden.world.seasons import Season


class TestSimulationConfig:
    """Tests for YAML config loading."""

    def test_defaults(self) -> None:
        cfg = SimulationConfig()
        assert cfg.seed == 42
        assert cfg.grid_size == 50
        assert cfg.season_length == 1000
        assert cfg.dead_plant_lifetime == 200

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text("seed: 99\ngrid_size: 16\ndead_plant_lifetime: null\n")
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.grid_size == 16
        assert cfg.dead_plant_lifetime is None
        assert cfg.cycle_speed == 0.2

    def test_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert SimulationConfig.from_yaml(yaml_file) == SimulationConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SimulationConfig.from_yaml(tmp_path / "nope.yaml")


class TestSimulationEngine:
    """Tests for the tick loop."""

    def test_engine_initialises(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        assert engine.tick == 0
        assert engine.garden.size == default_config.grid_size
        assert engine.environment.size == default_config.grid_size

    def test_step_advances_tick(self, small_engine: SimulationEngine) -> None:
        small_engine.step()
        assert small_engine.tick == 1
        assert small_engine.environment.season_day == 1

    def test_run_multiple_ticks(self, small_engine: SimulationEngine) -> None:
        small_engine.run(ticks=10)
        assert small_engine.tick == 10

    def test_determinism(self) -> None:
        """Same seed must produce identical state after N ticks."""
        cfg = SimulationConfig(seed=777, grid_size=8)

        def build() -> SimulationEngine:
            engine = SimulationEngine(config=cfg)
            engine.seed(1, 1, PlantType.FLOWER)
            engine.seed(5, 2, PlantType.TREE)
            engine.seed(3, 6, PlantType.GRASS)
            engine.toggle_rain()
            engine.run(ticks=300)
            return engine

        engine_a, engine_b = build(), build()
        assert engine_a.snapshot() == engine_b.snapshot()
        assert np.array_equal(engine_a.environment.moisture, engine_b.environment.moisture)
        assert np.array_equal(engine_a.environment.sunlight, engine_b.environment.sunlight)


class TestSeeding:
    """Tests for planting seeds."""

    def test_seed_empty_cell(self, small_engine: SimulationEngine) -> None:
        assert small_engine.seed(2, 3, PlantType.MUSHROOM)
        plant = small_engine.garden.plant_at(2, 3)
        assert plant is not None
        assert plant.ptype is PlantType.MUSHROOM
        assert plant.stage is Stage.SEED
        assert plant.generation == 0
        assert small_engine.plant_count() == 1

    def test_seed_occupied_fails(self, small_engine: SimulationEngine) -> None:
        small_engine.seed(2, 3, PlantType.MUSHROOM)
        first = small_engine.garden.plant_at(2, 3)
        assert not small_engine.seed(2, 3, PlantType.TREE)
        assert small_engine.garden.plant_at(2, 3) is first

    @pytest.mark.parametrize(("x", "y"), [(-1, 0), (0, -1), (8, 0), (0, 8)])
    def test_seed_out_of_bounds_fails(
        self,
        small_engine: SimulationEngine,
        x: int,
        y: int,
    ) -> None:
        assert not small_engine.seed(x, y, PlantType.FLOWER)
        assert small_engine.plant_count() == 0


class TestResourceExchange:
    """Tests for the per-tick pull of soil resources into plants."""

    def test_plant_sunlight_matches_cell(self, small_engine: SimulationEngine) -> None:
        small_engine.seed(4, 4, PlantType.GRASS)
        small_engine.step()
        plant = small_engine.garden.plant_at(4, 4)
        assert plant.sunlight == pytest.approx(
            min(100.0, small_engine.environment.sunlight[4, 4]),
        )

    def test_plant_draws_soil_water(self, small_engine: SimulationEngine) -> None:
        small_engine.seed(4, 4, PlantType.GRASS)
        small_engine.step()
        plant = small_engine.garden.plant_at(4, 4)
        soil = small_engine.environment.moisture[4, 4]
        # 50 - 0.5 (dry tick) + 5% of soil moisture
        assert plant.water == pytest.approx(49.5 + soil * 0.05)

    def test_fields_stay_in_range(self) -> None:
        engine = SimulationEngine(config=SimulationConfig(seed=3, grid_size=10))
        for i, ptype in enumerate(PlantType):
            engine.seed(2 * i + 1, 2, ptype)
        engine.set_season(Season.SUMMER)
        engine.toggle_rain()
        for _ in range(400):
            engine.step()
            env = engine.environment
            assert 0.0 <= env.moisture.min() and env.moisture.max() <= 100.0
            assert 0.0 <= env.sunlight.min() and env.sunlight.max() <= 100.0
            for plant in engine.garden.plants():
                assert 0.0 <= plant.water <= 100.0
                assert 0.0 <= plant.sunlight <= 100.0
                assert 0.0 <= plant.health <= 100.0


class TestReproductionInEngine:
    """Tests for offspring placement across full ticks."""

    def test_offspring_never_overwrite(self) -> None:
        cfg = SimulationConfig(seed=11, grid_size=6, dead_plant_lifetime=None)
        engine = SimulationEngine(config=cfg)
        records = [
            PlantRecord(ptype=PlantType.GRASS, x=x, y=y, age=200, stage=Stage.MATURE)
            for y in range(0, 6, 2)
            for x in range(0, 6, 2)
        ]
        engine.restore(records)
        originals = {(p.x, p.y): p for p in engine.garden.plants()}

        engine.run(ticks=600)

        for (x, y), plant in originals.items():
            assert engine.garden.plant_at(x, y) is plant
        offspring = [p for p in engine.garden.plants() if (p.x, p.y) not in originals]
        assert offspring
        assert all(p.generation >= 1 for p in offspring)
        assert all(p.ptype is PlantType.GRASS for p in offspring)


class TestDeadPlantCleanup:
    """Tests for the dead-plant timer."""

    def _engine_with_dead_plant(self, lifetime: int | None) -> SimulationEngine:
        cfg = SimulationConfig(seed=5, grid_size=4, dead_plant_lifetime=lifetime)
        engine = SimulationEngine(config=cfg)
        engine.restore(
            [PlantRecord(ptype=PlantType.FLOWER, x=1, y=1, age=30, is_alive=False)],
        )
        return engine

    def test_dead_plant_removed_after_lifetime(self) -> None:
        engine = self._engine_with_dead_plant(lifetime=3)
        engine.run(ticks=3)
        plant = engine.garden.plant_at(1, 1)
        assert plant is not None
        assert plant.age == 30
        engine.step()
        assert engine.garden.plant_at(1, 1) is None

    def test_dead_plants_persist_without_lifetime(self) -> None:
        engine = self._engine_with_dead_plant(lifetime=None)
        engine.run(ticks=50)
        plant = engine.garden.plant_at(1, 1)
        assert plant is not None
        assert not plant.is_alive
        assert engine.plant_count() == 0


class TestSnapshot:
    """Tests for snapshot and restore."""

    def test_round_trip(self, small_engine: SimulationEngine) -> None:
        small_engine.seed(0, 0, PlantType.TREE)
        small_engine.seed(7, 7, PlantType.FLOWER)
        small_engine.seed(3, 5, PlantType.MUSHROOM)
        small_engine.run(ticks=50)
        before = small_engine.snapshot()

        other = SimulationEngine(config=SimulationConfig(seed=1, grid_size=8))
        other.restore(before)
        after = other.snapshot()

        assert after == before
        assert [(r.x, r.y, r.ptype, r.generation) for r in after] == [
            (r.x, r.y, r.ptype, r.generation) for r in before
        ]

    def test_restore_preserves_state_verbatim(
        self,
        small_engine: SimulationEngine,
    ) -> None:
        record = PlantRecord(
            ptype=PlantType.TREE,
            x=2,
            y=2,
            age=0,
            stage=Stage.MATURE,
            health=42.0,
            generation=6,
            mutations=Mutations(water_need=44.0),
        )
        small_engine.restore([record])
        plant = small_engine.garden.plant_at(2, 2)
        assert plant.stage is Stage.MATURE
        assert plant.age == 0
        assert plant.health == 42.0
        assert plant.generation == 6
        assert plant.water_need == 44.0

    def test_restore_clears_existing(self, small_engine: SimulationEngine) -> None:
        small_engine.seed(6, 6, PlantType.GRASS)
        small_engine.restore([PlantRecord(ptype=PlantType.FLOWER, x=1, y=1)])
        assert small_engine.garden.plant_at(6, 6) is None
        assert small_engine.plant_count() == 1

    @pytest.mark.parametrize(
        "records",
        [
            [PlantRecord(ptype=PlantType.FLOWER, x=8, y=0)],
            [
                PlantRecord(ptype=PlantType.FLOWER, x=1, y=1),
                PlantRecord(ptype=PlantType.TREE, x=1, y=1),
            ],
        ],
    )
    def test_restore_rejects_bad_records(
        self,
        small_engine: SimulationEngine,
        records: list[PlantRecord],
    ) -> None:
        small_engine.seed(4, 4, PlantType.GRASS)
        with pytest.raises(GardenDataError):
            small_engine.restore(records)
        assert small_engine.garden.plant_at(4, 4) is not None

    def test_record_dict_round_trip(self) -> None:
        record = PlantRecord(
            ptype=PlantType.MUSHROOM,
            x=3,
            y=4,
            age=77,
            stage=Stage.GROWING,
            health=64.5,
            is_alive=True,
            generation=2,
            mutations=Mutations(colour_shift=0.3),
        )
        assert PlantRecord.from_dict(record.to_dict()) == record

    @pytest.mark.parametrize(
        "data",
        [
            "flower",
            {"x": 1, "y": 1},
            {"type": "cactus", "x": 1, "y": 1},
            {"type": "tree", "x": "1", "y": 1},
            {"type": "tree", "x": 1, "y": 1, "stage": "ancient"},
            {"type": "tree", "x": 1, "y": 1, "mutations": ["bad"]},
            {"type": "tree", "x": 1, "y": 1, "mutations": {"water_need": 0}},
            {"type": "tree", "x": 1, "y": 1, "health": 500},
            {"type": "tree", "x": 1, "y": 1, "health": -20},
            {"type": "tree", "x": 1, "y": 1, "health": float("nan")},
            {"type": "tree", "x": 1, "y": 1, "health": "88"},
            {"type": "tree", "x": 1, "y": 1, "health": True},
            {"type": "tree", "x": 1, "y": 1, "is_alive": "false"},
            {"type": "tree", "x": 1, "y": 1, "is_alive": 1},
        ],
    )
    def test_record_from_bad_dict(self, data: object) -> None:
        with pytest.raises(GardenDataError):
            PlantRecord.from_dict(data)


class TestControls:
    """Tests for environment controls and stats."""

    def test_toggles(self, small_engine: SimulationEngine) -> None:
        assert small_engine.toggle_rain() is True
        assert small_engine.environment.raindrops
        assert small_engine.toggle_sunshine() is False
        assert small_engine.environment.sunshine is False

    def test_set_and_advance_season(self, small_engine: SimulationEngine) -> None:
        small_engine.set_season(Season.FALL)
        assert small_engine.environment.season is Season.FALL
        assert small_engine.advance_season() is Season.WINTER

    def test_environment_stats(self, small_engine: SimulationEngine) -> None:
        stats = small_engine.environment_stats()
        assert stats.average_moisture == pytest.approx(50.0)
        assert stats.average_sunlight == pytest.approx(70.0)

    def test_clear(self, small_engine: SimulationEngine) -> None:
        small_engine.seed(1, 1, PlantType.FLOWER)
        small_engine.clear()
        assert list(small_engine.garden.plants()) == []
