"""SimulationEngine — the main tick loop.

Owns all top-level simulation state and advances it in the canonical
tick order:

1. Update environment (rain, clouds, day/night and sunlight, seasons,
   soil moisture)
2. Visit every cell in row-major order; for each occupied cell:
   a. update the plant (aging, stage, resources, health, reproduction)
   b. pull soil moisture and sunlight into the plant
   c. run the dead-plant cleanup check

The engine is single-threaded: a whole tick completes before the next
begins and only the engine writes to the garden.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from pixelgarden.plants.plant import MAX_LEVEL, Plant
from pixelgarden.plants.types import PlantType
from pixelgarden.simulation.config import SimulationConfig
from pixelgarden.simulation.snapshot import GardenDataError, PlantRecord
from pixelgarden.world.environment import Environment, EnvironmentStats
from pixelgarden.world.garden import Garden
from pixelgarden.world.seasons import Season

logger = logging.getLogger(__name__)

SOIL_UPTAKE = 0.05


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        garden: The plant grid.
        environment: Weather, seasons and resource fields.
        rng: Master seeded random generator.
        tick: Current tick count.
    """

    config: SimulationConfig
    garden: Garden = field(init=False)
    environment: Environment = field(init=False)
    rng: Generator = field(init=False)
    tick: int = 0

    def __post_init__(self) -> None:
        """Build garden, environment, and RNG from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.garden = Garden(size=self.config.grid_size)
        self.environment = Environment(
            size=self.config.grid_size,
            cycle_speed=self.config.cycle_speed,
            season_length=self.config.season_length,
            raindrop_count=self.config.raindrop_count,
            initial_moisture=self.config.initial_moisture,
            initial_sunlight=self.config.initial_sunlight,
        )
        self.environment.init_clouds(self.rng)

    # -- Seeding --

    def seed(self, x: int, y: int, ptype: PlantType) -> bool:
        """Plant a seed-stage plant of ``ptype`` at ``(x, y)``.

        Returns:
            False if the cell is out of bounds or already occupied.
        """
        if not self.garden.is_empty(x, y):
            return False
        self.garden.place(Plant.create(ptype, x, y, self.rng))
        logger.debug("seeded %s at (%d, %d)", ptype.value, x, y)
        return True

    # -- Tick loop --

    def step(self) -> None:
        """Advance the simulation by one tick."""
        self.environment.update(self.garden, self.rng)

        size = self.garden.size
        for y in range(size):
            for x in range(size):
                plant = self.garden.cells[y][x]
                if plant is None:
                    continue

                child = plant.update(self.environment, self.garden, self.rng)
                if child is not None:
                    logger.debug(
                        "%s at (%d, %d) produced generation %d at (%d, %d)",
                        plant.ptype.value,
                        x,
                        y,
                        child.generation,
                        child.x,
                        child.y,
                    )
                self._pull_resources(plant)
                self._clean_dead_plant(plant)

        self.tick += 1

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    def _pull_resources(self, plant: Plant) -> None:
        """Top up a living plant's water and sunlight from its cell."""
        if not plant.is_alive:
            return
        env = self.environment
        plant.water = min(
            MAX_LEVEL,
            plant.water + float(env.moisture[plant.y, plant.x]) * SOIL_UPTAKE,
        )
        plant.sunlight = min(MAX_LEVEL, float(env.sunlight[plant.y, plant.x]))

    def _clean_dead_plant(self, plant: Plant) -> None:
        """Clear a dead plant once it has lingered past its lifetime."""
        if plant.is_alive:
            return
        plant.dead_ticks += 1
        lifetime = self.config.dead_plant_lifetime
        if lifetime is not None and plant.dead_ticks > lifetime:
            self.garden.remove(plant.x, plant.y)
            logger.debug(
                "cleared dead %s at (%d, %d)", plant.ptype.value, plant.x, plant.y
            )

    # -- Snapshot / restore --

    def snapshot(self) -> list[PlantRecord]:
        """Return one record per occupied cell, in row-major order."""
        return [PlantRecord.from_plant(plant) for plant in self.garden.plants()]

    def restore(self, records: Iterable[PlantRecord]) -> None:
        """Replace every plant with those described by ``records``.

        Age, stage, health and liveness are copied verbatim rather than
        derived.  Records are validated before the garden is touched.

        Raises:
            GardenDataError: If a record is out of bounds or two records
                share a cell.  The garden is left unchanged.
        """
        records = list(records)
        seen: set[tuple[int, int]] = set()
        for record in records:
            pos = (record.x, record.y)
            if not self.garden.in_bounds(*pos):
                msg = f"plant at {pos} out of bounds for size {self.garden.size}"
                raise GardenDataError(msg)
            if pos in seen:
                msg = f"more than one plant at {pos}"
                raise GardenDataError(msg)
            seen.add(pos)

        self.garden.clear()
        for record in records:
            plant = Plant.create(
                record.ptype,
                record.x,
                record.y,
                self.rng,
                generation=record.generation,
                mutations=record.mutations,
            )
            plant.age = record.age
            plant.stage = record.stage
            plant.health = record.health
            plant.is_alive = record.is_alive
            self.garden.place(plant)
        logger.info("restored %d plants", len(records))

    # -- Queries and controls --

    def environment_stats(self) -> EnvironmentStats:
        """Return grid-wide average moisture and sunlight."""
        return self.environment.average_stats()

    def plant_count(self) -> int:
        """Return the number of living plants."""
        return self.garden.living_count()

    def clear(self) -> None:
        """Remove every plant from the garden."""
        self.garden.clear()

    def set_season(self, season: Season) -> None:
        """Force the current season."""
        self.environment.set_season(season)

    def advance_season(self) -> Season:
        """Skip to the next season."""
        return self.environment.advance_season()

    def toggle_rain(self) -> bool:
        """Toggle rain; returns whether it is now raining."""
        return self.environment.toggle_rain(self.rng)

    def toggle_sunshine(self) -> bool:
        """Toggle sunshine; returns whether the sun is now out."""
        return self.environment.toggle_sunshine()
