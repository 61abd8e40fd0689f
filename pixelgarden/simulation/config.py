"""Config — load simulation parameters from YAML files.

Tunable constants (grid size, cycle speed, season length, starting
resource levels, cleanup timer) live in YAML and are parsed into a
typed dataclass here.  Plant and season tables stay in code because
they define the species themselves rather than the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        grid_size: Number of rows and columns in the garden.
        cycle_speed: Day/night cycle advance per tick (cycle spans 0-100).
        season_length: Ticks before the season advances.
        initial_moisture: Starting soil moisture in every cell.
        initial_sunlight: Starting sunlight in every cell.
        raindrop_count: Raindrops spawned when rain is switched on.
        dead_plant_lifetime: Ticks a dead plant stays in its cell before
            being cleared; ``None`` keeps dead plants forever.
    """

    seed: int = 42
    grid_size: int = 50
    cycle_speed: float = 0.2
    season_length: int = 1000
    initial_moisture: float = 50.0
    initial_sunlight: float = 70.0
    raindrop_count: int = 50
    dead_plant_lifetime: int | None = 200

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            grid_size=data.get("grid_size", cls.grid_size),
            cycle_speed=data.get("cycle_speed", cls.cycle_speed),
            season_length=data.get("season_length", cls.season_length),
            initial_moisture=data.get("initial_moisture", cls.initial_moisture),
            initial_sunlight=data.get("initial_sunlight", cls.initial_sunlight),
            raindrop_count=data.get("raindrop_count", cls.raindrop_count),
            dead_plant_lifetime=data.get(
                "dead_plant_lifetime",
                cls.dead_plant_lifetime,
            ),
        )
