"""Environment — weather, day/night, seasons, and soil resources.

Updated first in each simulation tick so that plants react to the
current conditions.  Owns two per-cell NumPy fields:

- ``moisture``: raised by rain, lowered by evaporation and plant
  consumption (see ``moisture.py``).
- ``sunlight``: recomputed every tick from the day/night position, the
  season, and shadows cast by mature trees.

Raindrops and clouds are lightweight particles; only a raindrop's
landing has a simulation effect (a moisture deposit).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pixelgarden.plants.types import PlantType, Stage
from pixelgarden.world import moisture as soil
from pixelgarden.world.seasons import Season, season_modifier

if TYPE_CHECKING:
    from numpy.random import Generator

    from pixelgarden.world.garden import Garden

logger = logging.getLogger(__name__)

MAX_SUNLIGHT = 100.0
SHADOW_FACTOR = 0.7
MAX_CLOUDS = 6
MIN_CLOUDS = 2


@dataclass
class Raindrop:
    """A falling raindrop, in grid units."""

    x: float
    y: float
    speed: float
    length: float


@dataclass
class Cloud:
    """A drifting cloud, in grid units.  Purely visual."""

    x: float
    y: float
    width: float
    height: float
    speed: float
    opacity: float


@dataclass(frozen=True)
class EnvironmentStats:
    """Grid-wide resource averages."""

    average_moisture: float
    average_sunlight: float


def sunlight_description(value: float) -> str:
    """Describe a sunlight level in words."""
    if value > 80:
        return "Strong"
    if value > 60:
        return "Moderate"
    if value > 40:
        return "Mild"
    if value > 20:
        return "Weak"
    return "Very Low"


def shadow_mask(trees: NDArray[np.bool_], sun_direction: int) -> NDArray[np.bool_]:
    """Return which cells lie in the shadow of a shade-casting plant.

    A cell ``(x, y)`` is shadowed if any row ``sy < y`` holds a caster at
    column ``x + ((y - sy) // 2) * sun_direction``.

    Args:
        trees: Boolean grid of shade casters indexed ``[y, x]``.
        sun_direction: -1 before noon, +1 after.

    Returns:
        Boolean grid of shadowed cells.
    """
    height, width = trees.shape
    mask = np.zeros_like(trees, dtype=bool)
    for d in range(1, height):
        off = (d // 2) * sun_direction
        if abs(off) >= width:
            break
        src = trees[: height - d]
        if off >= 0:
            mask[d:, : width - off] |= src[:, off:]
        else:
            mask[d:, -off:] |= src[:, : width + off]
    return mask


@dataclass
class Environment:
    """Global environmental state that changes each tick.

    Attributes:
        size: Grid side length (must match the Garden).
        cycle_speed: Day/night cycle advance per tick.
        season_length: Ticks per season.
        raindrop_count: Raindrops spawned when rain starts.
        initial_moisture: Starting soil moisture for every cell.
        initial_sunlight: Starting sunlight for every cell.
        rain: Whether it is raining.
        sunshine: Whether the sun is out.
        season: Current season.
        season_day: Ticks elapsed in the current season.
        day_night_cycle: 0 = dawn, 50 = noon, 100 = dusk.
        day_night_direction: +1 toward dusk, -1 back toward dawn.
        moisture: Soil moisture per cell (0-100).
        sunlight: Sunlight per cell (0-100).
        raindrops: Falling raindrops.
        clouds: Drifting clouds.
    """

    size: int
    cycle_speed: float = 0.2
    season_length: int = 1000
    raindrop_count: int = 50
    initial_moisture: float = 50.0
    initial_sunlight: float = 70.0
    rain: bool = False
    sunshine: bool = True
    season: Season = Season.SPRING
    season_day: int = 0
    day_night_cycle: float = 0.0
    day_night_direction: int = 1
    moisture: NDArray[np.float64] = field(init=False, repr=False)
    sunlight: NDArray[np.float64] = field(init=False, repr=False)
    raindrops: list[Raindrop] = field(default_factory=list, repr=False)
    clouds: list[Cloud] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Fill the resource fields with their starting levels."""
        shape = (self.size, self.size)
        self.moisture = np.full(shape, self.initial_moisture, dtype=np.float64)
        self.sunlight = np.full(shape, self.initial_sunlight, dtype=np.float64)

    # -- Controls --

    def toggle_rain(self, rng: Generator) -> bool:
        """Start or stop rain; returns the new state."""
        self.rain = not self.rain
        if self.rain:
            for _ in range(self.raindrop_count):
                self._add_raindrop(rng)
        else:
            self.raindrops.clear()
        return self.rain

    def toggle_sunshine(self) -> bool:
        """Turn sunshine on or off; returns the new state."""
        self.sunshine = not self.sunshine
        return self.sunshine

    def set_season(self, season: Season) -> None:
        """Jump straight to ``season`` without resetting the season clock."""
        self.season = season

    def advance_season(self) -> Season:
        """Move to the next season and restart the season clock."""
        self.season = self.season.next()
        self.season_day = 0
        logger.info("season changed to %s", self.season.value)
        return self.season

    # -- Tick --

    def update(self, garden: Garden, rng: Generator) -> None:
        """Advance the environment by one tick.

        Order: rain, clouds, day/night and sunlight, season clock, soil
        moisture.

        Args:
            garden: The plant grid (for shadows and water consumption).
            rng: Seeded random generator.
        """
        self.update_rain(rng)
        self.update_clouds(rng)
        self.update_day_night(garden)
        self.update_season()
        soil.update_soil(
            self.moisture,
            garden,
            season_modifier(self.season).evaporation,
        )

    def update_rain(self, rng: Generator) -> None:
        """Move raindrops; those that land water the bottom row."""
        falling: list[Raindrop] = []
        landed = 0
        for drop in self.raindrops:
            drop.y += drop.speed
            if drop.y > self.size:
                self.increase_moisture(math.floor(drop.x), self.size - 1)
                landed += 1
            else:
                falling.append(drop)
        self.raindrops = falling
        if self.rain:
            for _ in range(landed):
                self._add_raindrop(rng)

    def update_clouds(self, rng: Generator) -> None:
        """Drift clouds across the sky, wrapping at the edge."""
        for i, cloud in enumerate(self.clouds):
            cloud.x += cloud.speed
            if cloud.x > self.size + cloud.width / 2:
                fresh = self._new_cloud(rng, x=-cloud.width / 2)
                fresh.speed = cloud.speed
                self.clouds[i] = fresh

        if rng.random() < 0.002 and len(self.clouds) < MAX_CLOUDS:
            self.clouds.append(self._new_cloud(rng, x=-20.0))
        elif rng.random() < 0.001 and len(self.clouds) > MIN_CLOUDS:
            self.clouds.pop()

    def init_clouds(self, rng: Generator) -> None:
        """Scatter a handful of clouds across the sky."""
        count = int(rng.integers(MIN_CLOUDS, 5, endpoint=True))
        self.clouds = [
            self._new_cloud(rng, x=float(rng.uniform(0, self.size)))
            for _ in range(count)
        ]

    @property
    def sunlight_intensity(self) -> float:
        """Sky brightness: 100 at noon, 50 at dawn and dusk."""
        if self.day_night_cycle <= 50:
            normalised = self.day_night_cycle / 50
        else:
            normalised = (100 - self.day_night_cycle) / 50
        return 50 + normalised * 50

    @property
    def sun_direction(self) -> int:
        """-1 while the sun rises (east), +1 while it sets (west)."""
        return -1 if self.day_night_cycle <= 50 else 1

    def update_day_night(self, garden: Garden) -> None:
        """Advance the day/night cycle and recompute the sunlight field."""
        cycle = self.day_night_cycle + self.cycle_speed * self.day_night_direction
        self.day_night_cycle = min(100.0, max(0.0, cycle))

        if self.day_night_cycle >= 100:
            self.day_night_direction = -1
        elif self.day_night_cycle <= 0:
            self.day_night_direction = 1

        self.compute_sunlight(garden)

    def compute_sunlight(self, garden: Garden) -> None:
        """Fill the sunlight field from intensity, season and shadows."""
        level = self.sunlight_intensity * season_modifier(self.season).sunlight
        self.sunlight.fill(min(MAX_SUNLIGHT, level))

        trees = np.zeros((self.size, self.size), dtype=bool)
        for plant in garden.plants():
            if plant.ptype is PlantType.TREE and plant.stage is Stage.MATURE:
                trees[plant.y, plant.x] = True
        if trees.any():
            self.sunlight[shadow_mask(trees, self.sun_direction)] *= SHADOW_FACTOR

    def update_season(self) -> None:
        """Tick the season clock, rolling over every ``season_length``."""
        self.season_day += 1
        if self.season_day >= self.season_length:
            self.advance_season()

    # -- Queries --

    def increase_moisture(self, x: int, y: int) -> None:
        """Water a single cell as a landed raindrop would."""
        soil.deposit(self.moisture, x, y)

    def average_stats(self) -> EnvironmentStats:
        """Return mean moisture and sunlight over all cells."""
        return EnvironmentStats(
            average_moisture=float(self.moisture.mean()),
            average_sunlight=float(self.sunlight.mean()),
        )

    # -- Particles --

    def _add_raindrop(self, rng: Generator) -> None:
        self.raindrops.append(
            Raindrop(
                x=float(rng.uniform(0, self.size)),
                y=float(rng.uniform(-5.0, 0.0)),
                speed=float(rng.uniform(0.5, 1.5)),
                length=float(rng.uniform(0.5, 1.5)),
            )
        )

    def _new_cloud(self, rng: Generator, *, x: float) -> Cloud:
        return Cloud(
            x=x,
            y=float(rng.uniform(0, self.size / 3)),
            width=float(rng.uniform(10, 20)),
            height=float(rng.uniform(3, 6)),
            speed=float(rng.uniform(0.01, 0.03)),
            opacity=float(rng.uniform(0.3, 0.7)),
        )
