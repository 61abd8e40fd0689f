"""Plant — per-cell life-cycle state machine.

Every tick a living plant ages, advances its stage, trades water and
sunlight with the weather, drifts its health toward a target derived
from how well its resources match its needs.  Once mature and healthy
it occasionally seeds a mutated offspring into a free neighbouring cell.

Health model:

- Each resource yields a *factor* ``min(level / need, 2)``.
- A factor of exactly 1.0 scores 100; deficit and surplus are penalised
  symmetrically at 50 points per unit of deviation.
- The target health is the mean of the water and sunlight scores, and
  actual health moves ``HEALTH_SMOOTHING`` of the way toward it.
- Falling below ``DEATH_HEALTH`` is terminal.
"""

from __future__ import annotations

import colorsys
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pixelgarden.plants.mutations import Mutations, generate_mutations
from pixelgarden.plants.types import PlantType, Stage, profile_for
from pixelgarden.world.seasons import season_modifier

if TYPE_CHECKING:
    from numpy.random import Generator

    from pixelgarden.world.environment import Environment
    from pixelgarden.world.garden import Garden

logger = logging.getLogger(__name__)

# -- Constants ---------------------------------------------------------------

GROWTH_RATE_RANGE = (0.8, 1.2)
MAX_LEVEL = 100.0
RAIN_WATER_GAIN = 2.0
DRY_WATER_LOSS = 0.5
SUN_GAIN = 2.0
SHADE_LOSS = 1.0
MAX_FACTOR = 2.0
HEALTH_SMOOTHING = 0.1
DEATH_HEALTH = 10.0
GROW_HEALTH = 30.0
REPRODUCTION_COOLDOWN = 100
REPRODUCTION_CHANCE = 0.05
HUE_SHIFT_DEGREES = 30.0


def resource_score(level: float, need: float) -> float:
    """Score how well a resource level matches a need (50-100)."""
    factor = min(level / need, MAX_FACTOR)
    return 100.0 - abs(factor - 1.0) * 50.0


@dataclass
class Plant:
    """A single plant occupying one grid cell.

    ``growth_rate``, ``water_need`` and ``sunlight_need`` are resolved
    once by :meth:`create` from the type defaults and the plant's
    mutations, and are not changed afterwards.

    Attributes:
        ptype: Species, fixed at creation.
        x: Column of the owning cell.
        y: Row of the owning cell.
        growth_rate: Multiplier applied to the type's stage thresholds.
        water_need: Water level at which the plant is healthiest.
        sunlight_need: Sunlight level at which the plant is healthiest.
        accent_hue: Base hue (degrees) of the type's accent colour.
        generation: 0 for seeded plants, parent + 1 for offspring.
        mutations: Heritable trait overrides.
        age: Ticks lived.
        stage: Current life-cycle phase.
        health: Vitality (0-100).
        water: Local water level (0-100).
        sunlight: Local sunlight level (0-100).
        is_alive: False once the plant has died; never reset.
        last_reproduced: Age at the last successful reproduction.
        dead_ticks: Ticks spent dead, used by the cleanup timer.
    """

    ptype: PlantType
    x: int
    y: int
    growth_rate: float = 1.0
    water_need: float = 50.0
    sunlight_need: float = 50.0
    accent_hue: float = 0.0
    generation: int = 0
    mutations: Mutations = field(default_factory=Mutations)
    age: int = 0
    stage: Stage = Stage.SEED
    health: float = 100.0
    water: float = 50.0
    sunlight: float = 50.0
    is_alive: bool = True
    last_reproduced: int = 0
    dead_ticks: int = 0

    @classmethod
    def create(
        cls,
        ptype: PlantType,
        x: int,
        y: int,
        rng: Generator,
        *,
        generation: int = 0,
        mutations: Mutations | None = None,
    ) -> Plant:
        """Create a seed-stage plant with its derived traits resolved.

        Traits without an override take the type default; the growth
        rate has no type default and is drawn from ``GROWTH_RATE_RANGE``.

        Args:
            ptype: Species of the new plant.
            x: Column to occupy.
            y: Row to occupy.
            rng: Seeded random generator.
            generation: Lineage depth.
            mutations: Trait overrides (empty for root plants).

        Returns:
            A new Plant instance.
        """
        mutations = mutations or Mutations()
        profile = profile_for(ptype)

        if mutations.growth_rate is not None:
            growth_rate = mutations.growth_rate
        else:
            growth_rate = float(rng.uniform(*GROWTH_RATE_RANGE))

        water_need = (
            mutations.water_need
            if mutations.water_need is not None
            else profile.water_need
        )
        sunlight_need = (
            mutations.sunlight_need
            if mutations.sunlight_need is not None
            else profile.sunlight_need
        )
        return cls(
            ptype=ptype,
            x=x,
            y=y,
            growth_rate=growth_rate,
            water_need=water_need,
            sunlight_need=sunlight_need,
            accent_hue=float(rng.uniform(*profile.accent_hue)),
            generation=generation,
            mutations=mutations,
        )

    @property
    def can_grow(self) -> bool:
        """Return True if the plant is healthy enough to reproduce."""
        return self.is_alive and self.health > GROW_HEALTH

    def update(
        self,
        environment: Environment,
        garden: Garden,
        rng: Generator,
    ) -> Plant | None:
        """Advance this plant by one tick.

        Args:
            environment: Current weather and season.
            garden: The grid, used to place offspring.
            rng: Seeded random generator.

        Returns:
            The offspring placed this tick, or None.
        """
        if not self.is_alive:
            return None

        self.age += 1
        self.update_stage()
        self.update_resources(environment)
        self.update_health()

        if self.can_grow:
            return self._grow(garden, rng)
        return None

    def stage_for_age(self, age: int) -> Stage:
        """Return the stage implied by ``age`` and this plant's growth rate."""
        thresholds = profile_for(self.ptype).stage_thresholds
        for stage, threshold in thresholds:
            if age <= threshold * self.growth_rate:
                return stage
        return thresholds[-1][0]

    def update_stage(self) -> None:
        """Recompute the stage from age; stages never regress."""
        derived = self.stage_for_age(self.age)
        if derived.order > self.stage.order:
            self.stage = derived

    def update_resources(self, environment: Environment) -> None:
        """Gain or lose water and sunlight according to the weather."""
        modifiers = season_modifier(environment.season)

        if environment.rain:
            self.water = min(MAX_LEVEL, self.water + RAIN_WATER_GAIN)
        else:
            self.water = max(0.0, self.water - DRY_WATER_LOSS * modifiers.evaporation)

        if environment.sunshine:
            self.sunlight = min(
                MAX_LEVEL, self.sunlight + SUN_GAIN * modifiers.sunlight
            )
        else:
            self.sunlight = max(0.0, self.sunlight - SHADE_LOSS)

    def target_health(self) -> float:
        """Return the health the plant is currently converging toward."""
        water_health = resource_score(self.water, self.water_need)
        sunlight_health = resource_score(self.sunlight, self.sunlight_need)
        return (water_health + sunlight_health) / 2.0

    def update_health(self) -> None:
        """Smooth health toward its target and apply the death check."""
        self.health += (self.target_health() - self.health) * HEALTH_SMOOTHING

        if self.health < DEATH_HEALTH:
            self.is_alive = False
            logger.debug(
                "%s at (%d, %d) died at age %d", self.ptype.value, self.x, self.y, self.age
            )

    def _grow(self, garden: Garden, rng: Generator) -> Plant | None:
        """Attempt reproduction if mature, off cooldown and lucky."""
        if (
            self.stage is Stage.MATURE
            and self.age - self.last_reproduced > REPRODUCTION_COOLDOWN
            and rng.random() < REPRODUCTION_CHANCE * (self.health / 100.0)
        ):
            return self.try_reproduce(garden, rng)
        return None

    def try_reproduce(self, garden: Garden, rng: Generator) -> Plant | None:
        """Seed a mutated offspring into a random free neighbouring cell.

        The garden's in-bounds neighbours (diagonals included) are visited
        in a shuffled order and the first empty cell wins.  If every
        neighbour is taken the plant's state is left untouched.

        Args:
            garden: The grid to place the offspring in.
            rng: Seeded random generator.

        Returns:
            The offspring, or None if no neighbour was free.
        """
        candidates = garden.neighbours(self.x, self.y)
        for i in rng.permutation(len(candidates)):
            nx, ny = candidates[i]
            if not garden.is_empty(nx, ny):
                continue

            child = Plant.create(
                self.ptype,
                nx,
                ny,
                rng,
                generation=self.generation + 1,
                mutations=generate_mutations(self, rng),
            )
            garden.place(child)
            self.last_reproduced = self.age
            return child
        return None

    # -- Presentation helpers --

    def colours(self) -> dict[str, tuple[int, int, int]]:
        """Return the plant's palette, with the accent hue mutated."""
        profile = profile_for(self.ptype)
        shift = (self.mutations.colour_shift or 0.0) * HUE_SHIFT_DEGREES
        hue = (self.accent_hue + shift) % 360.0
        r, g, b = colorsys.hls_to_rgb(
            hue / 360.0,
            profile.accent_lightness / 100.0,
            profile.accent_saturation / 100.0,
        )
        palette = dict(profile.colours)
        palette[profile.accent] = (round(r * 255), round(g * 255), round(b * 255))
        return palette

    def tooltip_info(self) -> dict[str, Any]:
        """Return a human-readable summary for hover tooltips."""
        return {
            "type": self.ptype.value.capitalize(),
            "age": self.age,
            "stage": self.stage.value.capitalize(),
            "health": f"{round(self.health)}%",
            "water": f"{round(self.water)}%",
            "sunlight": f"{round(self.sunlight)}%",
            "generation": self.generation,
        }
