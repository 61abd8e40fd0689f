"""Mutations — heritable trait overrides and offspring trait drift.

A plant's ``Mutations`` record which traits deviate from its type's
defaults.  Root-generation plants carry an empty record; offspring
inherit their parent's record and may perturb individual traits at
reproduction time.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from numpy.random import Generator

    from pixelgarden.plants.plant import Plant

MUTATION_CHANCE = 0.2
TRAIT_DRIFT = (0.9, 1.1)
COLOUR_DRIFT = (-0.5, 0.5)
POSITIVE_TRAITS = ("growth_rate", "water_need", "sunlight_need")


@dataclass(frozen=True)
class Mutations:
    """Optional per-trait overrides.

    ``None`` means "use the type default" for the trait.

    Attributes:
        growth_rate: Stage-threshold multiplier override.
        water_need: Water need override.
        sunlight_need: Sunlight need override.
        colour_shift: Accumulated accent-hue shift (in units of 30 degrees).
    """

    growth_rate: float | None = None
    water_need: float | None = None
    sunlight_need: float | None = None
    colour_shift: float | None = None

    def __post_init__(self) -> None:
        """Reject overrides a plant could not live with.

        Raises:
            ValueError: If a need or the growth rate is not a finite
                positive number, or the colour shift is not finite.
        """
        for name in POSITIVE_TRAITS:
            value = getattr(self, name)
            if value is not None and not (math.isfinite(value) and value > 0):
                msg = f"mutation {name!r} must be finite and positive, got {value!r}"
                raise ValueError(msg)
        if self.colour_shift is not None and not math.isfinite(self.colour_shift):
            msg = f"mutation 'colour_shift' must be finite, got {self.colour_shift!r}"
            raise ValueError(msg)

    @property
    def is_empty(self) -> bool:
        """Return True if no trait is overridden."""
        return not self.to_dict()

    def to_dict(self) -> dict[str, float]:
        """Serialise only the overridden traits."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Mutations:
        """Build from a mapping, ignoring unknown keys.

        Raises:
            TypeError: If ``data`` is not a mapping or a known key holds
                a non-numeric value.
            ValueError: If a value is out of range (see ``__post_init__``).
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            msg = f"mutations must be a mapping, got {type(data).__name__}"
            raise TypeError(msg)
        values: dict[str, float] = {}
        for name in ("growth_rate", "water_need", "sunlight_need", "colour_shift"):
            raw = data.get(name)
            if raw is None:
                continue
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                msg = f"mutation {name!r} must be numeric, got {raw!r}"
                raise TypeError(msg)
            values[name] = float(raw)
        return cls(**values)


def generate_mutations(parent: Plant, rng: Generator) -> Mutations:
    """Derive an offspring's mutations from its parent.

    Each trait independently mutates with probability
    ``MUTATION_CHANCE``.  Numeric needs and the growth rate are scaled
    by a uniform factor in ``TRAIT_DRIFT`` applied to the parent's
    *resolved* value; the colour shift accumulates additively.  Traits
    that do not mutate are inherited from the parent's record as-is.

    Args:
        parent: The reproducing plant.
        rng: Seeded random generator.

    Returns:
        The offspring's Mutations.
    """
    child = parent.mutations
    lo, hi = TRAIT_DRIFT

    if rng.random() < MUTATION_CHANCE:
        child = replace(
            child, growth_rate=parent.growth_rate * float(rng.uniform(lo, hi))
        )
    if rng.random() < MUTATION_CHANCE:
        child = replace(
            child, water_need=parent.water_need * float(rng.uniform(lo, hi))
        )
    if rng.random() < MUTATION_CHANCE:
        child = replace(
            child, sunlight_need=parent.sunlight_need * float(rng.uniform(lo, hi))
        )
    if rng.random() < MUTATION_CHANCE:
        shift = parent.mutations.colour_shift or 0.0
        child = replace(child, colour_shift=shift + float(rng.uniform(*COLOUR_DRIFT)))

    return child
