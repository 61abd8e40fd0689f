"""Plant types — static per-type configuration.

Each plant type has a fixed colour palette, per-stage age thresholds and
base resource needs.  The table is pure data: plants consult it but
never mutate it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class PlantType(Enum):
    """The four species a cell can hold."""

    FLOWER = "flower"
    TREE = "tree"
    GRASS = "grass"
    MUSHROOM = "mushroom"

    @property
    def initial(self) -> str:
        """Return the single-letter code used by share codes."""
        return self.value[0]

    @classmethod
    def from_initial(cls, initial: str) -> PlantType:
        """Look up a type by its first letter.

        Raises:
            ValueError: If no type starts with ``initial``.
        """
        for ptype in cls:
            if ptype.initial == initial:
                return ptype
        msg = f"unknown plant type initial {initial!r}"
        raise ValueError(msg)


class Stage(Enum):
    """Life-cycle phases in strict order."""

    SEED = "seed"
    SPROUT = "sprout"
    GROWING = "growing"
    MATURE = "mature"

    @property
    def order(self) -> int:
        """Return the position of this stage in the life cycle."""
        return _STAGE_ORDER.index(self)


_STAGE_ORDER = list(Stage)


@dataclass(frozen=True)
class PlantProfile:
    """Immutable configuration for one plant type.

    Attributes:
        colours: Fixed palette entries as RGB tuples.
        accent: Palette key whose hue is drawn per plant.
        accent_hue: (min, max) hue range in degrees for the accent.
        accent_saturation: Accent saturation in percent.
        accent_lightness: Accent lightness in percent.
        stage_thresholds: Ordered (stage, max age) pairs; the final
            stage is unbounded.
        water_need: Base water level at which the plant is healthiest.
        sunlight_need: Base sunlight level at which the plant is healthiest.
    """

    colours: dict[str, tuple[int, int, int]]
    accent: str
    accent_hue: tuple[float, float]
    accent_saturation: float
    accent_lightness: float
    stage_thresholds: tuple[tuple[Stage, float], ...] = field(repr=False)
    water_need: float = 50.0
    sunlight_need: float = 50.0


def _thresholds(seed: float, sprout: float, growing: float) -> tuple:
    return (
        (Stage.SEED, seed),
        (Stage.SPROUT, sprout),
        (Stage.GROWING, growing),
        (Stage.MATURE, math.inf),
    )


PLANT_PROFILES: dict[PlantType, PlantProfile] = {
    PlantType.FLOWER: PlantProfile(
        colours={
            "seed": (121, 85, 72),
            "stem": (46, 125, 50),
            "leaf": (129, 199, 132),
            "center": (253, 216, 53),
        },
        accent="bloom",
        accent_hue=(0.0, 360.0),
        accent_saturation=80.0,
        accent_lightness=60.0,
        stage_thresholds=_thresholds(15, 40, 100),
        water_need=60.0,
        sunlight_need=70.0,
    ),
    PlantType.TREE: PlantProfile(
        colours={
            "seed": (93, 64, 55),
            "trunk": (93, 64, 55),
        },
        accent="leaves",
        accent_hue=(80.0, 140.0),
        accent_saturation=70.0,
        accent_lightness=40.0,
        stage_thresholds=_thresholds(20, 60, 150),
        water_need=50.0,
        sunlight_need=60.0,
    ),
    PlantType.GRASS: PlantProfile(
        colours={
            "seed": (255, 245, 157),
        },
        accent="blade",
        accent_hue=(60.0, 140.0),
        accent_saturation=70.0,
        accent_lightness=50.0,
        stage_thresholds=_thresholds(10, 25, 60),
        water_need=40.0,
        sunlight_need=80.0,
    ),
    PlantType.MUSHROOM: PlantProfile(
        colours={
            "spore": (245, 245, 245),
            "stem": (236, 239, 241),
            "spots": (255, 255, 255),
        },
        accent="cap",
        accent_hue=(0.0, 40.0),
        accent_saturation=80.0,
        accent_lightness=50.0,
        stage_thresholds=_thresholds(12, 30, 70),
        water_need=80.0,
        sunlight_need=30.0,
    ),
}


def profile_for(ptype: PlantType) -> PlantProfile:
    """Return the static profile for a plant type."""
    return PLANT_PROFILES[ptype]
