"""Shared fixtures for the Pixel Garden test suite."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from numpy.random import Generator

from pixelgarden.plants.plant import Plant
from pixelgarden.plants.types import PlantType, profile_for
from pixelgarden.simulation.config import SimulationConfig
from pixelgarden.simulation.engine import SimulationEngine
from pixelgarden.world.environment import Environment
from pixelgarden.world.garden import Garden


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_garden() -> Garden:
    """A small 8x8 garden for fast tests."""
    return Garden(size=8)


@pytest.fixture
def environment() -> Environment:
    """An 8x8 environment with default weather."""
    return Environment(size=8)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def small_engine() -> SimulationEngine:
    """An engine on an 8x8 grid."""
    return SimulationEngine(config=SimulationConfig(seed=7, grid_size=8))


def _make_plant(
    ptype: PlantType = PlantType.FLOWER,
    x: int = 3,
    y: int = 3,
    **overrides: object,
) -> Plant:
    profile = profile_for(ptype)
    fields: dict[str, object] = {
        "growth_rate": 1.0,
        "water_need": profile.water_need,
        "sunlight_need": profile.sunlight_need,
    }
    fields.update(overrides)
    return Plant(ptype=ptype, x=x, y=y, **fields)


@pytest.fixture
def make_plant() -> Callable[..., Plant]:
    """Factory for plants with type-default needs and a growth rate of 1.0."""
    return _make_plant
