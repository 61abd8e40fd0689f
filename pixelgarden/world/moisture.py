"""Soil moisture algorithms.

Operates on the raw NumPy moisture array owned by ``Environment``.
Kept separate from ``environment.py`` so the field maths can be tested
and tuned on bare arrays.

Unlike a conserving blur, moisture spread is a *broadcast*: a wet cell
pushes a fraction of its level into each cardinal neighbour without
losing any itself.  Every operation clamps to ``[0, MAX_MOISTURE]``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from pixelgarden.world.garden import Garden

MAX_MOISTURE = 100.0
RAIN_DEPOSIT = 5.0
SPREAD_FRACTION = 0.2
BASE_EVAPORATION = 0.05
CONSUMPTION_PER_NEED = 0.01

_CARDINAL = ((-1, 0), (1, 0), (0, -1), (0, 1))


def deposit(
    grid: NDArray[np.float64],
    x: int,
    y: int,
    amount: float = RAIN_DEPOSIT,
) -> None:
    """Add moisture at a cell and spread it to the cardinal neighbours.

    Out-of-bounds coordinates are ignored.

    Args:
        grid: Moisture array indexed ``[y, x]``.
        x: Column index.
        y: Row index.
        amount: Moisture added to the cell before spreading.
    """
    height, width = grid.shape
    if not (0 <= x < width and 0 <= y < height):
        return
    grid[y, x] = min(MAX_MOISTURE, grid[y, x] + amount)
    spread(grid, x, y)


def spread(grid: NDArray[np.float64], x: int, y: int) -> None:
    """Push ``SPREAD_FRACTION`` of a cell's moisture into each neighbour.

    The source cell keeps its level; neighbours are capped at
    ``MAX_MOISTURE``.
    """
    height, width = grid.shape
    share = grid[y, x] * SPREAD_FRACTION
    for dx, dy in _CARDINAL:
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height:
            grid[ny, nx] = min(MAX_MOISTURE, grid[ny, nx] + share)


def evaporate(grid: NDArray[np.float64], evaporation_modifier: float) -> None:
    """Remove seasonal evaporation from every cell in-place."""
    np.maximum(grid - BASE_EVAPORATION * evaporation_modifier, 0.0, out=grid)


def consume(grid: NDArray[np.float64], garden: Garden) -> None:
    """Let each living plant draw water from its own cell.

    Consumption is ``water_need * CONSUMPTION_PER_NEED`` per tick,
    floored at zero.
    """
    for plant in garden.plants():
        if plant.is_alive:
            draw = plant.water_need * CONSUMPTION_PER_NEED
            grid[plant.y, plant.x] = max(0.0, grid[plant.y, plant.x] - draw)


def update_soil(
    grid: NDArray[np.float64],
    garden: Garden,
    evaporation_modifier: float,
) -> None:
    """Run one tick of evaporation followed by plant consumption."""
    evaporate(grid, evaporation_modifier)
    consume(grid, garden)
