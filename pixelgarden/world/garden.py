"""Garden grid — the spatial container for plants.

The Garden owns a square 2D array of cells, each either empty (``None``)
or holding exactly one Plant.  It is passed explicitly to the engine,
the environment and to plants rather than living in global state.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from pixelgarden.plants.plant import Plant


@dataclass
class Garden:
    """A square grid of plant cells.

    Attributes:
        size: Number of rows and columns.
        cells: 2D list indexed as ``cells[y][x]``; ``None`` marks an
            empty cell.
    """

    size: int
    cells: list[list[Plant | None]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise an empty grid."""
        self.clear()

    def clear(self) -> None:
        """Remove every plant."""
        self.cells = [[None] * self.size for _ in range(self.size)]

    def in_bounds(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` lies on the grid."""
        return 0 <= x < self.size and 0 <= y < self.size

    def plant_at(self, x: int, y: int) -> Plant | None:
        """Return the plant at grid coordinates ``(x, y)``, if any.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            msg = f"({x}, {y}) out of bounds for {self.size}x{self.size}"
            raise IndexError(msg)
        return self.cells[y][x]

    def is_empty(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` is on the grid and unoccupied."""
        return self.in_bounds(x, y) and self.cells[y][x] is None

    def place(self, plant: Plant) -> bool:
        """Put ``plant`` into the cell at its own coordinates.

        Returns:
            False if the cell is out of bounds or already occupied.
        """
        if not self.is_empty(plant.x, plant.y):
            return False
        self.cells[plant.y][plant.x] = plant
        return True

    def remove(self, x: int, y: int) -> Plant | None:
        """Empty a cell and return whatever it held."""
        plant = self.plant_at(x, y)
        self.cells[y][x] = None
        return plant

    def neighbours(
        self,
        x: int,
        y: int,
        *,
        include_diagonals: bool = True,
    ) -> list[tuple[int, int]]:
        """Return in-bounds neighbouring coordinates.

        Args:
            x: Column index.
            y: Row index.
            include_diagonals: If True, return up to 8 neighbours; otherwise 4.
        """
        offsets = [(-1, 0), (1, 0), (0, -1), (0, 1)]
        if include_diagonals:
            offsets += [(-1, -1), (-1, 1), (1, -1), (1, 1)]
        return [
            (x + dx, y + dy) for dx, dy in offsets if self.in_bounds(x + dx, y + dy)
        ]

    def plants(self) -> Iterator[Plant]:
        """Yield every plant, living or dead, in row-major order."""
        for row in self.cells:
            for plant in row:
                if plant is not None:
                    yield plant

    def living_count(self) -> int:
        """Return the number of living plants."""
        return sum(1 for plant in self.plants() if plant.is_alive)
