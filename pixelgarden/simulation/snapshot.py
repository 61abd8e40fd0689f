"""Snapshot records — the minimal per-plant state needed to rebuild a garden.

Records are plain frozen dataclasses so collaborators (persistence, UI,
tests) can read them without touching live ``Plant`` objects.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from pixelgarden.plants.mutations import Mutations
from pixelgarden.plants.plant import Plant
from pixelgarden.plants.types import PlantType, Stage


class GardenDataError(ValueError):
    """Raised when snapshot or saved-garden data cannot be used."""


@dataclass(frozen=True)
class PlantRecord:
    """Serialisable state of one plant.

    Attributes:
        ptype: Species.
        x: Column.
        y: Row.
        age: Ticks lived.
        stage: Life-cycle phase, restored verbatim.
        health: Vitality (0-100).
        is_alive: Whether the plant is alive.
        generation: Lineage depth.
        mutations: Heritable trait overrides.
    """

    ptype: PlantType
    x: int
    y: int
    age: int = 0
    stage: Stage = Stage.SEED
    health: float = 100.0
    is_alive: bool = True
    generation: int = 0
    mutations: Mutations = field(default_factory=Mutations)

    @classmethod
    def from_plant(cls, plant: Plant) -> PlantRecord:
        """Capture the persistent state of a live plant."""
        return cls(
            ptype=plant.ptype,
            x=plant.x,
            y=plant.y,
            age=plant.age,
            stage=plant.stage,
            health=plant.health,
            is_alive=plant.is_alive,
            generation=plant.generation,
            mutations=plant.mutations,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping."""
        return {
            "type": self.ptype.value,
            "x": self.x,
            "y": self.y,
            "age": self.age,
            "stage": self.stage.value,
            "health": self.health,
            "is_alive": self.is_alive,
            "generation": self.generation,
            "mutations": self.mutations.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> PlantRecord:
        """Parse a mapping produced by :meth:`to_dict`.

        Raises:
            GardenDataError: If fields are missing or hold invalid values.
        """
        if not isinstance(data, dict):
            msg = f"plant record must be an object, got {type(data).__name__}"
            raise GardenDataError(msg)
        try:
            return cls(
                ptype=PlantType(data["type"]),
                x=_as_int(data["x"], "x"),
                y=_as_int(data["y"], "y"),
                age=_as_int(data.get("age", 0), "age"),
                stage=Stage(data.get("stage", Stage.SEED.value)),
                health=_as_health(data.get("health", 100.0)),
                is_alive=_as_bool(data.get("is_alive", True), "is_alive"),
                generation=_as_int(data.get("generation", 0), "generation"),
                mutations=Mutations.from_dict(data.get("mutations")),
            )
        except KeyError as exc:
            msg = f"plant record missing field {exc.args[0]!r}"
            raise GardenDataError(msg) from exc
        except (TypeError, ValueError) as exc:
            raise GardenDataError(f"invalid plant record: {exc}") from exc


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{name} must be an integer, got {value!r}"
        raise GardenDataError(msg)
    return value


def _as_health(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"health must be a number, got {value!r}"
        raise GardenDataError(msg)
    if not (math.isfinite(value) and 0.0 <= value <= 100.0):
        msg = f"health must be within [0, 100], got {value!r}"
        raise GardenDataError(msg)
    return float(value)


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        msg = f"{name} must be true or false, got {value!r}"
        raise GardenDataError(msg)
    return value
