"""Persistence — save/load full garden state and compact share codes.

Two formats are supported:

- **Saved state**: JSON holding every plant record plus the rain,
  sunshine and season toggles.  Lossless for everything a snapshot
  captures.
- **Share code**: URL-quoted JSON with one ``{t, x, y, g}`` entry per
  plant (type initial, position, generation) and a season initial.
  Lossy: plants come back as mature, healthy, unmutated specimens.

Public ``load_*`` functions never raise on bad input; they log a warning
and return False, leaving the engine untouched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, unquote

from pixelgarden.plants.types import PlantType, Stage
from pixelgarden.simulation.snapshot import GardenDataError, PlantRecord
from pixelgarden.world.seasons import Season

if TYPE_CHECKING:
    from pixelgarden.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)

SHARE_VERSION = 1
SHARED_AGE = 100
SHARED_HEALTH = 100.0


@dataclass(frozen=True)
class SavedGarden:
    """A parsed saved-state document.

    Attributes:
        plants: Plant records in saved order.
        rain: Saved rain toggle (None if not saved).
        sunshine: Saved sunshine toggle (None if not saved).
        season: Saved season (None if not saved).
    """

    plants: list[PlantRecord]
    rain: bool | None = None
    sunshine: bool | None = None
    season: Season | None = None


# -- Full state ---------------------------------------------------------------


def save_state(engine: SimulationEngine) -> str:
    """Serialise plants and environment toggles to a JSON string."""
    env = engine.environment
    data = {
        "plants": [record.to_dict() for record in engine.snapshot()],
        "environment": {
            "rain": env.rain,
            "sunshine": env.sunshine,
            "season": env.season.value,
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return json.dumps(data)


def parse_state(text: str) -> SavedGarden:
    """Parse a document produced by :func:`save_state`.

    Raises:
        GardenDataError: If the text is not valid saved-state JSON.
    """
    data = _load_json(text)
    if not isinstance(data, dict):
        msg = "saved garden must be a JSON object"
        raise GardenDataError(msg)

    plants = data.get("plants")
    if not isinstance(plants, list):
        msg = "saved garden has no plant list"
        raise GardenDataError(msg)
    records = [PlantRecord.from_dict(item) for item in plants]

    env = data.get("environment")
    if env is None:
        return SavedGarden(plants=records)
    if not isinstance(env, dict):
        msg = "environment must be a JSON object"
        raise GardenDataError(msg)
    try:
        season = Season(env["season"]) if "season" in env else None
    except ValueError as exc:
        raise GardenDataError(f"unknown season {env['season']!r}") from exc
    return SavedGarden(
        plants=records,
        rain=_optional_bool(env, "rain"),
        sunshine=_optional_bool(env, "sunshine"),
        season=season,
    )


def load_state(engine: SimulationEngine, text: str) -> bool:
    """Replace the engine's garden with a saved state.

    Returns:
        True on success; False if the data was unusable, in which case
        the engine is unchanged.
    """
    try:
        saved = parse_state(text)
        engine.restore(saved.plants)
    except GardenDataError as exc:
        logger.warning("could not load saved garden: %s", exc)
        return False

    env = engine.environment
    if saved.rain is not None and saved.rain != env.rain:
        engine.toggle_rain()
    if saved.sunshine is not None:
        env.sunshine = saved.sunshine
    if saved.season is not None:
        engine.set_season(saved.season)
    return True


def save_to_file(engine: SimulationEngine, path: str | Path) -> None:
    """Write the saved state to ``path``."""
    Path(path).write_text(save_state(engine), encoding="utf-8")


def load_from_file(engine: SimulationEngine, path: str | Path) -> bool:
    """Load a saved state from ``path``; False if missing or unusable."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("could not read saved garden %s: %s", path, exc)
        return False
    return load_state(engine, text)


# -- Share codes --------------------------------------------------------------


def share_code(engine: SimulationEngine) -> str:
    """Encode plant positions, types and generations compactly."""
    params = {
        "p": [
            {"t": r.ptype.initial, "x": r.x, "y": r.y, "g": r.generation}
            for r in engine.snapshot()
        ],
        "e": engine.environment.season.code,
        "v": SHARE_VERSION,
    }
    return quote(json.dumps(params, separators=(",", ":")))


def parse_share_code(code: str) -> SavedGarden:
    """Decode a share code into mature, healthy plant records.

    Raises:
        GardenDataError: If the code is malformed or of another version.
    """
    data = _load_json(unquote(code))
    if not isinstance(data, dict):
        msg = "share code must decode to a JSON object"
        raise GardenDataError(msg)
    if data.get("v") != SHARE_VERSION:
        msg = f"unsupported share code version {data.get('v')!r}"
        raise GardenDataError(msg)

    entries = data.get("p")
    if not isinstance(entries, list):
        msg = "share code has no plant list"
        raise GardenDataError(msg)

    records: list[PlantRecord] = []
    for entry in entries:
        if not isinstance(entry, dict):
            msg = f"share entry must be an object, got {entry!r}"
            raise GardenDataError(msg)
        try:
            ptype = PlantType.from_initial(entry["t"])
        except KeyError as exc:
            raise GardenDataError("share entry missing type") from exc
        except ValueError as exc:
            raise GardenDataError(str(exc)) from exc
        records.append(
            PlantRecord.from_dict(
                {
                    "type": ptype.value,
                    "x": entry.get("x"),
                    "y": entry.get("y"),
                    "age": SHARED_AGE,
                    "stage": Stage.MATURE.value,
                    "health": SHARED_HEALTH,
                    "is_alive": True,
                    "generation": entry.get("g") or 0,
                },
            ),
        )

    season = None
    if data.get("e"):
        try:
            season = Season.from_code(data["e"])
        except ValueError as exc:
            raise GardenDataError(str(exc)) from exc
    return SavedGarden(plants=records, season=season)


def load_share_code(engine: SimulationEngine, code: str) -> bool:
    """Replace the engine's garden with the plants of a share code.

    Returns:
        True on success; False (engine unchanged) if the code is bad.
    """
    try:
        shared = parse_share_code(code)
        engine.restore(shared.plants)
    except GardenDataError as exc:
        logger.warning("could not load share code: %s", exc)
        return False

    if shared.season is not None:
        engine.set_season(shared.season)
    return True


# -- Helpers ------------------------------------------------------------------


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        raise GardenDataError(f"not valid JSON: {exc}") from exc


def _optional_bool(data: dict[str, Any], key: str) -> bool | None:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return value
    msg = f"{key} must be true or false, got {value!r}"
    raise GardenDataError(msg)
