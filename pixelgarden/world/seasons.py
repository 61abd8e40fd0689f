"""Seasons — cyclic season enum and per-season resource modifiers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Season(Enum):
    """The four seasons, in cycle order."""

    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"

    def next(self) -> Season:
        """Return the season that follows this one."""
        order = list(Season)
        return order[(order.index(self) + 1) % len(order)]

    @property
    def code(self) -> str:
        """Single-letter code for share codes (``u`` for summer)."""
        return _SEASON_CODES[self]

    @classmethod
    def from_code(cls, code: str) -> Season:
        """Inverse of :attr:`code`.

        Raises:
            ValueError: If ``code`` is not a known season code.
        """
        for season, c in _SEASON_CODES.items():
            if c == code:
                return season
        msg = f"unknown season code {code!r}"
        raise ValueError(msg)


_SEASON_CODES: dict[Season, str] = {
    Season.SPRING: "s",
    Season.SUMMER: "u",
    Season.FALL: "f",
    Season.WINTER: "w",
}


@dataclass(frozen=True)
class SeasonModifiers:
    """Multiplicative factors a season applies to the environment.

    Attributes:
        evaporation: Scales soil and plant water loss.
        sunlight: Scales sunlight intensity and plant sunlight gain.
    """

    evaporation: float = 1.0
    sunlight: float = 1.0


SEASON_MODIFIERS: dict[Season, SeasonModifiers] = {
    Season.SPRING: SeasonModifiers(evaporation=1.0, sunlight=1.0),
    Season.SUMMER: SeasonModifiers(evaporation=1.5, sunlight=1.3),
    Season.FALL: SeasonModifiers(evaporation=0.8, sunlight=0.7),
    Season.WINTER: SeasonModifiers(evaporation=0.5, sunlight=0.5),
}


def season_modifier(season: Season) -> SeasonModifiers:
    """Return the modifiers for ``season``."""
    return SEASON_MODIFIERS[season]
