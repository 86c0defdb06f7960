"""
Season calendar: maps a (year, season) pair to a concrete UTC date range.

Seasons are meteorological. Winter of year Y starts on 1 December of Y-1 and
ends with February of Y, so the four seasons of a year cover December (Y-1)
through November (Y). Both bounds of a range are inclusive; a range ends on
the last microsecond of its final day.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .errors import ConfigurationError

_RESOLUTION = timedelta(microseconds=1)


class Season(str, Enum):
    WINTER = "Winter"
    SPRING = "Spring"
    SUMMER = "Summer"
    FALL = "Fall"


# (start month, end month) within the season's year; Winter starts a year early
_MONTHS = {
    Season.WINTER: (12, 2),
    Season.SPRING: (3, 5),
    Season.SUMMER: (6, 8),
    Season.FALL: (9, 11),
}


@dataclass(frozen=True)
class SeasonRange:
    start: datetime
    end: datetime

    def __post_init__(self):
        if not self.start < self.end:
            raise ValueError(f"Season range must start before it ends: {self.start} >= {self.end}")

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


SeasonMap = Mapping[int, Mapping[Season, SeasonRange]]


def parse_season(value) -> Optional[Season]:
    """Resolve a ``Season`` or its label (case-insensitive); ``None`` if unknown."""
    if isinstance(value, Season):
        return value
    if not isinstance(value, str):
        return None
    label = value.strip().lower()
    if label == "autumn":
        return Season.FALL
    for season in Season:
        if season.value.lower() == label:
            return season
    return None


def season_range(year: int, season: Season) -> SeasonRange:
    first, last = _MONTHS[season]
    start_year = year - 1 if season is Season.WINTER else year
    start = datetime(start_year, first, 1, tzinfo=timezone.utc)
    last_day = calendar.monthrange(year, last)[1]
    end = datetime(year, last, last_day, tzinfo=timezone.utc) + timedelta(days=1) - _RESOLUTION
    return SeasonRange(start=start, end=end)


def build_season_map(years: Iterable[int]) -> SeasonMap:
    """
    Build the read-only season map for the given years.

    Args:
        years: Years to support (duplicates are ignored)

    Returns:
        Mapping of year -> {Season -> SeasonRange}

    Raises:
        ConfigurationError: If no years are given or a year is not positive
    """
    years = sorted(set(years))
    if not years:
        raise ConfigurationError("At least one year must be configured")
    out = {}
    for year in years:
        if not isinstance(year, int) or year < 2:
            raise ConfigurationError(f"Invalid year: {year!r}")
        out[year] = MappingProxyType({s: season_range(year, s) for s in Season})
    return MappingProxyType(out)


def get_season_range(season_map: SeasonMap, year: int, season) -> Optional[SeasonRange]:
    """Look up a range; ``None`` when the pair isn't in the map."""
    resolved = parse_season(season)
    if resolved is None:
        return None
    by_season = season_map.get(year)
    if by_season is None:
        return None
    return by_season.get(resolved)
