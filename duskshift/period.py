"""
Day/night period classification.

Maps either the local wall-clock time or the solar elevation at the
provider's location onto Daytime, Night or a Transition with an integer
progress from 0 (night side) to 100 (day side).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from duskshift.providers import LocationProvider
from duskshift.solar import solar_elevation
from duskshift.types import ElevationRange, Location, TimeRanges, TransitionScheme


class PeriodKind(str, Enum):
    DAYTIME = "Daytime"
    NIGHT = "Night"
    TRANSITION = "Transition"


@dataclass(frozen=True)
class Period:
    """Where we are in the day/night cycle."""

    kind: PeriodKind
    progress: Optional[int] = None  # 0..100, only set for transitions

    @classmethod
    def daytime(cls) -> "Period":
        return cls(PeriodKind.DAYTIME)

    @classmethod
    def night(cls) -> "Period":
        return cls(PeriodKind.NIGHT)

    @classmethod
    def transition(cls, fraction: float) -> "Period":
        """Transition period from a 0..1 day-side fraction (truncated to whole percent)."""
        return cls(PeriodKind.TRANSITION, int(fraction * 100.0))

    @property
    def alpha(self) -> float:
        """Interpolation factor: 0.0 at night, 1.0 at day."""
        if self.kind == PeriodKind.DAYTIME:
            return 1.0
        if self.kind == PeriodKind.NIGHT:
            return 0.0
        return self.progress / 100.0

    def __str__(self) -> str:
        if self.kind == PeriodKind.TRANSITION:
            return f"Period: Transition ({self.progress}% day)"
        return f"Period: {self.kind.value}"


@dataclass(frozen=True)
class PeriodInfo:
    """Inputs the period was derived from (elevation scheme only)."""

    elevation: Optional[float] = None
    location: Optional[Location] = None

    def __str__(self) -> str:
        if self.elevation is None:
            return "Transition by time of day"
        return f"Solar elevation: {self.elevation:.2f}°, Location: {self.location}"


def time_offset(now: datetime) -> int:
    """Seconds since local midnight."""
    return now.hour * 3600 + now.minute * 60 + now.second


def period_from_time(offset: int, ranges: TimeRanges) -> Period:
    """
    Classify a time of day against the dawn and dusk windows.

    A zero-width window never reaches its division: its single instant
    already falls in the Night or Daytime branches.
    """
    dawn, dusk = ranges.dawn, ranges.dusk

    if offset < dawn.start or offset >= dusk.end:
        return Period.night()
    if offset < dawn.end:
        return Period.transition((dawn.start - offset) / (dawn.start - dawn.end))
    if offset > dusk.start:
        return Period.transition((dusk.end - offset) / (dusk.end - dusk.start))
    return Period.daytime()


def period_from_elevation(elevation: float, elevation_range: ElevationRange) -> Period:
    """Classify a solar elevation (degrees) against the transition band."""
    high, low = elevation_range.high, elevation_range.low

    if elevation < low:
        return Period.night()
    if elevation < high:
        return Period.transition((low - elevation) / (low - high))
    return Period.daytime()


def classify(
    scheme: TransitionScheme,
    now: datetime,
    provider: LocationProvider,
) -> tuple[Period, PeriodInfo]:
    """
    Determine the current period.

    Args:
        scheme: TimeRanges or ElevationRange
        now: Timezone-aware current time
        provider: Location source, only queried for the elevation scheme

    Returns:
        (Period, PeriodInfo)

    Raises:
        ProviderError: If the provider fails
    """
    if isinstance(scheme, ElevationRange):
        here = provider.get()
        elevation = solar_elevation(now.timestamp(), here.latitude, here.longitude)
        return period_from_elevation(elevation, scheme), PeriodInfo(elevation, here)

    return period_from_time(time_offset(now), scheme), PeriodInfo()
