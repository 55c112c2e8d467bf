"""
Validated value types shared by the classifier, fade engine and daemon.

Every numeric value is range-checked when constructed (pydantic raises
ValidationError), so the rest of the code only ever sees trusted values.
"""

from typing import Annotated, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from duskshift.lighting_math import clamp, lerp

MIN_TEMPERATURE = 1000
MAX_TEMPERATURE = 25000
DEFAULT_TEMPERATURE = 6500
DEFAULT_TEMPERATURE_DAY = 6500
DEFAULT_TEMPERATURE_NIGHT = 4500

MIN_BRIGHTNESS = 0.1
MAX_BRIGHTNESS = 1.0
DEFAULT_BRIGHTNESS = 1.0

MIN_GAMMA = 0.1
MAX_GAMMA = 10.0
DEFAULT_GAMMA = 1.0

MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0
MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0
MIN_ELEVATION, MAX_ELEVATION = -90.0, 90.0

# Transition between civil twilight and the sun being 3 degrees up
DEFAULT_ELEVATION_HIGH = 3.0
DEFAULT_ELEVATION_LOW = -6.0

SECONDS_PER_DAY = 86400

# A target change larger than any of these is faded instead of applied at once
MAJOR_TEMPERATURE_DIFF = 25
MAJOR_BRIGHTNESS_DIFF = 0.1
MAJOR_GAMMA_DIFF = 0.1

Temperature = Annotated[int, Field(ge=MIN_TEMPERATURE, le=MAX_TEMPERATURE)]
Brightness = Annotated[float, Field(ge=MIN_BRIGHTNESS, le=MAX_BRIGHTNESS)]
GammaChannel = Annotated[float, Field(ge=MIN_GAMMA, le=MAX_GAMMA)]
Latitude = Annotated[float, Field(ge=MIN_LATITUDE, le=MAX_LATITUDE)]
Longitude = Annotated[float, Field(ge=MIN_LONGITUDE, le=MAX_LONGITUDE)]
Elevation = Annotated[float, Field(ge=MIN_ELEVATION, le=MAX_ELEVATION)]
TimeOffset = Annotated[int, Field(ge=0, lt=SECONDS_PER_DAY)]


# ============================================================================
# Color settings
# ============================================================================

class ColorSettings(BaseModel):
    """Color temperature, per-channel gamma and brightness of the display."""

    model_config = ConfigDict(frozen=True)

    temperature: Temperature = DEFAULT_TEMPERATURE
    gamma: tuple[GammaChannel, GammaChannel, GammaChannel] = (DEFAULT_GAMMA,) * 3
    brightness: Brightness = DEFAULT_BRIGHTNESS

    @field_validator("gamma", mode="before")
    @classmethod
    def expand_scalar_gamma(cls, value):
        """Accept a single gamma value for all three channels."""
        if isinstance(value, (int, float)):
            return (value, value, value)
        return value

    @classmethod
    def default_day(cls) -> "ColorSettings":
        return cls(temperature=DEFAULT_TEMPERATURE_DAY)

    @classmethod
    def default_night(cls) -> "ColorSettings":
        return cls(temperature=DEFAULT_TEMPERATURE_NIGHT)

    def interpolate(self, other: "ColorSettings", alpha: float) -> "ColorSettings":
        """
        Blend component-wise from self (alpha=0) to other (alpha=1).

        Args:
            other: Settings reached at alpha=1.0
            alpha: Interpolation factor in [0, 1]

        Returns:
            New ColorSettings; temperature is rounded to whole Kelvin

        Raises:
            ValueError: If alpha is outside [0, 1]
        """
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"alpha must be between 0 and 1, got {alpha}")

        temperature = round(lerp(self.temperature, other.temperature, alpha))
        gamma = tuple(
            clamp(lerp(a, b, alpha), MIN_GAMMA, MAX_GAMMA)
            for a, b in zip(self.gamma, other.gamma)
        )
        brightness = clamp(
            lerp(self.brightness, other.brightness, alpha), MIN_BRIGHTNESS, MAX_BRIGHTNESS
        )
        return ColorSettings(temperature=temperature, gamma=gamma, brightness=brightness)

    def is_very_different(self, other: "ColorSettings") -> bool:
        """True if switching from self to other would be a visible jump."""
        return (
            abs(self.temperature - other.temperature) > MAJOR_TEMPERATURE_DIFF
            or abs(self.brightness - other.brightness) > MAJOR_BRIGHTNESS_DIFF
            or any(abs(a - b) > MAJOR_GAMMA_DIFF for a, b in zip(self.gamma, other.gamma))
        )

    def __str__(self) -> str:
        r, g, b = self.gamma
        return (
            f"Temperature: {self.temperature}K, Brightness: {self.brightness:.2f}, "
            f"Gamma: {r:.2f}:{g:.2f}:{b:.2f}"
        )


class DayNight(BaseModel):
    """Pair of color settings used at full day and full night."""

    model_config = ConfigDict(frozen=True)

    day: ColorSettings = Field(default_factory=ColorSettings.default_day)
    night: ColorSettings = Field(default_factory=ColorSettings.default_night)

    def at(self, alpha: float) -> ColorSettings:
        """Settings for a day/night blend (0.0 = night, 1.0 = day)."""
        return self.night.interpolate(self.day, alpha)


# ============================================================================
# Location
# ============================================================================

class Location(BaseModel):
    """Geographic position in degrees, east and north positive."""

    model_config = ConfigDict(frozen=True)

    latitude: Latitude = 0.0
    longitude: Longitude = 0.0

    @classmethod
    def parse(cls, text: str) -> "Location":
        """Parse "LAT:LON"."""
        parts = text.split(":")
        if len(parts) != 2:
            raise ValueError(f"Location must be LAT:LON, got '{text}'")
        return cls(latitude=float(parts[0]), longitude=float(parts[1]))

    def is_default(self) -> bool:
        return self == Location()

    def __str__(self) -> str:
        ns = "N" if self.latitude >= 0 else "S"
        ew = "E" if self.longitude >= 0 else "W"
        return f"{abs(self.latitude):.2f}° {ns}, {abs(self.longitude):.2f}° {ew}"


# ============================================================================
# Transition schemes
# ============================================================================

class Time(BaseModel):
    """Wall-clock time of day with minute resolution."""

    model_config = ConfigDict(frozen=True)

    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)

    @classmethod
    def parse(cls, text: str) -> "Time":
        """Parse "HH:MM"."""
        parts = [p.strip() for p in text.split(":")]
        if len(parts) != 2:
            raise ValueError(f"Time must be HH:MM, got '{text}'")
        return cls(hour=int(parts[0]), minute=int(parts[1]))

    @property
    def offset(self) -> int:
        """Seconds since midnight."""
        return self.hour * 3600 + self.minute * 60


class TimeRange(BaseModel):
    """Window of the day, as offsets from midnight in seconds."""

    model_config = ConfigDict(frozen=True)

    start: TimeOffset
    end: TimeOffset

    @model_validator(mode="after")
    def check_order(self) -> "TimeRange":
        if self.start > self.end:
            raise ValueError("time range start must not be after its end")
        return self

    @classmethod
    def parse(cls, text: str) -> "TimeRange":
        """Parse "HH:MM-HH:MM", or "HH:MM" for a zero-width range."""
        parts = text.split("-")
        if len(parts) == 1:
            offset = Time.parse(parts[0]).offset
            return cls(start=offset, end=offset)
        if len(parts) == 2:
            return cls(start=Time.parse(parts[0]).offset, end=Time.parse(parts[1]).offset)
        raise ValueError(f"Time range must be HH:MM-HH:MM, got '{text}'")


class TimeRanges(BaseModel):
    """Dawn and dusk transition windows of the time-based scheme."""

    model_config = ConfigDict(frozen=True)

    dawn: TimeRange
    dusk: TimeRange

    @model_validator(mode="after")
    def check_order(self) -> "TimeRanges":
        if not self.dawn.end < self.dusk.start:
            raise ValueError("dawn must end before dusk starts")
        return self

    @classmethod
    def parse(cls, text: str) -> "TimeRanges":
        """Parse "DAWN-DUSK" or "DAWN_START-DAWN_END-DUSK_START-DUSK_END"."""
        parts = text.split("-")
        if len(parts) == 2:
            return cls(dawn=TimeRange.parse(parts[0]), dusk=TimeRange.parse(parts[1]))
        if len(parts) == 4:
            return cls(
                dawn=TimeRange.parse(f"{parts[0]}-{parts[1]}"),
                dusk=TimeRange.parse(f"{parts[2]}-{parts[3]}"),
            )
        raise ValueError(f"Time ranges must be DAWN-DUSK or four times, got '{text}'")


class ElevationRange(BaseModel):
    """Solar elevations (degrees) between which the transition happens."""

    model_config = ConfigDict(frozen=True)

    high: Elevation = DEFAULT_ELEVATION_HIGH
    low: Elevation = DEFAULT_ELEVATION_LOW

    @model_validator(mode="after")
    def check_order(self) -> "ElevationRange":
        if self.high < self.low:
            raise ValueError("high transition elevation cannot be lower than the low one")
        return self

    @classmethod
    def parse(cls, text: str) -> "ElevationRange":
        """Parse "HIGH:LOW"."""
        parts = text.split(":")
        if len(parts) != 2:
            raise ValueError(f"Elevation range must be HIGH:LOW, got '{text}'")
        return cls(high=float(parts[0]), low=float(parts[1]))


TransitionScheme = Union[TimeRanges, ElevationRange]


def parse_scheme(text: str) -> TransitionScheme:
    """
    Parse either a time-ranges or an elevation-range transition scheme.

    Text that reads as dawn/dusk times but breaks their ordering reports
    the time-ranges error rather than falling back to elevations.
    """
    try:
        return TimeRanges.parse(text)
    except ValidationError:
        raise
    except ValueError:
        pass
    try:
        return ElevationRange.parse(text)
    except ValueError as e:
        raise ValueError(f"Invalid transition scheme '{text}': {e}") from e
