"""
Configuration management with environment variable support.

All settings can be overridden via environment variables.
Automatically loads .env file if present.
"""

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from duskshift.providers import LocationProvider, ManualProvider, parse_provider
from duskshift.types import ColorSettings, DayNight, ElevationRange, TransitionScheme, parse_scheme

# Load .env file from project root (one level up from duskshift/)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Logging configuration
LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = os.getenv("LOG_LEVEL", "INFO")

# What to do: daemon, oneshot, set, reset or print
MODE: str = os.getenv("MODE", "daemon")

# Color settings, "DAY-NIGHT" or a single value used for both
TEMPERATURE: str = os.getenv("TEMPERATURE", "6500-4500")
BRIGHTNESS: str = os.getenv("BRIGHTNESS", "1.0")
GAMMA: str = os.getenv("GAMMA", "1.0")  # Each side "R:G:B" or a scalar

# Transition scheme: "HIGH:LOW" solar elevations, or dawn/dusk times
# "HH:MM-HH:MM" (instant) / "HH:MM-HH:MM-HH:MM-HH:MM" (windows)
SCHEME: str = os.getenv("SCHEME", "3:-6")

# Location: "LAT:LON" or a city name known to astral
LOCATION: str = os.getenv("LOCATION", "0:0")

# Adjustment method: dummy or gammarelay
METHOD: str = os.getenv("METHOD", "dummy")
RESET_RAMPS: bool = os.getenv("RESET_RAMPS", "false").lower() == "true"

# Fade configuration
DISABLE_FADE: bool = os.getenv("DISABLE_FADE", "false").lower() == "true"
FADE_STEPS: str = os.getenv("FADE_STEPS", "40")

# Sleep between screen updates (milliseconds)
SLEEP_DURATION: str = os.getenv("SLEEP_DURATION", "5000")  # Steady state
SLEEP_DURATION_SHORT: str = os.getenv("SLEEP_DURATION_SHORT", "100")  # While fading

MODES = ("daemon", "oneshot", "set", "reset", "print")


class ConfigError(ValueError):
    """Raised with every invalid configuration field found in one pass."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid configuration:\n  " + "\n  ".join(errors))


class Config(BaseModel):
    """Validated configuration record handed to the daemon and the modes."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["daemon", "oneshot", "set", "reset", "print"] = "daemon"
    colors: DayNight = Field(default_factory=DayNight)
    scheme: TransitionScheme = Field(default_factory=ElevationRange)
    provider: LocationProvider = Field(default_factory=ManualProvider, discriminator="kind")
    method: str = "dummy"
    reset_ramps: bool = False
    disable_fade: bool = False
    fade_steps: int = Field(40, ge=1)
    sleep_duration: int = Field(5000, ge=0, description="Steady-state tick interval (ms)")
    sleep_duration_short: int = Field(100, ge=0, description="Tick interval while fading (ms)")

    @property
    def day(self) -> ColorSettings:
        return self.colors.day


def _describe(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" if e["loc"] else e["msg"]
            for e in error.errors()
        )
    return str(error)


def _split_day_night(text: str) -> tuple[str, str]:
    parts = [p.strip() for p in text.split("-")]
    if len(parts) == 1:
        return parts[0], parts[0]
    if len(parts) == 2:
        return parts[0], parts[1]
    raise ValueError(f"expected DAY-NIGHT or a single value, got '{text}'")


def _parse_gamma(text: str):
    parts = [p.strip() for p in text.split(":")]
    if len(parts) == 1:
        return float(parts[0])
    if len(parts) == 3:
        return tuple(float(p) for p in parts)
    raise ValueError(f"gamma must be R:G:B or a single value, got '{text}'")


def _parse_int(text: str, minimum: Optional[int] = None) -> int:
    try:
        value = int(text.strip())
    except ValueError as e:
        raise ValueError(f"expected an integer, got '{text}'") from e
    if minimum is not None and value < minimum:
        raise ValueError(f"must be at least {minimum}, got {value}")
    return value


def build_config() -> Config:
    """
    Parse the environment settings into a validated Config.

    Every field is checked even after a failure so that all problems are
    reported together.

    Returns:
        Config instance

    Raises:
        ConfigError: If any field is invalid (lists all of them)
    """
    from duskshift.adjusters import METHODS

    errors: list[str] = []
    values: dict = {"reset_ramps": RESET_RAMPS, "disable_fade": DISABLE_FADE}

    def collect(name: str, key: str, parse) -> None:
        try:
            values[key] = parse()
        except ValueError as e:  # pydantic's ValidationError included
            errors.append(f"{name}: {_describe(e)}")

    if MODE in MODES:
        values["mode"] = MODE
    else:
        errors.append(f"MODE: unknown mode '{MODE}' (expected one of {', '.join(MODES)})")

    if METHOD in METHODS:
        values["method"] = METHOD
    else:
        errors.append(f"METHOD: unknown method '{METHOD}' (expected one of {', '.join(METHODS)})")

    # Day and night settings, one field at a time
    day: dict = {}
    night: dict = {}
    for name, key, text, parse in (
        ("TEMPERATURE", "temperature", TEMPERATURE, _parse_int),
        ("BRIGHTNESS", "brightness", BRIGHTNESS, float),
        ("GAMMA", "gamma", GAMMA, _parse_gamma),
    ):
        try:
            day_text, night_text = _split_day_night(text)
            day[key], night[key] = parse(day_text), parse(night_text)
            ColorSettings(**{key: day[key]})
            ColorSettings(**{key: night[key]})
        except ValueError as e:
            errors.append(f"{name}: {_describe(e)}")
            day.pop(key, None)
            night.pop(key, None)

    values["colors"] = DayNight(day=ColorSettings(**day), night=ColorSettings(**night))

    collect("SCHEME", "scheme", lambda: parse_scheme(SCHEME))
    collect("LOCATION", "provider", lambda: parse_provider(LOCATION))
    collect("FADE_STEPS", "fade_steps", lambda: _parse_int(FADE_STEPS, 1))
    collect("SLEEP_DURATION", "sleep_duration", lambda: _parse_int(SLEEP_DURATION, 0))
    collect("SLEEP_DURATION_SHORT", "sleep_duration_short", lambda: _parse_int(SLEEP_DURATION_SHORT, 0))

    if not errors:
        try:
            return Config(**values)
        except ValidationError as e:
            errors.append(_describe(e))

    raise ConfigError(errors)
