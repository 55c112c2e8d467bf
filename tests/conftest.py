"""Shared pytest fixtures for all tests."""

import queue
from datetime import datetime, timezone

import pytest

from duskshift.config import Config
from duskshift.types import ColorSettings, DayNight, TimeRanges


class RecordingAdjuster:
    """Adjuster double remembering every call."""

    name = "recording"

    def __init__(self):
        self.calls = []
        self.restore_count = 0

    def set(self, reset_ramps, settings):
        self.calls.append((reset_ramps, settings))

    def restore(self):
        self.restore_count += 1

    @property
    def settings(self):
        return [s for _, s in self.calls]


class FixedClock:
    """Clock returning a settable, timezone-aware time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def adjuster():
    return RecordingAdjuster()


@pytest.fixture
def channel():
    return queue.SimpleQueue()


@pytest.fixture
def noon_clock():
    """Clock fixed at 12:00 UTC (daytime in every scheme used by the tests)."""
    return FixedClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def midnight_clock():
    """Clock fixed at 00:00 UTC (night in every scheme used by the tests)."""
    return FixedClock(datetime(2024, 6, 1, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def time_scheme():
    """Dawn 06:00-07:45, dusk 18:35-20:15."""
    return TimeRanges.parse("06:00-07:45-18:35-20:15")


@pytest.fixture
def make_config(time_scheme):
    """Factory for configs that never sleep between ticks."""

    def factory(**overrides):
        values = {
            "scheme": time_scheme,
            "colors": DayNight(
                day=ColorSettings(temperature=6500),
                night=ColorSettings(temperature=3000),
            ),
            "sleep_duration": 0,
            "sleep_duration_short": 0,
        }
        values.update(overrides)
        return Config(**values)

    return factory
