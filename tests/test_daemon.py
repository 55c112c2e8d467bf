"""Tests for the daemon scheduling loop."""

from datetime import datetime, timezone

import pytest

from duskshift.adjusters import AdjusterError
from duskshift.daemon import CANCEL, DaemonLoop
from duskshift.fade import FadeStatus
from duskshift.providers import ManualProvider, ProviderError
from duskshift.state import Signal
from duskshift.types import ColorSettings, ElevationRange

NEUTRAL = ColorSettings()
NIGHT = ColorSettings(temperature=3000)


class FailingProvider:
    def get(self):
        raise ProviderError("location service unavailable")


class FailingAdjuster:
    def __init__(self):
        self.restore_count = 0

    def set(self, reset_ramps, settings):
        raise AdjusterError("display gone")

    def restore(self):
        self.restore_count += 1


def fade_until_completed(loop, limit=1000):
    """Tick (without waiting) until the current fade has finished."""
    for _ in range(limit):
        loop.tick()
        if loop.state.fade.is_completed:
            return
    raise AssertionError("fade never completed")


class TestTick:
    """Tests for a single scheduling step."""

    def test_first_tick_applies_settings(self, make_config, adjuster, channel, noon_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, noon_clock)
        loop.tick()
        assert adjuster.calls == [(False, NEUTRAL)]

    def test_no_redundant_sets(self, make_config, adjuster, channel, noon_clock):
        """Unchanged settings are not sent to the adjuster again."""
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, noon_clock)
        for _ in range(5):
            loop.tick()
        assert len(adjuster.calls) == 1

    def test_reset_ramps_forwarded(self, make_config, adjuster, channel, noon_clock):
        loop = DaemonLoop(make_config(reset_ramps=True), ManualProvider(), adjuster, channel, noon_clock)
        loop.tick()
        assert adjuster.calls[0][0] is True

    def test_night_starts_fade(self, make_config, adjuster, channel, midnight_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, midnight_clock)
        loop.tick()
        assert loop.state.fade == FadeStatus.ungoing(0)
        assert loop.state.interp == NEUTRAL

    def test_fade_reaches_night(self, make_config, adjuster, channel, midnight_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, midnight_clock)
        fade_until_completed(loop)
        assert loop.state.interp == NIGHT
        assert adjuster.settings[-1] == NIGHT
        temperatures = [s.temperature for s in adjuster.settings]
        assert temperatures == sorted(temperatures, reverse=True)

    def test_disable_fade_jumps(self, make_config, adjuster, channel, midnight_clock):
        loop = DaemonLoop(make_config(disable_fade=True), ManualProvider(), adjuster, channel, midnight_clock)
        loop.tick()
        assert adjuster.settings == [NIGHT]
        assert loop.state.fade.is_completed

    def test_clock_advancing_into_night(self, make_config, adjuster, channel, noon_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, noon_clock)
        loop.tick()
        assert loop.state.fade.is_completed

        noon_clock.now = datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc)
        loop.tick()
        assert not loop.state.fade.is_completed

    def test_interrupted_target_is_neutral(self, make_config, adjuster, channel, midnight_clock):
        loop = DaemonLoop(make_config(disable_fade=True), ManualProvider(), adjuster, channel, midnight_clock)
        loop.tick()
        loop.state.signal = Signal.INTERRUPT
        loop.tick()
        assert adjuster.settings == [NIGHT, NEUTRAL]

    def test_interrupt_mid_fade_turns_back_smoothly(self, make_config, adjuster, channel, midnight_clock):
        """After an interrupt mid-fade, every tick moves one eased step toward neutral."""
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, midnight_clock)
        for _ in range(6):
            loop.tick()
        assert loop.state.fade == FadeStatus.ungoing(5)

        channel.put(CANCEL)
        assert loop.wait(0) is True

        for _ in range(100):
            before, step_before = loop.state.interp, loop.state.fade.step
            loop.tick()
            after, status = loop.state.interp, loop.state.fade
            if status.is_completed:
                assert not before.is_very_different(NEUTRAL) or step_before == loop.engine.fade_steps
                break
            assert status.step == step_before + 1
            assert after == loop.engine.ease(before, NEUTRAL, status.step)
        else:
            pytest.fail("fade back to neutral never completed")

        assert loop.state.interp == NEUTRAL
        first_after_interrupt = adjuster.settings[6]
        assert first_after_interrupt.temperature < NEUTRAL.temperature

    def test_elevation_scheme_queries_provider(self, make_config, adjuster, channel):
        clock = lambda: datetime(2000, 1, 1, 12, tzinfo=timezone.utc)  # noqa: E731
        loop = DaemonLoop(make_config(scheme=ElevationRange()), ManualProvider(), adjuster, channel, clock)
        loop.tick()
        assert loop.state.info.elevation == pytest.approx(66.95, abs=0.1)


class TestSleepDuration:

    def test_steady_state(self, make_config, adjuster, channel, noon_clock):
        config = make_config(sleep_duration=5000, sleep_duration_short=100)
        loop = DaemonLoop(config, ManualProvider(), adjuster, channel, noon_clock)
        assert loop.sleep_duration() == 5.0

    def test_fading(self, make_config, adjuster, channel, noon_clock):
        config = make_config(sleep_duration=5000, sleep_duration_short=100)
        loop = DaemonLoop(config, ManualProvider(), adjuster, channel, noon_clock)
        loop.state.fade = FadeStatus.ungoing(3)
        assert loop.sleep_duration() == 0.1

    def test_fading_while_interrupted(self, make_config, adjuster, channel, noon_clock):
        config = make_config(sleep_duration=5000, sleep_duration_short=100)
        loop = DaemonLoop(config, ManualProvider(), adjuster, channel, noon_clock)
        loop.state.signal = Signal.INTERRUPT
        loop.state.fade = FadeStatus.ungoing(3)
        assert loop.sleep_duration() == 0.1

    def test_done(self, make_config, adjuster, channel, noon_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, noon_clock)
        loop.state.signal = Signal.INTERRUPT
        assert loop.sleep_duration() is None


class TestWait:

    def test_timeout_keeps_running(self, make_config, adjuster, channel, noon_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, noon_clock)
        assert loop.wait(0) is True
        assert loop.state.signal == Signal.NONE

    def test_first_event_interrupts(self, make_config, adjuster, channel, noon_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, noon_clock)
        channel.put(CANCEL)
        assert loop.wait(0) is True
        assert loop.state.signal == Signal.INTERRUPT

    def test_second_event_stops(self, make_config, adjuster, channel, noon_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, noon_clock)
        channel.put(CANCEL)
        channel.put(CANCEL)
        assert loop.wait(0) is True
        assert loop.wait(0) is False


class TestRun:
    """Tests for the full loop and its shutdown sequence."""

    def test_steady_state_then_interrupt(self, make_config, adjuster, channel, noon_clock):
        """Already neutral: the first interrupt ends the loop on the next tick."""
        channel.put(CANCEL)
        DaemonLoop(make_config(), ManualProvider(), adjuster, channel, noon_clock).run()

        assert adjuster.calls == [(False, NEUTRAL)]
        assert adjuster.restore_count == 1

    def test_interrupt_fades_back_to_neutral(self, make_config, adjuster, channel, midnight_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, midnight_clock)
        fade_until_completed(loop)
        applied_before = len(adjuster.calls)

        channel.put(CANCEL)
        loop.run()

        fade_back = adjuster.settings[applied_before:]
        assert fade_back[-1] == NEUTRAL
        assert len(fade_back) > 2
        assert [s.temperature for s in fade_back] == sorted(s.temperature for s in fade_back)
        assert loop.state.signal == Signal.INTERRUPT
        assert loop.state.fade.is_completed
        assert adjuster.restore_count == 1

    def test_second_interrupt_exits_mid_fade(self, make_config, adjuster, channel, midnight_clock):
        loop = DaemonLoop(make_config(), ManualProvider(), adjuster, channel, midnight_clock)
        fade_until_completed(loop)

        channel.put(CANCEL)
        channel.put(CANCEL)
        loop.run()

        assert not loop.state.fade.is_completed
        assert adjuster.settings[-1] == NIGHT
        assert adjuster.restore_count == 1

    def test_provider_error_propagates(self, make_config, adjuster, channel, noon_clock):
        loop = DaemonLoop(make_config(scheme=ElevationRange()), FailingProvider(), adjuster, channel, noon_clock)

        with pytest.raises(ProviderError):
            loop.run()

        assert adjuster.calls == []
        assert adjuster.restore_count == 0

    def test_adjuster_error_propagates(self, make_config, channel, noon_clock):
        failing = FailingAdjuster()
        loop = DaemonLoop(make_config(), ManualProvider(), failing, channel, noon_clock)

        with pytest.raises(AdjusterError):
            loop.run()

        assert failing.restore_count == 0
