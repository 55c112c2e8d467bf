"""
Daemon scheduling loop.

Keeps track of the current time and continuously updates the display
toward the color settings of the current period:
- steady state: one tick every sleep_duration ms
- while fading: one tick every sleep_duration_short ms
- first cancellation event: fade back to neutral, then exit
- second cancellation event: exit immediately

The loop runs on the calling thread and only ever blocks in the timed
receive on the cancellation channel.
"""

import queue
from datetime import datetime
from typing import Callable, Optional

from duskshift.adjusters import Adjuster
from duskshift.config import Config
from duskshift.fade import FadeEngine
from duskshift.logger import logger
from duskshift.period import classify
from duskshift.providers import LocationProvider
from duskshift.state import DaemonState, Signal
from duskshift.types import ColorSettings

# Unit event put on the cancellation channel
CANCEL = object()


def local_now() -> datetime:
    return datetime.now().astimezone()


class DaemonLoop:
    """Drives the period classifier and fade engine on a timer."""

    def __init__(
        self,
        config: Config,
        provider: LocationProvider,
        adjuster: Adjuster,
        channel: "queue.SimpleQueue",
        clock: Callable[[], datetime] = local_now,
    ):
        """
        Initialize the daemon loop.

        Args:
            config: Validated configuration record
            provider: Location source for the elevation scheme
            adjuster: Display adjustment method
            channel: Queue delivering cancellation events (any item counts)
            clock: Returns the current timezone-aware time
        """
        self.config = config
        self.provider = provider
        self.adjuster = adjuster
        self.channel = channel
        self.clock = clock
        self.engine = FadeEngine(config.fade_steps, config.disable_fade)
        self.state = DaemonState()

    def tick(self) -> None:
        """Run one scheduling step: classify, pick target, fade, apply."""
        c = self.config
        s = self.state

        s.period, s.info = classify(c.scheme, self.clock(), self.provider)

        if s.signal == Signal.INTERRUPT:
            target = ColorSettings()
        else:
            target = c.colors.at(s.period.alpha)

        s.interp, s.fade = self.engine.next(s.interp, target, s.fade)

        self._log_changes()

        if s.interp != s.prev_interp:
            self.adjuster.set(c.reset_ramps, s.interp)

        s.remember()

    def sleep_duration(self) -> Optional[float]:
        """
        Seconds to wait before the next tick, or None when the loop is done.

        Any ongoing fade uses the short interval, even while interrupted.
        """
        s = self.state
        if not s.fade.is_completed:
            return self.config.sleep_duration_short / 1000.0
        if s.signal == Signal.NONE:
            return self.config.sleep_duration / 1000.0
        return None

    def wait(self, timeout: float) -> bool:
        """
        Block on the cancellation channel for up to timeout seconds.

        Returns:
            True if the loop should keep running
        """
        try:
            self.channel.get(timeout=timeout)
        except queue.Empty:
            return True

        if self.state.signal == Signal.NONE:
            logger.info("Interrupt received, fading back to neutral (interrupt again to exit now)")
            self.state.signal = Signal.INTERRUPT
            return True

        logger.info("Second interrupt received, exiting immediately")
        return False

    def run(self) -> None:
        """
        Main loop. Returns after a graceful or forced shutdown.

        The adjuster is restored exactly once, after the loop ends. Errors
        from the provider, classifier, adjuster or channel propagate and
        leave the display as it was last set.
        """
        logger.info("Daemon loop started")

        while True:
            self.tick()

            timeout = self.sleep_duration()
            if timeout is None:
                break
            if not self.wait(timeout):
                break

        self.adjuster.restore()
        logger.info("Daemon loop stopped")

    def _log_changes(self) -> None:
        s = self.state
        if s.period != s.prev_period:
            logger.info(str(s.period))
        if s.info != s.prev_info:
            logger.debug(str(s.info))
        if s.interp != s.prev_interp:
            logger.debug(f"{s.interp} ({s.fade})")
