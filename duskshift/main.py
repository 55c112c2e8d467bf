"""
duskshift entry point.

Adjusts the display color temperature according to the time of day or the
position of the sun. The mode is selected with the MODE environment
variable (see duskshift.config):
- daemon: continuously follow the day/night cycle until interrupted
- oneshot: apply the current period's settings once
- set: apply the day settings once
- reset: restore neutral settings
- print: log the solar elevation for the next 24 hours
"""

import queue
import sys
from datetime import datetime
from typing import Callable, Optional

from duskshift.adjusters import Adjuster, AdjusterError, DummyAdjuster, build_adjuster
from duskshift.config import Config, ConfigError, build_config
from duskshift.daemon import DaemonLoop, local_now
from duskshift.logger import logger
from duskshift.period import classify
from duskshift.providers import LocationProvider, ManualProvider, ProviderError
from duskshift.signals import install_signal_handlers
from duskshift.solar import elevation_table
from duskshift.types import ColorSettings, ElevationRange


# ============================================================================
# Modes
# ============================================================================

def run_daemon(config: Config, adjuster: Adjuster) -> None:
    channel = queue.SimpleQueue()
    install_signal_handlers(channel)
    DaemonLoop(config, config.provider, adjuster, channel).run()


def run_oneshot(
    config: Config,
    adjuster: Adjuster,
    clock: Callable[[], datetime] = local_now,
) -> ColorSettings:
    """Apply the settings of the current period once."""
    period, info = classify(config.scheme, clock(), config.provider)
    interp = config.colors.at(period.alpha)
    logger.info(f"{period}, {info}")
    logger.info(f"Setting {interp}")
    adjuster.set(config.reset_ramps, interp)
    return interp


def run_set(config: Config, adjuster: Adjuster) -> None:
    """Apply the day settings as-is."""
    logger.info(f"Setting {config.day}")
    adjuster.set(config.reset_ramps, config.day)


def run_reset(adjuster: Adjuster) -> None:
    logger.info("Resetting to neutral color settings")
    adjuster.set(True, ColorSettings())


def run_print(provider: LocationProvider, clock: Callable[[], datetime] = local_now) -> list[str]:
    """Log hourly solar elevations for the next 24 hours."""
    now = clock()
    location = provider.get()
    lines = ["Time     | Degree", "---------+-------"]
    for epoch, elevation in elevation_table(now.timestamp(), location):
        stamp = datetime.fromtimestamp(epoch, tz=now.tzinfo).strftime("%H:%M:%S")
        lines.append(f"{stamp} | {elevation:6.2f}")
    logger.info(f"Solar elevation at {location}:\n" + "\n".join(lines))
    return lines


def warn_about_defaults(config: Config, adjuster: Optional[Adjuster] = None) -> None:
    if (
        config.mode in ("daemon", "oneshot", "print")
        and isinstance(config.scheme, ElevationRange)
        and isinstance(config.provider, ManualProvider)
        and config.provider.location.is_default()
    ):
        logger.warning(f"Using default location ({config.provider.location})")

    if isinstance(adjuster, DummyAdjuster):
        logger.warning("Using dummy method! Display will not be affected")


def run(config: Config) -> None:
    """Dispatch to the configured mode."""
    if config.mode == "print":
        warn_about_defaults(config)
        run_print(config.provider)
        return

    adjuster = build_adjuster(config.method)
    warn_about_defaults(config, adjuster)

    if config.mode == "daemon":
        run_daemon(config, adjuster)
    elif config.mode == "oneshot":
        run_oneshot(config, adjuster)
    elif config.mode == "set":
        run_set(config, adjuster)
    elif config.mode == "reset":
        run_reset(adjuster)


# ============================================================================
# Entry point
# ============================================================================

def main() -> int:
    try:
        config = build_config()
    except ConfigError as e:
        logger.error(str(e))
        return 1

    try:
        run(config)
    except (ProviderError, AdjusterError) as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
