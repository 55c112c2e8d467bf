"""
Bridge from OS signals to the daemon's cancellation channel.

The handler only enqueues an event; the daemon decides what an event
means (graceful fade on the first, immediate exit on the second).
SimpleQueue.put is reentrant, so it is safe to call from a signal handler.
"""

import queue
import signal

from duskshift.daemon import CANCEL
from duskshift.logger import logger

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_signal_handlers(channel: "queue.SimpleQueue") -> None:
    """Forward SIGINT and SIGTERM to the channel as cancellation events."""

    def shutdown_handler(signum, frame):
        channel.put(CANCEL)

    for signum in SHUTDOWN_SIGNALS:
        signal.signal(signum, shutdown_handler)
    logger.debug("Registered signal handlers for graceful shutdown")
