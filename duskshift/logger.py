"""
Centralized logging configuration for duskshift.

Status lines (period changes, applied settings, fade progress) are INFO
and DEBUG records and go to stdout. Warnings about the configuration and
fatal errors go to stderr. Log level comes from LOG_LEVEL.
"""

import logging
import sys
from typing import Optional, TextIO

from duskshift.config import LOG_LEVEL

LOGGER_NAME = "duskshift"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LevelFilter(logging.Filter):
    """Pass only records whose level is within [level_min, level_max]."""

    def __init__(self, level_min: int, level_max: int):
        super().__init__()
        self.level_min = level_min
        self.level_max = level_max

    def filter(self, record: logging.LogRecord) -> bool:
        return self.level_min <= record.levelno <= self.level_max


def _stream_handler(stream: TextIO, level_min: int, level_max: int) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level_min)
    handler.addFilter(LevelFilter(level_min, level_max))
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = LOG_LEVEL,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the duskshift logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR), case-insensitive
        stdout: Stream for status lines (default sys.stdout)
        stderr: Stream for warnings and errors (default sys.stderr)

    Returns:
        The configured "duskshift" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False

    # Calling again replaces the handlers instead of stacking them
    logger.handlers.clear()
    logger.addHandler(_stream_handler(stdout or sys.stdout, logging.DEBUG, logging.INFO))
    logger.addHandler(_stream_handler(stderr or sys.stderr, logging.WARNING, logging.CRITICAL))

    return logger


logger = setup_logging()
