"""
Daemon state record.

Owned exclusively by the daemon loop (single thread), so unlike a shared
status object it needs no lock.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from duskshift.fade import FadeStatus
from duskshift.period import Period, PeriodInfo
from duskshift.types import ColorSettings


class Signal(str, Enum):
    """Cancellation state of the daemon."""
    NONE = "none"  # Running normally
    INTERRUPT = "interrupt"  # Fading back to neutral before exiting


@dataclass
class DaemonState:
    """Everything the daemon loop carries from one tick to the next."""

    signal: Signal = Signal.NONE
    fade: FadeStatus = field(default_factory=FadeStatus.completed)

    period: Optional[Period] = None
    info: Optional[PeriodInfo] = None
    interp: ColorSettings = field(default_factory=ColorSettings)

    # Previous tick, used to skip redundant adjuster calls and log lines
    prev_period: Optional[Period] = None
    prev_info: Optional[PeriodInfo] = None
    prev_interp: Optional[ColorSettings] = None

    def remember(self) -> None:
        """Store the current tick's values as the previous ones."""
        self.prev_period = self.period
        self.prev_info = self.info
        self.prev_interp = self.interp

