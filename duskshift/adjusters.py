"""
Display adjustment methods.

Two variants exist:
- dummy: does not touch the display, logs every setting instead
- gammarelay: drives the wl-gammarelay-rs D-Bus service through busctl

Both expose set(reset_ramps, settings) and restore().
"""

import subprocess
from statistics import fmean
from typing import Optional, Union

from duskshift.logger import logger
from duskshift.types import ColorSettings

GAMMARELAY_SERVICE = "rs.wl-gammarelay"
GAMMARELAY_OBJECT = "/"
GAMMARELAY_INTERFACE = "rs.wl.gammarelay"


class AdjusterError(RuntimeError):
    """Raised when the display cannot be adjusted or restored."""


class DummyAdjuster:
    """
    Adjuster that only logs.

    Drop-in replacement for a real method when no display should change.
    """

    name = "dummy"

    def __init__(self):
        self.last_settings: Optional[ColorSettings] = None
        self.set_count = 0
        self.restored = False

    def set(self, reset_ramps: bool, settings: ColorSettings) -> None:
        self.last_settings = settings
        self.set_count += 1
        logger.info(f"[DUMMY] {settings} (reset_ramps={reset_ramps})")

    def restore(self) -> None:
        self.restored = True
        logger.debug("[DUMMY] Restore")


class GammaRelayAdjuster:
    """
    Adjuster for Wayland compositors running wl-gammarelay-rs.

    The relay exposes a single gamma value, so per-channel gamma is
    averaged. Ramps are always written from scratch by the relay,
    reset_ramps has no effect.
    """

    name = "gammarelay"

    def __init__(self, busctl: str = "busctl"):
        self.busctl = busctl

    def _set_property(self, prop: str, signature: str, value: str) -> None:
        cmd = [
            self.busctl, "--user", "set-property",
            GAMMARELAY_SERVICE, GAMMARELAY_OBJECT, GAMMARELAY_INTERFACE,
            prop, signature, value,
        ]
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode(errors="replace").strip() if e.stderr else ""
            raise AdjusterError(f"Failed to set {prop} on wl-gammarelay: {stderr or e}") from e
        except OSError as e:
            raise AdjusterError(f"Unable to run {self.busctl}: {e}") from e

    def set(self, reset_ramps: bool, settings: ColorSettings) -> None:
        self._set_property("Temperature", "q", str(settings.temperature))
        self._set_property("Brightness", "d", f"{settings.brightness:.4f}")
        self._set_property("Gamma", "d", f"{fmean(settings.gamma):.4f}")

    def restore(self) -> None:
        self.set(True, ColorSettings())


Adjuster = Union[DummyAdjuster, GammaRelayAdjuster]

METHODS = ("dummy", "gammarelay")


def build_adjuster(method: str) -> Adjuster:
    """
    Create the adjuster for a method name.

    Raises:
        ValueError: If the method is unknown
    """
    if method == "dummy":
        return DummyAdjuster()
    if method == "gammarelay":
        return GammaRelayAdjuster()
    raise ValueError(f"Unknown adjustment method '{method}' (expected one of {', '.join(METHODS)})")
