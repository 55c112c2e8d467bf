"""
Fade state machine.

Turns a discontinuous change of target color settings into a bounded
sequence of intermediate settings, one per daemon tick.
"""

from dataclasses import dataclass
from typing import Optional

from duskshift.lighting_math import clamp, ease_fade
from duskshift.types import ColorSettings

FADE_STEPS = 40


@dataclass(frozen=True)
class FadeStatus:
    """Completed (step is None) or an ongoing fade at step 0..fade_steps."""

    step: Optional[int] = None

    @classmethod
    def completed(cls) -> "FadeStatus":
        return cls()

    @classmethod
    def ungoing(cls, step: int) -> "FadeStatus":
        return cls(step)

    @property
    def is_completed(self) -> bool:
        return self.step is None

    def __str__(self) -> str:
        return "Fade: completed" if self.is_completed else f"Fade: step {self.step}"


class FadeEngine:
    """
    Advances a fade by one step per call to next().

    Every step eases from the settings shown on the previous tick toward
    the current target, so a target that moves mid-fade is followed
    without a jump.
    """

    def __init__(self, fade_steps: int = FADE_STEPS, disable_fade: bool = False):
        if fade_steps < 1:
            raise ValueError(f"fade_steps must be at least 1, got {fade_steps}")
        self.fade_steps = fade_steps
        self.disable_fade = disable_fade

    def ease(self, start: ColorSettings, end: ColorSettings, step: int) -> ColorSettings:
        """Settings at the given fade step between start and end."""
        alpha = clamp(ease_fade(step / self.fade_steps))
        return start.interpolate(end, alpha)

    def next(
        self,
        current: ColorSettings,
        target: ColorSettings,
        status: FadeStatus,
    ) -> tuple[ColorSettings, FadeStatus]:
        """
        Compute the settings to show on this tick.

        Args:
            current: Settings shown on the previous tick
            target: Settings the period (or shutdown) asks for
            status: Fade status returned by the previous call

        Returns:
            (settings to show, new fade status)
        """
        if self.disable_fade or not current.is_very_different(target):
            return target, FadeStatus.completed()

        if status.is_completed:
            return self.ease(current, target, 0), FadeStatus.ungoing(0)

        if status.step < self.fade_steps:
            step = status.step + 1
            return self.ease(current, target, step), FadeStatus.ungoing(step)

        return target, FadeStatus.completed()
