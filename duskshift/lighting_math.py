"""
Mathematical helpers for smooth, non-flickering display transitions.
"""

import math

# Coefficients of the fade easing curve (ease-tween "ease" preset)
EASE_K1 = 1.0042954579734844
EASE_K2 = 6.404173895841566
EASE_K3 = 7.290824133098134


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation."""
    return (1.0 - t) * a + t * b


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def ease_fade(t: float) -> float:
    """
    Ease-in / ease-out curve used while fading between color settings.

    Starts and ends with a near-zero slope so the first and last fade steps
    are hard to notice. Returns exactly 0.0 for t <= 0 and 1.0 for t >= 1.
    """
    if t <= 0.0:
        return 0.0
    if t >= 1.0:
        return 1.0
    return EASE_K1 * math.exp(-EASE_K2 * math.exp(-EASE_K3 * t))
