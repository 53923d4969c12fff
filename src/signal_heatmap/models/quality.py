"""
Signal Quality
==============

Strength normalization and quality classification.

The engine treats strength as an opaque ordered reading in dBm. These
helpers only map it onto display-friendly scales:

    normalized = clamp((strength - MIN_STRENGTH) / (MAX_STRENGTH - MIN_STRENGTH), 0, 1)

Quality bands (dBm):
    EXCELLENT: [-30, 0]
    GOOD:      [-50, -30)
    FAIR:      [-70, -50)
    WEAK:      [-80, -70)
    POOR:      everything else
"""

from enum import Enum
from typing import Tuple


MIN_STRENGTH = -100
MAX_STRENGTH = -30


class SignalQuality(str, Enum):
    """Discrete signal quality levels, best first."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    WEAK = "WEAK"
    POOR = "POOR"


def normalize_strength(strength: float) -> float:
    """Map a strength reading onto [0, 1], clamped."""
    normalized = (strength - MIN_STRENGTH) / (MAX_STRENGTH - MIN_STRENGTH)
    return max(0.0, min(1.0, float(normalized)))


def classify_strength(strength: int) -> SignalQuality:
    """Return the quality band a strength reading falls in."""
    if -30 <= strength <= 0:
        return SignalQuality.EXCELLENT
    if -50 <= strength < -30:
        return SignalQuality.GOOD
    if -70 <= strength < -50:
        return SignalQuality.FAIR
    if -80 <= strength < -70:
        return SignalQuality.WEAK
    return SignalQuality.POOR


def strength_to_percentage(strength: int) -> int:
    """Integer percentage (0-100) of the normalized range."""
    percentage = ((strength - MIN_STRENGTH) * 100) // (MAX_STRENGTH - MIN_STRENGTH)
    return max(0, min(100, percentage))


def strength_to_color(strength: float) -> Tuple[float, float, float, float]:
    """
    RGBA color for a strength reading.

    Red (weak) blends to yellow at the midpoint, then to green (strong).
    Alpha is fixed at 0.7 for overlay rendering.
    """
    value = normalize_strength(strength)
    if value < 0.5:
        return (1.0, value * 2, 0.0, 0.7)
    factor = (value - 0.5) * 2
    return (1.0 - factor, 1.0, 0.0, 0.7)
