"""
Sample Model
============

A single signal observation at a tracked 3D position.

Samples are produced by the capture feed, recorded into the SampleStore
and never mutated afterwards. Synthetic samples (created by interpolation
or smoothing) carry ``synthetic=True`` and never enter the raw sample log.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

from signal_heatmap.models.quality import (
    SignalQuality,
    classify_strength,
    normalize_strength,
)


Vector3 = Tuple[float, float, float]


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Sample:
    """
    Immutable signal observation.

    Attributes:
        position: World-space position (x, y, z) in meters
        strength: Signal strength in dBm, conventionally in [-100, 0]
        ssid: Optional network name
        bssid: Optional source identifier
        timestamp: Capture time (timezone-aware)
        frequency: Optional channel frequency in GHz
        id: Unique identifier
        synthetic: True for interpolated or smoothed samples
    """

    position: Vector3
    strength: int
    ssid: Optional[str] = None
    bssid: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)
    frequency: Optional[float] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    synthetic: bool = False

    @property
    def normalized_strength(self) -> float:
        """Signal quality from 0.0 (worst) to 1.0 (best)."""
        return normalize_strength(self.strength)

    @property
    def quality_level(self) -> SignalQuality:
        return classify_strength(self.strength)

    def __repr__(self) -> str:
        x, y, z = self.position
        return (
            f"Sample(pos=({x:.3f}, {y:.3f}, {z:.3f}), "
            f"strength={self.strength}, ssid={self.ssid!r}"
            f"{', synthetic' if self.synthetic else ''})"
        )
