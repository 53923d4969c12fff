"""
Dead Zone and Statistics Models
===============================

Derived, ephemeral results of a pipeline pass.

Dead zones are recomputed from scratch on every detection pass and have no
identity across passes. Statistics summarize the frozen sample log of the
last session together with the zones found in it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple

from signal_heatmap.models.grid import GridCoordinate
from signal_heatmap.models.quality import SignalQuality
from signal_heatmap.models.sample import Sample, Vector3


@dataclass(frozen=True, slots=True)
class DeadZone:
    """
    Cluster of weak cells.

    Attributes:
        center: Arithmetic mean of member cell positions
        radius: cell_size * sqrt(member_count)
        average_strength: Integer mean of member cell averages
        measurements: All samples of all member cells
        cells: Coordinates of the member cells, in cluster order
    """

    center: Vector3
    radius: float
    average_strength: int
    measurements: Tuple[Sample, ...]
    cells: Tuple[GridCoordinate, ...]

    @property
    def member_count(self) -> int:
        return len(self.cells)

    @property
    def description(self) -> str:
        return f"Dead zone: {self.average_strength} dBm"

    def __repr__(self) -> str:
        x, y, z = self.center
        return (
            f"DeadZone(center=({x:.3f}, {y:.3f}, {z:.3f}), "
            f"radius={self.radius:.3f}, avg={self.average_strength}, "
            f"members={self.member_count})"
        )


@dataclass(frozen=True, slots=True)
class HeatmapStatistics:
    """
    Summary metrics for a recorded session.

    min/max/average are None when no samples were recorded; see ``empty``.

    Attributes:
        total_samples: Number of raw samples
        average_strength: Integer mean of raw strengths
        min_strength: Weakest raw reading
        max_strength: Strongest raw reading
        coverage_area: Distinct occupied grid coordinates * cell_size²
        dead_zones: Zones found in the same pass
        started_at: Session start time
        duration_seconds: Session wall-clock duration
        quality_distribution: Raw sample count per quality level
    """

    total_samples: int = 0
    average_strength: Optional[int] = None
    min_strength: Optional[int] = None
    max_strength: Optional[int] = None
    coverage_area: float = 0.0
    dead_zones: Tuple[DeadZone, ...] = ()
    started_at: Optional[datetime] = None
    duration_seconds: float = 0.0
    quality_distribution: Dict[SignalQuality, int] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "HeatmapStatistics":
        """Neutral statistics value for an empty sample log."""
        return cls()

    @property
    def dead_zone_count(self) -> int:
        return len(self.dead_zones)

    @property
    def is_empty(self) -> bool:
        return self.total_samples == 0

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "total_samples": self.total_samples,
            "average_strength": self.average_strength,
            "min_strength": self.min_strength,
            "max_strength": self.max_strength,
            "coverage_area": round(self.coverage_area, 4),
            "dead_zone_count": self.dead_zone_count,
            "duration_seconds": round(self.duration_seconds, 3),
        }
