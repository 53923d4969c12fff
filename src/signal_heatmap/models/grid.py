"""
Grid Models
===========

Sparse grid primitives: integer coordinates and the cells keyed by them.

Cells hold every sample that quantized to their coordinate. Aggregates are
computed lazily and cached until the sample list changes.
"""

import math
from typing import Iterable, List, NamedTuple, Optional

from signal_heatmap.models.quality import SignalQuality, classify_strength
from signal_heatmap.models.sample import Sample, Vector3


def round_half_away(value: float) -> int:
    """
    Round to nearest integer, halves away from zero.

    Raises:
        ValueError: If value is NaN or infinite
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value {value!r}")
    magnitude = abs(value)
    whole = math.floor(magnitude)
    # magnitude - whole is exact, unlike magnitude + 0.5
    if magnitude - whole >= 0.5:
        whole += 1
    return int(whole) if value >= 0 else -int(whole)


class GridCoordinate(NamedTuple):
    """Integer cell coordinate."""

    x: int
    y: int
    z: int

    def offset(self, dx: int, dy: int, dz: int) -> "GridCoordinate":
        return GridCoordinate(self.x + dx, self.y + dy, self.z + dz)


class Cell:
    """
    Aggregation bucket for one grid coordinate.

    A cell never exists without samples. Aggregates (average strength,
    average normalized strength, latest sample) are cached and invalidated
    on every ``add_sample``.

    Attributes:
        coordinate: Grid key of this cell
        position: World-space center (coordinate * cell_size)
        interpolated: True when the cell was synthesized by interpolation
    """

    __slots__ = (
        "coordinate",
        "position",
        "interpolated",
        "_samples",
        "_average",
        "_average_normalized",
        "_latest",
    )

    def __init__(
        self,
        coordinate: GridCoordinate,
        position: Vector3,
        samples: Iterable[Sample],
        interpolated: bool = False,
    ) -> None:
        self.coordinate = coordinate
        self.position = position
        self.interpolated = interpolated
        self._samples: List[Sample] = list(samples)
        if not self._samples:
            raise ValueError("Cell requires at least one sample")
        self._invalidate()

    def _invalidate(self) -> None:
        self._average: Optional[int] = None
        self._average_normalized: Optional[float] = None
        self._latest: Optional[Sample] = None

    def add_sample(self, sample: Sample) -> None:
        """Append a sample and drop cached aggregates."""
        self._samples.append(sample)
        self._invalidate()

    @property
    def samples(self) -> List[Sample]:
        """Copy of the sample list."""
        return list(self._samples)

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    @property
    def average_strength(self) -> int:
        """Integer mean strength of all samples."""
        if self._average is None:
            total = sum(s.strength for s in self._samples)
            self._average = round_half_away(total / len(self._samples))
        return self._average

    @property
    def average_normalized_strength(self) -> float:
        """Mean normalized strength, always within [0, 1]."""
        if self._average_normalized is None:
            total = sum(s.normalized_strength for s in self._samples)
            self._average_normalized = max(0.0, min(1.0, total / len(self._samples)))
        return self._average_normalized

    @property
    def latest_sample(self) -> Sample:
        """Most recent sample by timestamp."""
        if self._latest is None:
            self._latest = max(self._samples, key=lambda s: s.timestamp)
        return self._latest

    @property
    def quality_level(self) -> SignalQuality:
        return classify_strength(self.average_strength)

    def copy(self) -> "Cell":
        """Independent cell with the same samples."""
        return Cell(self.coordinate, self.position, self._samples, self.interpolated)

    def __repr__(self) -> str:
        return (
            f"Cell(coord={tuple(self.coordinate)}, samples={len(self._samples)}, "
            f"avg={self.average_strength}"
            f"{', interpolated' if self.interpolated else ''})"
        )
