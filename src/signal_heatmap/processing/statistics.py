"""
Statistics Calculator
=====================

Summary metrics for a finished session.

Derived from:
    - The frozen raw sample log (counts, strengths, coverage)
    - The session start/stop times (duration)
    - The dead zones of the same pipeline pass

Coverage area counts distinct grid coordinates occupied by RAW samples,
so interpolated cells do not inflate it:

    coverage_area = |{to_grid(p) for raw samples}| * cell_size²
"""

import logging
from collections import Counter
from typing import Sequence

import numpy as np

from signal_heatmap.grid.index import GridIndex
from signal_heatmap.models.grid import round_half_away
from signal_heatmap.models.zones import DeadZone, HeatmapStatistics
from signal_heatmap.store.sample_store import RecordingSession


logger = logging.getLogger(__name__)


class StatisticsCalculator:
    """Computes HeatmapStatistics from a session and its dead zones."""

    def __init__(self, grid: GridIndex) -> None:
        self.grid = grid

    def compute(
        self,
        session: RecordingSession,
        dead_zones: Sequence[DeadZone] = (),
    ) -> HeatmapStatistics:
        """
        Compute statistics.

        Returns:
            HeatmapStatistics.empty() if the session has no raw samples.
        """
        samples = [s for s in session.samples if not s.synthetic]
        if not samples:
            return HeatmapStatistics.empty()

        strengths = np.asarray([s.strength for s in samples], dtype=np.int64)
        occupied = {self.grid.to_grid(s.position) for s in samples}
        distribution = Counter(s.quality_level for s in samples)

        stats = HeatmapStatistics(
            total_samples=len(samples),
            average_strength=round_half_away(float(strengths.mean())),
            min_strength=int(strengths.min()),
            max_strength=int(strengths.max()),
            coverage_area=len(occupied) * self.grid.cell_area(),
            dead_zones=tuple(dead_zones),
            started_at=session.started_at,
            duration_seconds=session.duration_seconds,
            quality_distribution=dict(distribution),
        )
        logger.debug(f"Statistics: {stats.to_dict()}")
        return stats
