"""
Heatmap Pipeline
================

Post-recording processing, run once per stopped session.

Stage order (fixed, each stage completes before the next starts):
    1. Interpolator          (if interpolation_enabled)
    2. Smoother              (if smoothing_factor > 0)
    3. DeadZoneDetector
    4. StatisticsCalculator

Every stage returns a new structure; the session passed in is not
modified.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from signal_heatmap.config import HeatmapConfiguration
from signal_heatmap.models.grid import Cell
from signal_heatmap.models.zones import DeadZone, HeatmapStatistics
from signal_heatmap.processing.dead_zones import DeadZoneDetector
from signal_heatmap.processing.interpolation import Interpolator
from signal_heatmap.processing.smoothing import Smoother
from signal_heatmap.processing.statistics import StatisticsCalculator
from signal_heatmap.store.sample_store import RecordingSession


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HeatmapResult:
    """
    Published output of one pipeline pass.

    Attributes:
        cells: Final cells (recorded, interpolated, smoothed)
        dead_zones: Zones detected on the final cells
        statistics: Session statistics including the zones
    """

    cells: Tuple[Cell, ...]
    dead_zones: Tuple[DeadZone, ...]
    statistics: HeatmapStatistics

    @classmethod
    def empty(cls) -> "HeatmapResult":
        return cls(cells=(), dead_zones=(), statistics=HeatmapStatistics.empty())


class HeatmapPipeline:
    """
    Runs the processing stages over a frozen session.

    Example:
        pipeline = HeatmapPipeline(HeatmapConfiguration(smoothing_factor=0.3))
        result = pipeline.run(session)
        print(len(result.dead_zones))
    """

    def __init__(self, config: HeatmapConfiguration) -> None:
        self.config = config

    def run(self, session: RecordingSession) -> HeatmapResult:
        """Process a session into cells, dead zones and statistics."""
        config = self.config
        grid = session.grid
        cells = dict(session.cells)
        recorded = len(cells)

        if config.interpolation_enabled:
            cells = Interpolator(
                grid,
                search_radius=config.interpolation_radius,
            ).apply(cells, session.samples)

        if config.smoothing_factor > 0:
            cells = Smoother(grid, factor=config.smoothing_factor).apply(cells)

        dead_zones = DeadZoneDetector(
            cell_size=grid.cell_size,
            threshold=config.dead_zone_threshold,
            cluster_distance=config.cluster_distance,
            min_cluster_size=config.min_cluster_size,
        ).detect(cells.values())

        statistics = StatisticsCalculator(grid).compute(session, dead_zones)

        logger.info(
            f"Pipeline complete: {recorded} recorded cells, "
            f"{len(cells) - recorded} interpolated, "
            f"{len(dead_zones)} dead zones"
        )
        return HeatmapResult(
            cells=tuple(cells.values()),
            dead_zones=tuple(dead_zones),
            statistics=statistics,
        )
