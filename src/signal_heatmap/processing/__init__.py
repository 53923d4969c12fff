"""
Processing Module
=================

Post-recording stages that turn raw cells into a coverage map.

This module provides:
    - Interpolator: Inverse-distance gap filling
    - Smoother: Neighborhood blending
    - DeadZoneDetector: Weak-cell clustering
    - StatisticsCalculator: Session summary
    - HeatmapPipeline: Runs the stages in order
"""

from signal_heatmap.processing.interpolation import Interpolator
from signal_heatmap.processing.smoothing import Smoother
from signal_heatmap.processing.dead_zones import DeadZoneDetector
from signal_heatmap.processing.statistics import StatisticsCalculator
from signal_heatmap.processing.pipeline import HeatmapPipeline, HeatmapResult

__all__ = [
    "Interpolator",
    "Smoother",
    "DeadZoneDetector",
    "StatisticsCalculator",
    "HeatmapPipeline",
    "HeatmapResult",
]
