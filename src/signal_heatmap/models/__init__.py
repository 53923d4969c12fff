"""
Data Models
===========

Core types and wire schemas for the heatmap engine.

Models:
    Core:
        - Sample: Immutable signal observation
        - GridCoordinate, Cell: Sparse grid primitives
        - DeadZone: Cluster of weak cells
        - HeatmapStatistics: Session summary
        - SignalQuality: Quality bands

    Input:
        - SampleRecord: Persistence contract for raw samples
        - RecordRequest: HTTP record body

    Output:
        - CellView, DeadZoneView, StatisticsView, HeatmapSnapshot
"""

from signal_heatmap.models.sample import Sample, Vector3
from signal_heatmap.models.grid import Cell, GridCoordinate
from signal_heatmap.models.quality import SignalQuality
from signal_heatmap.models.zones import DeadZone, HeatmapStatistics
from signal_heatmap.models.input import PositionModel, RecordRequest, SampleRecord
from signal_heatmap.models.output import (
    CellView,
    DeadZoneView,
    HeatmapSnapshot,
    StatisticsView,
)

__all__ = [
    # Core
    "Sample",
    "Vector3",
    "GridCoordinate",
    "Cell",
    "SignalQuality",
    "DeadZone",
    "HeatmapStatistics",
    # Input
    "PositionModel",
    "SampleRecord",
    "RecordRequest",
    # Output
    "CellView",
    "DeadZoneView",
    "StatisticsView",
    "HeatmapSnapshot",
]
