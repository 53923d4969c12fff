"""
Snapshot Models
===============

Read-only views of engine state for presentation clients.

The engine is pull-based: clients ask for the current cells, dead zones
and statistics and receive plain values. These pydantic models are the
JSON shape of those snapshots.

Output Contract:
    {
        "is_recording": false,
        "status_message": "Recorded 42 samples",
        "cells": [
            {
                "coordinate": [0, 4, -2],
                "position": {"x": 0.0, "y": 1.2, "z": -0.6},
                "sample_count": 3,
                "average_strength": -63,
                "average_normalized_strength": 0.53,
                "quality": "FAIR",
                "signal_percentage": 52,
                "interpolated": false,
                "color": [1.0, 1.0, 0.0, 0.7]
            }
        ],
        "dead_zones": [...],
        "statistics": {...}
    }
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from signal_heatmap.models.grid import Cell
from signal_heatmap.models.input import PositionModel
from signal_heatmap.models.quality import (
    SignalQuality,
    strength_to_color,
    strength_to_percentage,
)
from signal_heatmap.models.zones import DeadZone, HeatmapStatistics


def _position(vector) -> PositionModel:
    x, y, z = vector
    return PositionModel(x=x, y=y, z=z)


class CellView(BaseModel):
    """Aggregated grid cell."""

    coordinate: List[int] = Field(..., description="Integer grid coordinate")
    position: PositionModel = Field(..., description="World-space cell center")
    sample_count: int = Field(..., ge=1)
    average_strength: int
    average_normalized_strength: float = Field(..., ge=0.0, le=1.0)
    quality: SignalQuality
    signal_percentage: int = Field(..., ge=0, le=100)
    interpolated: bool = False
    color: List[float] = Field(..., description="RGBA overlay color")

    @classmethod
    def from_cell(cls, cell: Cell) -> "CellView":
        return cls(
            coordinate=list(cell.coordinate),
            position=_position(cell.position),
            sample_count=cell.sample_count,
            average_strength=cell.average_strength,
            average_normalized_strength=cell.average_normalized_strength,
            quality=cell.quality_level,
            signal_percentage=strength_to_percentage(cell.average_strength),
            interpolated=cell.interpolated,
            color=list(strength_to_color(cell.average_strength)),
        )


class DeadZoneView(BaseModel):
    """Detected dead zone."""

    center: PositionModel
    radius: float = Field(..., ge=0.0)
    average_strength: int
    member_count: int = Field(..., ge=1)
    measurement_count: int = Field(..., ge=0)
    description: str

    @classmethod
    def from_zone(cls, zone: DeadZone) -> "DeadZoneView":
        return cls(
            center=_position(zone.center),
            radius=zone.radius,
            average_strength=zone.average_strength,
            member_count=zone.member_count,
            measurement_count=len(zone.measurements),
            description=zone.description,
        )


class StatisticsView(BaseModel):
    """Session statistics."""

    total_samples: int = Field(default=0, ge=0)
    average_strength: Optional[int] = None
    min_strength: Optional[int] = None
    max_strength: Optional[int] = None
    coverage_area: float = Field(default=0.0, ge=0.0, description="Square meters")
    dead_zone_count: int = Field(default=0, ge=0)
    started_at: Optional[datetime] = None
    duration_seconds: float = Field(default=0.0, ge=0.0)
    quality_distribution: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_statistics(cls, stats: HeatmapStatistics) -> "StatisticsView":
        return cls(
            total_samples=stats.total_samples,
            average_strength=stats.average_strength,
            min_strength=stats.min_strength,
            max_strength=stats.max_strength,
            coverage_area=stats.coverage_area,
            dead_zone_count=stats.dead_zone_count,
            started_at=stats.started_at,
            duration_seconds=stats.duration_seconds,
            quality_distribution={
                level.value: count for level, count in stats.quality_distribution.items()
            },
        )


class HeatmapSnapshot(BaseModel):
    """Complete engine snapshot."""

    is_recording: bool
    status_message: str
    cells: List[CellView] = Field(default_factory=list)
    dead_zones: List[DeadZoneView] = Field(default_factory=list)
    statistics: StatisticsView = Field(default_factory=StatisticsView)
