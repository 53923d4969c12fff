"""
Test Configuration
==================

Pytest fixtures and test configuration for the heatmap engine.
"""

from datetime import datetime, timedelta, timezone

import pytest


class StepClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    """Provide a deterministic one-second-step clock."""
    return StepClock()


@pytest.fixture
def plain_config():
    """Configuration with interpolation and smoothing disabled."""
    from signal_heatmap.config import HeatmapConfiguration

    return HeatmapConfiguration(
        cell_size=0.3,
        smoothing_factor=0.0,
        interpolation_enabled=False,
        dead_zone_threshold=-75,
        cluster_distance=0.6,
        min_cluster_size=3,
    )


@pytest.fixture
def grid():
    """Provide a 0.3 m grid index."""
    from signal_heatmap.grid import GridIndex

    return GridIndex(cell_size=0.3)


@pytest.fixture
def make_cell(grid):
    """Build a cell at a grid coordinate from raw strengths."""
    from signal_heatmap.models.grid import Cell, GridCoordinate
    from signal_heatmap.models.sample import Sample

    def _make(coordinate, *strengths, ssid=None):
        coord = GridCoordinate(*coordinate)
        position = grid.to_world(coord)
        samples = [Sample(position=position, strength=s, ssid=ssid) for s in strengths]
        return Cell(coordinate=coord, position=position, samples=samples)

    return _make


@pytest.fixture
def sample_payload():
    """Provide a serialized two-sample set."""
    return (
        b'[{"id": "a1", "position": {"x": 0.0, "y": 0.0, "z": 0.0}, "strength": -48,'
        b' "ssid": "office", "bssid": "aa:bb", "timestamp": "2026-01-01T00:00:00Z",'
        b' "frequency": 5.0},'
        b' {"id": "a2", "position": {"x": 0.3, "y": 0.0, "z": 0.0}, "strength": -52,'
        b' "timestamp": "2026-01-01T00:00:10Z"}]'
    )
