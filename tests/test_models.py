"""
Model Tests
===========

Samples, cells, quality helpers and configuration clamping.
"""

from datetime import datetime, timedelta, timezone

import pytest

from signal_heatmap.config import HeatmapConfiguration
from signal_heatmap.models.grid import Cell, GridCoordinate
from signal_heatmap.models.quality import (
    SignalQuality,
    classify_strength,
    normalize_strength,
    strength_to_color,
    strength_to_percentage,
)
from signal_heatmap.models.sample import Sample
from signal_heatmap.models.zones import HeatmapStatistics


class TestQuality:
    """Tests for strength normalization and classification."""

    def test_normalize_is_clamped(self):
        assert normalize_strength(-100) == 0.0
        assert normalize_strength(-30) == 1.0
        assert normalize_strength(-65) == pytest.approx(0.5)
        assert normalize_strength(-150) == 0.0
        assert normalize_strength(20) == 1.0

    @pytest.mark.parametrize(
        "strength, level",
        [
            (-30, SignalQuality.EXCELLENT),
            (0, SignalQuality.EXCELLENT),
            (-31, SignalQuality.GOOD),
            (-50, SignalQuality.GOOD),
            (-51, SignalQuality.FAIR),
            (-70, SignalQuality.FAIR),
            (-75, SignalQuality.WEAK),
            (-80, SignalQuality.WEAK),
            (-81, SignalQuality.POOR),
            (5, SignalQuality.POOR),
        ],
    )
    def test_classify(self, strength, level):
        assert classify_strength(strength) == level

    def test_percentage(self):
        assert strength_to_percentage(-100) == 0
        assert strength_to_percentage(-30) == 100
        assert strength_to_percentage(-10) == 100
        assert strength_to_percentage(-65) == 50

    def test_color_gradient(self):
        assert strength_to_color(-100) == (1.0, 0.0, 0.0, 0.7)
        assert strength_to_color(-30) == (0.0, 1.0, 0.0, 0.7)
        red, green, blue, _ = strength_to_color(-65)
        assert red == pytest.approx(1.0)
        assert green == pytest.approx(1.0)
        assert blue == 0.0


class TestSample:
    """Tests for Sample."""

    def test_sample_is_immutable(self):
        sample = Sample(position=(0.0, 0.0, 0.0), strength=-50)
        with pytest.raises(AttributeError):
            sample.strength = -10

    def test_defaults(self):
        sample = Sample(position=(1.0, 2.0, 3.0), strength=-50)
        assert sample.id
        assert sample.timestamp.tzinfo is not None
        assert sample.synthetic is False
        assert sample.ssid is None and sample.bssid is None

    def test_unique_ids(self):
        a = Sample(position=(0.0, 0.0, 0.0), strength=-50)
        b = Sample(position=(0.0, 0.0, 0.0), strength=-50)
        assert a.id != b.id


class TestCell:
    """Tests for Cell aggregation."""

    def test_requires_samples(self):
        with pytest.raises(ValueError):
            Cell(GridCoordinate(0, 0, 0), (0.0, 0.0, 0.0), [])

    def test_average_strength_of_colocated_samples(self):
        samples = [
            Sample(position=(0.0, 0.0, 0.0), strength=-40),
            Sample(position=(0.05, 0.0, 0.0), strength=-60),
            Sample(position=(0.0, 0.05, 0.0), strength=-90),
        ]
        cell = Cell(GridCoordinate(0, 0, 0), (0.0, 0.0, 0.0), samples)
        assert cell.average_strength == -63
        assert cell.sample_count == 3

    def test_add_sample_invalidates_cache(self):
        cell = Cell(
            GridCoordinate(0, 0, 0),
            (0.0, 0.0, 0.0),
            [Sample(position=(0.0, 0.0, 0.0), strength=-40)],
        )
        assert cell.average_strength == -40
        cell.add_sample(Sample(position=(0.0, 0.0, 0.0), strength=-80))
        assert cell.average_strength == -60
        assert cell.average_normalized_strength == pytest.approx(
            (normalize_strength(-40) + normalize_strength(-80)) / 2
        )

    def test_normalized_average_stays_in_unit_range(self):
        cell = Cell(
            GridCoordinate(0, 0, 0),
            (0.0, 0.0, 0.0),
            [
                Sample(position=(0.0, 0.0, 0.0), strength=-200),
                Sample(position=(0.0, 0.0, 0.0), strength=50),
            ],
        )
        assert 0.0 <= cell.average_normalized_strength <= 1.0

    def test_latest_sample(self):
        t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
        old = Sample(position=(0.0, 0.0, 0.0), strength=-40, ssid="old", timestamp=t0)
        new = Sample(
            position=(0.0, 0.0, 0.0),
            strength=-45,
            ssid="new",
            timestamp=t0 + timedelta(seconds=5),
        )
        cell = Cell(GridCoordinate(0, 0, 0), (0.0, 0.0, 0.0), [new, old])
        assert cell.latest_sample.ssid == "new"

    def test_copy_is_independent(self):
        cell = Cell(
            GridCoordinate(0, 0, 0),
            (0.0, 0.0, 0.0),
            [Sample(position=(0.0, 0.0, 0.0), strength=-40)],
        )
        clone = cell.copy()
        clone.add_sample(Sample(position=(0.0, 0.0, 0.0), strength=-80))
        assert cell.sample_count == 1
        assert clone.sample_count == 2


class TestConfiguration:
    """Tests for HeatmapConfiguration clamping."""

    def test_defaults(self):
        config = HeatmapConfiguration()
        assert config.cell_size == 0.3
        assert config.smoothing_factor == 0.5
        assert config.interpolation_enabled is True
        assert config.interpolation_radius == 2
        assert config.dead_zone_threshold == -75
        assert config.cluster_distance == pytest.approx(0.6)
        assert config.min_cluster_size == 3
        assert config.sampling_interval == 1.0

    def test_construction_clamps(self):
        config = HeatmapConfiguration(
            cell_size=-1.0,
            smoothing_factor=3.0,
            interpolation_radius=50,
            dead_zone_threshold=-500,
            min_cluster_size=0,
            sampling_interval=0.0,
        )
        assert config.cell_size == 0.01
        assert config.smoothing_factor == 1.0
        assert config.interpolation_radius == 10
        assert config.dead_zone_threshold == -100
        assert config.min_cluster_size == 1
        assert config.sampling_interval == 0.05

    def test_assignment_clamps(self):
        config = HeatmapConfiguration()
        config.smoothing_factor = -0.5
        config.cluster_distance = -2.0
        assert config.smoothing_factor == 0.0
        assert config.cluster_distance == 0.0

    def test_in_range_values_are_kept(self):
        config = HeatmapConfiguration(smoothing_factor=0.25, cell_size=0.5)
        assert config.smoothing_factor == 0.25
        assert config.cell_size == 0.5


class TestStatisticsModel:
    """Tests for HeatmapStatistics."""

    def test_empty_is_neutral(self):
        stats = HeatmapStatistics.empty()
        assert stats.is_empty
        assert stats.total_samples == 0
        assert stats.average_strength is None
        assert stats.dead_zone_count == 0
        assert stats.coverage_area == 0.0
        assert stats.to_dict()["total_samples"] == 0


class TestLoadConfig:
    """Tests for YAML + environment configuration loading."""

    def test_yaml_values(self, tmp_path):
        from signal_heatmap.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text(
            "heatmap:\n"
            "  cell_size: 0.5\n"
            "  smoothing_factor: 9\n"
            "server:\n"
            "  port: 9100\n"
        )
        loaded = load_config(str(path))
        assert loaded.heatmap.cell_size == 0.5
        assert loaded.heatmap.smoothing_factor == 1.0
        assert loaded.server.port == 9100

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        from signal_heatmap.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text("heatmap:\n  min_cluster_size: 4\n")
        monkeypatch.setenv("HEATMAP_MIN_CLUSTER_SIZE", "6")
        monkeypatch.setenv("HEATMAP_INTERPOLATION_ENABLED", "off")
        monkeypatch.setenv("HEATMAP_CELL_SIZE", "wide")

        loaded = load_config(str(path))
        assert loaded.heatmap.min_cluster_size == 6
        assert loaded.heatmap.interpolation_enabled is False
        assert loaded.heatmap.cell_size == 0.3

    def test_port_precedence(self, monkeypatch, tmp_path):
        from signal_heatmap.config import load_config

        monkeypatch.setenv("HEATMAP_PORT", "9000")
        monkeypatch.setenv("PORT", "9001")
        assert load_config(str(tmp_path / "missing.yaml")).server.port == 9001
