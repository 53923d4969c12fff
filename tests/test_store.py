"""
Sample Store Tests
==================

Session lifecycle and the live cell map.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from signal_heatmap.grid import GridIndex
from signal_heatmap.models.grid import GridCoordinate
from signal_heatmap.models.sample import Sample
from signal_heatmap.store import SampleStore


T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _sample(x: float, strength: int) -> Sample:
    return Sample(position=(x, 0.0, 0.0), strength=strength)


class TestSessionLifecycle:
    """Tests for start / record / stop / clear."""

    def test_record_without_session_is_ignored(self, grid):
        store = SampleStore(grid)
        assert store.record(_sample(0.0, -50)) is False
        assert store.sample_count == 0
        assert store.cells() == []
        assert store.rejected_count == 1

    def test_start_is_idempotent(self, grid):
        store = SampleStore(grid)
        assert store.start_recording(T0) is True
        store.record(_sample(0.0, -50))
        assert store.start_recording(T0 + timedelta(seconds=3)) is False
        assert store.sample_count == 1
        assert store.started_at == T0

    def test_start_clears_previous_session(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        store.record(_sample(0.0, -50))
        store.stop_recording(T0 + timedelta(seconds=1))
        store.start_recording(T0 + timedelta(seconds=2))
        assert store.sample_count == 0
        assert store.cells() == []

    def test_records_group_into_cells(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        store.record(Sample(position=(0.0, 0.0, 0.0), strength=-40))
        store.record(Sample(position=(0.05, 0.0, 0.0), strength=-60))
        store.record(Sample(position=(0.0, 0.05, 0.0), strength=-90))
        store.record(Sample(position=(0.3, 0.0, 0.0), strength=-70))

        cells = store.cells()
        assert [c.coordinate for c in cells] == [GridCoordinate(0, 0, 0), GridCoordinate(1, 0, 0)]
        assert cells[0].average_strength == -63
        assert cells[0].sample_count == 3

    def test_stop_freezes_session(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        store.record(_sample(0.0, -50))
        store.record(_sample(0.3, -55))

        session = store.stop_recording(T0 + timedelta(seconds=12))

        assert session is not None
        assert len(session.samples) == 2
        assert len(session.cells) == 2
        assert session.duration_seconds == 12.0
        assert store.is_recording is False
        assert store.record(_sample(0.6, -60)) is False
        assert store.sample_count == 2

    def test_stop_without_session_returns_none(self, grid):
        store = SampleStore(grid)
        assert store.stop_recording(T0) is None

    def test_frozen_cells_are_copies(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        store.record(_sample(0.0, -50))
        session = store.stop_recording(T0)
        session.cells[GridCoordinate(0, 0, 0)].add_sample(_sample(0.0, -90))
        assert store.cells()[0].sample_count == 1

    def test_clear_resets_everything(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        store.record(_sample(0.0, -50))
        store.clear()
        assert store.is_recording is False
        assert store.sample_count == 0
        assert store.started_at is None
        assert store.metrics()["cell_count"] == 0

    def test_start_can_switch_grid(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0, grid=GridIndex(cell_size=1.0))
        store.record(_sample(0.4, -50))
        assert store.cells()[0].coordinate == GridCoordinate(0, 0, 0)
        assert store.grid.cell_size == 1.0

    def test_load_replaces_log(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        store.record(_sample(5.0, -50))
        session = store.load([_sample(0.0, -40), _sample(0.0, -60)], T0, T0)
        assert store.is_recording is False
        assert len(session.samples) == 2
        assert [c.average_strength for c in session.cells.values()] == [-50]


    def test_unquantizable_record_stores_nothing(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        store.record(_sample(0.0, -50))
        with pytest.raises(ValueError):
            store.record(_sample(1e308, -50))
        assert store.sample_count == 1
        assert store.metrics()["cell_count"] == 1
        session = store.stop_recording(T0)
        assert len(session.samples) == 1

    def test_failed_load_keeps_previous_state(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        store.record(_sample(0.0, -50))
        with pytest.raises(ValueError):
            store.load([_sample(0.3, -40), _sample(1e308, -60)], T0, T0, grid=GridIndex(1.0))
        assert store.is_recording is True
        assert store.grid is grid
        assert [s.strength for s in store.samples()] == [-50]
        assert [c.coordinate for c in store.cells()] == [GridCoordinate(0, 0, 0)]

class TestConcurrentRecording:
    """Records racing with stop never leak into the frozen session."""

    def test_stop_during_recording(self, grid):
        store = SampleStore(grid)
        store.start_recording(T0)
        accepted = []
        started = threading.Event()

        def producer():
            for i in range(5000):
                if store.record(_sample((i % 50) * 0.1, -50)):
                    accepted.append(i)
                if i == 100:
                    started.set()

        thread = threading.Thread(target=producer)
        thread.start()
        started.wait(timeout=5)
        session = store.stop_recording(T0 + timedelta(seconds=1))
        thread.join(timeout=10)

        assert session is not None
        assert len(session.samples) == len(accepted)
        assert sum(c.sample_count for c in session.cells.values()) == len(accepted)
        assert store.sample_count == len(accepted)
