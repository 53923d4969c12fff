"""
Heatmap Engine
==============

Single logical owner of the sample store, the pipeline and its results.

The capture feed calls ``record`` at its own cadence while user commands
call start / stop / clear / import. Control commands are serialized on one
lock; ``record`` only takes the store lock, and is rejected as soon as
``stop_recording`` has flipped the session flag. The pipeline runs on the
frozen session under the control lock, so a new session cannot start
while the previous one is still being processed.

Presentation clients pull snapshots (``cells``, ``dead_zones``,
``statistics``, ``snapshot``). Nothing is pushed.

Example:
    engine = HeatmapEngine(HeatmapConfiguration(cell_size=0.5))

    engine.start_recording()
    for position, strength in feed:
        engine.record(position, strength, ssid="office")
    engine.stop_recording()

    for zone in engine.dead_zones():
        print(zone.description)
"""

import logging
import math
import threading
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Union

from signal_heatmap.config import HeatmapConfiguration
from signal_heatmap.errors import DataFormatError
from signal_heatmap.grid.index import GridIndex
from signal_heatmap.models.grid import Cell
from signal_heatmap.models.output import (
    CellView,
    DeadZoneView,
    HeatmapSnapshot,
    StatisticsView,
)
from signal_heatmap.models.sample import Sample, utc_now
from signal_heatmap.models.zones import DeadZone, HeatmapStatistics
from signal_heatmap.persistence.codec import decode_samples, encode_samples
from signal_heatmap.processing.pipeline import HeatmapPipeline, HeatmapResult
from signal_heatmap.store.sample_store import RecordingSession, SampleStore


logger = logging.getLogger(__name__)


STATUS_READY = "Ready to map"
STATUS_RECORDING = "Recording..."


def _plural(count: int) -> str:
    return f"{count} sample{'' if count == 1 else 's'}"


class HeatmapEngine:
    """
    Recording session controller and snapshot provider.

    Attributes:
        config: Heatmap configuration; copied at stop/import time
    """

    def __init__(
        self,
        config: Optional[HeatmapConfiguration] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            config: Heatmap parameters (defaults if None)
            clock: Source of timezone-aware timestamps (for tests/replay)
        """
        self.config = config if config is not None else HeatmapConfiguration()
        self._clock = clock or utc_now
        self._control_lock = threading.RLock()
        self._store = SampleStore(GridIndex(self.config.cell_size))
        self._result = HeatmapResult.empty()
        self._status = STATUS_READY

    # -------------------------------------------------------------------------
    # Session control
    # -------------------------------------------------------------------------

    def start_recording(self) -> bool:
        """
        Start a session, clearing previous samples, cells and zones.

        Returns:
            False if a session is already active (no-op).
        """
        with self._control_lock:
            started = self._store.start_recording(
                self._clock(),
                grid=GridIndex(self.config.cell_size),
            )
            if started:
                self._result = HeatmapResult.empty()
                self._status = STATUS_RECORDING
            return started

    def record(
        self,
        position: Sequence[float],
        strength: int,
        ssid: Optional[str] = None,
        bssid: Optional[str] = None,
        frequency: Optional[float] = None,
    ) -> bool:
        """
        Record one reading at a position, timestamped by the engine clock.

        Returns:
            True if recorded, False if no session is active.

        Raises:
            ValueError: If the position is not three finite coordinates
                that fit the session grid; nothing is recorded
        """
        if len(position) != 3:
            raise ValueError("position must have exactly 3 coordinates")
        if not all(math.isfinite(v) for v in position):
            raise ValueError(f"position {tuple(position)!r} is not finite")
        sample = Sample(
            position=(float(position[0]), float(position[1]), float(position[2])),
            strength=int(strength),
            ssid=ssid,
            bssid=bssid,
            timestamp=self._clock(),
            frequency=frequency,
        )
        return self.record_sample(sample)

    def record_sample(self, sample: Sample) -> bool:
        """Record a pre-built sample. Returns False outside a session."""
        return self._store.record(sample)

    def stop_recording(self) -> Optional[HeatmapResult]:
        """
        Stop the session and run the pipeline on the frozen log.

        Returns:
            The pipeline result, or None if no session was active.
        """
        with self._control_lock:
            session = self._store.stop_recording(self._clock())
            if session is None:
                return None
            result = self._process(session)
            self._status = f"Recorded {_plural(len(session.samples))}"
            return result

    def clear(self) -> None:
        """Drop all samples, cells, zones and statistics."""
        with self._control_lock:
            self._store.clear()
            self._result = HeatmapResult.empty()
            self._status = STATUS_READY
        logger.info("Heatmap data cleared")

    def _process(self, session: RecordingSession) -> HeatmapResult:
        pipeline = HeatmapPipeline(self.config.model_copy())
        self._result = pipeline.run(session)
        return self._result

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def export_samples(self) -> bytes:
        """Serialize the raw sample log (JSON, recording order)."""
        return encode_samples(self._store.samples())

    def import_samples(self, data: Union[bytes, str]) -> HeatmapResult:
        """
        Replace the sample log with a serialized set and reprocess it.

        The payload is fully parsed before any state changes; a malformed
        payload leaves the engine untouched. Any active session ends.

        Raises:
            DataFormatError: If the payload cannot be parsed or a position
                cannot be quantized on the grid
        """
        samples = decode_samples(data)

        with self._control_lock:
            started_at = min((s.timestamp for s in samples), default=None)
            stopped_at = max((s.timestamp for s in samples), default=None)
            try:
                session = self._store.load(
                    samples,
                    started_at,
                    stopped_at,
                    grid=GridIndex(self.config.cell_size),
                )
            except ValueError as exc:
                logger.warning(f"Rejected sample payload: {exc}")
                raise DataFormatError(str(exc)) from exc
            result = self._process(session)
            self._status = f"Imported {_plural(len(samples))}"

        logger.info(f"Imported {len(samples)} samples")
        return result

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @property
    def is_recording(self) -> bool:
        return self._store.is_recording

    @property
    def status_message(self) -> str:
        return self._status

    def samples(self) -> List[Sample]:
        """Raw sample log."""
        return list(self._store.samples())

    def cells(self) -> List[Cell]:
        """Live cells while recording, processed cells otherwise."""
        if self._store.is_recording:
            return self._store.cells()
        return [cell.copy() for cell in self._result.cells]

    def dead_zones(self) -> List[DeadZone]:
        return list(self._result.dead_zones)

    def statistics(self) -> HeatmapStatistics:
        return self._result.statistics

    def snapshot(self) -> HeatmapSnapshot:
        """Complete read-only view for presentation clients."""
        return HeatmapSnapshot(
            is_recording=self.is_recording,
            status_message=self._status,
            cells=[CellView.from_cell(c) for c in self.cells()],
            dead_zones=[DeadZoneView.from_zone(z) for z in self.dead_zones()],
            statistics=StatisticsView.from_statistics(self.statistics()),
        )

    def metrics(self) -> dict:
        """Get engine metrics for observability."""
        return {
            **self._store.metrics(),
            "result_cell_count": len(self._result.cells),
            "dead_zone_count": len(self._result.dead_zones),
            "status": self._status,
        }
