"""
Sample Store
============

Thread-safe owner of the raw sample log and the live cell map.

This module provides the SampleStore class, the interface between the
capture feed (which records samples) and the post-processing pipeline
(which consumes a frozen session).

Design Rules:
    - Single lock serializes record / start / stop / clear / load
    - Recording outside an active session is a silent no-op
    - Stopping flips the active flag and freezes the log in one step;
      records arriving afterwards are rejected
    - The frozen session holds copies, so the pipeline never shares
      mutable cells with the live map
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from signal_heatmap.grid.index import GridIndex
from signal_heatmap.models.grid import Cell, GridCoordinate
from signal_heatmap.models.sample import Sample


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordingSession:
    """
    Frozen snapshot of a finished session, handed to the pipeline.

    Attributes:
        samples: Raw sample log in recording order
        cells: Cell map at the moment of stopping (independent copies)
        grid: Grid index the cells were built with
        started_at: Session start
        stopped_at: Session end
    """

    samples: Tuple[Sample, ...]
    cells: Dict[GridCoordinate, Cell]
    grid: GridIndex
    started_at: Optional[datetime]
    stopped_at: Optional[datetime]

    @property
    def duration_seconds(self) -> float:
        if self.started_at is None or self.stopped_at is None:
            return 0.0
        return max(0.0, (self.stopped_at - self.started_at).total_seconds())


def _append(
    grid: GridIndex,
    samples: List[Sample],
    cells: Dict[GridCoordinate, Cell],
    sample: Sample,
) -> None:
    """Fold a sample into a log and cell map. Quantizes before mutating."""
    coordinate = grid.to_grid(sample.position)
    cell = cells.get(coordinate)
    if cell is None:
        cells[coordinate] = Cell(
            coordinate=coordinate,
            position=grid.to_world(coordinate),
            samples=[sample],
        )
    else:
        cell.add_sample(sample)
    samples.append(sample)


class SampleStore:
    """
    Append-only sample log plus the per-cell aggregate view.

    Attributes:
        grid: Grid index used to key cells
        is_recording: Whether a session is active

    Example:
        store = SampleStore(GridIndex(0.3))
        store.start_recording(utc_now())
        store.record(sample)
        session = store.stop_recording(utc_now())
    """

    def __init__(self, grid: GridIndex) -> None:
        self._grid = grid
        self._lock = threading.Lock()
        self._samples: List[Sample] = []
        self._cells: Dict[GridCoordinate, Cell] = {}
        self._recording: bool = False
        self._started_at: Optional[datetime] = None
        self._rejected_count: int = 0

    @property
    def grid(self) -> GridIndex:
        return self._grid

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    @property
    def rejected_count(self) -> int:
        """Record calls ignored because no session was active."""
        return self._rejected_count

    def start_recording(self, started_at: datetime, grid: Optional[GridIndex] = None) -> bool:
        """
        Begin a session, discarding prior samples and cells.

        Args:
            started_at: Session start time
            grid: Optional grid index to use for this session

        Returns:
            False if a session was already active (no-op), True otherwise.
        """
        with self._lock:
            if self._recording:
                return False
            if grid is not None:
                self._grid = grid
            self._samples = []
            self._cells = {}
            self._started_at = started_at
            self._recording = True
        logger.info(f"Recording started (cell_size={self._grid.cell_size})")
        return True

    def record(self, sample: Sample) -> bool:
        """
        Append a sample and fold it into its cell.

        Returns:
            True if recorded, False if no session is active.

        Raises:
            ValueError: If the position cannot be quantized (nothing is stored)
        """
        with self._lock:
            if not self._recording:
                self._rejected_count += 1
                return False
            _append(self._grid, self._samples, self._cells, sample)
        return True

    def stop_recording(self, stopped_at: datetime) -> Optional[RecordingSession]:
        """
        End the session and freeze the log.

        Returns:
            The frozen session, or None if no session was active.
        """
        with self._lock:
            if not self._recording:
                return None
            self._recording = False
            session = self._freeze(stopped_at)
        logger.info(
            f"Recording stopped: {len(session.samples)} samples, "
            f"{len(session.cells)} cells"
        )
        return session

    def load(
        self,
        samples: Iterable[Sample],
        started_at: Optional[datetime],
        stopped_at: Optional[datetime],
        grid: Optional[GridIndex] = None,
    ) -> RecordingSession:
        """
        Replace the log with an imported sample set and rebuild cells.

        Any active session is ended. The replacement happens under the
        lock, so observers see either the old or the new state.

        Raises:
            ValueError: If any position cannot be quantized; the store is
                left unchanged
        """
        with self._lock:
            target = grid if grid is not None else self._grid
            loaded: List[Sample] = []
            cells: Dict[GridCoordinate, Cell] = {}
            for sample in samples:
                _append(target, loaded, cells, sample)

            self._grid = target
            self._recording = False
            self._samples = loaded
            self._cells = cells
            self._started_at = started_at
            session = self._freeze(stopped_at)
        logger.info(
            f"Loaded {len(session.samples)} samples into {len(session.cells)} cells"
        )
        return session

    def _freeze(self, stopped_at: Optional[datetime]) -> RecordingSession:
        return RecordingSession(
            samples=tuple(self._samples),
            cells={coord: cell.copy() for coord, cell in self._cells.items()},
            grid=self._grid,
            started_at=self._started_at,
            stopped_at=stopped_at,
        )

    def clear(self) -> None:
        """Drop all samples and cells and end any session."""
        with self._lock:
            self._samples = []
            self._cells = {}
            self._recording = False
            self._started_at = None
            self._rejected_count = 0
        logger.info("Sample store cleared")

    def samples(self) -> Tuple[Sample, ...]:
        """Snapshot of the raw sample log."""
        with self._lock:
            return tuple(self._samples)

    def cells(self) -> List[Cell]:
        """Snapshot of the live cells, in creation order."""
        with self._lock:
            return [cell.copy() for cell in self._cells.values()]

    def metrics(self) -> dict:
        """
        Get store metrics for observability.

        Returns:
            Dict with recording flag, sample/cell counts and rejections
        """
        with self._lock:
            return {
                "is_recording": self._recording,
                "sample_count": len(self._samples),
                "cell_count": len(self._cells),
                "rejected_count": self._rejected_count,
            }
