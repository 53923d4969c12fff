"""
Interpolator
============

Fills empty cells near sampled ones using inverse-distance weighting.

For each existing cell, every empty coordinate inside the search cube
(half-width ``search_radius`` cells) becomes a candidate. A candidate is
filled from the RAW samples lying within ``3 * cell_size`` of its center:

    w_i = 1 / max(d_i, epsilon)
    strength = round(sum(w_i * s_i) / sum(w_i))

Candidates with no raw sample in range stay empty. Existing cells are
never overwritten, and cells created in a pass do not seed further
candidates in the same pass.
"""

import logging
from typing import Dict, Optional, Sequence

import numpy as np

from signal_heatmap.grid.index import GridIndex
from signal_heatmap.models.grid import Cell, GridCoordinate, round_half_away
from signal_heatmap.models.sample import Sample


logger = logging.getLogger(__name__)


# Search distance for contributing samples, in cell sizes
SEARCH_DISTANCE_CELLS = 3.0

# Lower bound on distances in the weight denominator (m)
WEIGHT_EPSILON = 0.01


class Interpolator:
    """
    Inverse-distance-weighted gap filler.

    Attributes:
        grid: Grid index of the cells being filled
        search_radius: Candidate cube half-width in cells
        epsilon: Minimum distance used for weights
    """

    def __init__(
        self,
        grid: GridIndex,
        search_radius: int = 2,
        epsilon: float = WEIGHT_EPSILON,
    ) -> None:
        if search_radius < 0:
            raise ValueError("search_radius must be non-negative")
        self.grid = grid
        self.search_radius = search_radius
        self.epsilon = epsilon
        self.max_distance = SEARCH_DISTANCE_CELLS * grid.cell_size

    def apply(
        self,
        cells: Dict[GridCoordinate, Cell],
        raw_samples: Sequence[Sample],
    ) -> Dict[GridCoordinate, Cell]:
        """
        Return a new cell map with interpolated cells added.

        Args:
            cells: Cell map before interpolation (not modified)
            raw_samples: Recorded samples; synthetic ones are ignored

        Returns:
            Original cells in their order, followed by new cells in
            discovery order.
        """
        result = dict(cells)
        raw = [s for s in raw_samples if not s.synthetic]
        if not cells or not raw or self.search_radius == 0:
            return result

        positions = np.asarray([s.position for s in raw], dtype=float)
        strengths = np.asarray([s.strength for s in raw], dtype=float)

        visited = set()
        created = 0
        for coordinate in cells:
            for candidate in self.grid.neighborhood(coordinate, self.search_radius):
                if candidate in cells or candidate in visited:
                    continue
                visited.add(candidate)

                sample = self._interpolate_at(candidate, raw, positions, strengths)
                if sample is None:
                    continue
                result[candidate] = Cell(
                    coordinate=candidate,
                    position=sample.position,
                    samples=[sample],
                    interpolated=True,
                )
                created += 1

        logger.debug(
            f"Interpolation: {len(visited)} candidates, {created} cells created"
        )
        return result

    def _interpolate_at(
        self,
        coordinate: GridCoordinate,
        raw: Sequence[Sample],
        positions: np.ndarray,
        strengths: np.ndarray,
    ) -> Optional[Sample]:
        center = self.grid.to_world(coordinate)
        distances = np.linalg.norm(positions - np.asarray(center), axis=1)
        in_range = distances < self.max_distance
        if not np.any(in_range):
            return None

        weights = 1.0 / np.maximum(distances[in_range], self.epsilon)
        value = float(np.sum(weights * strengths[in_range]) / np.sum(weights))

        # Labels come from the closest contributor
        candidates = np.flatnonzero(in_range)
        nearest = raw[int(candidates[np.argmin(distances[in_range])])]

        return Sample(
            position=center,
            strength=round_half_away(value),
            ssid=nearest.ssid,
            bssid=nearest.bssid,
            timestamp=nearest.timestamp,
            frequency=nearest.frequency,
            synthetic=True,
        )
