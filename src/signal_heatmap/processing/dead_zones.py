"""
Dead Zone Detection
===================

Clusters weak cells into dead zones.

Algorithm (single-linkage, single pass):
    1. Weak cells = cells with average_strength < threshold, in cell order
    2. Each unclaimed weak cell seeds a cluster and claims every other
       unclaimed weak cell within ``cluster_distance`` of the SEED
    3. Clusters with at least ``min_cluster_size`` members become zones;
       smaller clusters are dropped without touching the cell map

Membership is measured from the seed only, so chains of weak cells longer
than ``cluster_distance`` can split into several clusters depending on
cell order.

Zone geometry:
    center = mean(member positions)
    radius = cell_size * sqrt(member_count)
"""

import logging
import math
from typing import Iterable, List

import numpy as np

from signal_heatmap.grid.index import distance
from signal_heatmap.models.grid import Cell, round_half_away
from signal_heatmap.models.zones import DeadZone


logger = logging.getLogger(__name__)


# Absorbs float error on grid-aligned distances (m)
DISTANCE_TOLERANCE = 1e-9


class DeadZoneDetector:
    """
    Proximity clustering of weak cells.

    Attributes:
        cell_size: Grid cell size, used for zone radius
        threshold: Strength below which a cell is weak
        cluster_distance: Maximum seed-to-member distance (inclusive)
        min_cluster_size: Minimum members for a zone
    """

    def __init__(
        self,
        cell_size: float,
        threshold: int = -75,
        cluster_distance: float = 0.6,
        min_cluster_size: int = 3,
    ) -> None:
        if min_cluster_size < 1:
            raise ValueError("min_cluster_size must be >= 1")
        self.cell_size = cell_size
        self.threshold = threshold
        self.cluster_distance = cluster_distance
        self.min_cluster_size = min_cluster_size

    def detect(self, cells: Iterable[Cell]) -> List[DeadZone]:
        """Return dead zones found among the given cells, in seed order."""
        weak = [cell for cell in cells if cell.average_strength < self.threshold]
        claimed = set()
        zones: List[DeadZone] = []
        limit = self.cluster_distance + DISTANCE_TOLERANCE

        for seed in weak:
            if seed.coordinate in claimed:
                continue
            cluster = [seed]
            claimed.add(seed.coordinate)

            for other in weak:
                if other.coordinate in claimed:
                    continue
                if distance(seed.position, other.position) <= limit:
                    cluster.append(other)
                    claimed.add(other.coordinate)

            if len(cluster) >= self.min_cluster_size:
                zones.append(self._build_zone(cluster))

        logger.debug(
            f"Dead zone detection: {len(weak)} weak cells, {len(zones)} zones"
        )
        return zones

    def _build_zone(self, cluster: List[Cell]) -> DeadZone:
        positions = np.asarray([c.position for c in cluster], dtype=float)
        # Offsets from the seed stay within cluster_distance, so the sum cannot overflow
        center = positions[0] + np.mean(positions - positions[0], axis=0)
        total = sum(c.average_strength for c in cluster)
        measurements = tuple(s for c in cluster for s in c.samples)
        return DeadZone(
            center=(float(center[0]), float(center[1]), float(center[2])),
            radius=self.cell_size * math.sqrt(len(cluster)),
            average_strength=round_half_away(total / len(cluster)),
            measurements=measurements,
            cells=tuple(c.coordinate for c in cluster),
        )
