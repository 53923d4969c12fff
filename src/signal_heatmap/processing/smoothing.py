"""
Smoother
========

Single-pass neighborhood blending of cell averages.

Each cell with at least one of its 26 neighbors present is replaced by a
cell holding one synthetic sample:

    blended = round(avg * (1 - factor) + neighborhood_mean * factor)

All lookups read the pre-smoothing averages, so no smoothed value feeds
another cell's smoothing in the same pass. Isolated cells are kept as-is.
"""

import logging
from typing import Dict

from signal_heatmap.grid.index import GridIndex
from signal_heatmap.models.grid import Cell, GridCoordinate, round_half_away
from signal_heatmap.models.sample import Sample


logger = logging.getLogger(__name__)


class Smoother:
    """
    Blend each cell with its 3x3x3 neighborhood mean.

    Attributes:
        grid: Grid index of the cells
        factor: Neighborhood weight in [0, 1]
    """

    def __init__(self, grid: GridIndex, factor: float = 0.5) -> None:
        if not 0.0 <= factor <= 1.0:
            raise ValueError("factor must be in [0, 1]")
        self.grid = grid
        self.factor = factor

    def apply(self, cells: Dict[GridCoordinate, Cell]) -> Dict[GridCoordinate, Cell]:
        """Return a new smoothed cell map in the same order."""
        if self.factor == 0.0:
            return dict(cells)

        averages = {coord: cell.average_strength for coord, cell in cells.items()}
        smoothed: Dict[GridCoordinate, Cell] = {}
        blended_count = 0

        for coordinate, cell in cells.items():
            neighbors = [
                averages[n]
                for n in self.grid.neighborhood(coordinate, 1)
                if n in averages
            ]
            if not neighbors:
                smoothed[coordinate] = cell
                continue

            neighborhood_mean = sum(neighbors) / len(neighbors)
            own = averages[coordinate]
            blended = round_half_away(
                own * (1.0 - self.factor) + neighborhood_mean * self.factor
            )

            latest = cell.latest_sample
            sample = Sample(
                position=cell.position,
                strength=blended,
                ssid=latest.ssid,
                bssid=latest.bssid,
                timestamp=latest.timestamp,
                frequency=latest.frequency,
                synthetic=True,
            )
            smoothed[coordinate] = Cell(
                coordinate=coordinate,
                position=cell.position,
                samples=[sample],
                interpolated=cell.interpolated,
            )
            blended_count += 1

        logger.debug(f"Smoothing: {blended_count}/{len(cells)} cells blended")
        return smoothed
