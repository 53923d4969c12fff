"""
Grid Index
==========

Deterministic mapping between continuous positions and grid coordinates.

Cells are cubes of side ``cell_size`` centered on ``coordinate * cell_size``:

    to_grid(p)  = round(p / cell_size)      (per axis, halves away from zero)
    to_world(c) = c * cell_size             (per axis)

to_grid(to_world(c)) == c holds for every integer coordinate c.

Example:
    from signal_heatmap.grid import GridIndex

    index = GridIndex(cell_size=0.3)
    index.to_grid((0.05, 0.31, -0.44))     # GridCoordinate(0, 1, -1)
    index.to_world(GridCoordinate(0, 1, -1))  # (0.0, 0.3, -0.3)
"""

import math
from typing import Iterator

from signal_heatmap.models.grid import GridCoordinate, round_half_away
from signal_heatmap.models.sample import Vector3


class GridIndex:
    """
    Pure quantization helper for a fixed cell size.

    Attributes:
        cell_size: Cell edge length in meters
    """

    def __init__(self, cell_size: float) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.cell_size = cell_size

    def to_grid(self, position: Vector3) -> GridCoordinate:
        """
        Quantize a world position to its cell coordinate.

        Raises:
            ValueError: If any axis is non-finite or too large to quantize
        """
        size = self.cell_size
        scaled = [axis / size for axis in position]
        if len(scaled) != 3 or not all(math.isfinite(v) for v in scaled):
            raise ValueError(f"position {tuple(position)!r} is outside the grid")
        return GridCoordinate(*(round_half_away(v) for v in scaled))

    def to_world(self, coordinate: GridCoordinate) -> Vector3:
        """World-space center of a cell."""
        size = self.cell_size
        return (
            coordinate[0] * size,
            coordinate[1] * size,
            coordinate[2] * size,
        )

    def neighborhood(
        self,
        coordinate: GridCoordinate,
        radius: int,
        include_self: bool = False,
    ) -> Iterator[GridCoordinate]:
        """
        Yield coordinates in the cube of half-width ``radius`` around a cell.

        Iteration order is x-major, then y, then z.
        """
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                for dz in range(-radius, radius + 1):
                    if not include_self and dx == 0 and dy == 0 and dz == 0:
                        continue
                    yield coordinate.offset(dx, dy, dz)

    def cell_area(self) -> float:
        """Footprint of one cell in square meters."""
        return self.cell_size * self.cell_size


def distance(a: Vector3, b: Vector3) -> float:
    """Euclidean distance between two positions."""
    return math.dist(a, b)
