"""
Uniform grid-based spatial index for blue-noise spacing queries.
"""

import math
from typing import Dict, List, Optional, Tuple


class PlacementGrid:
    """
    Uniform 2D grid over the square enclosing a circular field.

    The cell size is ``min_spacing / sqrt(2)``, so a cell's diagonal equals
    the minimum spacing and each cell holds at most one accepted point.
    Spacing queries therefore only inspect the ``ceil(min_spacing / cell)``
    neighbourhood around the query cell.
    """

    def __init__(
        self,
        field_radius: float,
        min_spacing: float,
        center: Tuple[float, float] = (0.0, 0.0),
    ):
        """
        Initialize spatial index.

        Parameters
        ----------
        field_radius : float
            Radius of the field; the grid covers [-r, r] around ``center``
        min_spacing : float
            Minimum allowed planar distance between points (> 0)
        center : tuple
            (x, z) of the field center
        """
        self.field_radius = field_radius
        self.min_spacing = min_spacing
        self.center = center
        self.cell_size = min_spacing / math.sqrt(2.0)
        self.grid_size = int(math.ceil((field_radius * 2.0) / self.cell_size))
        self.neighbor_range = int(math.ceil(min_spacing / self.cell_size))
        self.grid: Dict[Tuple[int, int], int] = {}
        self.points: List[Tuple[float, float]] = []

    def __len__(self) -> int:
        return len(self.points)

    def _get_cell_coords(self, x: float, z: float) -> Tuple[int, int]:
        """Convert world coordinates to grid cell coordinates."""
        return (
            int(math.floor((x - self.center[0] + self.field_radius) / self.cell_size)),
            int(math.floor((z - self.center[1] + self.field_radius) / self.cell_size)),
        )

    def _in_grid(self, gx: int, gz: int) -> bool:
        return 0 <= gx < self.grid_size and 0 <= gz < self.grid_size

    def contains_cell(self, x: float, z: float) -> bool:
        """Check whether (x, z) falls inside the grid's extent."""
        return self._in_grid(*self._get_cell_coords(x, z))

    def has_neighbor_within(self, x: float, z: float, radius: Optional[float] = None) -> bool:
        """
        Check for an accepted point strictly closer than ``radius``.

        Parameters
        ----------
        x, z : float
            Query position
        radius : float, optional
            Search radius (defaults to ``min_spacing``; larger radii are
            clamped to the precomputed neighbourhood)
        """
        if radius is None:
            radius = self.min_spacing
        radius_sq = radius * radius

        gx, gz = self._get_cell_coords(x, z)
        for dz in range(-self.neighbor_range, self.neighbor_range + 1):
            for dx in range(-self.neighbor_range, self.neighbor_range + 1):
                cell = (gx + dx, gz + dz)
                point_index = self.grid.get(cell)
                if point_index is None:
                    continue
                px, pz = self.points[point_index]
                delta_x = px - x
                delta_z = pz - z
                if delta_x * delta_x + delta_z * delta_z < radius_sq:
                    return True

        return False

    def insert(self, x: float, z: float) -> Optional[int]:
        """
        Register a point.

        Returns
        -------
        point_index : int or None
            Index of the stored point, or None when (x, z) is outside the grid
        """
        gx, gz = self._get_cell_coords(x, z)
        if not self._in_grid(gx, gz):
            return None

        point_index = len(self.points)
        self.points.append((x, z))
        self.grid[(gx, gz)] = point_index
        return point_index

    def point(self, point_index: int) -> Tuple[float, float]:
        """Stored (x, z) of a point."""
        return self.points[point_index]
