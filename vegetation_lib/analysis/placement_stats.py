"""Statistics of a generated placement field."""

from collections import Counter
from typing import Dict, Optional, Sequence
import numpy as np
from scipy.spatial import cKDTree
from ..core.placement import TreePlacement
from ..params.config import VegetationConfig


def placement_xz(placements: Sequence[TreePlacement]) -> np.ndarray:
    """Ground-plane coordinates of the placements as an (N, 2) array."""
    if not placements:
        return np.zeros((0, 2))
    return np.array([(p.position.x, p.position.z) for p in placements])


def compute_placement_stats(
    placements: Sequence[TreePlacement],
    config: Optional[VegetationConfig] = None,
) -> Dict:
    """
    Compute spacing and distribution statistics of a placement field.

    Parameters
    ----------
    placements : sequence of TreePlacement
        Placements to analyze
    config : VegetationConfig, optional
        When given, adds the fill ratio against ``placement.tree_count`` and
        the number of pairs closer than ``placement.min_spacing``

    Returns
    -------
    stats : dict
        Dictionary with count, nearest-neighbour spacing, radial extent,
        per-species and per-archetype counts
    """
    xz = placement_xz(placements)
    count = len(xz)

    stats = {
        'count': count,
        'min_spacing': float('inf'),
        'mean_nearest_neighbor': 0.0,
        'min_radial_distance': 0.0,
        'max_radial_distance': 0.0,
        'species_counts': dict(Counter(p.species_id for p in placements)),
        'archetype_counts': dict(Counter(p.archetype_id for p in placements)),
    }

    if count > 0:
        radial = np.hypot(xz[:, 0], xz[:, 1])
        stats['min_radial_distance'] = float(radial.min())
        stats['max_radial_distance'] = float(radial.max())

    if count > 1:
        tree = cKDTree(xz)
        distances, _ = tree.query(xz, k=2)
        nearest = distances[:, 1]
        stats['min_spacing'] = float(nearest.min())
        stats['mean_nearest_neighbor'] = float(nearest.mean())

    if config is not None:
        requested = config.placement.tree_count
        stats['requested'] = requested
        stats['fill_ratio'] = count / requested if requested > 0 else 1.0
        violations = 0
        if count > 1:
            min_spacing = config.placement.min_spacing
            for i, j in cKDTree(xz).query_pairs(min_spacing):
                if np.hypot(*(xz[i] - xz[j])) < min_spacing:
                    violations += 1
        stats['spacing_violations'] = violations

    return stats
