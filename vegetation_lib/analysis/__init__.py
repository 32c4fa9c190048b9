"""Analysis functions for skeletons and placement fields."""

from .structure import check_skeleton_validity, compute_skeleton_stats
from .placement_stats import compute_placement_stats, placement_xz

__all__ = [
    "check_skeleton_validity",
    "compute_skeleton_stats",
    "compute_placement_stats",
    "placement_xz",
]
