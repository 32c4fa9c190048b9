"""Generation operations: growth, radii, placement and archetypes."""

from .space_colonization import (
    CanopyEnvelope,
    grow_skeleton,
    sample_attractors,
)
from .radius_solver import solve_branch_radii
from .placement import generate_tree_placements, sample_weighted_species
from .archetypes import (
    MeshingOptions,
    TreeArchetype,
    archetype_seed,
    build_tree_archetypes,
    build_placement_skeleton,
    build_meshing_options,
    compute_bounds_radius,
    draw_canopy_puff_radius,
)

__all__ = [
    "CanopyEnvelope",
    "grow_skeleton",
    "sample_attractors",
    "solve_branch_radii",
    "generate_tree_placements",
    "sample_weighted_species",
    "MeshingOptions",
    "TreeArchetype",
    "archetype_seed",
    "build_tree_archetypes",
    "build_placement_skeleton",
    "build_meshing_options",
    "compute_bounds_radius",
    "draw_canopy_puff_radius",
]
