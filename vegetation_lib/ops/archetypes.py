"""
Shared tree archetypes: a few solved skeletons per species reused by many
placements.

Each archetype carries one ``MeshingOptions`` per LOD level (0 = full
detail, 2 = coarsest) for the external mesher, plus a bounding radius
for culling.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np
from tqdm import tqdm

from ..core.placement import TreePlacement
from ..core.rng import DeterministicRng, ARCHETYPE_SALT
from ..core.skeleton import TreeSkeleton
from ..core.species import TreeSpeciesPreset
from ..params.config import VegetationConfig
from .radius_solver import solve_branch_radii
from .space_colonization import grow_skeleton

logger = logging.getLogger(__name__)

LOD_LEVELS = (0, 1, 2)
SPECIES_SEED_STRIDE = 1_000_003
VARIANT_SEED_STRIDE = 4099
CANOPY_SEED_STRIDE = 73
MIN_BRANCH_RADIUS_FACTOR = 0.8  # of radius.min_kept_radius
CANOPY_MIN_RADIUS_FACTOR = 0.65  # of the canopy puff radius


@dataclass
class MeshingOptions:
    """Per-level instructions for turning a skeleton into geometry."""

    lod_level: int
    radial_segments: int
    canopy_detail: int
    canopy_sample_stride: int
    min_branch_radius: float
    canopy_base_radius: float
    canopy_min_radius: float
    canopy_seed: int
    wind_skew: float = 0.0
    depth_limit: Optional[int] = None  # None meshes every depth

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "lod_level": self.lod_level,
            "radial_segments": self.radial_segments,
            "canopy_detail": self.canopy_detail,
            "canopy_sample_stride": self.canopy_sample_stride,
            "min_branch_radius": self.min_branch_radius,
            "canopy_base_radius": self.canopy_base_radius,
            "canopy_min_radius": self.canopy_min_radius,
            "canopy_seed": self.canopy_seed,
            "wind_skew": self.wind_skew,
            "depth_limit": self.depth_limit,
        }


@dataclass
class TreeArchetype:
    """A solved skeleton shared by every placement with the same archetype id."""

    id: str
    species_id: str
    variant_index: int
    seed: int
    skeleton: TreeSkeleton
    lod_options: List[MeshingOptions] = field(default_factory=list)
    canopy_puff_radius: float = 0.0
    bounds_radius: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary (skeleton included)."""
        return {
            "id": self.id,
            "species_id": self.species_id,
            "variant_index": self.variant_index,
            "seed": self.seed,
            "skeleton": self.skeleton.to_dict(),
            "lod_options": [options.to_dict() for options in self.lod_options],
            "canopy_puff_radius": self.canopy_puff_radius,
            "bounds_radius": self.bounds_radius,
        }


def archetype_seed(seed: int, species_index: int, variant_index: int) -> int:
    """Seed of the archetype at (species_index, variant_index)."""
    return seed + species_index * SPECIES_SEED_STRIDE + variant_index * VARIANT_SEED_STRIDE


def build_meshing_options(
    config: VegetationConfig,
    species: TreeSpeciesPreset,
    canopy_puff_radius: float,
    seed: int,
) -> List[MeshingOptions]:
    """Meshing options for LOD levels 0, 1 and 2."""
    meshing = config.meshing
    options = []
    for lod_level in LOD_LEVELS:
        options.append(MeshingOptions(
            lod_level=lod_level,
            radial_segments=meshing.lod_branch_radial_segments[lod_level],
            canopy_detail=meshing.lod_canopy_detail[lod_level],
            canopy_sample_stride=meshing.lod_canopy_sample_stride[lod_level],
            min_branch_radius=config.radius.min_kept_radius * MIN_BRANCH_RADIUS_FACTOR,
            canopy_base_radius=canopy_puff_radius,
            canopy_min_radius=canopy_puff_radius * CANOPY_MIN_RADIUS_FACTOR,
            canopy_seed=seed + lod_level * CANOPY_SEED_STRIDE,
            wind_skew=species.wind_skew,
            depth_limit=meshing.trunk_depth_for_lod2 if lod_level == 2 else None,
        ))
    return options


def compute_bounds_radius(skeleton: TreeSkeleton, canopy_puff_radius: float = 0.0) -> float:
    """
    Radius of a sphere around the root that encloses the reachable tree.

    Each node contributes its distance from the root position plus its
    branch radius; the canopy puff radius is added on top for foliage.
    """
    if not skeleton.nodes:
        return 0.0

    reachable = sorted(skeleton.reachable_node_ids())
    origin = skeleton.root.position.to_array()
    positions = np.array([skeleton.nodes[i].position.to_array() for i in reachable])
    radii = np.array([skeleton.nodes[i].radius for i in reachable])
    extents = np.linalg.norm(positions - origin, axis=1) + radii
    return float(extents.max()) + canopy_puff_radius


def _grow_and_solve(species: TreeSpeciesPreset, config: VegetationConfig, seed: int) -> TreeSkeleton:
    # the trunk meshed at LOD 2 must survive pruning
    skeleton = grow_skeleton(species, config.growth, seed)
    return solve_branch_radii(skeleton, config.radius, config.meshing.trunk_depth_for_lod2)


def draw_canopy_puff_radius(species: TreeSpeciesPreset, seed: int) -> float:
    """Canopy puff radius for a tree seed, from the salted archetype stream."""
    return DeterministicRng(seed, salt=ARCHETYPE_SALT).range_lerp(species.canopy_puff_radius)


def _build_archetype(
    species: TreeSpeciesPreset,
    variant_index: int,
    config: VegetationConfig,
    seed: int,
) -> TreeArchetype:
    skeleton = _grow_and_solve(species, config, seed)
    canopy_puff_radius = draw_canopy_puff_radius(species, seed)

    return TreeArchetype(
        id=f"{species.id}-{variant_index}",
        species_id=species.id,
        variant_index=variant_index,
        seed=seed,
        skeleton=skeleton,
        lod_options=build_meshing_options(config, species, canopy_puff_radius, seed),
        canopy_puff_radius=canopy_puff_radius,
        bounds_radius=compute_bounds_radius(skeleton, canopy_puff_radius),
    )


def build_tree_archetypes(
    config: VegetationConfig,
    seed: Optional[int] = None,
    show_progress: bool = False,
) -> List[TreeArchetype]:
    """
    Build ``variants_per_species`` archetypes for every species.

    Parameters
    ----------
    config : VegetationConfig
        System configuration
    seed : int, optional
        Base seed (defaults to ``config.seed``)
    show_progress : bool
        Show a tqdm progress bar over archetypes

    Returns
    -------
    archetypes : List[TreeArchetype]
        Ordered by species, then variant. Ids are ``"{species_id}-{variant}"``.
    """
    if seed is None:
        seed = config.seed

    jobs = [
        (species_index, species, variant_index)
        for species_index, species in enumerate(config.species)
        for variant_index in range(config.variants_per_species)
    ]

    archetypes = []
    for species_index, species, variant_index in tqdm(
        jobs, desc="Building archetypes", unit="tree", disable=not show_progress
    ):
        archetypes.append(_build_archetype(
            species,
            variant_index,
            config,
            archetype_seed(seed, species_index, variant_index),
        ))

    logger.debug(
        "Built %d archetypes for %d species", len(archetypes), len(config.species)
    )
    return archetypes


def build_placement_skeleton(placement: TreePlacement, config: VegetationConfig) -> TreeSkeleton:
    """
    Grow and solve a unique skeleton for one placement from its own seed.

    The skeleton is in the tree's local frame; the caller applies the
    placement's position, yaw and scale.
    """
    species = config.get_species(placement.species_id)
    return _grow_and_solve(species, config, placement.seed)
