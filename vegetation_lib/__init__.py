"""
Vegetation Library - Seeded Procedural Trees and Forest Placement

Grows tree skeletons by space colonization, thickens them with a pipe-model
radius rule, scatters instances over terrain with blue-noise sampling and
picks a level of detail per instance at runtime.

Key Features:
- Exactly reproducible from integer seeds
- Arena skeletons with explicit, cycle-safe traversals
- Best-effort placement under slope, rock and density constraints
- Structured results with status, codes and warnings
- JSON-serializable configuration and presets

Example Usage:
    from vegetation_lib import get_preset, build_vegetation_scene
    from vegetation_lib.core import FlatTerrain

    config = get_preset("default_forest")
    scene = build_vegetation_scene(config, FlatTerrain())

    for placement in scene.placements:
        archetype = scene.archetype_for(placement)
"""

__version__ = "0.1.0"

from .core.types import Point3D
from .core.rng import DeterministicRng
from .core.skeleton import SkeletonNode, TreeSkeleton
from .core.species import TreeShape, TreeSpeciesPreset
from .core.placement import TreePlacement
from .core.terrain import TerrainSampler, FlatTerrain, HeightFunctionTerrain, RockFormation
from .core.result import OperationResult, OperationStatus, ErrorCode

from .params.config import VegetationConfig
from .params.presets import get_preset, list_presets, get_species_preset, list_species_presets
from .params.validation import validate_config

from .ops.space_colonization import grow_skeleton
from .ops.radius_solver import solve_branch_radii
from .ops.placement import generate_tree_placements
from .ops.archetypes import TreeArchetype, MeshingOptions, build_tree_archetypes

from .runtime.lod_controller import (
    LodBatches,
    TreeLodController,
    create_lod_state,
    resolve_lod,
    update_tree_lods,
)

from .analysis.structure import check_skeleton_validity, compute_skeleton_stats
from .analysis.placement_stats import compute_placement_stats

from .api.scene import VegetationScene, build_vegetation_scene, mesh_scene, create_lod_controller

from .io.serialize import save_config, load_config

__all__ = [
    "Point3D",
    "DeterministicRng",
    "SkeletonNode",
    "TreeSkeleton",
    "TreeShape",
    "TreeSpeciesPreset",
    "TreePlacement",
    "TerrainSampler",
    "FlatTerrain",
    "HeightFunctionTerrain",
    "RockFormation",
    "OperationResult",
    "OperationStatus",
    "ErrorCode",
    "VegetationConfig",
    "get_preset",
    "list_presets",
    "get_species_preset",
    "list_species_presets",
    "validate_config",
    "grow_skeleton",
    "solve_branch_radii",
    "generate_tree_placements",
    "TreeArchetype",
    "MeshingOptions",
    "build_tree_archetypes",
    "LodBatches",
    "TreeLodController",
    "create_lod_state",
    "resolve_lod",
    "update_tree_lods",
    "check_skeleton_validity",
    "compute_skeleton_stats",
    "compute_placement_stats",
    "VegetationScene",
    "build_vegetation_scene",
    "mesh_scene",
    "create_lod_controller",
    "save_config",
    "load_config",
]
