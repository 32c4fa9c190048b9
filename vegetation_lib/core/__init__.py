"""Core data structures for procedural vegetation."""

from .types import Point3D, WORLD_UP, normalize, lerp
from .rng import DeterministicRng, next_float, seed_state
from .skeleton import SkeletonNode, TreeSkeleton
from .species import TreeShape, TreeSpeciesPreset
from .placement import TreePlacement
from .terrain import TerrainSampler, FlatTerrain, HeightFunctionTerrain, RockFormation
from .result import OperationResult, OperationStatus, ErrorCode

__all__ = [
    "Point3D",
    "WORLD_UP",
    "normalize",
    "lerp",
    "DeterministicRng",
    "next_float",
    "seed_state",
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
]
