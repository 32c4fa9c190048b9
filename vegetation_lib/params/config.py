"""
Configuration dataclasses for vegetation generation.

Units: All spatial parameters are in meters, angles in radians.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from ..core.species import TreeSpeciesPreset


@dataclass
class GrowthConfig:
    """Space colonization parameters for skeleton growth."""

    step_size: float = 0.35  # length of each new branch segment
    influence_radius: float = 2.2  # attractors farther than this are ignored
    kill_distance: float = 0.5  # attractors closer than this are consumed
    max_iterations: int = 90
    apical_dominance: float = 0.35  # upward pull near the root, fades with depth
    lateral_bias: float = 0.18  # damping of the attractor pull (0-1)
    trunk_lift_bias: float = 0.12  # constant upward pull
    use_spatial_index: bool = False  # answer nearest-node queries with a k-d tree

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "step_size": self.step_size,
            "influence_radius": self.influence_radius,
            "kill_distance": self.kill_distance,
            "max_iterations": self.max_iterations,
            "apical_dominance": self.apical_dominance,
            "lateral_bias": self.lateral_bias,
            "trunk_lift_bias": self.trunk_lift_bias,
            "use_spatial_index": self.use_spatial_index,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "GrowthConfig":
        """Create from dictionary."""
        return cls(
            step_size=d.get("step_size", 0.35),
            influence_radius=d.get("influence_radius", 2.2),
            kill_distance=d.get("kill_distance", 0.5),
            max_iterations=d.get("max_iterations", 90),
            apical_dominance=d.get("apical_dominance", 0.35),
            lateral_bias=d.get("lateral_bias", 0.18),
            trunk_lift_bias=d.get("trunk_lift_bias", 0.12),
            use_spatial_index=d.get("use_spatial_index", False),
        )


@dataclass
class RadiusConfig:
    """Pipe-model radius solving and pruning.

    With ``min_kept_radius`` at or below ``twig_radius`` nothing is pruned,
    since every solved radius is at least the twig radius.
    """

    gamma: float = 2.4  # pipe exponent (2 = area-preserving, 3 = Murray)
    twig_radius: float = 0.03  # radius assigned to every leaf
    min_kept_radius: float = 0.024
    trunk_preserve_depth: int = 6  # nodes at or above this depth are never pruned

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "gamma": self.gamma,
            "twig_radius": self.twig_radius,
            "min_kept_radius": self.min_kept_radius,
            "trunk_preserve_depth": self.trunk_preserve_depth,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "RadiusConfig":
        """Create from dictionary."""
        return cls(
            gamma=d.get("gamma", 2.4),
            twig_radius=d.get("twig_radius", 0.03),
            min_kept_radius=d.get("min_kept_radius", 0.024),
            trunk_preserve_depth=d.get("trunk_preserve_depth", 6),
        )


@dataclass
class PlacementConfig:
    """Blue-noise tree placement over a circular field centered on the origin."""

    tree_count: int = 90
    field_radius: float = 120.0
    clearing_radius: float = 14.0  # empty disk around the field center
    min_spacing: float = 7.0
    max_slope: float = 0.55  # rise over run
    rock_clearance: float = 2.5
    poisson_attempts: int = 24  # candidates tried around each active point
    max_placement_attempts: int = 4000  # budget for the seed and fill phases
    density_noise_scale: float = 0.045
    density_threshold: float = 0.32
    density_jitter: float = 0.18

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "tree_count": self.tree_count,
            "field_radius": self.field_radius,
            "clearing_radius": self.clearing_radius,
            "min_spacing": self.min_spacing,
            "max_slope": self.max_slope,
            "rock_clearance": self.rock_clearance,
            "poisson_attempts": self.poisson_attempts,
            "max_placement_attempts": self.max_placement_attempts,
            "density_noise_scale": self.density_noise_scale,
            "density_threshold": self.density_threshold,
            "density_jitter": self.density_jitter,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "PlacementConfig":
        """Create from dictionary."""
        return cls(
            tree_count=d.get("tree_count", 90),
            field_radius=d.get("field_radius", 120.0),
            clearing_radius=d.get("clearing_radius", 14.0),
            min_spacing=d.get("min_spacing", 7.0),
            max_slope=d.get("max_slope", 0.55),
            rock_clearance=d.get("rock_clearance", 2.5),
            poisson_attempts=d.get("poisson_attempts", 24),
            max_placement_attempts=d.get("max_placement_attempts", 4000),
            density_noise_scale=d.get("density_noise_scale", 0.045),
            density_threshold=d.get("density_threshold", 0.32),
            density_jitter=d.get("density_jitter", 0.18),
        )


@dataclass
class LodConfig:
    """Distance thresholds for the runtime level-of-detail controller."""

    lod0_distance: float = 18.0
    lod1_distance: float = 42.0
    lod2_distance: float = 90.0
    hidden_distance: float = 140.0
    hysteresis: float = 3.0
    update_hz: float = 8.0  # full LOD passes per second

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "lod0_distance": self.lod0_distance,
            "lod1_distance": self.lod1_distance,
            "lod2_distance": self.lod2_distance,
            "hidden_distance": self.hidden_distance,
            "hysteresis": self.hysteresis,
            "update_hz": self.update_hz,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "LodConfig":
        """Create from dictionary."""
        return cls(
            lod0_distance=d.get("lod0_distance", 18.0),
            lod1_distance=d.get("lod1_distance", 42.0),
            lod2_distance=d.get("lod2_distance", 90.0),
            hidden_distance=d.get("hidden_distance", 140.0),
            hysteresis=d.get("hysteresis", 3.0),
            update_hz=d.get("update_hz", 8.0),
        )


@dataclass
class MeshingConfig:
    """Per-level options handed to the external mesher (index = LOD level)."""

    lod_branch_radial_segments: Tuple[int, int, int] = (8, 5, 3)
    lod_canopy_detail: Tuple[int, int, int] = (2, 1, 0)
    lod_canopy_sample_stride: Tuple[int, int, int] = (1, 2, 4)
    trunk_depth_for_lod2: int = 6  # LOD 2 only meshes branches up to this depth

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "lod_branch_radial_segments": list(self.lod_branch_radial_segments),
            "lod_canopy_detail": list(self.lod_canopy_detail),
            "lod_canopy_sample_stride": list(self.lod_canopy_sample_stride),
            "trunk_depth_for_lod2": self.trunk_depth_for_lod2,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "MeshingConfig":
        """Create from dictionary."""
        return cls(
            lod_branch_radial_segments=tuple(d.get("lod_branch_radial_segments", (8, 5, 3))),
            lod_canopy_detail=tuple(d.get("lod_canopy_detail", (2, 1, 0))),
            lod_canopy_sample_stride=tuple(d.get("lod_canopy_sample_stride", (1, 2, 4))),
            trunk_depth_for_lod2=d.get("trunk_depth_for_lod2", 6),
        )


@dataclass
class VegetationConfig:
    """Complete configuration for a vegetation system."""

    growth: GrowthConfig = field(default_factory=GrowthConfig)
    radius: RadiusConfig = field(default_factory=RadiusConfig)
    placement: PlacementConfig = field(default_factory=PlacementConfig)
    lod: LodConfig = field(default_factory=LodConfig)
    meshing: MeshingConfig = field(default_factory=MeshingConfig)
    species: List[TreeSpeciesPreset] = field(default_factory=list)

    seed: int = 1337
    variants_per_species: int = 3

    schema_version: str = "1.0"

    def get_species(self, species_id: str) -> TreeSpeciesPreset:
        """Look up a species preset by id."""
        for species in self.species:
            if species.id == species_id:
                return species
        available = ", ".join(s.id for s in self.species)
        raise KeyError(f"Unknown species '{species_id}'. Available: {available}")

    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        return {
            "schema_version": self.schema_version,
            "seed": self.seed,
            "variants_per_species": self.variants_per_species,
            "growth": self.growth.to_dict(),
            "radius": self.radius.to_dict(),
            "placement": self.placement.to_dict(),
            "lod": self.lod.to_dict(),
            "meshing": self.meshing.to_dict(),
            "species": [s.to_dict() for s in self.species],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "VegetationConfig":
        """Create config from dictionary."""
        return cls(
            growth=GrowthConfig.from_dict(d.get("growth", {})),
            radius=RadiusConfig.from_dict(d.get("radius", {})),
            placement=PlacementConfig.from_dict(d.get("placement", {})),
            lod=LodConfig.from_dict(d.get("lod", {})),
            meshing=MeshingConfig.from_dict(d.get("meshing", {})),
            species=[TreeSpeciesPreset.from_dict(s) for s in d.get("species", [])],
            seed=d.get("seed", 1337),
            variants_per_species=d.get("variants_per_species", 3),
            schema_version=d.get("schema_version", "1.0"),
        )
