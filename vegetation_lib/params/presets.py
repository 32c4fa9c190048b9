"""Named presets for tree species and complete vegetation systems.

Species presets describe one kind of tree; system presets bundle a species
mix with growth, radius, placement and LOD settings.

Units: All spatial parameters are in meters.
"""

from ..core.species import TreeShape, TreeSpeciesPreset
from .config import (
    GrowthConfig,
    LodConfig,
    MeshingConfig,
    PlacementConfig,
    RadiusConfig,
    VegetationConfig,
)


def oak() -> TreeSpeciesPreset:
    """
    Broad deciduous tree.

    Characteristics:
    - Short trunk under a wide, rounded canopy
    - Dense attractor cloud for a bushy crown
    """
    return TreeSpeciesPreset(
        id="oak",
        shape=TreeShape.SPHERICAL,
        placement_weight=1.0,
        trunk_height=(2.2, 3.4),
        canopy_height=(3.0, 4.4),
        canopy_radius=(2.6, 3.6),
        canopy_puff_radius=(0.9, 1.3),
        attractor_count=(220, 320),
        lean=0.12,
        wind_skew=0.05,
        trunk_color="#5b4030",
        canopy_color="#4c7d35",
    )


def pine() -> TreeSpeciesPreset:
    """
    Conifer with a tapering crown.

    Characteristics:
    - Tall canopy that narrows with height
    - Almost straight trunk
    """
    return TreeSpeciesPreset(
        id="pine",
        shape=TreeShape.CONICAL,
        placement_weight=1.2,
        trunk_height=(1.6, 2.6),
        canopy_height=(5.0, 7.5),
        canopy_radius=(1.8, 2.6),
        canopy_puff_radius=(0.6, 0.9),
        attractor_count=(180, 260),
        lean=0.05,
        wind_skew=0.0,
        trunk_color="#4a3526",
        canopy_color="#2f5a34",
    )


def birch() -> TreeSpeciesPreset:
    """Slender deciduous tree with a light, high crown."""
    return TreeSpeciesPreset(
        id="birch",
        shape=TreeShape.SPHERICAL,
        placement_weight=0.7,
        trunk_height=(3.0, 4.2),
        canopy_height=(2.4, 3.4),
        canopy_radius=(1.5, 2.2),
        canopy_puff_radius=(0.7, 1.0),
        attractor_count=(140, 200),
        lean=0.18,
        wind_skew=0.02,
        trunk_color="#d8d2c4",
        canopy_color="#7aa64a",
    )


def cypress() -> TreeSpeciesPreset:
    """Narrow upright tree; its canopy is a tall column."""
    return TreeSpeciesPreset(
        id="cypress",
        shape=TreeShape.COLUMNAR,
        placement_weight=0.5,
        trunk_height=(1.0, 1.6),
        canopy_height=(6.0, 8.5),
        canopy_radius=(1.2, 1.7),
        canopy_puff_radius=(0.5, 0.7),
        attractor_count=(160, 220),
        lean=0.03,
        wind_skew=0.0,
        trunk_color="#4d3a2a",
        canopy_color="#2c4f2c",
    )


def windswept_pine() -> TreeSpeciesPreset:
    """
    Exposed coastal pine.

    Characteristics:
    - Canopy pushed downwind along +x
    - Strong trunk lean
    """
    return TreeSpeciesPreset(
        id="windswept_pine",
        shape=TreeShape.WINDSWEPT,
        placement_weight=0.4,
        trunk_height=(1.8, 2.8),
        canopy_height=(2.2, 3.2),
        canopy_radius=(2.4, 3.2),
        canopy_puff_radius=(0.7, 1.0),
        attractor_count=(160, 240),
        lean=0.35,
        wind_skew=0.6,
        trunk_color="#4f3b2b",
        canopy_color="#3b603a",
    )


SPECIES_PRESETS = {
    "oak": oak,
    "pine": pine,
    "birch": birch,
    "cypress": cypress,
    "windswept_pine": windswept_pine,
}


def default_forest() -> VegetationConfig:
    """Mixed forest around a central clearing."""
    return VegetationConfig(
        species=[oak(), pine(), birch(), windswept_pine()],
    )


def sparse_debug() -> VegetationConfig:
    """
    Small, fast configuration for quick visual debugging.

    Characteristics:
    - Few trees on a small field
    - Short growth runs with coarse steps
    - No density noise rejection
    """
    return VegetationConfig(
        growth=GrowthConfig(
            step_size=0.6,
            influence_radius=3.0,
            kill_distance=0.9,
            max_iterations=25,
        ),
        placement=PlacementConfig(
            tree_count=12,
            field_radius=40.0,
            clearing_radius=4.0,
            min_spacing=6.0,
            max_slope=1.0,
            max_placement_attempts=500,
            density_threshold=0.0,
            density_jitter=0.0,
        ),
        species=[oak(), pine()],
        variants_per_species=1,
    )


def dense_grove() -> VegetationConfig:
    """
    Tightly packed grove with pruned crowns.

    Characteristics:
    - Small spacing and many trees
    - Thin dead-end twigs pruned away (min kept radius above twig radius)
    - Closer LOD thresholds
    """
    return VegetationConfig(
        radius=RadiusConfig(
            gamma=2.2,
            twig_radius=0.025,
            min_kept_radius=0.03,
            trunk_preserve_depth=5,
        ),
        meshing=MeshingConfig(trunk_depth_for_lod2=5),
        placement=PlacementConfig(
            tree_count=220,
            field_radius=90.0,
            clearing_radius=6.0,
            min_spacing=4.0,
            density_threshold=0.22,
        ),
        lod=LodConfig(
            lod0_distance=12.0,
            lod1_distance=30.0,
            lod2_distance=65.0,
            hidden_distance=110.0,
            hysteresis=2.0,
        ),
        species=[birch(), oak(), cypress()],
    )


PRESETS = {
    "default_forest": default_forest,
    "sparse_debug": sparse_debug,
    "dense_grove": dense_grove,
}


def get_preset(name: str) -> VegetationConfig:
    """
    Get a vegetation system preset by name.

    Parameters
    ----------
    name : str
        Preset name (e.g., "default_forest", "sparse_debug")

    Returns
    -------
    VegetationConfig
        Fresh configuration instance

    Raises
    ------
    ValueError
        If preset name is not recognized
    """
    if name not in PRESETS:
        available = ", ".join(PRESETS.keys())
        raise ValueError(f"Unknown preset '{name}'. Available: {available}")

    return PRESETS[name]()


def list_presets() -> list:
    """List all available system preset names."""
    return list(PRESETS.keys())


def get_species_preset(name: str) -> TreeSpeciesPreset:
    """Get a species preset by name; raises ``ValueError`` if unknown."""
    if name not in SPECIES_PRESETS:
        available = ", ".join(SPECIES_PRESETS.keys())
        raise ValueError(f"Unknown species preset '{name}'. Available: {available}")

    return SPECIES_PRESETS[name]()


def list_species_presets() -> list:
    """List all available species preset names."""
    return list(SPECIES_PRESETS.keys())
