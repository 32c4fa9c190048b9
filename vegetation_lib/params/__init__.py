"""Configuration, presets and validation for vegetation generation."""

from .config import (
    GrowthConfig,
    RadiusConfig,
    PlacementConfig,
    LodConfig,
    MeshingConfig,
    VegetationConfig,
)

from .presets import (
    oak,
    pine,
    birch,
    cypress,
    windswept_pine,
    default_forest,
    sparse_debug,
    dense_grove,
    get_preset,
    list_presets,
    get_species_preset,
    list_species_presets,
    PRESETS,
    SPECIES_PRESETS,
)

from .validation import (
    validate_config,
    check_config,
    validate_and_warn,
    PARAM_BOUNDS,
)

__all__ = [
    # Config
    "GrowthConfig",
    "RadiusConfig",
    "PlacementConfig",
    "LodConfig",
    "MeshingConfig",
    "VegetationConfig",
    # Presets
    "oak",
    "pine",
    "birch",
    "cypress",
    "windswept_pine",
    "default_forest",
    "sparse_debug",
    "dense_grove",
    "get_preset",
    "list_presets",
    "get_species_preset",
    "list_species_presets",
    "PRESETS",
    "SPECIES_PRESETS",
    # Validation
    "validate_config",
    "check_config",
    "validate_and_warn",
    "PARAM_BOUNDS",
]
