"""Shared fixtures for vegetation_lib tests."""

import pytest
from vegetation_lib.core.species import TreeShape, TreeSpeciesPreset
from vegetation_lib.core.terrain import FlatTerrain
from vegetation_lib.params.config import GrowthConfig, PlacementConfig, VegetationConfig
from vegetation_lib.params.presets import sparse_debug


@pytest.fixture
def small_species():
    """Spherical species with a fixed 50-attractor canopy."""
    return TreeSpeciesPreset(
        id="test_round",
        shape=TreeShape.SPHERICAL,
        trunk_height=(2.0, 2.0),
        canopy_height=(3.0, 3.0),
        canopy_radius=(3.0, 3.0),
        canopy_puff_radius=(0.8, 1.0),
        attractor_count=(50, 50),
    )


@pytest.fixture
def growth():
    return GrowthConfig(max_iterations=40)


@pytest.fixture
def flat_terrain():
    return FlatTerrain()


@pytest.fixture
def debug_config():
    """Small, fast system config."""
    return sparse_debug()


@pytest.fixture
def open_field_config(small_species):
    """Config whose only placement constraints are the annulus and spacing."""
    return VegetationConfig(
        placement=PlacementConfig(
            tree_count=30,
            field_radius=30.0,
            clearing_radius=3.0,
            min_spacing=4.0,
            max_slope=1.0,
            max_placement_attempts=2000,
            density_threshold=0.0,
            density_jitter=0.0,
        ),
        species=[small_species],
        variants_per_species=2,
        seed=7,
    )
