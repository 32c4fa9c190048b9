"""Tests for blue-noise field placement."""

import itertools
import math
import pytest
from vegetation_lib.core.placement import TreePlacement
from vegetation_lib.core.rng import DeterministicRng
from vegetation_lib.core.species import TreeSpeciesPreset
from vegetation_lib.core.terrain import FlatTerrain, HeightFunctionTerrain, RockFormation
from vegetation_lib.core.types import Point3D
from vegetation_lib.ops.placement import generate_tree_placements, sample_weighted_species
from vegetation_lib.params.config import PlacementConfig, VegetationConfig
from vegetation_lib.spatial.grid_index import PlacementGrid
from vegetation_lib.spatial.noise import value_noise2d


def _planar(a: TreePlacement, b: TreePlacement) -> float:
    return a.position.planar_distance_to(b.position)


def test_single_tree_on_small_flat_field(small_species):
    """One requested tree on a 10 m flat field with no clearing gives exactly one."""
    config = VegetationConfig(
        placement=PlacementConfig(
            tree_count=1,
            field_radius=10.0,
            clearing_radius=0.0,
            min_spacing=1.0,
            density_threshold=0.0,
            density_jitter=0.0,
        ),
        species=[small_species],
    )
    placements = generate_tree_placements(config, FlatTerrain())

    assert len(placements) == 1
    assert math.hypot(placements[0].position.x, placements[0].position.z) <= 10.0


def test_spacing_radius_and_count(open_field_config, flat_terrain):
    config = open_field_config
    placements = generate_tree_placements(config, flat_terrain)
    field = config.placement

    assert 0 < len(placements) <= field.tree_count
    for p in placements:
        radial = math.hypot(p.position.x, p.position.z)
        assert field.clearing_radius <= radial <= field.field_radius
    for a, b in itertools.combinations(placements, 2):
        assert _planar(a, b) >= field.min_spacing


def test_placement_is_deterministic(open_field_config, flat_terrain):
    a = generate_tree_placements(open_field_config, flat_terrain)
    b = generate_tree_placements(open_field_config, flat_terrain)
    assert [p.to_dict() for p in a] == [p.to_dict() for p in b]


def test_seed_changes_field(open_field_config, flat_terrain):
    a = generate_tree_placements(open_field_config, flat_terrain)
    open_field_config.seed += 1
    b = generate_tree_placements(open_field_config, flat_terrain)
    assert [p.to_dict() for p in a] != [p.to_dict() for p in b]


def test_instance_attributes_in_range(open_field_config, flat_terrain):
    placements = generate_tree_placements(open_field_config, flat_terrain)
    for p in placements:
        assert p.species_id == "test_round"
        assert 0 <= p.variant_index < open_field_config.variants_per_species
        assert 0.0 <= p.yaw < 2.0 * math.pi
        assert 0.86 <= p.scale <= 1.2
        assert 0 <= p.seed < 1_000_000_000


def test_positions_follow_terrain_height(open_field_config):
    terrain = HeightFunctionTerrain(lambda x, z: 3.0 + 0.01 * x)
    placements = generate_tree_placements(open_field_config, terrain)
    assert placements
    for p in placements:
        assert p.position.y == pytest.approx(3.0 + 0.01 * p.position.x)


def test_rocks_are_avoided(open_field_config, flat_terrain):
    rock = RockFormation(position=(10.0, 0.0, 0.0), collider=(3.0, 1.0, 3.0))
    placements = generate_tree_placements(open_field_config, flat_terrain, [rock])
    clearance = open_field_config.placement.rock_clearance
    assert placements
    for p in placements:
        assert not rock.blocks(p.position.x, p.position.z, clearance)
        assert math.hypot(p.position.x - 10.0, p.position.z) >= 3.0 + clearance


def test_steep_ground_is_avoided(open_field_config):
    """Slope grows with |x|; trees only stand where it stays under max_slope."""
    terrain = HeightFunctionTerrain(lambda x, z: 0.05 * x * x)
    open_field_config.placement.max_slope = 0.55
    placements = generate_tree_placements(open_field_config, terrain)
    assert placements
    for p in placements:
        assert terrain.sample_slope(p.position.x, p.position.z) <= 0.55
        assert abs(p.position.x) <= 5.5 + 1e-9


def test_impossible_terrain_underfills(open_field_config):
    """A field that is too steep everywhere yields no trees, without raising."""
    terrain = HeightFunctionTerrain(lambda x, z: 2.0 * x)
    placements = generate_tree_placements(open_field_config, terrain)
    assert placements == []


def test_density_noise_thins_field(open_field_config, flat_terrain):
    open_field_config.placement.tree_count = 60
    dense = generate_tree_placements(open_field_config, flat_terrain)
    open_field_config.placement.density_threshold = 0.75
    sparse = generate_tree_placements(open_field_config, flat_terrain)
    assert len(sparse) < len(dense)
    scale = open_field_config.placement.density_noise_scale
    for p in sparse:
        noise = value_noise2d((p.position.x - 16.3) * scale, (p.position.z + 9.8) * scale)
        assert noise >= 0.75


def test_zero_tree_count(open_field_config, flat_terrain):
    open_field_config.placement.tree_count = 0
    assert generate_tree_placements(open_field_config, flat_terrain) == []


def test_empty_species_raises(flat_terrain):
    with pytest.raises(ValueError):
        generate_tree_placements(VegetationConfig(species=[]), flat_terrain)


def test_weighted_species_selection():
    heavy = TreeSpeciesPreset(id="heavy", placement_weight=9.0)
    light = TreeSpeciesPreset(id="light", placement_weight=1.0)
    rng = DeterministicRng(17)
    picks = [sample_weighted_species(rng, [heavy, light]).id for _ in range(2000)]
    assert rng.draws == 2000
    assert 0.85 < picks.count("heavy") / len(picks) < 0.95


def test_zero_weight_species_never_picked():
    never = TreeSpeciesPreset(id="never", placement_weight=0.0)
    always = TreeSpeciesPreset(id="always", placement_weight=1.0)
    rng = DeterministicRng(3)
    picks = {sample_weighted_species(rng, [never, always]).id for _ in range(500)}
    assert picks == {"always"}


def test_grid_spacing_queries():
    grid = PlacementGrid(field_radius=10.0, min_spacing=2.0)
    assert grid.insert(0.0, 0.0) == 0
    assert grid.has_neighbor_within(1.5, 0.0)
    assert not grid.has_neighbor_within(2.0, 0.0)
    assert not grid.has_neighbor_within(0.0, 2.5)
    assert grid.insert(50.0, 0.0) is None
    assert not grid.contains_cell(-10.5, 0.0)
    assert len(grid) == 1


def test_value_noise_is_bounded_and_continuous():
    values = [value_noise2d(x * 0.37, z * 0.53) for x in range(-20, 20) for z in range(-20, 20)]
    assert all(0.0 <= v <= 1.0 for v in values)
    assert value_noise2d(3.2, 4.7) == pytest.approx(value_noise2d(3.2 + 1e-7, 4.7), abs=1e-5)


def test_placement_dict_round_trip():
    placement = TreePlacement(
        position=Point3D(1.0, 2.0, 3.0), yaw=0.5, scale=1.1,
        species_id="oak", variant_index=2, seed=99,
    )
    restored = TreePlacement.from_dict(placement.to_dict())
    assert restored == placement
    assert restored.archetype_id == "oak-2"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
