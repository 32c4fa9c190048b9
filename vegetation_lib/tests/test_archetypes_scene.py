"""Tests for archetype building and scene assembly."""

import pytest
from vegetation_lib.api.scene import build_vegetation_scene, create_lod_controller, mesh_scene
from vegetation_lib.core.placement import TreePlacement
from vegetation_lib.core.result import ErrorCode, OperationStatus
from vegetation_lib.core.terrain import HeightFunctionTerrain, RockFormation
from vegetation_lib.core.types import Point3D
from vegetation_lib.ops.archetypes import (
    archetype_seed,
    build_placement_skeleton,
    build_tree_archetypes,
)
from vegetation_lib.params.config import VegetationConfig
from vegetation_lib.runtime.lod_controller import LodBatches
from vegetation_lib.analysis.structure import check_skeleton_validity


class RecordingMesher:
    """Mesher stand-in that records every request it receives."""

    def __init__(self):
        self.requests = []

    def build_lod(self, skeleton, options):
        self.requests.append((skeleton, options))
        return {"nodes": len(skeleton.reachable_node_ids()), "lod": options.lod_level}


class NullBatch:
    def set_visible_at(self, instance_id, visible):
        pass


def test_archetype_ids_and_seeds(debug_config):
    archetypes = build_tree_archetypes(debug_config)

    assert [a.id for a in archetypes] == ["oak-0", "pine-0"]
    assert archetypes[0].seed == debug_config.seed
    assert archetypes[1].seed == debug_config.seed + 1_000_003
    assert archetype_seed(10, 2, 3) == 10 + 2 * 1_000_003 + 3 * 4099


def test_archetype_lod_options(debug_config):
    archetype = build_tree_archetypes(debug_config)[0]
    options = archetype.lod_options
    meshing = debug_config.meshing

    assert [o.lod_level for o in options] == [0, 1, 2]
    assert [o.radial_segments for o in options] == list(meshing.lod_branch_radial_segments)
    assert [o.canopy_sample_stride for o in options] == list(meshing.lod_canopy_sample_stride)
    assert [o.depth_limit for o in options] == [None, None, meshing.trunk_depth_for_lod2]
    assert [o.canopy_seed for o in options] == [archetype.seed, archetype.seed + 73, archetype.seed + 146]
    for o in options:
        assert o.min_branch_radius == pytest.approx(debug_config.radius.min_kept_radius * 0.8)
        assert o.canopy_min_radius == pytest.approx(archetype.canopy_puff_radius * 0.65)


def test_archetype_geometry(debug_config):
    for archetype in build_tree_archetypes(debug_config):
        species = debug_config.get_species(archetype.species_id)
        low, high = species.canopy_puff_radius
        assert low <= archetype.canopy_puff_radius <= high
        assert archetype.bounds_radius > archetype.canopy_puff_radius
        assert archetype.skeleton.root.radius > 0.0
        assert check_skeleton_validity(archetype.skeleton).is_success()


def test_archetypes_are_deterministic(debug_config):
    a = build_tree_archetypes(debug_config)
    b = build_tree_archetypes(debug_config)
    assert [x.to_dict() for x in a] == [y.to_dict() for y in b]


def test_seed_override(debug_config):
    archetypes = build_tree_archetypes(debug_config, seed=5)
    assert archetypes[0].seed == 5


def test_placement_skeleton_uses_placement_seed(debug_config):
    placement = TreePlacement(
        position=Point3D(3.0, 0.0, 4.0), yaw=0.0, scale=1.0,
        species_id="pine", variant_index=0, seed=4242,
    )
    skeleton = build_placement_skeleton(placement, debug_config)
    assert skeleton.metadata["seed"] == 4242
    assert skeleton.metadata["species_id"] == "pine"
    assert skeleton.root.position.to_tuple() == (0.0, 0.0, 0.0)


def test_scene_build(debug_config, flat_terrain):
    scene = build_vegetation_scene(debug_config, flat_terrain)

    assert scene.report.status == OperationStatus.SUCCESS
    assert len(scene.placements) == debug_config.placement.tree_count
    assert set(scene.archetypes) == {"oak-0", "pine-0"}
    assert scene.skeletons is None
    for index, placement in enumerate(scene.placements):
        archetype = scene.archetype_for(placement)
        assert archetype.species_id == placement.species_id
        assert scene.skeleton_for(index) is archetype.skeleton
    assert scene.report.metadata["placed_trees"] == len(scene.placements)


def test_scene_with_rocks(debug_config, flat_terrain):
    rocks = [RockFormation(position=(12.0, 0.0, 0.0), collider=(2.0, 1.0, 2.0))]
    scene = build_vegetation_scene(debug_config, flat_terrain, rocks)
    clearance = debug_config.placement.rock_clearance
    for placement in scene.placements:
        assert not rocks[0].blocks(placement.position.x, placement.position.z, clearance)


def test_unknown_archetype_raises(debug_config, flat_terrain):
    scene = build_vegetation_scene(debug_config, flat_terrain)
    stray = TreePlacement(
        position=Point3D(0.0, 0.0, 0.0), yaw=0.0, scale=1.0,
        species_id="oak", variant_index=7, seed=1,
    )
    with pytest.raises(KeyError, match=ErrorCode.UNKNOWN_ARCHETYPE.value):
        scene.archetype_for(stray)


def test_scene_without_species_fails(flat_terrain):
    scene = build_vegetation_scene(VegetationConfig(species=[]), flat_terrain)
    assert scene.report.is_failure()
    assert ErrorCode.NO_SPECIES.value in scene.report.error_codes
    assert scene.placements == []


def test_underfilled_scene_is_partial_success(debug_config):
    steep = HeightFunctionTerrain(lambda x, z: 3.0 * x)
    scene = build_vegetation_scene(debug_config, steep)
    assert scene.report.status == OperationStatus.PARTIAL_SUCCESS
    assert ErrorCode.PLACEMENT_UNDERFILLED.value in scene.report.error_codes
    assert scene.report.warnings


def test_scene_report_carries_config_findings(debug_config, flat_terrain):
    """Validation findings are reported as warnings without failing the build."""
    debug_config.growth.kill_distance = debug_config.growth.influence_radius + 1.0
    debug_config.placement.tree_count = 2
    scene = build_vegetation_scene(debug_config, flat_terrain)

    assert scene.report.status == OperationStatus.SUCCESS
    assert ErrorCode.INVALID_PARAMETER.value in scene.report.error_codes
    assert any("kill_distance" in w for w in scene.report.warnings)


def test_clean_scene_has_no_warnings(debug_config, flat_terrain):
    debug_config.placement.tree_count = 2
    scene = build_vegetation_scene(debug_config, flat_terrain)
    assert scene.report.status == OperationStatus.SUCCESS
    assert scene.report.warnings == []


def test_unique_trees_and_meshing(debug_config, flat_terrain):
    debug_config.placement.tree_count = 3
    scene = build_vegetation_scene(debug_config, flat_terrain, unique_trees=True)
    assert len(scene.skeletons) == len(scene.placements) == 3
    assert scene.skeleton_for(1) is scene.skeletons[1]

    mesher = RecordingMesher()
    geometry = mesh_scene(scene, mesher)

    assert set(geometry) == {"oak-0", "pine-0", "tree-0", "tree-1", "tree-2"}
    assert all(len(levels) == 3 for levels in geometry.values())
    assert len(mesher.requests) == 3 * 5
    assert [g["lod"] for g in geometry["tree-2"]] == [0, 1, 2]
    tree_options = [opts for skel, opts in mesher.requests if skel is scene.skeletons[0]]
    assert tree_options[0].canopy_seed == scene.placements[0].seed


def test_create_lod_controller(debug_config, flat_terrain):
    scene = build_vegetation_scene(debug_config, flat_terrain)
    count = len(scene.placements)
    ids = [[i, i, i] for i in range(count)]
    batches = LodBatches(
        branch_batches=[NullBatch() for _ in range(3)],
        canopy_batches=[NullBatch() for _ in range(3)],
        branch_instance_ids=ids,
        canopy_instance_ids=ids,
    )
    controller = create_lod_controller(scene, batches)
    assert controller.lod == debug_config.lod
    assert controller.update(0.0, (0.0, 2.0, 0.0)) == list(range(count))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
