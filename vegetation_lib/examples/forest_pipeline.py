"""
Complete pipeline example: Config → Placement → Archetypes → Analysis → LOD

Builds a small forest on rolling terrain and prints what each stage produced.
"""

import logging
import math

from vegetation_lib import get_preset, build_vegetation_scene, validate_config
from vegetation_lib.core.terrain import HeightFunctionTerrain, RockFormation
from vegetation_lib.analysis.structure import check_skeleton_validity, compute_skeleton_stats
from vegetation_lib.analysis.placement_stats import compute_placement_stats
from vegetation_lib.api.scene import create_lod_controller
from vegetation_lib.runtime.lod_controller import LodBatches


class CountingBatch:
    """Minimal renderer batch that counts visible instances."""

    def __init__(self):
        self.visible = set()

    def set_visible_at(self, instance_id, visible):
        if visible:
            self.visible.add(instance_id)
        else:
            self.visible.discard(instance_id)


def rolling_hills(x, z):
    return 2.0 * math.sin(x * 0.05) * math.cos(z * 0.04)


def main():
    """Run complete pipeline."""
    logging.basicConfig(level=logging.INFO)

    print("=" * 60)
    print("VEGETATION PIPELINE")
    print("=" * 60)

    print("\n[1/5] Loading and validating config...")
    config = get_preset("default_forest")
    config.placement.tree_count = 40
    is_valid, warnings = validate_config(config)
    print(f"   Valid: {is_valid} ({len(warnings)} warnings)")

    print("\n[2/5] Building scene...")
    terrain = HeightFunctionTerrain(rolling_hills)
    rocks = [RockFormation(position=(30.0, 0.0, -20.0), collider=(4.0, 2.0, 3.0))]
    scene = build_vegetation_scene(config, terrain, rocks, show_progress=True)
    print(f"   {scene.report.status.value}: {scene.report.message}")

    print("\n[3/5] Checking archetypes...")
    for archetype_id, archetype in scene.archetypes.items():
        validity = check_skeleton_validity(archetype.skeleton)
        stats = compute_skeleton_stats(archetype.skeleton)
        print(
            f"   {archetype_id}: {stats['reachable_nodes']} nodes, "
            f"height {stats['height']:.1f} m, valid={validity.is_success()}"
        )

    print("\n[4/5] Placement statistics...")
    placement_stats = compute_placement_stats(scene.placements, config)
    print(f"   Placed {placement_stats['count']} (fill {placement_stats['fill_ratio']:.0%})")
    print(f"   Min spacing {placement_stats['min_spacing']:.2f} m")
    print(f"   Species: {placement_stats['species_counts']}")

    print("\n[5/5] Running LOD passes...")
    ids = [[i, i, i] for i in range(len(scene.placements))]
    batches = LodBatches(
        branch_batches=[CountingBatch() for _ in range(3)],
        canopy_batches=[CountingBatch() for _ in range(3)],
        branch_instance_ids=ids,
        canopy_instance_ids=ids,
    )
    controller = create_lod_controller(scene, batches)
    for step in range(6):
        camera = (step * 15.0, 2.0, 0.0)
        changed = controller.update(0.25, camera)
        visible = [len(b.visible) for b in batches.branch_batches]
        print(f"   camera x={camera[0]:5.1f}: {len(changed)} changed, per level {visible}")

    print("\n" + "=" * 60)
    print("PIPELINE COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
