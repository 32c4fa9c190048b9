"""High-level API: run the whole vegetation pipeline for one world."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..core.placement import TreePlacement
from ..core.result import ErrorCode, OperationResult, OperationStatus
from ..core.skeleton import TreeSkeleton
from ..core.terrain import FlatTerrain, RockFormation, TerrainSampler
from ..ops.archetypes import (
    MeshingOptions,
    TreeArchetype,
    build_meshing_options,
    build_placement_skeleton,
    build_tree_archetypes,
    draw_canopy_puff_radius,
)
from ..ops.placement import generate_tree_placements
from ..params.config import VegetationConfig
from ..params.validation import check_config
from ..runtime.lod_controller import LodBatches, TreeLodController

logger = logging.getLogger(__name__)


class Mesher(Protocol):
    """External geometry builder for finalized skeletons."""

    def build_lod(self, skeleton: TreeSkeleton, options: MeshingOptions) -> Any:
        ...


@dataclass
class VegetationScene:
    """
    Everything generated for one world.

    Attributes
    ----------
    config : VegetationConfig
        Configuration the scene was built from
    placements : List[TreePlacement]
        Tree instances, in generation order
    archetypes : Dict[str, TreeArchetype]
        Shared skeletons by archetype id
    skeletons : List[TreeSkeleton], optional
        One solved skeleton per placement when built with ``unique_trees``
    report : OperationResult
        Outcome of the build (under-filled fields are a partial success)
    """

    config: VegetationConfig
    placements: List[TreePlacement] = field(default_factory=list)
    archetypes: Dict[str, TreeArchetype] = field(default_factory=dict)
    skeletons: Optional[List[TreeSkeleton]] = None
    report: OperationResult = field(default_factory=OperationResult.success)

    def archetype_for(self, placement: TreePlacement) -> TreeArchetype:
        """Shared archetype a placement renders with."""
        archetype = self.archetypes.get(placement.archetype_id)
        if archetype is None:
            raise KeyError(
                f"{ErrorCode.UNKNOWN_ARCHETYPE.value}: no archetype '{placement.archetype_id}'"
            )
        return archetype

    def skeleton_for(self, index: int) -> TreeSkeleton:
        """Skeleton of placement ``index`` (unique if built, else shared)."""
        if self.skeletons is not None:
            return self.skeletons[index]
        return self.archetype_for(self.placements[index]).skeleton


def build_vegetation_scene(
    config: VegetationConfig,
    terrain: Optional[TerrainSampler] = None,
    rocks: Sequence[RockFormation] = (),
    unique_trees: bool = False,
    show_progress: bool = False,
) -> VegetationScene:
    """
    Place trees and build their skeletons.

    Parameters
    ----------
    config : VegetationConfig
        System configuration
    terrain : TerrainSampler, optional
        Ground to place on (defaults to flat ground at height 0)
    rocks : sequence of RockFormation
        Obstacles to keep clear of
    unique_trees : bool
        Also grow one skeleton per placement from its own seed
    show_progress : bool
        Show tqdm progress bars for archetype building

    Returns
    -------
    scene : VegetationScene
        The report is a failure when the config has no species, and a
        partial success when fewer trees than requested could be placed.
        Configuration findings are added as ``INVALID_PARAMETER`` warnings.
    """
    if terrain is None:
        terrain = FlatTerrain()

    scene = VegetationScene(config=config)

    if not config.species:
        scene.report = OperationResult.failure("No species configured")
        scene.report.add_error("Config has an empty species list", ErrorCode.NO_SPECIES)
        logger.warning("Scene build skipped: no species configured")
        return scene

    config_check = check_config(config)
    for warning in config_check.warnings:
        scene.report.add_warning(warning, ErrorCode.INVALID_PARAMETER)
        logger.warning("Config: %s", warning)

    scene.placements = generate_tree_placements(config, terrain, rocks)
    archetypes = build_tree_archetypes(config, show_progress=show_progress)
    scene.archetypes = {archetype.id: archetype for archetype in archetypes}

    if unique_trees:
        scene.skeletons = [
            build_placement_skeleton(placement, config) for placement in scene.placements
        ]

    requested = config.placement.tree_count
    placed = len(scene.placements)
    scene.report.metadata.update({
        "requested_trees": requested,
        "placed_trees": placed,
        "archetype_count": len(scene.archetypes),
        "unique_skeletons": len(scene.skeletons) if scene.skeletons is not None else 0,
    })

    if placed < requested:
        scene.report.status = OperationStatus.PARTIAL_SUCCESS
        scene.report.add_warning(
            f"Placed {placed} of {requested} requested trees",
            ErrorCode.PLACEMENT_UNDERFILLED,
        )
        logger.warning("Placement under-filled: %d of %d trees", placed, requested)

    scene.report.message = f"Built scene with {placed} trees and {len(scene.archetypes)} archetypes"
    logger.info(scene.report.message)
    return scene


def _unique_options(config: VegetationConfig, placement: TreePlacement) -> List[MeshingOptions]:
    species = config.get_species(placement.species_id)
    canopy_puff_radius = draw_canopy_puff_radius(species, placement.seed)
    return build_meshing_options(config, species, canopy_puff_radius, placement.seed)


def mesh_scene(scene: VegetationScene, mesher: Mesher) -> Dict[str, List[Any]]:
    """
    Drive an external mesher over the scene's finalized skeletons.

    Returns
    -------
    geometry : dict
        Three per-level results keyed by archetype id, plus one entry per
        placement (``"tree-{index}"``) when the scene has unique skeletons.
    """
    geometry: Dict[str, List[Any]] = {}

    for archetype_id, archetype in scene.archetypes.items():
        geometry[archetype_id] = [
            mesher.build_lod(archetype.skeleton, options) for options in archetype.lod_options
        ]

    if scene.skeletons is not None:
        for index, (placement, skeleton) in enumerate(zip(scene.placements, scene.skeletons)):
            geometry[f"tree-{index}"] = [
                mesher.build_lod(skeleton, options)
                for options in _unique_options(scene.config, placement)
            ]

    logger.debug("Meshed %d geometry sets", len(geometry))
    return geometry


def create_lod_controller(scene: VegetationScene, batches: LodBatches) -> TreeLodController:
    """LOD controller over the scene's placements."""
    return TreeLodController(scene.placements, batches, scene.config.lod)
