"""
Per-frame level-of-detail selection for tree instances.

Levels 0-2 select the branch and canopy batch of that detail level; level 3
hides the instance. Switching thresholds depend on the current level
(hysteresis), so a camera hovering near a boundary does not make an
instance flicker between levels.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Union
import numpy as np

from ..core.placement import TreePlacement
from ..core.types import Point3D
from ..params.config import LodConfig

logger = logging.getLogger(__name__)

HIDDEN_LEVEL = 3
VISIBLE_LEVELS = (0, 1, 2)


class VisibilityBatch(Protocol):
    """Renderer-side instanced batch for one (level, geometry type) pair."""

    def set_visible_at(self, instance_id: int, visible: bool) -> None:
        ...


@dataclass
class LodBatches:
    """
    Batches and per-instance ids the controller toggles.

    ``branch_batches[level]`` / ``canopy_batches[level]`` hold the batch of
    LOD level 0, 1 or 2. ``branch_instance_ids[tree][level]`` is the id of
    tree ``tree`` inside ``branch_batches[level]``; likewise for canopies.
    """

    branch_batches: Sequence[VisibilityBatch]
    canopy_batches: Sequence[VisibilityBatch]
    branch_instance_ids: Sequence[Sequence[int]]
    canopy_instance_ids: Sequence[Sequence[int]]


@dataclass
class LodRuntimeState:
    """Mutable LOD state owned by the caller for the lifetime of a scene."""

    levels: np.ndarray  # int8, one entry per instance
    elapsed: float = 0.0  # seconds since the last LOD pass
    initialized: bool = False


PositionsLike = Union[np.ndarray, Sequence[Point3D], Sequence[TreePlacement]]


def create_lod_state(tree_count: int) -> LodRuntimeState:
    """Fresh state with every instance at the hidden level."""
    return LodRuntimeState(levels=np.full(tree_count, HIDDEN_LEVEL, dtype=np.int8))


def resolve_lod(distance: float, current: int, lod: LodConfig) -> int:
    """
    Next LOD level for an instance at ``distance`` currently at ``current``.

    Moving to a finer level requires the distance to drop ``hysteresis``
    below the boundary; staying at the current level tolerates
    ``hysteresis`` beyond it. Level 2 is kept out to the farther of
    ``lod2_distance + hysteresis`` and ``hidden_distance + hysteresis``.
    """
    h = lod.hysteresis

    if current == 0:
        if distance <= lod.lod0_distance + h:
            return 0
        if distance <= lod.lod1_distance + h:
            return 1
        if distance <= lod.lod2_distance + h:
            return 2
        return HIDDEN_LEVEL

    if current == 1:
        if distance < lod.lod0_distance - h:
            return 0
        if distance <= lod.lod1_distance + h:
            return 1
        if distance <= lod.lod2_distance + h:
            return 2
        return HIDDEN_LEVEL

    if current == 2:
        if distance < lod.lod1_distance - h:
            return 1
        if distance <= lod.lod2_distance + h:
            return 2
        if distance < lod.hidden_distance + h:
            return 2
        return HIDDEN_LEVEL

    if distance < lod.lod2_distance - h:
        return 2
    return HIDDEN_LEVEL


def positions_to_array(positions: PositionsLike) -> np.ndarray:
    """Convert placements, points or an array to an (N, 3) float array."""
    if isinstance(positions, np.ndarray):
        return positions.reshape(-1, 3).astype(float)
    rows = []
    for entry in positions:
        if isinstance(entry, TreePlacement):
            entry = entry.position
        if isinstance(entry, Point3D):
            rows.append(entry.to_array())
        else:
            rows.append(np.asarray(entry, dtype=float))
    if not rows:
        return np.zeros((0, 3))
    return np.array(rows, dtype=float)


def _apply_level(batches: LodBatches, tree_index: int, level: int) -> None:
    for lod_level in VISIBLE_LEVELS:
        visible = level == lod_level
        batches.branch_batches[lod_level].set_visible_at(
            batches.branch_instance_ids[tree_index][lod_level], visible
        )
        batches.canopy_batches[lod_level].set_visible_at(
            batches.canopy_instance_ids[tree_index][lod_level], visible
        )


def update_tree_lods(
    state: LodRuntimeState,
    delta_seconds: float,
    camera_position,
    positions: PositionsLike,
    batches: LodBatches,
    lod: LodConfig,
    force: bool = False,
) -> List[int]:
    """
    Run one LOD pass if the update interval has elapsed.

    Parameters
    ----------
    state : LodRuntimeState
        Mutated in place
    delta_seconds : float
        Frame time
    camera_position : Point3D or array-like
        Camera position in world space
    positions : array-like
        Instance positions (an (N, 3) array, points or placements)
    batches : LodBatches
        Visibility targets
    lod : LodConfig
        Distance thresholds and update rate
    force : bool
        Run the pass regardless of the update interval

    Returns
    -------
    changed : List[int]
        Indices of instances whose level changed (every instance on the
        first pass). Empty when the pass was skipped.
    """
    update_interval = 1.0 / max(lod.update_hz, 1e-6)
    state.elapsed += delta_seconds

    if not force and state.initialized and state.elapsed < update_interval:
        return []
    state.elapsed = 0.0

    if isinstance(camera_position, Point3D):
        camera = camera_position.to_array()
    else:
        camera = np.asarray(camera_position, dtype=float)

    points = positions_to_array(positions)
    distances = np.linalg.norm(points - camera, axis=1) if len(points) else np.zeros(0)

    changed = []
    for tree_index in range(len(points)):
        current = int(state.levels[tree_index])
        level = resolve_lod(float(distances[tree_index]), current, lod)
        if state.initialized and level == current:
            continue

        _apply_level(batches, tree_index, level)
        state.levels[tree_index] = level
        changed.append(tree_index)

    state.initialized = True
    return changed


class TreeLodController:
    """
    Convenience wrapper holding the state, positions and batches of a scene.

    Example
    -------
    >>> controller = TreeLodController(placements, batches, config.lod)
    >>> controller.update(dt, camera_position)
    """

    def __init__(
        self,
        positions: PositionsLike,
        batches: LodBatches,
        lod: Optional[LodConfig] = None,
    ):
        self.positions = positions_to_array(positions)
        self.batches = batches
        self.lod = lod if lod is not None else LodConfig()
        self.state = create_lod_state(len(self.positions))

    @property
    def levels(self) -> np.ndarray:
        return self.state.levels

    def update(self, delta_seconds: float, camera_position, force: bool = False) -> List[int]:
        """Advance one frame; returns the indices whose level changed."""
        changed = update_tree_lods(
            self.state,
            delta_seconds,
            camera_position,
            self.positions,
            self.batches,
            self.lod,
            force=force,
        )
        if changed:
            logger.debug("LOD pass changed %d/%d instances", len(changed), len(self.positions))
        return changed

    def reset(self) -> None:
        """Forget current levels; the next pass re-applies every instance."""
        self.state = create_lod_state(len(self.positions))
