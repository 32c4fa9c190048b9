"""Runtime (per-frame) systems for placed vegetation."""

from .lod_controller import (
    HIDDEN_LEVEL,
    LodBatches,
    LodRuntimeState,
    TreeLodController,
    VisibilityBatch,
    create_lod_state,
    resolve_lod,
    update_tree_lods,
)

__all__ = [
    "HIDDEN_LEVEL",
    "LodBatches",
    "LodRuntimeState",
    "TreeLodController",
    "VisibilityBatch",
    "create_lod_state",
    "resolve_lod",
    "update_tree_lods",
]
