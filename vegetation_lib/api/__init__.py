"""High-level API for building vegetation scenes."""

from .scene import (
    Mesher,
    VegetationScene,
    build_vegetation_scene,
    create_lod_controller,
    mesh_scene,
)

__all__ = [
    "Mesher",
    "VegetationScene",
    "build_vegetation_scene",
    "create_lod_controller",
    "mesh_scene",
]
