"""Spatial indexing and density fields for placement."""

from .grid_index import PlacementGrid
from .noise import hash2d, value_noise2d

__all__ = ["PlacementGrid", "hash2d", "value_noise2d"]
