"""
Terrain and obstacle inputs consumed by field placement.

Both are read-only during generation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Tuple
import numpy as np


class TerrainSampler(ABC):
    """Abstract base class for terrain height fields."""

    @abstractmethod
    def sample_height(self, x: float, z: float) -> float:
        """Ground height at (x, z)."""
        pass

    @abstractmethod
    def sample_slope(self, x: float, z: float) -> float:
        """
        Ground slope at (x, z).

        Must use the same convention as ``PlacementConfig.max_slope``
        (rise over run for the samplers in this module).
        """
        pass


@dataclass
class FlatTerrain(TerrainSampler):
    """Level ground at a constant height."""

    height: float = 0.0

    def sample_height(self, x: float, z: float) -> float:
        return self.height

    def sample_slope(self, x: float, z: float) -> float:
        return 0.0


class HeightFunctionTerrain(TerrainSampler):
    """
    Terrain defined by a height function ``f(x, z)``.

    Slope is the gradient magnitude estimated with central differences.
    """

    def __init__(self, height_fn: Callable[[float, float], float], epsilon: float = 0.25):
        """
        Parameters
        ----------
        height_fn : callable
            Height function of (x, z)
        epsilon : float
            Half-width of the finite-difference stencil (meters)
        """
        self.height_fn = height_fn
        self.epsilon = epsilon

    def sample_height(self, x: float, z: float) -> float:
        return float(self.height_fn(x, z))

    def sample_slope(self, x: float, z: float) -> float:
        e = self.epsilon
        dhdx = (self.height_fn(x + e, z) - self.height_fn(x - e, z)) / (2.0 * e)
        dhdz = (self.height_fn(x, z + e) - self.height_fn(x, z - e)) / (2.0 * e)
        return float(np.hypot(dhdx, dhdz))


@dataclass
class RockFormation:
    """
    Rock obstacle with an axis-aligned collider.

    ``collider`` holds half-extents along x, y and z.
    """

    position: Tuple[float, float, float]
    collider: Tuple[float, float, float]

    def blocks(self, x: float, z: float, clearance: float) -> bool:
        """
        Check whether (x, z) falls inside the rock's exclusion footprint.

        The footprint is the collider box grown by ``clearance``, plus a
        circle whose radius is the larger grown half-extent.
        """
        dx = x - self.position[0]
        dz = z - self.position[2]
        clear_x = self.collider[0] + clearance
        clear_z = self.collider[2] + clearance
        if abs(dx) < clear_x and abs(dz) < clear_z:
            return True
        radial_clear = max(clear_x, clear_z)
        return dx * dx + dz * dz < radial_clear * radial_clear

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"position": list(self.position), "collider": list(self.collider)}

    @classmethod
    def from_dict(cls, d: dict) -> "RockFormation":
        """Create from dictionary."""
        return cls(position=tuple(d["position"]), collider=tuple(d["collider"]))
