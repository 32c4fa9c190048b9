"""
Geometric primitive types for tree skeletons and placements.

Coordinates are y-up: x and z span the ground plane, y is height.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple
import numpy as np


WORLD_UP = np.array([0.0, 1.0, 0.0])


@dataclass
class Point3D:
    """3D point in space."""

    x: float
    y: float
    z: float

    def to_array(self) -> np.ndarray:
        """Convert to numpy array."""
        return np.array([self.x, self.y, self.z])

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Point3D":
        """Create from numpy array."""
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def to_tuple(self) -> Tuple[float, float, float]:
        """Convert to tuple."""
        return (self.x, self.y, self.z)

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> "Point3D":
        """Create from tuple."""
        return cls(float(t[0]), float(t[1]), float(t[2]))

    def distance_to(self, other: "Point3D") -> float:
        """Compute Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return float(np.sqrt(dx**2 + dy**2 + dz**2))

    def planar_distance_to(self, other: "Point3D") -> float:
        """Distance measured on the ground (x/z) plane only."""
        return float(np.hypot(self.x - other.x, self.z - other.z))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, d: dict) -> "Point3D":
        """Create from dictionary."""
        return cls(d["x"], d["y"], d["z"])


def normalize(vector: np.ndarray, fallback: np.ndarray = WORLD_UP) -> np.ndarray:
    """
    Return a unit-length copy of ``vector``.

    Near-zero vectors cannot be normalized and map to ``fallback`` instead,
    so growth directions never collapse to NaN.
    """
    length = float(np.sqrt(np.dot(vector, vector)))
    if length < 1e-10:
        return np.array(fallback, dtype=float)
    return vector * (1.0 / length)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between ``a`` and ``b``."""
    return a + (b - a) * t
