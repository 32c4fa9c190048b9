"""
Species presets: the per-species ranges a tree is drawn from.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

NumericRange = Tuple[float, float]


class TreeShape(Enum):
    """Canopy envelope used to scatter growth attractors."""
    CONICAL = "conical"
    SPHERICAL = "spherical"
    WINDSWEPT = "windswept"
    COLUMNAR = "columnar"

    @classmethod
    def parse(cls, value) -> "TreeShape":
        """Accept an enum member or its tag; ``round`` is an alias of spherical."""
        if isinstance(value, cls):
            return value
        tag = str(value).lower()
        if tag == "round":
            return cls.SPHERICAL
        return cls(tag)


@dataclass
class TreeSpeciesPreset:
    """
    Growth and placement parameters for one tree species.

    Units: heights and radii in meters.
    """

    id: str
    shape: TreeShape = TreeShape.SPHERICAL
    placement_weight: float = 1.0
    trunk_height: NumericRange = (2.0, 3.0)
    canopy_height: NumericRange = (3.0, 4.0)
    canopy_radius: NumericRange = (2.0, 3.0)
    canopy_puff_radius: NumericRange = (0.8, 1.2)
    attractor_count: NumericRange = (180, 260)
    lean: float = 0.1  # trunk bend amplitude
    wind_skew: float = 0.0  # canopy offset along +x
    trunk_color: str = "#6b4a2f"  # consumed by the external material stage
    canopy_color: str = "#3f7a3a"

    def __post_init__(self):
        self.shape = TreeShape.parse(self.shape)
        self.trunk_height = tuple(self.trunk_height)
        self.canopy_height = tuple(self.canopy_height)
        self.canopy_radius = tuple(self.canopy_radius)
        self.canopy_puff_radius = tuple(self.canopy_puff_radius)
        self.attractor_count = tuple(self.attractor_count)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "shape": self.shape.value,
            "placement_weight": self.placement_weight,
            "trunk_height": list(self.trunk_height),
            "canopy_height": list(self.canopy_height),
            "canopy_radius": list(self.canopy_radius),
            "canopy_puff_radius": list(self.canopy_puff_radius),
            "attractor_count": list(self.attractor_count),
            "lean": self.lean,
            "wind_skew": self.wind_skew,
            "trunk_color": self.trunk_color,
            "canopy_color": self.canopy_color,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "TreeSpeciesPreset":
        """Create from dictionary."""
        return cls(
            id=d["id"],
            shape=d.get("shape", "spherical"),
            placement_weight=d.get("placement_weight", 1.0),
            trunk_height=d.get("trunk_height", (2.0, 3.0)),
            canopy_height=d.get("canopy_height", (3.0, 4.0)),
            canopy_radius=d.get("canopy_radius", (2.0, 3.0)),
            canopy_puff_radius=d.get("canopy_puff_radius", (0.8, 1.2)),
            attractor_count=d.get("attractor_count", (180, 260)),
            lean=d.get("lean", 0.1),
            wind_skew=d.get("wind_skew", 0.0),
            trunk_color=d.get("trunk_color", "#6b4a2f"),
            canopy_color=d.get("canopy_color", "#3f7a3a"),
        )
