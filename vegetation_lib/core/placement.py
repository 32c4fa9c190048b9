"""
Tree placement records produced by field placement.
"""

from dataclasses import dataclass
from .types import Point3D


@dataclass
class TreePlacement:
    """
    One tree instance on the terrain.

    ``position`` is already projected onto the terrain height. Entries carry
    no ownership between each other; their order only matters for
    reproducing the RNG stream.
    """

    position: Point3D
    yaw: float  # radians
    scale: float
    species_id: str
    variant_index: int
    seed: int

    @property
    def archetype_id(self) -> str:
        """Id of the shared archetype this instance renders with."""
        return f"{self.species_id}-{self.variant_index}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "position": self.position.to_dict(),
            "yaw": self.yaw,
            "scale": self.scale,
            "species_id": self.species_id,
            "variant_index": self.variant_index,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "TreePlacement":
        """Create from dictionary."""
        return cls(
            position=Point3D.from_dict(d["position"]),
            yaw=d["yaw"],
            scale=d["scale"],
            species_id=d["species_id"],
            variant_index=d["variant_index"],
            seed=d["seed"],
        )
