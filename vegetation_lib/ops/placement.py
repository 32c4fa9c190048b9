"""
Blue-noise placement of tree instances over a terrain field.

Bridson-style Poisson-disc growth with three phases:

1. Seed: uniform-area samples in the field disk until one is accepted
2. Growth: pick a random active point and try candidates in the annulus
   [min_spacing, 2 * min_spacing] around it; retire it when all fail
3. Fill: if still short of ``tree_count``, try more uniform samples

A candidate must lie in the field annulus, clear every rock, sit on gentle
enough ground, pass the value-noise density test and keep ``min_spacing``
from every accepted point. The result is best-effort: constrained terrain
may yield fewer than ``tree_count`` placements.
"""

import logging
import math
from typing import List, Optional, Sequence

from ..core.placement import TreePlacement
from ..core.rng import DeterministicRng, PLACEMENT_SALT
from ..core.species import TreeSpeciesPreset
from ..core.terrain import RockFormation, TerrainSampler
from ..core.types import Point3D, lerp
from ..params.config import PlacementConfig, VegetationConfig
from ..spatial.grid_index import PlacementGrid
from ..spatial.noise import value_noise2d

logger = logging.getLogger(__name__)

TAU = math.pi * 2.0
DENSITY_NOISE_OFFSET = (-16.3, 9.8)
SCALE_RANGE = (0.86, 1.2)
MAX_INSTANCE_SEED = 1_000_000_000


def is_near_rock(
    x: float,
    z: float,
    clearance: float,
    rock_formations: Sequence[RockFormation],
) -> bool:
    """Check whether (x, z) is inside any rock's exclusion footprint."""
    return any(rock.blocks(x, z, clearance) for rock in rock_formations)


def sample_weighted_species(
    rng: DeterministicRng,
    species: Sequence[TreeSpeciesPreset],
) -> TreeSpeciesPreset:
    """
    Pick a species by cumulative placement weight.

    Consumes exactly one draw. ``species`` must be non-empty.
    """
    total_weight = sum(entry.placement_weight for entry in species)
    target = rng.random() * max(total_weight, 1e-6)
    for entry in species:
        target -= entry.placement_weight
        if target <= 0:
            return entry
    return species[-1]


class _FieldSampler:
    """Acceptance predicate and bookkeeping for one placement run."""

    def __init__(
        self,
        config: VegetationConfig,
        terrain_sampler: TerrainSampler,
        rock_formations: Sequence[RockFormation],
        rng: DeterministicRng,
    ):
        self.config = config
        self.placement: PlacementConfig = config.placement
        self.terrain_sampler = terrain_sampler
        self.rock_formations = rock_formations
        self.rng = rng
        self.grid = PlacementGrid(self.placement.field_radius, self.placement.min_spacing)
        self.active: List[int] = []
        self.placements: List[TreePlacement] = []
        self.rejections = {
            "annulus": 0,
            "rock": 0,
            "slope": 0,
            "density": 0,
            "grid": 0,
            "spacing": 0,
        }

    def can_place(self, x: float, z: float) -> bool:
        """
        Evaluate the acceptance predicate.

        The density test consumes one draw, so the stream depends on how far
        each candidate gets through the checks.
        """
        placement = self.placement

        radial_distance = math.hypot(x, z)
        if radial_distance < placement.clearing_radius or radial_distance > placement.field_radius:
            self.rejections["annulus"] += 1
            return False

        if is_near_rock(x, z, placement.rock_clearance, self.rock_formations):
            self.rejections["rock"] += 1
            return False

        if self.terrain_sampler.sample_slope(x, z) > placement.max_slope:
            self.rejections["slope"] += 1
            return False

        density = value_noise2d(
            (x + DENSITY_NOISE_OFFSET[0]) * placement.density_noise_scale,
            (z + DENSITY_NOISE_OFFSET[1]) * placement.density_noise_scale,
        )
        threshold = placement.density_threshold + self.rng.random() * placement.density_jitter
        if density < threshold:
            self.rejections["density"] += 1
            return False

        if not self.grid.contains_cell(x, z):
            self.rejections["grid"] += 1
            return False

        if self.grid.has_neighbor_within(x, z):
            self.rejections["spacing"] += 1
            return False

        return True

    def push(self, x: float, z: float) -> Optional[TreePlacement]:
        """
        Accept a point: register it and draw its instance attributes.

        Draw order: species, variant, seed, yaw, scale.
        """
        point_index = self.grid.insert(x, z)
        if point_index is None:
            return None
        self.active.append(point_index)

        rng = self.rng
        species = sample_weighted_species(rng, self.config.species)
        variant_index = rng.randint(self.config.variants_per_species)
        placement_seed = rng.randint(MAX_INSTANCE_SEED)
        yaw = rng.random() * TAU
        scale = lerp(SCALE_RANGE[0], SCALE_RANGE[1], rng.random())

        tree = TreePlacement(
            position=Point3D(x, self.terrain_sampler.sample_height(x, z), z),
            yaw=yaw,
            scale=scale,
            species_id=species.id,
            variant_index=variant_index,
            seed=placement_seed,
        )
        self.placements.append(tree)
        return tree

    def random_disk_point(self):
        radius = self.placement.field_radius * math.sqrt(self.rng.random())
        angle = self.rng.random() * TAU
        return math.cos(angle) * radius, math.sin(angle) * radius


def generate_tree_placements(
    config: VegetationConfig,
    terrain_sampler: TerrainSampler,
    rock_formations: Sequence[RockFormation] = (),
) -> List[TreePlacement]:
    """
    Distribute tree instances over the field.

    Parameters
    ----------
    config : VegetationConfig
        Uses ``placement``, ``seed``, ``variants_per_species`` and ``species``
        (non-empty, positive total weight)
    terrain_sampler : TerrainSampler
        Height and slope source (read-only)
    rock_formations : sequence of RockFormation
        Obstacles to keep clear of (read-only)

    Returns
    -------
    placements : List[TreePlacement]
        At most ``placement.tree_count`` entries, pairwise at least
        ``placement.min_spacing`` apart on the ground plane. Fewer entries
        are returned when the terrain rejects too many candidates.
    """
    if not config.species:
        raise ValueError("Placement requires at least one species")

    placement = config.placement
    rng = DeterministicRng(config.seed, salt=PLACEMENT_SALT)
    field = _FieldSampler(config, terrain_sampler, rock_formations, rng)

    if placement.tree_count <= 0:
        return []

    # seed phase
    for _ in range(placement.max_placement_attempts):
        if len(field.grid) > 0:
            break
        x, z = field.random_disk_point()
        if field.can_place(x, z):
            field.push(x, z)
            break

    # growth phase
    seeded = len(field.placements)
    while field.active and len(field.placements) < placement.tree_count:
        active_index = rng.randint(len(field.active))
        cx, cz = field.grid.point(field.active[active_index])

        accepted = False
        for _ in range(placement.poisson_attempts):
            angle = rng.random() * TAU
            distance = placement.min_spacing * (1.0 + rng.random())
            x = cx + math.cos(angle) * distance
            z = cz + math.sin(angle) * distance
            if not field.can_place(x, z):
                continue
            field.push(x, z)
            accepted = True
            break

        if not accepted:
            field.active[active_index] = field.active[-1]
            field.active.pop()
    grown = len(field.placements) - seeded

    # fill phase
    for _ in range(placement.max_placement_attempts):
        if len(field.placements) >= placement.tree_count:
            break
        x, z = field.random_disk_point()
        if not field.can_place(x, z):
            continue
        field.push(x, z)
    filled = len(field.placements) - seeded - grown

    logger.info(
        "Placed %d/%d trees (seed %d, grown %d, filled %d)",
        len(field.placements), placement.tree_count, seeded, grown, filled,
    )
    logger.debug("Placement rejections: %s", field.rejections)

    return field.placements
