"""
Space colonization growth of tree skeletons.

A trunk is grown first as a bending chain, then attractor points scattered
through the species' canopy envelope pull the skeleton outward:

1. Each attractor finds its nearest node
2. Attractors within ``kill_distance`` are consumed, those within
   ``influence_radius`` pull their nearest node, the rest wait
3. Every pulled node grows one child along its mean pull direction, blended
   with apical dominance, lateral damping and wind
4. Repeat until no attractor influences any node

Every random draw comes from a salted ``DeterministicRng`` in a fixed order,
so a seed always reproduces the same skeleton.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple
import numpy as np
from scipy.spatial import cKDTree
from tqdm import tqdm

from ..core.rng import DeterministicRng, SKELETON_SALT
from ..core.skeleton import TreeSkeleton
from ..core.species import TreeShape, TreeSpeciesPreset
from ..core.types import Point3D, WORLD_UP, lerp, normalize
from ..params.config import GrowthConfig

logger = logging.getLogger(__name__)

CONICAL_HEIGHT_EXPONENT = 0.78
CANOPY_FLATTENING = 0.72
MIN_SEPARATION_FACTOR = 0.58  # fraction of step_size two nodes may not come closer than


@dataclass
class CanopyEnvelope:
    """Scalar tree dimensions drawn for one skeleton."""

    trunk_height: float
    canopy_height: float
    canopy_radius: float
    wind_skew: float = 0.0


def _sample_conical(envelope: CanopyEnvelope, theta: float, u: float, v: float) -> np.ndarray:
    y_norm = u ** CONICAL_HEIGHT_EXPONENT
    radial = (1.0 - y_norm) * envelope.canopy_radius * math.sqrt(v)
    return np.array([
        math.cos(theta) * radial,
        envelope.trunk_height + y_norm * envelope.canopy_height,
        math.sin(theta) * radial,
    ])


def _sample_in_sphere(radius: float, theta: float, u: float, v: float) -> Tuple[float, float, float]:
    """Uniform point in a sphere: cube-root radius, arccosine polar angle."""
    sphere_radius = radius * v ** (1.0 / 3.0)
    phi = math.acos(1.0 - 2.0 * u)
    return (
        math.sin(phi) * math.cos(theta) * sphere_radius,
        math.cos(phi) * sphere_radius,
        math.sin(phi) * math.sin(theta) * sphere_radius,
    )


def _sample_spherical(envelope: CanopyEnvelope, theta: float, u: float, v: float) -> np.ndarray:
    x, y, z = _sample_in_sphere(envelope.canopy_radius, theta, u, v)
    return np.array([
        x,
        envelope.trunk_height + envelope.canopy_height * 0.5 + y * CANOPY_FLATTENING,
        z,
    ])


def _sample_windswept(envelope: CanopyEnvelope, theta: float, u: float, v: float) -> np.ndarray:
    position = _sample_spherical(envelope, theta, u, v)
    position[0] += envelope.canopy_radius * envelope.wind_skew * 0.42
    position[2] -= envelope.canopy_radius * envelope.wind_skew * 0.12
    return position


# columnar crowns differ only in their meshed canopy; attractors share the sphere
ATTRACTOR_SAMPLERS: Dict[TreeShape, Callable[[CanopyEnvelope, float, float, float], np.ndarray]] = {
    TreeShape.CONICAL: _sample_conical,
    TreeShape.SPHERICAL: _sample_spherical,
    TreeShape.WINDSWEPT: _sample_windswept,
    TreeShape.COLUMNAR: _sample_spherical,
}


def sample_attractors(
    shape: TreeShape,
    envelope: CanopyEnvelope,
    count: int,
    rng: DeterministicRng,
) -> np.ndarray:
    """
    Scatter ``count`` attractors through the canopy envelope.

    Each attractor consumes three draws (azimuth, u, v) in that order.

    Returns
    -------
    attractors : np.ndarray
        Array of shape (count, 3)
    """
    sampler = ATTRACTOR_SAMPLERS[TreeShape.parse(shape)]
    points = []
    for _ in range(count):
        theta = rng.random() * math.pi * 2.0
        u = rng.random()
        v = rng.random()
        points.append(sampler(envelope, theta, u, v))

    if not points:
        return np.zeros((0, 3))
    return np.array(points)


def _grow_trunk(
    skeleton: TreeSkeleton,
    species: TreeSpeciesPreset,
    step_size: float,
    trunk_height: float,
    rng: DeterministicRng,
) -> int:
    """Grow the trunk chain from the root; returns the number of segments."""
    lean = species.lean
    trunk_direction = normalize(np.array([species.wind_skew * 0.2, 1.0, -lean * 0.15]))
    trunk_segments = max(4, int(math.floor(trunk_height / step_size)))

    current_id = skeleton.root_id
    current_position = skeleton.root.position.to_array()
    for i in range(trunk_segments):
        bend_strength = lerp(0.15, 0.95, i / max(trunk_segments - 1, 1))
        jitter_x = (rng.random() - 0.5) * lean
        jitter_z = (rng.random() - 0.5) * lean
        bend_direction = normalize(
            np.array([jitter_x, 1.0, jitter_z]) + trunk_direction * (bend_strength * lean)
        )
        current_position = current_position + bend_direction * step_size
        current_id = skeleton.add_node(Point3D.from_array(current_position), current_id)

    return trunk_segments


def _nearest_nodes(
    positions: np.ndarray,
    attractors: np.ndarray,
    use_spatial_index: bool,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Nearest node index and distance for every attractor.

    The default path is a vectorised linear scan; ties resolve to the lowest
    node id. The k-d tree path returns the same nearest node except on exact
    distance ties, and its distances are recomputed the same way.
    """
    if use_spatial_index:
        _, nearest = cKDTree(positions).query(attractors)
        nearest = np.asarray(nearest, dtype=int)
    else:
        deltas = attractors[:, None, :] - positions[None, :, :]
        nearest = np.argmin((deltas ** 2).sum(axis=2), axis=1)

    offsets = attractors - positions[nearest]
    distances = np.sqrt((offsets ** 2).sum(axis=1))
    return nearest, distances


def _is_too_close(
    candidate: np.ndarray,
    positions: np.ndarray,
    added: List[np.ndarray],
    min_distance_sq: float,
) -> bool:
    if len(positions) and np.any(((positions - candidate) ** 2).sum(axis=1) < min_distance_sq):
        return True
    for position in added:
        if float(((position - candidate) ** 2).sum()) < min_distance_sq:
            return True
    return False


def grow_skeleton(
    species: TreeSpeciesPreset,
    growth: GrowthConfig,
    seed: int,
    show_progress: bool = False,
) -> TreeSkeleton:
    """
    Grow a tree skeleton by space colonization.

    Parameters
    ----------
    species : TreeSpeciesPreset
        Species ranges and shape
    growth : GrowthConfig
        Growth parameters
    seed : int
        Integer seed; identical seeds give identical skeletons
    show_progress : bool
        Show a tqdm progress bar over growth iterations

    Returns
    -------
    skeleton : TreeSkeleton
        Skeleton with zero radii and an up-to-date terminal list. The drawn
        dimensions are recorded in ``skeleton.metadata``.

    Draw order
    ----------
    trunk height, canopy height, canopy radius, attractor count, then two
    jitter draws per trunk segment, then three draws per attractor. Changing
    this order changes every tree generated from an existing seed.
    """
    rng = DeterministicRng(seed, salt=SKELETON_SALT)
    trunk_height = rng.range_lerp(species.trunk_height)
    canopy_height = rng.range_lerp(species.canopy_height)
    canopy_radius = rng.range_lerp(species.canopy_radius)
    attractor_count = int(math.floor(rng.range_lerp(species.attractor_count)))

    step_size = growth.step_size
    skeleton = TreeSkeleton()
    skeleton.add_node(Point3D(0.0, 0.0, 0.0), None)
    trunk_segments = _grow_trunk(skeleton, species, step_size, trunk_height, rng)

    envelope = CanopyEnvelope(
        trunk_height=trunk_height,
        canopy_height=canopy_height,
        canopy_radius=canopy_radius,
        wind_skew=species.wind_skew,
    )
    attractors = sample_attractors(species.shape, envelope, attractor_count, rng)

    kill_distance = growth.kill_distance
    influence_radius = growth.influence_radius
    min_distance_sq = (step_size * MIN_SEPARATION_FACTOR) ** 2
    wind_offset = np.array([species.wind_skew * 0.03, 0.0, 0.0])

    iterations = 0
    rejected = 0
    pbar = tqdm(
        total=growth.max_iterations,
        desc=f"Growing {species.id}",
        unit="iter",
        disable=not show_progress,
    )

    for iteration in range(growth.max_iterations):
        if len(attractors) == 0:
            break

        positions = skeleton.positions_array()
        nearest, distances = _nearest_nodes(positions, attractors, growth.use_spatial_index)

        # insertion order = order of first pull, which fixes the id of each new node
        direction_sums: Dict[int, np.ndarray] = {}
        direction_counts: Dict[int, int] = {}
        remaining = []

        for attractor_idx in range(len(attractors)):
            distance = float(distances[attractor_idx])
            if distance <= kill_distance:
                continue

            if distance <= influence_radius:
                node_id = int(nearest[attractor_idx])
                pull = (attractors[attractor_idx] - positions[node_id]) / distance
                if node_id in direction_sums:
                    direction_sums[node_id] = direction_sums[node_id] + pull
                    direction_counts[node_id] += 1
                else:
                    direction_sums[node_id] = pull
                    direction_counts[node_id] = 1
            else:
                remaining.append(attractor_idx)

        if not direction_sums:
            break

        added: List[np.ndarray] = []
        for node_id, direction_sum in direction_sums.items():
            node = skeleton.nodes[node_id]
            direction = direction_sum * (1.0 / direction_counts[node_id])

            depth_normalized = node.depth / max(len(skeleton.nodes), 1)
            apical = (1.0 - depth_normalized) * growth.apical_dominance

            direction = (
                direction * (1.0 - growth.lateral_bias)
                + WORLD_UP * (growth.trunk_lift_bias + apical)
                + wind_offset
            )
            direction = normalize(direction)

            child_position = positions[node_id] + direction * step_size
            if _is_too_close(child_position, positions, added, min_distance_sq):
                rejected += 1
                continue

            skeleton.add_node(Point3D.from_array(child_position), node_id)
            added.append(child_position)

        attractors = attractors[remaining] if remaining else np.zeros((0, 3))
        iterations = iteration + 1
        pbar.update(1)
        pbar.set_postfix({"nodes": len(skeleton.nodes), "attractors": len(attractors)})

    pbar.close()

    skeleton.recompute_terminals()
    skeleton.metadata.update({
        "species_id": species.id,
        "seed": seed,
        "trunk_height": trunk_height,
        "canopy_height": canopy_height,
        "canopy_radius": canopy_radius,
        "attractor_count": attractor_count,
        "trunk_segments": trunk_segments,
        "iterations": iterations,
        "remaining_attractors": int(len(attractors)),
        "rejected_too_close": rejected,
    })

    logger.debug(
        "Grew %s skeleton (seed=%d): %d nodes, %d terminals in %d iterations",
        species.id, seed, len(skeleton.nodes), len(skeleton.terminal_node_ids), iterations,
    )

    return skeleton
