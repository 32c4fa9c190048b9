"""
Branch radius solving and thin-branch pruning.
"""

import logging
from typing import Optional

from ..core.skeleton import TreeSkeleton
from ..params.config import RadiusConfig
from ..rules.radius import pipe_radius, should_prune

logger = logging.getLogger(__name__)


def solve_branch_radii(
    skeleton: TreeSkeleton,
    radius: Optional[RadiusConfig] = None,
    trunk_preserve_depth: Optional[int] = None,
) -> TreeSkeleton:
    """
    Assign pipe-model radii and prune thin dead-end branches, in place.

    Parameters
    ----------
    skeleton : TreeSkeleton
        Skeleton to mutate
    radius : RadiusConfig, optional
        Radius parameters (defaults to ``RadiusConfig()``)
    trunk_preserve_depth : int, optional
        Overrides ``radius.trunk_preserve_depth``

    Returns
    -------
    skeleton : TreeSkeleton
        The same skeleton, for chaining

    Algorithm
    ---------
    1. Collect the root-reachable set (iterative, cycle-safe)
    2. Walk it in post-order: leaves get ``twig_radius``, inner nodes
       ``(sum child.r^gamma)^(1/gamma)``
    3. Walk the same post-order again, detaching every child that is deeper
       than the preserved trunk, thinner than ``min_kept_radius`` and has no
       children. Children are settled before their parent, so a branch
       emptied by pruning is itself pruned when its parent is visited.
    4. Refresh the terminal list over the new reachable set

    Detached nodes stay allocated; radii are not recomputed after pruning,
    so a parent is never thinner than any surviving child.
    """
    if radius is None:
        radius = RadiusConfig()
    if trunk_preserve_depth is None:
        trunk_preserve_depth = radius.trunk_preserve_depth

    if not skeleton.nodes:
        skeleton.terminal_node_ids = []
        return skeleton

    reachable = skeleton.reachable_node_ids()
    post_order = skeleton.post_order(reachable)
    nodes = skeleton.nodes

    for node_id in post_order:
        node = nodes[node_id]
        if not node.children:
            node.radius = radius.twig_radius
            continue
        node.radius = pipe_radius(
            (nodes[child_id].radius for child_id in node.children),
            gamma=radius.gamma,
            fallback_radius=radius.twig_radius,
        )

    pruned = 0
    for node_id in post_order:
        node = nodes[node_id]
        kept = []
        for child_id in node.children:
            child = nodes[child_id]
            if should_prune(
                child.depth,
                child.radius,
                len(child.children),
                radius.min_kept_radius,
                trunk_preserve_depth,
            ):
                pruned += 1
            else:
                kept.append(child_id)
        node.children = kept

    skeleton.recompute_terminals()
    skeleton.metadata["pruned_nodes"] = skeleton.metadata.get("pruned_nodes", 0) + pruned

    logger.debug(
        "Solved radii for %d nodes (root radius %.4f), pruned %d",
        len(post_order), skeleton.root.radius, pruned,
    )

    return skeleton
