"""Structural analysis functions for tree skeletons."""

from typing import Dict, Optional
import networkx as nx
import numpy as np
from ..adapters.networkx_adapter import to_networkx_graph
from ..core.result import ErrorCode, OperationResult, OperationStatus
from ..core.skeleton import TreeSkeleton

RADIUS_TOLERANCE = 1e-12


def check_skeleton_validity(
    skeleton: TreeSkeleton,
    check_radii: Optional[bool] = None,
) -> OperationResult:
    """
    Check the structural invariants of a skeleton.

    Checks:
    - the root-reachable part is a rooted tree (no cycles, one parent each)
    - every child's ``parent_id`` points back at the parent listing it
    - ``child.depth == parent.depth + 1`` on every edge
    - ``terminal_node_ids`` equals the reachable nodes without children
    - parents are at least as thick as their children (solved radii only)

    Parameters
    ----------
    skeleton : TreeSkeleton
        Skeleton to check
    check_radii : bool, optional
        Force the radius check on or off. By default it runs when any
        reachable node has a non-zero radius.

    Returns
    -------
    result : OperationResult
        Success, or failure with one error per violation
    """
    result = OperationResult.success("Skeleton is valid")
    if not skeleton.nodes:
        result.metadata["reachable_nodes"] = 0
        return result

    reachable = skeleton.reachable_node_ids()
    nodes = skeleton.nodes

    if skeleton.root.parent_id is not None:
        result.add_error(
            f"Root {skeleton.root_id} has parent {skeleton.root.parent_id}",
            ErrorCode.DISCONNECTED_NODE,
        )

    G = to_networkx_graph(skeleton)
    if not nx.is_arborescence(G):
        if not nx.is_directed_acyclic_graph(G):
            result.add_error("Reachable skeleton contains a cycle", ErrorCode.CYCLE_DETECTED)
        else:
            shared = [n for n in G.nodes() if G.in_degree(n) > 1]
            result.add_error(
                f"Nodes listed under more than one parent: {shared[:10]}",
                ErrorCode.CYCLE_DETECTED,
            )

    if check_radii is None:
        check_radii = any(nodes[node_id].radius > 0.0 for node_id in reachable)

    for parent_id, child_id in skeleton.iter_edges():
        parent = nodes[parent_id]
        child = nodes[child_id]
        if child.parent_id != parent_id:
            result.add_error(
                f"Node {child_id} is listed under {parent_id} but points to {child.parent_id}",
                ErrorCode.DISCONNECTED_NODE,
            )
        if child_id != skeleton.root_id and child.depth != parent.depth + 1:
            result.add_error(
                f"Node {child_id} has depth {child.depth}, parent {parent_id} has {parent.depth}",
                ErrorCode.DEPTH_MISMATCH,
            )
        if check_radii and parent.radius + RADIUS_TOLERANCE < child.radius:
            result.add_error(
                f"Node {child_id} (r={child.radius:.4g}) is thicker than "
                f"parent {parent_id} (r={parent.radius:.4g})",
                ErrorCode.RADIUS_NOT_MONOTONIC,
            )

    expected_terminals = {node_id for node_id in reachable if not nodes[node_id].children}
    if set(skeleton.terminal_node_ids) != expected_terminals:
        result.add_error(
            f"Terminal cache has {len(skeleton.terminal_node_ids)} entries, "
            f"expected {len(expected_terminals)}",
            ErrorCode.TERMINALS_MISMATCH,
        )

    result.metadata["reachable_nodes"] = len(reachable)
    if result.errors:
        result.status = OperationStatus.FAILURE
        result.message = f"Skeleton has {len(result.errors)} structural violations"

    return result


def compute_skeleton_stats(skeleton: TreeSkeleton) -> Dict:
    """
    Compute summary statistics of the root-reachable tree.

    Parameters
    ----------
    skeleton : TreeSkeleton
        Skeleton to analyze

    Returns
    -------
    stats : dict
        Dictionary with node counts, child-count histogram, depth, total
        branch length, height, crown width and radii
    """
    reachable = skeleton.reachable_node_ids()
    if not reachable:
        return {
            'allocated_nodes': len(skeleton.nodes),
            'reachable_nodes': 0,
            'pruned_nodes': len(skeleton.nodes),
            'terminal_count': 0,
            'branch_points': 0,
            'child_count_histogram': {},
            'max_depth': 0,
            'total_length': 0.0,
            'height': 0.0,
            'crown_width': 0.0,
            'root_radius': 0.0,
            'mean_terminal_radius': 0.0,
        }

    G = to_networkx_graph(skeleton)

    child_count_histogram = {}
    for node_id in reachable:
        count = G.out_degree(node_id)
        child_count_histogram[count] = child_count_histogram.get(count, 0) + 1

    coords = np.array([G.nodes[n]['coord'] for n in G.nodes()])
    root = skeleton.root.position
    planar = np.hypot(coords[:, 0] - root.x, coords[:, 2] - root.z)
    terminals = [n for n in reachable if G.out_degree(n) == 0]

    stats = {
        'allocated_nodes': len(skeleton.nodes),
        'reachable_nodes': len(reachable),
        'pruned_nodes': len(skeleton.nodes) - len(reachable),
        'terminal_count': len(terminals),
        'branch_points': sum(1 for n in reachable if G.out_degree(n) >= 2),
        'child_count_histogram': child_count_histogram,
        'max_depth': skeleton.max_depth(),
        'total_length': float(sum(length for _, _, length in G.edges(data='length'))),
        'height': float(coords[:, 1].max() - root.y),
        'crown_width': float(2.0 * planar.max()),
        'root_radius': float(skeleton.root.radius),
        'mean_terminal_radius': float(np.mean([skeleton.nodes[n].radius for n in terminals])),
    }

    return stats
