"""
Adapter for converting between TreeSkeleton and NetworkX graphs.

This enables graph algorithms (path queries, arborescence checks, layout)
on grown skeletons.
"""

import networkx as nx
import numpy as np
from ..core.skeleton import SkeletonNode, TreeSkeleton
from ..core.types import Point3D


def to_networkx_graph(skeleton: TreeSkeleton) -> nx.DiGraph:
    """
    Convert the root-reachable part of a skeleton to a directed graph.

    Edges point from parent to child. Node ids are the skeleton's node ids;
    pruned nodes are left out.

    The resulting graph has node attributes:
    - 'coord': [x, y, z] position as list
    - 'depth': int edges from the root
    - 'radius': float branch radius

    And edge attributes:
    - 'length': float segment length
    - 'radius': float child radius (the thickness of the segment's tip)

    Parameters
    ----------
    skeleton : TreeSkeleton
        The skeleton to convert

    Returns
    -------
    G : nx.DiGraph
        NetworkX graph representation, with ``G.graph['root']`` set
    """
    G = nx.DiGraph(root=skeleton.root_id)
    if not skeleton.nodes:
        return G

    for node_id in sorted(skeleton.reachable_node_ids()):
        node = skeleton.nodes[node_id]
        G.add_node(
            node_id,
            coord=[node.position.x, node.position.y, node.position.z],
            depth=node.depth,
            radius=node.radius,
        )

    for parent_id, child_id in skeleton.iter_edges():
        parent = skeleton.nodes[parent_id]
        child = skeleton.nodes[child_id]
        length = float(np.linalg.norm(child.position.to_array() - parent.position.to_array()))
        G.add_edge(parent_id, child_id, length=length, radius=child.radius)

    return G


def from_networkx_graph(G: nx.DiGraph) -> TreeSkeleton:
    """
    Convert a directed graph back to a TreeSkeleton.

    Parameters
    ----------
    G : nx.DiGraph
        Graph with integer nodes ``0..n-1`` carrying 'coord' and optionally
        'radius', edges pointing from parent to child

    Returns
    -------
    TreeSkeleton
        Reconstructed skeleton; depths are recomputed from the root

    Raises
    ------
    ValueError
        If node ids are not contiguous from 0 or the graph has no unique root
    """
    skeleton = TreeSkeleton()
    if G.number_of_nodes() == 0:
        return skeleton

    node_ids = sorted(G.nodes())
    if node_ids != list(range(len(node_ids))):
        raise ValueError("Graph node ids must be contiguous integers starting at 0")

    roots = [n for n in node_ids if G.in_degree(n) == 0]
    root_id = G.graph.get("root", roots[0] if len(roots) == 1 else None)
    if root_id is None or root_id not in roots:
        raise ValueError(f"Graph must have exactly one root, found {len(roots)}")

    for node_id in node_ids:
        data = G.nodes[node_id]
        coord = data.get('coord', [0.0, 0.0, 0.0])
        predecessors = list(G.predecessors(node_id))
        skeleton.nodes.append(SkeletonNode(
            id=node_id,
            parent_id=predecessors[0] if predecessors else None,
            position=Point3D(x=coord[0], y=coord[1], z=coord[2]),
            depth=0,
            children=sorted(G.successors(node_id)),
            radius=data.get('radius', 0.0),
        ))
    skeleton.root_id = root_id

    for parent_id, child_id in nx.bfs_edges(G, root_id):
        skeleton.nodes[child_id].depth = skeleton.nodes[parent_id].depth + 1

    skeleton.recompute_terminals()
    return skeleton
