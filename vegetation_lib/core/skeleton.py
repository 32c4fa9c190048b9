"""
Core tree skeleton data structures.

A skeleton is an arena: nodes live in a list indexed by their integer id,
parents are referenced by id and children by id lists. Pruning detaches
nodes from their parent's child list without deallocating them, so every
traversal must start from the root.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple
import numpy as np
from .types import Point3D


@dataclass
class SkeletonNode:
    """
    Node in a tree skeleton.

    The root is the only node without a parent.
    """

    id: int
    parent_id: Optional[int]
    position: Point3D
    depth: int
    children: List[int] = field(default_factory=list)
    radius: float = 0.0

    def is_root(self) -> bool:
        """Check if this node is the root."""
        return self.parent_id is None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "children": list(self.children),
            "position": self.position.to_dict(),
            "depth": self.depth,
            "radius": self.radius,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "SkeletonNode":
        """Create from dictionary."""
        return cls(
            id=d["id"],
            parent_id=d.get("parent_id"),
            position=Point3D.from_dict(d["position"]),
            depth=d["depth"],
            children=list(d.get("children", [])),
            radius=d.get("radius", 0.0),
        )


class TreeSkeleton:
    """
    Branching tree skeleton with a cached terminal list.

    Built once by the grower, mutated in place by the radius solver and
    treated as immutable afterwards.
    """

    def __init__(self):
        self.nodes: List[SkeletonNode] = []
        self.root_id: int = 0
        self.terminal_node_ids: List[int] = []
        self.metadata: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def add_node(self, position: Point3D, parent_id: Optional[int] = None) -> int:
        """
        Append a node and link it under ``parent_id``.

        Returns
        -------
        node_id : int
            Id of the new node
        """
        node_id = len(self.nodes)
        depth = 0 if parent_id is None else self.nodes[parent_id].depth + 1
        self.nodes.append(
            SkeletonNode(id=node_id, parent_id=parent_id, position=position, depth=depth)
        )
        if parent_id is None:
            self.root_id = node_id
        else:
            self.nodes[parent_id].children.append(node_id)
        return node_id

    @property
    def root(self) -> SkeletonNode:
        return self.nodes[self.root_id]

    def reachable_node_ids(self) -> Set[int]:
        """
        Collect every node reachable from the root.

        Iterative and cycle-safe: a node already seen is never expanded twice.
        """
        reachable: Set[int] = set()
        if not self.nodes:
            return reachable

        stack = [self.root_id]
        while stack:
            node_id = stack.pop()
            if node_id in reachable:
                continue
            reachable.add(node_id)
            stack.extend(self.nodes[node_id].children)

        return reachable

    def post_order(self, reachable: Optional[Set[int]] = None) -> List[int]:
        """
        Root-reachable node ids with every child listed before its parent.

        Uses an explicit two-pass stack so deep trunks never hit the
        recursion limit.
        """
        if not self.nodes:
            return []
        if reachable is None:
            reachable = self.reachable_node_ids()

        order: List[int] = []
        expanded: Set[int] = set()
        stack: List[Tuple[int, bool]] = [(self.root_id, False)]

        while stack:
            node_id, visited = stack.pop()
            if visited:
                order.append(node_id)
                continue
            if node_id in expanded:
                continue
            expanded.add(node_id)

            stack.append((node_id, True))
            children = self.nodes[node_id].children
            for child_id in reversed(children):
                if child_id in reachable and child_id not in expanded:
                    stack.append((child_id, False))

        return order

    def iter_edges(self) -> Iterator[Tuple[int, int]]:
        """Yield (parent_id, child_id) for every root-reachable edge."""
        reachable = self.reachable_node_ids()
        for node_id in sorted(reachable):
            for child_id in self.nodes[node_id].children:
                yield node_id, child_id

    def recompute_terminals(self) -> List[int]:
        """Refresh ``terminal_node_ids`` from the root-reachable set."""
        reachable = self.reachable_node_ids()
        self.terminal_node_ids = sorted(
            node_id for node_id in reachable if not self.nodes[node_id].children
        )
        return self.terminal_node_ids

    def positions_array(self) -> np.ndarray:
        """All node positions (reachable or not) as an (N, 3) array."""
        if not self.nodes:
            return np.zeros((0, 3))
        return np.array([node.position.to_tuple() for node in self.nodes])

    def max_depth(self) -> int:
        """Largest depth among root-reachable nodes."""
        reachable = self.reachable_node_ids()
        if not reachable:
            return 0
        return max(self.nodes[node_id].depth for node_id in reachable)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "schema_version": "1.0",
            "root_id": self.root_id,
            "terminal_node_ids": list(self.terminal_node_ids),
            "metadata": dict(self.metadata),
            "nodes": [node.to_dict() for node in self.nodes],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "TreeSkeleton":
        """Create from dictionary."""
        skeleton = cls()
        skeleton.nodes = [SkeletonNode.from_dict(n) for n in d["nodes"]]
        skeleton.root_id = d.get("root_id", 0)
        skeleton.terminal_node_ids = list(d.get("terminal_node_ids", []))
        skeleton.metadata = dict(d.get("metadata", {}))
        return skeleton
