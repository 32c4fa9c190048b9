"""
Adapters for integrating vegetation_lib with graph tooling.
"""

from .networkx_adapter import to_networkx_graph, from_networkx_graph

__all__ = [
    "to_networkx_graph",
    "from_networkx_graph",
]
