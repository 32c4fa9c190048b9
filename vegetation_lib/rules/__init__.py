"""Rules for radius combination and pruning."""

from .radius import pipe_radius, should_prune

__all__ = [
    "pipe_radius",
    "should_prune",
]
