"""Visualization helpers for skeletons and placement fields."""

from .plots import plot_skeleton, plot_placements

__all__ = ["plot_skeleton", "plot_placements"]
