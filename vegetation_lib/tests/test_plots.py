"""Smoke tests for matplotlib visualization."""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest
from vegetation_lib.ops.placement import generate_tree_placements
from vegetation_lib.ops.radius_solver import solve_branch_radii
from vegetation_lib.ops.space_colonization import grow_skeleton
from vegetation_lib.visualization.plots import plot_placements, plot_skeleton


def test_plot_skeleton(small_species, growth):
    skeleton = solve_branch_radii(grow_skeleton(small_species, growth, seed=3))
    ax = plot_skeleton(skeleton, color_by="radius", show=False, title="tree")
    assert ax.get_title() == "tree"
    assert len(ax.lines) == len(list(skeleton.iter_edges()))
    plt.close("all")


def test_plot_unsolved_skeleton(small_species, growth):
    skeleton = grow_skeleton(small_species, growth, seed=4)
    ax = plot_skeleton(skeleton, show=False)
    assert len(ax.lines) > 0
    plt.close("all")


def test_plot_placements(open_field_config, flat_terrain):
    placements = generate_tree_placements(open_field_config, flat_terrain)
    ax = plot_placements(placements, open_field_config, show=False)
    # field boundary, clearing and one spacing disk per tree
    assert len(ax.patches) == len(placements) + 2
    plt.close("all")


def test_plot_empty_placements():
    ax = plot_placements([], show=False)
    assert len(ax.patches) == 0
    plt.close("all")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
