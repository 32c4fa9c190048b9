"""Skeleton and placement visualization for debugging and inspection."""

from typing import Literal, Optional, Sequence
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle

from ..core.placement import TreePlacement
from ..core.skeleton import TreeSkeleton
from ..params.config import VegetationConfig


def plot_skeleton(
    skeleton: TreeSkeleton,
    color_by: Literal["depth", "radius"] = "depth",
    ax: Optional[plt.Axes] = None,
    show: bool = True,
    title: Optional[str] = None,
) -> plt.Axes:
    """
    Plot the root-reachable skeleton in 3D.

    Skeleton y (up) is drawn on the plot's vertical axis. Line width follows
    the solved branch radius when radii are set.

    Parameters
    ----------
    skeleton : TreeSkeleton
        Skeleton to plot
    color_by : str
        Coloring scheme: depth, radius
    ax : matplotlib Axes3D, optional
        Existing axes
    show : bool
        Whether to call plt.show()
    title : str, optional
        Plot title

    Returns
    -------
    ax : matplotlib Axes3D
        Axes object
    """
    if ax is None:
        fig = plt.figure(figsize=(8, 10))
        ax = fig.add_subplot(111, projection='3d')

    edges = list(skeleton.iter_edges())
    nodes = skeleton.nodes
    max_radius = max((nodes[c].radius for _, c in edges), default=0.0)
    max_depth = max(skeleton.max_depth(), 1)
    cmap = plt.get_cmap('viridis')

    for parent_id, child_id in edges:
        start = nodes[parent_id].position
        end = nodes[child_id].position

        if color_by == "radius" and max_radius > 0:
            color = cmap(nodes[child_id].radius / max_radius)
        else:
            color = cmap(nodes[child_id].depth / max_depth)

        if max_radius > 0:
            linewidth = 0.5 + 4.0 * nodes[child_id].radius / max_radius
        else:
            linewidth = 1.0

        ax.plot([start.x, end.x], [start.z, end.z], [start.y, end.y],
                color=color, linewidth=linewidth, alpha=0.8)

    if skeleton.terminal_node_ids:
        tips = np.array([nodes[n].position.to_array() for n in skeleton.terminal_node_ids])
        ax.scatter(tips[:, 0], tips[:, 2], tips[:, 1], c='green', s=6, alpha=0.5)

    ax.set_xlabel('X (m)')
    ax.set_ylabel('Z (m)')
    ax.set_zlabel('Height (m)')

    if title:
        ax.set_title(title)

    if show:
        plt.show()

    return ax


def plot_placements(
    placements: Sequence[TreePlacement],
    config: Optional[VegetationConfig] = None,
    ax: Optional[plt.Axes] = None,
    show: bool = True,
    title: Optional[str] = None,
) -> plt.Axes:
    """
    Plot a placement field from above, colored by species.

    With a config, the field boundary, the central clearing and a
    ``min_spacing / 2`` disk around every tree are drawn too; disks of a
    valid field never overlap.

    Parameters
    ----------
    placements : sequence of TreePlacement
        Placements to plot
    config : VegetationConfig, optional
        Config the placements were generated with
    ax : matplotlib Axes, optional
        Existing axes
    show : bool
        Whether to call plt.show()
    title : str, optional
        Plot title

    Returns
    -------
    ax : matplotlib Axes
        Axes object
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(9, 9))

    species_ids = sorted({p.species_id for p in placements})
    cmap = plt.get_cmap('tab10')
    colors = {species_id: cmap(i % 10) for i, species_id in enumerate(species_ids)}

    for species_id in species_ids:
        xz = np.array([
            (p.position.x, p.position.z) for p in placements if p.species_id == species_id
        ])
        ax.scatter(xz[:, 0], xz[:, 1], s=12, color=colors[species_id], label=species_id)

    if config is not None:
        field = config.placement
        ax.add_patch(Circle((0.0, 0.0), field.field_radius, fill=False, color='black'))
        ax.add_patch(Circle((0.0, 0.0), field.clearing_radius, fill=False,
                            color='gray', linestyle='--'))
        for p in placements:
            ax.add_patch(Circle((p.position.x, p.position.z), field.min_spacing / 2.0,
                                color=colors[p.species_id], alpha=0.15))
        limit = field.field_radius * 1.05
        ax.set_xlim(-limit, limit)
        ax.set_ylim(-limit, limit)

    ax.set_aspect('equal')
    ax.set_xlabel('X (m)')
    ax.set_ylabel('Z (m)')
    if species_ids:
        ax.legend(loc='upper right')

    if title:
        ax.set_title(title)

    if show:
        plt.show()

    return ax
