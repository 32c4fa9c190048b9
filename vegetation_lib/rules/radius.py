"""
Radius combination rules for branching structures.
"""

from typing import Iterable


def pipe_radius(
    child_radii: Iterable[float],
    gamma: float = 2.0,
    fallback_radius: float = 0.03,
    epsilon: float = 1e-12,
) -> float:
    """
    Combine child radii into a parent radius with the pipe model.

    Pipe / Murray's law: r_parent^gamma = sum(r_child^gamma)

    Parameters
    ----------
    child_radii : iterable of float
        Radii of the direct children
    gamma : float
        Pipe exponent (2 preserves cross-section area, 3 is Murray's law)
    fallback_radius : float
        Radius returned when the children contribute (almost) nothing
    epsilon : float
        Sums at or below this are treated as zero

    Returns
    -------
    radius : float
        Parent radius
    """
    total = 0.0
    for radius in child_radii:
        total += radius ** gamma

    if total <= epsilon:
        return fallback_radius

    return total ** (1.0 / gamma)


def should_prune(
    depth: int,
    radius: float,
    child_count: int,
    min_kept_radius: float,
    trunk_preserve_depth: int,
) -> bool:
    """
    Decide whether a node is a thin dead end that can be detached.

    Nodes near the root (``depth <= trunk_preserve_depth``) and nodes that
    still carry children are always kept.
    """
    return (
        depth > trunk_preserve_depth
        and radius < min_kept_radius
        and child_count == 0
    )
