"""
Stateless 2D value noise used as a placement density field.
"""

import math


def _fract(value: float) -> float:
    return value - math.floor(value)


def hash2d(x: float, z: float) -> float:
    """Pseudo-random value in [0, 1) for a lattice point."""
    return _fract(math.sin(x * 127.1 + z * 311.7) * 43758.5453123)


def value_noise2d(x: float, z: float) -> float:
    """
    Smooth value noise in [0, 1].

    Lattice values from ``hash2d`` are blended bilinearly with a smoothstep
    fade, so the field is continuous and forms soft clusters and clearings.
    """
    x0 = math.floor(x)
    z0 = math.floor(z)
    xf = x - x0
    zf = z - z0
    u = xf * xf * (3.0 - 2.0 * xf)
    v = zf * zf * (3.0 - 2.0 * zf)

    n00 = hash2d(x0, z0)
    n10 = hash2d(x0 + 1, z0)
    n01 = hash2d(x0, z0 + 1)
    n11 = hash2d(x0 + 1, z0 + 1)

    nx0 = n00 + (n10 - n00) * u
    nx1 = n01 + (n11 - n01) * u
    return nx0 + (nx1 - nx0) * v
