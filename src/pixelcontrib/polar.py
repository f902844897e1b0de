"""
Polar coordinates on the unit sphere.

alpha is the azimuth in the x-y plane measured from the x-axis, in [0, 2*pi).
beta is the elevation above the equator, in [-pi/2, pi/2].
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

# Below this radius in the x-y plane the azimuth is undefined and reported as 0.
POLE_RADIUS_EPSILON = 5e-8


def polar_to_cartesian(alpha: float, beta: float) -> npt.NDArray[np.float64]:
    """Convert azimuth/elevation in radians into a unit vector."""
    return np.array([
        math.cos(beta) * math.cos(alpha),
        math.cos(beta) * math.sin(alpha),
        math.sin(beta),
    ])


def cartesian_to_polar(p: npt.ArrayLike) -> tuple[float, float]:
    """
    Convert a 3D vector into polar angles.

    Args:
        p: The vector; its length does not matter.

    Returns:
        (alpha, beta) with alpha in [0, 2*pi) and beta in [-pi/2, pi/2].
    """
    x, y, z = (float(c) for c in np.asarray(p, dtype=np.float64))
    r = math.hypot(x, y)

    if r < POLE_RADIUS_EPSILON:
        alpha = 0.0
    else:
        alpha = math.atan2(y, x)
        if alpha < 0.0:
            alpha += 2.0 * math.pi

    beta = math.atan2(z, r)
    return alpha, beta
