"""
Octahedral Direction Encoding
=============================
Bijective mapping between unit directions on the sphere (2-norm) and points of
the unit square [0, 1]^2, obtained by projecting onto the unit octahedron
(1-norm) and unfolding its lower half over the corners of the square.

Scalar kernels are JIT compiled with numba and shared by the batched variants,
so the per-direction and per-grid paths produce identical values.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import numba as nb

from pixelcontrib.errors import InvalidInputError

if TYPE_CHECKING:
    import numpy.typing as npt


# ---- JIT'd scalar kernels ----
# No fastmath: the fold relies on exact sign tests at zero.

@nb.njit(cache=True)
def wrap_octahedron_value(v1: float, v2: float) -> float:
    """
    Fold one coordinate of the lower hemisphere onto the square corners.

    Args:
        v1: Coordinate whose sign selects the target quadrant.
        v2: The other coordinate.

    Returns:
        (1 - |v2|) * sign(v1), with sign(0) taken as +1.
    """
    if v1 >= 0.0:
        return 1.0 - abs(v2)
    return -(1.0 - abs(v2))


@nb.njit(cache=True)
def encode_components(x: float, y: float, z: float) -> tuple[float, float]:
    """Encode a non-zero vector (x, y, z) into octahedral (u, v) in [0, 1]."""
    # the projection is scale invariant; bring the largest component to 1
    scale = max(abs(x), abs(y), abs(z))
    x = x / scale
    y = y / scale
    z = z / scale

    abs_sum = abs(x) + abs(y) + abs(z)
    x = x / abs_sum
    y = y / abs_sum

    if z < 0.0:
        tmp = x
        x = wrap_octahedron_value(x, y)
        y = wrap_octahedron_value(y, tmp)

    return x * 0.5 + 0.5, y * 0.5 + 0.5


@nb.njit(cache=True)
def decode_components(u: float, v: float) -> tuple[float, float, float]:
    """Decode octahedral (u, v) in [0, 1] into a unit vector (x, y, z)."""
    ox = u * 2.0 - 1.0
    oy = v * 2.0 - 1.0
    z = 1.0 - abs(ox) - abs(oy)

    if z >= 0.0:
        x = ox
        y = oy
    else:
        x = wrap_octahedron_value(ox, oy)
        y = wrap_octahedron_value(oy, ox)

    length = math.sqrt(x * x + y * y + z * z)
    return x / length, y / length, z / length


@nb.njit(cache=True)
def encode_batch(directions: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Batched octahedral encoding.

    Args:
        directions: Non-zero vectors, shape (n, 3).

    Returns:
        Encoded coordinates, shape (n, 2).
    """
    n = directions.shape[0]
    out = np.empty((n, 2), np.float64)
    for i in range(n):
        u, v = encode_components(directions[i, 0], directions[i, 1], directions[i, 2])
        out[i, 0] = u
        out[i, 1] = v
    return out


@nb.njit(cache=True)
def decode_batch(coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Batched octahedral decoding.

    Args:
        coords: Encoded coordinates, shape (n, 2).

    Returns:
        Unit vectors, shape (n, 3).
    """
    n = coords.shape[0]
    out = np.empty((n, 3), np.float64)
    for i in range(n):
        x, y, z = decode_components(coords[i, 0], coords[i, 1])
        out[i, 0] = x
        out[i, 1] = y
        out[i, 2] = z
    return out


# ---- Public API ----

def _as_vector(values: npt.ArrayLike, n_components: int, what: str) -> npt.NDArray[np.float64]:
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (n_components,):
        raise InvalidInputError(f"{what} must have {n_components} components, got shape {arr.shape}.")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError(f"{what} contains non-finite values: {arr}.")
    return arr


def encode(direction: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """
    Encode a direction into its octahedral coordinate.

    The direction does not need to be normalized, but it must not be the
    zero vector.

    Args:
        direction: 3D vector.

    Raises:
        InvalidInputError: If the vector has zero length or is malformed.

    Returns:
        Array (u, v) with both components in [0, 1].
    """
    d = _as_vector(direction, 3, "Direction")
    if d[0] == 0.0 and d[1] == 0.0 and d[2] == 0.0:
        raise InvalidInputError("Cannot encode the zero vector.")
    u, v = encode_components(d[0], d[1], d[2])
    return np.array([u, v], dtype=np.float64)


def decode(coord: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """
    Decode an octahedral coordinate in [0, 1]^2 into a unit direction.

    Raises:
        InvalidInputError: If the coordinate is malformed.
    """
    c = _as_vector(coord, 2, "Encoded coordinate")
    x, y, z = decode_components(c[0], c[1])
    return np.array([x, y, z], dtype=np.float64)


def encode_many(directions: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Encode an (n, 3) array of directions into an (n, 2) array of coordinates."""
    arr = np.ascontiguousarray(directions, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidInputError(f"Expected shape (N, 3), got {arr.shape}.")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError("Directions contain non-finite values.")
    if np.any(np.all(arr == 0.0, axis=1)):
        raise InvalidInputError("Cannot encode the zero vector.")
    return encode_batch(arr)


def decode_many(coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Decode an (n, 2) array of coordinates into an (n, 3) array of unit directions."""
    arr = np.ascontiguousarray(coords, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise InvalidInputError(f"Expected shape (N, 2), got {arr.shape}.")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError("Coordinates contain non-finite values.")
    return decode_batch(arr)


def angular_error(a: npt.ArrayLike, b: npt.ArrayLike) -> float:
    """Angular error |1 - dot(a, b)| between two unit directions."""
    return abs(1.0 - float(np.dot(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))))
