"""
Grid Indexing
=============
Maps directions to the cells of a map_size x map_size octahedral grid and
back. Cell (u, v) covers the encoded square [u, u+1] x [v, v+1] / map_size and
is represented by the direction through its center. Indices are 0-based; u is
the column, v the row.
"""
from __future__ import annotations

import math
import operator
from typing import TYPE_CHECKING

import numpy as np
import numba as nb

from pixelcontrib.errors import InvalidInputError, RangeError
from pixelcontrib.octahedron import decode_components, decode_many, encode, encode_components

if TYPE_CHECKING:
    import numpy.typing as npt

GridIndex = tuple[int, int]


@nb.njit(cache=True)
def round_half_away(x: float) -> float:
    """Round to the nearest integer, ties away from zero."""
    return math.copysign(math.floor(abs(x) + 0.5), x)


@nb.njit(cache=True)
def _cell_from_coordinate(c: float, map_size: int) -> int:
    i = int(round_half_away(c * map_size - 0.5))
    if i < 0:
        return 0
    if i > map_size - 1:
        return map_size - 1
    return i


@nb.njit(cache=True)
def index_from_components(x: float, y: float, z: float, map_size: int) -> tuple[int, int]:
    """Cell (u, v) hit by the non-zero vector (x, y, z)."""
    cu, cv = encode_components(x, y, z)
    return _cell_from_coordinate(cu, map_size), _cell_from_coordinate(cv, map_size)


@nb.njit(cache=True)
def _indices_batch(directions: npt.NDArray[np.float64], map_size: int) -> npt.NDArray[np.int64]:
    n = directions.shape[0]
    out = np.empty((n, 2), np.int64)
    for i in range(n):
        u, v = index_from_components(directions[i, 0], directions[i, 1], directions[i, 2], map_size)
        out[i, 0] = u
        out[i, 1] = v
    return out


def check_map_size(map_size: int) -> int:
    """Validate and return the map size as a plain int."""
    size = operator.index(map_size)
    if size <= 0:
        raise RangeError(f"Map size must be positive, got {size}.")
    return size


def check_index(index: GridIndex, map_size: int) -> GridIndex:
    """
    Validate a grid index against the map size.

    Raises:
        RangeError: If either component lies outside [0, map_size - 1].

    Returns:
        The index as a tuple of plain ints.
    """
    if len(index) != 2:
        raise RangeError(f"Grid index must have 2 components, got {len(index)}.")
    u, v = operator.index(index[0]), operator.index(index[1])
    if not (0 <= u < map_size and 0 <= v < map_size):
        raise RangeError(f"Grid index ({u}, {v}) outside of [0, {map_size - 1}].")
    return u, v


def index_from_direction(direction: npt.ArrayLike, map_size: int) -> GridIndex:
    """
    Return the grid cell containing the given direction.

    The encoded coordinate is scaled by map_size, shifted by half a cell so that
    samples sit on cell centers, rounded and clamped to the grid.

    Raises:
        InvalidInputError: If the direction is the zero vector.
    """
    size = check_map_size(map_size)
    cu, cv = encode(direction)
    return int(_cell_from_coordinate(cu, size)), int(_cell_from_coordinate(cv, size))


def indices_from_directions(directions: npt.ArrayLike, map_size: int) -> npt.NDArray[np.int64]:
    """
    Batched ``index_from_direction``.

    Args:
        directions: Non-zero vectors, shape (n, 3).
        map_size: Grid size.

    Returns:
        Grid indices (u, v), shape (n, 2).
    """
    size = check_map_size(map_size)
    arr = np.ascontiguousarray(directions, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidInputError(f"Expected shape (N, 3), got {arr.shape}.")
    if np.any(np.all(arr == 0.0, axis=1)):
        raise InvalidInputError("Cannot index the zero vector.")
    return _indices_batch(arr, size)


def direction_from_index(index: GridIndex, map_size: int) -> npt.NDArray[np.float64]:
    """
    Return the unit direction through the center of a grid cell.

    Raises:
        RangeError: If the index lies outside the grid.
    """
    size = check_map_size(map_size)
    u, v = check_index(index, size)
    x, y, z = decode_components((u + 0.5) / size, (v + 0.5) / size)
    return np.array([x, y, z], dtype=np.float64)


def flat_index(index: GridIndex, map_size: int) -> int:
    """Row-major offset v * map_size + u of a grid cell."""
    size = check_map_size(map_size)
    u, v = check_index(index, size)
    return v * size + u


def index_from_flat(offset: int, map_size: int) -> GridIndex:
    """Inverse of ``flat_index``."""
    size = check_map_size(map_size)
    offset = operator.index(offset)
    if not 0 <= offset < size * size:
        raise RangeError(f"Flat index {offset} outside of [0, {size * size - 1}].")
    v, u = divmod(offset, size)
    return u, v


def grid_directions(map_size: int) -> npt.NDArray[np.float64]:
    """Directions of all cell centers, shape (map_size, map_size, 3), indexed [v, u]."""
    size = check_map_size(map_size)
    centers = (np.arange(size, dtype=np.float64) + 0.5) / size
    cu, cv = np.meshgrid(centers, centers)
    coords = np.stack([cu.ravel(), cv.ravel()], axis=1)
    return decode_many(coords).reshape(size, size, 3)
