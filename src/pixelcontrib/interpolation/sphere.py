"""
Sphere Samplers
===============
Estimate the contribution for an arbitrary view direction from a single
contribution map, i.e. at one fixed camera angle.

Each sampler reads a handful of values from the map at construction (or keeps
a reference to it) and answers ``sample(direction)`` queries.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
import math
from typing import Sequence, TYPE_CHECKING

import numpy as np

from pixelcontrib.config import L1_NORM_EPSILON, SPHERE_GRID_ROWS
from pixelcontrib.errors import InvalidInputError
from pixelcontrib.octahedron import encode, encode_many
from pixelcontrib.polar import cartesian_to_polar, polar_to_cartesian

if TYPE_CHECKING:
    import numpy.typing as npt
    from pixelcontrib.contrib_map import ContributionMap


# The six vertices of the octahedron
POS_X = (1.0, 0.0, 0.0)
NEG_X = (-1.0, 0.0, 0.0)
POS_Y = (0.0, 1.0, 0.0)
NEG_Y = (0.0, -1.0, 0.0)
POS_Z = (0.0, 0.0, 1.0)
NEG_Z = (0.0, 0.0, -1.0)


def _to_octahedron(direction: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Re-project a direction onto the unit octahedron (1-norm sphere)."""
    d = np.asarray(direction, dtype=np.float64)
    if d.shape != (3,):
        raise InvalidInputError(f"Direction must have 3 components, got shape {d.shape}.")
    return d / max(float(np.abs(d).sum()), L1_NORM_EPSILON)


class SphereSampler(ABC):
    """
    Abstract base class for direction samplers over one contribution map.
    """
    NAME: str = "Sphere Sampler"

    def __init__(self, contrib_map: ContributionMap) -> None:
        self.contrib_map = contrib_map

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(camera_angle={self.contrib_map.camera_angle:.6g})"

    @property
    def camera_angle(self) -> float:
        return self.contrib_map.camera_angle

    @property
    def map_size(self) -> int:
        return self.contrib_map.map_size

    def _lookup(self, direction: Sequence[float]) -> float:
        return self.contrib_map.value_for_direction(direction)

    @abstractmethod
    def sample(self, direction: npt.ArrayLike) -> float:
        """
        Estimate the contribution for a view direction.

        Args:
            direction: 3D vector; its length does not matter.
        """
        pass

    def sample_many(self, directions: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Evaluate ``sample`` for an (n, 3) array of directions."""
        return np.array([self.sample(d) for d in np.asarray(directions, dtype=np.float64)], dtype=np.float64)


class AxisValueSampler(SphereSampler):
    """
    Keeps one value per coordinate axis, the mean of the two opposite axis
    directions, and blends them with the absolute direction components
    normalized to sum 1.
    """
    NAME = "ValuePerAxis"

    def __init__(self, contrib_map: ContributionMap) -> None:
        super().__init__(contrib_map)
        self.x_axis = (self._lookup(NEG_X) + self._lookup(POS_X)) / 2.0
        self.y_axis = (self._lookup(NEG_Y) + self._lookup(POS_Y)) / 2.0
        self.z_axis = (self._lookup(NEG_Z) + self._lookup(POS_Z)) / 2.0

    def sample(self, direction: npt.ArrayLike) -> float:
        x, y, z = np.abs(_to_octahedron(direction))
        return float(self.x_axis * x + self.y_axis * y + self.z_axis * z)

    def sample_many(self, directions: npt.ArrayLike) -> npt.NDArray[np.float64]:
        d = np.abs(np.asarray(directions, dtype=np.float64))
        weights = d / np.maximum(d.sum(axis=1, keepdims=True), L1_NORM_EPSILON)
        return weights @ np.array([self.x_axis, self.y_axis, self.z_axis])


class GridBarycentricSampler(SphereSampler):
    """
    Barycentric interpolation between the three grid samples surrounding the
    encoded coordinate of a direction.

    The square between four neighbouring cell centers is split along its
    anti-diagonal into two triangles. Samples beyond the map border are taken
    from the mirrored cell across the border, following the octahedral fold:
    (-1, j) is (0, n - 1 - j) and (i, -1) is (n - 1 - i, 0).
    """
    NAME = "Barycentric"

    def _wrapped_value(self, i: int, j: int) -> float:
        n = self.map_size
        if i < 0:
            i, j = -1 - i, n - 1 - j
        elif i >= n:
            i, j = 2 * n - 1 - i, n - 1 - j
        if j < 0:
            i, j = n - 1 - i, -1 - j
        elif j >= n:
            i, j = n - 1 - i, 2 * n - 1 - j
        return float(self.contrib_map.values[j, i])

    def _wrapped_values(
        self,
        i: npt.NDArray[np.int64],
        j: npt.NDArray[np.int64]
    ) -> npt.NDArray[np.float64]:
        """Array version of ``_wrapped_value``."""
        n = self.map_size
        i = i.copy()
        j = j.copy()

        mask = i < 0
        i[mask], j[mask] = -1 - i[mask], n - 1 - j[mask]
        mask = i >= n
        i[mask], j[mask] = 2 * n - 1 - i[mask], n - 1 - j[mask]
        mask = j < 0
        i[mask], j[mask] = n - 1 - i[mask], -1 - j[mask]
        mask = j >= n
        i[mask], j[mask] = n - 1 - i[mask], 2 * n - 1 - j[mask]

        return self.contrib_map.values[j, i].astype(np.float64)

    def sample(self, direction: npt.ArrayLike) -> float:
        n = self.map_size
        cu, cv = encode(direction)

        # continuous cell coordinates, cell centers at integers
        px = cu * n - 0.5
        py = cv * n - 0.5
        i0 = math.floor(px)
        j0 = math.floor(py)
        fx = px - i0
        fy = py - j0

        if fx + fy <= 1.0:
            w0 = 1.0 - fx - fy
            return (w0 * self._wrapped_value(i0, j0)
                    + fx * self._wrapped_value(i0 + 1, j0)
                    + fy * self._wrapped_value(i0, j0 + 1))

        w0 = fx + fy - 1.0
        return (w0 * self._wrapped_value(i0 + 1, j0 + 1)
                + (1.0 - fx) * self._wrapped_value(i0, j0 + 1)
                + (1.0 - fy) * self._wrapped_value(i0 + 1, j0))

    def sample_many(self, directions: npt.ArrayLike) -> npt.NDArray[np.float64]:
        n = self.map_size
        coords = encode_many(directions)

        px = coords[:, 0] * n - 0.5
        py = coords[:, 1] * n - 0.5
        i0 = np.floor(px).astype(np.int64)
        j0 = np.floor(py).astype(np.int64)
        fx = px - i0
        fy = py - j0

        v00 = self._wrapped_values(i0, j0)
        v10 = self._wrapped_values(i0 + 1, j0)
        v01 = self._wrapped_values(i0, j0 + 1)
        v11 = self._wrapped_values(i0 + 1, j0 + 1)

        lower = (1.0 - fx - fy) * v00 + fx * v10 + fy * v01
        upper = (fx + fy - 1.0) * v11 + (1.0 - fx) * v01 + (1.0 - fy) * v10
        return np.where(fx + fy <= 1.0, lower, upper)


class OctahedronBarycentricSampler(SphereSampler):
    """
    Barycentric interpolation over the 8 faces of the octahedron, using the
    values at its 6 vertices.
    """
    NAME = "OctahedronBarycentric"

    def __init__(self, contrib_map: ContributionMap) -> None:
        super().__init__(contrib_map)
        self.top_value = self._lookup(POS_Z)
        self.bottom_value = self._lookup(NEG_Z)
        # order: +x, +y, -x, -y
        self.equator_values = (
            self._lookup(POS_X),
            self._lookup(POS_Y),
            self._lookup(NEG_X),
            self._lookup(NEG_Y),
        )

    def sample(self, direction: npt.ArrayLike) -> float:
        d = _to_octahedron(direction)

        m = self.top_value if d[2] >= 0.0 else self.bottom_value

        # |x| and |y| are the barycentric weights of the equator vertices
        x = abs(d[0])
        y = abs(d[1])
        z = 1.0 - x - y

        x_value = self.equator_values[0] if d[0] >= 0.0 else self.equator_values[2]
        y_value = self.equator_values[1] if d[1] >= 0.0 else self.equator_values[3]

        return float(m * z + x_value * x + y_value * y)


class FineOctahedronBarycentricSampler(OctahedronBarycentricSampler):
    """
    Like ``OctahedronBarycentricSampler`` but every face is split into three
    triangles at its center, adding the values at the 8 face centers.
    """
    NAME = "FineOctahedronBarycentric"

    def __init__(self, contrib_map: ContributionMap) -> None:
        super().__init__(contrib_map)
        # order: (+x, +y), (-x, +y), (-x, -y), (+x, -y)
        self.top_hemisphere_values = (
            self._lookup((1.0, 1.0, 1.0)),
            self._lookup((-1.0, 1.0, 1.0)),
            self._lookup((-1.0, -1.0, 1.0)),
            self._lookup((1.0, -1.0, 1.0)),
        )
        self.bottom_hemisphere_values = (
            self._lookup((1.0, 1.0, -1.0)),
            self._lookup((-1.0, 1.0, -1.0)),
            self._lookup((-1.0, -1.0, -1.0)),
            self._lookup((1.0, -1.0, -1.0)),
        )

    def sample(self, direction: npt.ArrayLike) -> float:
        d = _to_octahedron(direction)

        x = abs(d[0])
        y = abs(d[1])
        z = 1.0 - x - y

        hemisphere_values = self.top_hemisphere_values if d[2] >= 0.0 else self.bottom_hemisphere_values
        if d[0] >= 0.0:
            middle_value = hemisphere_values[0] if d[1] >= 0.0 else hemisphere_values[3]
        else:
            middle_value = hemisphere_values[1] if d[1] >= 0.0 else hemisphere_values[2]

        m = self.top_value if d[2] >= 0.0 else self.bottom_value
        x_value = self.equator_values[0] if d[0] >= 0.0 else self.equator_values[2]
        y_value = self.equator_values[1] if d[1] >= 0.0 else self.equator_values[3]

        # The face center M = (A + B + C) / 3 splits the face into ABM, AMC and
        # MBC; the smallest barycentric coordinate selects the sub-triangle.
        if x <= y and x <= z:
            sigma = 3.0 * x
            return float(sigma * middle_value + (y - x) * y_value + (z - x) * m)
        if y <= x and y <= z:
            sigma = 3.0 * y
            return float(sigma * middle_value + (x - y) * x_value + (z - y) * m)
        sigma = 3.0 * z
        return float(sigma * middle_value + (x - z) * x_value + (y - z) * y_value)


def linear_interpolate_on_unit_circle(values: Sequence[float], x: float) -> float:
    """
    Linear interpolation of values spaced evenly on the unit circle.

    Args:
        values: Samples at azimuths 0, 2*pi/n, ..., 2*pi*(n-1)/n.
        x: Azimuth in radians, any range.
    """
    if len(values) == 1:
        return float(values[0])

    x = x % (2.0 * math.pi)

    dx = 2.0 * math.pi / len(values)
    i0 = min(max(math.floor(x / dx), 0), len(values) - 1)
    i1 = (i0 + 1) % len(values)

    t = (x - i0 * dx) / dx
    return float(values[i0] * (1.0 - t) + values[i1] * t)


class SphereGridSampler(SphereSampler):
    """
    Bilinear interpolation on a latitude/longitude grid where every latitude
    ring holds its own number of samples.
    """
    NAME = "SphereGrid"

    def __init__(self, contrib_map: ContributionMap, ring_sizes: Sequence[int] = SPHERE_GRID_ROWS) -> None:
        super().__init__(contrib_map)
        if len(ring_sizes) < 2 or min(ring_sizes) < 1:
            raise InvalidInputError(f"Need at least two rings with one sample each, got {list(ring_sizes)}.")

        self.num_rows = len(ring_sizes)
        self.dx = math.pi / (self.num_rows - 1)
        self.rows: list[npt.NDArray[np.float64]] = []
        for r, count in enumerate(ring_sizes):
            # beta runs from -pi/2 (south pole) to pi/2 (north pole)
            beta = r * self.dx - math.pi / 2.0
            step = 2.0 * math.pi / count
            self.rows.append(np.array([
                self._lookup(polar_to_cartesian(i * step, beta)) for i in range(count)
            ]))

    def sample(self, direction: npt.ArrayLike) -> float:
        d = np.asarray(direction, dtype=np.float64)
        norm = float(np.linalg.norm(d))
        if norm == 0.0:
            raise InvalidInputError("Cannot sample the zero vector.")
        alpha, beta = cartesian_to_polar(d / norm)

        # map beta from [-pi/2, pi/2] to [0, pi]
        beta = min(max(beta + math.pi / 2.0, 0.0), math.pi)

        row_index = min(max(math.floor(beta / self.dx), 0), self.num_rows - 1)
        row0 = linear_interpolate_on_unit_circle(self.rows[row_index], alpha)
        if row_index + 1 >= self.num_rows:
            return row0

        row1 = linear_interpolate_on_unit_circle(self.rows[row_index + 1], alpha)
        t = (beta - row_index * self.dx) / self.dx
        return row0 * (1.0 - t) + row1 * t
