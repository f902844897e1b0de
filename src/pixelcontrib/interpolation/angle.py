"""
Angle Interpolators
===================
Estimate the contribution of one grid cell at a camera angle between the
stored samples by blending the same cell across maps of different angles.
"""
from __future__ import annotations

from abc import abstractmethod
import logging
import math
from typing import TYPE_CHECKING

import numpy as np
import numba as nb

from pixelcontrib.errors import ConfigurationError
from pixelcontrib.grid import check_map_size
from pixelcontrib.interpolation.base import Interpolator, Position, as_grid_index, check_same_size
from pixelcontrib.interpolation.registry import register_interpolator

if TYPE_CHECKING:
    import numpy.typing as npt
    from pixelcontrib.contrib_map import ContributionMapSet

logger = logging.getLogger(__name__)


@nb.njit(cache=True)
def _inv2(
    a11: float,
    a12: float,
    a21: float,
    a22: float
) -> tuple[tuple[float, float, float, float], float]:
    """
    Compute the inverse and determinant of a 2×2 matrix [[a11, a12], [a21, a22]].

    Returns:
        A tuple containing the elements of the inverse matrix and the determinant.
    """
    det = a11 * a22 - a12 * a21
    inv = (a22 / det, -a12 / det, -a21 / det, a11 / det)
    return inv, det


class EndpointInterpolator(Interpolator):
    """
    Base class for interpolators blending the first and the last map.

    Subclasses define the blend parameter through ``_progress``.
    """

    def __init__(self, map_set: ContributionMapSet) -> None:
        n = map_set.size()
        if n < 2:
            raise ConfigurationError(f"{self.NAME} interpolation needs at least 2 contribution maps, got {n}.")

        self.first_map = map_set.get_map(0)
        self.last_map = map_set.get_map(n - 1)
        self.map_size = check_same_size([self.first_map, self.last_map])

        if self.first_map.camera_angle == self.last_map.camera_angle:
            raise ConfigurationError(
                f"{self.NAME} interpolation needs distinct end angles, got {self.first_map.camera_angle} twice."
            )
        logger.debug(
            f"{self.NAME} interpolator bound to angles "
            f"{self.first_map.camera_angle:.6f} .. {self.last_map.camera_angle:.6f}"
        )

    @abstractmethod
    def _progress(self, angle: float) -> float:
        """Blend factor: 0 at the first map, 1 at the last map."""
        pass

    def interpolate(self, angle: float, position: Position) -> float:
        u, v = as_grid_index(position, self.map_size)
        first_value = float(self.first_map.values[v, u])
        last_value = float(self.last_map.values[v, u])

        f = self._progress(angle)
        return first_value * (1.0 - f) + last_value * f

    def interpolate_map(self, angle: float, map_size: int) -> npt.NDArray[np.float64]:
        check_map_size(map_size)
        if map_size != self.map_size:
            return super().interpolate_map(angle, map_size)

        f = self._progress(angle)
        first_values = self.first_map.values.astype(np.float64)
        last_values = self.last_map.values.astype(np.float64)
        return first_values * (1.0 - f) + last_values * f


@register_interpolator
class LinearInterpolator(EndpointInterpolator):
    """
    Blends the first and last map linearly in the camera angle.
    """
    NAME = "Linear"

    def _progress(self, angle: float) -> float:
        first_angle = self.first_map.camera_angle
        last_angle = self.last_map.camera_angle
        return (angle - first_angle) / (last_angle - first_angle)


@register_interpolator
class TangentInterpolator(EndpointInterpolator):
    """
    Blends the first and last map linearly in tan(angle / 2).

    tan(angle / 2) is the half-width of the view frustum at unit distance.
    """
    NAME = "Tangent"

    def __init__(self, map_set: ContributionMapSet) -> None:
        super().__init__(map_set)
        self._a_start = math.tan(self.first_map.camera_angle / 2.0)
        self._a_last = math.tan(self.last_map.camera_angle / 2.0)
        if self._a_start == self._a_last:
            raise ConfigurationError(f"{self.NAME} interpolation: tan(angle / 2) of the end maps coincide.")

    def _progress(self, angle: float) -> float:
        a = math.tan(angle / 2.0)
        return (a - self._a_start) / (self._a_last - self._a_start)


@register_interpolator
class QuadraticInterpolator(Interpolator):
    """
    Fits a quadratic polynomial in the camera angle through the first, the
    middle and the last map.

    With x0 = 0 the constant term equals the orthographic value y0, and the
    remaining coefficients solve

        [[x1², x1], [x2², x2]] · [a, b]ᵀ = [y1 - y0, y2 - y0]ᵀ

    whose inverse matrix depends only on the angles and is computed once.
    """
    NAME = "Quadratic"

    def __init__(self, map_set: ContributionMapSet) -> None:
        n = map_set.size()
        if n <= 2:
            raise ConfigurationError(f"{self.NAME} interpolation needs at least 3 contribution maps, got {n}.")
        map_set.validate_angles(require_zero_start=True)

        self.first_map = map_set.get_map(0)
        self.middle_map = map_set.get_map(n // 2)
        self.last_map = map_set.get_map(n - 1)
        self.map_size = check_same_size([self.first_map, self.middle_map, self.last_map])

        x0 = self.first_map.camera_angle
        x1 = self.middle_map.camera_angle
        x2 = self.last_map.camera_angle

        self._inv, _ = _inv2(x1 * x1, x1, x2 * x2, x2)

        logger.debug(f"{self.NAME} interpolator bound to angles {x0:.6f}, {x1:.6f}, {x2:.6f}")

    def _evaluate(self, angle, y0, y1, y2):
        i00, i01, i10, i11 = self._inv

        c = y0
        r0 = y1 - c
        r1 = y2 - c
        a = i00 * r0 + i01 * r1
        b = i10 * r0 + i11 * r1

        return a * angle * angle + b * angle + c

    def interpolate(self, angle: float, position: Position) -> float:
        u, v = as_grid_index(position, self.map_size)
        y0 = float(self.first_map.values[v, u])
        y1 = float(self.middle_map.values[v, u])
        y2 = float(self.last_map.values[v, u])
        return self._evaluate(angle, y0, y1, y2)

    def interpolate_map(self, angle: float, map_size: int) -> npt.NDArray[np.float64]:
        check_map_size(map_size)
        if map_size != self.map_size:
            return super().interpolate_map(angle, map_size)

        return self._evaluate(
            angle,
            self.first_map.values.astype(np.float64),
            self.middle_map.values.astype(np.float64),
            self.last_map.values.astype(np.float64),
        )
