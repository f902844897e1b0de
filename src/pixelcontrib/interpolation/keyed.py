"""
Angle-Keyed Interpolators
=========================
Interpolators that do not blend across camera angles. They keep one sphere
sampler per stored map and answer queries only for angles that match a stored
angle exactly; any other angle yields 0.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from pixelcontrib.grid import check_index, check_map_size, grid_directions
from pixelcontrib.interpolation.base import Interpolator, Position, as_direction, check_same_size
from pixelcontrib.interpolation.registry import register_interpolator
from pixelcontrib.interpolation.sphere import (
    AxisValueSampler,
    FineOctahedronBarycentricSampler,
    GridBarycentricSampler,
    OctahedronBarycentricSampler,
    SphereGridSampler,
    SphereSampler,
)

if TYPE_CHECKING:
    import numpy.typing as npt
    from pixelcontrib.contrib_map import ContributionMapSet

logger = logging.getLogger(__name__)


class AngleKeyedInterpolator(Interpolator):
    """
    Base class binding one ``SAMPLER`` instance to every stored camera angle.

    All maps must share one size; grid positions are checked against it even
    for angles without a stored map.
    """
    SAMPLER: type[SphereSampler] = SphereSampler

    def __init__(self, map_set: ContributionMapSet) -> None:
        maps = list(map_set)
        self.map_size = check_same_size(maps) if maps else 0

        self.samplers: dict[float, SphereSampler] = {}
        for contrib_map in maps:
            angle = contrib_map.camera_angle
            if angle in self.samplers:
                logger.warning(f"{self.NAME}: duplicate camera angle {angle}, keeping the first map.")
                continue
            self.samplers[angle] = self.SAMPLER(contrib_map)
        logger.debug(f"{self.NAME} interpolator built {len(self.samplers)} samplers")

    def interpolate(self, angle: float, position: Position) -> float:
        if len(position) == 2:
            check_index(position, self.map_size)
        direction = as_direction(position, self.map_size)

        sampler = self.samplers.get(angle)
        if sampler is None:
            return 0.0
        return sampler.sample(direction)

    def interpolate_map(self, angle: float, map_size: int) -> npt.NDArray[np.float64]:
        size = check_map_size(map_size)
        sampler = self.samplers.get(angle)
        if sampler is None:
            return np.zeros((size, size), dtype=np.float64)

        directions = grid_directions(size).reshape(-1, 3)
        return sampler.sample_many(directions).reshape(size, size)


@register_interpolator
class ValuePerAxisInterpolator(AngleKeyedInterpolator):
    NAME = "ValuePerAxis"
    SAMPLER = AxisValueSampler


@register_interpolator
class BarycentricInterpolator(AngleKeyedInterpolator):
    NAME = "Barycentric"
    SAMPLER = GridBarycentricSampler


@register_interpolator
class OctahedronBarycentricInterpolator(AngleKeyedInterpolator):
    NAME = "OctahedronBarycentric"
    SAMPLER = OctahedronBarycentricSampler


@register_interpolator
class FineOctahedronBarycentricInterpolator(AngleKeyedInterpolator):
    NAME = "FineOctahedronBarycentric"
    SAMPLER = FineOctahedronBarycentricSampler


@register_interpolator
class SphereGridInterpolator(AngleKeyedInterpolator):
    NAME = "SphereGrid"
    SAMPLER = SphereGridSampler
