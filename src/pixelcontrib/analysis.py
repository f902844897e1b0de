"""
Interpolation Error Analysis
============================
Measures how well an interpolator reproduces the stored samples and extracts
equator profiles from single maps.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from pixelcontrib.contrib_map import ContributionMap, ContributionMapSet

if TYPE_CHECKING:
    import numpy.typing as npt
    from pixelcontrib.interpolation.base import Interpolator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorStatistics:
    """Summary of one error map."""
    camera_angle: float
    max_error: float
    mean_error: float
    rms_error: float


class ErrorAnalyzer:
    """Compares interpolators against the stored samples."""

    @staticmethod
    def compute_error(interpolator: Interpolator, map_set: ContributionMapSet) -> ContributionMapSet:
        """
        Evaluate an interpolator against every stored sample.

        For each map and each cell (x, y) the result holds
        |interpolator.interpolate(angle, (x, y)) - value(x, y)|, in a new map
        with the same angle and size. Interpolator failures propagate.

        Args:
            interpolator: The interpolator under test.
            map_set: Ground truth samples.

        Returns:
            One error map per input map, in the same order.
        """
        error_maps = []
        for contrib_map in map_set:
            predicted = interpolator.interpolate_map(contrib_map.camera_angle, contrib_map.map_size)
            error = np.abs(predicted - contrib_map.values.astype(np.float64))
            error_maps.append(ContributionMap(contrib_map.camera_angle, error.astype(np.float32)))
            logger.debug(
                f"{interpolator.NAME}: angle={contrib_map.camera_angle:.6f} max error={float(error.max()):.6g}"
            )

        result = ContributionMapSet(error_maps)
        if error_maps:
            worst = max(float(m.values.max()) for m in error_maps)
            logger.info(f"{interpolator.NAME}: max interpolation error {worst:.6g} over {len(error_maps)} maps")
        return result

    @staticmethod
    def error_statistics(error_set: ContributionMapSet) -> list[ErrorStatistics]:
        """Per-map max, mean and RMS of an error map set."""
        stats = []
        for error_map in error_set:
            values = error_map.values.astype(np.float64)
            stats.append(ErrorStatistics(
                camera_angle=error_map.camera_angle,
                max_error=float(values.max()),
                mean_error=float(values.mean()),
                rms_error=float(np.sqrt(np.mean(values * values))),
            ))
        return stats


def compute_error(interpolator: Interpolator, map_set: ContributionMapSet) -> ContributionMapSet:
    """See ``ErrorAnalyzer.compute_error``."""
    return ErrorAnalyzer.compute_error(interpolator, map_set)


def equator_series(contrib_map: ContributionMap, azimuths: npt.ArrayLike) -> npt.NDArray[np.float32]:
    """
    Sample a map along the equator.

    Args:
        contrib_map: The map to sample.
        azimuths: Azimuths in radians, measured from the x-axis.

    Returns:
        The nearest-cell contribution for each direction (cos a, sin a, 0).
    """
    return np.array([
        contrib_map.value_for_direction((math.cos(a), math.sin(a), 0.0))
        for a in np.asarray(azimuths, dtype=np.float64)
    ], dtype=np.float32)


def equator_series_linear(contrib_map: ContributionMap, azimuths: npt.ArrayLike) -> npt.NDArray[np.float32]:
    """
    Approximate the equator profile from the four axis directions only.

    Each azimuth is linearly interpolated between the neighbouring multiples of
    pi/2.
    """
    quarter = math.pi / 2.0
    result = []
    for a in np.asarray(azimuths, dtype=np.float64):
        prev_angle = math.floor(a / quarter) * quarter
        next_angle = min(max(prev_angle + quarter, 0.0), 2.0 * math.pi)

        prev_value = contrib_map.value_for_direction((math.cos(prev_angle), math.sin(prev_angle), 0.0))
        if next_angle == prev_angle:
            result.append(prev_value)
            continue
        next_value = contrib_map.value_for_direction((math.cos(next_angle), math.sin(next_angle), 0.0))

        t = (a - prev_angle) / (next_angle - prev_angle)
        result.append(prev_value * (1.0 - t) + next_value * t)

    return np.array(result, dtype=np.float32)
