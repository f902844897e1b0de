"""
pixelcontrib
============
Storage, octahedral indexing and interpolation of precomputed pixel
contribution maps.
"""
from pixelcontrib.analysis import ErrorAnalyzer, ErrorStatistics, compute_error, equator_series, equator_series_linear
from pixelcontrib.contrib_map import ContributionMap, ContributionMapSet
from pixelcontrib.errors import (
    ConfigurationError,
    FormatError,
    InvalidInputError,
    PixelContribError,
    RangeError,
    TruncatedDataError,
    UnsupportedVersionError,
)
from pixelcontrib.grid import direction_from_index, grid_directions, index_from_direction
from pixelcontrib.interpolation import (
    BarycentricInterpolator,
    Interpolator,
    LinearInterpolator,
    QuadraticInterpolator,
    TangentInterpolator,
    ValuePerAxisInterpolator,
    create_interpolator,
    list_interpolators,
)
from pixelcontrib.logging_config import setup_logging
from pixelcontrib.octahedron import angular_error, decode, encode
from pixelcontrib.store import ContributionMapStore, parse

__all__ = [
    "ContributionMap",
    "ContributionMapSet",
    "ContributionMapStore",
    "parse",
    "encode",
    "decode",
    "angular_error",
    "index_from_direction",
    "direction_from_index",
    "grid_directions",
    "Interpolator",
    "LinearInterpolator",
    "TangentInterpolator",
    "QuadraticInterpolator",
    "ValuePerAxisInterpolator",
    "BarycentricInterpolator",
    "create_interpolator",
    "list_interpolators",
    "ErrorAnalyzer",
    "ErrorStatistics",
    "compute_error",
    "equator_series",
    "equator_series_linear",
    "setup_logging",
    "PixelContribError",
    "FormatError",
    "UnsupportedVersionError",
    "TruncatedDataError",
    "RangeError",
    "ConfigurationError",
    "InvalidInputError",
]
