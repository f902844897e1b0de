from pixelcontrib.interpolation.base import Interpolator, Position
from pixelcontrib.interpolation.angle import (
    EndpointInterpolator,
    LinearInterpolator,
    QuadraticInterpolator,
    TangentInterpolator,
)
from pixelcontrib.interpolation.keyed import (
    AngleKeyedInterpolator,
    BarycentricInterpolator,
    FineOctahedronBarycentricInterpolator,
    OctahedronBarycentricInterpolator,
    SphereGridInterpolator,
    ValuePerAxisInterpolator,
)
from pixelcontrib.interpolation.registry import create_interpolator, list_interpolators, register_interpolator

__all__ = [
    "Interpolator",
    "Position",
    "EndpointInterpolator",
    "LinearInterpolator",
    "TangentInterpolator",
    "QuadraticInterpolator",
    "AngleKeyedInterpolator",
    "ValuePerAxisInterpolator",
    "BarycentricInterpolator",
    "OctahedronBarycentricInterpolator",
    "FineOctahedronBarycentricInterpolator",
    "SphereGridInterpolator",
    "create_interpolator",
    "list_interpolators",
    "register_interpolator",
]
