from __future__ import annotations

from typing import TYPE_CHECKING

from pixelcontrib.errors import ConfigurationError
from pixelcontrib.interpolation.base import Interpolator

if TYPE_CHECKING:
    from pixelcontrib.contrib_map import ContributionMapSet

_REGISTRY: dict[str, type[Interpolator]] = {}


def register_interpolator(cls: type[Interpolator]) -> type[Interpolator]:
    """Class decorator to register an interpolator by its NAME."""
    name = cls.__dict__.get("NAME")
    if not name:
        raise ValueError(f"{cls.__name__} must define NAME")
    _REGISTRY[name] = cls
    return cls


def create_interpolator(name: str, map_set: ContributionMapSet) -> Interpolator:
    cls = _REGISTRY.get(name)
    if not cls:
        raise ConfigurationError(f"No interpolator registered for name '{name}'")
    return cls(map_set)


def list_interpolators() -> list[str]:
    return list(_REGISTRY.keys())
