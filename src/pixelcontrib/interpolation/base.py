from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, TYPE_CHECKING, Union

import numpy as np

from pixelcontrib.errors import ConfigurationError, InvalidInputError
from pixelcontrib.grid import GridIndex, check_index, check_map_size, direction_from_index, index_from_direction

if TYPE_CHECKING:
    import numpy.typing as npt
    from pixelcontrib.contrib_map import ContributionMap

# A grid index (u, v) or a 3D view direction
Position = Union[GridIndex, Sequence[float], "npt.NDArray[np.float64]"]


def check_same_size(maps: Sequence[ContributionMap]) -> int:
    """Common size of the given maps; ConfigurationError if they differ."""
    size = maps[0].map_size
    for m in maps[1:]:
        if m.map_size != size:
            raise ConfigurationError(f"Map sizes differ: {size} and {m.map_size}.")
    return size


def as_grid_index(position: Position, map_size: int) -> GridIndex:
    """
    Interpret a position as a grid cell of a map of the given size.

    A 2-component position is a grid index and is bounds-checked; a
    3-component position is a direction and is mapped to its cell.

    Raises:
        RangeError: If a grid index lies outside the grid.
    """
    if len(position) == 2:
        return check_index(position, map_size)
    if len(position) == 3:
        return index_from_direction(position, map_size)
    raise InvalidInputError(f"Position must be a grid index (u, v) or a direction (x, y, z), got {position!r}.")


def as_direction(position: Position, map_size: int) -> npt.NDArray[np.float64]:
    """
    Interpret a position as a view direction.

    Raises:
        RangeError: If a grid index lies outside the grid.
    """
    if len(position) == 2:
        return direction_from_index(position, map_size)
    if len(position) == 3:
        return np.asarray(position, dtype=np.float64)
    raise InvalidInputError(f"Position must be a grid index (u, v) or a direction (x, y, z), got {position!r}.")


class Interpolator(ABC):
    """
    Abstract base class for pixel contribution interpolators.

    An interpolator is bound to a contribution map set at construction and
    estimates the contribution for a camera angle and a grid position or view
    direction that need not be part of the stored samples.
    """
    NAME: str = "Interpolator"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.NAME}')"

    @abstractmethod
    def interpolate(self, angle: float, position: Position) -> float:
        """
        Estimate the pixel contribution.

        Args:
            angle: Camera angle in radians.
            position: Grid index (u, v) or view direction (x, y, z).

        Returns:
            The estimated contribution.
        """
        pass

    def interpolate_map(self, angle: float, map_size: int) -> npt.NDArray[np.float64]:
        """
        Evaluate ``interpolate`` for every cell of a map_size x map_size grid.

        Returns:
            Array of shape (map_size, map_size), indexed [v, u].
        """
        size = check_map_size(map_size)
        result = np.empty((size, size), dtype=np.float64)
        for v in range(size):
            for u in range(size):
                result[v, u] = self.interpolate(angle, (u, v))
        return result
