"""
Pixel Contribution Maps
=======================
Value objects holding the sampled pixel contribution of an object.

Classes:
    ContributionMap: One map_size x map_size grid sampled at one camera angle.
    ContributionMapSet: The ordered collection of maps loaded from one PCMP buffer.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
import operator
from typing import Iterable, Iterator, Optional, TYPE_CHECKING

import numpy as np
import matplotlib
import matplotlib.pyplot as plt

from pixelcontrib.errors import ConfigurationError, InvalidInputError, RangeError
from pixelcontrib.grid import GridIndex, check_index, direction_from_index, index_from_direction

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True, eq=False)
class ContributionMap:
    """
    The pixel contribution for all view directions at one camera angle.

    Each cell (u, v) of the grid represents a view direction through
    octahedral projection; its value is the fraction of screen pixels the
    object covers when viewed from that direction, in [0, 1].

    Attributes:
        camera_angle: Camera field of view in radians; 0 means orthographic.
        values: Read-only (map_size, map_size) float32 array, indexed [v, u].
    """
    camera_angle: float
    values: npt.NDArray[np.float32]

    def __post_init__(self) -> None:
        values = np.asarray(self.values, dtype=np.float32)
        if values.ndim != 2 or values.shape[0] != values.shape[1] or values.shape[0] == 0:
            raise InvalidInputError(f"Contribution values must be a non-empty square grid, got shape {values.shape}.")
        if values.flags.writeable:
            values = values.copy()
            values.flags.writeable = False
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "camera_angle", float(self.camera_angle))

    @classmethod
    def from_flat(cls, camera_angle: float, map_size: int, values: npt.ArrayLike) -> ContributionMap:
        """Create a map from map_size**2 values in row-major order."""
        flat = np.asarray(values, dtype=np.float32)
        if flat.size != map_size * map_size:
            raise InvalidInputError(f"Expected {map_size * map_size} values, got {flat.size}.")
        return cls(camera_angle, flat.reshape(map_size, map_size))

    @classmethod
    def filled(cls, camera_angle: float, map_size: int, value: float = 0.0) -> ContributionMap:
        """Create a map with the same value in every cell."""
        return cls(camera_angle, np.full((map_size, map_size), value, dtype=np.float32))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(camera_angle={self.camera_angle:.6g}, map_size={self.map_size})"

    @property
    def map_size(self) -> int:
        """Number of cells along each side of the grid."""
        return self.values.shape[0]

    def value_at(self, x: int, y: int) -> float:
        """
        Return the value of cell (x, y).

        Raises:
            RangeError: If the position lies outside the grid.
        """
        u, v = check_index((x, y), self.map_size)
        return float(self.values[v, u])

    def direction_for_index(self, x: int, y: int) -> npt.NDArray[np.float64]:
        """View direction represented by cell (x, y)."""
        return direction_from_index((x, y), self.map_size)

    def index_for_direction(self, direction: npt.ArrayLike) -> GridIndex:
        """Cell containing the given view direction."""
        return index_from_direction(direction, self.map_size)

    def value_for_direction(self, direction: npt.ArrayLike) -> float:
        """Nearest-cell pixel contribution for the given view direction."""
        u, v = index_from_direction(direction, self.map_size)
        return float(self.values[v, u])

    def to_image(self, scale: float = 1.0) -> npt.NDArray[np.uint8]:
        """
        Color-code the map with the turbo colormap.

        Args:
            scale: Factor applied to the values before clamping them to [0, 1].

        Returns:
            RGB image, shape (map_size, map_size, 3).
        """
        cmap = matplotlib.colormaps["turbo"]
        rgba = cmap(np.clip(self.values * scale, 0.0, 1.0))
        return np.round(rgba[..., :3] * 255.0).astype(np.uint8)

    def plot(self, scale: float = 1.0) -> None:
        """
        Plot the map.
        """
        fig = plt.figure(figsize=(6, 5))
        img = plt.imshow(np.clip(self.values * scale, 0.0, 1.0), cmap="turbo", vmin=0.0, vmax=1.0, origin="upper")
        fig.colorbar(img, label="Pixel contribution")

        plt.title(f"Camera angle {math.degrees(self.camera_angle):.1f}°")
        plt.xlabel("u")
        plt.ylabel("v")
        plt.show()


class ContributionMapSet:
    """
    Ordered, read-only collection of contribution maps.

    The order is the order of insertion (file order). Consumers that need
    ascending angles or an orthographic first map check it through
    ``validate_angles``.
    """

    def __init__(self, maps: Iterable[ContributionMap] = ()) -> None:
        self._maps: tuple[ContributionMap, ...] = tuple(maps)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(angles={[round(a, 6) for a in self.angles()]})"

    def __len__(self) -> int:
        return len(self._maps)

    def __iter__(self) -> Iterator[ContributionMap]:
        return iter(self._maps)

    def __getitem__(self, index: int) -> ContributionMap:
        return self.get_map(index)

    def size(self) -> int:
        """Number of maps in the set."""
        return len(self._maps)

    def get_map(self, index: int) -> ContributionMap:
        """
        Return the map at the given position.

        Raises:
            RangeError: If the index is outside [0, size() - 1].
        """
        i = operator.index(index)
        if not 0 <= i < len(self._maps):
            raise RangeError(f"Map index {i} outside of [0, {len(self._maps) - 1}].")
        return self._maps[i]

    def get_value_at(self, index: int, x: int, y: int) -> float:
        """Value of cell (x, y) of the map at the given position."""
        return self.get_map(index).value_at(x, y)

    def angles(self) -> list[float]:
        """Camera angles of all maps in set order."""
        return [m.camera_angle for m in self._maps]

    def find_by_angle(self, angle: float) -> Optional[ContributionMap]:
        """Return the first map whose camera angle equals ``angle`` exactly."""
        for m in self._maps:
            if m.camera_angle == angle:
                return m
        return None

    def values_at_position(self, x: int, y: int) -> npt.NDArray[np.float32]:
        """Values of cell (x, y) across all maps, in set order."""
        return np.array([m.value_at(x, y) for m in self._maps], dtype=np.float32)

    def validate_angles(self, require_zero_start: bool = False) -> None:
        """
        Check the angle preconditions of angle interpolators.

        Args:
            require_zero_start: Also require the first map to be orthographic.

        Raises:
            ConfigurationError: If the angles are not strictly ascending or the
                first angle is not 0 when required.
        """
        angles = self.angles()
        if not angles:
            raise ConfigurationError("The contribution map set is empty.")
        if require_zero_start and angles[0] != 0.0:
            raise ConfigurationError(f"The first camera angle must be 0, got {angles[0]}.")
        for previous, current in zip(angles, angles[1:]):
            if not previous < current:
                raise ConfigurationError(f"Camera angles are not ascending: {previous} followed by {current}.")

    def _search_bracket(self, ordered: list[ContributionMap], angle: float) -> tuple[int, Optional[int]]:
        for i, m in enumerate(ordered):
            # before the first map or at the end of the list
            if m.camera_angle > angle or i + 1 >= len(ordered):
                return i, None
            if ordered[i + 1].camera_angle >= angle:
                return i, i + 1
        return len(ordered) - 1, None

    def contribution_for_direction(self, direction: npt.ArrayLike, angle: float) -> float:
        """
        Estimate the pixel contribution for a view direction and camera angle.

        The two maps whose angles bracket ``angle`` are looked up at the cell of
        ``direction`` and blended with weights linear in tan(angle / 2). Outside
        the sampled range the closest map is used as is.

        Raises:
            RangeError: If the set is empty.
        """
        if not self._maps:
            raise RangeError("Cannot look up a contribution in an empty map set.")

        ordered = sorted(self._maps, key=lambda m: m.camera_angle)
        i0, i1 = self._search_bracket(ordered, angle)

        map0 = ordered[i0]
        p0 = map0.value_for_direction(direction)
        if i1 is None:
            return p0

        map1 = ordered[i1]
        p1 = map1.value_for_direction(direction)

        a0 = math.tan(map0.camera_angle / 2.0)
        a1 = math.tan(map1.camera_angle / 2.0)
        if a1 == a0:
            return p0
        a = math.tan(angle / 2.0)

        t = (a1 - a) / (a1 - a0)
        return p0 * t + p1 * (1.0 - t)

    def to_bytes(self) -> bytes:
        """Serialize the set into the PCMP binary layout."""
        from pixelcontrib.store import ContributionMapStore

        return ContributionMapStore.serialize(self)
