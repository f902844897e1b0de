"""
PCMP Input/Output
=================
Reads and writes the binary container holding a set of contribution maps.

Layout (all little endian):
    magic "PCMP" | u32 version (=1) | u32 map count N |
    N x ( u32 map_size | f32 camera_angle | f32[map_size * map_size] values )

Values are stored row-major: the row (v) index varies slower than the column (u).
"""
from __future__ import annotations

import logging
import os
import struct
from typing import Union

import numpy as np

from pixelcontrib.config import (
    HEADER_FORMAT,
    MAP_HEADER_FORMAT,
    PCMP_MAGIC,
    PCMP_VERSION,
    VALUE_DTYPE,
)
from pixelcontrib.contrib_map import ContributionMap, ContributionMapSet
from pixelcontrib.errors import FormatError, TruncatedDataError, UnsupportedVersionError

logger = logging.getLogger(__name__)

HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
MAP_HEADER_SIZE = struct.calcsize(MAP_HEADER_FORMAT)
VALUE_SIZE = np.dtype(VALUE_DTYPE).itemsize

BytesLike = Union[bytes, bytearray, memoryview]


class ContributionMapStore:
    """Parses and serializes PCMP buffers."""

    @staticmethod
    def parse(data: BytesLike) -> ContributionMapSet:
        """
        Parse a PCMP buffer.

        The maps reference the buffer without copying it. Angles are not
        validated.

        Args:
            data: The raw file content.

        Raises:
            FormatError: If the buffer does not start with "PCMP".
            UnsupportedVersionError: If the version is not 1.
            TruncatedDataError: If the buffer ends before the declared data.

        Returns:
            The maps in file order.
        """
        if not isinstance(data, bytes):
            data = bytes(data)
        total = len(data)

        if data[:len(PCMP_MAGIC)] != PCMP_MAGIC:
            msg = f"Buffer does not start with {PCMP_MAGIC!r}, found {data[:len(PCMP_MAGIC)]!r}."
            logger.error(msg)
            raise FormatError(msg)

        if total < HEADER_SIZE:
            msg = f"Buffer of {total} bytes is too short for the {HEADER_SIZE} byte header."
            logger.error(msg)
            raise TruncatedDataError(msg)

        _, version, num_maps = struct.unpack_from(HEADER_FORMAT, data, 0)
        if version != PCMP_VERSION:
            msg = f"Unsupported PCMP version {version}, expected {PCMP_VERSION}."
            logger.error(msg)
            raise UnsupportedVersionError(msg)

        logger.debug(f"PCMP header: version={version}, maps={num_maps}")

        maps: list[ContributionMap] = []
        offset = HEADER_SIZE
        for i in range(num_maps):
            if offset + MAP_HEADER_SIZE > total:
                msg = f"Map {i}: header truncated at byte {offset} of {total}."
                logger.error(msg)
                raise TruncatedDataError(msg)

            map_size, camera_angle = struct.unpack_from(MAP_HEADER_FORMAT, data, offset)
            offset += MAP_HEADER_SIZE

            if map_size == 0:
                msg = f"Map {i}: map size must be positive."
                logger.error(msg)
                raise FormatError(msg)

            num_values = map_size * map_size
            if offset + num_values * VALUE_SIZE > total:
                msg = (f"Map {i}: expected {num_values * VALUE_SIZE} bytes of values at byte {offset}, "
                       f"only {total - offset} remain.")
                logger.error(msg)
                raise TruncatedDataError(msg)

            values = np.frombuffer(data, dtype=VALUE_DTYPE, count=num_values, offset=offset)
            offset += num_values * VALUE_SIZE

            maps.append(ContributionMap(camera_angle, values.reshape(map_size, map_size)))
            logger.debug(f"Map {i}: size={map_size}, camera_angle={camera_angle:.6f}")

        if offset < total:
            logger.warning(f"Ignoring {total - offset} trailing bytes after {num_maps} maps.")

        logger.info(f"Parsed {num_maps} contribution maps from {total} bytes.")
        return ContributionMapSet(maps)

    @staticmethod
    def serialize(map_set: ContributionMapSet) -> bytes:
        """Write a map set into the PCMP layout."""
        chunks = [struct.pack(HEADER_FORMAT, PCMP_MAGIC, PCMP_VERSION, map_set.size())]
        for contrib_map in map_set:
            chunks.append(struct.pack(MAP_HEADER_FORMAT, contrib_map.map_size, contrib_map.camera_angle))
            chunks.append(np.ascontiguousarray(contrib_map.values, dtype=VALUE_DTYPE).tobytes())
        return b"".join(chunks)

    @staticmethod
    def load(filepath: Union[str, os.PathLike]) -> ContributionMapSet:
        """Read a PCMP file and parse it."""
        logger.info(f"Loading contribution maps from: {filepath}")
        with open(filepath, "rb") as f:
            data = f.read()
        return ContributionMapStore.parse(data)

    @staticmethod
    def save(map_set: ContributionMapSet, filepath: Union[str, os.PathLike]) -> None:
        """Write a map set to a PCMP file."""
        data = ContributionMapStore.serialize(map_set)
        with open(filepath, "wb") as f:
            f.write(data)
        logger.info(f"Saved {map_set.size()} contribution maps to: {filepath}")


def parse(data: BytesLike) -> ContributionMapSet:
    """Parse a PCMP buffer, see ``ContributionMapStore.parse``."""
    return ContributionMapStore.parse(data)
