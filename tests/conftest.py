"""Shared test fixtures."""

from __future__ import annotations

import math
import struct

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from pixelcontrib.contrib_map import ContributionMap, ContributionMapSet


def build_pcmp(maps, magic=b"PCMP", version=1, count=None) -> bytes:
    """Assemble a PCMP buffer by hand from (map_size, angle, flat values) triples."""
    if count is None:
        count = len(maps)
    out = bytearray(magic + struct.pack("<II", version, count))
    for map_size, angle, values in maps:
        out += struct.pack("<If", map_size, angle)
        out += np.asarray(values, dtype="<f4").tobytes()
    return bytes(out)


@pytest.fixture
def pcmp_builder():
    return build_pcmp


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def two_map_bytes() -> bytes:
    # 2x2 maps, angles exactly representable as f32
    return build_pcmp([
        (2, 0.0, [0.1, 0.2, 0.3, 0.4]),
        (2, 0.5, [0.5, 0.6, 0.7, 0.8]),
    ])


@pytest.fixture
def constant_pair() -> ContributionMapSet:
    """Orthographic map of 0.2 and a 90 degree map of 0.8, size 8."""
    return ContributionMapSet([
        ContributionMap.filled(0.0, 8, 0.2),
        ContributionMap.filled(math.pi / 2.0, 8, 0.8),
    ])


@pytest.fixture
def random_triple(rng) -> ContributionMapSet:
    """Three random maps of size 8 at 0, 0.4 and 0.8 radians."""
    return ContributionMapSet([
        ContributionMap(angle, rng.random((8, 8)).astype(np.float32))
        for angle in (0.0, 0.4, 0.8)
    ])


@pytest.fixture
def axis_map() -> ContributionMap:
    """
    Size 8 map that is zero except for distinct values at the cells of the six
    axis directions and of the (+1, +1, +1) face center.
    """
    values = np.zeros((8, 8), dtype=np.float32)
    # (u, v) cells: +x (7, 4), -x (0, 4), +y (4, 7), -y (4, 0), +z (4, 4), -z (7, 7)
    values[4, 7] = 0.1
    values[7, 4] = 0.2
    values[4, 0] = 0.3
    values[0, 4] = 0.4
    values[4, 4] = 0.5
    values[7, 7] = 0.6
    values[5, 5] = 0.9
    return ContributionMap(0.0, values)
