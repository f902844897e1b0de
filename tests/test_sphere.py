"""Tests for the per-map sphere samplers and the angle-keyed interpolators."""

import logging
import math

import numpy as np
import pytest

from pixelcontrib.contrib_map import ContributionMap, ContributionMapSet
from pixelcontrib.errors import ConfigurationError, InvalidInputError, RangeError
from pixelcontrib.grid import direction_from_index
from pixelcontrib.interpolation import (
    BarycentricInterpolator,
    FineOctahedronBarycentricInterpolator,
    Interpolator,
    OctahedronBarycentricInterpolator,
    SphereGridInterpolator,
    ValuePerAxisInterpolator,
)
from pixelcontrib.interpolation.sphere import (
    AxisValueSampler,
    FineOctahedronBarycentricSampler,
    GridBarycentricSampler,
    OctahedronBarycentricSampler,
    SphereGridSampler,
    linear_interpolate_on_unit_circle,
)
from pixelcontrib.octahedron import decode

SAMPLERS = [
    AxisValueSampler,
    GridBarycentricSampler,
    OctahedronBarycentricSampler,
    FineOctahedronBarycentricSampler,
    SphereGridSampler,
]

DIRECTIONS = [
    (0.0, 0.0, 1.0),
    (0.0, 0.0, -1.0),
    (1.0, 0.0, 0.0),
    (0.3, -0.7, 0.2),
    (-0.5, 0.5, -0.9),
    (1e-9, 1.0, -1e-9),
]


@pytest.fixture
def gradient_map() -> ContributionMap:
    u, v = np.meshgrid(np.arange(8), np.arange(8))
    return ContributionMap(0.0, (0.1 * u + 0.02 * v).astype(np.float32))


@pytest.mark.parametrize("sampler_cls", SAMPLERS)
def test_constant_map_gives_constant(sampler_cls):
    sampler = sampler_cls(ContributionMap.filled(0.0, 8, 0.35))
    for d in DIRECTIONS:
        assert sampler.sample(d) == pytest.approx(0.35, abs=1e-6)


# ---- ValuePerAxis ----

def test_axis_sampler_values(axis_map):
    sampler = AxisValueSampler(axis_map)
    assert sampler.x_axis == pytest.approx(0.2)
    assert sampler.y_axis == pytest.approx(0.3)
    assert sampler.z_axis == pytest.approx(0.55)


def test_axis_sampler_blends_by_components(axis_map):
    sampler = AxisValueSampler(axis_map)
    assert sampler.sample((1.0, 0.0, 0.0)) == pytest.approx(0.2)
    assert sampler.sample((0.0, 0.0, -3.0)) == pytest.approx(0.55)
    assert sampler.sample((1.0, 1.0, 0.0)) == pytest.approx(0.25)
    assert sampler.sample((-1.0, 1.0, -1.0)) == pytest.approx(0.35)


# ---- Grid barycentric ----

def test_barycentric_exact_at_cell_centers(rng):
    contrib_map = ContributionMap(0.0, rng.random((8, 8)).astype(np.float32))
    sampler = GridBarycentricSampler(contrib_map)
    for v in range(8):
        for u in range(8):
            d = direction_from_index((u, v), 8)
            assert sampler.sample(d) == pytest.approx(contrib_map.value_at(u, v), abs=1e-9)


def test_barycentric_reproduces_linear_values(gradient_map):
    sampler = GridBarycentricSampler(gradient_map)
    for cu, cv in [(0.4, 0.45), (0.55, 0.3), (0.62, 0.61)]:
        expected = 0.1 * (cu * 8 - 0.5) + 0.02 * (cv * 8 - 0.5)
        assert sampler.sample(decode((cu, cv))) == pytest.approx(expected, abs=1e-6)


def test_barycentric_wraps_across_border(gradient_map):
    sampler = GridBarycentricSampler(gradient_map)
    values = gradient_map.values
    assert sampler._wrapped_value(-1, 2) == values[8 - 1 - 2, 0]
    assert sampler._wrapped_value(3, -1) == values[0, 8 - 1 - 3]
    assert sampler._wrapped_value(8, 1) == values[8 - 1 - 1, 7]
    assert sampler._wrapped_value(1, 8) == values[7, 8 - 1 - 1]


def test_barycentric_border_stays_in_range(gradient_map):
    sampler = GridBarycentricSampler(gradient_map)
    lo, hi = float(gradient_map.values.min()), float(gradient_map.values.max())
    for cu, cv in [(0.01, 0.3), (0.99, 0.7), (0.4, 0.005), (0.5, 0.999), (0.0, 0.0)]:
        assert lo - 1e-6 <= sampler.sample(decode((cu, cv))) <= hi + 1e-6


# ---- Octahedron barycentric ----

def test_octahedron_vertices(axis_map):
    sampler = OctahedronBarycentricSampler(axis_map)
    assert sampler.sample((1.0, 0.0, 0.0)) == pytest.approx(0.1)
    assert sampler.sample((0.0, -2.0, 0.0)) == pytest.approx(0.4)
    assert sampler.sample((0.0, 0.0, 1.0)) == pytest.approx(0.5)
    assert sampler.sample((0.0, 0.0, -1.0)) == pytest.approx(0.6)


def test_octahedron_face_interior(axis_map):
    sampler = OctahedronBarycentricSampler(axis_map)
    assert sampler.sample((1.0, 1.0, 1.0)) == pytest.approx((0.1 + 0.2 + 0.5) / 3.0)
    assert sampler.sample((-1.0, -1.0, -1.0)) == pytest.approx((0.3 + 0.4 + 0.6) / 3.0)


def test_fine_octahedron_uses_face_centers(axis_map):
    sampler = FineOctahedronBarycentricSampler(axis_map)
    assert sampler.sample((1.0, 1.0, 1.0)) == pytest.approx(0.9)
    assert sampler.sample((0.0, 0.0, 1.0)) == pytest.approx(0.5)
    assert sampler.sample((1.0, 0.0, 0.0)) == pytest.approx(0.1)
    # the other face centers of the map are zero
    assert sampler.sample((-1.0, 1.0, 1.0)) == pytest.approx(0.0)


def test_octahedron_rejects_bad_direction(axis_map):
    with pytest.raises(InvalidInputError):
        OctahedronBarycentricSampler(axis_map).sample((1.0, 0.0))


# ---- Sphere grid ----

def test_linear_interpolate_on_unit_circle():
    values = [1.0, 2.0, 3.0, 4.0]
    assert linear_interpolate_on_unit_circle(values, 0.0) == pytest.approx(1.0)
    assert linear_interpolate_on_unit_circle(values, math.pi / 4.0) == pytest.approx(1.5)
    assert linear_interpolate_on_unit_circle(values, math.pi / 2.0) == pytest.approx(2.0)
    assert linear_interpolate_on_unit_circle(values, 7.0 * math.pi / 4.0) == pytest.approx(2.5)
    assert linear_interpolate_on_unit_circle(values, -math.pi / 4.0) == pytest.approx(2.5)
    assert linear_interpolate_on_unit_circle([0.7], 1.0) == 0.7


def test_sphere_grid_poles(axis_map):
    sampler = SphereGridSampler(axis_map)
    assert [len(row) for row in sampler.rows] == [1, 6, 8, 6, 1]
    assert sampler.sample((0.0, 0.0, 1.0)) == pytest.approx(0.5)
    assert sampler.sample((0.0, 0.0, -1.0)) == pytest.approx(0.6)


def test_sphere_grid_rejects_bad_rings(axis_map):
    with pytest.raises(InvalidInputError):
        SphereGridSampler(axis_map, ring_sizes=(1,))
    with pytest.raises(InvalidInputError):
        SphereGridSampler(axis_map, ring_sizes=(1, 0, 1))
    with pytest.raises(InvalidInputError):
        SphereGridSampler(axis_map).sample((0.0, 0.0, 0.0))


# ---- Angle-keyed interpolators ----

@pytest.mark.parametrize("cls", [
    ValuePerAxisInterpolator,
    BarycentricInterpolator,
    OctahedronBarycentricInterpolator,
    FineOctahedronBarycentricInterpolator,
    SphereGridInterpolator,
])
def test_unknown_angle_gives_zero(cls, constant_pair):
    interp = cls(constant_pair)
    assert interp.interpolate(0.0, (1, 1)) == pytest.approx(0.2)
    assert interp.interpolate(math.pi / 2.0, (0.0, 1.0, 0.0)) == pytest.approx(0.8)
    assert interp.interpolate(0.3, (1, 1)) == 0.0
    assert interp.interpolate(0.3, (0.0, 0.0, 1.0)) == 0.0


KEYED = [
    ValuePerAxisInterpolator,
    BarycentricInterpolator,
    OctahedronBarycentricInterpolator,
    FineOctahedronBarycentricInterpolator,
    SphereGridInterpolator,
]


@pytest.mark.parametrize("cls", KEYED)
def test_unknown_angle_still_checks_position(cls, constant_pair):
    interp = cls(constant_pair)
    with pytest.raises(RangeError):
        interp.interpolate(0.3, (99, 99))
    with pytest.raises(RangeError):
        interp.interpolate(0.3, (8, 0))
    with pytest.raises(RangeError):
        interp.interpolate(0.0, (0, 8))


@pytest.mark.parametrize("cls", KEYED)
def test_keyed_needs_equal_sizes(cls):
    map_set = ContributionMapSet([ContributionMap.filled(0.0, 4), ContributionMap.filled(0.5, 8)])
    with pytest.raises(ConfigurationError):
        cls(map_set)


def test_keyed_on_empty_set():
    interp = BarycentricInterpolator(ContributionMapSet())
    assert interp.interpolate(0.0, (0.0, 0.0, 1.0)) == 0.0
    with pytest.raises(RangeError):
        interp.interpolate(0.0, (0, 0))


@pytest.mark.parametrize("cls", KEYED)
def test_keyed_interpolate_map_matches_cells(cls, random_triple):
    interp = cls(random_triple)
    fast = interp.interpolate_map(0.4, 8)
    slow = Interpolator.interpolate_map(interp, 0.4, 8)

    assert fast.shape == (8, 8)
    np.testing.assert_allclose(fast, slow, rtol=1e-12, atol=1e-12)
    np.testing.assert_array_equal(interp.interpolate_map(0.3, 8), np.zeros((8, 8)))


def test_barycentric_batch_matches_scalar(rng):
    sampler = GridBarycentricSampler(ContributionMap(0.0, rng.random((8, 8)).astype(np.float32)))
    directions = rng.normal(size=(200, 3))
    batch = sampler.sample_many(directions)
    for d, value in zip(directions, batch):
        assert value == pytest.approx(sampler.sample(d), abs=1e-12)


def test_barycentric_batch_wraps_like_scalar(gradient_map):
    sampler = GridBarycentricSampler(gradient_map)
    i = np.array([-1, 3, 8, 1, 8])
    j = np.array([2, -1, 1, 8, 8])
    expected = [sampler._wrapped_value(a, b) for a, b in zip(i, j)]
    np.testing.assert_array_equal(sampler._wrapped_values(i, j), expected)


def test_value_per_axis_interpolator(axis_map):
    interp = ValuePerAxisInterpolator(ContributionMapSet([axis_map]))
    assert interp.interpolate(0.0, (1.0, 1.0, 0.0)) == pytest.approx(0.25)


def test_barycentric_interpolator_at_cells(random_triple):
    interp = BarycentricInterpolator(random_triple)
    contrib_map = random_triple.get_map(1)
    for u, v in [(0, 0), (3, 5), (7, 7)]:
        assert interp.interpolate(contrib_map.camera_angle, (u, v)) == pytest.approx(
            contrib_map.value_at(u, v), abs=1e-9
        )


def test_duplicate_angle_keeps_first(caplog):
    map_set = ContributionMapSet([ContributionMap.filled(0.0, 4, 0.1), ContributionMap.filled(0.0, 4, 0.9)])
    with caplog.at_level(logging.WARNING, logger="pixelcontrib"):
        interp = ValuePerAxisInterpolator(map_set)
    assert interp.interpolate(0.0, (0, 0)) == pytest.approx(0.1)
    assert "duplicate" in caplog.text
