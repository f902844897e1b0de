"""Tests for the octahedral direction codec and polar helpers."""

import math

import numpy as np
import pytest

from pixelcontrib.config import ROUND_TRIP_TOLERANCE
from pixelcontrib.errors import InvalidInputError
from pixelcontrib.octahedron import (
    angular_error,
    decode,
    decode_many,
    encode,
    encode_many,
    wrap_octahedron_value,
)
from pixelcontrib.polar import cartesian_to_polar, polar_to_cartesian


def _sphere_directions(num: int = 20) -> list[np.ndarray]:
    """Azimuth/elevation grid covering the sphere, poles included."""
    directions = []
    for i in range(num + 1):
        alpha = 2.0 * math.pi * i / num
        for j in range(num + 1):
            beta = -math.pi / 2.0 + math.pi * j / num
            directions.append(polar_to_cartesian(alpha, beta))
    return directions


def test_round_trip_over_sphere():
    for d in _sphere_directions():
        c = encode(d)
        assert 0.0 <= c[0] <= 1.0
        assert 0.0 <= c[1] <= 1.0
        assert angular_error(d, decode(c)) < ROUND_TRIP_TOLERANCE


def test_encode_ignores_length():
    d = np.array([0.3, -0.5, 0.8])
    np.testing.assert_allclose(encode(d), encode(d * 17.0), atol=1e-12)


def test_known_coordinates():
    np.testing.assert_allclose(encode((0.0, 0.0, 1.0)), [0.5, 0.5])
    np.testing.assert_allclose(encode((0.0, 0.0, -1.0)), [1.0, 1.0])
    np.testing.assert_allclose(encode((1.0, 0.0, 0.0)), [1.0, 0.5])
    np.testing.assert_allclose(encode((-1.0, 0.0, 0.0)), [0.0, 0.5])
    np.testing.assert_allclose(encode((0.0, 1.0, 0.0)), [0.5, 1.0])
    np.testing.assert_allclose(encode((0.0, -1.0, 0.0)), [0.5, 0.0])


def test_decode_center_is_up():
    np.testing.assert_allclose(decode((0.5, 0.5)), [0.0, 0.0, 1.0], atol=1e-12)


def test_decode_corners_are_down():
    for corner in [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)]:
        np.testing.assert_allclose(decode(corner), [0.0, 0.0, -1.0], atol=1e-12)


def test_decode_returns_unit_vectors():
    for u in np.linspace(0.0, 1.0, 11):
        for v in np.linspace(0.0, 1.0, 11):
            assert np.linalg.norm(decode((u, v))) == pytest.approx(1.0, abs=1e-12)


def test_wrap_sign_of_zero_is_positive():
    assert wrap_octahedron_value(0.0, 0.25) == pytest.approx(0.75)
    assert wrap_octahedron_value(-0.1, 0.25) == pytest.approx(-0.75)


def test_encode_rejects_zero_vector():
    with pytest.raises(InvalidInputError):
        encode((0.0, 0.0, 0.0))


def test_encode_rejects_bad_input():
    with pytest.raises(InvalidInputError):
        encode((1.0, 0.0))
    with pytest.raises(InvalidInputError):
        encode((math.nan, 0.0, 1.0))
    with pytest.raises(InvalidInputError):
        decode((0.5, 0.5, 0.5))


def test_batch_matches_scalar():
    directions = np.array(_sphere_directions(8))
    coords = encode_many(directions)
    assert coords.shape == (len(directions), 2)
    for d, c in zip(directions, coords):
        np.testing.assert_array_equal(c, encode(d))

    decoded = decode_many(coords)
    for c, d in zip(coords, decoded):
        np.testing.assert_array_equal(d, decode(c))


def test_batch_rejects_zero_vector():
    with pytest.raises(InvalidInputError):
        encode_many([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0]])


def test_cartesian_to_polar():
    alpha, beta = cartesian_to_polar((1.0, 0.0, 0.0))
    assert alpha == pytest.approx(0.0)
    assert beta == pytest.approx(0.0)

    alpha, beta = cartesian_to_polar((0.0, 1.0, 0.0))
    assert alpha == pytest.approx(math.pi / 2.0)
    assert beta == pytest.approx(0.0)

    alpha, beta = cartesian_to_polar((0.0, -1.0, 0.0))
    assert alpha == pytest.approx(3.0 * math.pi / 2.0)

    alpha, beta = cartesian_to_polar((0.0, 0.0, 1.0))
    assert alpha == 0.0
    assert beta == pytest.approx(math.pi / 2.0)


def test_polar_round_trip():
    for i in range(4):
        for j in range(1, 4):
            alpha = 0.5 + i * 1.2
            beta = -math.pi / 2.0 + j * math.pi / 4.0
            a, b = cartesian_to_polar(polar_to_cartesian(alpha, beta))
            assert a == pytest.approx(alpha)
            assert b == pytest.approx(beta)


@pytest.mark.parametrize("scale", [1e-200, 1e-310, 1e200, 1e305])
def test_extreme_magnitudes(scale):
    d = np.array([3.0, -4.0, 12.0]) * scale
    np.testing.assert_allclose(decode(encode(d)), np.array([3.0, -4.0, 12.0]) / 13.0, atol=1e-12)
    np.testing.assert_array_equal(encode_many(d[np.newaxis, :])[0], encode(d))


def test_tiny_and_huge_axis_vectors():
    np.testing.assert_allclose(encode((1e-200, 0.0, 0.0)), [1.0, 0.5])
    np.testing.assert_allclose(encode((1e200, 1e200, 0.0)), [0.75, 0.75])
    np.testing.assert_allclose(encode((-1e-300, 0.0, -1e-300)), [0.0, 0.75])
