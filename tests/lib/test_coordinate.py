from __future__ import annotations

import dataclasses
import math

import pytest
from hypothesis import given, strategies as st

from getback_gps.lib.angle_math import inverse_angle
from getback_gps.lib.coordinate import Coordinate
from getback_gps.lib.errors import InvalidArgumentError


def _angle_deg():
    return st.floats(
        min_value=-3600.0, max_value=3600.0, allow_nan=False, allow_infinity=False
    )


def _canonical_angle_deg():
    return st.floats(min_value=0.0, max_value=360.0, exclude_max=True, allow_nan=False)


def _radius():
    return st.floats(min_value=1e-3, max_value=1e6, allow_nan=False)


def _circular_diff(a: float, b: float) -> float:
    return abs((a - b + 180.0) % 360.0 - 180.0)


# -----------------------
# Polar construction
# -----------------------


def test_polar_positive_radius():
    c = Coordinate.from_polar(20.0, 45.0)
    assert c.radius == 20.0
    assert c.angle == 45.0
    assert c.polar() == (20.0, 45.0)


def test_polar_angle_normalized():
    c = Coordinate(10.0, -725.0)
    assert c.angle == pytest.approx(355.0)


def test_negative_radius_flips_direction():
    c = Coordinate(-5.0, 10.0)
    assert c.polar() == (5.0, 190.0)
    assert c == Coordinate(5.0, 190.0)


@pytest.mark.parametrize("r", [0.0, -0.0])
def test_zero_radius_has_zero_angle(r):
    c = Coordinate(r, 123.0)
    assert c.angle == 0.0
    assert c.polar() == (0.0, 0.0)
    assert c == Coordinate()
    assert hash(c) == hash(Coordinate())


def test_default_is_origin():
    assert Coordinate().polar() == (0.0, 0.0)
    assert Coordinate().cartesian() == (0.0, 0.0)


def test_frozen():
    c = Coordinate(1.0, 2.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.radius = 3.0  # type: ignore[misc]


@given(r=st.floats(max_value=-1e-300, allow_nan=False, allow_infinity=False), a=_angle_deg())
def test_negative_radius_property(r, a):
    c = Coordinate.from_polar(r, a)
    assert c.polar() == (abs(r), inverse_angle(a))


@given(a=_angle_deg())
def test_zero_radius_property(a):
    assert Coordinate.from_polar(0.0, a).angle == 0.0


@given(r=st.floats(min_value=0.0, max_value=1e9, allow_nan=False), a=_angle_deg())
def test_canonical_invariants(r, a):
    c = Coordinate(r, a)
    assert c.radius >= 0
    assert 0.0 <= c.angle < 360.0


# -----------------------
# Cartesian
# -----------------------


@pytest.mark.parametrize(
    "x, y, radius, angle",
    [
        (20.0, 0.0, 20.0, 0.0),
        (0.0, 20.0, 20.0, 90.0),
        (-20.0, 0.0, 20.0, 180.0),
        (0.0, -20.0, 20.0, 270.0),
        (30.0, 40.0, 50.0, math.degrees(math.atan2(40.0, 30.0))),
        (-40.0, -30.0, 50.0, 180.0 + math.degrees(math.atan2(30.0, 40.0))),
    ],
)
def test_from_cartesian(x, y, radius, angle):
    c = Coordinate.from_cartesian(x, y)
    assert c.radius == pytest.approx(radius)
    assert c.angle == pytest.approx(angle)


def test_from_cartesian_origin():
    c = Coordinate.from_cartesian(0, 0)
    assert c.polar() == (0.0, 0.0)


def test_cartesian_accessors():
    c = Coordinate(20.0, 90.0)
    x, y = c.cartesian()
    assert x == pytest.approx(0.0, abs=1e-9)
    assert y == pytest.approx(20.0)
    assert c.x == pytest.approx(0.0, abs=1e-9)
    assert c.y == pytest.approx(20.0)


def test_cartesian_follows_canonical_polar():
    # (-5, 0) in polar is 5 along 180 degrees
    x, y = Coordinate(-5.0, 0.0).cartesian()
    assert x == pytest.approx(-5.0)
    assert y == pytest.approx(0.0, abs=1e-9)


@given(r=_radius(), a=_canonical_angle_deg())
def test_polar_cartesian_round_trip(r, a):
    x, y = Coordinate.from_polar(r, a).cartesian()
    back = Coordinate.from_cartesian(x, y)
    assert back.radius == pytest.approx(r, rel=1e-9)
    assert _circular_diff(back.angle, a) < 1e-7


# -----------------------
# Copy
# -----------------------


def test_from_coordinate_copies_value():
    src = Coordinate(20.0, 45.0)
    dup = Coordinate.from_coordinate(src)
    assert dup == src
    assert dup is not src


def test_from_coordinate_none():
    with pytest.raises(InvalidArgumentError) as exc:
        Coordinate.from_coordinate(None)
    assert str(exc.value) == "Parameter coordinate should not be None"


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        Coordinate.from_coordinate(None)


@given(r=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False), a=_angle_deg())
def test_copy_is_equal(r, a):
    c = Coordinate(r, a)
    assert Coordinate.from_coordinate(c) == c
