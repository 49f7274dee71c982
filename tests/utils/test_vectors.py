import math

import pytest

from tacnav.util import vectors


def test_arithmetic() -> None:
    assert vectors.add((1, 2), (3, 4)) == (4, 6)
    assert vectors.sub((1, 2), (3, 4)) == (-2, -2)
    assert vectors.scale((1, -2), 3) == (3, -6)
    assert vectors.dot((1, 2), (3, 4)) == 11
    assert vectors.cross((1, 0), (0, 1)) == 1


def test_length_and_distance() -> None:
    assert vectors.length((3, 4)) == 5
    assert vectors.distance((1, 1), (4, 5)) == 5


def test_normalize() -> None:
    assert vectors.normalize((0, 5)) == (0.0, 1.0)
    assert vectors.normalize((0, 0)) == vectors.ZERO


def test_perpendicular_rotates_counterclockwise() -> None:
    assert vectors.perpendicular((1, 0)) == (0, 1)
    assert vectors.perpendicular((0, 1)) == (-1, 0)


def test_rotate() -> None:
    assert vectors.rotate((1, 0), math.pi / 2) == pytest.approx((0, 1))


def test_angle_between() -> None:
    assert vectors.angle_between((1, 0), (0, 3)) == pytest.approx(math.pi / 2)
    assert vectors.angle_between((1, 0), (-2, 0)) == pytest.approx(math.pi)
    assert vectors.angle_between((1, 0), (0, 0)) == 0.0


def test_is_zero() -> None:
    assert vectors.is_zero((0.0, 0.0))
    assert not vectors.is_zero((0.0, 1e-9))
