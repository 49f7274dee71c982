"""2D vector helpers operating on plain ``(x, y)`` tuples.

Positions, velocities and directions are all ``Vec2`` tuples. These helpers
never mutate their inputs and never raise on degenerate input: normalizing
the zero vector returns the zero vector.
"""

from __future__ import annotations

import math

from tacnav.types import Vec2

ZERO: Vec2 = (0.0, 0.0)


def add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vec2, factor: float) -> Vec2:
    return (v[0] * factor, v[1] * factor)


def dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross(a: Vec2, b: Vec2) -> float:
    """Z component of the 3D cross product of ``a`` and ``b``."""
    return a[0] * b[1] - a[1] * b[0]


def length(v: Vec2) -> float:
    return math.hypot(v[0], v[1])


def distance(a: Vec2, b: Vec2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def normalize(v: Vec2) -> Vec2:
    """Return the unit vector of ``v``, or ``ZERO`` for the zero vector."""
    size = length(v)
    if size == 0:
        return ZERO
    return (v[0] / size, v[1] / size)


def perpendicular(v: Vec2) -> Vec2:
    """Rotate ``v`` by +90 degrees: ``(x, y) -> (-y, x)``."""
    return (-v[1], v[0])


def rotate(v: Vec2, angle: float) -> Vec2:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (v[0] * cos_a - v[1] * sin_a, v[0] * sin_a + v[1] * cos_a)


def angle_between(a: Vec2, b: Vec2) -> float:
    """Unsigned angle in radians between two vectors (0 if either is zero)."""
    len_a = length(a)
    len_b = length(b)
    if len_a == 0 or len_b == 0:
        return 0.0
    cos_angle = dot(a, b) / (len_a * len_b)
    return math.acos(max(-1.0, min(1.0, cos_angle)))


def is_zero(v: Vec2) -> bool:
    return v[0] == 0 and v[1] == 0
