"""Local obstacle avoidance for moving agents.

Path following gets an agent around the big picture; this module handles the
last few pixels. Given the velocity an agent *wants*, it looks for obstacles
close by and ahead of travel, and blends in a repulsion that bends the
velocity away from them without changing its speed.

Everything here is a pure function of its arguments. Obstacles are read
fresh on every call, so moving or destroyed obstacles are seen immediately
even though the navigation grid only catches up on its next rebuild.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from tacnav import config
from tacnav.navigation.obstacles import Obstacle
from tacnav.types import Milliseconds, Vec2
from tacnav.util import vectors

# Obstacles this close (as a fraction of the radius) count even when behind.
_CLOSE_RANGE_FRACTION = config.AVOIDANCE_CLOSE_RANGE_FRACTION


@dataclass(frozen=True, slots=True)
class AvoidanceConfig:
    """Tunables for one avoidance query.

    Attributes:
        look_ahead_distance: How far ahead of the agent to look, in pixels.
        avoidance_radius: Obstacles whose centers are further than this are
            ignored.
        avoidance_force: Share of the blended direction given to avoidance,
            in ``[0, 1]``.
        max_avoidance_angle: Largest deviation, in radians, the avoidance
            vector may have from the desired direction.
    """

    look_ahead_distance: float = config.AVOIDANCE_LOOK_AHEAD_DISTANCE
    avoidance_radius: float = config.AVOIDANCE_RADIUS
    avoidance_force: float = config.AVOIDANCE_FORCE
    max_avoidance_angle: float = config.AVOIDANCE_MAX_ANGLE

    def __post_init__(self) -> None:
        if not 0.0 <= self.avoidance_force <= 1.0:
            raise ValueError(
                f"avoidance_force must be within [0, 1], got {self.avoidance_force}"
            )
        if self.avoidance_radius < 0:
            raise ValueError(
                f"avoidance_radius must be non-negative, got {self.avoidance_radius}"
            )

    def with_overrides(self, **changes: Any) -> AvoidanceConfig:
        """Return a copy with the given fields replaced."""
        if not changes:
            return self
        return replace(self, **changes)


DEFAULT_AVOIDANCE = AvoidanceConfig()


def detect_obstacles_ahead(
    agent_pos: Vec2,
    desired_velocity: Vec2,
    obstacles: Iterable[Obstacle],
    settings: AvoidanceConfig = DEFAULT_AVOIDANCE,
) -> list[Obstacle]:
    """Return the obstacles the agent should steer around.

    An obstacle counts when its center is within ``avoidance_radius`` and it
    is either in front of the direction of travel or very close (within 60%
    of the radius) regardless of direction. A stationary agent sees nothing.
    """
    if vectors.is_zero(desired_velocity):
        return []

    direction = vectors.normalize(desired_velocity)
    radius = settings.avoidance_radius
    close_range = radius * _CLOSE_RANGE_FRACTION

    detected: list[Obstacle] = []
    for obstacle in obstacles:
        offset = vectors.sub(obstacle.center, agent_pos)
        distance = vectors.length(offset)
        if distance > radius:
            continue
        ahead = vectors.dot(direction, vectors.normalize(offset)) > 0
        if ahead or distance <= close_range:
            detected.append(obstacle)
    return detected


def calculate_avoidance_vector(
    agent_pos: Vec2,
    obstacles: Iterable[Obstacle],
    desired_velocity: Vec2,
    settings: AvoidanceConfig = DEFAULT_AVOIDANCE,
) -> Vec2:
    """Combined repulsion from ``obstacles``, of length ``avoidance_force``.

    Each obstacle pushes straight away from its center, weighted by
    ``1 - distance / radius`` so nearer obstacles dominate. The sum is
    normalized and scaled by the force. If it points further than
    ``max_avoidance_angle`` from the desired direction it is replaced by the
    desired direction rotated by exactly that angle, toward whichever side
    the repulsion was pushing.

    Returns the zero vector when nothing repels (no obstacles, or forces
    that cancel out).
    """
    radius = settings.avoidance_radius
    force = settings.avoidance_force

    sum_x = 0.0
    sum_y = 0.0
    for obstacle in obstacles:
        offset = vectors.sub(obstacle.center, agent_pos)
        distance = vectors.length(offset)
        if distance == 0 or radius == 0:
            continue  # No direction to push in
        strength = 1 - distance / radius
        away = vectors.scale(vectors.normalize(offset), -strength)
        sum_x += away[0]
        sum_y += away[1]

    total = (sum_x, sum_y)
    if vectors.is_zero(total):
        return vectors.ZERO
    avoidance_dir = vectors.normalize(total)

    direction = vectors.normalize(desired_velocity)
    if not vectors.is_zero(direction):
        max_angle = settings.max_avoidance_angle
        if vectors.angle_between(avoidance_dir, direction) > max_angle:
            perp = vectors.perpendicular(direction)
            side = 1.0 if vectors.dot(avoidance_dir, perp) >= 0 else -1.0
            avoidance_dir = vectors.normalize(
                vectors.add(
                    vectors.scale(direction, math.cos(max_angle)),
                    vectors.scale(perp, side * math.sin(max_angle)),
                )
            )

    return vectors.scale(avoidance_dir, force)


def apply_obstacle_avoidance(
    agent_pos: Vec2,
    desired_velocity: Vec2,
    obstacles: Iterable[Obstacle],
    settings: AvoidanceConfig | None = None,
    **overrides: Any,
) -> Vec2:
    """Bend ``desired_velocity`` around nearby obstacles, keeping its speed.

    Args:
        agent_pos: Current agent position.
        desired_velocity: Velocity the agent wants, in pixels per second.
        obstacles: Obstacles to consider; read once per call.
        settings: Base configuration, ``DEFAULT_AVOIDANCE`` if omitted.
        **overrides: Per-call field overrides applied on top of ``settings``
            (e.g. ``avoidance_radius=35``).

    Returns:
        ``desired_velocity`` itself when nothing is in the way. Otherwise a
        velocity of the same magnitude pointing along
        ``unit(desired) * (1 - force) + avoidance``. In the degenerate case
        where that blend cancels out, a sideways velocity of magnitude
        ``force * speed`` perpendicular to the desired one.
    """
    resolved = (settings or DEFAULT_AVOIDANCE).with_overrides(**overrides)

    detected = detect_obstacles_ahead(agent_pos, desired_velocity, obstacles, resolved)
    if not detected:
        return desired_velocity

    avoidance = calculate_avoidance_vector(
        agent_pos, detected, desired_velocity, resolved
    )

    speed = vectors.length(desired_velocity)
    force = resolved.avoidance_force
    blended = vectors.add(
        vectors.scale(vectors.normalize(desired_velocity), 1 - force), avoidance
    )
    if not vectors.is_zero(blended):
        return vectors.scale(vectors.normalize(blended), speed)

    perp = vectors.normalize(vectors.perpendicular(desired_velocity))
    return vectors.scale(perp, speed * force)


def is_stuck(
    velocity: Vec2,
    stalled_ms: Milliseconds,
    threshold_ms: Milliseconds = config.STUCK_THRESHOLD_MS,
    min_speed: float = config.STUCK_MIN_SPEED,
) -> bool:
    """True when the agent is barely moving and has been for too long.

    ``stalled_ms`` is the time since the caller last saw the agent make
    progress (or last re-planned).
    """
    return vectors.length(velocity) < min_speed and stalled_ms > threshold_ms
