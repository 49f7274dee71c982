"""Patrol behavior: wander around a home position, firing on a cooldown.

The agent remembers where it stood on its first tick. It then repeatedly
picks a random heading and a waypoint 100-150 px from home along it,
clamped inside the world. A new heading is picked when the interval runs
out, when the waypoint is reached, or when the agent has stopped making
progress (pinned against something the host's physics won't let it pass).
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, ClassVar

from tacnav import config
from tacnav.game.ai.behaviors.kind import BehaviorKind
from tacnav.game.ai.shooting import DEFAULT_ACCURACY, Accuracy, PeriodicShooter
from tacnav.navigation.steering import (
    AvoidanceConfig,
    apply_obstacle_avoidance,
    is_stuck,
)
from tacnav.types import Milliseconds, Vec2
from tacnav.util import rng, vectors

if TYPE_CHECKING:
    from tacnav.game.agent import Agent
    from tacnav.game.world import GameWorld

logger = logging.getLogger(__name__)

_rng = rng.get("ai.patrol")

PATROL_AVOIDANCE = AvoidanceConfig(
    look_ahead_distance=config.PATROL_AVOIDANCE_LOOK_AHEAD,
    avoidance_radius=config.PATROL_AVOIDANCE_RADIUS,
    avoidance_force=config.PATROL_AVOIDANCE_FORCE,
    max_avoidance_angle=config.PATROL_AVOIDANCE_MAX_ANGLE,
)


class PatrolBehavior:
    """Random patrol around the spawn point with obstacle avoidance.

    Attributes:
        home: Position recorded on the first update, or None before that.
        direction: Current unit patrol heading.
        waypoint: Current patrol target, or None before the first update.
        stalled_ms: How long the agent has moved slower than the stuck speed.
    """

    kind: ClassVar[BehaviorKind] = BehaviorKind.PATROL

    def __init__(
        self,
        speed: float = config.PATROL_SPEED,
        shoot_cooldown_ms: float = config.PATROL_SHOOT_COOLDOWN_MS,
        *,
        patrol_range: float = config.PATROL_RANGE,
        range_jitter: float = config.PATROL_RANGE_JITTER,
        waypoint_reached_distance: float = config.PATROL_WAYPOINT_REACHED_DISTANCE,
        direction_change_interval_ms: Milliseconds = (
            config.PATROL_DIRECTION_CHANGE_INTERVAL_MS
        ),
        bounds_margin: float = config.PATROL_BOUNDS_MARGIN,
        avoidance: AvoidanceConfig = PATROL_AVOIDANCE,
        projectile_speed: float = config.ENEMY_PROJECTILE_SPEED,
        accuracy: Accuracy = DEFAULT_ACCURACY,
    ) -> None:
        if speed < 0:
            raise ValueError(f"speed must be non-negative, got {speed}")
        if patrol_range <= 0:
            raise ValueError(f"patrol_range must be positive, got {patrol_range}")
        if direction_change_interval_ms <= 0:
            raise ValueError(
                "direction_change_interval_ms must be positive, "
                f"got {direction_change_interval_ms}"
            )

        self.speed = speed
        self.patrol_range = patrol_range
        self.range_jitter = range_jitter
        self.waypoint_reached_distance = waypoint_reached_distance
        self.direction_change_interval_ms = direction_change_interval_ms
        self.bounds_margin = bounds_margin
        self.avoidance = avoidance
        self.shooter = PeriodicShooter(
            shoot_cooldown_ms, projectile_speed=projectile_speed, accuracy=accuracy
        )

        self.home: Vec2 | None = None
        self.direction: Vec2 = (1.0, 0.0)
        self.waypoint: Vec2 | None = None
        self.last_direction_change_ms: Milliseconds = 0.0
        self.stalled_ms: Milliseconds = 0.0
        self._last_pos: Vec2 | None = None

    def pick_random_direction(self, world: GameWorld) -> None:
        """Choose a new heading and a waypoint along it, inside the world."""
        assert self.home is not None

        angle = _rng.random() * math.tau
        self.direction = (math.cos(angle), math.sin(angle))

        reach = self.patrol_range + _rng.random() * self.range_jitter
        raw = vectors.add(self.home, vectors.scale(self.direction, reach))
        margin = self.bounds_margin
        self.waypoint = (
            max(margin, min(world.width - margin, raw[0])),
            max(margin, min(world.height - margin, raw[1])),
        )

        self.last_direction_change_ms = world.clock.now_ms()
        self.stalled_ms = 0.0

    def update(self, agent: Agent, world: GameWorld, delta_ms: float) -> None:
        if self.home is None:
            self.home = agent.pos
            self.pick_random_direction(world)

        self._track_progress(agent, delta_ms)

        now = world.clock.now_ms()
        reached = (
            self.waypoint is not None
            and vectors.distance(agent.pos, self.waypoint)
            < self.waypoint_reached_distance
        )
        if (
            now - self.last_direction_change_ms > self.direction_change_interval_ms
            or reached
            or is_stuck(self._observed_velocity(agent, delta_ms), self.stalled_ms)
        ):
            if not reached:
                logger.debug(f"Agent {agent.agent_id} re-rolling patrol heading")
            self.pick_random_direction(world)

        agent.vel = apply_obstacle_avoidance(
            agent.pos,
            self._desired_velocity(agent),
            world.get_obstacles(),
            self.avoidance,
        )
        self._last_pos = agent.pos

        self.shooter.update(agent, world, delta_ms)

    def _desired_velocity(self, agent: Agent) -> Vec2:
        if self.waypoint is not None:
            to_waypoint = vectors.sub(self.waypoint, agent.pos)
            if vectors.length(to_waypoint) > self.waypoint_reached_distance:
                return vectors.scale(vectors.normalize(to_waypoint), self.speed)
        return vectors.scale(self.direction, self.speed)

    def _observed_velocity(self, agent: Agent, delta_ms: float) -> Vec2:
        """Velocity actually achieved since the previous update, in px/s."""
        if self._last_pos is None or delta_ms <= 0:
            return agent.vel
        moved = vectors.sub(agent.pos, self._last_pos)
        return vectors.scale(moved, 1000.0 / delta_ms)

    def _track_progress(self, agent: Agent, delta_ms: float) -> None:
        speed = vectors.length(self._observed_velocity(agent, delta_ms))
        if speed < config.STUCK_MIN_SPEED:
            self.stalled_ms += delta_ms
        else:
            self.stalled_ms = 0.0
