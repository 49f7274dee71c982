"""Chase behavior: close in on the threat along the navigation path."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from tacnav import config
from tacnav.game.ai.behaviors.kind import BehaviorKind
from tacnav.game.ai.shooting import DEFAULT_ACCURACY, Accuracy, PeriodicShooter
from tacnav.navigation.steering import (
    DEFAULT_AVOIDANCE,
    AvoidanceConfig,
    apply_obstacle_avoidance,
)
from tacnav.util import vectors

if TYPE_CHECKING:
    from tacnav.game.agent import Agent
    from tacnav.game.world import GameWorld


class ChaseBehavior:
    """Follows the path to the threat, stopping ``min_distance`` short of it.

    When the planner has no direction to offer (no path, or already on the
    last waypoint) the agent heads straight for the threat instead.
    """

    kind: ClassVar[BehaviorKind] = BehaviorKind.CHASE

    def __init__(
        self,
        speed: float = config.CHASE_SPEED,
        shoot_cooldown_ms: float = config.CHASE_SHOOT_COOLDOWN_MS,
        *,
        min_distance: float = config.CHASE_MIN_DISTANCE,
        avoidance: AvoidanceConfig = DEFAULT_AVOIDANCE,
        projectile_speed: float = config.ENEMY_PROJECTILE_SPEED,
        accuracy: Accuracy = DEFAULT_ACCURACY,
    ) -> None:
        if speed < 0:
            raise ValueError(f"speed must be non-negative, got {speed}")
        self.speed = speed
        self.min_distance = min_distance
        self.avoidance = avoidance
        self.shooter = PeriodicShooter(
            shoot_cooldown_ms, projectile_speed=projectile_speed, accuracy=accuracy
        )

    def update(self, agent: Agent, world: GameWorld, delta_ms: float) -> None:
        threat = world.threat_position
        if threat is None or vectors.distance(agent.pos, threat) <= self.min_distance:
            agent.vel = vectors.ZERO
        else:
            direction = world.nav.get_direction_to_goal(agent.pos, threat)
            if vectors.is_zero(direction):
                direction = vectors.normalize(vectors.sub(threat, agent.pos))
            agent.vel = apply_obstacle_avoidance(
                agent.pos,
                vectors.scale(direction, self.speed),
                world.get_obstacles(),
                self.avoidance,
            )

        self.shooter.update(agent, world, delta_ms)
