"""Firing helpers shared by every enemy behavior.

The AI never creates projectiles itself. A shot is a ``ShotFiredEvent``
published on the world's event bus; the host turns it into whatever
projectile, particles and sound effects it wants.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tacnav import config
from tacnav.events import ShotFiredEvent
from tacnav.types import Vec2
from tacnav.util import rng, vectors

if TYPE_CHECKING:
    from tacnav.game.agent import Agent
    from tacnav.game.world import GameWorld

logger = logging.getLogger(__name__)

_rng = rng.get("ai.shooting")


@dataclass(frozen=True, slots=True)
class Accuracy:
    """How precisely an enemy aims.

    The aim is rotated by a random angle of at most
    ``spread_angle * (1 - base_accuracy)`` radians either way, so a perfect
    shooter (``base_accuracy == 1``) never misses its aim point.
    """

    base_accuracy: float = config.ENEMY_BASE_ACCURACY
    spread_angle: float = config.ENEMY_SPREAD_ANGLE

    def __post_init__(self) -> None:
        if not 0.0 <= self.base_accuracy <= 1.0:
            raise ValueError(
                f"base_accuracy must be within [0, 1], got {self.base_accuracy}"
            )

    @property
    def max_deviation(self) -> float:
        return self.spread_angle * (1 - self.base_accuracy)


DEFAULT_ACCURACY = Accuracy()
PERFECT_ACCURACY = Accuracy(base_accuracy=1.0)


def roll_spread(accuracy: Accuracy) -> float:
    """Random aim deviation in radians, uniform in ``[-max, +max)``."""
    return (_rng.random() - 0.5) * 2 * accuracy.max_deviation


def aim_with_spread(
    origin: Vec2, target: Vec2, accuracy: Accuracy
) -> tuple[Vec2, Vec2]:
    """Apply accuracy spread to a shot from ``origin`` at ``target``.

    Returns:
        ``(direction, aim_point)``: the unit direction of travel and the
        deviated point at the same distance as ``target``.
    """
    direction = vectors.normalize(vectors.sub(target, origin))
    distance = vectors.distance(origin, target)
    if accuracy.max_deviation > 0:
        direction = vectors.rotate(direction, roll_spread(accuracy))
    aim_point = vectors.add(origin, vectors.scale(direction, distance))
    return direction, aim_point


def fire_at(
    shooter: Agent,
    target: Vec2,
    world: GameWorld,
    *,
    projectile_speed: float = config.ENEMY_PROJECTILE_SPEED,
    accuracy: Accuracy = DEFAULT_ACCURACY,
) -> ShotFiredEvent:
    """Fire from the shooter's position toward ``target`` and announce it."""
    direction, aim_point = aim_with_spread(shooter.pos, target, accuracy)
    event = ShotFiredEvent(
        shooter_id=shooter.agent_id,
        origin=shooter.pos,
        target=aim_point,
        direction=direction,
        projectile_speed=projectile_speed,
    )
    logger.debug(f"Agent {shooter.agent_id} fired at {aim_point}")
    world.events.publish(event)
    return event


@dataclass(slots=True)
class PeriodicShooter:
    """Fires at the world's threat once every ``cooldown_ms`` of elapsed time.

    Elapsed time keeps accumulating while there is no threat, so a shot goes
    out on the first tick a threat appears after the cooldown has passed.
    """

    cooldown_ms: float
    projectile_speed: float = config.ENEMY_PROJECTILE_SPEED
    accuracy: Accuracy = DEFAULT_ACCURACY
    elapsed_ms: float = 0.0

    def __post_init__(self) -> None:
        if self.cooldown_ms <= 0:
            raise ValueError(f"cooldown_ms must be positive, got {self.cooldown_ms}")

    def update(
        self, shooter: Agent, world: GameWorld, delta_ms: float
    ) -> ShotFiredEvent | None:
        self.elapsed_ms += delta_ms
        if self.elapsed_ms < self.cooldown_ms:
            return None

        threat = world.threat_position
        if threat is None:
            return None

        self.elapsed_ms = 0.0
        return fire_at(
            shooter,
            threat,
            world,
            projectile_speed=self.projectile_speed,
            accuracy=self.accuracy,
        )
