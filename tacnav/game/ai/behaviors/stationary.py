"""Stationary behavior: hold position and fire on a fixed cooldown."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from tacnav import config
from tacnav.game.ai.behaviors.kind import BehaviorKind
from tacnav.game.ai.shooting import DEFAULT_ACCURACY, Accuracy, PeriodicShooter
from tacnav.util import vectors

if TYPE_CHECKING:
    from tacnav.game.agent import Agent
    from tacnav.game.world import GameWorld


class StationaryBehavior:
    """Never moves; shoots at the threat every ``shoot_cooldown_ms``."""

    kind: ClassVar[BehaviorKind] = BehaviorKind.STATIONARY

    def __init__(
        self,
        shoot_cooldown_ms: float = config.ENEMY_SHOOT_COOLDOWN_MS,
        *,
        projectile_speed: float = config.ENEMY_PROJECTILE_SPEED,
        accuracy: Accuracy = DEFAULT_ACCURACY,
    ) -> None:
        self.shooter = PeriodicShooter(
            shoot_cooldown_ms, projectile_speed=projectile_speed, accuracy=accuracy
        )

    def update(self, agent: Agent, world: GameWorld, delta_ms: float) -> None:
        agent.vel = vectors.ZERO
        self.shooter.update(agent, world, delta_ms)
