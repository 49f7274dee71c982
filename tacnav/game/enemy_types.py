"""Enemy type registry and factory.

Each ``EnemyType`` bundles the stats of one kind of enemy with the behavior
that drives it. Adding an entry to ``ENEMY_TYPES`` makes it available to
``create_enemy`` and ``create_random_enemy``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tacnav import config
from tacnav.game.agent import Agent
from tacnav.game.ai.behaviors import (
    Behavior,
    BehaviorKind,
    ChaseBehavior,
    PatrolBehavior,
    StationaryBehavior,
    TacticalBehavior,
)
from tacnav.game.ai.shooting import DEFAULT_ACCURACY, Accuracy
from tacnav.types import Vec2
from tacnav.util import rng

logger = logging.getLogger(__name__)

_rng = rng.get("world.enemy_spawn")


@dataclass(frozen=True, slots=True)
class EnemyType:
    """Static definition of an enemy kind."""

    type_id: str
    name: str
    behavior: BehaviorKind
    speed: float
    shoot_cooldown_ms: float
    projectile_speed: float = config.ENEMY_PROJECTILE_SPEED
    accuracy: Accuracy = DEFAULT_ACCURACY

    def create_behavior(self) -> Behavior:
        """A fresh behavior instance configured from this type's stats."""
        match self.behavior:
            case BehaviorKind.STATIONARY:
                return StationaryBehavior(
                    self.shoot_cooldown_ms,
                    projectile_speed=self.projectile_speed,
                    accuracy=self.accuracy,
                )
            case BehaviorKind.PATROL:
                return PatrolBehavior(
                    self.speed,
                    self.shoot_cooldown_ms,
                    projectile_speed=self.projectile_speed,
                    accuracy=self.accuracy,
                )
            case BehaviorKind.CHASE:
                return ChaseBehavior(
                    self.speed,
                    self.shoot_cooldown_ms,
                    projectile_speed=self.projectile_speed,
                    accuracy=self.accuracy,
                )
            case BehaviorKind.TACTICAL:
                return TacticalBehavior(
                    self.speed,
                    self.shoot_cooldown_ms,
                    projectile_speed=self.projectile_speed,
                )


ENEMY_TYPES: dict[str, EnemyType] = {
    enemy_type.type_id: enemy_type
    for enemy_type in (
        EnemyType(
            type_id="stationary_shooter",
            name="Stationary Shooter",
            behavior=BehaviorKind.STATIONARY,
            speed=0.0,
            shoot_cooldown_ms=config.ENEMY_SHOOT_COOLDOWN_MS,
        ),
        EnemyType(
            type_id="patrol_shooter",
            name="Patrol Shooter",
            behavior=BehaviorKind.PATROL,
            speed=config.PATROL_SPEED,
            shoot_cooldown_ms=config.PATROL_SHOOT_COOLDOWN_MS,
        ),
        EnemyType(
            type_id="chase_shooter",
            name="Chase Shooter",
            behavior=BehaviorKind.CHASE,
            speed=config.CHASE_SPEED,
            shoot_cooldown_ms=config.CHASE_SHOOT_COOLDOWN_MS,
        ),
        EnemyType(
            type_id="tactical_shooter",
            name="Tactical Shooter",
            behavior=BehaviorKind.TACTICAL,
            speed=config.TACTICAL_SPEED,
            shoot_cooldown_ms=config.TACTICAL_SHOOT_COOLDOWN_MS,
        ),
        EnemyType(
            type_id="fast_shooter",
            name="Fast Shooter",
            behavior=BehaviorKind.STATIONARY,
            speed=config.FAST_SPEED,
            shoot_cooldown_ms=config.FAST_SHOOT_COOLDOWN_MS,
            projectile_speed=config.FAST_PROJECTILE_SPEED,
        ),
    )
}


def get_enemy_type(type_id: str) -> EnemyType | None:
    return ENEMY_TYPES.get(type_id)


def get_all_enemy_types() -> list[EnemyType]:
    return list(ENEMY_TYPES.values())


def create_enemy_from_type(enemy_type: EnemyType, pos: Vec2, agent_id: int) -> Agent:
    return Agent(
        agent_id=agent_id,
        pos=pos,
        behavior=enemy_type.create_behavior(),
        type_id=enemy_type.type_id,
    )


def create_enemy(type_id: str, pos: Vec2, agent_id: int) -> Agent | None:
    """Build an enemy agent of the given type, or None for unknown ids."""
    enemy_type = get_enemy_type(type_id)
    if enemy_type is None:
        logger.warning(f"Unknown enemy type: {type_id}")
        return None
    return create_enemy_from_type(enemy_type, pos, agent_id)


def create_random_enemy(pos: Vec2, agent_id: int) -> Agent:
    """Build an enemy of a type drawn from the ``world.enemy_spawn`` stream."""
    enemy_type = _rng.choice(get_all_enemy_types())
    return create_enemy_from_type(enemy_type, pos, agent_id)
