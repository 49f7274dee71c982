"""Tactical behavior: hide behind cover, step out to shoot, duck back.

The agent picks the nearest cover obstacle and works out two points relative
to the threat:

- the *cover* point, on the far side of the obstacle from the threat, and
- the *peek* point, stepped sideways from the cover point so that the agent
  can see (and be seen by) the threat.

While the shot cooldown is running the agent sits at the cover point. Once
it expires the agent moves to the peek point, and fires the moment it has a
clear line of sight. Both points are recomputed every tick against the live
threat position, so the agent keeps the obstacle between itself and the
threat as the threat moves around.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, ClassVar

from tacnav import config
from tacnav.events import CoverChangedEvent
from tacnav.game.ai.behaviors.kind import BehaviorKind
from tacnav.game.ai.shooting import PERFECT_ACCURACY, fire_at
from tacnav.navigation.obstacles import Obstacle
from tacnav.navigation.steering import AvoidanceConfig, apply_obstacle_avoidance
from tacnav.types import Vec2
from tacnav.util import rng, vectors

if TYPE_CHECKING:
    from tacnav.game.agent import Agent
    from tacnav.game.world import GameWorld

logger = logging.getLogger(__name__)

_rng = rng.get("ai.shooting")

TACTICAL_AVOIDANCE = AvoidanceConfig(
    look_ahead_distance=config.TACTICAL_AVOIDANCE_LOOK_AHEAD,
    avoidance_radius=config.TACTICAL_AVOIDANCE_RADIUS,
    avoidance_force=config.TACTICAL_AVOIDANCE_FORCE,
)


class TacticalPhase(Enum):
    NO_COVER = auto()  # Nothing to hide behind; holding position
    COVERING = auto()  # Waiting out the cooldown behind cover
    PEEKING = auto()  # Cooldown ready; stepping out to shoot


@dataclass(slots=True)
class CoverState:
    """Mutable per-agent cover bookkeeping, updated every tick."""

    cover: Obstacle | None = None
    cooldown_ms: float = 0.0
    move_speed: float = config.TACTICAL_SPEED
    cover_distance: float = config.TACTICAL_COVER_DISTANCE
    peek_distance: float = config.TACTICAL_PEEK_DISTANCE
    shoot_cooldown_ms: float = config.TACTICAL_SHOOT_COOLDOWN_MS

    @property
    def phase(self) -> TacticalPhase:
        if self.cover is None:
            return TacticalPhase.NO_COVER
        if self.cooldown_ms > 0:
            return TacticalPhase.COVERING
        return TacticalPhase.PEEKING


def cover_position(obstacle: Obstacle, threat: Vec2, cover_distance: float) -> Vec2:
    """Point behind ``obstacle`` on the line from ``threat`` through its center."""
    away = vectors.normalize(vectors.sub(obstacle.center, threat))
    return vectors.add(
        obstacle.center, vectors.scale(away, obstacle.width / 2 + cover_distance)
    )


def peek_position(
    obstacle: Obstacle,
    threat: Vec2,
    cover_distance: float,
    peek_distance: float,
) -> Vec2:
    """Point stepped sideways from the cover point, out past the obstacle edge.

    The side is always the +90 degree perpendicular of the threat-to-obstacle
    direction, so the agent peeks out from the same side every time.
    """
    away = vectors.normalize(vectors.sub(obstacle.center, threat))
    side = vectors.perpendicular(away)
    base = cover_position(obstacle, threat, cover_distance)
    return vectors.add(base, vectors.scale(side, obstacle.width / 2 + peek_distance))


def select_cover(agent_pos: Vec2, candidates: Iterable[Obstacle]) -> Obstacle | None:
    """Nearest cover obstacle to the agent; the first one found wins ties."""
    best: Obstacle | None = None
    best_distance = float("inf")
    for obstacle in candidates:
        if not obstacle.is_cover:
            continue
        distance = vectors.distance(agent_pos, obstacle.center)
        if distance < best_distance:
            best = obstacle
            best_distance = distance
    return best


class TacticalBehavior:
    """Cover-and-peek shooter.

    Cover is only re-selected when the agent has none or has strayed more
    than ``reevaluate_distance`` from it (or the obstacle no longer exists),
    which keeps the agent from flip-flopping between two similar obstacles.
    """

    kind: ClassVar[BehaviorKind] = BehaviorKind.TACTICAL

    def __init__(
        self,
        move_speed: float = config.TACTICAL_SPEED,
        shoot_cooldown_ms: float = config.TACTICAL_SHOOT_COOLDOWN_MS,
        *,
        cover_distance: float = config.TACTICAL_COVER_DISTANCE,
        peek_distance: float = config.TACTICAL_PEEK_DISTANCE,
        reevaluate_distance: float = config.TACTICAL_COVER_REEVALUATE_DISTANCE,
        move_deadzone: float = config.TACTICAL_MOVE_DEADZONE,
        direct_move_range: float = config.TACTICAL_DIRECT_MOVE_RANGE,
        cooldown_jitter: tuple[float, float] = config.TACTICAL_COOLDOWN_JITTER,
        avoidance: AvoidanceConfig = TACTICAL_AVOIDANCE,
        projectile_speed: float = config.ENEMY_PROJECTILE_SPEED,
    ) -> None:
        if move_speed < 0:
            raise ValueError(f"move_speed must be non-negative, got {move_speed}")
        if shoot_cooldown_ms <= 0:
            raise ValueError(
                f"shoot_cooldown_ms must be positive, got {shoot_cooldown_ms}"
            )
        low, high = cooldown_jitter
        if not 0 < low <= high:
            raise ValueError(f"Invalid cooldown_jitter range {cooldown_jitter}")

        self.state = CoverState(
            move_speed=move_speed,
            cover_distance=cover_distance,
            peek_distance=peek_distance,
            shoot_cooldown_ms=shoot_cooldown_ms,
        )
        self.reevaluate_distance = reevaluate_distance
        self.move_deadzone = move_deadzone
        self.direct_move_range = direct_move_range
        self.cooldown_jitter = cooldown_jitter
        self.avoidance = avoidance
        self.projectile_speed = projectile_speed

    @property
    def phase(self) -> TacticalPhase:
        return self.state.phase

    def update(self, agent: Agent, world: GameWorld, delta_ms: float) -> None:
        threat = world.threat_position
        if threat is None:
            agent.vel = vectors.ZERO
            return

        if self.state.cooldown_ms > 0:
            self.state.cooldown_ms -= delta_ms

        self._update_cover(agent, world)

        target = self.target_position(threat)
        if target is None:
            agent.vel = vectors.ZERO
        else:
            agent.vel = self._steer_toward(agent, target, world)

        self._try_shoot(agent, threat, world)

    def target_position(self, threat: Vec2) -> Vec2 | None:
        """Where the agent wants to be right now, or None without cover."""
        state = self.state
        if state.cover is None:
            return None
        if state.cooldown_ms <= 0:
            return peek_position(
                state.cover, threat, state.cover_distance, state.peek_distance
            )
        return cover_position(state.cover, threat, state.cover_distance)

    def _update_cover(self, agent: Agent, world: GameWorld) -> None:
        current = self.state.cover
        if (
            current is not None
            and vectors.distance(agent.pos, current.center) <= self.reevaluate_distance
            and current in world.get_obstacles()
        ):
            return

        chosen = select_cover(agent.pos, world.cover_obstacles())
        if chosen != current:
            logger.debug(
                f"Agent {agent.agent_id} switched cover {current} -> {chosen}"
            )
            self.state.cover = chosen
            world.events.publish(
                CoverChangedEvent(
                    agent_id=agent.agent_id, previous=current, current=chosen
                )
            )

    def _steer_toward(self, agent: Agent, target: Vec2, world: GameWorld) -> Vec2:
        offset = vectors.sub(target, agent.pos)
        distance = vectors.length(offset)
        if distance < self.move_deadzone:
            return vectors.ZERO

        direction = vectors.normalize(offset)
        if distance > self.direct_move_range:
            path_direction = world.nav.get_direction_to_goal(agent.pos, target)
            if not vectors.is_zero(path_direction):
                direction = path_direction

        desired = vectors.scale(direction, self.state.move_speed)
        return apply_obstacle_avoidance(
            agent.pos, desired, world.get_obstacles(), self.avoidance
        )

    def _try_shoot(self, agent: Agent, threat: Vec2, world: GameWorld) -> None:
        if self.state.cooldown_ms > 0:
            return
        if not world.has_line_of_sight(agent.pos, threat):
            return

        fire_at(
            agent,
            threat,
            world,
            projectile_speed=self.projectile_speed,
            accuracy=PERFECT_ACCURACY,
        )
        low, high = self.cooldown_jitter
        self.state.cooldown_ms = self.state.shoot_cooldown_ms * _rng.uniform(low, high)
