"""A minimal simulation host for the enemy AI.

``GameWorld`` provides exactly what the behaviors need from a game engine:
the static obstacle list, a line-of-sight query, the threat (player)
position, a simulated clock, an event bus, and per-world navigation. It also
integrates agent velocities into positions so simulations can run headless.
Collision response, projectiles and damage belong to the real host.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from tacnav import config
from tacnav.events import EventBus
from tacnav.game.agent import Agent
from tacnav.navigation.line_of_sight import has_line_of_sight
from tacnav.navigation.obstacles import Obstacle, create_boundary_walls
from tacnav.navigation.service import NavigationConfig, NavigationService
from tacnav.types import Milliseconds, Vec2
from tacnav.util.clock import SimulationClock

logger = logging.getLogger(__name__)


class GameWorld:
    """Obstacles, agents and the player for one arena.

    Attributes:
        width: World width in pixels.
        height: World height in pixels.
        clock: Simulated time, advanced by ``tick``.
        events: Bus on which shots and cover changes are published.
        nav: Navigation service reading this world's obstacles.
        agents: Enemy agents by id, updated in insertion order.
        player: The agent enemies target, if any.
    """

    def __init__(
        self,
        width: float = config.WORLD_WIDTH,
        height: float = config.WORLD_HEIGHT,
        *,
        nav_config: NavigationConfig | None = None,
        thread_safe: bool = False,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"World size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.clock = SimulationClock()
        self.events = EventBus()
        self._obstacles: list[Obstacle] = []
        self.agents: dict[int, Agent] = {}
        self.player: Agent | None = None
        self._next_agent_id = 1

        self.nav = NavigationService(
            width,
            height,
            self.get_obstacles,
            self.clock.now_ms,
            nav_config,
            thread_safe=thread_safe,
        )

    # ------------------------------------------------------------------
    # Obstacles
    # ------------------------------------------------------------------

    def get_obstacles(self) -> tuple[Obstacle, ...]:
        """Snapshot of every static obstacle."""
        return tuple(self._obstacles)

    def cover_obstacles(self) -> list[Obstacle]:
        return [obstacle for obstacle in self._obstacles if obstacle.is_cover]

    def add_obstacle(self, obstacle: Obstacle) -> Obstacle:
        self._obstacles.append(obstacle)
        return obstacle

    def add_obstacles(self, obstacles: Iterable[Obstacle]) -> None:
        self._obstacles.extend(obstacles)

    def remove_obstacle(self, obstacle: Obstacle) -> bool:
        """Remove ``obstacle``; returns False if it was not in the world."""
        try:
            self._obstacles.remove(obstacle)
        except ValueError:
            return False
        return True

    def add_boundary_walls(
        self, thickness: float = config.BOUNDARY_WALL_THICKNESS
    ) -> list[Obstacle]:
        walls = create_boundary_walls(self.width, self.height, thickness)
        self.add_obstacles(walls)
        return walls

    def load_obstacles(self, obstacles: Iterable[Obstacle]) -> None:
        """Replace the whole obstacle layout and rebuild navigation now.

        Meant for level loads: paths cached against the previous layout are
        discarded instead of waiting for them to expire.
        """
        self._obstacles = list(obstacles)
        self.nav.rebuild_grid(force=True)
        logger.info(f"Loaded {len(self._obstacles)} obstacles")

    def has_line_of_sight(self, start: Vec2, end: Vec2) -> bool:
        return has_line_of_sight(start, end, self._obstacles)

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------

    def new_agent_id(self) -> int:
        agent_id = self._next_agent_id
        self._next_agent_id += 1
        return agent_id

    def add_agent(self, agent: Agent) -> Agent:
        if agent.agent_id in self.agents:
            raise ValueError(f"Agent id {agent.agent_id} is already in the world")
        self.agents[agent.agent_id] = agent
        self._next_agent_id = max(self._next_agent_id, agent.agent_id + 1)
        return agent

    def remove_agent(self, agent_id: int) -> Agent | None:
        return self.agents.pop(agent_id, None)

    def spawn_enemy(self, type_id: str, pos: Vec2) -> Agent | None:
        """Create an enemy of ``type_id`` with a fresh id and add it."""
        from tacnav.game.enemy_types import create_enemy

        agent = create_enemy(type_id, pos, self.new_agent_id())
        if agent is None:
            return None
        return self.add_agent(agent)

    def spawn_player(self, pos: Vec2) -> Agent:
        """Create the player agent (the threat every enemy targets)."""
        self.player = Agent(agent_id=0, pos=pos)
        return self.player

    @property
    def threat_position(self) -> Vec2 | None:
        return self.player.pos if self.player is not None else None

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self, delta_ms: Milliseconds) -> None:
        """Advance time, let every behavior steer, then move everything."""
        self.clock.advance(delta_ms)

        for agent in list(self.agents.values()):
            if agent.behavior is not None:
                agent.behavior.update(agent, self, delta_ms)

        seconds = delta_ms / 1000.0
        for agent in self._moving_agents():
            x = agent.pos[0] + agent.vel[0] * seconds
            y = agent.pos[1] + agent.vel[1] * seconds
            agent.pos = (
                max(0.0, min(self.width, x)),
                max(0.0, min(self.height, y)),
            )

    def _moving_agents(self) -> list[Agent]:
        agents = list(self.agents.values())
        if self.player is not None:
            agents.append(self.player)
        return agents

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} {self.width}x{self.height} "
            f"obstacles={len(self._obstacles)} agents={len(self.agents)}>"
        )
