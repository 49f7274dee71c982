from __future__ import annotations

import pytest

from tacnav.game.agent import Agent
from tacnav.game.ai.behaviors import BehaviorKind
from tacnav.game.world import GameWorld
from tacnav.navigation.obstacles import Obstacle, ObstacleCategory
from tests.helpers import make_world


def test_invalid_world_size_raises() -> None:
    with pytest.raises(ValueError, match="World size"):
        GameWorld(0, 100)


class TestObstacles:
    def test_obstacle_snapshot_is_immutable_copy(self) -> None:
        world = make_world()
        rock = world.add_obstacle(Obstacle(100, 100))
        snapshot = world.get_obstacles()
        world.add_obstacle(Obstacle(200, 200))

        assert snapshot == (rock,)
        assert len(world.get_obstacles()) == 2

    def test_remove_obstacle(self) -> None:
        rock = Obstacle(100, 100)
        world = make_world(obstacles=[rock])
        assert world.remove_obstacle(rock) is True
        assert world.remove_obstacle(rock) is False
        assert world.get_obstacles() == ()

    def test_boundary_walls_are_not_cover(self) -> None:
        world = make_world(obstacles=[Obstacle(160, 160)])
        walls = world.add_boundary_walls()

        assert len(walls) == 4
        assert all(w.category is ObstacleCategory.WALL for w in walls)
        assert world.cover_obstacles() == [Obstacle(160, 160)]
        assert len(world.get_obstacles()) == 5

    def test_load_obstacles_replaces_layout_and_rebuilds(self) -> None:
        world = make_world(obstacles=[Obstacle(40, 40)])
        world.nav.find_path((8, 300), (300, 300))
        builds_before = world.nav.grid.build_count

        world.load_obstacles([Obstacle(160, 160, 32, 32)])

        assert world.get_obstacles() == (Obstacle(160, 160, 32, 32),)
        assert world.nav.grid.build_count == builds_before + 1
        assert not world.nav.grid.is_walkable(10, 10)
        assert world.nav.grid.is_walkable(2, 2)
        assert len(world.nav.planner.cache) == 0

    def test_line_of_sight(self) -> None:
        world = make_world(obstacles=[Obstacle(160, 160, 32, 32)])
        assert not world.has_line_of_sight((40, 160), (280, 160))
        assert world.has_line_of_sight((40, 40), (280, 40))


class TestAgents:
    def test_add_and_remove_agent(self) -> None:
        world = make_world()
        agent = world.add_agent(Agent(agent_id=world.new_agent_id(), pos=(10, 10)))

        assert world.agents == {agent.agent_id: agent}
        assert world.remove_agent(agent.agent_id) is agent
        assert world.remove_agent(agent.agent_id) is None

    def test_duplicate_agent_id_raises(self) -> None:
        world = make_world()
        world.add_agent(Agent(agent_id=5, pos=(10, 10)))
        with pytest.raises(ValueError, match="already in the world"):
            world.add_agent(Agent(agent_id=5, pos=(20, 20)))
        assert world.new_agent_id() == 6

    def test_spawn_enemy(self) -> None:
        world = make_world()
        enemy = world.spawn_enemy("chase_shooter", (50, 50))

        assert enemy is not None
        assert enemy.type_id == "chase_shooter"
        assert enemy.behavior is not None
        assert enemy.behavior.kind is BehaviorKind.CHASE
        assert world.agents[enemy.agent_id] is enemy

    def test_spawn_unknown_enemy_adds_nothing(self) -> None:
        world = make_world()
        assert world.spawn_enemy("boss_dragon", (50, 50)) is None
        assert world.agents == {}

    def test_threat_position_follows_player(self) -> None:
        world = make_world()
        assert world.threat_position is None
        world.spawn_player((100, 120))
        assert world.threat_position == (100, 120)


class TestTick:
    def test_tick_advances_clock(self) -> None:
        world = make_world()
        world.tick(16)
        world.tick(16)
        assert world.clock.now_ms() == 32
        assert world.clock.tick_count == 2

    def test_tick_integrates_velocity(self) -> None:
        world = make_world()
        agent = world.add_agent(Agent(agent_id=1, pos=(100, 100), vel=(50, -20)))
        world.tick(100)
        assert agent.pos == pytest.approx((105, 98))

    def test_positions_are_clamped_to_world(self) -> None:
        world = make_world()
        agent = world.add_agent(Agent(agent_id=1, pos=(310, 5), vel=(500, -500)))
        world.tick(100)
        assert agent.pos == (320, 0)

    def test_player_moves_with_its_velocity(self) -> None:
        world = make_world(player_pos=(100, 100))
        assert world.player is not None
        world.player.vel = (100, 0)
        world.tick(500)
        assert world.player.pos == pytest.approx((150, 100))

    def test_behaviors_run_before_integration(self) -> None:
        world = make_world(player_pos=(300, 40))
        enemy = world.spawn_enemy("chase_shooter", (40, 40))
        assert enemy is not None

        world.tick(1000)

        # Chase speed is 40 px/s along the open top row.
        assert enemy.vel == pytest.approx((40.0, 0.0))
        assert enemy.pos == pytest.approx((80.0, 40.0))
