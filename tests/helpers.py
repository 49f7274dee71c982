from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from tacnav.events import GameEvent
from tacnav.game.world import GameWorld
from tacnav.navigation.grid import NavigationGrid
from tacnav.navigation.obstacles import Obstacle
from tacnav.navigation.pathfinding import PathPlanner
from tacnav.types import Vec2

EventType = TypeVar("EventType", bound=GameEvent)
from tacnav.util.clock import SimulationClock


def make_world(
    width: float = 320,
    height: float = 320,
    *,
    obstacles: Sequence[Obstacle] = (),
    player_pos: Vec2 | None = None,
) -> GameWorld:
    """A world with the given obstacles and, optionally, a player."""
    world = GameWorld(width, height)
    world.add_obstacles(obstacles)
    if player_pos is not None:
        world.spawn_player(player_pos)
    return world


def make_grid(
    width: float = 320,
    height: float = 320,
    obstacles: Sequence[Obstacle] = (),
    *,
    padding: float = 8,
) -> NavigationGrid:
    """A NavigationGrid already built from ``obstacles`` at time 0."""
    grid = NavigationGrid(width, height, cell_size=16, padding=padding)
    grid.rebuild(obstacles, now=0.0)
    return grid


def make_planner(
    width: float = 320,
    height: float = 320,
    obstacles: Sequence[Obstacle] = (),
) -> tuple[PathPlanner, SimulationClock, list[Obstacle]]:
    """A PathPlanner over a mutable obstacle list, driven by a manual clock.

    Returns the planner, its clock and the obstacle list it reads, so tests
    can move time forward and change the layout.
    """
    clock = SimulationClock()
    layout = list(obstacles)
    grid = NavigationGrid(width, height)
    planner = PathPlanner(grid, lambda: layout, clock.now_ms)
    return planner, clock, layout


class EventRecorder:
    """Collects every event of the subscribed types, in publish order."""

    def __init__(self, world: GameWorld, *event_types: type[GameEvent]) -> None:
        self.events: list[GameEvent] = []
        for event_type in event_types:
            world.events.subscribe(event_type, self.events.append)

    def of_type(
        self, event_type: type[EventType]
    ) -> list[EventType]:
        return [event for event in self.events if isinstance(event, event_type)]
