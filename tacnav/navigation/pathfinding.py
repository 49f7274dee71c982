"""A* path search for enemies, plus a short-lived path cache.

The search runs over the navigation grid's 8-connected cells. Straight steps
cost 1 and diagonal steps sqrt(2), guided by the octile distance. Among
equally promising cells the one discovered first is expanded first, so
identical queries always yield identical paths. A start or goal inside an
obstacle is first snapped to the nearest walkable cell within a few rings.

Results are cached per (start cell, goal cell). A hit is only reused while
it is younger than the cache timeout and the caller's start and goal are
still close to the points the search ran for. The cache evicts in insertion
order, and "no path" results are cached too so unreachable targets are not
searched again every frame.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeAlias

from tacnav import config
from tacnav.navigation.grid import NavigationGrid
from tacnav.navigation.obstacles import Obstacle
from tacnav.types import GridCell, Milliseconds, Vec2
from tacnav.util import vectors
from tacnav.util.caching import BoundedCache
from tacnav.util.live_vars import (
    MetricSpec,
    live_variable_registry,
    record_time_live_variable,
)

logger = logging.getLogger(__name__)

SEARCH_METRIC = MetricSpec("nav.astar.time_ms", "Wall-clock time of one A* search")

_SQRT2 = math.sqrt(2)

# 8-connected neighborhood, row by row from the top-left.
_NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)

PathCacheKey: TypeAlias = tuple[GridCell, GridCell]


@dataclass(slots=True)
class PathSearchNode:
    """A* bookkeeping for one grid cell during a single search."""

    x: int
    y: int
    g: float  # Cost from start
    h: float  # Heuristic cost to goal
    f: float  # g + h
    parent: PathSearchNode | None = None


@dataclass(frozen=True, slots=True)
class CachedPath:
    """A memoized search result.

    ``start`` and ``goal`` are the exact world points the search was run
    for, used to re-validate hits against the caller's live positions.
    An empty ``waypoints`` tuple records that no path was found.
    """

    start: Vec2
    goal: Vec2
    waypoints: tuple[Vec2, ...]
    timestamp: Milliseconds


def octile_distance(a: GridCell, b: GridCell) -> float:
    """Admissible, consistent heuristic for 8-way moves costing 1 and sqrt(2)."""
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return max(dx, dy) + (_SQRT2 - 1) * min(dx, dy)


class PathPlanner:
    """A* path search over a NavigationGrid, with a short-lived path cache.

    The planner keeps the grid fresh itself: every query first asks the grid
    to rebuild if it is older than its rebuild interval, pulling a snapshot
    from ``obstacle_source`` only when a rebuild is due.

    Results are world-space waypoints at cell centers, in start-to-goal
    order. An empty list means no path exists; nothing here raises for
    unreachable or blocked endpoints.
    """

    def __init__(
        self,
        grid: NavigationGrid,
        obstacle_source: Callable[[], Iterable[Obstacle]],
        clock: Callable[[], Milliseconds],
        *,
        cache_timeout_ms: Milliseconds = config.PATH_CACHE_TIMEOUT_MS,
        cache_distance_threshold: float = config.PATH_CACHE_DISTANCE_THRESHOLD,
        cache_capacity: int = config.PATH_CACHE_CAPACITY,
        nearest_walkable_radius: int = config.NAV_NEAREST_WALKABLE_RADIUS,
    ) -> None:
        self.grid = grid
        self._obstacle_source = obstacle_source
        self._clock = clock
        self.cache_timeout_ms = cache_timeout_ms
        self.cache_distance_threshold = cache_distance_threshold
        self.nearest_walkable_radius = nearest_walkable_radius
        # Paths expire quickly, so the oldest insertion is always the first
        # to go; hits don't extend an entry's life.
        self.cache: BoundedCache[PathCacheKey, CachedPath] = BoundedCache(
            "path", max_size=cache_capacity, refresh_on_hit=False
        )
        self.searches_run = 0

        live_variable_registry.register_metrics([SEARCH_METRIC])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def find_path(self, start: Vec2, goal: Vec2) -> list[Vec2]:
        """Return cell-center waypoints from ``start`` to ``goal``.

        Args:
            start: World position to start from.
            goal: World position to navigate to.

        Returns:
            Waypoints including the start and goal cells, ``[start_cell]``
            when both points share a cell, or ``[]`` if no path exists.
        """
        now = self._clock()
        self.grid.ensure_fresh(self._obstacle_source, now)
        if not self.grid.is_built:
            return []

        start_cell = self.grid.world_to_cell(start)
        goal_cell = self.grid.world_to_cell(goal)
        key: PathCacheKey = (start_cell, goal_cell)

        cached = self.cache.get(key)
        if cached is not None and self._is_cache_valid(cached, start, goal, now):
            return list(cached.waypoints)

        waypoints = self._search(start_cell, goal_cell)
        self.cache.store(
            key,
            CachedPath(
                start=start, goal=goal, waypoints=tuple(waypoints), timestamp=now
            ),
        )
        return waypoints

    def get_direction_to_goal(
        self, agent_pos: Vec2, goal: Vec2, look_ahead: int = 1
    ) -> Vec2:
        """Unit direction from ``agent_pos`` toward the next useful waypoint.

        Looks ``look_ahead`` waypoints down the path (waypoint 0 is the
        agent's own cell). If the agent is already within half a cell of that
        waypoint, steers for the one after it instead.

        Returns:
            A normalized direction, or the zero vector when there is no path
            or the agent sits exactly on the target waypoint. Callers treat
            zero as "arrived" or "fall back to direct movement".
        """
        path = self.find_path(agent_pos, goal)
        if not path:
            return vectors.ZERO

        target_index = min(max(look_ahead, 0), len(path) - 1)
        distance_to_waypoint = vectors.distance(agent_pos, path[target_index])
        if (
            distance_to_waypoint < self.grid.cell_size * 0.5
            and len(path) > target_index + 1
        ):
            target_index += 1

        direction = vectors.sub(path[target_index], agent_pos)
        if vectors.is_zero(direction):
            return vectors.ZERO
        return vectors.normalize(direction)

    def clear_cache(self) -> None:
        self.cache.clear()

    # ------------------------------------------------------------------
    # Cache validation
    # ------------------------------------------------------------------

    def _is_cache_valid(
        self,
        cached: CachedPath,
        start: Vec2,
        goal: Vec2,
        now: Milliseconds,
    ) -> bool:
        """Check a cache hit against the caller's live start and goal.

        Sharing a key only means sharing cells; the entry must also be young
        and recorded from nearby points. Non-empty paths are additionally
        rejected when the live start has wandered away from the first
        waypoint.
        """
        if now - cached.timestamp >= self.cache_timeout_ms:
            return False

        threshold = self.cache_distance_threshold
        if vectors.distance(cached.start, start) >= threshold:
            return False
        if vectors.distance(cached.goal, goal) >= threshold:
            return False

        if cached.waypoints:
            return vectors.distance(start, cached.waypoints[0]) <= threshold * 2
        return True

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _search(self, start_cell: GridCell, goal_cell: GridCell) -> list[Vec2]:
        """Resolve blocked endpoints, then run A*."""
        self.searches_run += 1

        resolved_start = self._resolve_endpoint(start_cell)
        resolved_goal = self._resolve_endpoint(goal_cell)
        if resolved_start is None or resolved_goal is None:
            logger.debug(
                f"No walkable cell near endpoint(s) {start_cell} -> {goal_cell}"
            )
            return []

        with record_time_live_variable(SEARCH_METRIC.name):
            cells = self._astar(resolved_start, resolved_goal)

        if not cells:
            logger.debug(f"No path found {resolved_start} -> {resolved_goal}")
            return []
        return [self.grid.cell_to_world(x, y) for x, y in cells]

    def _resolve_endpoint(self, cell: GridCell) -> GridCell | None:
        if self.grid.is_walkable(*cell):
            return cell
        return self.find_nearest_walkable(cell[0], cell[1])

    def find_nearest_walkable(
        self, x: int, y: int, max_radius: int | None = None
    ) -> GridCell | None:
        """Search outward ring by ring for the nearest walkable cell.

        Each ring is scanned column by column (left to right, top to bottom
        within a column), and the first walkable cell found wins.
        """
        if max_radius is None:
            max_radius = self.nearest_walkable_radius

        for radius in range(1, max_radius + 1):
            for dx in range(-radius, radius + 1):
                for dy in range(-radius, radius + 1):
                    if abs(dx) != radius and abs(dy) != radius:
                        continue  # Interior of the ring, already checked
                    if self.grid.is_walkable(x + dx, y + dy):
                        return (x + dx, y + dy)
        return None

    def _astar(self, start: GridCell, goal: GridCell) -> list[GridCell]:
        """A* over 8-connected cells; returns start..goal cells or ``[]``.

        The open set is a heap ordered by ``(f, insertion order)``, so among
        equal-f candidates the first one discovered is expanded first. Stale
        heap entries (superseded by a cheaper route) are skipped on pop.
        """
        grid = self.grid
        counter = itertools.count()

        start_h = octile_distance(start, goal)
        start_node = PathSearchNode(start[0], start[1], g=0.0, h=start_h, f=start_h)
        nodes: dict[GridCell, PathSearchNode] = {start: start_node}
        closed: set[GridCell] = set()
        open_heap: list[tuple[float, int, GridCell]] = [
            (start_node.f, next(counter), start)
        ]

        while open_heap:
            f, _, cell = heapq.heappop(open_heap)
            if cell in closed:
                continue
            current = nodes[cell]
            if f > current.f:
                continue  # Superseded entry
            closed.add(cell)

            if cell == goal:
                return _reconstruct_cells(current)

            for dx, dy in _NEIGHBOR_OFFSETS:
                nx = current.x + dx
                ny = current.y + dy
                neighbor_cell = (nx, ny)
                if neighbor_cell in closed or not grid.is_walkable(nx, ny):
                    continue

                step_cost = _SQRT2 if dx != 0 and dy != 0 else 1.0
                tentative_g = current.g + step_cost

                neighbor = nodes.get(neighbor_cell)
                if neighbor is None:
                    h = octile_distance(neighbor_cell, goal)
                    neighbor = PathSearchNode(
                        nx, ny, g=tentative_g, h=h, f=tentative_g + h, parent=current
                    )
                    nodes[neighbor_cell] = neighbor
                elif tentative_g < neighbor.g:
                    neighbor.g = tentative_g
                    neighbor.f = tentative_g + neighbor.h
                    neighbor.parent = current
                else:
                    continue

                heapq.heappush(open_heap, (neighbor.f, next(counter), neighbor_cell))

        return []


def _reconstruct_cells(node: PathSearchNode) -> list[GridCell]:
    """Walk parent links back to the start and return cells start-first."""
    cells: list[GridCell] = []
    current: PathSearchNode | None = node
    while current is not None:
        cells.append((current.x, current.y))
        current = current.parent
    cells.reverse()
    return cells
