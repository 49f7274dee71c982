"""Per-world navigation: one grid, one path planner, one optional lock.

A ``NavigationService`` is created by the world that owns the obstacles and
handed to behaviors by reference. There is no module-level navigation state,
so several worlds (or test fixtures) can coexist without sharing caches.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass

from tacnav import config
from tacnav.navigation.grid import REBUILD_METRIC, NavigationGrid
from tacnav.navigation.obstacles import Obstacle
from tacnav.navigation.pathfinding import SEARCH_METRIC, PathPlanner
from tacnav.types import Milliseconds, Vec2
from tacnav.util.live_vars import live_variable_registry

logger = logging.getLogger(__name__)

NAVIGATION_METRICS = [SEARCH_METRIC, REBUILD_METRIC]


def register_navigation_metrics() -> None:
    """Register the navigation timing metrics. Safe to call repeatedly."""
    live_variable_registry.register_metrics(NAVIGATION_METRICS)


@dataclass(frozen=True, slots=True)
class NavigationConfig:
    """Tunables for one NavigationService. Defaults come from ``config``."""

    cell_size: float = config.NAV_CELL_SIZE
    padding: float = config.NAV_OBSTACLE_PADDING
    rebuild_interval_ms: Milliseconds = config.NAV_GRID_REBUILD_INTERVAL_MS
    cache_timeout_ms: Milliseconds = config.PATH_CACHE_TIMEOUT_MS
    cache_distance_threshold: float = config.PATH_CACHE_DISTANCE_THRESHOLD
    cache_capacity: int = config.PATH_CACHE_CAPACITY
    nearest_walkable_radius: int = config.NAV_NEAREST_WALKABLE_RADIUS


@dataclass(frozen=True, slots=True)
class NavigationStats:
    """Point-in-time counters for one NavigationService.

    Counters are per service. The timing percentiles come from the process
    wide metric windows, so they mix every world that recorded into them.
    """

    searches_run: int
    cached_paths: int
    cache_hits: int
    cache_misses: int
    grid_builds: int
    walkable_fraction: float
    search_ms_p50: float
    search_ms_p95: float
    rebuild_ms_p50: float

    @property
    def cache_hit_rate(self) -> float:
        lookups = self.cache_hits + self.cache_misses
        return self.cache_hits / lookups if lookups else 0.0


class NavigationService:
    """Owns the NavigationGrid and PathPlanner for a single world.

    Args:
        world_width: World width in pixels.
        world_height: World height in pixels.
        obstacle_source: Returns every static obstacle. Called only when the
            grid is (re)built.
        clock: Returns the current simulation time in milliseconds.
        config: Optional tunables; module defaults otherwise.
        thread_safe: When True, queries and rebuilds are serialized through
            one re-entrant lock. The default is single-threaded use with no
            locking at all.
    """

    def __init__(
        self,
        world_width: float,
        world_height: float,
        obstacle_source: Callable[[], Iterable[Obstacle]],
        clock: Callable[[], Milliseconds],
        config: NavigationConfig | None = None,
        *,
        thread_safe: bool = False,
    ) -> None:
        self.config = config or NavigationConfig()
        self._obstacle_source = obstacle_source
        self._clock = clock
        self._lock: threading.RLock | None = (
            threading.RLock() if thread_safe else None
        )

        register_navigation_metrics()

        self._grid = NavigationGrid(
            world_width,
            world_height,
            cell_size=self.config.cell_size,
            padding=self.config.padding,
            rebuild_interval_ms=self.config.rebuild_interval_ms,
        )
        self._planner = PathPlanner(
            self._grid,
            self._obstacle_snapshot,
            clock,
            cache_timeout_ms=self.config.cache_timeout_ms,
            cache_distance_threshold=self.config.cache_distance_threshold,
            cache_capacity=self.config.cache_capacity,
            nearest_walkable_radius=self.config.nearest_walkable_radius,
        )

    @property
    def grid(self) -> NavigationGrid:
        return self._grid

    @property
    def planner(self) -> PathPlanner:
        return self._planner

    @property
    def thread_safe(self) -> bool:
        return self._lock is not None

    def _guard(self) -> AbstractContextManager:
        return self._lock if self._lock is not None else nullcontext()

    def _obstacle_snapshot(self) -> tuple[Obstacle, ...]:
        return tuple(self._obstacle_source())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_path(self, start: Vec2, goal: Vec2) -> list[Vec2]:
        """Waypoints from ``start`` to ``goal``; ``[]`` when unreachable."""
        with self._guard():
            return self._planner.find_path(start, goal)

    def get_direction_to_goal(
        self, agent_pos: Vec2, goal: Vec2, look_ahead: int = 1
    ) -> Vec2:
        """Unit travel direction along the path, or ``(0, 0)`` if none."""
        with self._guard():
            return self._planner.get_direction_to_goal(agent_pos, goal, look_ahead)

    def find_nearest_walkable(self, pos: Vec2) -> Vec2 | None:
        """Center of the closest walkable cell to ``pos``, if any is in range."""
        with self._guard():
            self._grid.ensure_fresh(self._obstacle_snapshot, self._clock())
            cell = self._grid.world_to_cell(pos)
            if self._grid.is_walkable(*cell):
                return self._grid.cell_to_world(*cell)
            nearest = self._planner.find_nearest_walkable(*cell)
            if nearest is None:
                return None
            return self._grid.cell_to_world(*nearest)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def rebuild_grid(self, force: bool = False) -> bool:
        """Rebuild the grid if stale, or unconditionally when ``force`` is set.

        A forced rebuild also drops every cached path.

        Returns:
            True if the grid was rebuilt.
        """
        with self._guard():
            now = self._clock()
            if not force:
                return self._grid.ensure_fresh(self._obstacle_snapshot, now)

            self._grid.rebuild(self._obstacle_snapshot(), now)
            logger.debug(
                f"Forced navigation rebuild at {now:.0f}ms, dropping "
                f"{len(self._planner.cache)} cached paths ({self._planner.cache.stats})"
            )
            self._planner.clear_cache()
            return True

    def clear_cache(self) -> None:
        with self._guard():
            self._planner.clear_cache()

    def stats(self) -> NavigationStats:
        """Snapshot of search, cache and grid counters plus timing percentiles."""
        with self._guard():
            cache = self._planner.cache
            search_p50, search_p95, _ = _percentiles(SEARCH_METRIC.name)
            rebuild_p50, _, _ = _percentiles(REBUILD_METRIC.name)
            return NavigationStats(
                searches_run=self._planner.searches_run,
                cached_paths=len(cache),
                cache_hits=cache.stats.hits,
                cache_misses=cache.stats.misses,
                grid_builds=self._grid.build_count,
                walkable_fraction=self._grid.walkable_fraction(),
                search_ms_p50=search_p50,
                search_ms_p95=search_p95,
                rebuild_ms_p50=rebuild_p50,
            )

    def __repr__(self) -> str:
        stats = self._planner.cache.stats
        return (
            f"<{self.__class__.__name__} grid={self._grid!r} "
            f"searches={self._planner.searches_run} "
            f"cached_paths={len(self._planner.cache)} "
            f"hit_rate={stats.hit_rate:.1f}%>"
        )


def _percentiles(metric_name: str) -> tuple[float, float, float]:
    samples = live_variable_registry.samples(metric_name)
    if samples is None:
        return (0.0, 0.0, 0.0)
    return samples.percentiles()
