"""Walkability grid rasterized from static obstacle footprints.

The grid is a conservative map: a cell is blocked when any part of it
overlaps an obstacle rectangle grown by ``padding`` pixels on every side.
Cells are indexed ``walkable[x, y]``.

The grid is never edited cell-by-cell. ``rebuild()`` computes a complete new
array and swaps it in with a single assignment, so a reader always sees
either the previous grid or the new one, never a half-built one.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable

import numpy as np

from tacnav import config
from tacnav.navigation.obstacles import Obstacle
from tacnav.types import GridCell, Milliseconds, Vec2
from tacnav.util.live_vars import (
    MetricSpec,
    live_variable_registry,
    record_time_live_variable,
)

logger = logging.getLogger(__name__)

REBUILD_METRIC = MetricSpec(
    "nav.grid.rebuild_ms", "Wall-clock time of one grid rebuild"
)


class NavigationGrid:
    """Boolean walkability raster over a ``world_width x world_height`` world.

    Attributes:
        cell_size: Edge length of a square cell in pixels.
        padding: Safety margin added around every obstacle, in pixels.
        rebuild_interval_ms: Maximum grid age before ``ensure_fresh`` rebuilds.
        width: Number of cell columns.
        height: Number of cell rows.
        walkable: ``(width, height)`` bool array, or ``None`` until first built.
        last_build_time: Simulation time of the last rebuild, or ``None``.
        build_count: Number of rebuilds performed.
    """

    def __init__(
        self,
        world_width: float,
        world_height: float,
        cell_size: float = config.NAV_CELL_SIZE,
        padding: float = config.NAV_OBSTACLE_PADDING,
        rebuild_interval_ms: Milliseconds = config.NAV_GRID_REBUILD_INTERVAL_MS,
    ) -> None:
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        if world_width <= 0 or world_height <= 0:
            raise ValueError(
                f"World size must be positive, got {world_width}x{world_height}"
            )
        self.world_width = world_width
        self.world_height = world_height
        self.cell_size = cell_size
        self.padding = padding
        self.rebuild_interval_ms = rebuild_interval_ms

        self.width = math.ceil(world_width / cell_size)
        self.height = math.ceil(world_height / cell_size)

        self.walkable: np.ndarray | None = None
        self.last_build_time: Milliseconds | None = None
        self.build_count = 0

        live_variable_registry.register_metrics([REBUILD_METRIC])

    @property
    def is_built(self) -> bool:
        return self.walkable is not None

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def rebuild(self, obstacles: Iterable[Obstacle], now: Milliseconds) -> None:
        """Recompute the whole grid from ``obstacles`` and swap it in."""
        with record_time_live_variable(REBUILD_METRIC.name):
            walkable = np.ones((self.width, self.height), dtype=np.bool_)

            obstacle_count = 0
            for obstacle in obstacles:
                obstacle_count += 1
                cell_range = self._footprint_cells(obstacle)
                if cell_range is None:
                    continue
                min_x, max_x, min_y, max_y = cell_range
                walkable[min_x : max_x + 1, min_y : max_y + 1] = False

        self.walkable = walkable
        self.last_build_time = now
        self.build_count += 1
        logger.debug(
            f"Navigation grid rebuilt at {now:.0f}ms: {self.width}x{self.height} "
            f"cells, {obstacle_count} obstacles, "
            f"{self.walkable_fraction():.0%} walkable"
        )

    def ensure_fresh(
        self,
        get_obstacles: Callable[[], Iterable[Obstacle]],
        now: Milliseconds,
    ) -> bool:
        """Rebuild if the grid is missing or older than the rebuild interval.

        ``get_obstacles`` is only called when a rebuild is actually due.

        Returns:
            True if the grid was rebuilt.
        """
        if (
            self.walkable is not None
            and self.last_build_time is not None
            and now - self.last_build_time < self.rebuild_interval_ms
        ):
            return False
        self.rebuild(get_obstacles(), now)
        return True

    def _footprint_cells(self, obstacle: Obstacle) -> tuple[int, int, int, int] | None:
        """Inclusive cell range overlapped by the padded footprint, clipped.

        Returns None when the padded footprint lies entirely outside the grid.
        """
        cs = self.cell_size
        pad = self.padding
        # A cell [i*cs, (i+1)*cs) overlaps [lo, hi] when floor(lo/cs) <= i and
        # i <= ceil(hi/cs) - 1; cells that only touch an edge are left walkable.
        min_x = max(0, math.floor((obstacle.left - pad) / cs))
        max_x = min(self.width - 1, math.ceil((obstacle.right + pad) / cs) - 1)
        min_y = max(0, math.floor((obstacle.top - pad) / cs))
        max_y = min(self.height - 1, math.ceil((obstacle.bottom + pad) / cs) - 1)
        if min_x > max_x or min_y > max_y:
            return None
        return min_x, max_x, min_y, max_y

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def world_to_cell(self, pos: Vec2) -> GridCell:
        """Map a world position to the cell containing it (may be out of bounds)."""
        return (
            math.floor(pos[0] / self.cell_size),
            math.floor(pos[1] / self.cell_size),
        )

    def cell_to_world(self, cell_x: int, cell_y: int) -> Vec2:
        """Return the world position of the cell's center."""
        half = self.cell_size / 2
        return (cell_x * self.cell_size + half, cell_y * self.cell_size + half)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_walkable(self, x: int, y: int) -> bool:
        """True for in-bounds walkable cells. Fails closed otherwise."""
        if self.walkable is None or not self.in_bounds(x, y):
            return False
        return bool(self.walkable[x, y])

    def walkable_fraction(self) -> float:
        """Share of walkable cells, 0.0 when the grid is not built."""
        if self.walkable is None or self.walkable.size == 0:
            return 0.0
        return float(np.count_nonzero(self.walkable)) / self.walkable.size

    def __repr__(self) -> str:
        state = "built" if self.is_built else "unbuilt"
        return (
            f"<{self.__class__.__name__} {self.width}x{self.height} "
            f"cell_size={self.cell_size} {state}>"
        )
