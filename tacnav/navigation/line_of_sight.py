"""Line-of-sight queries against static obstacle footprints."""

from __future__ import annotations

from collections.abc import Iterable

from tacnav.navigation.obstacles import Obstacle
from tacnav.types import Vec2


def segment_intersects_obstacle(start: Vec2, end: Vec2, obstacle: Obstacle) -> bool:
    """Slab test: does the segment ``start -> end`` touch the footprint?

    Clips the segment's parameter range ``[0, 1]`` against the obstacle's X
    and Y slabs in turn; the segment hits the box if anything is left.
    """
    t_min = 0.0
    t_max = 1.0
    for origin, delta, low, high in (
        (start[0], end[0] - start[0], obstacle.left, obstacle.right),
        (start[1], end[1] - start[1], obstacle.top, obstacle.bottom),
    ):
        if delta == 0:
            # Parallel to this slab: either always inside it or never.
            if origin < low or origin > high:
                return False
            continue
        t1 = (low - origin) / delta
        t2 = (high - origin) / delta
        if t1 > t2:
            t1, t2 = t2, t1
        t_min = max(t_min, t1)
        t_max = min(t_max, t2)
        if t_min > t_max:
            return False
    return True


def has_line_of_sight(start: Vec2, end: Vec2, obstacles: Iterable[Obstacle]) -> bool:
    """True when no obstacle footprint crosses the straight segment."""
    return not any(
        segment_intersects_obstacle(start, end, obstacle) for obstacle in obstacles
    )
