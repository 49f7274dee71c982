"""
Navigation for enemy agents.

Package structure:
    obstacles     - Obstacle footprints, ObstacleCategory, boundary walls.
    grid          - NavigationGrid: walkability raster rebuilt on an interval.
    pathfinding   - PathPlanner: A* search with a short-lived path cache.
    service       - NavigationService: one grid + planner per world.
    steering      - Local obstacle avoidance and stuck detection.
    line_of_sight - Segment vs. footprint visibility queries.
"""

from .grid import NavigationGrid
from .line_of_sight import has_line_of_sight
from .obstacles import Obstacle, ObstacleCategory, create_boundary_walls
from .pathfinding import CachedPath, PathPlanner, PathSearchNode
from .service import NavigationConfig, NavigationService, NavigationStats
from .steering import (
    DEFAULT_AVOIDANCE,
    AvoidanceConfig,
    apply_obstacle_avoidance,
    calculate_avoidance_vector,
    detect_obstacles_ahead,
    is_stuck,
)

__all__ = [
    "DEFAULT_AVOIDANCE",
    "AvoidanceConfig",
    "CachedPath",
    "NavigationConfig",
    "NavigationGrid",
    "NavigationService",
    "NavigationStats",
    "Obstacle",
    "ObstacleCategory",
    "PathPlanner",
    "PathSearchNode",
    "apply_obstacle_avoidance",
    "calculate_avoidance_vector",
    "create_boundary_walls",
    "detect_obstacles_ahead",
    "has_line_of_sight",
    "is_stuck",
]
