"""
Configuration constants.

Centralizes the tunables used by navigation, steering and the enemy AI.
Organized by functional area. Per-instance overrides go through the frozen
config dataclasses (NavigationConfig, AvoidanceConfig) and behavior
constructor arguments, which take their defaults from here.
"""

import math

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = None
RANDOM_SEED = "neon-arcade"


# =============================================================================
# WORLD
# =============================================================================

# World dimensions in pixels
WORLD_WIDTH = 800
WORLD_HEIGHT = 800

# Footprint of a regular (cover) obstacle. Anything else is a wall when
# categories are inferred from size.
STANDARD_OBSTACLE_SIZE = 64

# Thickness of the boundary walls around the arena
BOUNDARY_WALL_THICKNESS = 10

# =============================================================================
# NAVIGATION
# =============================================================================

NAV_CELL_SIZE = 16  # 16x16 pixel cells (20x20 grid for a 320x320 world)
NAV_OBSTACLE_PADDING = 8  # Extra margin around obstacles, in pixels
NAV_GRID_REBUILD_INTERVAL_MS = 500.0

# Path cache
PATH_CACHE_TIMEOUT_MS = 200.0
PATH_CACHE_DISTANCE_THRESHOLD = 20.0  # Invalidate if start/goal moved this far
PATH_CACHE_CAPACITY = 50

# Spiral search radius (in cells) when an endpoint lands on a blocked cell
NAV_NEAREST_WALKABLE_RADIUS = 5

# =============================================================================
# STEERING
# =============================================================================

AVOIDANCE_LOOK_AHEAD_DISTANCE = 60.0
AVOIDANCE_RADIUS = 50.0
AVOIDANCE_FORCE = 0.4  # 40% avoidance, 60% desired movement
AVOIDANCE_MAX_ANGLE = math.pi / 3  # 60 degrees max deviation

# Obstacles this close (as a fraction of the radius) are flagged even when
# they are behind the direction of travel.
AVOIDANCE_CLOSE_RANGE_FRACTION = 0.6

# Stuck detection
STUCK_MIN_SPEED = 5.0
STUCK_THRESHOLD_MS = 1000.0

# =============================================================================
# ENEMIES
# =============================================================================

ENEMY_BASE_SPEED = 50.0  # pixels per second
ENEMY_SHOOT_COOLDOWN_MS = 800.0
ENEMY_PROJECTILE_SPEED = 150.0
ENEMY_BASE_ACCURACY = 0.8  # 0.0 to 1.0
ENEMY_SPREAD_ANGLE = 0.15  # radians

# Patrol
PATROL_SPEED = 50.0
PATROL_SHOOT_COOLDOWN_MS = 1200.0
PATROL_RANGE = 100.0
PATROL_RANGE_JITTER = 50.0  # Waypoints land 100-150 px from the start
PATROL_WAYPOINT_REACHED_DISTANCE = 20.0
PATROL_DIRECTION_CHANGE_INTERVAL_MS = 3000.0
PATROL_BOUNDS_MARGIN = 20.0
PATROL_AVOIDANCE_LOOK_AHEAD = 50.0
PATROL_AVOIDANCE_RADIUS = 45.0
PATROL_AVOIDANCE_FORCE = 0.6  # Stronger avoidance for patrol enemies
PATROL_AVOIDANCE_MAX_ANGLE = math.pi / 2

# Chase
CHASE_SPEED = 40.0
CHASE_SHOOT_COOLDOWN_MS = 1600.0
CHASE_MIN_DISTANCE = 50.0  # Don't get closer than this

# Fast shooter
FAST_SPEED = 75.0
FAST_SHOOT_COOLDOWN_MS = 560.0
FAST_PROJECTILE_SPEED = 180.0

# =============================================================================
# TACTICAL (cover / peek)
# =============================================================================

TACTICAL_SPEED = 200.0
TACTICAL_SHOOT_COOLDOWN_MS = 800.0
TACTICAL_COVER_DISTANCE = 40.0  # Distance behind the obstacle's far edge
TACTICAL_PEEK_DISTANCE = 50.0  # Sideways offset for peeking
TACTICAL_COVER_REEVALUATE_DISTANCE = 200.0
TACTICAL_MOVE_DEADZONE = 5.0
TACTICAL_DIRECT_MOVE_RANGE = 100.0  # Beyond this, use the path planner
TACTICAL_COOLDOWN_JITTER = (0.8, 1.2)
TACTICAL_AVOIDANCE_LOOK_AHEAD = 50.0
TACTICAL_AVOIDANCE_RADIUS = 35.0
TACTICAL_AVOIDANCE_FORCE = 0.5
