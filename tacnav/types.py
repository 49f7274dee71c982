from __future__ import annotations

from typing import TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

PixelCoord: TypeAlias = float  # World positions are continuous, in pixels

# A continuous 2D vector: world positions, velocities and directions.
Vec2: TypeAlias = tuple[float, float]  # Example: (160.0, 24.5)
WorldPos: TypeAlias = Vec2

# Navigation grid cell coordinates
GridCoord: TypeAlias = int
GridCell: TypeAlias = tuple[GridCoord, GridCoord]  # Example: (10, 3) = cell 10,3

# =============================================================================
# TIME-RELATED TYPES
# =============================================================================

# Simulation time and durations are tracked in milliseconds, velocities in
# pixels per second.
Milliseconds: TypeAlias = float

# =============================================================================
# MISC
# =============================================================================

RandomSeed: TypeAlias = int | str | None
