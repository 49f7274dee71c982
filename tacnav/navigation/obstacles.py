"""Static obstacle footprints.

Obstacles are axis-aligned rectangles described by their center and size.
Every obstacle carries an explicit category: boundary walls block movement
and sight like any other obstacle, but only ``COVER`` obstacles are offered
to tactical agents as hiding spots.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from tacnav import config
from tacnav.types import Vec2


class ObstacleCategory(Enum):
    """What role an obstacle plays for the AI."""

    WALL = auto()  # Arena boundaries and other structural blockers
    COVER = auto()  # Regular obstacles agents may hide behind


@dataclass(frozen=True, slots=True)
class Obstacle:
    """An axis-aligned static obstacle.

    Attributes:
        x: Center X in world pixels.
        y: Center Y in world pixels.
        width: Footprint width in pixels.
        height: Footprint height in pixels.
        category: Explicit role tag, set at creation time.
    """

    x: float
    y: float
    width: float = config.STANDARD_OBSTACLE_SIZE
    height: float = config.STANDARD_OBSTACLE_SIZE
    category: ObstacleCategory = ObstacleCategory.COVER

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Obstacle size must be non-negative, got {self.width}x{self.height}"
            )

    @classmethod
    def infer(
        cls,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        standard_size: float = config.STANDARD_OBSTACLE_SIZE,
    ) -> Obstacle:
        """Build an obstacle whose category is inferred from its footprint.

        For hosts that only know sizes: a footprint that is not exactly the
        standard square is treated as a wall.
        """
        is_standard = width == standard_size and height == standard_size
        category = ObstacleCategory.COVER if is_standard else ObstacleCategory.WALL
        return cls(x, y, width, height, category)

    @property
    def center(self) -> Vec2:
        return (self.x, self.y)

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2

    @property
    def is_cover(self) -> bool:
        return self.category is ObstacleCategory.COVER

    def contains_point(self, point: Vec2, margin: float = 0.0) -> bool:
        """True if ``point`` lies inside the footprint expanded by ``margin``."""
        px, py = point
        return (
            self.left - margin <= px <= self.right + margin
            and self.top - margin <= py <= self.bottom + margin
        )


def create_boundary_walls(
    world_width: float,
    world_height: float,
    thickness: float = config.BOUNDARY_WALL_THICKNESS,
) -> list[Obstacle]:
    """Return the four walls lining the inside edge of the world."""
    half = thickness / 2
    wall = ObstacleCategory.WALL
    return [
        Obstacle(world_width / 2, half, world_width, thickness, wall),  # Top
        Obstacle(world_width / 2, world_height - half, world_width, thickness, wall),
        Obstacle(half, world_height / 2, thickness, world_height, wall),  # Left
        Obstacle(world_width - half, world_height / 2, thickness, world_height, wall),
    ]
