from enum import Enum, auto


class BehaviorKind(Enum):
    """Tag identifying which behavior variant drives an agent."""

    STATIONARY = auto()
    PATROL = auto()
    CHASE = auto()
    TACTICAL = auto()
