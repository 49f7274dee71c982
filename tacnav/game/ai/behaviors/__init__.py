"""Enemy behaviors.

Every behavior exposes the same entry point, ``update(agent, world,
delta_ms)``, called once per tick. It reads the agent's position and the
world, writes ``agent.vel``, and may publish events (shots, cover changes).
``kind`` tags each variant so callers can branch without isinstance chains.
"""

from typing import TypeAlias

from .chase import ChaseBehavior
from .kind import BehaviorKind
from .patrol import PatrolBehavior
from .stationary import StationaryBehavior
from .tactical import CoverState, TacticalBehavior, TacticalPhase

Behavior: TypeAlias = StationaryBehavior | PatrolBehavior | ChaseBehavior | TacticalBehavior


__all__ = [
    "Behavior",
    "BehaviorKind",
    "ChaseBehavior",
    "CoverState",
    "PatrolBehavior",
    "StationaryBehavior",
    "TacticalBehavior",
    "TacticalPhase",
]
