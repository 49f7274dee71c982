from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tacnav.types import Vec2
from tacnav.util import vectors

if TYPE_CHECKING:
    from tacnav.game.ai.behaviors import Behavior


@dataclass(eq=False)
class Agent:
    """Anything that moves around the world: enemies and the player.

    Behaviors read ``pos`` and write ``vel``; the world integrates one into
    the other each tick. The player is an agent without a behavior whose
    velocity is set by the host.
    """

    agent_id: int
    pos: Vec2
    vel: Vec2 = vectors.ZERO
    behavior: Behavior | None = None
    type_id: str | None = None  # Enemy type, for agents made by the factory

    @property
    def speed(self) -> float:
        return vectors.length(self.vel)

    def __repr__(self) -> str:
        kind = self.behavior.kind.name if self.behavior is not None else "none"
        return (
            f"<{self.__class__.__name__} #{self.agent_id} "
            f"pos=({self.pos[0]:.1f}, {self.pos[1]:.1f}) behavior={kind}>"
        )
