"""Event system for notifying the host about AI decisions.

The navigation/AI core never creates projectiles or touches rendering. When
an agent fires or changes cover, it publishes an event on its world's
``EventBus`` and the host decides what to do with it (spawn a projectile,
play a sound, draw a muzzle flash).

The event bus is fire-and-forget: all handlers execute immediately
(synchronously) and their return values are ignored. A handler that raises is
logged and skipped so one faulty subscriber can't stall the simulation tick.
"""

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from tacnav.types import Vec2

logger = logging.getLogger(__name__)


@dataclass
class GameEvent:
    """Base class for all game events."""

    pass


@dataclass
class ShotFiredEvent(GameEvent):
    """An agent fired a projectile.

    Attributes:
        shooter_id: Id of the agent that fired.
        origin: Muzzle position (the shooter's position when firing).
        target: Point the projectile is aimed at, after accuracy spread.
        direction: Unit direction of travel.
        projectile_speed: Speed in pixels per second.
    """

    shooter_id: int
    origin: Vec2
    target: Vec2
    direction: Vec2
    projectile_speed: float


@dataclass
class CoverChangedEvent(GameEvent):
    """A tactical agent selected a different cover obstacle (or lost it)."""

    agent_id: int
    previous: Any  # Obstacle | None; avoids a circular import
    current: Any


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: GameEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        if event_type in self._handlers:
            # Copy the handler list to allow safe subscribe/unsubscribe during dispatch
            for handler in list(self._handlers[event_type]):
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error handling event {event_type.__name__}")
