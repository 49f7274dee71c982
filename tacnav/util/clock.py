"""Simulated time for tick-driven updates."""

from collections import deque

from tacnav.types import Milliseconds

# Number of tick durations to keep for averaging.
_TICK_SAMPLE_SIZE = 256


class SimulationClock:
    """Track simulated time in milliseconds, advanced once per tick.

    Navigation timing (grid rebuild interval, path cache timeout) reads
    ``now_ms`` so that a simulation behaves identically regardless of how
    fast the host actually runs it.
    """

    def __init__(self, start_ms: Milliseconds = 0.0) -> None:
        self._now_ms: Milliseconds = start_ms
        self.tick_count = 0
        self.last_delta_ms: Milliseconds = 0.0
        self.delta_samples: deque[float] = deque(maxlen=_TICK_SAMPLE_SIZE)

    def now_ms(self) -> Milliseconds:
        """Current simulated time."""
        return self._now_ms

    def advance(self, delta_ms: Milliseconds) -> Milliseconds:
        """Move time forward by ``delta_ms`` and return the new time."""
        if delta_ms < 0:
            raise ValueError(f"Cannot advance clock by negative delta {delta_ms}")
        self._now_ms += delta_ms
        self.last_delta_ms = delta_ms
        self.delta_samples.append(delta_ms)
        self.tick_count += 1
        return self._now_ms

    @property
    def mean_tick_ms(self) -> float:
        """Average tick duration over the sampled ticks."""
        if not self.delta_samples:
            return 0.0
        return sum(self.delta_samples) / len(self.delta_samples)
