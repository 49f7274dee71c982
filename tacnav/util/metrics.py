"""Rolling sample windows backing the navigation timing metrics."""

from typing import TypeAlias

import numpy as np

Percentiles: TypeAlias = tuple[float, float, float]


class RollingSamples:
    """The most recent ``capacity`` samples of one metric, in a numpy ring.

    Percentiles cover only what the window holds, so a long-running world
    reports its recent A* and rebuild cost rather than a lifetime average.
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.total_recorded = 0
        self._ring = np.zeros(capacity, dtype=np.float64)
        self._next = 0

    def record(self, value: float) -> None:
        self._ring[self._next] = value
        self._next = (self._next + 1) % self.capacity
        self.total_recorded += 1

    @property
    def sample_count(self) -> int:
        return min(self.total_recorded, self.capacity)

    def values(self) -> np.ndarray:
        """Samples currently in the window, oldest first."""
        if self.total_recorded <= self.capacity:
            return self._ring[: self.total_recorded]
        return np.roll(self._ring, -self._next)

    def percentiles(self) -> Percentiles:
        """``(p50, p95, p99)`` of the window; zeros while it is empty."""
        window = self.values()
        if window.size == 0:
            return (0.0, 0.0, 0.0)
        p50, p95, p99 = np.percentile(window, [50, 95, 99])
        return (float(p50), float(p95), float(p99))

    def summary(self) -> str:
        if self.sample_count == 0:
            return "No samples"
        p50, p95, p99 = self.percentiles()
        return f"p50={p50:.2f} p95={p95:.2f} p99={p99:.2f}"
