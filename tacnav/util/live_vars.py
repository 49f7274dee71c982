"""Named runtime values for inspecting the navigation core.

One registry holds two kinds of entries:

* plain variables read through a getter, such as the path cache's hit and
  miss summary, and
* metrics, which keep a ``RollingSamples`` window of timings.

Metrics are declared as ``MetricSpec`` constants next to the code that
records them and registered in batch. Registering an already known spec is
a no-op, so every grid and planner can declare the metrics it records
without coordinating with other worlds.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Any, NamedTuple

from .metrics import RollingSamples


class MetricSpec(NamedTuple):
    """Declaration of one timing metric."""

    name: str
    description: str
    num_samples: int = 100


@dataclass
class LiveVariable:
    """A named value; ``samples`` is only set for metrics."""

    name: str
    description: str
    getter: Callable[[], Any]
    samples: RollingSamples | None = None

    def get_value(self) -> Any:
        return self.getter()


class LiveVariableRegistry:
    def __init__(self) -> None:
        self._variables: dict[str, LiveVariable] = {}

    def register(
        self,
        name: str,
        getter: Callable[[], Any],
        *,
        description: str = "",
    ) -> LiveVariable:
        if name in self._variables:
            raise ValueError(f"Live variable '{name}' already registered")
        variable = LiveVariable(name=name, description=description, getter=getter)
        self._variables[name] = variable
        return variable

    def register_metrics(self, specs: Sequence[MetricSpec]) -> None:
        """Register every spec in ``specs`` that is not registered yet."""
        for spec in specs:
            if spec.name in self._variables:
                continue
            samples = RollingSamples(spec.num_samples)
            self._variables[spec.name] = LiveVariable(
                name=spec.name,
                description=spec.description,
                getter=samples.summary,
                samples=samples,
            )

    def get_variable(self, name: str) -> LiveVariable | None:
        return self._variables.get(name)

    def samples(self, name: str) -> RollingSamples | None:
        """Sample window of the metric ``name``, or None if it is unknown."""
        variable = self._variables.get(name)
        return variable.samples if variable is not None else None

    def record_metric(self, name: str, value: float) -> None:
        """Add one sample to a registered metric.

        Raises:
            KeyError: ``name`` is not registered, or is a plain variable.
        """
        samples = self.samples(name)
        if samples is None:
            raise KeyError(f"'{name}' is not a registered metric")
        samples.record(value)


# Shared by every world in the process
live_variable_registry = LiveVariableRegistry()


@contextmanager
def record_time_live_variable(metric_name: str) -> Iterator[None]:
    """Time the block in wall-clock milliseconds and record it to a metric."""
    start = perf_counter()
    try:
        yield
    finally:
        live_variable_registry.record_metric(
            metric_name, (perf_counter() - start) * 1000
        )
