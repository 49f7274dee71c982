from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from .live_vars import live_variable_registry

# Define generic types for keys and values
KeyType = TypeVar("KeyType")
ValueType = TypeVar("ValueType")


@dataclass
class CacheStats:
    """Statistics for a BoundedCache instance."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def total_lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        if self.total_lookups == 0:
            return 0.0
        return (self.hits / self.total_lookups) * 100.0

    def __repr__(self) -> str:
        return f"{self.hits} hits, {self.misses} misses ({self.hit_rate:.1f}% hit rate)"


class BoundedCache(Generic[KeyType, ValueType]):
    """
    A generic, size-limited cache with a selectable eviction order.

    With ``refresh_on_hit=True`` the cache behaves as Least Recently Used:
    every hit moves the entry to the back of the eviction queue. With
    ``refresh_on_hit=False`` entries are evicted strictly in insertion order
    (storing a key again counts as a new insertion).

    A live variable ``cache.<name>.stats`` reports the stats of the most
    recently created cache with that name, so a replaced world's planner
    stops shadowing the live one. An optional ``on_evict`` callback
    receives evicted values.
    """

    def __init__(
        self,
        name: str,
        max_size: int = 16,
        *,
        refresh_on_hit: bool = True,
        on_evict: Callable[[ValueType], None] | None = None,
    ) -> None:
        if max_size <= 0:
            raise ValueError("Cache max_size must be a positive integer.")
        self.name = name
        self.max_size = max_size
        self.refresh_on_hit = refresh_on_hit
        self._cache: OrderedDict[KeyType, ValueType] = OrderedDict()
        self.stats = CacheStats()
        self.on_evict = on_evict

        live_var_name = f"cache.{self.name}.stats"
        existing = live_variable_registry.get_variable(live_var_name)
        if existing is not None:
            # The newest cache of a name owns the variable.
            existing.getter = self._stats_summary
        else:
            live_variable_registry.register(
                name=live_var_name,
                getter=self._stats_summary,
                description=f"Live stats for the {self.name} cache.",
            )

    def _stats_summary(self) -> str:
        return str(self.stats)

    def get(self, key: KeyType) -> ValueType | None:
        """
        Retrieve an item from the cache.

        Returns the item if found, otherwise None. Hits only refresh the
        entry's eviction position when the cache is in LRU mode.
        """
        if key not in self._cache:
            self.stats.misses += 1
            return None

        if self.refresh_on_hit:
            self._cache.move_to_end(key)
        self.stats.hits += 1
        return self._cache[key]

    def store(self, key: KeyType, value: ValueType) -> None:
        """
        Store an item in the cache.

        If the cache is over capacity afterwards, the entry at the front of
        the eviction queue is dropped.
        """
        self._cache[key] = value
        self._cache.move_to_end(key)

        while len(self._cache) > self.max_size:
            _evicted_key, evicted_value = self._cache.popitem(last=False)
            self.stats.evictions += 1
            if self.on_evict:
                self.on_evict(evicted_value)

    def discard(self, key: KeyType) -> None:
        """Remove ``key`` if present, without counting it as an eviction."""
        self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear all items from the cache and reset stats."""
        if self.on_evict:
            for value in self._cache.values():
                self.on_evict(value)

        self._cache.clear()
        self.stats = CacheStats()

    def keys(self) -> Iterator[KeyType]:
        """Iterate keys from the front of the eviction queue to the back."""
        return iter(list(self._cache.keys()))

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __str__(self) -> str:
        return (
            f"{self.name} Cache: {self.stats.hits} hits, {self.stats.misses} misses "
            f"({self.stats.hit_rate:.1f}% hit rate)"
        )

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} '{self.name}' "
            f"size={len(self)}/{self.max_size}, stats={self.stats!r}>"
        )
