"""Seeded random streams, one per AI subsystem.

Shot spread, patrol headings and enemy spawning each draw from their own
``random.Random``, seeded from the master seed combined with the stream's
domain name. Re-seeding with the same master seed replays every stream
exactly, and a subsystem drawing extra numbers never shifts another
subsystem's sequence.

Modules fetch their stream once at import time::

    _rng = rng.get("ai.shooting")

The handle looks its generator up on every draw, so it keeps working after
``rng.init`` re-seeds everything (the test suite does this before each
test).

Domains in use: ``ai.shooting``, ``ai.patrol``, ``world.enemy_spawn``.
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TypeVar

from tacnav.types import RandomSeed

T = TypeVar("T")


class RandomStream:
    """Re-seed-proof handle on one domain's generator."""

    __slots__ = ("_streams", "domain")

    def __init__(self, streams: RandomStreams, domain: str) -> None:
        self._streams = streams
        self.domain = domain

    def random(self) -> float:
        return self._streams.generator(self.domain).random()

    def uniform(self, a: float, b: float) -> float:
        return self._streams.generator(self.domain).uniform(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        return self._streams.generator(self.domain).choice(seq)


class RandomStreams:
    """Derives one generator per domain from a master seed, lazily.

    A ``None`` master seed seeds every generator from system entropy, so
    runs are not reproducible.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self.master_seed = master_seed
        self._generators: dict[str, Random] = {}
        self._handles: dict[str, RandomStream] = {}

    def stream(self, domain: str) -> RandomStream:
        handle = self._handles.get(domain)
        if handle is None:
            handle = self._handles[domain] = RandomStream(self, domain)
        return handle

    def generator(self, domain: str) -> Random:
        generator = self._generators.get(domain)
        if generator is None:
            generator = self._generators[domain] = Random(self._domain_seed(domain))
        return generator

    def _domain_seed(self, domain: str) -> int | None:
        if self.master_seed is None:
            return None
        # crc32, not hash(): str hashes are salted per interpreter run.
        return zlib.crc32(f"{self.master_seed}:{domain}".encode())

    def reseed(self, master_seed: RandomSeed) -> None:
        """Drop every generator; handles pick up the new seed on next draw."""
        self.master_seed = master_seed
        self._generators.clear()


_streams = RandomStreams()


def init(master_seed: RandomSeed = None) -> None:
    """Re-seed every stream. Handles obtained earlier stay valid."""
    _streams.reseed(master_seed)


def get(domain: str) -> RandomStream:
    return _streams.stream(domain)
