"""Domain-separated deterministic RNG using xxhash.

Every roll is a pure function of (seed, domain, key, sequence).  The
engine is single-threaded, so a ``RollStream`` hands out the sequence
numbers: two runs with the same seed and the same inputs roll the same
values in the same order.
"""

from __future__ import annotations

import struct

import xxhash

from idle_combat.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, key, sequence) with
    no internal mutable state.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, key: int, sequence: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, key, sequence)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, sequence: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, sequence) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: int, sequence: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, key, sequence)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, key: int, sequence: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, key, sequence) < probability


class RollStream:
    """Sequenced view over a DeterministicRNG.

    Keeps one counter per domain so adding rolls in one domain never
    shifts the values drawn in another.
    """

    __slots__ = ("_rng", "_counters")

    def __init__(self, rng: DeterministicRNG) -> None:
        self._rng = rng
        self._counters: dict[Domain, int] = {}

    def _next_seq(self, domain: Domain) -> int:
        seq = self._counters.get(domain, 0)
        self._counters[domain] = seq + 1
        return seq

    def random(self, domain: Domain, key: int = 0) -> float:
        """Float in [0.0, 1.0)."""
        return self._rng.next_float(domain, key, self._next_seq(domain))

    def uniform(self, domain: Domain, low: float, high: float, key: int = 0) -> float:
        """Float in [low, high).  Returns *low* when the band is empty."""
        if high <= low:
            return low
        return low + (high - low) * self.random(domain, key)

    def randint(self, domain: Domain, low: int, high: int, key: int = 0) -> int:
        """Integer in [low, high] inclusive."""
        if high <= low:
            return low
        return self._rng.next_int(domain, key, self._next_seq(domain), low, high)

    def chance(self, domain: Domain, probability: float, key: int = 0) -> bool:
        """Bernoulli trial.  0 never fires, 1 always fires."""
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return self.random(domain, key) < probability

    def choice_index(self, domain: Domain, count: int, key: int = 0) -> int:
        """Uniform index in [0, count)."""
        if count <= 1:
            return 0
        return self.randint(domain, 0, count - 1, key)
