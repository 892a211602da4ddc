"""
Random sources for critical-hit rolls.

The engine only ever asks for one thing: a uniform float in [0, 1).
Anything with a ``next_uniform()`` method satisfies ``RandomSource``.

Implementations:
- Random: seeded XorShift128 (libGDX RandomXS128), fully deterministic
- LockedRandom: wraps any source with a lock so concurrent rolls never interleave
- FixedSequence: replays a fixed list of draws (tests, scripted scenarios)
"""

from __future__ import annotations

import os
import threading
from typing import Iterable, List, Optional, Protocol, runtime_checkable

__all__ = [
    "RandomSource",
    "XorShift128",
    "Random",
    "LockedRandom",
    "FixedSequence",
    "SequenceExhaustedError",
    "default_random_source",
    "seed_to_long",
]

_MASK64 = 0xFFFFFFFFFFFFFFFF


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can produce a uniform draw in [0, 1)."""

    def next_uniform(self) -> float:
        ...


class SequenceExhaustedError(RuntimeError):
    """Raised by a non-cycling FixedSequence once every value was consumed."""


# =============================================================================
# XorShift128
# =============================================================================


class XorShift128:
    """
    XorShift128 PRNG - matches libGDX RandomXS128.

    State is two 64-bit integers (seed0, seed1).
    """

    def __init__(self, seed: int, seed1: Optional[int] = None):
        """
        Initialize with a 64-bit seed or explicit (seed0, seed1) state.

        Args:
            seed: Either the initial seed (if seed1 is None) or seed0 state
            seed1: If provided, use (seed, seed1) as direct state values
        """
        if seed1 is not None:
            self.seed0 = seed & _MASK64
            self.seed1 = seed1 & _MASK64
        else:
            # Long.MIN_VALUE stands in for a zero seed
            if seed == 0:
                seed = -0x8000000000000000
            self.seed0 = self._murmur_hash3(seed)
            self.seed1 = self._murmur_hash3(self.seed0)

    @staticmethod
    def _murmur_hash3(x: int) -> int:
        """MurmurHash3 finalizer - used for seed initialization."""
        x = x & _MASK64
        x ^= x >> 33
        x = (x * 0xff51afd7ed558ccd) & _MASK64
        x ^= x >> 33
        x = (x * 0xc4ceb9fe1a85ec53) & _MASK64
        x ^= x >> 33
        return x

    def _next_long(self) -> int:
        """Generate next unsigned 64-bit value."""
        s1 = self.seed0
        s0 = self.seed1
        self.seed0 = s0

        s1 ^= (s1 << 23) & _MASK64
        self.seed1 = (s1 ^ s0 ^ (s1 >> 17) ^ (s0 >> 26)) & _MASK64

        return (self.seed0 + self.seed1) & _MASK64

    def next_float(self) -> float:
        """Random float in [0, 1) with 24 bits of precision."""
        return (self._next_long() >> 40) / (1 << 24)

    def copy(self) -> XorShift128:
        return XorShift128(self.seed0, self.seed1)


# =============================================================================
# Seeded source
# =============================================================================


class Random:
    """
    Seeded, counted random source.

    Two instances built from the same seed (and counter) produce the same
    draws, which makes crit outcomes reproducible across runs.

    Not thread-safe on its own; wrap in LockedRandom to share it.
    """

    def __init__(self, seed: int, counter: int = 0):
        """
        Args:
            seed: 64-bit seed value
            counter: Number of draws to skip (restores a saved position)
        """
        self.seed = seed
        self._rng = XorShift128(seed)
        self.counter = 0
        for _ in range(counter):
            self.next_uniform()

    def next_uniform(self) -> float:
        """Uniform float in [0, 1)."""
        self.counter += 1
        return self._rng.next_float()

    def copy(self) -> Random:
        """Create a copy with the same state and counter."""
        new = Random.__new__(Random)
        new.seed = self.seed
        new._rng = self._rng.copy()
        new.counter = self.counter
        return new

    def __repr__(self) -> str:
        return f"Random(seed={self.seed}, counter={self.counter})"


class LockedRandom:
    """Serializes draws from a wrapped source so it can be shared between threads."""

    def __init__(self, source: RandomSource):
        self._source = source
        self._lock = threading.Lock()

    def next_uniform(self) -> float:
        with self._lock:
            return self._source.next_uniform()


class FixedSequence:
    """
    Replays a fixed list of draws.

    By default the sequence cycles; with ``cycle=False`` a draw past the end
    raises SequenceExhaustedError.
    """

    def __init__(self, values: Iterable[float], cycle: bool = True):
        self.values: List[float] = [float(v) for v in values]
        if not self.values:
            raise ValueError("FixedSequence needs at least one value")
        for v in self.values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"draw {v} is outside [0, 1)")
        self.cycle = cycle
        self.position = 0

    @property
    def draws(self) -> int:
        """Number of values handed out so far."""
        return self.position

    def next_uniform(self) -> float:
        if self.position >= len(self.values) and not self.cycle:
            raise SequenceExhaustedError(
                f"all {len(self.values)} fixed draws already consumed"
            )
        value = self.values[self.position % len(self.values)]
        self.position += 1
        return value


def default_random_source() -> RandomSource:
    """Fresh OS-seeded source, safe to share between threads."""
    seed = int.from_bytes(os.urandom(8), "big", signed=True)
    return LockedRandom(Random(seed))


def seed_to_long(seed_string: str) -> int:
    """
    Convert a seed string (e.g., "ABC123") to its numeric value.

    Base-35 encoding: 0-9 + A-Z excluding O (O is read as 0).
    Purely numeric strings are taken as plain integers.
    """
    if seed_string.lstrip('-').isdigit():
        return int(seed_string)

    characters = "0123456789ABCDEFGHIJKLMNPQRSTUVWXYZ"
    seed_string = seed_string.upper().replace("O", "0")

    result = 0
    for char in seed_string:
        remainder = characters.find(char)
        if remainder == -1:
            continue
        result *= len(characters)
        result += remainder

    return result
