"""
State module - status snapshots and random sources.

Contains:
- StatusSnapshot / StatusAggregator contract and the named-effect adapter
- RNG sources (seeded XorShift128, locked wrapper, fixed sequence)
"""

from .rng import (
    FixedSequence,
    LockedRandom,
    Random,
    RandomSource,
    SequenceExhaustedError,
    XorShift128,
    default_random_source,
    seed_to_long,
)
from .status import (
    EffectTableAggregator,
    MissingStatusError,
    StatusAggregator,
    StatusSnapshot,
    snapshot_from_effects,
)

__all__ = [
    "RandomSource",
    "XorShift128",
    "Random",
    "LockedRandom",
    "FixedSequence",
    "SequenceExhaustedError",
    "default_random_source",
    "seed_to_long",
    "StatusSnapshot",
    "StatusAggregator",
    "MissingStatusError",
    "EffectTableAggregator",
    "snapshot_from_effects",
]
