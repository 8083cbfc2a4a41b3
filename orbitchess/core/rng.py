"""Seeded random stream used for setup and hazard spawning.

Every spawn evaluation builds a fresh stream from ``GameState.rng_seed`` and then
advances the seed, so a given seed reproduces the same hazard history as long
as the order of draws is unchanged.
"""

from __future__ import annotations

import random

UINT32_MASK = 0xFFFFFFFF


def stream(seed: int) -> random.Random:
    return random.Random(seed & UINT32_MASK)


def rand_int(rng: random.Random, lo: int, hi: int) -> int:
    """Uniform integer in [lo, hi]; a reversed range collapses to ``lo``."""
    if hi <= lo:
        # keep draw count stable even for degenerate ranges
        rng.random()
        return lo
    return rng.randint(lo, hi)


def coin(rng: random.Random) -> bool:
    return rng.random() < 0.5


def advance_seed(seed: int, increment: int) -> int:
    return (seed + increment) & UINT32_MASK
