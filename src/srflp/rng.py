# src/srflp/rng.py
"""Reproducible random streams for instance generation.

A generator is always built here and handed down explicitly; nothing in the
package touches ``np.random``'s global state.
"""
from __future__ import annotations

import time
from typing import Optional

import numpy as np

SEED_BITS = 128
STATE_BYTES = 32


def wall_clock_seed() -> int:
    """Milliseconds since the Unix epoch, used when no seed is supplied."""
    return int(time.time() * 1000) % (1 << SEED_BITS)


def expand_seed(seed: int) -> bytes:
    """Stretch a 128-bit seed into a 256-bit state.

    The big-endian bytes fill the buffer from the front, then the
    little-endian bytes are written from the back going backwards.
    """
    if seed < 0 or seed >= (1 << SEED_BITS):
        raise ValueError(f"seed must lie in [0, 2**{SEED_BITS}), got {seed}")
    width = SEED_BITS // 8
    state = bytearray(STATE_BYTES)
    for k, b in enumerate(seed.to_bytes(width, "big")):
        state[k] = b
    for k, b in enumerate(seed.to_bytes(width, "little")):
        state[STATE_BYTES - 1 - k] = b
    return bytes(state)


def seeded_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Return a PCG64-backed generator keyed to ``seed`` (or the wall clock)."""
    init = wall_clock_seed() if seed is None else int(seed)
    entropy = int.from_bytes(expand_seed(init), "big")
    return np.random.Generator(np.random.PCG64(np.random.SeedSequence(entropy)))
