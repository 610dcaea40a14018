"""Deterministic seed derivation and keyed pseudo-random draws.

Chunk generation never holds RNG state: every draw is a pure function of an
integer key (``chunk_seed + offset``), so the same chunk seed always yields
the same rooms and openings no matter how many other chunks were generated
in between. The fraction function is a splitmix64 finalizer; it mixes bits
well enough for cosmetic variety and is not meant for anything statistical.
"""
from __future__ import annotations

MASK64 = 0xFFFFFFFFFFFFFFFF
_GOLDEN = 0x9E3779B97F4A7C15

# Draw-key offsets. Per-room draws are keyed
# ``seed + room_index * ROOM_STRIDE + <dimension key>``; every key below is
# distinct for up to ROOM_STRIDE rooms.
ROOM_COUNT_KEY = 0
ROOM_STRIDE = 100
ROOM_WIDTH_KEY = 11
ROOM_HEIGHT_KEY = 23
ROOM_X_KEY = 37
ROOM_Y_KEY = 53
BEND_KEY = 71
EDGE_PICK_KEY = 100_000
EDGE_PICK_STEP = 1000
BONUS_KEYS = {"north": 105_000, "south": 106_000, "east": 107_000, "west": 108_000}


def hash_coords(cx: int, cy: int) -> int:
    return ((cx * 73856093) ^ (cy * 19349663)) & 0x7FFFFFFF


def chunk_seed(cx: int, cy: int, world_seed: int) -> int:
    return hash_coords(cx, cy) ^ world_seed


def seeded_fraction(seed: int) -> float:
    """Map an integer seed to a float in ``[0, 1)``; same seed, same value."""
    z = (seed + _GOLDEN) & MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
    z ^= z >> 31
    return (z >> 11) / float(1 << 53)


def seeded_index(seed: int, n: int) -> int:
    """Pick an index in ``range(n)`` from ``seed``."""
    if n <= 0:
        return 0
    return min(n - 1, int(seeded_fraction(seed) * n))


def seeded_range(seed: int, lo: int, hi: int) -> int:
    """Inclusive integer draw in ``[lo, hi]``."""
    if hi <= lo:
        return lo
    return lo + seeded_index(seed, hi - lo + 1)


__all__ = [
    "hash_coords",
    "chunk_seed",
    "seeded_fraction",
    "seeded_index",
    "seeded_range",
    "BONUS_KEYS",
]
