"""Shared helpers for world tests."""

from delve.world import ChunkManager, WorldConfig
from delve.world.tiles import CORRIDOR

TEST_SEED = 424242


def make_manager(seed=TEST_SEED, **overrides):
    """Manager with ``WorldConfig`` overrides (view_distance=0, ...)."""
    return ChunkManager(WorldConfig(seed=seed, **overrides))


def corridor_offsets(chunk, edge):
    return {i for i, t in enumerate(chunk.edge_tiles(edge)) if t == CORRIDOR}


def window(cx, cy, radius):
    """Row-major chunk coordinates of the square window around (cx, cy)."""
    return [(cx + dx, cy + dy) for dy in range(-radius, radius + 1) for dx in range(-radius, radius + 1)]
