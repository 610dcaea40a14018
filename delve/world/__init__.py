"""Public world package interface.

Chunk streaming, seeded generation and the connection registry. None of
these modules use Flask themselves, though importing the package still
initialises the parent ``delve`` app.
"""

from .chunk import Chunk
from .config import WorldConfig, coerce_seed
from .connections import EAST, EDGES, NORTH, OPPOSITE, SOUTH, WEST, ConnectionRegistry, EdgeConnection
from .generator import GenerationReport, SeededChunkGenerator
from .manager import ChunkManager, WindowUpdate
from .simple_generator import StandaloneGenerator
from .tiles import CORRIDOR, DOOR, EMPTY, FLOOR, WALL, is_walkable, tile_char, tile_name  # noqa: F401

__all__ = [
    "Chunk",
    "ChunkManager",
    "WindowUpdate",
    "WorldConfig",
    "coerce_seed",
    "SeededChunkGenerator",
    "StandaloneGenerator",
    "GenerationReport",
    "ConnectionRegistry",
    "EdgeConnection",
    "NORTH",
    "SOUTH",
    "EAST",
    "WEST",
    "EDGES",
    "OPPOSITE",
    "EMPTY",
    "FLOOR",
    "WALL",
    "DOOR",
    "CORRIDOR",
    "is_walkable",
    "tile_char",
    "tile_name",
]
