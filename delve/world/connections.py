"""Edge connection records shared between neighbouring chunks.

A connection says "chunk (cx, cy) carved an opening of ``width`` tiles
centred on ``position`` along ``edge``". When the neighbour across that edge
is generated later it looks the record up under its own coordinate and the
opposite edge and carves the same opening, which is what keeps corridors
continuous across chunk seams without touching an already generated grid.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

NORTH = "north"
SOUTH = "south"
EAST = "east"
WEST = "west"

EDGES = (NORTH, SOUTH, EAST, WEST)

OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

# North is toward negative y (row 0 of a chunk).
_OFFSETS = {NORTH: (0, -1), SOUTH: (0, 1), EAST: (1, 0), WEST: (-1, 0)}


def neighbor_of(cx: int, cy: int, edge: str) -> Tuple[int, int]:
    dx, dy = _OFFSETS[edge]
    return cx + dx, cy + dy


@dataclass(frozen=True)
class EdgeConnection:
    position: int
    width: int

    def span(self, size: int) -> range:
        """Offsets along the edge covered by this opening, clipped to ``size``."""
        half = self.width // 2
        return range(max(0, self.position - half), min(size - 1, self.position + half) + 1)

    def to_dict(self):
        return {"position": self.position, "width": self.width}


class ConnectionRegistry:
    """In-memory store of edge connections keyed by (cx, cy, edge).

    Records outlive chunk eviction so a regenerated neighbour still lines up
    with whatever was carved before.
    """

    def __init__(self):
        self._records: Dict[Tuple[int, int, str], EdgeConnection] = {}

    def record(self, cx: int, cy: int, edge: str, connection: EdgeConnection) -> None:
        if edge not in OPPOSITE:
            raise ValueError(f"unknown edge {edge!r}")
        self._records[(cx, cy, edge)] = connection

    def get(self, cx: int, cy: int, edge: str) -> Optional[EdgeConnection]:
        return self._records.get((cx, cy, edge))

    def adjacent(self, cx: int, cy: int, edge: str) -> Optional[EdgeConnection]:
        """Connection the neighbour across ``edge`` recorded on its facing edge."""
        if edge not in OPPOSITE:
            return None
        nx, ny = neighbor_of(cx, cy, edge)
        return self._records.get((nx, ny, OPPOSITE[edge]))

    def for_chunk(self, cx: int, cy: int) -> Dict[str, EdgeConnection]:
        return {edge: conn for edge in EDGES if (conn := self._records.get((cx, cy, edge))) is not None}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key) -> bool:
        return key in self._records


__all__ = [
    "NORTH",
    "SOUTH",
    "EAST",
    "WEST",
    "EDGES",
    "OPPOSITE",
    "neighbor_of",
    "EdgeConnection",
    "ConnectionRegistry",
]
