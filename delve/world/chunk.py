"""Chunk tile container.

A chunk owns one ``size x size`` grid (column-major, ``grid[x][y]`` like the
rest of the world code) and runs its own population exactly once, inside the
constructor, so no caller can ever observe a half generated chunk:

    * (0, 0) is the hand-built spawn chunk: a large centered floor room with
      corridor lanes punched through all four edges.
    * any other coordinate is handed to the generator strategy it was given
      (seeded or standalone); without one it falls back to a standalone
      generator of its own.
    * both paths finish with an edge smoothing pass that widens every seam
      opening by one tile on each side and one tile inboard.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from .connections import EAST, EDGES, NORTH, SOUTH, WEST
from .simple_generator import StandaloneGenerator
from .tiles import CORRIDOR, FLOOR, WALL, tile_char


class Chunk:
    __slots__ = ("x", "y", "size", "grid", "report", "origin_lane_width")

    def __init__(self, x: int, y: int, size: int = 32, generator=None, origin_lane_width: int = 3):
        self.x = x
        self.y = y
        self.size = size
        self.grid: List[List[int]] = [[WALL for _ in range(size)] for _ in range(size)]
        self.report = None
        self.origin_lane_width = origin_lane_width
        self._generate(generator)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def _generate(self, generator) -> None:
        if self.is_origin:
            self._carve_origin()
        else:
            if generator is None:
                generator = StandaloneGenerator(self.size)
            self.report = generator.populate(self)
        self._smooth_edges()

    def _carve_origin(self) -> None:
        size = self.size
        room = size - 4
        start = (size - room) // 2
        end = start + room
        for x in range(start, end):
            for y in range(start, end):
                self.grid[x][y] = FLOOR
        center = size // 2
        half = self.origin_lane_width // 2
        for lane in range(center - half, center + half + 1):
            for i in list(range(0, start)) + list(range(end, size)):
                self.grid[lane][i] = CORRIDOR  # north / south exits
                self.grid[i][lane] = CORRIDOR  # west / east exits

    def _smooth_edges(self) -> None:
        last = self.size - 1
        # Snapshot first: tiles widened in this pass must not widen again.
        openings = {edge: [i for i, t in enumerate(self.edge_tiles(edge)) if t == CORRIDOR] for edge in EDGES}
        for edge, offsets in openings.items():
            for i in offsets:
                for along in (i - 1, i, i + 1):
                    if not 0 <= along <= last:
                        continue
                    if edge == NORTH:
                        cells = ((along, 0), (along, 1))
                    elif edge == SOUTH:
                        cells = ((along, last), (along, last - 1))
                    elif edge == WEST:
                        cells = ((0, along), (1, along))
                    else:
                        cells = ((last, along), (last - 1, along))
                    for cx, cy in cells:
                        self.grid[cx][cy] = CORRIDOR

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    @property
    def coord(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_origin(self) -> bool:
        return self.x == 0 and self.y == 0

    def in_bounds(self, lx: int, ly: int) -> bool:
        return 0 <= lx < self.size and 0 <= ly < self.size

    def tile(self, lx: int, ly: int) -> Optional[int]:
        if not self.in_bounds(lx, ly):
            return None
        return self.grid[lx][ly]

    def set_tile(self, lx: int, ly: int, value: int) -> None:
        if self.in_bounds(lx, ly):
            self.grid[lx][ly] = value

    def fill(self, value: int) -> None:
        for column in self.grid:
            for y in range(self.size):
                column[y] = value

    def edge_tiles(self, edge: str) -> List[int]:
        """Tiles along ``edge`` ordered by increasing x (north/south) or y (east/west)."""
        last = self.size - 1
        if edge == NORTH:
            return [self.grid[x][0] for x in range(self.size)]
        if edge == SOUTH:
            return [self.grid[x][last] for x in range(self.size)]
        if edge == WEST:
            return list(self.grid[0])
        if edge == EAST:
            return list(self.grid[last])
        raise ValueError(f"unknown edge {edge!r}")

    def open_edges(self) -> List[str]:
        return [edge for edge in EDGES if CORRIDOR in self.edge_tiles(edge)]

    def rows(self) -> List[List[int]]:
        """Row-major copy (``rows[y][x]``) for JSON payloads and printing."""
        return [[self.grid[x][y] for x in range(self.size)] for y in range(self.size)]

    def to_ascii(self) -> str:
        return "\n".join("".join(tile_char(t) for t in row) for row in self.rows())

    def __repr__(self) -> str:
        return f"Chunk(x={self.x}, y={self.y}, size={self.size})"


__all__ = ["Chunk"]
