from __future__ import annotations

import random
from typing import List

from .generator import GenerationReport
from .rooms import Room, carve_room
from .tiles import CORRIDOR, WALL
from .tunnels import carve_rect


class StandaloneGenerator:
    """Self-contained room and corridor carver with no cross-chunk awareness.

    Used when a chunk is built without a shared seed/registry context.
    Randomness comes from an unseeded ``random.Random`` unless one is
    injected, so two runs never promise the same layout, and edge openings
    sit wherever the nearest room happens to be.
    """

    MAX_ATTEMPTS = 100
    MIN_TARGET_ROOMS = 8
    TARGET_ROOMS_SPREAD = 8
    MIN_ROOM_SIDE = 3
    ROOM_SIDE_SPREAD = 8
    MIN_ROOMS = 3
    EDGE_WIDEN = 2

    def __init__(self, width: int, height: int | None = None, rng: random.Random | None = None):
        self.width = width
        self.height = height if height is not None else width
        self.rng = rng or random.Random()
        self.grid: List[List[int]] = []

    def populate(self, chunk):
        rooms = self._run()
        for x in range(chunk.size):
            for y in range(chunk.size):
                chunk.set_tile(x, y, self.grid[x][y] if x < self.width and y < self.height else WALL)
        return GenerationReport(seed=None, rooms=rooms, opened=chunk.open_edges())

    def generate(self) -> List[List[int]]:
        """Return a fresh column-major grid (``grid[x][y]``)."""
        self._run()
        return self.grid

    def _run(self) -> List[Room]:
        self.grid = [[WALL for _ in range(self.height)] for _ in range(self.width)]
        rooms = self._create_rooms()
        self._connect_rooms(rooms)
        self._connect_to_edges(rooms)
        return rooms

    def _create_rooms(self) -> List[Room]:
        rng = self.rng
        target = self.MIN_TARGET_ROOMS + int(rng.random() * self.TARGET_ROOMS_SPREAD)
        rooms: List[Room] = []
        for _ in range(self.MAX_ATTEMPTS):
            if len(rooms) >= target:
                break
            w = self.MIN_ROOM_SIDE + int(rng.random() * self.ROOM_SIDE_SPREAD)
            h = self.MIN_ROOM_SIDE + int(rng.random() * self.ROOM_SIDE_SPREAD)
            x = 1 + int(rng.random() * (self.width - w - 2))
            y = 1 + int(rng.random() * (self.height - h - 2))
            room = Room(x, y, w, h)
            if any(room.overlaps(r, spacing=1) for r in rooms):
                continue
            carve_room(self.grid, room)
            rooms.append(room)
        # Under-production: force fixed corner rooms until there are enough
        if len(rooms) < self.MIN_ROOMS:
            corners = [
                Room(1, 1, 5, 5),
                Room(self.width - 6, 1, 5, 5),
                Room(1, self.height - 6, 5, 5),
                Room(self.width - 6, self.height - 6, 5, 5),
            ]
            for room in corners:
                if len(rooms) >= self.MIN_ROOMS:
                    break
                carve_room(self.grid, room)
                rooms.append(room)
        return rooms

    def _connect_rooms(self, rooms: List[Room]) -> None:
        for a, b in zip(rooms, rooms[1:]):
            (ax, ay), (bx, by) = a.center, b.center
            if self.rng.random() < 0.5:
                carve_rect(self.grid, ax, ay, bx, ay, CORRIDOR)
                carve_rect(self.grid, bx, ay, bx, by, CORRIDOR)
            else:
                carve_rect(self.grid, ax, ay, ax, by, CORRIDOR)
                carve_rect(self.grid, ax, by, bx, by, CORRIDOR)

    def _connect_to_edges(self, rooms: List[Room]) -> None:
        if not rooms:
            return
        north = min(rooms, key=lambda r: r.y + r.h / 2)
        south = max(rooms, key=lambda r: r.y + r.h / 2)
        west = min(rooms, key=lambda r: r.x + r.w / 2)
        east = max(rooms, key=lambda r: r.x + r.w / 2)
        last_x, last_y = self.width - 1, self.height - 1

        nx = north.x + north.w // 2
        carve_rect(self.grid, nx, north.y, nx, 0, CORRIDOR)
        self._widen(nx, horizontal=True, rows=(0, 1))

        sx = south.x + south.w // 2
        carve_rect(self.grid, sx, south.y + south.h - 1, sx, last_y, CORRIDOR)
        self._widen(sx, horizontal=True, rows=(last_y, last_y - 1))

        wy = west.y + west.h // 2
        carve_rect(self.grid, west.x, wy, 0, wy, CORRIDOR)
        self._widen(wy, horizontal=False, rows=(0, 1))

        ey = east.y + east.h // 2
        carve_rect(self.grid, east.x + east.w - 1, ey, last_x, ey, CORRIDOR)
        self._widen(ey, horizontal=False, rows=(last_x, last_x - 1))

    def _widen(self, center: int, horizontal: bool, rows) -> None:
        """Widen an edge connection point by EDGE_WIDEN tiles each side, two deep."""
        limit = self.width if horizontal else self.height
        for along in range(center - self.EDGE_WIDEN, center + self.EDGE_WIDEN + 1):
            if not 0 <= along < limit:
                continue
            for depth in rows:
                if horizontal:
                    self.grid[along][depth] = CORRIDOR
                else:
                    self.grid[depth][along] = CORRIDOR


__all__ = ["StandaloneGenerator"]
