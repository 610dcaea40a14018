from dataclasses import dataclass
from typing import Tuple

from .tiles import FLOOR


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int

    def cells(self):
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def overlaps(self, other: "Room", spacing: int = 1) -> bool:
        return (
            self.x < other.x + other.w + spacing
            and self.x + self.w + spacing > other.x
            and self.y < other.y + other.h + spacing
            and self.y + self.h + spacing > other.y
        )

    def manhattan_to(self, x: int, y: int) -> int:
        cx, cy = self.center
        return abs(cx - x) + abs(cy - y)


def carve_room(grid, room: Room, tile: int = FLOOR) -> None:
    w = len(grid)
    h = len(grid[0]) if w else 0
    for ix, iy in room.cells():
        if 0 <= ix < w and 0 <= iy < h:
            grid[ix][iy] = tile


__all__ = ["Room", "carve_room"]
