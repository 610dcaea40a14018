from typing import Tuple

from .tiles import CORRIDOR


def carve_rect(grid, x1: int, y1: int, x2: int, y2: int, tile: int = CORRIDOR) -> None:
    """Fill the inclusive rectangle spanned by two corners, clipped to the grid.

    A straight corridor is the degenerate case where the corners share a row
    or a column.
    """
    w = len(grid)
    h = len(grid[0]) if w else 0
    for x in range(max(0, min(x1, x2)), min(w - 1, max(x1, x2)) + 1):
        column = grid[x]
        for y in range(max(0, min(y1, y2)), min(h - 1, max(y1, y2)) + 1):
            column[y] = tile


def carve_l_path(
    grid,
    start: Tuple[int, int],
    end: Tuple[int, int],
    horizontal_first: bool,
    tile: int = CORRIDOR,
) -> None:
    """Carve an L-shaped corridor from ``start`` to ``end``.

    With ``horizontal_first`` the bend sits at ``(end.x, start.y)``,
    otherwise at ``(start.x, end.y)``.
    """
    (sx, sy), (ex, ey) = start, end
    if horizontal_first:
        carve_rect(grid, sx, sy, ex, sy, tile)
        carve_rect(grid, ex, sy, ex, ey, tile)
    else:
        carve_rect(grid, sx, sy, sx, ey, tile)
        carve_rect(grid, sx, ey, ex, ey, tile)


__all__ = ["carve_rect", "carve_l_path"]
