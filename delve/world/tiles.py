# Tile constants centralized for modular imports
EMPTY = 0
FLOOR = 1
WALL = 2
DOOR = 3  # reserved; neither generator places doors yet
CORRIDOR = 4

_NAMES = {
    EMPTY: "empty",
    FLOOR: "floor",
    WALL: "wall",
    DOOR: "door",
    CORRIDOR: "corridor",
}
_CHARS = {
    EMPTY: " ",
    FLOOR: ".",
    WALL: "#",
    DOOR: "+",
    CORRIDOR: ",",
}

WALKABLE = frozenset({FLOOR, CORRIDOR, DOOR})


def tile_name(value):
    """Return the lower-case name of a tile value, ``None`` for unknown tiles."""
    if value is None:
        return None
    return _NAMES.get(value)


def tile_char(value) -> str:
    return _CHARS.get(value, "?")


def is_walkable(value) -> bool:
    # None means unloaded/out of range: treated as impassable
    return value in WALKABLE


__all__ = [
    "EMPTY",
    "FLOOR",
    "WALL",
    "DOOR",
    "CORRIDOR",
    "WALKABLE",
    "tile_name",
    "tile_char",
    "is_walkable",
]
