"""Seeded per-chunk dungeon generator.

High-level phases for one chunk ``(cx, cy)``:
    * Derive ``chunk_seed = hash_coords(cx, cy) ^ world_seed``. Every later
      draw is a keyed function of that seed, so the chunk's rooms never depend
      on how many other chunks were generated before it.
    * Fill the grid with WALL and carve 2-4 FLOOR rooms inside a 1-tile margin.
    * Chain consecutive rooms with L-shaped corridors (seeded bend).
    * Negotiate edge openings through the connection registry:
        - mirror every opening a neighbour already recorded toward this chunk,
          and re-carve openings this chunk recorded before it was evicted;
        - top up to ``min_edge_connections``, preferring edges whose neighbour
          does not exist yet;
        - roll a bonus opening for each edge still closed, with a higher chance
          toward unexplored neighbours.
      Every opening is carved two tiles deep and recorded for this chunk.
    * Stitch every edge corridor tile to its nearest room.

Because negotiation reads which neighbours exist and what they recorded, the
exact grid of a coordinate depends on generation order as well as on the
seed. That dependence is what makes seams line up; tests that compare exact
grids pin the order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from . import rng
from .config import WorldConfig
from .connections import EDGES, NORTH, SOUTH, WEST, EdgeConnection, neighbor_of
from .rooms import Room, carve_room
from .tiles import CORRIDOR, WALL
from .tunnels import carve_l_path


@dataclass
class GenerationReport:
    seed: Optional[int]
    rooms: List[Room] = field(default_factory=list)
    opened: List[str] = field(default_factory=list)
    mirrored: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "seed": self.seed,
            "rooms": len(self.rooms),
            "opened": list(self.opened),
            "mirrored": list(self.mirrored),
        }


class SeededChunkGenerator:
    """Populate chunks deterministically from a world seed.

    ``registry`` is the owning chunk manager (anything exposing
    ``adjacent_connection_of``, ``connection_of``, ``record_connection`` and
    ``has_chunk``).
    """

    def __init__(self, world_seed: int, registry, config: WorldConfig | None = None):
        self.world_seed = world_seed
        self.registry = registry
        self.config = config or WorldConfig()

    def populate(self, chunk) -> GenerationReport:
        seed = rng.chunk_seed(chunk.x, chunk.y, self.world_seed)
        chunk.fill(WALL)
        rooms = self._place_rooms(chunk, seed)
        self._chain_rooms(chunk, rooms, seed)
        report = GenerationReport(seed=seed, rooms=rooms)
        self._negotiate_edges(chunk, seed, report)
        self._stitch_edges_to_rooms(chunk, rooms)
        return report

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------
    def _place_rooms(self, chunk, seed: int) -> List[Room]:
        cfg = self.config
        size = chunk.size
        count = rng.seeded_range(seed + rng.ROOM_COUNT_KEY, cfg.min_rooms, cfg.max_rooms)
        rooms: List[Room] = []
        for i in range(count):
            base = seed + i * rng.ROOM_STRIDE
            w = rng.seeded_range(base + rng.ROOM_WIDTH_KEY, cfg.min_room_size, cfg.max_room_size)
            h = rng.seeded_range(base + rng.ROOM_HEIGHT_KEY, cfg.min_room_size, cfg.max_room_size)
            x = rng.seeded_range(base + rng.ROOM_X_KEY, 1, size - w - 2)
            y = rng.seeded_range(base + rng.ROOM_Y_KEY, 1, size - h - 2)
            room = Room(x, y, w, h)
            carve_room(chunk.grid, room)
            rooms.append(room)
        return rooms

    def _chain_rooms(self, chunk, rooms: List[Room], seed: int) -> None:
        for i in range(len(rooms) - 1):
            horizontal_first = rng.seeded_fraction(seed + i * rng.ROOM_STRIDE + rng.BEND_KEY) > 0.5
            carve_l_path(chunk.grid, rooms[i].center, rooms[i + 1].center, horizontal_first)

    # ------------------------------------------------------------------
    # Edge negotiation
    # ------------------------------------------------------------------
    def _negotiate_edges(self, chunk, seed: int, report: GenerationReport) -> None:
        cfg = self.config
        coord = (chunk.x, chunk.y)
        mid = chunk.size // 2
        opened: List[str] = report.opened

        for edge in EDGES:
            existing = self.registry.adjacent_connection_of(coord, edge)
            if existing is not None:
                self._open(chunk, edge, existing)
                opened.append(edge)
                report.mirrored.append(edge)
                continue
            # A chunk regenerated after eviction keeps the openings it already
            # promised; an ungenerated neighbour will mirror them later.
            previous = self.registry.connection_of(coord, edge)
            if previous is not None:
                self._open(chunk, edge, previous)
                opened.append(edge)

        neighbour_exists = {edge: self.registry.has_chunk(*neighbor_of(chunk.x, chunk.y, edge)) for edge in EDGES}

        if len(opened) < cfg.min_edge_connections:
            unexplored = [e for e in EDGES if e not in opened and not neighbour_exists[e]]
            explored = [e for e in EDGES if e not in opened and neighbour_exists[e]]
            for pool in (unexplored, explored):
                while len(opened) < cfg.min_edge_connections and pool:
                    key = seed + rng.EDGE_PICK_KEY + len(opened) * rng.EDGE_PICK_STEP
                    edge = pool.pop(rng.seeded_index(key, len(pool)))
                    self._open(chunk, edge, EdgeConnection(mid, cfg.connection_width))
                    opened.append(edge)

        for edge in EDGES:
            if edge in opened:
                continue
            chance = cfg.open_chance_explored if neighbour_exists[edge] else cfg.open_chance_unexplored
            if rng.seeded_fraction(seed + rng.BONUS_KEYS[edge]) < chance:
                self._open(chunk, edge, EdgeConnection(mid, cfg.connection_width))
                opened.append(edge)

    def _open(self, chunk, edge: str, connection: EdgeConnection) -> None:
        last = chunk.size - 1
        for offset in connection.span(chunk.size):
            if edge == NORTH:
                cells = ((offset, 0), (offset, 1))
            elif edge == SOUTH:
                cells = ((offset, last), (offset, last - 1))
            elif edge == WEST:
                cells = ((0, offset), (1, offset))
            else:
                cells = ((last, offset), (last - 1, offset))
            for lx, ly in cells:
                chunk.set_tile(lx, ly, CORRIDOR)
        self.registry.record_connection((chunk.x, chunk.y), edge, connection.position, connection.width)

    # ------------------------------------------------------------------
    # Stitching
    # ------------------------------------------------------------------
    def _stitch_edges_to_rooms(self, chunk, rooms: List[Room]) -> None:
        if not rooms:
            return
        for (ex, ey), start in _edge_corridor_tiles(chunk):
            nearest = min(rooms, key=lambda r: r.manhattan_to(ex, ey))
            rcx, rcy = nearest.center
            horizontal_first = abs(ex - rcx) > abs(ey - rcy)
            # Paths start one tile inboard: the edge line itself carries only
            # negotiated openings, which is what the neighbour mirrors.
            carve_l_path(chunk.grid, start, (rcx, rcy), horizontal_first)


def _edge_corridor_tiles(chunk) -> List[Tuple[Tuple[int, int], Tuple[int, int]]]:
    """Edge corridor tiles paired with the tile one step inboard of each."""
    last = chunk.size - 1
    tiles = []
    for x in range(chunk.size):
        if chunk.tile(x, 0) == CORRIDOR:
            tiles.append(((x, 0), (x, 1)))
        if chunk.tile(x, last) == CORRIDOR:
            tiles.append(((x, last), (x, last - 1)))
    for y in range(chunk.size):
        if chunk.tile(0, y) == CORRIDOR:
            tiles.append(((0, y), (1, y)))
        if chunk.tile(last, y) == CORRIDOR:
            tiles.append(((last, y), (last - 1, y)))
    return tiles


__all__ = ["SeededChunkGenerator", "GenerationReport"]
