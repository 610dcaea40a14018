"""Chunk stream manager.

Owns the three pieces of world state: the world seed, the cache of
materialized chunks (keyed by integer chunk coordinate) and the edge
connection registry. The external driver calls ``update_window`` with the
viewer's chunk coordinate once per simulation step; everything else reads
tiles through ``tile_at`` and reacts to chunk-created notifications.

No operation here raises during normal use: unloaded or out-of-range lookups
return ``None``, which callers treat as impassable/unknown.
"""
from __future__ import annotations

import time
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from ..logging_utils import get_logger
from .chunk import Chunk
from .config import WorldConfig, coerce_seed
from .connections import EDGES, ConnectionRegistry, EdgeConnection
from .generator import SeededChunkGenerator
from .metrics import init_metrics
from .simple_generator import StandaloneGenerator
from .tiles import is_walkable

Coord = Tuple[int, int]
ChunkListener = Callable[[int, int], None]

_log = get_logger("delve.world")


class WindowUpdate(NamedTuple):
    created: List[Coord]
    evicted: List[Coord]


class ChunkManager:
    def __init__(self, config: WorldConfig | None = None, *, seeded: bool = True):
        self.config = config or WorldConfig()
        # 0 is a valid deterministic seed; only None means "pick one"
        self.world_seed = self.config.seed if self.config.seed is not None else coerce_seed(None)
        self.chunks: Dict[Coord, Chunk] = {}
        self.connections = ConnectionRegistry()
        self.metrics = init_metrics()
        self._listeners: List[ChunkListener] = []
        self.seeded = seeded
        if seeded:
            self.generator = SeededChunkGenerator(self.world_seed, self, self.config)
        else:
            self.generator = StandaloneGenerator(self.config.chunk_size)
        self._log = _log.bind(seed=self.world_seed)
        self._record_origin_exits()

    @property
    def chunk_size(self) -> int:
        return self.config.chunk_size

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------
    def update_window(self, center_x: int, center_y: int) -> WindowUpdate:
        """Generate the missing chunks around the viewer, then evict far ones.

        Calling twice with the same center generates and evicts nothing the
        second time.
        """
        view = self.config.view_distance
        created: List[Coord] = []
        for dy in range(-view, view + 1):
            for dx in range(-view, view + 1):
                coord = (center_x + dx, center_y + dy)
                if coord not in self.chunks:
                    self._generate(coord)
                    created.append(coord)

        unload = self.config.unload_distance
        evicted = [
            coord
            for coord in self.chunks
            if abs(coord[0] - center_x) > unload or abs(coord[1] - center_y) > unload
        ]
        for coord in evicted:
            del self.chunks[coord]

        self.metrics['window_updates'] += 1
        self.metrics['chunks_evicted'] += len(evicted)
        if created or evicted:
            self._log.debug(
                event="window_updated",
                cx=center_x,
                cy=center_y,
                created=len(created),
                evicted=len(evicted),
                loaded=len(self.chunks),
                connections=len(self.connections),
            )
        for coord in created:
            self._notify(coord)
        return WindowUpdate(created, evicted)

    def _generate(self, coord: Coord) -> Chunk:
        cx, cy = coord
        start = time.perf_counter()
        chunk = Chunk(
            cx,
            cy,
            self.config.chunk_size,
            self.generator,
            origin_lane_width=self.config.origin_lane_width,
        )
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        self.chunks[coord] = chunk
        self.metrics['chunks_generated'] += 1
        self.metrics['last_generation_ms'] = elapsed_ms
        self.metrics['generation_ms_total'] += elapsed_ms
        if chunk.report is not None:
            self.metrics['connections_mirrored'] += len(chunk.report.mirrored)
        self._log.debug(
            event="chunk_generated",
            cx=cx,
            cy=cy,
            rooms=len(chunk.report.rooms) if chunk.report else 0,
            open_edges=",".join(chunk.open_edges()),
            ms=round(elapsed_ms, 3),
        )
        return chunk

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def on_chunk_created(self, callback: ChunkListener) -> ChunkListener:
        """Register ``callback(cx, cy)``; fired once per newly generated chunk.

        Returns the callback so it can be used as a decorator.
        """
        if callback not in self._listeners:
            self._listeners.append(callback)
        return callback

    def remove_listener(self, callback: ChunkListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, coord: Coord) -> None:
        for listener in list(self._listeners):
            try:
                listener(coord[0], coord[1])
            except Exception as exc:
                # A broken spawner must not leave the window half streamed.
                self.metrics['listener_errors'] += 1
                self._log.error(event="chunk_listener_failed", cx=coord[0], cy=coord[1], error=repr(exc))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def chunk_of(self, tile_x: int, tile_y: int) -> Coord:
        n = self.config.chunk_size
        return (tile_x // n, tile_y // n)

    def tile_at(self, tile_x: int, tile_y: int) -> Optional[int]:
        """Tile at an absolute tile coordinate, or ``None`` if its chunk is not cached.

        Reading never generates a chunk.
        """
        n = self.config.chunk_size
        chunk = self.chunks.get((tile_x // n, tile_y // n))
        if chunk is None:
            return None
        # Python's modulo is already Euclidean for a positive divisor
        return chunk.tile(tile_x % n, tile_y % n)

    def is_walkable(self, tile_x: int, tile_y: int) -> bool:
        return is_walkable(self.tile_at(tile_x, tile_y))

    def get_chunk(self, cx: int, cy: int) -> Optional[Chunk]:
        return self.chunks.get((cx, cy))

    def has_chunk(self, cx: int, cy: int) -> bool:
        return (cx, cy) in self.chunks

    def loaded_coords(self) -> List[Coord]:
        return sorted(self.chunks)

    # ------------------------------------------------------------------
    # Connection registry
    # ------------------------------------------------------------------
    def record_connection(self, coord: Coord, edge: str, position: int, width: int) -> None:
        self.connections.record(coord[0], coord[1], edge, EdgeConnection(position, width))
        self.metrics['connections_recorded'] += 1

    def connection_of(self, coord: Coord, edge: str) -> Optional[EdgeConnection]:
        return self.connections.get(coord[0], coord[1], edge)

    def adjacent_connection_of(self, coord: Coord, edge: str) -> Optional[EdgeConnection]:
        return self.connections.adjacent(coord[0], coord[1], edge)

    def _record_origin_exits(self) -> None:
        # The spawn chunk's lanes are fixed, so they are known before (0, 0)
        # exists; neighbours generated first still line up with them.
        mid = self.config.chunk_size // 2
        for edge in EDGES:
            self.record_connection((0, 0), edge, mid, self.config.origin_lane_width)

    def summary(self) -> dict:
        return {
            "seed": self.world_seed,
            "chunk_size": self.config.chunk_size,
            "view_distance": self.config.view_distance,
            "unload_margin": self.config.unload_margin,
            "loaded": len(self.chunks),
            "connections": len(self.connections),
            "metrics": dict(self.metrics),
        }


__all__ = ["ChunkManager", "WindowUpdate"]
