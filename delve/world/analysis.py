"""Structural checks over generated chunks.

Used by the ``check`` CLI command, ``scripts/diagnose_seeds.py`` and the test
suite; nothing here mutates a chunk.
"""
from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Dict, List, Optional, Set, Tuple

from .config import WorldConfig
from .connections import EAST, NORTH, OPPOSITE, SOUTH, WEST, neighbor_of
from .manager import ChunkManager
from .tiles import CORRIDOR, FLOOR, is_walkable

Coord2D = Tuple[int, int]

_EDGE_BETWEEN = {(0, -1): NORTH, (0, 1): SOUTH, (1, 0): EAST, (-1, 0): WEST}


def reachable_from(chunk, start: Coord2D) -> Set[Coord2D]:
    """Local coordinates reachable from ``start`` through walkable tiles (4-neighbour)."""
    if not is_walkable(chunk.tile(*start)):
        return set()
    visited = {start}
    q = deque([start])
    while q:
        cx, cy = q.popleft()
        for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nxt = (cx + dx, cy + dy)
            if nxt not in visited and is_walkable(chunk.tile(*nxt)):
                visited.add(nxt)
                q.append(nxt)
    return visited


def _edge_coords(chunk, edge: str) -> List[Coord2D]:
    last = chunk.size - 1
    if edge == NORTH:
        return [(x, 0) for x in range(chunk.size)]
    if edge == SOUTH:
        return [(x, last) for x in range(chunk.size)]
    if edge == WEST:
        return [(0, y) for y in range(chunk.size)]
    return [(last, y) for y in range(chunk.size)]


def _room_cells(chunk) -> Optional[Set[Coord2D]]:
    # Carved room cells; stitching corridors may have painted over all FLOOR.
    if chunk.report is None or not chunk.report.rooms:
        return None
    return {cell for room in chunk.report.rooms for cell in room.cells()}


def analyze_chunk(chunk) -> Dict[str, object]:
    floor = corridor = 0
    for column in chunk.grid:
        for t in column:
            if t == FLOOR:
                floor += 1
            elif t == CORRIDOR:
                corridor += 1
    open_edges = chunk.open_edges()
    edge_tiles = [c for edge in open_edges for c in _edge_coords(chunk, edge) if chunk.tile(*c) == CORRIDOR]

    # Every open edge must lead to a room, and all of them to the same region.
    connected = True
    region: Optional[Set[Coord2D]] = None
    if edge_tiles:
        region = reachable_from(chunk, edge_tiles[0])
        rooms = _room_cells(chunk)
        if rooms is None:
            reaches_room = any(chunk.tile(*c) == FLOOR for c in region)
        else:
            reaches_room = not region.isdisjoint(rooms)
        connected = all(c in region for c in edge_tiles) and reaches_room
    return {
        "x": chunk.x,
        "y": chunk.y,
        "open_edges": open_edges,
        "edges_connected": connected,
        "floor_tiles": floor,
        "corridor_tiles": corridor,
        "reachable_tiles": len(region) if region is not None else 0,
    }


def seam_mismatches(manager, a: Coord2D, b: Coord2D) -> List[int]:
    """Offsets along the shared boundary of ``a`` and ``b`` whose walkability differs.

    Returns an empty list when the chunks are not adjacent or either one is
    not loaded.
    """
    edge = _EDGE_BETWEEN.get((b[0] - a[0], b[1] - a[1]))
    if edge is None:
        return []
    first, second = manager.get_chunk(*a), manager.get_chunk(*b)
    if first is None or second is None:
        return []
    ours = first.edge_tiles(edge)
    theirs = second.edge_tiles(OPPOSITE[edge])
    return [i for i, (p, q) in enumerate(zip(ours, theirs)) if is_walkable(p) != is_walkable(q)]


def loaded_seam_report(manager) -> Dict[str, List[Dict[str, object]]]:
    """Classify every loaded east/south seam whose two sides disagree.

    ``broken`` lists seams where both chunks recorded the shared opening but
    the tiles disagree, which never happens when mirroring works.
    ``dead_ends`` lists seams opened by only one side: a chunk generated
    next to an already existing neighbour may roll an opening the neighbour
    never carved.
    """
    broken, dead_ends = [], []
    for coord in manager.loaded_coords():
        for edge in (EAST, SOUTH):
            other = neighbor_of(coord[0], coord[1], edge)
            if not manager.has_chunk(*other):
                continue
            bad = seam_mismatches(manager, coord, other)
            if not bad:
                continue
            entry = {"a": list(coord), "b": list(other), "offsets": bad}
            ours = manager.connection_of(coord, edge)
            theirs = manager.connection_of(other, OPPOSITE[edge])
            if ours is not None and theirs is not None:
                broken.append(entry)
            else:
                dead_ends.append(entry)
    return {"broken": broken, "dead_ends": dead_ends}


DEFAULT_WALK = [(0, 0), (2, 0), (4, 1), (4, 4), (1, 5), (-3, 3), (-4, -2), (0, -4), (0, 0)]


def survey_seed(seed: int, config=None, walk=None) -> Dict[str, object]:
    """Stream a world along ``walk`` (chunk centers) and count structural issues.

    Every chunk is checked right after it is generated; seams are checked
    after each window update, while both sides are still loaded.
    """
    base = config or WorldConfig()
    manager = ChunkManager(replace(base, seed=seed))
    issues = {"under_connected": 0, "disconnected_edges": 0, "origin_broken": 0, "broken_seams": 0}
    dead_ends = 0
    checked = 0

    def _check(cx, cy):
        nonlocal checked
        chunk = manager.get_chunk(cx, cy)
        result = analyze_chunk(chunk)
        checked += 1
        if chunk.is_origin:
            mid = chunk.size // 2
            if chunk.tile(mid, mid) != FLOOR or len(result["open_edges"]) != 4:
                issues["origin_broken"] += 1
        elif len(result["open_edges"]) < base.min_edge_connections:
            issues["under_connected"] += 1
        if not result["edges_connected"]:
            issues["disconnected_edges"] += 1

    manager.on_chunk_created(_check)
    for cx, cy in walk or DEFAULT_WALK:
        manager.update_window(cx, cy)
        report = loaded_seam_report(manager)
        issues["broken_seams"] += len(report["broken"])
        dead_ends = max(dead_ends, len(report["dead_ends"]))
    return {
        "seed": manager.world_seed,
        "chunks_checked": checked,
        "issues": issues,
        "dead_end_seams": dead_ends,
        "ok": all(v == 0 for v in issues.values()),
    }

__all__ = ["reachable_from", "analyze_chunk", "seam_mismatches", "loaded_seam_report", "survey_seed"]
