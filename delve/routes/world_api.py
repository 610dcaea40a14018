"""
project: Delve
module: world_api.py
License: MIT

World streaming HTTP API.

One ChunkManager per process, created lazily from app config. Every call
that can generate chunks holds the world lock, so at most one generation is
in flight per coordinate (generation reads and writes the shared connection
registry).
"""

import threading
from dataclasses import asdict

from flask import Blueprint, current_app, jsonify, request

from delve.logging_utils import get_logger
from delve.websockets.validation import SET_SEED, UPDATE_WINDOW, validate
from delve.world import ChunkManager, WorldConfig, coerce_seed
from delve.world.tiles import is_walkable, tile_name

bp_world = Blueprint("world", __name__)

_log = get_logger("delve.api")

# WorldConfig field -> app.config key
APP_CONFIG_KEYS = {
    "seed": "WORLD_SEED",
    "chunk_size": "WORLD_CHUNK_SIZE",
    "view_distance": "WORLD_VIEW_DISTANCE",
    "unload_margin": "WORLD_UNLOAD_MARGIN",
    "min_edge_connections": "WORLD_MIN_EDGE_CONNECTIONS",
}

_world = None
_world_lock = threading.RLock()
# Callables run against every new manager (socket broadcast wiring).
_world_hooks = []


def world_config_from_app(config=None, seed=None) -> WorldConfig:
    """Resolve world settings: explicit seed > app.config > DELVE_* env > defaults."""
    config = current_app.config if config is None else config
    merged = asdict(WorldConfig.from_environment())
    for field, key in APP_CONFIG_KEYS.items():
        value = config.get(key)
        if value is not None and value != "":
            merged[field] = value
    if seed is not None:
        merged["seed"] = seed
    return WorldConfig.from_mapping(merged)


def register_world_hook(hook):
    """Run ``hook(manager)`` for the current world (if any) and every future one."""
    with _world_lock:
        if hook not in _world_hooks:
            _world_hooks.append(hook)
        if _world is not None:
            hook(_world)
    return hook


def _install(manager: ChunkManager) -> ChunkManager:
    global _world
    for hook in _world_hooks:
        hook(manager)
    _world = manager
    _log.info(event="world_created", seed=manager.world_seed, chunk_size=manager.chunk_size)
    return manager


def get_world() -> ChunkManager:
    with _world_lock:
        if _world is None:
            _install(ChunkManager(world_config_from_app()))
        return _world


def reset_world(seed=None) -> ChunkManager:
    """Replace the process world; ``seed=None`` resolves from config (random if unset)."""
    with _world_lock:
        return _install(ChunkManager(world_config_from_app(seed=seed)))


def _bad_request(result):
    return jsonify({"error": result["error"], "field": result["field"], "code": result["code"]}), 400


def window_payload(world: ChunkManager, cx: int, cy: int) -> dict:
    """Stream the window around (cx, cy) and describe what changed."""
    with _world_lock:
        update = world.update_window(cx, cy)
        return {
            "center": [cx, cy],
            "created": [list(c) for c in update.created],
            "evicted": [list(c) for c in update.evicted],
            "loaded": len(world.chunks),
        }


def tile_payload(world: ChunkManager, x: int, y: int) -> dict:
    with _world_lock:
        tile = world.tile_at(x, y)
    return {"x": x, "y": y, "tile": tile, "type": tile_name(tile), "walkable": is_walkable(tile)}


@bp_world.route("/api/world/tile")
def world_tile():
    """Tile at absolute tile coordinate ``?x=&y=``; ``tile`` is null when unloaded."""
    x = request.args.get("x", type=int)
    y = request.args.get("y", type=int)
    if x is None or y is None:
        return jsonify({"error": "x and y must be integers", "field": "x" if x is None else "y", "code": "type"}), 400
    return jsonify(tile_payload(get_world(), x, y))


@bp_world.route("/api/world/window", methods=["POST"])
def world_window():
    """Body ``{cx, cy}``: generate the view window around that chunk and evict far chunks."""
    ok, result = validate(request.get_json(silent=True), UPDATE_WINDOW)
    if not ok:
        return _bad_request(result)
    return jsonify(window_payload(get_world(), result["cx"], result["cy"]))


@bp_world.route("/api/world/chunk/<int(signed=True):cx>/<int(signed=True):cy>")
def world_chunk(cx, cy):
    world = get_world()
    with _world_lock:
        chunk = world.get_chunk(cx, cy)
        if chunk is None:
            return jsonify({"error": "chunk not loaded", "x": cx, "y": cy}), 404
        connections = {edge: conn.to_dict() for edge, conn in world.connections.for_chunk(cx, cy).items()}
        return jsonify(
            {
                "x": cx,
                "y": cy,
                "size": chunk.size,
                "tiles": chunk.rows(),
                "open_edges": chunk.open_edges(),
                "connections": connections,
                "report": chunk.report.to_dict() if chunk.report else None,
            }
        )


@bp_world.route("/api/world/seed", methods=["GET"])
def get_seed():
    return jsonify({"seed": get_world().world_seed})


@bp_world.route("/api/world/seed", methods=["POST"])
def set_seed():
    """Start a new world.

    Body JSON (all optional): ``{"seed": <int|str|null>}``. A string seed is
    hashed so the same phrase always names the same world; a missing seed
    picks a random one. The previous world's chunks and connections are
    discarded.
    """
    ok, result = validate(request.get_json(silent=True) or {}, SET_SEED)
    if not ok:
        return _bad_request(result)
    provided = result.get("seed")
    world = reset_world(coerce_seed(provided))
    return jsonify({"seed": world.world_seed})


@bp_world.route("/api/world/metrics")
def world_metrics():
    world = get_world()
    with _world_lock:
        return jsonify(world.summary())
