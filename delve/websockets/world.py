"""Socket.IO world streaming handlers.

Events:
    - update_window: Move the viewer; payload { cx, cy }
    - query_tile: Read one tile; payload { x, y }

Emits:
    - window_updated: { center, created, evicted, loaded } to the caller
    - tile: { x, y, tile, type, walkable } to the caller
    - chunk_created: { x, y } broadcast once per newly generated chunk
    - error: { message, field, code } for invalid payloads
"""

from flask_socketio import emit

from delve import app, socketio
from delve.logging_utils import get_logger
from delve.routes.world_api import get_world, register_world_hook, tile_payload, window_payload

from .validation import TILE_QUERY, UPDATE_WINDOW, error_payload, validate

_log = get_logger("delve.ws")


def _broadcast_chunk_created(cx, cy):
    socketio.emit("chunk_created", {"x": cx, "y": cy})


@register_world_hook
def _wire_chunk_broadcast(manager):
    if app.config.get("WORLD_BROADCAST_CHUNKS", True):
        manager.on_chunk_created(_broadcast_chunk_created)


@socketio.on("update_window")
def handle_update_window(data):
    ok, result = validate(data or {}, UPDATE_WINDOW)
    if not ok:
        emit("error", error_payload("update_window", result))
        return
    payload = window_payload(get_world(), result["cx"], result["cy"])
    emit("window_updated", payload)
    if payload["created"] or payload["evicted"]:
        _log.info(
            event="update_window",
            cx=result["cx"],
            cy=result["cy"],
            created=len(payload["created"]),
            evicted=len(payload["evicted"]),
        )


@socketio.on("query_tile")
def handle_query_tile(data):
    ok, result = validate(data or {}, TILE_QUERY)
    if not ok:
        emit("error", error_payload("query_tile", result))
        return
    emit("tile", tile_payload(get_world(), result["x"], result["y"]))
