"""
project: Delve
module: __init__.py
License: MIT

Flask application and Socket.IO setup.

Wires the Flask app, Flask-SocketIO and the world blueprint together.
Configuration is sourced from environment variables (optionally via a
local ``.env``) with defaults suited to development. A local ``instance/``
directory holds runtime files such as the rotating log.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO

# Load .env if present so `SECRET_KEY`, `WORLD_SEED`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # read-only checkouts still serve the API; only file logging is lost
    pass


def _env_int(name):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    # World settings; None falls through to DELVE_* variables, then defaults.
    WORLD_SEED=os.getenv("WORLD_SEED") or None,
    WORLD_CHUNK_SIZE=_env_int("WORLD_CHUNK_SIZE"),
    WORLD_VIEW_DISTANCE=_env_int("WORLD_VIEW_DISTANCE"),
    WORLD_UNLOAD_MARGIN=_env_int("WORLD_UNLOAD_MARGIN"),
    WORLD_MIN_EDGE_CONNECTIONS=_env_int("WORLD_MIN_EDGE_CONNECTIONS"),
    WORLD_BROADCAST_CHUNKS=os.getenv("WORLD_BROADCAST_CHUNKS", "1") == "1",
)

# Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    ping_interval=20,
    ping_timeout=10,
)

# Register HTTP blueprints and socket handlers after app/socketio exist
from delve.routes.world_api import bp_world  # noqa: E402

app.register_blueprint(bp_world)

from delve.websockets import world as _ws_world  # noqa: F401,E402


def create_app():
    """Return the configured Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500
