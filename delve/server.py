"""
project: Delve
module: server.py
License: MIT

Server bootstrap.

Starts the Socket.IO server and configures stdlib logging to the console
and a rotating file under ``instance/``.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from delve import app, socketio
from delve.routes.world_api import get_world


def start_server(host="0.0.0.0", port=5000, debug: bool = False, prewarm: bool = True):  # pragma: no cover (runtime only)
    """Start the Socket.IO server.

    With ``prewarm`` the spawn window around chunk (0, 0) is generated before
    the first client connects.
    """
    with app.app_context():
        _configure_logging()
        if prewarm:
            world = get_world()
            world.update_window(0, 0)
            logging.getLogger("delve.server").info(
                "World ready (seed=%s, chunks=%d)", world.world_seed, len(world.chunks)
            )
    try:
        print(f"[INFO] Starting Socket.IO server on {host}:{port} (async_mode={socketio.async_mode})")
        socketio.run(app, host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(log_dir=None):
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/app.log. Retains a few backups to avoid growth.
    Safe to call repeatedly: existing root handlers are replaced.
    """
    log_dir = log_dir or app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "app.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
