"""Event logging for the chunk stream and its server.

Every record is one line: ``level=debug ts=... logger=delve.world
event=chunk_generated cx=3 cy=-1 ...`` or, with ``DELVE_LOG_JSON=1``, the
same fields as a JSON object. Lines go to stdout, errors to stderr.

    log = get_logger("delve.world").bind(seed=world_seed)
    log.debug(event="chunk_generated", cx=3, cy=-1, rooms=2)

``DELVE_LOG_LEVEL`` (debug/info/warn/error) sets the threshold; chunk
generation and window updates log at debug, so the default ``info`` keeps a
streaming server quiet.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("DELVE_LOG_LEVEL", "info").lower(), LEVELS["info"])
JSON_MODE = os.getenv("DELVE_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def _text_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (tuple, list)):
        # chunk coordinates and edge lists: (3, -1) -> 3,-1
        return ",".join(_text_value(v) for v in value)
    return str(value).replace(" ", "_")


def _format(level: str, **fields) -> str:
    stamp = int(time.time())
    present = {k: v for k, v in fields.items() if v is not None}
    if JSON_MODE:
        record = {"level": level, "ts": stamp, **present}
        try:
            return json.dumps(record, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": stamp, "error": "json_encode_failed"})
    head = [f"level={level}", f"ts={stamp}"]
    return " ".join(head + [f"{k}={_text_value(v)}" for k, v in present.items()])


class StructuredLogger:
    def __init__(self, name: str, context: dict | None = None):
        self.name = name
        self.context = dict(context or {})

    def bind(self, **context) -> "StructuredLogger":
        """Child logger that adds ``context`` to every record it emits."""
        return StructuredLogger(self.name, {**self.context, **context})

    def enabled(self, level: str) -> bool:
        return LEVELS[level] >= CURRENT_LEVEL

    def _emit(self, level: str, fields: dict) -> None:
        if not self.enabled(level):
            return
        line = _format(level, **{"logger": self.name, **self.context, **fields})
        print(line, file=sys.stderr if level == "error" else sys.stdout)

    def debug(self, **fields):
        self._emit("debug", fields)

    def info(self, **fields):
        self._emit("info", fields)

    def warn(self, **fields):
        self._emit("warn", fields)

    def error(self, **fields):
        self._emit("error", fields)


_LOGGERS: dict = {}


def get_logger(name: str) -> StructuredLogger:
    if name not in _LOGGERS:
        _LOGGERS[name] = StructuredLogger(name)
    return _LOGGERS[name]


log = get_logger("delve")
