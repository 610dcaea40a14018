import hashlib
import os
import random
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

SEED_MAX = 9223372036854775807


@dataclass
class WorldConfig:
    chunk_size: int = 32
    view_distance: int = 1
    unload_margin: int = 2
    min_edge_connections: int = 2
    connection_width: int = 7
    origin_lane_width: int = 3
    open_chance_explored: float = 0.7
    open_chance_unexplored: float = 1.0
    min_rooms: int = 2
    max_rooms: int = 4
    min_room_size: int = 4
    max_room_size: int = 9
    seed: Optional[int] = None

    def __post_init__(self):
        if self.seed is not None:
            self.seed = coerce_seed(self.seed)
        if self.chunk_size < 16:
            raise ValueError(f"chunk_size must be >= 16 (got {self.chunk_size})")
        if self.view_distance < 0:
            raise ValueError("view_distance must be >= 0")
        if self.unload_margin < 0:
            raise ValueError("unload_margin must be >= 0")
        if not 0 <= self.min_edge_connections <= 4:
            raise ValueError("min_edge_connections must be between 0 and 4")
        # openings widened by the seam smoothing pass must stay clear of corners
        for name in ("connection_width", "origin_lane_width"):
            width = getattr(self, name)
            if width < 1 or width > self.chunk_size - 6:
                raise ValueError(f"{name} must be between 1 and chunk_size - 6 (got {width})")
        if not 1 <= self.min_rooms <= self.max_rooms:
            raise ValueError("room count bounds must satisfy 1 <= min_rooms <= max_rooms")
        # rooms keep a 1-tile margin on both sides of the chunk
        if not 1 <= self.min_room_size <= self.max_room_size <= self.chunk_size - 3:
            raise ValueError("room size bounds must satisfy 1 <= min_room_size <= max_room_size <= chunk_size - 3")

    @property
    def unload_distance(self) -> int:
        return self.view_distance + self.unload_margin

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]] = None) -> "WorldConfig":
        """Build a config from a plain dict, ignoring unknown keys and ``None`` values."""
        if not mapping:
            return cls()
        kwargs = {}
        for f in fields(cls):
            if f.name not in mapping or mapping[f.name] is None:
                continue
            raw = mapping[f.name]
            if f.name == "seed":
                kwargs["seed"] = coerce_seed(raw)
            elif f.type in (float, "float"):
                kwargs[f.name] = float(raw)
            else:
                kwargs[f.name] = int(raw)
        return cls(**kwargs)

    @classmethod
    def from_environment(cls, prefix: str = "DELVE") -> "WorldConfig":
        """Read ``<PREFIX>_<FIELD>`` variables (``DELVE_CHUNK_SIZE``...).

        The seed is read from ``<PREFIX>_WORLD_SEED``.
        """
        mapping = {}
        for f in fields(cls):
            env_key = f"{prefix}_WORLD_SEED" if f.name == "seed" else f"{prefix}_{f.name.upper()}"
            val = os.environ.get(env_key)
            if val is not None and val.strip() != "":
                mapping[f.name] = val.strip()
        return cls.from_mapping(mapping)


def coerce_seed(value) -> int:
    """Convert a provided seed (int or str) into a bounded non-negative int.

    ``None`` or an empty string yields a fresh random seed; non-numeric
    strings are hashed so the same phrase always names the same world.
    """
    if value is None:
        return random.randint(1, 2**31 - 1)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value % SEED_MAX
    if isinstance(value, float):
        return int(value) % SEED_MAX
    s = str(value).strip()
    if not s:
        return random.randint(1, 2**31 - 1)
    if s.lstrip("-").isdigit():
        return int(s) % SEED_MAX
    h = hashlib.sha256(s.encode("utf-8")).digest()
    return int.from_bytes(h[:8], "big") % SEED_MAX


__all__ = ["WorldConfig", "coerce_seed", "SEED_MAX"]
