#!/usr/bin/env python3
"""World structural diagnostics for specific seeds.

Usage:
  python scripts/diagnose_seeds.py 292372 730727 "deep halls"

Streams each seed's world along a fixed walk and checks minimum edge
connectivity, edge-to-room reachability, the spawn chunk, and seam
continuity. If no seeds are provided as CLI args, a default list is used.
Exits with non-zero status if structural issues are detected.
"""

from __future__ import annotations

import json
import os
import sys
from typing import List

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from delve.world import WorldConfig, coerce_seed  # noqa: E402 import after path fix
from delve.world.analysis import survey_seed  # noqa: E402 import after path fix

DEFAULT_SEEDS = [292372, 730727, 1, 42]


def run_for_seed(seed, config: WorldConfig | None = None) -> dict:
    return survey_seed(coerce_seed(seed), config=config or WorldConfig.from_environment())


def main(argv: List[str]) -> int:
    seeds = list(argv) if argv else DEFAULT_SEEDS
    results = [run_for_seed(s) for s in seeds]
    print(json.dumps({"results": results}, indent=2))
    # Non-zero exit if any failure
    if not all(r["ok"] for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
