from typing import Dict


def init_metrics() -> Dict[str, int | float]:
    return {
        'chunks_generated': 0,
        'chunks_evicted': 0,
        'window_updates': 0,
        'connections_recorded': 0,
        'connections_mirrored': 0,
        'listener_errors': 0,
        'last_generation_ms': 0.0,
        'generation_ms_total': 0.0,
    }
