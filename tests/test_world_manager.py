import pytest

from delve.world import ChunkManager, WorldConfig
from delve.world.connections import EDGES, NORTH, EdgeConnection
from delve.world.metrics import init_metrics
from delve.world.simple_generator import StandaloneGenerator
from delve.world.tiles import FLOOR
from tests.world_test_utils import TEST_SEED, make_manager, window


def test_window_has_nine_chunks(manager):
    update = manager.update_window(0, 0)
    assert len(manager.chunks) == 9
    assert manager.loaded_coords() == sorted(window(0, 0, 1))
    # row-major: dy outer, dx inner
    assert update.created == window(0, 0, 1)
    assert update.evicted == []


def test_window_size_follows_view_distance():
    m = make_manager(view_distance=2)
    m.update_window(0, 0)
    assert len(m.chunks) == 25
    m0 = make_manager(view_distance=0)
    m0.update_window(3, -3)
    assert m0.loaded_coords() == [(3, -3)]


def test_update_window_is_idempotent(manager):
    seen = []
    manager.on_chunk_created(lambda cx, cy: seen.append((cx, cy)))
    manager.update_window(0, 0)
    assert len(seen) == 9
    second = manager.update_window(0, 0)
    assert second.created == [] and second.evicted == []
    assert len(seen) == 9
    assert len(manager.chunks) == 9


def test_eviction_beyond_unload_distance(manager):
    manager.update_window(0, 0)
    update = manager.update_window(5, 5)
    assert manager.get_chunk(0, 0) is None
    assert not manager.has_chunk(0, 0)
    assert sorted(update.evicted) == sorted(window(0, 0, 1))
    assert len(manager.chunks) == 9
    assert manager.tile_at(16, 16) is None


def test_margin_retains_recent_chunks(manager):
    manager.update_window(0, 0)
    update = manager.update_window(2, 0)
    # (-1, y) is 3 away from the new center: within view + margin
    assert update.evicted == []
    assert manager.has_chunk(-1, 0)
    assert len(manager.chunks) == 15
    update = manager.update_window(3, 0)
    assert sorted(update.evicted) == [(-1, -1), (-1, 0), (-1, 1)]


def test_tile_at_uses_floor_division_and_euclidean_modulo(manager):
    manager.update_window(0, 0)
    n = manager.chunk_size
    assert manager.chunk_of(-1, -1) == (-1, -1)
    assert manager.chunk_of(-33, 32) == (-2, 1)
    assert manager.chunk_of(31, 0) == (0, 0)
    assert manager.tile_at(-1, -1) == manager.get_chunk(-1, -1).tile(n - 1, n - 1)
    assert manager.tile_at(-n, 5) == manager.get_chunk(-1, 0).tile(0, 5)
    assert manager.tile_at(n + 3, -2) == manager.get_chunk(1, -1).tile(3, n - 2)


def test_tile_at_never_generates():
    m = ChunkManager(WorldConfig(seed=TEST_SEED))
    assert m.tile_at(0, 0) is None
    assert m.tile_at(-500, 900) is None
    assert m.chunks == {}
    assert not m.is_walkable(0, 0)


def test_origin_is_safe_spawn_for_any_seed():
    for seed in (0, 1, 99, 2**40):
        m = make_manager(seed)
        m.update_window(0, 0)
        assert m.tile_at(16, 16) == FLOOR
        assert m.is_walkable(16, 16)
        assert m.get_chunk(0, 0).open_edges() == list(EDGES)


def test_seed_zero_is_kept():
    assert make_manager(0).world_seed == 0


def test_random_seed_when_unset():
    m = ChunkManager()
    assert isinstance(m.world_seed, int)
    assert m.world_seed >= 1


def test_origin_exits_recorded_before_generation():
    m = make_manager()
    for edge in EDGES:
        assert m.connection_of((0, 0), edge) == EdgeConnection(16, 3)
    assert m.adjacent_connection_of((0, -1), "south") == EdgeConnection(16, 3)
    assert m.metrics["connections_recorded"] == 4


def test_registry_outlives_eviction(manager):
    manager.update_window(0, 0)
    recorded = manager.connections.for_chunk(1, 1)
    assert recorded
    manager.update_window(10, 10)
    assert manager.get_chunk(1, 1) is None
    assert manager.connections.for_chunk(1, 1) == recorded


def test_record_and_query_connections(manager):
    manager.record_connection((7, 7), NORTH, 10, 5)
    assert manager.connection_of((7, 7), NORTH) == EdgeConnection(10, 5)
    assert manager.adjacent_connection_of((7, 6), "south") == EdgeConnection(10, 5)
    assert manager.adjacent_connection_of((7, 6), NORTH) is None


def test_listener_receives_each_new_chunk_once(manager):
    seen = []

    @manager.on_chunk_created
    def _spawn(cx, cy):
        # the chunk is already readable when the notification fires
        assert manager.has_chunk(cx, cy)
        seen.append((cx, cy))

    manager.update_window(0, 0)
    manager.update_window(1, 0)
    assert seen[:9] == window(0, 0, 1)
    assert sorted(seen[9:]) == [(2, -1), (2, 0), (2, 1)]


def test_remove_listener(manager):
    seen = []

    def cb(cx, cy):
        seen.append((cx, cy))

    manager.on_chunk_created(cb)
    manager.on_chunk_created(cb)
    manager.remove_listener(cb)
    manager.remove_listener(cb)
    manager.update_window(0, 0)
    assert seen == []


def test_failing_listener_does_not_abort_streaming(manager, capsys):
    seen = []

    def broken(cx, cy):
        raise RuntimeError("spawner exploded")

    manager.on_chunk_created(broken)
    manager.on_chunk_created(lambda cx, cy: seen.append((cx, cy)))
    manager.update_window(0, 0)
    assert len(manager.chunks) == 9
    assert len(seen) == 9
    assert manager.metrics["listener_errors"] == 9
    assert "chunk_listener_failed" in capsys.readouterr().err


def test_metrics_track_streaming(manager):
    manager.update_window(0, 0)
    manager.update_window(0, 0)
    manager.update_window(6, 0)
    m = manager.metrics
    assert set(init_metrics()) <= set(m)
    assert m["window_updates"] == 3
    assert m["chunks_generated"] == 18
    assert m["chunks_evicted"] == 9
    assert m["generation_ms_total"] >= m["last_generation_ms"] >= 0.0
    summary = manager.summary()
    assert summary["seed"] == TEST_SEED
    assert summary["loaded"] == 9


def test_unseeded_manager_uses_standalone_strategy():
    m = ChunkManager(WorldConfig(seed=1), seeded=False)
    assert isinstance(m.generator, StandaloneGenerator)
    m.update_window(2, 2)
    assert all(m.get_chunk(*c).report.seed is None for c in window(2, 2, 1))


@pytest.mark.parametrize("center", [(0, 0), (-3, 2), (100, -100)])
def test_every_window_chunk_is_full_size(manager, center):
    manager.update_window(*center)
    n = manager.chunk_size
    for coord in window(*center, 1):
        chunk = manager.get_chunk(*coord)
        assert len(chunk.grid) == n and all(len(col) == n for col in chunk.grid)
