import pytest

from delve.world.chunk import Chunk
from delve.world.connections import EAST, EDGES, NORTH, SOUTH, WEST
from delve.world.tiles import CORRIDOR, FLOOR, WALL
from tests.world_test_utils import corridor_offsets


class _RecordingGenerator:
    """Carves one corridor tile on the north edge and nothing else."""

    def __init__(self, x=10):
        self.x = x
        self.calls = []

    def populate(self, chunk):
        self.calls.append(chunk.coord)
        chunk.fill(WALL)
        chunk.set_tile(self.x, 0, CORRIDOR)
        return "report"


def test_origin_chunk_layout():
    c = Chunk(0, 0, 32)
    mid = 16
    assert c.is_origin
    assert c.tile(mid, mid) == FLOOR
    # room of side size - 4, inset by 2
    assert c.tile(2, 2) == FLOOR
    assert c.tile(29, 29) == FLOOR
    assert c.tile(1, 1) == WALL
    assert c.open_edges() == list(EDGES)
    # three-wide lanes on the midline, widened by one on each side
    for edge in EDGES:
        assert corridor_offsets(c, edge) == set(range(mid - 2, mid + 3))


def test_origin_ignores_generator_and_seed():
    gen = _RecordingGenerator()
    c = Chunk(0, 0, 32, gen)
    assert gen.calls == []
    assert c.report is None
    assert c.grid == Chunk(0, 0, 32).grid


def test_origin_lane_width_is_configurable():
    c = Chunk(0, 0, 32, origin_lane_width=5)
    assert corridor_offsets(c, NORTH) == set(range(13, 20))


def test_generator_is_delegated_once():
    gen = _RecordingGenerator()
    c = Chunk(4, -2, 32, gen)
    assert gen.calls == [(4, -2)]
    assert c.report == "report"


def test_smoothing_widens_without_cascading():
    c = Chunk(1, 1, 32, _RecordingGenerator(x=10))
    assert corridor_offsets(c, NORTH) == {9, 10, 11}
    for x in (9, 10, 11):
        assert c.tile(x, 1) == CORRIDOR
    assert c.tile(8, 1) == WALL
    assert c.open_edges() == [NORTH]


def test_smoothing_clips_at_corner():
    c = Chunk(1, 1, 32, _RecordingGenerator(x=0))
    assert corridor_offsets(c, NORTH) == {0, 1}
    # the west edge picked up the corner tile and its inboard neighbour
    assert 0 in corridor_offsets(c, WEST)


def test_fallback_generator_when_none_supplied():
    c = Chunk(3, 4, 32)
    assert c.report is not None
    assert c.report.seed is None
    assert len(c.grid) == 32 and all(len(col) == 32 for col in c.grid)
    assert set(c.open_edges()) == set(EDGES)


def test_tile_round_trip():
    c = Chunk(2, 2, 16, _RecordingGenerator())
    for lx in range(16):
        for ly in range(16):
            value = (lx + ly) % 5
            c.set_tile(lx, ly, value)
            assert c.tile(lx, ly) == value


def test_out_of_range_access_never_raises():
    c = Chunk(2, 2, 16, _RecordingGenerator())
    assert c.tile(-1, 0) is None
    assert c.tile(0, 16) is None
    assert c.tile(100, -100) is None
    before = [col[:] for col in c.grid]
    c.set_tile(16, 0, FLOOR)
    c.set_tile(-1, -1, FLOOR)
    assert c.grid == before


def test_rows_and_ascii_are_row_major():
    c = Chunk(0, 0, 16)
    rows = c.rows()
    assert len(rows) == 16
    assert all(rows[y][x] == c.grid[x][y] for x in range(16) for y in range(16))
    lines = c.to_ascii().splitlines()
    assert len(lines) == 16 and all(len(line) == 16 for line in lines)
    assert lines[8][8] == "."


def test_edge_tiles_order_and_unknown_edge():
    c = Chunk(0, 0, 16)
    assert c.edge_tiles(SOUTH) == [c.grid[x][15] for x in range(16)]
    assert c.edge_tiles(EAST) == [c.grid[15][y] for y in range(16)]
    with pytest.raises(ValueError):
        c.edge_tiles("up")
