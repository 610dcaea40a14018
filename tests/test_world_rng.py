from delve.world import rng


def test_hash_coords_matches_reference_values():
    assert rng.hash_coords(0, 0) == 0
    assert rng.hash_coords(1, 0) == 73856093
    assert rng.hash_coords(0, 1) == 19349663
    # negative coordinates are masked to a non-negative value
    assert rng.hash_coords(-1, 0) == 2**31 - 73856093
    for cx in range(-5, 6):
        for cy in range(-5, 6):
            assert 0 <= rng.hash_coords(cx, cy) <= 0x7FFFFFFF


def test_chunk_seed_is_pure():
    assert rng.chunk_seed(1, 0, 5) == 73856093 ^ 5
    assert rng.chunk_seed(3, -2, 99) == rng.chunk_seed(3, -2, 99)
    assert rng.chunk_seed(0, 0, 12345) == 12345


def test_seeded_fraction_range_and_determinism():
    values = [rng.seeded_fraction(s) for s in range(2000)]
    assert values == [rng.seeded_fraction(s) for s in range(2000)]
    assert all(0.0 <= v < 1.0 for v in values)
    assert len(set(values)) > 1990
    mean = sum(values) / len(values)
    assert 0.45 < mean < 0.55


def test_seeded_fraction_handles_large_and_negative_seeds():
    for s in (-1, -(2**40), 2**63 - 1, 2**70):
        assert 0.0 <= rng.seeded_fraction(s) < 1.0


def test_seeded_range_is_inclusive():
    seen = {rng.seeded_range(s, 2, 4) for s in range(500)}
    assert seen == {2, 3, 4}
    assert rng.seeded_range(10, 5, 5) == 5
    assert rng.seeded_index(10, 0) == 0
    assert all(0 <= rng.seeded_index(s, 3) < 3 for s in range(200))
