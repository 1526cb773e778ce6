import pytest

import srflp.rng as rng_module
from srflp.rng import expand_seed, seeded_rng


def test_expand_seed_mixes_both_byte_orders():
    seed = 0x0102030405060708090A0B0C0D0E0F10
    state = expand_seed(seed)
    assert len(state) == 32
    assert state[:16] == seed.to_bytes(16, "big")
    # little-endian bytes written backwards from the end
    assert state[16:][::-1] == seed.to_bytes(16, "little")


def test_expand_seed_small_seed_has_no_zero_half():
    state = expand_seed(1)
    assert state[15] == 1 and state[31] == 1


@pytest.mark.parametrize("seed", [-1, 1 << 128])
def test_expand_seed_rejects_out_of_range(seed):
    with pytest.raises(ValueError):
        expand_seed(seed)


def test_same_seed_same_stream():
    a = seeded_rng(123456789).integers(0, 10**6, size=20)
    b = seeded_rng(123456789).integers(0, 10**6, size=20)
    assert a.tolist() == b.tolist()


def test_different_seeds_differ():
    a = seeded_rng(1).integers(0, 10**9, size=8)
    b = seeded_rng(2).integers(0, 10**9, size=8)
    assert a.tolist() != b.tolist()


def test_missing_seed_uses_wall_clock(monkeypatch):
    monkeypatch.setattr(rng_module, "wall_clock_seed", lambda: 77)
    assert seeded_rng(None).normal(size=5).tolist() == seeded_rng(77).normal(size=5).tolist()


def test_missing_seed_at_distinct_times_differs(monkeypatch):
    ticks = iter([1_700_000_000_000, 1_700_000_000_001])
    monkeypatch.setattr(rng_module, "wall_clock_seed", lambda: next(ticks))
    a = seeded_rng().integers(0, 10**9, size=8)
    b = seeded_rng().integers(0, 10**9, size=8)
    assert a.tolist() != b.tolist()
