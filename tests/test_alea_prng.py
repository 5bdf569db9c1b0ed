"""Tests for the shared Alea random sequence."""

import pytest

from py_rastermap.core.alea_prng import AleaPRNG
from py_rastermap.utils.random import RandomSource, get_prng, resolve_prng, set_random_seed


class TestAleaPRNG:

    def test_same_seed_same_sequence(self):
        a, b = AleaPRNG("seed"), AleaPRNG("seed")
        assert [a.next_uint32() for _ in range(20)] == [b.next_uint32() for _ in range(20)]

    def test_different_seeds_differ(self):
        a, b = AleaPRNG("one"), AleaPRNG("two")
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_float_range(self):
        prng = AleaPRNG(12345)
        for _ in range(1000):
            assert 0 <= prng.random() < 1

    def test_uint32_range(self):
        prng = AleaPRNG("u32")
        values = [prng.next_uint32() for _ in range(1000)]
        assert all(0 <= v < 2**32 for v in values)
        assert len(set(values)) > 990

    @pytest.mark.parametrize("limit", [1, 2, 7, 223, 1 << 20])
    def test_random_range_bounds(self, limit):
        prng = AleaPRNG("range")
        assert all(0 <= prng.random_range(limit) < limit for _ in range(500))

    def test_zero_limit(self):
        prng = AleaPRNG("zero")
        assert prng.random_range(0) == 0
        assert prng.call_count == 1

    def test_negative_limit(self):
        with pytest.raises(ValueError):
            AleaPRNG("neg").random_range(-1)

    def test_call_count(self):
        prng = AleaPRNG("count")
        prng.random()
        prng.next_uint32()
        prng.random_range(10)
        assert prng.call_count == 3

    def test_iterable_seed(self):
        a, b = AleaPRNG(["a", 1]), AleaPRNG(["a", 1])
        assert a.random() == b.random()


class TestSharedSequence:

    def test_reseed_restarts_sequence(self):
        set_random_seed("shared")
        first = [get_prng().next_uint32() for _ in range(3)]
        set_random_seed("shared")
        assert [get_prng().next_uint32() for _ in range(3)] == first

    def test_resolve_prng(self):
        own = AleaPRNG("own")
        assert resolve_prng(own) is own
        assert resolve_prng(None) is get_prng()

    def test_protocol(self):
        assert isinstance(AleaPRNG("proto"), RandomSource)
