"""Tests for quantized gradient sampling."""

import pytest

from py_rastermap.core.alea_prng import AleaPRNG
from py_rastermap.core.gradient import sample_quantized_gradient

LOWER = 0x0F
UPPER = 0xF0


class TestGuardBand:
    """Values near the start of a bin never jitter."""

    @pytest.mark.parametrize("sample", [0, LOWER, LOWER + 1])
    def test_bin_start_is_fixed(self, sample, low_random):
        # Even with the most eager dithering the first two values stay put
        assert sample_quantized_gradient(sample, 1, LOWER, UPPER, low_random) == 0

    def test_last_value_of_bin_always_jitters(self, high_random):
        # Offset delta - 1 beats the largest possible random threshold
        delta = UPPER - LOWER
        sample = LOWER + delta - 1
        assert sample_quantized_gradient(sample, 1, LOWER, UPPER, high_random) == 1

    def test_dithering_depends_on_draw(self, low_random, high_random):
        delta = UPPER - LOWER
        sample = LOWER + delta - 2

        assert sample_quantized_gradient(sample, 1, LOWER, UPPER, low_random) == 1
        assert sample_quantized_gradient(sample, 1, LOWER, UPPER, high_random) == 0

    def test_interior_levels(self, high_random):
        # 3 levels over 0x0F..0xF0 gives bins of 75
        assert sample_quantized_gradient(LOWER + 75, 3, LOWER, UPPER, high_random) == 1
        assert sample_quantized_gradient(LOWER + 150, 3, LOWER, UPPER, high_random) == 2
        assert sample_quantized_gradient(LOWER + 149, 3, LOWER, UPPER, high_random) == 2


class TestClamping:
    """Samples outside the gradient are clamped."""

    @pytest.mark.parametrize("max_level", [1, 3, 4, 6])
    def test_far_past_end(self, max_level, low_random):
        assert sample_quantized_gradient(0xFF, max_level, LOWER, UPPER, low_random) == max_level

    @pytest.mark.parametrize("max_level", [1, 3, 4, 6])
    def test_below_start(self, max_level, low_random):
        assert sample_quantized_gradient(0, max_level, LOWER, UPPER, low_random) == 0

    def test_result_always_in_range(self):
        prng = AleaPRNG("clamp")
        for sample in range(256):
            level = sample_quantized_gradient(sample, 4, LOWER, UPPER, prng)
            assert 0 <= level <= 4


class TestReversedGradient:
    """Swapping start and end inverts the level."""

    @pytest.mark.parametrize("sample", [0, 0x10, 0x40, 0x80, 0xC0, 0xF0, 0xFF])
    def test_inverted_level(self, sample, sequence_random):
        forward = sample_quantized_gradient(
            sample, 3, LOWER, UPPER, sequence_random([0x12345678])
        )
        backward = sample_quantized_gradient(
            sample, 3, UPPER, LOWER, sequence_random([0x12345678])
        )
        assert backward == 3 - forward

    def test_bright_red_is_bare_ground(self, high_random):
        assert sample_quantized_gradient(0xFF, 3, UPPER, LOWER, high_random) == 0


class TestRandomConsumption:
    """Every call draws exactly once."""

    def test_one_draw_per_call(self):
        prng = AleaPRNG("draws")
        for i, sample in enumerate([0, 0x10, 0x80, 0xFF], start=1):
            sample_quantized_gradient(sample, 3, LOWER, UPPER, prng)
            assert prng.call_count == i

    def test_reproducible_with_same_seed(self):
        first = [sample_quantized_gradient(s, 6, LOWER, UPPER, AleaPRNG("seed")) for s in range(256)]
        second = [sample_quantized_gradient(s, 6, LOWER, UPPER, AleaPRNG("seed")) for s in range(256)]
        assert first == second

    def test_uses_shared_sequence_by_default(self):
        from py_rastermap.utils.random import get_prng, set_random_seed

        set_random_seed("shared")
        before = get_prng().call_count
        sample_quantized_gradient(0x80, 1, LOWER, UPPER)
        assert get_prng().call_count == before + 1


class TestInvalidParameters:

    def test_zero_levels(self, low_random):
        with pytest.raises(ValueError):
            sample_quantized_gradient(0x80, 0, LOWER, UPPER, low_random)

    def test_empty_range(self, low_random):
        with pytest.raises(ValueError):
            sample_quantized_gradient(0x80, 1, 0x80, 0x80, low_random)

    def test_range_too_narrow(self, low_random):
        with pytest.raises(ValueError):
            sample_quantized_gradient(1, 5, 0, 2, low_random)
