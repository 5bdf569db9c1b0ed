"""Shared test helpers."""

import itertools

import pytest


class SequenceRandom:
    """Random source replaying a fixed cycle of 32-bit values."""

    def __init__(self, values):
        self._values = itertools.cycle(values)
        self.call_count = 0

    def next_uint32(self) -> int:
        self.call_count += 1
        return next(self._values) & 0xFFFFFFFF

    def random_range(self, limit: int) -> int:
        return (self.next_uint32() * limit) >> 32


@pytest.fixture
def low_random():
    """Smallest draws: dithering jitters as often as possible."""
    return SequenceRandom([0])


@pytest.fixture
def high_random():
    """Largest draws: dithering only jitters on the last value of a bin."""
    return SequenceRandom([0xFFFFFFFF])


@pytest.fixture
def sequence_random():
    """Factory for random sources replaying given values."""
    return SequenceRandom
