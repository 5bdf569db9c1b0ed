"""
Random number generation utilities.

All raster classification randomness comes from one shared Alea sequence so
that imports are reproducible. Callers that need isolation (tests, synchronized
sessions) pass their own ``RandomSource`` instead of relying on the shared one.
"""

from typing import Protocol, runtime_checkable

from ..core.alea_prng import AleaPRNG

# Global PRNG instance
_prng = None


@runtime_checkable
class RandomSource(Protocol):
    """Minimal random interface consumed by the raster pipeline."""

    def random_range(self, limit: int) -> int:
        """Return an integer in [0, limit)."""
        ...

    def next_uint32(self) -> int:
        """Return a raw 32-bit value."""
        ...


def set_random_seed(seed: str) -> None:
    """
    Reseed the shared Alea PRNG.

    Args:
        seed: Seed string to use
    """
    global _prng
    _prng = AleaPRNG(seed)


def get_prng() -> AleaPRNG:
    """
    Get the shared Alea PRNG instance, creating it on first use.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        _prng = AleaPRNG("default")
    return _prng


def resolve_prng(prng=None) -> RandomSource:
    """Return ``prng`` if given, otherwise the shared sequence."""
    return prng if prng is not None else get_prng()
