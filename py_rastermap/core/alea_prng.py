"""
Alea PRNG used as the shared deterministic random sequence.

Based on Johannes Baagøe's Alea algorithm. Raster imports draw from it in a fixed
tile order, so two passes over the same image with the same seed produce the
same map.
"""

_TWO_POW_32 = 0x100000000
_TWO_POW_MINUS_32 = 2.3283064365386963e-10


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Seed hashing function; keeps its running state between calls."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        for char in str(data):
            self.n += ord(char)
            h = 0.02519603282416938 * self.n
            self.n = _uint32(h)
            h -= self.n
            h *= self.n
            self.n = _uint32(h)
            h -= self.n
            self.n += h * _TWO_POW_32
        return _uint32(self.n) * _TWO_POW_MINUS_32


class AleaPRNG:
    """
    Alea generator exposing both float and 32-bit integer draws.

    ``random_range`` follows the multiply-shift reduction used by tile games
    (``(next_uint32() * limit) >> 32``), so a limit of zero yields zero and
    every call consumes exactly one draw.
    """

    def __init__(self, seed):
        """Initialize with seed string, number or an iterable of either."""
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 = self._subtract_wrapped(self.s0, mash(arg))
            self.s1 = self._subtract_wrapped(self.s1, mash(arg))
            self.s2 = self._subtract_wrapped(self.s2, mash(arg))

    @staticmethod
    def _subtract_wrapped(state: float, value: float) -> float:
        state -= value
        if state < 0:
            state += 1
        return state

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_MINUS_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def next_uint32(self) -> int:
        """Generate next raw 32-bit value."""
        return _uint32(self.random() * _TWO_POW_32)

    def random_range(self, limit: int) -> int:
        """Generate an integer in [0, limit) (0 when limit is 0)."""
        if limit < 0:
            raise ValueError(f"random_range limit must be non-negative, got {limit}")
        return (self.next_uint32() * limit) >> 32
