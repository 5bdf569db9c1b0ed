"""
Quantized gradient sampling with random dithering.

A channel byte is read as a position along a gradient running from ``start``
(level 0) to ``end`` (level ``max_level``)::

    x==start|   sample->|   |end
            |░░░|▒▒▒|▓▓▓|███|
    y==     0   1   2  *3*  4==max_level

Near the upper edge of each bin the result may jitter to the next level, with a
probability growing with the distance into the bin. The first two values of
every bin never jitter, which keeps a few exact reference values on the gradient.
"""

from typing import Optional

from ..utils.random import RandomSource, resolve_prng


def sample_quantized_gradient(
    sample: int,
    max_level: int,
    start: int,
    end: int,
    prng: Optional[RandomSource] = None,
) -> int:
    """
    Sample a quantized gradient and return the level at ``sample``.

    Exactly one random draw is consumed per call, whatever the sample.

    Args:
        sample: Position along the gradient (usually a channel byte)
        max_level: Highest level; the gradient has ``max_level + 1`` levels
        start: Position where the level is 0
        end: Position where the level is ``max_level``; may be below ``start``
            to invert the gradient
        prng: Random source, the shared sequence when omitted

    Returns:
        Level in ``[0, max_level]``
    """
    if max_level <= 0:
        raise ValueError(f"max_level must be positive, got {max_level}")
    if start == end:
        raise ValueError("Gradient start and end must differ")

    descending = start > end
    if descending:
        start, end = end, start

    x_delta = (end - start) // max_level
    if x_delta == 0:
        raise ValueError(
            f"Gradient range {start}..{end} too narrow for {max_level} levels"
        )

    x = max(sample - start, 0)

    rand = resolve_prng(prng).random_range(abs(x_delta - 2)) + 1
    y_jitter = 1 if x % x_delta > rand else 0

    y = min(max(x // x_delta + y_jitter, 0), max_level)

    if descending:
        y = max_level - y
    return y
