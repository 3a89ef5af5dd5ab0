"""Wait-duration sequences for the retry engine (milliseconds)."""

from __future__ import annotations

import math
from collections.abc import Iterator


def _check_positive(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise ValueError(f"{name} must be a positive number, got {value!r}")


def exponential(
    base: float,
    start_ms: float,
    max_ms: float,
    max_count: float = math.inf,
) -> Iterator[float]:
    """Yield exponentially growing waits, capped at ``max_ms``.

    The first wait is ``start_ms``. Each later wait is the previous one times
    ``base``, clamped to ``max_ms``. At most ``max_count`` values are yielded.

    Arguments are validated when the sequence is created, not on first use.
    """
    _check_positive("base", base)
    _check_positive("start_ms", start_ms)
    _check_positive("max_ms", max_ms)
    if isinstance(max_count, bool) or not isinstance(max_count, (int, float)) or max_count < 0:
        raise ValueError(f"max_count must be a non-negative number, got {max_count!r}")
    return _exponential(base, start_ms, max_ms, max_count)


def _exponential(base: float, start_ms: float, max_ms: float, max_count: float) -> Iterator[float]:
    value = start_ms
    count = 0
    while count < max_count:
        yield min(value, max_ms)
        count += 1
        # Stop growing once capped so an unbounded sequence cannot overflow
        if value < max_ms:
            value *= base


def constant(value_ms: float) -> Iterator[float]:
    """Yield ``value_ms`` forever."""
    while True:
        yield value_ms
