"""Generic retry engine for async operations.

An operation is invoked until a predicate over its result says to stop, the
deadline budget runs out, or the wait-duration sequence is exhausted. The
result of the last attempt is returned in every case; exceptions raised by
the operation propagate immediately.
"""

from __future__ import annotations

import asyncio
import inspect
import math
import time
from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from hub_ci_status.logging import get_logger
from hub_ci_status.retry.backoff import constant, exponential

logger = get_logger("retry")

T = TypeVar("T")

DEFAULT_MIN_WAIT_MS = 4000


def default_wait_ms() -> Iterator[float]:
    """Backoff used when a policy does not specify one: 4s doubling to 60s."""
    return exponential(2, 4000, 60000)


def default_should_retry(result: Any) -> bool:
    """Retry while the result is falsy."""
    return not result


def monotonic_ms() -> float:
    """Current time in milliseconds from a monotonic clock."""
    return time.monotonic() * 1000


@dataclass
class RetryPolicy:
    """How ``retry_async`` waits between attempts.

    Attributes:
        max_total_ms: Budget during which retries are attempted. The last wait
            is shortened so it never exceeds the budget.
        min_wait_ms: If less than this remains of the budget, the last result
            is returned instead of waiting.
        wait_ms: A constant wait, an iterable of waits, or None for the
            default exponential backoff.
        now: Clock returning milliseconds.
        sleep: Async function that waits the given number of *seconds*.
        should_retry: Predicate over an attempt's result.
    """

    max_total_ms: float = math.inf
    min_wait_ms: float = DEFAULT_MIN_WAIT_MS
    wait_ms: float | Iterable[float] | None = None
    now: Callable[[], float] = monotonic_ms
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    should_retry: Callable[[Any], bool] = default_should_retry


def _wait_iterator(wait_ms: float | Iterable[float] | None) -> Iterator[float]:
    if wait_ms is None:
        return default_wait_ms()
    if isinstance(wait_ms, (int, float)) and not isinstance(wait_ms, bool):
        return constant(wait_ms)
    if isinstance(wait_ms, Iterable) and not isinstance(wait_ms, (str, bytes)):
        return iter(wait_ms)
    raise TypeError(f"wait_ms must be a number or iterable, got {type(wait_ms).__name__}")


async def retry_async(
    operation: Callable[..., Awaitable[T] | T],
    policy: RetryPolicy | None = None,
    *args: Any,
    **kwargs: Any,
) -> T:
    """Call ``operation(*args, **kwargs)`` until ``policy.should_retry`` is false.

    The first attempt is made immediately.

    Args:
        operation: Function to retry. May return an awaitable or a plain value.
        policy: Retry policy. Defaults to ``RetryPolicy()``.
        *args: Positional arguments passed to every attempt.
        **kwargs: Keyword arguments passed to every attempt.

    Returns:
        The result of the last attempt.

    Raises:
        TypeError: If operation is not callable, policy is not a RetryPolicy,
            or policy.wait_ms is neither a number nor an iterable.
    """
    if not callable(operation):
        raise TypeError("operation must be callable")
    if policy is None:
        policy = RetryPolicy()
    elif not isinstance(policy, RetryPolicy):
        raise TypeError(f"policy must be a RetryPolicy, got {type(policy).__name__}")

    deadline = policy.now() + policy.max_total_ms if math.isfinite(policy.max_total_ms) else math.inf
    waits = _wait_iterator(policy.wait_ms)

    # True once a wait value has been taken and the sequence not yet exhausted
    holding_waits = False
    try:
        attempt = 0
        while True:
            attempt += 1
            result = operation(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            if not policy.should_retry(result):
                return result

            remaining = deadline - policy.now()
            if remaining < policy.min_wait_ms:
                logger.debug("retry budget exhausted after %d attempt(s)", attempt)
                return result

            try:
                wait = next(waits)
            except StopIteration:
                holding_waits = False
                logger.debug("wait sequence exhausted after %d attempt(s)", attempt)
                return result
            holding_waits = True

            delay_ms = min(wait, remaining)
            logger.debug("attempt %d: waiting %.0fms before retrying", attempt, delay_ms)
            await policy.sleep(delay_ms / 1000)
    finally:
        if holding_waits:
            close = getattr(waits, "close", None)
            if close is not None:
                close()
