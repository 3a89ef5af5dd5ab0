"""Retry - Backoff sequences and the async retry engine."""

from hub_ci_status.retry.backoff import constant, exponential
from hub_ci_status.retry.engine import (
    DEFAULT_MIN_WAIT_MS,
    RetryPolicy,
    default_wait_ms,
    retry_async,
)

__all__ = [
    "DEFAULT_MIN_WAIT_MS",
    "RetryPolicy",
    "constant",
    "default_wait_ms",
    "exponential",
    "retry_async",
]
