"""Retry engine with exponential backoff for Messages API calls.

Honors ``retry-after`` headers from rate limited responses.
"""

from __future__ import annotations

import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import anyio

from .errors import RateLimitError, SDKError

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings.

    With ``jitter`` enabled the delay is uniform in
    ``[0.5 * computed, computed]``.
    """

    max_retries: int = 2
    initial_delay: float = 0.5
    max_delay: float = 8.0
    backoff_factor: float = 2.0
    jitter: bool = True

    def compute_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-indexed)."""
        delay = min(self.initial_delay * (self.backoff_factor**attempt), self.max_delay)
        if self.jitter:
            delay = delay * (0.5 + random.random() * 0.5)  # noqa: S311
        return delay


OnRetryCallback = Callable[[int, SDKError, float], Awaitable[None] | None]


async def retry_with_policy(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    on_retry: OnRetryCallback | None = None,
) -> T:
    """Run ``fn`` until it succeeds, retrying errors flagged ``retryable``.

    Args:
        fn: Async callable to execute.
        policy: Backoff configuration.
        on_retry: Called with ``(attempt, error, delay)`` before each sleep.

    Raises:
        SDKError: The last error once retries are exhausted, or the first
            non-retryable one.
        ValueError: If ``policy.max_retries`` is negative.
    """
    if policy.max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {policy.max_retries}")

    attempt = 0
    while True:
        try:
            return await fn()
        except SDKError as exc:
            if not exc.retryable or attempt >= policy.max_retries:
                raise

            delay = policy.compute_delay(attempt)
            if isinstance(exc, RateLimitError) and exc.retry_after is not None:
                delay = max(delay, exc.retry_after)

            if on_retry is not None:
                result = on_retry(attempt, exc, delay)
                if isinstance(result, Awaitable):
                    await result

            await anyio.sleep(delay)
            attempt += 1
