"""Retry with exponential backoff for transient transport failures."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

import structlog

logger = structlog.get_logger("rentfly.client.retry")


class RetryPolicy:
    """Retry policy with exponential backoff.

    ``max_attempts=1`` means a single call and no retry, which is the
    default for platform calls.

    Args:
        max_attempts: Maximum number of attempts (including the first).
        base_delay: Base delay between retries (doubled each attempt).
        retry_on: Tuple of exception types to retry on. Defaults to all.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: timedelta = timedelta(seconds=1),
        retry_on: tuple[type[Exception], ...] = (Exception,),
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._max_attempts = max_attempts
        self._base_delay = base_delay.total_seconds()
        self._retry_on = retry_on

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    async def execute(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        """Execute a function with retry logic."""
        last_exception: Exception | None = None

        for attempt in range(self._max_attempts):
            try:
                return await func(*args, **kwargs)
            except self._retry_on as exc:
                last_exception = exc
                if attempt < self._max_attempts - 1:
                    delay = self._base_delay * (2 ** attempt)
                    logger.warning(
                        "retrying_call",
                        attempt=attempt + 1,
                        max_attempts=self._max_attempts,
                        delay_seconds=delay,
                        error=repr(exc),
                    )
                    await asyncio.sleep(delay)

        raise last_exception  # type: ignore[misc]
