"""Circuit breaker for platform calls."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from datetime import timedelta
from enum import Enum, auto
from typing import Any

import structlog

from rentfly.kernel.exceptions import CircuitBreakerException

logger = structlog.get_logger("rentfly.client.circuit_breaker")


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = auto()
    OPEN = auto()
    HALF_OPEN = auto()


class CircuitBreaker:
    """Circuit breaker that stops calling a failing platform.

    Tracks consecutive failures and opens the circuit when the threshold
    is reached. After a recovery timeout, allows a single probe request
    (half-open state). If it succeeds, the circuit closes; if it fails,
    it re-opens.

    Exceptions always count as failures. Results count as failures when
    *is_failure* returns True for them; they are still returned to the
    caller unchanged.

    Args:
        name: Label used in log events and error messages.
        failure_threshold: Number of consecutive failures before opening.
        recovery_timeout: How long to wait before allowing a probe request.
        is_failure: Predicate over successful results, e.g. server error responses.
    """

    def __init__(
        self,
        name: str = "rentey",
        failure_threshold: int = 5,
        recovery_timeout: timedelta = timedelta(seconds=30),
        is_failure: Callable[[Any], bool] | None = None,
    ) -> None:
        self._name = name
        self._is_failure = is_failure
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout.total_seconds()
        self._failure_count = 0
        self._last_failure_time: float | None = None
        self._state = CircuitState.CLOSED

    @property
    def state(self) -> CircuitState:
        """Current circuit state, accounting for recovery timeout."""
        if self._state == CircuitState.OPEN and self._last_failure_time is not None:
            if time.monotonic() - self._last_failure_time >= self._recovery_timeout:
                return CircuitState.HALF_OPEN
        return self._state

    async def call(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        """Execute a function through the circuit breaker."""
        if self.state == CircuitState.OPEN:
            raise CircuitBreakerException(
                f"Circuit breaker '{self._name}' is open",
                context={"failures": self._failure_count},
            )

        try:
            result = await func(*args, **kwargs)
        except CircuitBreakerException:
            raise
        except Exception:
            self._on_failure()
            raise
        if self._is_failure is not None and self._is_failure(result):
            self._on_failure()
        else:
            self._on_success()
        return result

    def _on_success(self) -> None:
        if self._state != CircuitState.CLOSED:
            logger.info("circuit_closed", circuit=self._name)
        self._failure_count = 0
        self._state = CircuitState.CLOSED
        self._last_failure_time = None

    def _on_failure(self) -> None:
        self._failure_count += 1
        self._last_failure_time = time.monotonic()
        if self._failure_count >= self._failure_threshold and self._state != CircuitState.OPEN:
            logger.warning("circuit_opened", circuit=self._name, failures=self._failure_count)
            self._state = CircuitState.OPEN
