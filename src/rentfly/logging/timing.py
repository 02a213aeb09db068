# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Execution time logging for sync and async callables."""

from __future__ import annotations

import asyncio
import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

F = TypeVar("F", bound=Callable[..., Any])

logger = structlog.get_logger("rentfly.timing")


def log_execution_time(name: str | None = None) -> Callable[[F], F]:
    """Decorator that logs how long the wrapped function took, failures included.

    Usage:
        @log_execution_time()
        async def execute_booking(...): ...
    """

    def decorator(func: F) -> F:
        label = name or func.__qualname__

        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start = time.perf_counter()
                outcome = "error"
                try:
                    result = await func(*args, **kwargs)
                    outcome = "ok"
                    return result
                finally:
                    logger.info(
                        "execution_time",
                        function=label,
                        outcome=outcome,
                        elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
                    )

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            outcome = "error"
            try:
                result = func(*args, **kwargs)
                outcome = "ok"
                return result
            finally:
                logger.info(
                    "execution_time",
                    function=label,
                    outcome=outcome,
                    elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
                )

        return sync_wrapper  # type: ignore[return-value]

    return decorator
