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
"""Single-flight, TTL-bound cache for the platform bearer token."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta

import structlog

from rentfly.kernel.exceptions import TokenAcquisitionException

logger = structlog.get_logger("rentfly.auth.token_cache")

DEFAULT_TTL = timedelta(minutes=5)
DEFAULT_FETCH_TIMEOUT = timedelta(minutes=5)


@dataclass(frozen=True)
class CachedToken:
    """Bearer value and its expiry on the monotonic clock."""

    value: str
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at


class TokenCache:
    """Supplies the bearer token shared by every outbound call.

    A fresh cached token is returned as is. Otherwise exactly one fetch runs,
    however many callers are waiting: they all await the same pending future
    and receive the same token, or the same ``TokenAcquisitionException``.
    A failed fetch leaves the cache empty so the next call fetches again.

    The fetcher is a blocking callable (the authenticate HTTP call). It runs
    on a bounded thread pool and is awaited for at most ``fetch_timeout``.

    Args:
        fetcher: Blocking callable returning the bearer token.
        ttl: How long a fetched token is served before fetching again.
        fetch_timeout: Ceiling on a single fetch.
        executor: Pool running the fetcher. A two-worker pool is created
            (and owned) when omitted. A fetch abandoned on timeout keeps its
            worker busy, so the pool needs a spare worker for the next fetch.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        fetcher: Callable[[], str],
        ttl: timedelta = DEFAULT_TTL,
        fetch_timeout: timedelta = DEFAULT_FETCH_TIMEOUT,
        executor: Executor | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._ttl = ttl.total_seconds()
        self._fetch_timeout = fetch_timeout.total_seconds()
        self._owns_executor = executor is None
        self._executor = executor if executor is not None else ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="rentfly-token"
        )
        self._clock = clock
        self._current: CachedToken | None = None
        self._pending: asyncio.Future[str] | None = None

    @property
    def current(self) -> CachedToken | None:
        """The cached token, fresh or not."""
        return self._current

    async def get_token(self) -> str:
        """Return a fresh bearer token, fetching one if needed."""
        current = self._current
        if current is not None and current.is_fresh(self._clock()):
            return current.value

        # No await between the check and the assignment: one pending fetch at a time.
        if self._pending is None or self._pending.done():
            self._pending = asyncio.ensure_future(self._refresh())
        return await asyncio.shield(self._pending)

    def invalidate(self) -> None:
        """Forget the cached token; the next call fetches a new one."""
        if self._current is not None:
            logger.info("token_invalidated")
        self._current = None

    async def _refresh(self) -> str:
        loop = asyncio.get_running_loop()
        started = self._clock()
        try:
            value = await asyncio.wait_for(
                loop.run_in_executor(self._executor, self._fetcher),
                timeout=self._fetch_timeout,
            )
        except TokenAcquisitionException:
            self._current = None
            logger.warning("token_fetch_failed")
            raise
        except TimeoutError as exc:
            self._current = None
            logger.warning("token_fetch_timed_out", timeout_seconds=self._fetch_timeout)
            raise TokenAcquisitionException(
                f"Token fetch did not complete within {self._fetch_timeout:g}s"
            ) from exc
        except Exception as exc:
            self._current = None
            logger.warning("token_fetch_failed", error=repr(exc))
            raise TokenAcquisitionException(f"Token fetch failed: {exc}") from exc

        if not value:
            self._current = None
            raise TokenAcquisitionException("Token fetch returned an empty token")

        now = self._clock()
        self._current = CachedToken(value=value, expires_at=now + self._ttl)
        logger.info("token_fetched", ttl_seconds=self._ttl, elapsed_seconds=round(now - started, 3))
        return value

    def close(self) -> None:
        """Shut down the worker pool if this cache created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
