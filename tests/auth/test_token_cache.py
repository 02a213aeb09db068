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
"""Tests for the single-flight bearer token cache."""

from __future__ import annotations

import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from rentfly.auth.token_cache import TokenCache
from rentfly.config.properties.auth import AuthProperties
from rentfly.kernel.exceptions import TokenAcquisitionException


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class CountingFetcher:
    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            self.calls += 1
            n = self.calls
        if self.delay:
            time.sleep(self.delay)
        return f"token-{n}"


class HangsOnce:
    """First call blocks until released; later calls answer at once."""

    def __init__(self) -> None:
        self.release = threading.Event()
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.calls == 1:
            self.release.wait(timeout=2)
            return "token-late"
        return f"token-{self.calls}"


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self):
        fetcher = CountingFetcher(delay=0.05)
        cache = TokenCache(fetcher)

        tokens = await asyncio.gather(*(cache.get_token() for _ in range(10)))
        cache.close()

        assert fetcher.calls == 1
        assert set(tokens) == {"token-1"}

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_fetch(self):
        fetcher = CountingFetcher(delay=0.05)
        cache = TokenCache(fetcher)

        first = asyncio.ensure_future(cache.get_token())
        second = asyncio.ensure_future(cache.get_token())
        await asyncio.sleep(0.01)
        first.cancel()

        assert await second == "token-1"
        cache.close()
        assert fetcher.calls == 1


class TestFreshness:
    @pytest.mark.asyncio
    async def test_fresh_token_is_reused(self):
        clock = FakeClock()
        fetcher = CountingFetcher()
        cache = TokenCache(fetcher, ttl=timedelta(seconds=300), clock=clock)

        assert await cache.get_token() == "token-1"
        clock.now += 299
        assert await cache.get_token() == "token-1"
        cache.close()
        assert fetcher.calls == 1

    @pytest.mark.asyncio
    async def test_expired_token_is_refetched(self):
        clock = FakeClock()
        fetcher = CountingFetcher()
        cache = TokenCache(fetcher, ttl=timedelta(seconds=300), clock=clock)

        await cache.get_token()
        clock.now += 301
        assert await cache.get_token() == "token-2"
        cache.close()

    @pytest.mark.asyncio
    async def test_invalidate_forces_fetch(self):
        fetcher = CountingFetcher()
        cache = TokenCache(fetcher)

        await cache.get_token()
        cache.invalidate()
        assert cache.current is None
        assert await cache.get_token() == "token-2"
        cache.close()


class TestFailures:
    @pytest.mark.asyncio
    async def test_failure_propagates_and_clears(self):
        def failing() -> str:
            raise TokenAcquisitionException("bad credentials")

        cache = TokenCache(failing)
        with pytest.raises(TokenAcquisitionException, match="bad credentials"):
            await cache.get_token()
        assert cache.current is None
        cache.close()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self):
        def failing() -> str:
            raise OSError("network unreachable")

        cache = TokenCache(failing)
        with pytest.raises(TokenAcquisitionException, match="network unreachable"):
            await cache.get_token()
        cache.close()

    @pytest.mark.asyncio
    async def test_empty_token_rejected(self):
        cache = TokenCache(lambda: "")
        with pytest.raises(TokenAcquisitionException, match="empty token"):
            await cache.get_token()
        cache.close()

    @pytest.mark.asyncio
    async def test_fetch_timeout(self):
        cache = TokenCache(CountingFetcher(delay=0.3), fetch_timeout=timedelta(milliseconds=20))
        with pytest.raises(TokenAcquisitionException, match="did not complete"):
            await cache.get_token()
        assert cache.current is None
        cache.close()

    @pytest.mark.asyncio
    async def test_next_call_retries_after_failure(self):
        outcomes = iter([OSError("down"), None])

        def flaky() -> str:
            error = next(outcomes)
            if error is not None:
                raise error
            return "token-ok"

        cache = TokenCache(flaky)
        with pytest.raises(TokenAcquisitionException):
            await cache.get_token()
        assert await cache.get_token() == "token-ok"
        cache.close()

    @pytest.mark.asyncio
    async def test_next_call_fetches_while_timed_out_fetch_still_runs(self):
        fetcher = HangsOnce()
        cache = TokenCache(fetcher, fetch_timeout=timedelta(milliseconds=50))
        with pytest.raises(TokenAcquisitionException, match="did not complete"):
            await cache.get_token()

        assert await cache.get_token() == "token-2"
        fetcher.release.set()
        cache.close()

    @pytest.mark.asyncio
    async def test_configured_pool_leaves_room_after_timeout(self):
        fetcher = HangsOnce()
        executor = ThreadPoolExecutor(max_workers=AuthProperties().worker_pool_size)
        cache = TokenCache(fetcher, fetch_timeout=timedelta(milliseconds=50), executor=executor)
        with pytest.raises(TokenAcquisitionException):
            await cache.get_token()

        assert await cache.get_token() == "token-2"
        fetcher.release.set()
        executor.shutdown(wait=False)
