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
"""Tests for the service client, retry policy and circuit breaker."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import httpx
import pytest

from rentfly.client.circuit_breaker import CircuitBreaker, CircuitState
from rentfly.client.retry import RetryPolicy
from rentfly.client.service_client import ServiceClient
from rentfly.kernel.exceptions import CircuitBreakerException


class TestCircuitBreaker:
    def test_initial_state_closed(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=timedelta(seconds=30))
        assert cb.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_opens_after_threshold_and_rejects(self):
        cb = CircuitBreaker(failure_threshold=2, recovery_timeout=timedelta(seconds=30))

        async def fail():
            raise ConnectionError("down")

        for _ in range(2):
            with pytest.raises(ConnectionError):
                await cb.call(fail)

        assert cb.state == CircuitState.OPEN
        with pytest.raises(CircuitBreakerException, match="Circuit breaker 'rentey' is open"):
            await cb.call(fail)

    @pytest.mark.asyncio
    async def test_half_open_probe_closes(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=timedelta(milliseconds=30))

        async def fail():
            raise ConnectionError("down")

        async def succeed():
            return "ok"

        with pytest.raises(ConnectionError):
            await cb.call(fail)
        await asyncio.sleep(0.05)
        assert cb.state == CircuitState.HALF_OPEN

        assert await cb.call(succeed) == "ok"
        assert cb.state == CircuitState.CLOSED


class TestRetryPolicy:
    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    @pytest.mark.asyncio
    async def test_single_attempt_does_not_retry(self):
        calls = 0

        async def flaky():
            nonlocal calls
            calls += 1
            raise ConnectionError("down")

        policy = RetryPolicy(max_attempts=1, base_delay=timedelta(milliseconds=1))
        with pytest.raises(ConnectionError):
            await policy.execute(flaky)
        assert calls == 1

    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        calls = 0

        async def flaky():
            nonlocal calls
            calls += 1
            if calls < 3:
                raise ConnectionError("down")
            return "ok"

        policy = RetryPolicy(max_attempts=3, base_delay=timedelta(milliseconds=1))
        assert await policy.execute(flaky) == "ok"
        assert calls == 3

    @pytest.mark.asyncio
    async def test_only_listed_exceptions_are_retried(self):
        calls = 0

        async def broken():
            nonlocal calls
            calls += 1
            raise ValueError("bad")

        policy = RetryPolicy(max_attempts=3, base_delay=timedelta(milliseconds=1), retry_on=(ConnectionError,))
        with pytest.raises(ValueError):
            await policy.execute(broken)
        assert calls == 1


class TestServiceClient:
    @pytest.mark.asyncio
    async def test_default_headers_and_base_url(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True})

        client = (
            ServiceClient.rest("rentey")
            .base_url("http://rentey.test")
            .header("Abp.TenantId", "1")
            .headers({"Accept-Language": "en"})
            .transport(httpx.MockTransport(handler))
            .build()
        )
        response = await client.get("/webapigw/api/services/app/Country/GetCountriesPhone")
        await client.close()

        assert response.status_code == 200
        assert str(seen[0].url) == "http://rentey.test/webapigw/api/services/app/Country/GetCountriesPhone"
        assert seen[0].headers["Abp.TenantId"] == "1"
        assert seen[0].headers["Accept-Language"] == "en"

    @pytest.mark.asyncio
    async def test_retries_transport_errors(self):
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={})

        client = (
            ServiceClient.rest("rentey")
            .base_url("http://rentey.test")
            .retry(max_attempts=2, base_delay=timedelta(milliseconds=1))
            .transport(httpx.MockTransport(handler))
            .build()
        )
        response = await client.post("/x", json={})
        await client.close()

        assert response.status_code == 200
        assert attempts == 2

    @pytest.mark.asyncio
    async def test_breaker_opens_on_transport_failures(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = (
            ServiceClient.rest("rentey")
            .base_url("http://rentey.test")
            .circuit_breaker(failure_threshold=1, recovery_timeout=timedelta(seconds=30))
            .transport(httpx.MockTransport(handler))
            .build()
        )
        with pytest.raises(httpx.ConnectError):
            await client.get("/x")
        with pytest.raises(CircuitBreakerException):
            await client.get("/x")
        await client.close()

    @pytest.mark.asyncio
    async def test_server_errors_count_towards_breaker(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(503, json={"success": False})

        client = (
            ServiceClient.rest("rentey")
            .base_url("http://rentey.test")
            .circuit_breaker(failure_threshold=2, recovery_timeout=timedelta(seconds=30))
            .transport(httpx.MockTransport(handler))
            .build()
        )
        assert (await client.get("/x")).status_code == 503
        assert (await client.get("/x")).status_code == 503
        with pytest.raises(CircuitBreakerException):
            await client.get("/x")
        await client.close()
        assert calls == 2

    @pytest.mark.asyncio
    async def test_client_errors_do_not_trip_breaker(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"success": False})

        client = (
            ServiceClient.rest("rentey")
            .base_url("http://rentey.test")
            .circuit_breaker(failure_threshold=1, recovery_timeout=timedelta(seconds=30))
            .transport(httpx.MockTransport(handler))
            .build()
        )
        for _ in range(3):
            assert (await client.get("/x")).status_code == 400
        await client.close()
