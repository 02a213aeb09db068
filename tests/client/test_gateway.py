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
"""Tests for RequestGateway: auth header, path prefixes, errors and caching."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from datetime import timedelta

import httpx
import pytest

from rentfly.auth.token_cache import TokenCache
from rentfly.client.envelope import AbpEnvelope
from rentfly.client.gateway import RequestGateway
from rentfly.client.operations import BasePath, Operation, OperationArgs
from rentfly.client.service_client import ServiceClient
from rentfly.config.properties.platform import PlatformProperties
from rentfly.kernel.exceptions import OperationTimeoutException, UpstreamHttpException, UpstreamTransportException

GET_COUNTRIES = Operation("GetOperationalCountries", "GET", "/Country/GetOperationalCountries", cacheable=True)
CREATE_BOOKING = Operation("CreateBooking", "POST", "/CreateBooking/CreateBooking")
VALIDATE_PHONE = Operation("IsValidPhone", "GET", "/ValidatePhone/IsValid", base=BasePath.ROOT)
LOYALTIES = Operation(
    "GetIntegratedLoyalties",
    "GET",
    "/api/app/external-loyalty-configuration/integrated-loyalties",
    base=BasePath.GATEWAY,
)


def envelope(result: object, success: bool = True) -> dict:
    return {
        "result": result,
        "targetUrl": None,
        "success": success,
        "error": None,
        "unAuthorizedRequest": False,
        "__abp": True,
    }


class Harness:
    def __init__(self, handler: Callable, timeout: timedelta = timedelta(seconds=5)) -> None:
        self.requests: list[httpx.Request] = []
        self.fetches = 0

        def recording(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        def fetch_token() -> str:
            self.fetches += 1
            return f"token-{self.fetches}"

        self.client = (
            ServiceClient.rest("rentey")
            .base_url("http://rentey.test")
            .transport(httpx.MockTransport(recording))
            .build()
        )
        self.tokens = TokenCache(fetch_token)
        self.gateway = RequestGateway(self.client, self.tokens, PlatformProperties(), timeout=timeout)

    async def close(self) -> None:
        await self.client.close()
        self.tokens.close()


class TestRequestShape:
    @pytest.mark.asyncio
    async def test_bearer_header_and_api_prefix(self):
        harness = Harness(lambda request: httpx.Response(200, json=envelope([])))
        result = await harness.gateway.call(GET_COUNTRIES)
        await harness.close()

        assert isinstance(result, AbpEnvelope)
        request = harness.requests[0]
        assert request.url.path == "/webapigw/api/services/app/Country/GetOperationalCountries"
        assert request.headers["Authorization"] == "Bearer token-1"

    @pytest.mark.asyncio
    async def test_root_and_gateway_prefixes(self):
        harness = Harness(lambda request: httpx.Response(200, json=envelope(True)))
        await harness.gateway.call(VALIDATE_PHONE, OperationArgs(params={"phoneNumber": "5", "phoneCode": "966"}))
        await harness.gateway.call(LOYALTIES)
        await harness.close()

        assert harness.requests[0].url.path == "/webapigw/api/ValidatePhone/IsValid"
        assert harness.requests[1].url.path == (
            "/loyaltyapigw/api/app/external-loyalty-configuration/integrated-loyalties"
        )

    @pytest.mark.asyncio
    async def test_query_and_json_body(self):
        harness = Harness(lambda request: httpx.Response(200, json=envelope({"bookingId": 1})))
        args = OperationArgs(params={"enableAuthorization": True, "skip": None}, body={"countryId": 1})
        await harness.gateway.call(CREATE_BOOKING, args)
        await harness.close()

        request = harness.requests[0]
        assert request.method == "POST"
        assert request.url.params["enableAuthorization"] == "true"
        assert "skip" not in request.url.params
        assert json.loads(request.content) == {"countryId": 1}


class TestErrorClassification:
    @pytest.mark.asyncio
    async def test_http_400_keeps_body_verbatim(self):
        body = '{"result":null,"success":false,"error":{"message":"Model not available"}}'
        harness = Harness(lambda request: httpx.Response(400, text=body))

        with pytest.raises(UpstreamHttpException) as info:
            await harness.gateway.call(CREATE_BOOKING, step="CreateBooking")
        await harness.close()

        assert info.value.status == 400
        assert info.value.body == body
        assert info.value.step == "CreateBooking"
        assert info.value.operation == "CreateBooking"

    @pytest.mark.asyncio
    async def test_success_false_is_an_error(self):
        harness = Harness(lambda request: httpx.Response(200, json=envelope(None, success=False)))
        with pytest.raises(UpstreamHttpException, match="success=false") as info:
            await harness.gateway.call(CREATE_BOOKING)
        await harness.close()
        assert info.value.status == 200

    @pytest.mark.asyncio
    async def test_non_envelope_body(self):
        harness = Harness(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        with pytest.raises(UpstreamHttpException, match="not an ABP envelope") as info:
            await harness.gateway.call(CREATE_BOOKING)
        await harness.close()
        assert info.value.body == "<html>gateway</html>"

    @pytest.mark.asyncio
    async def test_401_invalidates_token(self):
        statuses = iter([401, 200])
        harness = Harness(lambda request: httpx.Response(next(statuses), json=envelope([])))

        with pytest.raises(UpstreamHttpException):
            await harness.gateway.call(CREATE_BOOKING)
        assert harness.tokens.current is None

        await harness.gateway.call(CREATE_BOOKING)
        await harness.close()
        assert harness.fetches == 2
        assert harness.requests[1].headers["Authorization"] == "Bearer token-2"

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json=envelope([]))

        harness = Harness(slow, timeout=timedelta(milliseconds=50))
        with pytest.raises(OperationTimeoutException) as info:
            await harness.gateway.call(CREATE_BOOKING, step="CreateBooking")
        await harness.close()
        assert info.value.code == "TIMEOUT"
        assert info.value.step == "CreateBooking"

    @pytest.mark.asyncio
    async def test_connect_error_is_classified(self):
        def refused(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        harness = Harness(refused)
        with pytest.raises(UpstreamTransportException) as info:
            await harness.gateway.call(CREATE_BOOKING, step="CreateBooking")
        await harness.close()
        assert info.value.code == "UPSTREAM_TRANSPORT"
        assert info.value.step == "CreateBooking"
        assert info.value.operation == "CreateBooking"
        assert isinstance(info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_read_error_is_classified(self):
        def dropped(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadError("connection reset", request=request)

        harness = Harness(dropped)
        with pytest.raises(UpstreamTransportException, match="ReadError"):
            await harness.gateway.call(GET_COUNTRIES)
        await harness.close()


class TestCaching:
    @pytest.mark.asyncio
    async def test_cacheable_operation_called_once(self):
        harness = Harness(lambda request: httpx.Response(200, json=envelope([{"id": 1, "name": "Saudi Arabia"}])))
        first = await harness.gateway.call(GET_COUNTRIES, OperationArgs(params={"includeInActive": False}))
        second = await harness.gateway.call(GET_COUNTRIES, OperationArgs(params={"includeInActive": False}))
        await harness.close()

        assert first is second
        assert len(harness.requests) == 1
        assert harness.gateway.response_cache.hits == 1

    @pytest.mark.asyncio
    async def test_distinct_args_are_distinct_entries(self):
        harness = Harness(lambda request: httpx.Response(200, json=envelope([])))
        await harness.gateway.call(GET_COUNTRIES, OperationArgs(params={"countryId": 1}))
        await harness.gateway.call(GET_COUNTRIES, OperationArgs(params={"countryId": 2}))
        await harness.close()
        assert len(harness.requests) == 2

    @pytest.mark.asyncio
    async def test_non_cacheable_operation_always_calls(self):
        harness = Harness(lambda request: httpx.Response(200, json=envelope({"bookingId": 1})))
        await harness.gateway.call(CREATE_BOOKING)
        await harness.gateway.call(CREATE_BOOKING)
        await harness.close()
        assert len(harness.requests) == 2

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self):
        statuses = iter([500, 200])
        harness = Harness(lambda request: httpx.Response(next(statuses), json=envelope([])))
        with pytest.raises(UpstreamHttpException):
            await harness.gateway.call(GET_COUNTRIES)
        await harness.gateway.call(GET_COUNTRIES)
        await harness.close()
        assert len(harness.requests) == 2
