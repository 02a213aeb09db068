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
"""RequestGateway: every platform call goes through here."""

from __future__ import annotations

import asyncio
import time
from datetime import timedelta
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from rentfly.auth.token_cache import TokenCache
from rentfly.cache.response_cache import ResponseCache
from rentfly.client.envelope import AbpEnvelope
from rentfly.client.operations import NO_ARGS, BasePath, Operation, OperationArgs
from rentfly.client.service_client import ServiceClient
from rentfly.config.properties.platform import PlatformProperties
from rentfly.kernel.exceptions import (
    OperationTimeoutException,
    RentflyException,
    UpstreamHttpException,
    UpstreamTransportException,
)

logger = structlog.get_logger("rentfly.client.gateway")


class RequestGateway:
    """Wraps platform calls with the bearer token, a timeout and error classification.

    Default headers live on the ``ServiceClient``; the gateway adds the
    ``Authorization`` header per call. Cacheable operations are answered
    from the ``ResponseCache`` when possible.

    Errors raised:
        UpstreamHttpException: non-2xx status, an envelope with
            ``success: false``, or a body that is not an envelope.
        OperationTimeoutException: the call exceeded ``timeout``.
        UpstreamTransportException: connect, read or protocol failure.
        TokenAcquisitionException: no bearer token could be obtained.
    """

    def __init__(
        self,
        client: ServiceClient,
        token_cache: TokenCache,
        platform: PlatformProperties,
        response_cache: ResponseCache | None = None,
        timeout: timedelta = timedelta(seconds=60),
    ) -> None:
        self._client = client
        self._tokens = token_cache
        self._platform = platform
        self._responses = response_cache if response_cache is not None else ResponseCache()
        self._timeout = timeout.total_seconds()

    @property
    def response_cache(self) -> ResponseCache:
        return self._responses

    def resolve_path(self, operation: Operation) -> str:
        """Full request path of *operation* under the configured prefixes."""
        if operation.base is BasePath.API:
            prefix = self._platform.api_base_path
        elif operation.base is BasePath.ROOT:
            prefix = self._platform.api_base_path_without_service
        else:
            prefix = self._platform.loyalty_base_path
        return prefix.rstrip("/") + operation.path

    async def call(
        self,
        operation: Operation,
        args: OperationArgs | None = None,
        *,
        step: str | None = None,
    ) -> AbpEnvelope:
        """Invoke *operation* and return its envelope."""
        args = args if args is not None else NO_ARGS
        try:
            if operation.cacheable:
                return await self._responses.get_or_compute(
                    operation.name, args, lambda: self._invoke(operation, args)
                )
            return await self._invoke(operation, args)
        except RentflyException as exc:
            if step is not None:
                exc.with_step(step)
            raise

    async def _invoke(self, operation: Operation, args: OperationArgs) -> AbpEnvelope:
        token = await self._tokens.get_token()
        path = self.resolve_path(operation)
        request_kwargs: dict[str, Any] = {
            "params": args.query(),
            "headers": {"Authorization": f"Bearer {token}"},
        }
        if args.body is not None:
            request_kwargs["json"] = args.body

        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._client.request(operation.method, path, **request_kwargs),
                timeout=self._timeout,
            )
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("platform_call_timed_out", operation=operation.name, timeout_seconds=self._timeout)
            raise OperationTimeoutException(
                f"Operation '{operation.name}' timed out after {self._timeout:g}s",
                context={"operation": operation.name, "path": path},
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("platform_call_failed", operation=operation.name, error=type(exc).__name__)
            raise UpstreamTransportException(
                f"Operation '{operation.name}' failed: {type(exc).__name__}: {exc}",
                operation=operation.name,
                path=path,
            ) from exc

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.debug(
            "platform_call",
            operation=operation.name,
            method=operation.method,
            path=path,
            status=response.status_code,
            elapsed_ms=elapsed_ms,
        )
        return self._classify(operation, response)

    def _classify(self, operation: Operation, response: httpx.Response) -> AbpEnvelope:
        status = response.status_code
        if not response.is_success:
            if status == httpx.codes.UNAUTHORIZED:
                self._tokens.invalidate()
            raise UpstreamHttpException(status, response.text, operation=operation.name)

        try:
            envelope = AbpEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamHttpException(
                status,
                response.text,
                message=f"Operation '{operation.name}' returned a body that is not an ABP envelope",
                operation=operation.name,
            ) from exc

        if not envelope.success:
            raise UpstreamHttpException(
                status,
                response.text,
                message=f"Operation '{operation.name}' reported success=false",
                operation=operation.name,
            )
        return envelope
