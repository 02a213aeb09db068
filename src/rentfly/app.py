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
"""Application wiring: builds every collaborator of the booking flow from config."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import httpx
import structlog

from rentfly.auth.authenticator import TokenAuthClient
from rentfly.auth.token_cache import TokenCache
from rentfly.booking.service import ExecuteBookingService
from rentfly.cache.response_cache import ResponseCache
from rentfly.client.gateway import RequestGateway
from rentfly.client.service_client import ServiceClient
from rentfly.config.properties import (
    AuthProperties,
    BookingProperties,
    CacheProperties,
    ClientProperties,
    PlatformProperties,
)
from rentfly.core.config import Config
from rentfly.saga.controller import SagaController
from rentfly.saga.executor import StepExecutor

logger = structlog.get_logger("rentfly.app")


class RentflyApplication:
    """Owns the HTTP client, token cache and worker pool of one process.

    Use :meth:`from_config` to build it and :meth:`aclose` (or ``async with``)
    to release its resources.
    """

    def __init__(
        self,
        *,
        config: Config,
        client: ServiceClient,
        token_cache: TokenCache,
        response_cache: ResponseCache,
        gateway: RequestGateway,
        controller: SagaController,
        booking_service: ExecuteBookingService,
        executor: ThreadPoolExecutor,
    ) -> None:
        self.config = config
        self.client = client
        self.token_cache = token_cache
        self.response_cache = response_cache
        self.gateway = gateway
        self.controller = controller
        self.booking_service = booking_service
        self._executor = executor

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        auth_transport: httpx.BaseTransport | None = None,
    ) -> RentflyApplication:
        """Wire the application. Transports are injectable for tests."""
        config = config if config is not None else Config.from_sources(".")
        platform = config.bind(PlatformProperties)
        auth = config.bind(AuthProperties)
        client_props = config.bind(ClientProperties)
        cache_props = config.bind(CacheProperties)
        booking_props = config.bind(BookingProperties)

        builder = (
            ServiceClient.rest("rentey")
            .base_url(platform.base_url)
            .timeout(timedelta(seconds=client_props.timeout_seconds))
            .headers(platform.default_headers())
        )
        if client_props.retry_max_attempts > 1:
            builder.retry(
                max_attempts=client_props.retry_max_attempts,
                base_delay=timedelta(milliseconds=client_props.retry_base_delay_ms),
            )
        if client_props.circuit_breaker_enabled:
            builder.circuit_breaker(
                failure_threshold=int(client_props.circuit_breaker.get("failure-threshold", 5)),
                recovery_timeout=timedelta(
                    seconds=float(client_props.circuit_breaker.get("recovery-timeout-seconds", 30))
                ),
            )
        if transport is not None:
            builder.transport(transport)
        client = builder.build()

        executor = ThreadPoolExecutor(max_workers=auth.worker_pool_size, thread_name_prefix="rentfly-token")
        authenticator = TokenAuthClient(auth, transport=auth_transport)
        token_cache = TokenCache(
            authenticator.authenticate,
            ttl=timedelta(seconds=auth.token_ttl_seconds),
            fetch_timeout=timedelta(seconds=auth.fetch_timeout_seconds),
            executor=executor,
        )
        response_cache = ResponseCache.from_properties(cache_props)
        gateway = RequestGateway(
            client,
            token_cache,
            platform,
            response_cache=response_cache,
            timeout=timedelta(seconds=client_props.timeout_seconds),
        )
        controller = SagaController(StepExecutor(gateway))
        logger.info(
            "application_configured",
            base_url=platform.base_url,
            cache_eviction=cache_props.eviction,
            retry_max_attempts=client_props.retry_max_attempts,
            circuit_breaker=client_props.circuit_breaker_enabled,
        )
        return cls(
            config=config,
            client=client,
            token_cache=token_cache,
            response_cache=response_cache,
            gateway=gateway,
            controller=controller,
            booking_service=ExecuteBookingService(controller, booking_props),
            executor=executor,
        )

    async def aclose(self) -> None:
        await self.client.close()
        self.token_cache.close()
        self._executor.shutdown(wait=False, cancel_futures=True)

    async def __aenter__(self) -> RentflyApplication:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
