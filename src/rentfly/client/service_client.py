"""HTTP service client for the Rentey platform with opt-in resilience."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import httpx

from rentfly.client.circuit_breaker import CircuitBreaker
from rentfly.client.retry import RetryPolicy


class ServiceClient:
    """HTTP client with optional circuit breaker and retry.

    Built on httpx with a fluent builder API:

        client = (ServiceClient.rest("rentey")
            .base_url("https://rentey.example.com")
            .timeout(timedelta(seconds=60))
            .headers(platform.default_headers())
            .build())

        response = await client.get("/webapigw/api/services/app/Country/GetCountriesPhone")

    Non-2xx responses are returned, not raised; classifying them is up to
    the caller.
    """

    def __init__(
        self,
        name: str,
        http_client: httpx.AsyncClient,
        breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.name = name
        self._client = http_client
        self._breaker = breaker
        self._retry = retry_policy

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a POST request."""
        return await self.request("POST", path, **kwargs)

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Execute an HTTP request through the configured breaker and retry policy."""

        async def do_request() -> httpx.Response:
            return await self._client.request(method, path, **kwargs)

        operation = do_request

        if self._breaker is not None:
            breaker = self._breaker
            original = operation

            async def with_breaker() -> httpx.Response:
                return await breaker.call(original)

            operation = with_breaker

        if self._retry is not None:
            retry = self._retry
            final_op = operation

            async def with_retry() -> httpx.Response:
                return await retry.execute(final_op)

            operation = with_retry

        return await operation()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    @staticmethod
    def rest(name: str) -> ServiceClientBuilder:
        """Create a builder for a REST service client."""
        return ServiceClientBuilder(name)


def _is_server_error(response: httpx.Response) -> bool:
    return response.status_code >= 500


class ServiceClientBuilder:
    """Fluent builder for ServiceClient."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._base_url: str = ""
        self._timeout: timedelta = timedelta(seconds=30)
        self._breaker: CircuitBreaker | None = None
        self._retry: RetryPolicy | None = None
        self._headers: dict[str, str] = {}
        self._transport: httpx.AsyncBaseTransport | None = None

    def base_url(self, url: str) -> ServiceClientBuilder:
        """Set the base URL for all requests."""
        self._base_url = url
        return self

    def timeout(self, timeout: timedelta) -> ServiceClientBuilder:
        """Set the transport level request timeout."""
        self._timeout = timeout
        return self

    def circuit_breaker(
        self,
        failure_threshold: int = 5,
        recovery_timeout: timedelta = timedelta(seconds=30),
    ) -> ServiceClientBuilder:
        """Enable circuit breaker. Transport errors and 5xx responses count as failures."""
        self._breaker = CircuitBreaker(
            name=self._name,
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
            is_failure=_is_server_error,
        )
        return self

    def retry(
        self,
        max_attempts: int = 3,
        base_delay: timedelta = timedelta(seconds=1),
        retry_on: tuple[type[Exception], ...] = (httpx.TransportError,),
    ) -> ServiceClientBuilder:
        """Enable retry with exponential backoff on transport failures."""
        self._retry = RetryPolicy(
            max_attempts=max_attempts,
            base_delay=base_delay,
            retry_on=retry_on,
        )
        return self

    def header(self, name: str, value: str) -> ServiceClientBuilder:
        """Add a default header."""
        self._headers[name] = value
        return self

    def headers(self, headers: dict[str, str]) -> ServiceClientBuilder:
        """Add several default headers."""
        self._headers.update(headers)
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> ServiceClientBuilder:
        """Use a custom httpx transport (e.g. ``httpx.MockTransport``)."""
        self._transport = transport
        return self

    def build(self) -> ServiceClient:
        """Build the ServiceClient."""
        http_client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout.total_seconds(),
            headers=self._headers,
            transport=self._transport,
        )
        return ServiceClient(
            name=self._name,
            http_client=http_client,
            breaker=self._breaker,
            retry_policy=self._retry,
        )
