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
"""Error taxonomy for rentfly.

Every error raised while orchestrating a booking inherits from
RentflyException, so callers can catch one type to handle all of them or a
specific subclass for targeted handling.

Categories:
- BusinessException: invalid input and unmet step dependencies
- SecurityException: bearer token acquisition failures
- InfrastructureException: timeouts and open circuits
- ExternalServiceException: non-success answers from the platform
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Base Exception
# =============================================================================


class RentflyException(Exception):
    """Base exception for all rentfly errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "UPSTREAM_HTTP_400").
        context: Arbitrary key-value pairs for error context and debugging.
        step: Name of the saga step that raised the error, if any.
    """

    default_code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
        step: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.context: dict[str, Any] = context if context is not None else {}
        self.step = step

    def with_step(self, step: str) -> RentflyException:
        """Attach the originating step name unless one is already set."""
        if self.step is None:
            self.step = step
        return self


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(RentflyException):
    """Domain rule violations."""


class ValidationException(BusinessException):
    """Malformed or missing input to an orchestration entry point."""

    default_code = "VALIDATION"


class MissingDependencyException(BusinessException):
    """A step needed a context key that no earlier step populated."""

    default_code = "MISSING_DEPENDENCY"

    def __init__(self, step: str | None, key: str) -> None:
        super().__init__(
            f"Step '{step}' requires context key '{key}' which is not available",
            context={"key": key},
            step=step,
        )
        self.key = key


class RequestBuildException(BusinessException):
    """A step could not build its request from the values gathered so far."""

    default_code = "REQUEST_BUILD"


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(RentflyException):
    """Authentication errors."""


class TokenAcquisitionException(SecurityException):
    """The authenticate call failed or returned no usable token."""

    default_code = "TOKEN_ACQUISITION"


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(RentflyException):
    """Network level failures."""


class OperationTimeoutException(InfrastructureException):
    """A downstream call exceeded its allowed time."""

    default_code = "TIMEOUT"


class CircuitBreakerException(InfrastructureException):
    """Circuit breaker is open, call rejected."""

    default_code = "CIRCUIT_OPEN"


# =============================================================================
# External Service Exceptions
# =============================================================================


class ExternalServiceException(InfrastructureException):
    """Failure reported by the external platform."""


class UpstreamHttpException(ExternalServiceException):
    """The platform answered with a non-success status.

    The raw response body is kept verbatim in ``body``.
    """

    def __init__(
        self,
        status: int,
        body: str,
        message: str | None = None,
        operation: str | None = None,
        step: str | None = None,
    ) -> None:
        target = f" {operation}" if operation else ""
        super().__init__(
            message or f"Upstream call{target} failed with HTTP {status}",
            code=f"UPSTREAM_HTTP_{status}",
            context={"status": status, "operation": operation},
            step=step,
        )
        self.status = status
        self.body = body
        self.operation = operation


class UpstreamTransportException(ExternalServiceException):
    """The platform could not be reached or the connection broke mid-call."""

    default_code = "UPSTREAM_TRANSPORT"

    def __init__(self, message: str, operation: str | None = None, path: str | None = None) -> None:
        super().__init__(message, context={"operation": operation, "path": path})
        self.operation = operation
