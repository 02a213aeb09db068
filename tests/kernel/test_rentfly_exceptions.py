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
"""Tests for the rentfly exception hierarchy."""

from rentfly.kernel.exceptions import (
    BusinessException,
    CircuitBreakerException,
    ExternalServiceException,
    InfrastructureException,
    MissingDependencyException,
    OperationTimeoutException,
    RentflyException,
    SecurityException,
    TokenAcquisitionException,
    UpstreamHttpException,
    ValidationException,
)


class TestRentflyException:
    def test_basic_creation(self):
        exc = RentflyException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}
        assert exc.step is None

    def test_context_defaults_to_empty_dict(self):
        exc = RentflyException("test")
        exc.context["key"] = "value"
        assert RentflyException("test2").context == {}

    def test_with_step_sets_once(self):
        exc = RentflyException("boom")
        exc.with_step("CreateBooking").with_step("ExecuteBooking")
        assert exc.step == "CreateBooking"

    def test_default_codes(self):
        assert ValidationException("bad").code == "VALIDATION"
        assert TokenAcquisitionException("no token").code == "TOKEN_ACQUISITION"
        assert OperationTimeoutException("slow").code == "TIMEOUT"
        assert CircuitBreakerException("open").code == "CIRCUIT_OPEN"

    def test_explicit_code_wins(self):
        assert ValidationException("bad", code="BLANK_COUNTRY").code == "BLANK_COUNTRY"


class TestExceptionHierarchy:
    def test_categories(self):
        assert issubclass(BusinessException, RentflyException)
        assert issubclass(SecurityException, RentflyException)
        assert issubclass(InfrastructureException, RentflyException)

    def test_leaves(self):
        assert issubclass(ValidationException, BusinessException)
        assert issubclass(MissingDependencyException, BusinessException)
        assert issubclass(TokenAcquisitionException, SecurityException)
        assert issubclass(OperationTimeoutException, InfrastructureException)
        assert issubclass(UpstreamHttpException, ExternalServiceException)
        assert issubclass(ExternalServiceException, InfrastructureException)


class TestMissingDependencyException:
    def test_carries_step_and_key(self):
        exc = MissingDependencyException("CreateBooking", "rental_rate_id")
        assert exc.step == "CreateBooking"
        assert exc.key == "rental_rate_id"
        assert exc.code == "MISSING_DEPENDENCY"
        assert "rental_rate_id" in exc.message


class TestUpstreamHttpException:
    def test_keeps_status_and_body(self):
        body = '{"success":false,"error":{"message":"Invalid model"}}'
        exc = UpstreamHttpException(400, body, operation="CreateBooking")
        assert exc.status == 400
        assert exc.body == body
        assert exc.code == "UPSTREAM_HTTP_400"
        assert exc.operation == "CreateBooking"
        assert exc.message == "Upstream call CreateBooking failed with HTTP 400"

    def test_message_without_operation(self):
        exc = UpstreamHttpException(503, "")
        assert exc.message == "Upstream call failed with HTTP 503"
        assert exc.context == {"status": 503, "operation": None}
