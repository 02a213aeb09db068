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
"""Tests for the rentfly command line interface."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from rentfly.cli import execute as execute_module
from rentfly.cli.main import cli
from rentfly.cli.show_config import flatten
from rentfly.client.envelope import AbpEnvelope
from rentfly.kernel.exceptions import UpstreamHttpException
from rentfly.saga.result import SagaResult, StepOutcome, StepStatus


def saga_result(error: UpstreamHttpException | None = None) -> SagaResult:
    now = datetime.now(UTC)
    steps = {"GetOperationalCountries": StepOutcome(status=StepStatus.DONE, latency_ms=3.2)}
    if error is not None:
        steps["CreateBooking"] = StepOutcome(status=StepStatus.FAILED, error=error)
    else:
        steps["ExecuteBooking"] = StepOutcome(status=StepStatus.DONE, latency_ms=10.0)
    return SagaResult(
        saga_name="execute-created-booking-with-new-customer-and-new-vehicle",
        correlation_id="run-1",
        started_at=now,
        completed_at=now,
        success=error is None,
        error=error,
        final_envelope=None if error else AbpEnvelope.of({"contractNumber": "C-1"}),
        steps=steps,
    )


class StubService:
    def __init__(self, result: SagaResult) -> None:
        self.result = result
        self.calls: list[tuple[str, str]] = []

    async def run(self, country: str, branch: str) -> SagaResult:
        self.calls.append((country, branch))
        return self.result


class StubApplication:
    service: StubService

    def __init__(self) -> None:
        self.booking_service = StubApplication.service

    @classmethod
    def from_config(cls, config):
        return cls()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


@pytest.fixture
def stub_app(monkeypatch: pytest.MonkeyPatch) -> type[StubApplication]:
    monkeypatch.setattr(execute_module, "RentflyApplication", StubApplication)
    monkeypatch.setattr(execute_module.StructlogAdapter, "configure", lambda self, config: None)
    return StubApplication


class TestHelp:
    def test_help_shows_banner_and_commands(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Rentfly" in result.output
        assert "execute-booking" in result.output
        assert "config" in result.output

    def test_execute_booking_requires_country(self):
        result = CliRunner().invoke(cli, ["execute-booking", "--branch", "Main Branch"])
        assert result.exit_code == 2
        assert "--country" in result.output


class TestConfigCommand:
    def test_shows_effective_values(self, tmp_path: Path):
        config_file = tmp_path / "rentfly.yaml"
        config_file.write_text("rentfly:\n  cache:\n    eviction: ttl\n  auth:\n    password: hunter2\n")

        result = CliRunner().invoke(cli, ["config", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "ttl" in result.output
        assert "hunter2" not in result.output
        assert "******" in result.output

    def test_missing_file(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["config", "--config", str(tmp_path / "absent.yaml")])
        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_flatten(self):
        assert flatten({"a": {"b": 1, "c": {"d": 2}}, "e": {}}) == {"a.b": 1, "a.c.d": 2, "e": {}}


class TestExecuteBookingCommand:
    def test_success_prints_steps(self, stub_app):
        stub_app.service = StubService(saga_result())
        result = CliRunner().invoke(cli, ["execute-booking", "--country", "Saudi Arabia", "--branch", "Main Branch"])

        assert result.exit_code == 0, result.output
        assert "ExecuteBooking" in result.output
        assert "Booking executed." in result.output
        assert "C-1" in result.output
        assert stub_app.service.calls == [("Saudi Arabia", "Main Branch")]

    def test_json_output(self, stub_app):
        stub_app.service = StubService(saga_result())
        result = CliRunner().invoke(
            cli, ["execute-booking", "--country", "Saudi Arabia", "--branch", "Main Branch", "--json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["result"] == {"contractNumber": "C-1"}

    def test_failure_exits_non_zero(self, stub_app):
        error = UpstreamHttpException(400, '{"success":false}', operation="CreateBooking", step="CreateBooking")
        stub_app.service = StubService(saga_result(error))
        result = CliRunner().invoke(cli, ["execute-booking", "--country", "Saudi Arabia", "--branch", "Main Branch"])

        assert result.exit_code == 1
        assert "Aborted at CreateBooking" in result.output
        assert "UPSTREAM_HTTP_400" in result.output
        assert '{"success":false}' in result.output

    def test_blank_country_is_a_usage_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(execute_module.StructlogAdapter, "configure", lambda self, config: None)
        result = CliRunner().invoke(cli, ["execute-booking", "--country", " ", "--branch", "Main Branch"])

        assert result.exit_code == 2
        assert "Country name must not be blank" in result.output
