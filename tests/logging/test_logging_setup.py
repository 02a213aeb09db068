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
"""Tests for structlog configuration and execution timing."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from rentfly.core.config import Config
from rentfly.logging import timing
from rentfly.logging.port import LoggingPort
from rentfly.logging.structlog_adapter import REDACTED, StructlogAdapter, redact_sensitive
from rentfly.logging.timing import log_execution_time


class RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def info(self, event: str, **kw: Any) -> None:
        self.events.append((event, kw))


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    rec = RecordingLogger()
    monkeypatch.setattr(timing, "logger", rec)
    return rec


class TestStructlogAdapter:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)

    def test_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter.format == "console"
        assert adapter.root_level == "INFO"

    def test_reads_format_and_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"rentfly": {"logging": {"format": "JSON", "level": {"root": "debug"}}}}))
        assert adapter.format == "json"
        assert adapter.root_level == "DEBUG"

    def test_module_levels_applied(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"rentfly": {"logging": {"level": {"root": "INFO", "httpx": "WARNING"}}}}))
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_packaged_defaults_quiet_httpx(self):
        adapter = StructlogAdapter()
        adapter.configure(Config.defaults())
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_get_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert callable(getattr(adapter.get_logger("rentfly.test"), "info", None))


class TestRedactSensitive:
    def test_masks_credentials(self):
        event = redact_sensitive(None, "info", {"event": "authenticated", "password": "p4ss", "accessToken": "abc"})
        assert event["password"] == REDACTED
        assert event["accessToken"] == REDACTED
        assert event["event"] == "authenticated"

    def test_leaves_other_keys_and_none(self):
        event = redact_sensitive(None, "info", {"username": "admin", "authorization": None})
        assert event == {"username": "admin", "authorization": None}


class TestLogExecutionTime:
    @pytest.mark.asyncio
    async def test_async_success(self, recorder: RecordingLogger):
        @log_execution_time("execute")
        async def execute(value: int) -> int:
            return value * 2

        assert await execute(21) == 42
        event, fields = recorder.events[0]
        assert event == "execution_time"
        assert fields["function"] == "execute"
        assert fields["outcome"] == "ok"
        assert fields["elapsed_ms"] >= 0

    @pytest.mark.asyncio
    async def test_async_failure_still_logged(self, recorder: RecordingLogger):
        @log_execution_time()
        async def explode() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await explode()
        _, fields = recorder.events[0]
        assert fields["outcome"] == "error"
        assert fields["function"].endswith("explode")

    def test_sync_function(self, recorder: RecordingLogger):
        @log_execution_time("add")
        def add(a: int, b: int) -> int:
            return a + b

        assert add(1, 2) == 3
        assert recorder.events == [
            ("execution_time", {"function": "add", "outcome": "ok", "elapsed_ms": recorder.events[0][1]["elapsed_ms"]})
        ]

    def test_preserves_metadata(self):
        @log_execution_time()
        def documented() -> None:
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
