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
"""structlog setup for rentfly, driven by the ``rentfly.logging`` section."""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from rentfly.core.config import Config

REDACTED = "******"

# Event keys whose values never reach a log sink.
SENSITIVE_KEYS = frozenset({"password", "access_token", "accesstoken", "authorization", "verification_code"})


def redact_sensitive(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """structlog processor masking credentials and bearer tokens."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS and event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


class StructlogAdapter:
    """Configures structlog and stdlib logging for the CLI and the saga runtime.

    Reads ``rentfly.logging.format`` (``console`` or ``json``) and
    ``rentfly.logging.level``, where ``root`` sets the global threshold
    and every other key is a stdlib logger name, e.g. ``httpx: WARNING``.
    Output goes to stderr so ``execute-booking --json`` keeps stdout clean.
    """

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._format = "console"
        self._logger_levels: dict[str, str] = {}

    @property
    def format(self) -> str:
        return self._format

    @property
    def root_level(self) -> str:
        return self._root_level

    def configure(self, config: Config) -> None:
        levels = dict(config.get_section("rentfly.logging.level"))
        self._root_level = str(levels.pop("root", "INFO")).upper()
        self._logger_levels = {name: str(level).upper() for name, level in levels.items()}
        self._format = str(config.get("rentfly.logging.format", "console")).lower()

        structlog.configure(
            processors=self._processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stderr,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
        for name, level in self._logger_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _processors(self) -> list[structlog.types.Processor]:
        # contextvars carry the saga name and correlation id bound by the controller
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())
        return processors
