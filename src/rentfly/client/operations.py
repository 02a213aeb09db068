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
"""Operation descriptors: what to call on the platform and how."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class BasePath(StrEnum):
    """Which configured prefix an operation path is resolved against."""

    API = "api"
    ROOT = "root"
    GATEWAY = "gateway"


@dataclass(frozen=True)
class Operation:
    """A single platform endpoint.

    ``cacheable`` marks idempotent lookups whose envelopes may be memoized
    for the lifetime of the process.
    """

    name: str
    method: str
    path: str
    base: BasePath = BasePath.API
    cacheable: bool = False

    def __post_init__(self) -> None:
        if not self.path.startswith("/"):
            raise ValueError(f"Operation '{self.name}' path must start with '/': {self.path!r}")
        object.__setattr__(self, "method", self.method.upper())


@dataclass(frozen=True)
class OperationArgs:
    """Query parameters and JSON body of one call."""

    params: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None

    def query(self) -> dict[str, Any]:
        """Query parameters with ``None`` values dropped and booleans lowercased."""
        query: dict[str, Any] = {}
        for key, value in self.params.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            query[key] = value
        return query

    def canonical(self) -> str:
        """Stable serialization used in cache keys."""
        return json.dumps(
            {"params": dict(self.params), "body": self.body},
            sort_keys=True,
            separators=(",", ":"),
            default=str,
        )


NO_ARGS = OperationArgs()
