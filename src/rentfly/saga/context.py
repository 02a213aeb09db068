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
"""OrchestrationContext: key/value state threaded through one saga run."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from rentfly.kernel.exceptions import MissingDependencyException


class OrchestrationContext:
    """Mutable bag of values extracted from earlier steps of one run.

    A key holding ``None`` counts as absent: ``require`` raises for it and
    guards treat it as missing.
    """

    def __init__(
        self,
        initial: Mapping[str, Any] | None = None,
        *,
        saga_name: str = "",
        correlation_id: str | None = None,
    ) -> None:
        self.saga_name = saga_name
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self._values: dict[str, Any] = dict(initial or {})

    # ── access ────────────────────────────────────────────────

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, overwriting any previous value."""
        self._values[key] = value

    def update(self, values: Mapping[str, Any]) -> None:
        """Store every item of *values*."""
        for key, value in values.items():
            self.set(key, value)

    def require(self, key: str, step: str | None = None) -> Any:
        """Return the value of *key* or raise ``MissingDependencyException``."""
        value = self._values.get(key)
        if value is None:
            raise MissingDependencyException(step, key)
        return value

    def get_optional(self, key: str, default: Any = None) -> Any:
        """Return the value of *key*, or *default* when it is absent."""
        value = self._values.get(key)
        return default if value is None else value

    # ── guards ────────────────────────────────────────────────

    def missing(self, keys: Iterable[str]) -> list[str]:
        """Keys among *keys* that are absent, in the given order."""
        return [key for key in keys if self._values.get(key) is None]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._values.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def snapshot(self) -> dict[str, Any]:
        """A shallow copy of the current values."""
        return dict(self._values)

    def __repr__(self) -> str:
        return f"OrchestrationContext(saga={self.saga_name!r}, keys={sorted(self._values)})"
