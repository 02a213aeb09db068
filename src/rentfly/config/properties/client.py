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
"""Client subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from rentfly.core.config import config_properties


@config_properties(prefix="rentfly.client")
@dataclass
class ClientProperties:
    """Configuration for outbound platform calls (rentfly.client.*).

    Retry and circuit breaking are off unless enabled here.
    """

    timeout_seconds: float = 60.0
    retry: dict = field(default_factory=lambda: {"max-attempts": 1, "base-delay-ms": 500})
    circuit_breaker: dict = field(
        default_factory=lambda: {"enabled": False, "failure-threshold": 5, "recovery-timeout-seconds": 30}
    )

    @property
    def retry_max_attempts(self) -> int:
        return int(self.retry.get("max-attempts", 1))

    @property
    def retry_base_delay_ms(self) -> float:
        return float(self.retry.get("base-delay-ms", 500))

    @property
    def circuit_breaker_enabled(self) -> bool:
        enabled = self.circuit_breaker.get("enabled", False)
        if isinstance(enabled, str):
            return enabled.lower() in ("true", "1", "yes")
        return bool(enabled)
