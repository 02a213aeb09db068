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
"""Response cache configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from rentfly.core.config import config_properties

EVICTION_POLICIES = ("never", "ttl", "max-entries")


@config_properties(prefix="rentfly.cache")
@dataclass
class CacheProperties:
    """Eviction policy for memoized lookups (rentfly.cache.*)."""

    eviction: str = "never"
    ttl_seconds: float = 7200.0
    max_entries: int = 10000

    def __post_init__(self) -> None:
        if self.eviction not in EVICTION_POLICIES:
            raise ValueError(
                f"Unknown cache eviction policy '{self.eviction}', expected one of {', '.join(EVICTION_POLICIES)}"
            )
