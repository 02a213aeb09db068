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
"""In-process cache adapter."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Any


class InMemoryCache:
    """In-memory cache with optional TTL and an optional entry ceiling.

    When ``max_entries`` is set and the cache is full, the oldest inserted
    entry is evicted to make room.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._store: dict[str, tuple[Any, float | None]] = {}
        self._max_entries = max_entries

    async def get(self, key: str) -> Any | None:
        """Get a value by key. Returns None if missing or expired."""
        entry = self._store.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and time.monotonic() > expires_at:
            del self._store[key]
            return None

        return value

    async def put(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Store a value with optional TTL."""
        expires_at = None
        if ttl is not None:
            expires_at = time.monotonic() + ttl.total_seconds()
        self._store.pop(key, None)
        if self._max_entries is not None:
            while len(self._store) >= self._max_entries:
                del self._store[next(iter(self._store))]
        self._store[key] = (value, expires_at)

    async def evict(self, key: str) -> bool:
        """Remove a key. Returns True if the key existed."""
        return self._store.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        """Check if a key exists and is not expired."""
        return await self.get(key) is not None

    async def clear(self) -> None:
        """Remove all entries."""
        self._store.clear()

    def get_stats(self) -> dict[str, Any]:
        """Size and limits of the cache, expired entries excluded."""
        now = time.monotonic()
        live = sum(1 for _, expires_at in self._store.values() if expires_at is None or now <= expires_at)
        return {"type": "memory", "size": live, "max_size": self._max_entries}
