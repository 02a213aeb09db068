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
"""Keyed memoization of idempotent platform lookups."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from datetime import timedelta
from typing import Any, TypeVar

import structlog

from rentfly.cache.adapters.memory import InMemoryCache
from rentfly.cache.ports.outbound import CacheAdapter
from rentfly.client.operations import OperationArgs
from rentfly.config.properties.cache import CacheProperties

T = TypeVar("T")

logger = structlog.get_logger("rentfly.cache")


def cache_key(operation_name: str, args: OperationArgs | Mapping[str, Any] | None) -> str:
    """``<operation>:<canonical args>``, stable across argument ordering."""
    if args is None:
        args = OperationArgs()
    elif not isinstance(args, OperationArgs):
        args = OperationArgs(params=dict(args))
    return f"{operation_name}:{args.canonical()}"


class ResponseCache:
    """Get-or-compute cache keyed by operation name and arguments.

    Computation is serialized per key, so concurrent misses on the same key
    run the supplier once. Failed suppliers store nothing. A key's lock
    lives only while some caller is computing or waiting on that key.
    """

    def __init__(self, adapter: CacheAdapter | None = None, ttl: timedelta | None = None) -> None:
        self._adapter: CacheAdapter = adapter if adapter is not None else InMemoryCache()
        self._ttl = ttl
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._hits = 0
        self._misses = 0

    @classmethod
    def from_properties(cls, properties: CacheProperties) -> ResponseCache:
        """Build a cache honoring the configured eviction policy."""
        if properties.eviction == "ttl":
            return cls(InMemoryCache(), ttl=timedelta(seconds=properties.ttl_seconds))
        if properties.eviction == "max-entries":
            return cls(InMemoryCache(max_entries=properties.max_entries))
        return cls(InMemoryCache())

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    async def get_or_compute(
        self,
        operation_name: str,
        args: OperationArgs | Mapping[str, Any] | None,
        supplier: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the cached value for the key, computing and storing it on a miss."""
        key = cache_key(operation_name, args)

        cached = await self._adapter.get(key)
        if cached is not None:
            self._hits += 1
            logger.debug("response_cache_hit", key=key)
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                cached = await self._adapter.get(key)
                if cached is not None:
                    self._hits += 1
                    return cached

                self._misses += 1
                logger.debug("response_cache_miss", key=key)
                value = await supplier()
                if value is not None:
                    await self._adapter.put(key, value, ttl=self._ttl)
                return value
        finally:
            self._release(key)

    def _release(self, key: str) -> None:
        remaining = self._lock_users[key] - 1
        if remaining:
            self._lock_users[key] = remaining
        else:
            del self._lock_users[key]
            self._locks.pop(key, None)

    async def invalidate(self, operation_name: str, args: OperationArgs | Mapping[str, Any] | None = None) -> bool:
        """Drop one entry. Returns True if it existed."""
        return await self._adapter.evict(cache_key(operation_name, args))

    async def clear(self) -> None:
        """Drop every entry."""
        await self._adapter.clear()
