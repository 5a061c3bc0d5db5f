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
"""In-memory cache adapter."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Any, NamedTuple


class _Entry(NamedTuple):
    value: Any
    expires_at: float | None


class InMemoryCache:
    """Process-local cache with optional per-entry TTL.

    Values are stored by reference, so a session object put into the cache
    is the same object returned by ``get``. Suitable for development, tests
    and single-process deployments.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    def _live(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and time.monotonic() > entry.expires_at:
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Any | None:
        entry = self._live(key)
        return entry.value if entry is not None else None

    async def put(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        expires_at = time.monotonic() + ttl.total_seconds() if ttl is not None else None
        self._entries[key] = _Entry(value, expires_at)

    async def evict(self, key: str) -> bool:
        """Remove *key*; returns ``True`` if a live entry was removed."""
        return self._live(key) is not None and self._entries.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return sum(1 for key in list(self._entries) if self._live(key) is not None)
