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
"""Redis-backed cache adapter."""

from __future__ import annotations

import dataclasses
import json
from datetime import timedelta
from typing import Any, cast

import structlog
from pydantic import BaseModel

logger = structlog.get_logger("sidkit.cache")


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


class RedisCacheAdapter:
    """Cache adapter delegating to a ``redis.asyncio.Redis``-like client.

    Values are stored as JSON. Pydantic models and dataclasses are dumped to
    plain dicts on the way in and come back as dicts. Session resolution
    rebuilds them into the requested pydantic or dataclass session type;
    nested dataclasses stay dicts.
    """

    def __init__(self, client: Any, key_prefix: str = "") -> None:
        self._client = client
        self._key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str = "redis://localhost:6379/0", key_prefix: str = "") -> RedisCacheAdapter:
        """Create an adapter over a new ``redis.asyncio`` client (requires the ``redis`` extra)."""
        import redis.asyncio as aioredis

        client = aioredis.from_url(url)  # type: ignore[no-untyped-call,unused-ignore]
        return cls(client=client, key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    async def get(self, key: str) -> Any | None:
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("cache_value_undecodable", key=key)
            return None

    async def put(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        raw = json.dumps(_to_jsonable(value))
        ex = int(ttl.total_seconds()) if ttl is not None else None
        await self._client.set(self._key(key), raw.encode(), ex=ex)

    async def evict(self, key: str) -> bool:
        count = await self._client.delete(self._key(key))
        return cast(bool, count > 0)

    async def exists(self, key: str) -> bool:
        count = await self._client.exists(self._key(key))
        return cast(bool, count > 0)

    async def clear(self) -> None:
        """Remove every key under the prefix, or flush the database when unprefixed."""
        if not self._key_prefix:
            await self._client.flushdb()
            return
        keys = [key async for key in self._client.scan_iter(match=f"{self._key_prefix}*")]
        if keys:
            await self._client.delete(*keys)

    async def start(self) -> None:
        """Validate connectivity by pinging Redis."""
        await self._client.ping()

    async def stop(self) -> None:
        await self._client.aclose()
