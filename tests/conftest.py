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
"""Shared fixtures: Starlette requests built from ASGI scopes and a Redis stub."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from fnmatch import fnmatch

import pytest
from starlette.requests import Request

RequestFactory = Callable[..., Request]


def build_request(cookies: dict[str, str] | None = None, scheme: str = "http", path: str = "/") -> Request:
    headers: list[tuple[bytes, bytes]] = []
    if cookies:
        cookie_header = "; ".join(f"{name}={value}" for name, value in cookies.items())
        headers.append((b"cookie", cookie_header.encode("latin-1")))
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": scheme,
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": headers,
        "server": ("testserver", 443 if scheme == "https" else 80),
        "client": ("testclient", 50000),
    }
    return Request(scope)


@pytest.fixture
def make_request() -> RequestFactory:
    return build_request


class FakeRedis:
    """Minimal in-memory stub matching the redis.asyncio.Redis interface."""

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}
        self.expiries: dict[str, int | None] = {}

    async def get(self, key: str) -> bytes | None:
        return self._store.get(key)

    async def set(self, key: str, value: bytes, ex: int | None = None) -> None:
        self._store[key] = value
        self.expiries[key] = ex

    async def delete(self, *keys: str) -> int:
        count = 0
        for k in keys:
            if k in self._store:
                del self._store[k]
                count += 1
        return count

    async def exists(self, *keys: str) -> int:
        return sum(1 for k in keys if k in self._store)

    async def scan_iter(self, match: str = "*") -> AsyncIterator[str]:
        for key in list(self._store):
            if fnmatch(key, match):
                yield key

    async def flushdb(self) -> None:
        self._store.clear()

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        pass



@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
