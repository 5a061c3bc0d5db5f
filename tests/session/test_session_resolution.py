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
"""Tests for cached user session resolution, saving and clearing."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import pytest

from sidkit.cache.adapters.memory import InMemoryCache
from sidkit.cache.adapters.redis import RedisCacheAdapter
from sidkit.config.properties.session import SessionProperties
from sidkit.session.auth import AuthUserSession
from sidkit.session.manager import SessionIdManager
from sidkit.web.cookies import ResponseCookies


class RecordingCache(InMemoryCache):
    """InMemoryCache that records writes."""

    def __init__(self) -> None:
        super().__init__()
        self.puts: list[str] = []

    async def put(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        self.puts.append(key)
        await super().put(key, value, ttl=ttl)


@dataclass
class CartSession:
    items: list[str] = field(default_factory=list)


class TestGetSessionKey:
    def test_none_without_session_id(self, make_request):
        assert SessionIdManager().get_session_key(make_request()) is None

    def test_derived_from_active_id(self, make_request):
        manager = SessionIdManager()
        assert manager.get_session_key(make_request({"ss-id": "abc"})) == "urn:iauthsession:abc"

    def test_uses_permanent_id_under_perm(self, make_request):
        manager = SessionIdManager()
        request = make_request({"ss-id": "abc", "ss-pid": "xyz", "ss-opt": "perm"})
        assert manager.get_session_key(request) == "urn:iauthsession:xyz"

    def test_custom_prefix(self, make_request):
        manager = SessionIdManager(SessionProperties(session_key_prefix="sess:"))
        assert manager.get_session_key(make_request({"ss-id": "abc"})) == "sess:abc"


class TestSessionAs:
    @pytest.mark.asyncio
    async def test_without_session_id_creates_both_ids_and_returns_default(self, make_request):
        manager = SessionIdManager()
        cache = RecordingCache()
        request = make_request()
        cookies = ResponseCookies()

        session = await manager.session_as(cache, request, cookies)

        assert isinstance(session, AuthUserSession)
        assert session.is_authenticated is False
        assert session.roles == []
        assert manager.get_temporary_session_id(request) is not None
        assert manager.get_permanent_session_id(request) is not None
        assert set(cookies.values) == {"ss-id", "ss-pid"}
        assert cache.puts == []

    @pytest.mark.asyncio
    async def test_returns_cached_value_unchanged(self, make_request):
        manager = SessionIdManager()
        cache = RecordingCache()
        cached = AuthUserSession(id="abc", user_auth_name="alice", is_authenticated=True)
        await cache.put("urn:iauthsession:abc", cached)
        cache.puts.clear()

        session = await manager.session_as(cache, make_request({"ss-id": "abc"}))

        assert session is cached
        assert cache.puts == []

    @pytest.mark.asyncio
    async def test_cache_miss_returns_default_without_creating_ids(self, make_request):
        manager = SessionIdManager()
        cache = RecordingCache()
        request = make_request({"ss-id": "abc"})
        cookies = ResponseCookies()

        session = await manager.session_as(cache, request, cookies)

        assert isinstance(session, AuthUserSession)
        assert session.id is None
        assert session.is_authenticated is False
        assert len(cookies) == 0
        assert manager.get_temporary_session_id(request) == "abc"
        assert cache.puts == []

    @pytest.mark.asyncio
    async def test_custom_factory(self, make_request):
        manager = SessionIdManager()
        session = await manager.session_as(InMemoryCache(), make_request({"ss-id": "abc"}), factory=CartSession)
        assert session == CartSession()

    @pytest.mark.asyncio
    async def test_default_instances_are_distinct(self, make_request):
        manager = SessionIdManager()
        cache = InMemoryCache()
        request = make_request({"ss-id": "abc"})
        first = await manager.session_as(cache, request, factory=CartSession)
        second = await manager.session_as(cache, request, factory=CartSession)
        assert first is not second

    @pytest.mark.asyncio
    async def test_dict_from_json_cache_is_validated(self, make_request):
        manager = SessionIdManager()
        cache = InMemoryCache()
        await cache.put("urn:iauthsession:abc", {"id": "abc", "user_auth_name": "bob", "roles": ["admin"]})

        session = await manager.session_as(cache, make_request({"ss-id": "abc"}))

        assert isinstance(session, AuthUserSession)
        assert session.user_auth_name == "bob"
        assert session.has_role("admin")

    @pytest.mark.asyncio
    async def test_invalid_cached_dict_counts_as_miss(self, make_request):
        manager = SessionIdManager()
        cache = InMemoryCache()
        await cache.put("urn:iauthsession:abc", {"roles": "not-a-list"})

        session = await manager.session_as(cache, make_request({"ss-id": "abc"}))

        assert session.roles == []

    @pytest.mark.asyncio
    async def test_dataclass_session_through_redis(self, make_request, fake_redis):
        manager = SessionIdManager()
        cache = RedisCacheAdapter(fake_redis)
        request = make_request({"ss-id": "abc"})

        await manager.save_session(cache, request, CartSession(items=["x"]))
        session = await manager.session_as(cache, request, factory=CartSession)

        assert isinstance(session, CartSession)
        assert session.items == ["x"]

    @pytest.mark.asyncio
    async def test_pydantic_session_through_redis(self, make_request, fake_redis):
        manager = SessionIdManager()
        cache = RedisCacheAdapter(fake_redis)
        request = make_request({"ss-id": "abc"})

        await manager.save_session(cache, request, AuthUserSession(user_auth_name="alice"))
        session = await manager.session_as(cache, request)

        assert isinstance(session, AuthUserSession)
        assert session.id == "abc"
        assert session.user_auth_name == "alice"

    @pytest.mark.asyncio
    async def test_dict_not_matching_dataclass_counts_as_miss(self, make_request):
        manager = SessionIdManager()
        cache = InMemoryCache()
        await cache.put("urn:iauthsession:abc", {"unknown": 1})

        session = await manager.session_as(cache, make_request({"ss-id": "abc"}), factory=CartSession)

        assert session == CartSession()


class TestSaveSession:
    @pytest.mark.asyncio
    async def test_saves_under_active_key(self, make_request):
        manager = SessionIdManager()
        cache = InMemoryCache()
        request = make_request({"ss-id": "abc"})
        session = AuthUserSession(user_auth_name="alice")

        key = await manager.save_session(cache, request, session)

        assert key == "urn:iauthsession:abc"
        assert session.id == "abc"
        assert await manager.session_as(cache, request) is session

    @pytest.mark.asyncio
    async def test_creates_ids_when_missing(self, make_request):
        manager = SessionIdManager()
        cache = InMemoryCache()
        request = make_request()
        cookies = ResponseCookies()

        key = await manager.save_session(cache, request, AuthUserSession(), response=cookies)

        assert key == manager.get_session_key(request)
        assert set(cookies.values) == {"ss-id", "ss-pid"}
        assert await cache.exists(key)

    @pytest.mark.asyncio
    async def test_keeps_existing_session_id(self, make_request):
        manager = SessionIdManager()
        session = AuthUserSession(id="original")
        await manager.save_session(InMemoryCache(), make_request({"ss-id": "abc"}), session)
        assert session.id == "original"


class TestClearSession:
    @pytest.mark.asyncio
    async def test_clear_then_session_as_returns_default(self, make_request):
        manager = SessionIdManager()
        cache = InMemoryCache()
        request = make_request({"ss-id": "abc"})
        cached = AuthUserSession(id="abc", is_authenticated=True)
        await cache.put("urn:iauthsession:abc", cached)

        await manager.clear_session(cache, request)

        assert await cache.get("urn:iauthsession:abc") is None
        session = await manager.session_as(cache, request)
        assert session is not cached
        assert session.is_authenticated is False

    @pytest.mark.asyncio
    async def test_noop_without_session_id(self, make_request):
        manager = SessionIdManager()
        cache = InMemoryCache()
        await cache.put("other", 1)

        await manager.clear_session(cache, make_request())

        assert await cache.get("other") == 1
