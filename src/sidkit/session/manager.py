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
"""SessionIdManager — issues, reads and resolves session ids per request.

Every accessor re-derives its answer from the request's item map and
cookies; nothing is remembered between calls. Two ids can coexist for a
user agent:

* the *temporary* id, a session cookie the client drops when it closes, and
* the *permanent* id, a long-lived cookie.

The ``perm`` session option selects which one is active.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from sidkit.cache.ports.outbound import CacheAdapter
from sidkit.config.properties.session import SessionProperties
from sidkit.container.registry import ServiceRegistry
from sidkit.core.config import Config
from sidkit.logging import LoggingPort, StructlogAdapter
from sidkit.session.auth import AuthRepository, AuthUserSession, update_session
from sidkit.session.ids import create_random_session_id
from sidkit.session.options import (
    SessionOptions,
    format_session_options,
    merge_session_options,
    parse_session_options,
    split_session_options,
)
from sidkit.web.cookies import CookieWriter, add_permanent_cookie, add_session_cookie
from sidkit.web.request import (
    get_item_or_cookie,
    is_secure_connection,
    request_items,
    response_cookies,
)

T = TypeVar("T")

logger = structlog.get_logger("sidkit.session")


class SessionIdManager:
    """Session identity operations bound to one :class:`SessionProperties`.

    Args:
        properties: Cookie names, expiry and security flags. Defaults apply
            when omitted.
        services: Registry consulted for an :class:`AuthRepository` when the
            request carries none.
    """

    def __init__(
        self,
        properties: SessionProperties | None = None,
        services: ServiceRegistry | None = None,
    ) -> None:
        self._props = properties or SessionProperties()
        self._services = services

    @classmethod
    def from_config(
        cls,
        config: Config,
        services: ServiceRegistry | None = None,
        logging_port: LoggingPort | None = None,
    ) -> SessionIdManager:
        """Build a manager from ``sidkit.session`` and apply ``sidkit.logging``.

        Logging goes through a :class:`StructlogAdapter` unless another
        *logging_port* is given.
        """
        (logging_port or StructlogAdapter()).configure(config)
        return cls(config.bind(SessionProperties), services=services)

    @property
    def properties(self) -> SessionProperties:
        return self._props

    # ------------------------------------------------------------------
    # Session options
    # ------------------------------------------------------------------

    def get_session_options(self, request: Any) -> set[str]:
        """Return the option flags stored for *request* (empty when none)."""
        return parse_session_options(get_item_or_cookie(request, self._props.session_options_cookie))

    def add_session_options(self, request: Any, *options: str, response: Any = None) -> set[str]:
        """Merge *options* into the request's flags and persist them.

        The merged flags are written to a long-lived cookie and to the
        request items. Returns an empty set without writing anything when
        *request* is ``None`` or no options are given.
        """
        if request is None or not options:
            return set()

        existing = split_session_options(get_item_or_cookie(request, self._props.session_options_cookie))
        merged = merge_session_options(existing, options)
        value = format_session_options(merged)

        writer = self._cookie_writer(response, request)
        if writer is not None:
            add_permanent_cookie(
                writer,
                self._props.session_options_cookie,
                value,
                expiry=self._permanent_expiry,
                httponly=self._props.http_only_cookies,
            )

        request_items(request)[self._props.session_options_cookie] = value
        logger.debug("session_options_updated", options=merged)
        return set(merged)

    def is_permanent_session(self, request: Any) -> bool:
        return SessionOptions.PERMANENT in self.get_session_options(request)

    # ------------------------------------------------------------------
    # Session ids
    # ------------------------------------------------------------------

    def get_session_id(self, request: Any) -> str | None:
        """Return the active session id: permanent under ``perm``, else temporary."""
        if self.is_permanent_session(request):
            return self.get_permanent_session_id(request)
        return self.get_temporary_session_id(request)

    def get_permanent_session_id(self, request: Any) -> str | None:
        return get_item_or_cookie(request, self._props.permanent_session_id_cookie)

    def get_temporary_session_id(self, request: Any) -> str | None:
        return get_item_or_cookie(request, self._props.session_id_cookie)

    def create_session_id(self, response: Any, request: Any) -> str:
        """Create only the active id (permanent under ``perm``, else temporary)."""
        if self.is_permanent_session(request):
            return self.create_permanent_session_id(response, request)
        return self.create_temporary_session_id(response, request)

    def create_session_ids(self, response: Any, request: Any) -> str:
        """Create both ids and return the active one.

        Two fresh tokens are minted on every call, replacing any ids the
        request already had. Check :meth:`get_session_id` first when reuse
        is wanted.
        """
        permanent_id = self.create_permanent_session_id(response, request)
        temporary_id = self.create_temporary_session_id(response, request)
        return permanent_id if self.is_permanent_session(request) else temporary_id

    def create_permanent_session_id(self, response: Any, request: Any) -> str:
        session_id = create_random_session_id()

        writer = self._cookie_writer(response, request)
        if writer is not None:
            add_permanent_cookie(
                writer,
                self._props.permanent_session_id_cookie,
                session_id,
                expiry=self._permanent_expiry,
                httponly=self._props.http_only_cookies,
            )

        request_items(request)[self._props.permanent_session_id_cookie] = session_id
        logger.debug("session_id_created", kind="permanent", cookie_written=writer is not None)
        return session_id

    def create_temporary_session_id(self, response: Any, request: Any) -> str:
        session_id = create_random_session_id()

        writer = self._cookie_writer(response, request)
        if writer is not None:
            secure = self._props.only_send_session_cookies_securely and is_secure_connection(request)
            add_session_cookie(
                writer,
                self._props.session_id_cookie,
                session_id,
                httponly=self._props.http_only_cookies,
                secure=secure,
            )

        request_items(request)[self._props.session_id_cookie] = session_id
        logger.debug("session_id_created", kind="temporary", cookie_written=writer is not None)
        return session_id

    # ------------------------------------------------------------------
    # Cached user sessions
    # ------------------------------------------------------------------

    def session_key(self, session_id: str) -> str:
        """Cache key for *session_id*."""
        return f"{self._props.session_key_prefix}{session_id}"

    def get_session_key(self, request: Any) -> str | None:
        """Cache key of the active session, or ``None`` when the request has no id."""
        session_id = self.get_session_id(request)
        return None if session_id is None else self.session_key(session_id)

    async def session_as(
        self,
        cache: CacheAdapter,
        request: Any,
        response: Any = None,
        factory: Callable[[], T] = AuthUserSession,  # type: ignore[assignment]
    ) -> T:
        """Return the cached session for the active id, or a new default one.

        When the request has no session id yet, both ids are created as a
        side effect. The default session built by *factory* is never stored;
        use :meth:`save_session` to persist it.
        """
        session_key = self.get_session_key(request)

        if session_key is not None:
            cached = _as_session(await cache.get(session_key), factory)
            if cached is not None:
                return cached
            logger.debug("session_cache_miss")
        else:
            self.create_session_ids(response, request)

        return factory()

    async def save_session(
        self,
        cache: CacheAdapter,
        request: Any,
        session: Any,
        ttl: timedelta | None = None,
        response: Any = None,
    ) -> str:
        """Store *session* under the active session key and return the key.

        Both ids are created first when the request has none. A session
        without an ``id`` gets the active session id.
        """
        session_id = self.get_session_id(request)
        if session_id is None:
            session_id = self.create_session_ids(response, request)

        if hasattr(session, "id") and session.id is None:
            session.id = session_id

        session_key = self.session_key(session_id)
        await cache.put(session_key, session, ttl=ttl)
        return session_key

    async def clear_session(self, cache: CacheAdapter, request: Any) -> None:
        """Evict the active session from *cache*; no-op without a session id."""
        session_key = self.get_session_key(request)
        if session_key is None:
            return
        await cache.evict(session_key)
        logger.debug("session_cleared")

    async def update_from_auth_repository(
        self,
        session: Any,
        request: Any,
        repository: AuthRepository | None = None,
    ) -> None:
        """Refresh roles and permissions on *session* from the auth repository.

        The repository is taken from the argument, else from the registry the
        middleware attached to the request, else from this manager's
        registry. No-op when none is available.
        """
        if session is None:
            return
        if repository is None:
            repository = self._resolve_auth_repository(request)
        if repository is None:
            return

        user_auth = await repository.get_user_auth(session, None)
        update_session(session, user_auth)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @property
    def _permanent_expiry(self) -> timedelta:
        return timedelta(days=self._props.permanent_cookie_expiry_days)

    @staticmethod
    def _cookie_writer(response: Any, request: Any) -> CookieWriter | None:
        writer = response if response is not None else response_cookies(request)
        return writer if isinstance(writer, CookieWriter) else None

    def _resolve_auth_repository(self, request: Any) -> AuthRepository | None:
        state = getattr(request, "state", None)
        request_services: ServiceRegistry | None = getattr(state, "services", None)
        for registry in (request_services, self._services):
            if registry is None:
                continue
            repository = registry.try_resolve(AuthRepository)
            if repository is not None:
                return repository
        return None


def _as_session(value: Any, factory: Callable[[], T]) -> T | None:
    """Interpret a cached value as the session type *factory* builds.

    Dicts coming back from JSON caches are validated into pydantic session
    types and rebuilt into dataclass session types. A dict that does not fit
    the type counts as a miss.
    """
    if value is None:
        return None
    if not (isinstance(factory, type) and isinstance(value, dict)):
        return value  # type: ignore[no-any-return]

    if issubclass(factory, BaseModel):
        try:
            return factory.model_validate(value)  # type: ignore[return-value]
        except ValidationError:
            logger.warning("cached_session_invalid", session_type=factory.__name__)
            return None
    if dataclasses.is_dataclass(factory):
        try:
            return factory(**value)
        except TypeError:
            logger.warning("cached_session_invalid", session_type=factory.__name__)
            return None
    return value  # type: ignore[no-any-return]
