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
"""SessionIdMiddleware — gives every HTTP request a session identity.

Pure ASGI middleware: it attaches a deferred :class:`ResponseCookies` jar to
the request, optionally issues missing session ids up front, and appends the
collected ``Set-Cookie`` headers to the downstream response.
"""

from __future__ import annotations

from collections.abc import Sequence
from fnmatch import fnmatch

import structlog
from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from sidkit.container.registry import ServiceRegistry
from sidkit.session.manager import SessionIdManager
from sidkit.web.cookies import ResponseCookies

logger = structlog.get_logger("sidkit.session")


class SessionIdMiddleware:
    """Issues session ids and flushes session cookies for HTTP requests.

    Handlers reach the pieces through ``request.state``:

    * ``session_manager``: the :class:`SessionIdManager`,
    * ``response_cookies``: where manager calls without an explicit
      response write their cookies,
    * ``services``: the registry used to find an auth repository.

    Args:
        app: The downstream ASGI application.
        manager: Session id manager; a default-configured one when omitted.
        services: Optional service registry exposed to handlers.
        exclude_patterns: Glob patterns of paths left untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        manager: SessionIdManager | None = None,
        services: ServiceRegistry | None = None,
        exclude_patterns: Sequence[str] = (),
    ) -> None:
        self.app = app
        self._manager = manager or SessionIdManager(services=services)
        self._services = services
        self._exclude_patterns = list(exclude_patterns)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self._is_excluded(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        cookies = ResponseCookies()
        request.state.response_cookies = cookies
        request.state.session_manager = self._manager
        if self._services is not None:
            request.state.services = self._services

        if self._manager.properties.ensure_session_ids:
            self._ensure_session_ids(request, cookies)

        async def send_with_cookies(message: Message) -> None:
            if message["type"] == "http.response.start" and len(cookies):
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                for value in cookies.header_values():
                    headers.append("set-cookie", value.decode("latin-1"))
            await send(message)

        await self.app(scope, receive, send_with_cookies)

    def _ensure_session_ids(self, request: Request, cookies: ResponseCookies) -> None:
        if self._manager.get_temporary_session_id(request) is None:
            self._manager.create_temporary_session_id(cookies, request)
        if self._manager.get_permanent_session_id(request) is None:
            self._manager.create_permanent_session_id(cookies, request)

    def _is_excluded(self, path: str) -> bool:
        return any(fnmatch(path, pattern) for pattern in self._exclude_patterns)
