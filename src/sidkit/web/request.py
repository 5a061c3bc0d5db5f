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
"""Per-request item storage and request inspection helpers.

Items live in the ASGI scope so they die with the request and are shared by
every ``Request`` object built over the same scope.
"""

from __future__ import annotations

from typing import Any

from sidkit.web.cookies import ResponseCookies

ITEMS_SCOPE_KEY = "sidkit.items"

_SECURE_SCHEMES = frozenset({"https", "wss"})


def request_items(request: Any) -> dict[str, Any]:
    """Return the mutable per-request item map, creating it on first use."""
    items: dict[str, Any] = request.scope.setdefault(ITEMS_SCOPE_KEY, {})
    return items


def get_item_or_cookie(request: Any, name: str) -> Any | None:
    """Two-tier lookup: a per-request item wins, otherwise the request cookie."""
    value = request_items(request).get(name)
    if value is not None:
        return value
    cookies: dict[str, str] = getattr(request, "cookies", {})
    return cookies.get(name)


def is_secure_connection(request: Any) -> bool:
    return request.scope.get("scheme", "http") in _SECURE_SCHEMES


def response_cookies(request: Any) -> ResponseCookies | None:
    """The deferred cookie jar attached by ``SessionIdMiddleware``, if any."""
    return getattr(request.state, "response_cookies", None)
