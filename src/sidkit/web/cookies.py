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
"""Cookie writing helpers and the deferred response cookie jar.

Anything exposing Starlette's ``Response.set_cookie`` signature is a
:class:`CookieWriter`; :class:`ResponseCookies` collects cookies before the
response object exists and copies them onto it later.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Literal, Protocol, runtime_checkable

from starlette.responses import Response

SameSite = Literal["lax", "strict", "none"]


@runtime_checkable
class CookieWriter(Protocol):
    """Response-side cookie sink (Starlette ``Response`` or :class:`ResponseCookies`)."""

    def set_cookie(
        self,
        key: str,
        value: str = "",
        max_age: int | None = None,
        expires: datetime | str | int | None = None,
        path: str | None = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = False,
        samesite: SameSite | None = "lax",
    ) -> None: ...


class ResponseCookies:
    """Collects ``Set-Cookie`` headers for a response that has not been built yet.

    Rendering is delegated to a throwaway Starlette ``Response`` so header
    formatting matches what a real response would emit.
    """

    def __init__(self) -> None:
        self._carrier = Response()
        self._values: dict[str, str] = {}

    def set_cookie(
        self,
        key: str,
        value: str = "",
        max_age: int | None = None,
        expires: datetime | str | int | None = None,
        path: str | None = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = False,
        samesite: SameSite | None = "lax",
    ) -> None:
        self._carrier.set_cookie(
            key,
            value,
            max_age=max_age,
            expires=expires,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            samesite=samesite,
        )
        self._values[key] = value

    @property
    def values(self) -> dict[str, str]:
        """Last value written per cookie name."""
        return dict(self._values)

    def header_values(self) -> list[bytes]:
        """Raw ``Set-Cookie`` header values in write order."""
        return [value for name, value in self._carrier.raw_headers if name == b"set-cookie"]

    def apply(self, response: Any) -> None:
        """Append the collected ``Set-Cookie`` headers to *response*."""
        response.raw_headers.extend((b"set-cookie", value) for value in self.header_values())

    def __len__(self) -> int:
        return len(self.header_values())


def add_permanent_cookie(
    writer: CookieWriter,
    name: str,
    value: str,
    *,
    expiry: timedelta,
    httponly: bool = True,
    secure: bool = False,
) -> None:
    """Write a long-lived cookie that expires *expiry* from now."""
    writer.set_cookie(
        key=name,
        value=value,
        expires=datetime.now(UTC) + expiry,
        path="/",
        secure=secure,
        httponly=httponly,
        samesite="lax",
    )


def add_session_cookie(
    writer: CookieWriter,
    name: str,
    value: str,
    *,
    httponly: bool = True,
    secure: bool = False,
) -> None:
    """Write a cookie without expiry; the client drops it when its session ends."""
    writer.set_cookie(
        key=name,
        value=value,
        path="/",
        secure=secure,
        httponly=httponly,
        samesite="lax",
    )
