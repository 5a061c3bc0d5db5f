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
"""User session and user-auth models plus the auth repository port."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UserAuth(BaseModel):
    """A user record as stored by an auth repository."""

    id: str | None = None
    user_name: str | None = None
    email: str | None = None
    display_name: str | None = None
    roles: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)


class AuthUserSession(BaseModel):
    """Default user session cached under the active session key.

    A freshly constructed instance is the unauthenticated session handed out
    when nothing is cached for the request.
    """

    id: str | None = None
    user_auth_id: str | None = None
    user_auth_name: str | None = None
    display_name: str | None = None
    email: str | None = None
    is_authenticated: bool = False
    roles: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    last_modified: datetime = Field(default_factory=_utcnow)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions


@runtime_checkable
class AuthRepository(Protocol):
    """Looks up the stored user record behind a session."""

    async def get_user_auth(self, session: Any, tokens: Any | None = None) -> UserAuth | None: ...


def update_session(session: Any, user_auth: UserAuth | None) -> None:
    """Copy roles and permissions from *user_auth* onto *session*.

    No-op when either argument is ``None``.
    """
    if session is None or user_auth is None:
        return
    session.roles = list(user_auth.roles)
    session.permissions = list(user_auth.permissions)
