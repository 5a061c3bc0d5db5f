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
"""In-memory auth repository."""

from __future__ import annotations

from typing import Any

from sidkit.session.auth import UserAuth


class InMemoryAuthRepository:
    """Auth repository holding :class:`UserAuth` records in a dict.

    Records are matched by the session's ``user_auth_id``, falling back to
    its ``user_auth_name``. Suitable for development and tests.
    """

    def __init__(self, users: list[UserAuth] | None = None) -> None:
        self._by_id: dict[str, UserAuth] = {}
        self._by_name: dict[str, UserAuth] = {}
        for user in users or []:
            self.save(user)

    def save(self, user: UserAuth) -> None:
        if user.id is not None:
            self._by_id[user.id] = user
        if user.user_name is not None:
            self._by_name[user.user_name] = user

    async def get_user_auth(self, session: Any, tokens: Any | None = None) -> UserAuth | None:
        user_auth_id = getattr(session, "user_auth_id", None)
        if user_auth_id is not None and user_auth_id in self._by_id:
            return self._by_id[user_auth_id]
        user_name = getattr(session, "user_auth_name", None)
        if user_name is not None:
            return self._by_name.get(user_name)
        return None
