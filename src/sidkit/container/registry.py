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
"""Service registry used to locate collaborators such as the auth repository."""

from __future__ import annotations

import difflib
from typing import Any, TypeVar, cast

from sidkit.kernel.exceptions import NoSuchServiceError

T = TypeVar("T")


class ServiceRegistry:
    """Maps service types to singleton instances.

    An instance is registered under its concrete type and under every
    interface passed to :meth:`register`, so callers can resolve by
    protocol (``registry.resolve(AuthRepository)``).
    """

    def __init__(self) -> None:
        self._services: dict[type, Any] = {}

    def register(self, instance: Any, *interfaces: type) -> None:
        """Register *instance* under its own type and each of *interfaces*."""
        self._services[type(instance)] = instance
        for interface in interfaces:
            self._services[interface] = instance

    def resolve(self, cls: type[T]) -> T:
        """Return the instance registered for *cls*.

        Raises:
            NoSuchServiceError: When nothing is registered for *cls*.
        """
        if cls in self._services:
            return cast(T, self._services[cls])
        raise NoSuchServiceError(cls, suggestions=self._similar_names(getattr(cls, "__name__", "")))

    def try_resolve(self, cls: type[T]) -> T | None:
        """Like :meth:`resolve` but returns ``None`` when nothing is registered."""
        try:
            return self.resolve(cls)
        except NoSuchServiceError:
            return None

    def contains(self, cls: type) -> bool:
        return cls in self._services

    def _similar_names(self, name: str) -> list[str]:
        if not name:
            return []
        registered = [getattr(cls, "__name__", repr(cls)) for cls in self._services]
        return difflib.get_close_matches(name, registered, n=3, cutoff=0.6)
