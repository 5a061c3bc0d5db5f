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
"""sidkit exception hierarchy."""

from __future__ import annotations


class SidkitException(Exception):
    """Base exception for all sidkit errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SERVICE_NOT_FOUND").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class InfrastructureException(SidkitException):
    """Failure in a collaborator the session layer depends on."""


class ConfigurationException(InfrastructureException):
    """Configuration could not be loaded or bound."""


class NoSuchServiceError(InfrastructureException):
    """No service is registered for the requested type."""

    def __init__(self, service_type: type, suggestions: list[str] | None = None) -> None:
        self.service_type = service_type
        self.suggestions = suggestions or []
        type_desc = getattr(service_type, "__name__", repr(service_type))
        message = f"No service of type '{type_desc}' is registered"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)}?)"
        super().__init__(
            message=message,
            code="SERVICE_NOT_FOUND",
            context={"service_type": type_desc},
        )
