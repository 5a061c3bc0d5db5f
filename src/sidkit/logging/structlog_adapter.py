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
"""StructlogAdapter — structlog output for sidkit with session tokens masked."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, MutableMapping
from typing import Any

import structlog

from sidkit.config.properties.logging import LoggingProperties
from sidkit.config.properties.session import SessionProperties
from sidkit.core.config import Config

REDACTED = "[redacted]"


class SessionIdRedactor:
    """structlog processor masking event fields that carry session tokens.

    Matching is on the field name, case-insensitive, with ``-`` and ``_``
    treated alike so ``ss-id`` also covers ``ss_id``.
    """

    def __init__(self, keys: Iterable[str]) -> None:
        self._keys = frozenset(_normalize(key) for key in keys)

    @property
    def keys(self) -> frozenset[str]:
        return self._keys

    def __call__(self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        for name in list(event_dict):
            if _normalize(name) in self._keys and event_dict[name] is not None:
                event_dict[name] = REDACTED
        return event_dict


def _normalize(key: str) -> str:
    return key.lower().replace("-", "_")


class StructlogAdapter:
    """Logging adapter backed by structlog.

    Session code logs through ``structlog.get_logger("sidkit.session")``;
    this adapter picks the renderer (``console`` or ``json``), the levels,
    and the fields masked by :class:`SessionIdRedactor`. The configured
    cookie names are always masked alongside ``sidkit.logging.redact-keys``.
    """

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}
        self._redactor = SessionIdRedactor(LoggingProperties().redact_keys)

    @property
    def redactor(self) -> SessionIdRedactor:
        return self._redactor

    def configure(self, config: Config) -> None:
        """Configure structlog from the ``sidkit.logging`` section of *config*."""
        props = config.bind(LoggingProperties)
        session = config.bind(SessionProperties)

        levels = {str(k): str(v).upper() for k, v in dict(props.level).items()}
        self._root_level = levels.pop("root", "INFO")
        self._module_levels = levels
        self._format = props.format.lower()
        self._redactor = SessionIdRedactor(
            [
                *props.redact_keys,
                session.session_id_cookie,
                session.permanent_session_id_cookie,
            ]
        )

        self._setup_structlog()
        for module, level in self._module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _setup_structlog(self) -> None:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            self._redactor,
            structlog.processors.TimeStamper(fmt="iso"),
        ]
        if self._format == "json":
            processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
