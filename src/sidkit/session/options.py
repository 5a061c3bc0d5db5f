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
"""Session option flags and their cookie text form."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

import structlog

logger = structlog.get_logger("sidkit.session")

# Characters a flag cannot carry through a cookie value.
_UNSAFE_FLAG_CHARS = re.compile(r'[\s,;"\\\x00-\x1f\x7f]')


class SessionOptions:
    """Reserved session option flags.

    ``PERMANENT`` and ``TEMPORARY`` are mutually exclusive: adding one
    removes the other. Any other flag may coexist with either.
    """

    TEMPORARY = "temp"
    PERMANENT = "perm"


def is_valid_session_option(flag: str) -> bool:
    return bool(flag) and not _UNSAFE_FLAG_CHARS.search(flag)


def parse_session_options(raw: Any) -> set[str]:
    """Split a stored options value into flags.

    Missing or empty values yield an empty set, and so does a value that is
    not text. Individual flags that cannot live in a cookie are dropped; the
    remaining flags are kept.
    """
    return set(split_session_options(raw))


def merge_session_options(existing: Iterable[str], options: Iterable[str | None]) -> list[str]:
    """Merge *options* into *existing*, keeping first-seen order.

    Empty flags and flags that cannot live in a cookie are skipped. ``perm``
    evicts ``temp`` and vice versa.
    """
    merged = dict.fromkeys(existing)
    for option in options:
        if not option:
            continue
        if not is_valid_session_option(option):
            logger.warning("session_option_rejected", reason="invalid_flag")
            continue
        if option == SessionOptions.PERMANENT:
            merged.pop(SessionOptions.TEMPORARY, None)
        elif option == SessionOptions.TEMPORARY:
            merged.pop(SessionOptions.PERMANENT, None)
        merged[option] = None
    return list(merged)


def format_session_options(options: Iterable[str]) -> str:
    return ",".join(options)


def split_session_options(raw: Any) -> list[str]:
    """Like :func:`parse_session_options` but keeps first-seen order."""
    if raw is None or raw == "":
        return []
    if not isinstance(raw, str):
        logger.warning("session_options_malformed", reason="not_text", value_type=type(raw).__name__)
        return []

    flags = [part.strip() for part in raw.split(",")]
    flags = [flag for flag in flags if flag]
    valid = [flag for flag in flags if is_valid_session_option(flag)]
    if len(valid) != len(flags):
        logger.warning("session_options_malformed", reason="invalid_flag", dropped=len(flags) - len(valid))
    return list(dict.fromkeys(valid))
