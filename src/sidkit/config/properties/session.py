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
"""Session identity configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from sidkit.core.config import config_properties


@config_properties(prefix="sidkit.session")
@dataclass
class SessionProperties:
    """Configuration for session id cookies and session keys (sidkit.session.*)."""

    session_id_cookie: str = "ss-id"
    permanent_session_id_cookie: str = "ss-pid"
    session_options_cookie: str = "ss-opt"
    permanent_cookie_expiry_days: int = 7300
    only_send_session_cookies_securely: bool = False
    http_only_cookies: bool = True
    session_key_prefix: str = "urn:iauthsession:"
    ensure_session_ids: bool = True
