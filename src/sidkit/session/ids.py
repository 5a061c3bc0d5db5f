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
"""Session id token generation."""

from __future__ import annotations

import base64
import secrets

SESSION_ID_BYTES = 15


def create_random_session_id() -> str:
    """Return a new unguessable session id.

    The id is the standard base64 encoding of 15 bytes from the OS secure
    random source (120 bits, 20 characters). Random source failures
    propagate to the caller.
    """
    return base64.b64encode(secrets.token_bytes(SESSION_ID_BYTES)).decode("ascii")
