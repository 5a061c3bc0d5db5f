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
"""sidkit web — cookie writing and per-request storage over Starlette."""

from sidkit.web.cookies import CookieWriter, ResponseCookies, add_permanent_cookie, add_session_cookie
from sidkit.web.request import get_item_or_cookie, is_secure_connection, request_items, response_cookies

__all__ = [
    "CookieWriter",
    "ResponseCookies",
    "add_permanent_cookie",
    "add_session_cookie",
    "get_item_or_cookie",
    "is_secure_connection",
    "request_items",
    "response_cookies",
]
