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
"""Tests for StructlogAdapter and the LoggingPort protocol."""

import logging

import structlog

from sidkit.core.config import Config
from sidkit.logging.port import LoggingPort
from sidkit.logging.structlog_adapter import REDACTED, SessionIdRedactor, StructlogAdapter
from sidkit.session.manager import SessionIdManager


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sidkit": {"logging": {"level": {"root": "debug"}}}}))
        assert adapter._root_level == "DEBUG"

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sidkit": {"logging": {"format": "JSON"}}}))
        assert adapter._format == "json"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"sidkit": {"logging": {"level": {"root": "INFO", "sidkit.session": "DEBUG"}}}})
        adapter.configure(config)
        assert adapter._module_levels == {"sidkit.session": "DEBUG"}
        assert logging.getLogger("sidkit.session").level == logging.DEBUG


class TestStructlogAdapterLoggers:
    def test_get_logger_returns_usable_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("sidkit.test")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("sidkit.cache", "warning")
        assert logging.getLogger("sidkit.cache").level == logging.WARNING


class TestSessionIdRedactor:
    def test_masks_configured_fields(self):
        redactor = SessionIdRedactor(["session_id", "ss-id"])
        event = redactor(None, "info", {"event": "login", "session_id": "abc", "ss_id": "def", "user": "alice"})
        assert event == {"event": "login", "session_id": REDACTED, "ss_id": REDACTED, "user": "alice"}

    def test_none_values_stay_none(self):
        redactor = SessionIdRedactor(["session_id"])
        assert redactor(None, "info", {"event": "x", "session_id": None})["session_id"] is None

    def test_configure_covers_cookie_names(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sidkit": {"session": {"session-id-cookie": "sid", "permanent-session-id-cookie": "psid"}}}))
        assert {"sid", "psid", "session_id", "session_key"} <= adapter.redactor.keys

    def test_configure_reads_redact_keys(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sidkit": {"logging": {"redact-keys": ["auth_token"]}}}))
        assert "auth_token" in adapter.redactor.keys
        assert "session_id" not in adapter.redactor.keys

    def test_redactor_installed_in_processor_chain(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter.redactor in structlog.get_config()["processors"]


class TestManagerAppliesLogging:
    def test_from_config_configures_logging(self):
        config = Config({"sidkit": {"logging": {"level": {"root": "INFO", "sidkit.session": "WARNING"}}}})
        SessionIdManager.from_config(config)
        assert logging.getLogger("sidkit.session").level == logging.WARNING
        processors = structlog.get_config()["processors"]
        assert any(isinstance(p, SessionIdRedactor) for p in processors)

    def test_from_config_uses_given_logging_port(self):
        class RecordingPort:
            def __init__(self) -> None:
                self.configured: list[Config] = []

            def configure(self, config: Config) -> None:
                self.configured.append(config)

            def get_logger(self, name: str):
                return structlog.get_logger(name)

            def set_level(self, name: str, level: str) -> None:
                pass

        port = RecordingPort()
        config = Config({})
        SessionIdManager.from_config(config, logging_port=port)
        assert port.configured == [config]
