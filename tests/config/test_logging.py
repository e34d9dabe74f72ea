"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from ctxchain.config.logging import bind_chain, configure_logging, unbind_chain
from tests.sample_contexts import build_chain

# Logger state is restored by the autouse ``_restore_logging`` fixture in conftest.


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("ctxchain").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("ctxchain").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("ctxchain.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "ctxchain.test"
        assert "timestamp" in parsed

    def test_stdlib_records_get_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("ctxchain.domain.context").debug("Wrapped AContext onto BContext")

        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Wrapped AContext onto BContext"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "ctxchain.domain.context"

    def test_wrap_logs_at_debug(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        build_chain()
        events = [json.loads(line)["event"] for line in capfd.readouterr().err.splitlines()]
        assert "Wrapped ShoutingContext onto AccountContext" in events

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("jinja2").debug("compile noise")
        logging.getLogger("pluggy").debug("hook noise")

        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestBindChain:
    def test_chain_fields_attached(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        bind_chain(build_chain())
        capfd.readouterr()

        structlog.get_logger("ctxchain.test").warning("inside request")

        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["context_head"] == "ShoutingContext"
        assert parsed["context_depth"] == 3

    def test_unbind_removes_fields(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        bind_chain(build_chain())
        unbind_chain()
        capfd.readouterr()

        structlog.get_logger("ctxchain.test").warning("after request")

        parsed = json.loads(capfd.readouterr().err.strip())
        assert "context_head" not in parsed
