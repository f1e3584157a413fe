"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from commctl.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    comm = logging.getLogger("commctl")
    comm_level = comm.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    comm.setLevel(comm_level)
    structlog.contextvars.clear_contextvars()


def _last_json_line(err: str) -> dict[str, object]:
    return json.loads(err.strip().splitlines()[-1])


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("commctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_default_is_warning(self) -> None:
        configure_logging()
        assert logging.getLogger("commctl").level == logging.WARNING

    def test_third_party_loggers_stay_quiet(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sqlalchemy").level == logging.WARNING
        assert logging.getLogger("alembic").level == logging.WARNING

    def test_single_handler_on_reconfigure(self) -> None:
        configure_logging()
        configure_logging(log_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_json_structlog_record(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("commctl.test").warning("json test", answer=42)
        parsed = _last_json_line(capfd.readouterr().err)
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "commctl.test"
        assert "timestamp" in parsed

    def test_stdlib_record_is_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("commctl.services.test").debug("Opened ledger at %s", "/tmp/x")
        parsed = _last_json_line(capfd.readouterr().err)
        assert parsed["event"] == "Opened ledger at /tmp/x"
        assert parsed["level"] == "debug"

    def test_market_bound_to_records(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True, market="Studio Row")
        structlog.get_logger("commctl.test").warning("bound")
        parsed = _last_json_line(capfd.readouterr().err)
        assert parsed["market"] == "Studio Row"

    def test_stdout_untouched(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True)
        structlog.get_logger("commctl.test").warning("to stderr")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "to stderr" in captured.err
