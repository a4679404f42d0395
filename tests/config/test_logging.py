"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from moving.config.logging import configure_logging, flush_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    moving = logging.getLogger("moving")
    moving_level = moving.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    moving.setLevel(moving_level)
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_debug_level(self) -> None:
        configure_logging(debug=True)
        assert logging.getLogger("moving").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_default_level_is_info(self) -> None:
        configure_logging()
        assert logging.getLogger("moving").level == logging.INFO

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        structlog.get_logger("moving.rpc").info("incoming request", method="/x/Y")
        flush_logging()
        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "incoming request"
        assert record["method"] == "/x/Y"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_stdlib_loggers_share_formatter(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        logging.getLogger("moving.services").info("plain %s", "record")
        flush_logging()
        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "plain record"
        assert record["logger"] == "moving.services"

    def test_service_name_on_every_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True, service_name="moving-eu")
        structlog.get_logger("moving.app").info("started")
        logging.getLogger("moving.repositories").warning("slow query")
        flush_logging()
        lines = capsys.readouterr().err.strip().splitlines()[-2:]
        assert [json.loads(line)["service"] for line in lines] == ["moving-eu", "moving-eu"]

    def test_third_party_loggers_quieted(self) -> None:
        configure_logging(debug=True)
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("alembic").level == logging.WARNING
