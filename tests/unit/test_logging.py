"""Tests for logging setup."""

import json
import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from cmdwrap.utils.logging import (
    ConsoleFormatter,
    ContextFormatter,
    JSONLinesFormatter,
    format_context,
    get_logger,
    log_with_context,
    setup_logging,
)


def make_record(message: str = "Running external command") -> logging.LogRecord:
    record = logging.LogRecord(
        "cmdwrap.commands.adapter", logging.INFO, __file__, 7, message, (), None
    )
    record.context = {"command_line": "liquibase --password=***** status"}
    return record


class TestFormatters:
    """Tests for log formatters."""

    def test_format_context_quotes_values(self) -> None:
        """Test values with spaces stay one shell word."""
        assert format_context({"exit_code": 0, "command_line": "lb status"}) == (
            "exit_code=0 command_line='lb status'"
        )

    def test_context_formatter(self) -> None:
        """Test the message is followed by its context."""
        output = ContextFormatter().format(make_record())
        assert output == (
            "Running external command  "
            "command_line='liquibase --password=***** status'"
        )

    def test_console_formatter(self) -> None:
        """Test the plain layout names the level and module."""
        output = ConsoleFormatter().format(make_record())
        assert output.startswith("INFO     commands.adapter: Running external command")

    def test_record_without_context(self) -> None:
        """Test records from plain logger calls format cleanly."""
        record = logging.LogRecord(
            "cmdwrap", logging.WARNING, __file__, 1, "careful", (), None
        )
        assert ConsoleFormatter().format(record) == "WARNING  cmdwrap: careful"

    def test_json_lines_formatter(self) -> None:
        """Test records become JSON objects with nested context."""
        data = json.loads(JSONLinesFormatter().format(make_record()))

        assert data["level"] == "info"
        assert data["logger"] == "cmdwrap.commands.adapter"
        assert data["message"] == "Running external command"
        assert data["source"].endswith(":7")
        assert data["context"] == {
            "command_line": "liquibase --password=***** status"
        }


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_level_and_handlers(self) -> None:
        """Test repeated calls replace the handlers."""
        logger = setup_logging(level="debug", use_color=False)
        setup_logging(level="debug", use_color=False)

        assert logger.name == "cmdwrap"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, ConsoleFormatter)
        assert logger.propagate is False

    def test_color_uses_rich(self) -> None:
        """Test colored output goes through Rich."""
        logger = setup_logging(use_color=True)
        assert isinstance(logger.handlers[0], RichHandler)

    def test_json_console(self) -> None:
        """Test json_format switches stderr to JSON lines."""
        logger = setup_logging(json_format=True)
        assert isinstance(logger.handlers[0].formatter, JSONLinesFormatter)

    def test_unknown_level_falls_back(self) -> None:
        """Test unknown levels default to WARNING."""
        assert setup_logging(level="chatty").level == logging.WARNING

    def test_file_handler(self, temp_dir: Path) -> None:
        """Test log files receive JSON lines."""
        log_file = temp_dir / "logs" / "cmdwrap.log"
        setup_logging(level="INFO", log_file=log_file, use_color=False)

        get_logger("cmdwrap.test").info("hello")
        for handler in logging.getLogger("cmdwrap").handlers:
            handler.flush()

        line = log_file.read_text().strip()
        assert json.loads(line)["message"] == "hello"


class TestLogWithContext:
    """Tests for log_with_context()."""

    def test_context_attached(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test context ends up on the record, attributed to the caller."""
        logger = get_logger("cmdwrap.test")
        with caplog.at_level(logging.INFO, logger="cmdwrap"):
            log_with_context(logger, logging.INFO, "Ran", exit_code=0)

        record = caplog.records[-1]
        assert record.context == {"exit_code": 0}
        assert record.funcName == "test_context_attached"

    def test_disabled_level_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test nothing is emitted below the logger's level."""
        logger = get_logger("cmdwrap.test")
        with caplog.at_level(logging.WARNING, logger="cmdwrap"):
            log_with_context(logger, logging.DEBUG, "Quiet", exit_code=0)

        assert not [r for r in caplog.records if r.getMessage() == "Quiet"]
