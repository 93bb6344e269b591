"""Logging for cmdwrap.

Records go to stderr, because stdout carries the external tool's
output, and optionally to a JSON-lines file. Structured context given
to log_with_context() travels on the record as ``record.context`` and
is rendered by every formatter here:

    log_with_context(logger, logging.INFO, "Running external command",
                     command_line="liquibase --password=***** status")

Values must already be masked; the formatters print them as given.
"""

import json
import logging
import shlex
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "cmdwrap"
CONTEXT_ATTR = "context"

logger = logging.getLogger(LOGGER_NAME)


def record_context(record: logging.LogRecord) -> Mapping[str, Any]:
    """Context attached to record by log_with_context(), or an empty dict."""
    context = getattr(record, CONTEXT_ATTR, None)
    return context if isinstance(context, Mapping) else {}


def format_context(context: Mapping[str, Any]) -> str:
    """Render context as ``key=value`` pairs, shell-quoting values."""
    return " ".join(
        f"{key}={shlex.quote(str(value))}" for key, value in context.items()
    )


class ContextFormatter(logging.Formatter):
    """Message followed by its context; the handler supplies the level."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        context = record_context(record)
        if context:
            message = f"{message}  {format_context(context)}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class ConsoleFormatter(ContextFormatter):
    """``LEVEL module: message key=value`` lines for terminals without color."""

    def format(self, record: logging.LogRecord) -> str:
        source = record.name.removeprefix(f"{LOGGER_NAME}.")
        return f"{record.levelname:<8} {source}: {super().format(record)}"


class JSONLinesFormatter(logging.Formatter):
    """One JSON object per record, for log files and log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.lineno}",
        }
        context = record_context(record)
        if context:
            entry["context"] = dict(context)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _console_handler(json_format: bool, use_color: bool) -> logging.Handler:
    if json_format:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JSONLinesFormatter())
    elif use_color:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(ContextFormatter())
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(ConsoleFormatter())
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: Path | None = None,
    json_format: bool = False,
    use_color: bool = True,
) -> logging.Logger:
    """Configure the ``cmdwrap`` logger.

    Calling this again replaces the handlers of the previous call.

    Args:
        level: Level name; unknown names fall back to WARNING.
        log_file: Also append JSON lines to this file.
        json_format: Write JSON lines to stderr instead of text.
        use_color: Render stderr records through Rich.

    Returns:
        The configured package logger.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    logger.setLevel(numeric_level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_console_handler(json_format, use_color))
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONLinesFormatter())
        logger.addHandler(file_handler)

    # Keep records away from whatever the host application configured
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a cmdwrap module, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)


def log_with_context(
    target: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """Log message with structured context, attributed to the caller."""
    target.log(level, message, extra={CONTEXT_ATTR: context}, stacklevel=2)
