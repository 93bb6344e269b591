"""Rendering of command results and listings.

Two kinds of things reach the terminal: OutputData, describing what one
command produced (the tool's output, the command line that ran and its
exit status), and row tables for the ``commands`` and ``describe``
listings. Each OutputFormatter renders both for one OutputFormat.
"""

import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TextIO

TableRow = Mapping[str, Any]


class OutputFormat(str, Enum):
    """Supported output formats."""

    PLAIN = "plain"
    JSON = "json"
    RICH = "rich"


@dataclass
class OutputData:
    """What a command produced, ready to be rendered.

    Attributes:
        content: Output of the external tool, or structured data such
            as the configuration summary.
        title: Display name of the command or section.
        command_line: Masked command line that ran, or would run.
        exit_code: Exit status of the external tool.
        stderr: Diagnostic output of the external tool.
        dry_run: Whether command_line was only planned and never run.
        error: Error message if the command failed.
    """

    content: str | dict[str, Any] = ""
    title: str | None = None
    command_line: str | None = None
    exit_code: int | None = None
    stderr: str | None = None
    dry_run: bool = False
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def planned(cls, command_line: str, title: str | None = None) -> "OutputData":
        """Describe a dry run: the command line that would be executed."""
        return cls(title=title, command_line=command_line, dry_run=True)

    @classmethod
    def failed(
        cls,
        error: str,
        title: str | None = None,
        *,
        exit_code: int | None = None,
        stderr: str | None = None,
    ) -> "OutputData":
        return cls(title=title, exit_code=exit_code, stderr=stderr, error=error)

    def execution_details(self) -> dict[str, Any]:
        """Facts about the tool invocation that are known, in display order."""
        details: dict[str, Any] = {}
        if self.command_line is not None:
            details["command_line"] = self.command_line
        if self.exit_code is not None:
            details["exit_code"] = self.exit_code
        if self.stderr:
            details["stderr"] = self.stderr
        return details


class OutputFormatter(ABC):
    """Abstract base class for output formatters.

    Results go to the output stream and failures to the error stream,
    so tool output can be piped while errors stay visible.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
    ) -> None:
        """Initialize the formatter.

        Args:
            stream: Output stream (defaults to stdout).
            error_stream: Error stream (defaults to stderr).
            verbose: Whether to show the command line, exit status and
                stderr of successful runs.
        """
        self._stream = stream or sys.stdout
        self._error_stream = error_stream or sys.stderr
        self._verbose = verbose

    @property
    def stream(self) -> TextIO:
        return self._stream

    @property
    def error_stream(self) -> TextIO:
        return self._error_stream

    @property
    def verbose(self) -> bool:
        return self._verbose

    @property
    @abstractmethod
    def format_type(self) -> OutputFormat:
        pass

    @abstractmethod
    def format(self, data: OutputData) -> str:
        """Render a command's output as a string."""
        pass

    @abstractmethod
    def format_table(
        self,
        rows: Sequence[TableRow],
        columns: Sequence[str],
        title: str | None = None,
    ) -> str:
        """Render a listing.

        Args:
            rows: One mapping per row; missing cells render empty.
            columns: Keys to show, in order.
            title: Optional heading.

        Returns:
            The rendered table, or an empty string for no rows.
        """
        pass

    def print(self, data: OutputData) -> None:
        stream = self._stream if data.success else self._error_stream
        print(self.format(data), file=stream)

    def print_text(self, text: str) -> None:
        """Print already rendered text to the output stream."""
        print(text, file=self._stream)
