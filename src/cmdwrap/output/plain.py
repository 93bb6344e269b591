"""Plain text output formatter."""

from collections.abc import Sequence
from typing import TextIO

from cmdwrap.output.base import OutputData, OutputFormat, OutputFormatter, TableRow

INDENT = "    "


def _heading(title: str) -> list[str]:
    return [title, "=" * len(title)]


def _indented(text: str) -> list[str]:
    return [f"{INDENT}{line}" for line in text.rstrip("\n").splitlines()]


class PlainFormatter(OutputFormatter):
    """Plain text output formatter.

    The tool's stdout is passed through unchanged and a dry run prints
    nothing but the command line, so output can be piped or pasted into
    a shell.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
        show_titles: bool = True,
    ) -> None:
        """Initialize plain formatter.

        Args:
            stream: Output stream.
            error_stream: Error stream.
            verbose: Whether to show execution details.
            show_titles: Whether to print a heading above results.
        """
        super().__init__(stream, error_stream, verbose)
        self._show_titles = show_titles

    @property
    def format_type(self) -> OutputFormat:
        return OutputFormat.PLAIN

    def format(self, data: OutputData) -> str:
        if data.dry_run:
            return data.command_line or ""

        lines: list[str] = []
        if data.title and self._show_titles:
            lines.extend(_heading(data.title))

        if not data.success:
            lines.append(f"Error: {data.error}")
            if data.stderr:
                lines.extend(_indented(data.stderr))
            return "\n".join(lines)

        if isinstance(data.content, dict):
            width = max((len(str(key)) for key in data.content), default=0)
            for key, value in data.content.items():
                lines.append(f"{str(key).ljust(width)}  {value}".rstrip())
        elif data.content:
            lines.append(data.content.rstrip("\n"))

        if self._verbose:
            lines.extend(self._details(data))
        return "\n".join(lines)

    def _details(self, data: OutputData) -> list[str]:
        lines: list[str] = []
        if data.command_line is not None:
            lines.append(f"$ {data.command_line}")
        if data.exit_code is not None:
            lines.append(f"exit status {data.exit_code}")
        if data.stderr:
            lines.append("stderr:")
            lines.extend(_indented(data.stderr))
        return ["", *lines] if lines else []

    def format_table(
        self,
        rows: Sequence[TableRow],
        columns: Sequence[str],
        title: str | None = None,
    ) -> str:
        """Render rows as whitespace-aligned columns."""
        if not rows:
            return ""

        cells = [[str(row.get(col, "")) for col in columns] for row in rows]
        widths = [
            max(len(col), *(len(line[i]) for line in cells))
            for i, col in enumerate(columns)
        ]

        def join(values: Sequence[str]) -> str:
            return "  ".join(v.ljust(w) for v, w in zip(values, widths)).rstrip()

        lines = _heading(title) if title else []
        lines.append(join([col.upper() for col in columns]))
        lines.extend(join(line) for line in cells)
        return "\n".join(lines)
