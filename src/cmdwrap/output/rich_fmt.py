"""Rich terminal output formatter."""

from collections.abc import Sequence
from io import StringIO
from typing import TextIO

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cmdwrap.output.base import OutputData, OutputFormat, OutputFormatter, TableRow


class RichFormatter(OutputFormatter):
    """Rich terminal output formatter.

    Tool output is shown as literal text; markup in it is never
    interpreted. Dry runs show the command line in a panel and failures
    show the tool's stderr beneath the error.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
        width: int | None = None,
        color: bool = True,
    ) -> None:
        """Initialize rich formatter.

        Args:
            stream: Output stream.
            error_stream: Error stream.
            verbose: Whether to show execution details.
            width: Console width (None for auto-detect).
            color: Whether to emit colors and styles.
        """
        super().__init__(stream, error_stream, verbose)
        self._width = width
        self._color = color
        self._consoles: dict[bool, Console] = {}

    @property
    def format_type(self) -> OutputFormat:
        return OutputFormat.RICH

    def _console(self, success: bool) -> Console:
        if success not in self._consoles:
            self._consoles[success] = Console(
                file=self._stream if success else self._error_stream,
                width=self._width,
                no_color=not self._color,
                highlight=False,
            )
        return self._consoles[success]

    def _render(self, renderable: RenderableType) -> str:
        """Render to a string without terminal control codes."""
        buffer = StringIO()
        Console(file=buffer, width=self._width, force_terminal=False).print(
            renderable
        )
        return buffer.getvalue().rstrip()

    def _command_line(self, data: OutputData) -> Text:
        return Text(f"$ {data.command_line}", style="bold")

    def _stderr_panel(self, stderr: str) -> Panel:
        return Panel(
            Text(stderr.rstrip("\n")), title="stderr", border_style="yellow"
        )

    def _content(self, data: OutputData) -> RenderableType:
        if isinstance(data.content, dict):
            grid = Table.grid(padding=(0, 2))
            grid.add_column(style="bold cyan")
            grid.add_column()
            for key, value in data.content.items():
                grid.add_row(str(key), Text(str(value)))
            return grid
        return Text(data.content.rstrip("\n"))

    def _renderable(self, data: OutputData) -> RenderableType:
        if data.dry_run:
            title = f"{data.title} (dry run)" if data.title else "dry run"
            return Panel(self._command_line(data), title=title, border_style="blue")

        if not data.success:
            parts: list[RenderableType] = [
                Text(f"Error: {data.error}", style="bold red")
            ]
            if data.stderr:
                parts.append(self._stderr_panel(data.stderr))
            return Group(*parts)

        body = self._content(data)
        subtitle = None
        if self._verbose and data.exit_code is not None:
            subtitle = f"exit status {data.exit_code}"
        parts = [
            Panel(body, title=data.title, subtitle=subtitle) if data.title else body
        ]
        if self._verbose:
            if data.command_line is not None:
                parts.append(self._command_line(data))
            if data.stderr:
                parts.append(self._stderr_panel(data.stderr))
        return Group(*parts)

    def format(self, data: OutputData) -> str:
        return self._render(self._renderable(data))

    def format_table(
        self,
        rows: Sequence[TableRow],
        columns: Sequence[str],
        title: str | None = None,
    ) -> str:
        """Render rows as a Rich table, first column highlighted."""
        if not rows:
            return ""

        table = Table(title=title, header_style="bold")
        for index, col in enumerate(columns):
            table.add_column(col, style="cyan" if index == 0 else None)
        for row in rows:
            table.add_row(*[Text(str(row.get(col, ""))) for col in columns])
        return self._render(table)

    def print(self, data: OutputData) -> None:
        """Print through a Rich console bound to the right stream."""
        self._console(data.success).print(self._renderable(data))
