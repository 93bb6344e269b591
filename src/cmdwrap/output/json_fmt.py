"""JSON output formatter."""

import json
from collections.abc import Sequence
from typing import Any, TextIO

from cmdwrap.output.base import OutputData, OutputFormat, OutputFormatter, TableRow


class JSONFormatter(OutputFormatter):
    """JSON output formatter.

    Every result is a single object. Execution details are top-level
    keys; the tool's stderr is included for failures, or always with
    --verbose.

    Example of a successful run:
        {"success": true, "title": "status", "content": "...",
         "command_line": "liquibase --url=... status", "exit_code": 0}
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
        indent: int | None = 2,
    ) -> None:
        """Initialize JSON formatter.

        Args:
            stream: Output stream.
            error_stream: Error stream.
            verbose: Whether to include stderr of successful runs.
            indent: JSON indentation (None for one line per document).
        """
        super().__init__(stream, error_stream, verbose)
        self._indent = indent

    @property
    def format_type(self) -> OutputFormat:
        return OutputFormat.JSON

    def _dumps(self, document: dict[str, Any]) -> str:
        # default=str covers Paths in the configuration summary
        return json.dumps(
            document, indent=self._indent, ensure_ascii=False, default=str
        )

    def format(self, data: OutputData) -> str:
        document: dict[str, Any] = {"success": data.success}
        if data.title:
            document["title"] = data.title

        if data.dry_run:
            document["dry_run"] = True
        elif data.success:
            document["content"] = data.content
        else:
            document["error"] = data.error

        details = data.execution_details()
        if data.success and not self._verbose:
            details.pop("stderr", None)
        document.update(details)
        return self._dumps(document)

    def format_table(
        self,
        rows: Sequence[TableRow],
        columns: Sequence[str],
        title: str | None = None,
    ) -> str:
        """Render rows as a list of objects restricted to columns."""
        document: dict[str, Any] = {}
        if title:
            document["title"] = title
        document["rows"] = [
            {col: row.get(col, "") for col in columns} for row in rows
        ]
        return self._dumps(document)
