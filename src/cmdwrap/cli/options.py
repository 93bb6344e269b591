"""Shared CLI options for cmdwrap commands.

This module provides reusable Typer options and the parsing helpers
behind them.
"""

from enum import Enum
from typing import Annotated

import typer

from cmdwrap.output.base import OutputFormat


class FormatChoice(str, Enum):
    """Output format choices for CLI."""

    PLAIN = "plain"
    JSON = "json"
    RICH = "rich"


# Type aliases for common CLI options
FormatOption = Annotated[
    FormatChoice | None,
    typer.Option(
        "--format",
        "-f",
        help="Output format (plain, json, rich). Defaults to config setting.",
        case_sensitive=False,
    ),
]

VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Show the command line, exit status and stderr, and log at INFO.",
    ),
]

ArgumentOption = Annotated[
    list[str] | None,
    typer.Option(
        "--arg",
        "-a",
        help="Argument value as NAME=VALUE. Repeat for several arguments.",
        metavar="NAME=VALUE",
    ),
]

DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        "-n",
        help="Print the command line that would run, without running it.",
    ),
]


def get_output_format(
    format_choice: FormatChoice | None, default: str = "rich"
) -> OutputFormat:
    """Convert CLI format choice to OutputFormat.

    Args:
        format_choice: CLI format choice or None.
        default: Default format if none specified.

    Returns:
        OutputFormat enum value.
    """
    if format_choice is None:
        return OutputFormat(default)
    return OutputFormat(format_choice.value)


def parse_assignments(pairs: list[str] | None) -> dict[str, str]:
    """Split ``NAME=VALUE`` pairs into a dict.

    Only the first ``=`` separates name from value, so values may
    themselves contain ``=`` (JDBC URLs often do). Later pairs win.

    Raises:
        typer.BadParameter: If a pair has no ``=`` or an empty name.
    """
    assignments: dict[str, str] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise typer.BadParameter(
                f"Expected NAME=VALUE, got '{pair}'", param_hint="--arg"
            )
        assignments[name] = value
    return assignments
