"""CLI layer for cmdwrap.

This module provides the command-line interface for cmdwrap,
built on Typer with Rich formatting support.

Usage:
    cmdwrap commands
    cmdwrap describe status
    cmdwrap run status -a url=jdbc:h2:mem:db -a changelogFile=master.xml
"""

from cmdwrap.cli.app import app, main
from cmdwrap.cli.context import CliContext, create_context
from cmdwrap.cli.options import (
    ArgumentOption,
    DryRunOption,
    FormatChoice,
    FormatOption,
    VerboseOption,
)

__all__ = [
    # App
    "app",
    "main",
    # Context
    "CliContext",
    "create_context",
    # Options
    "ArgumentOption",
    "DryRunOption",
    "FormatChoice",
    "FormatOption",
    "VerboseOption",
]
