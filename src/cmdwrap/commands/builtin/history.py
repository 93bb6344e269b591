"""Show changesets already deployed to the database."""

from cmdwrap.commands.builtin.connection import define_connection_arguments
from cmdwrap.commands.cli_wrapper import CliWrapperCommand
from cmdwrap.commands.definition import CommandBuilder, NamePath


class HistoryCommand(CliWrapperCommand):
    """Wraps ``history``, also reachable as ``deployments``."""

    command_arguments = frozenset({"format"})

    def define_command_names(self) -> list[NamePath]:
        return [("history",), ("deployments",)]

    def define_arguments(self, builder: CommandBuilder) -> None:
        define_connection_arguments(builder)
        builder.argument("format", str).description(
            "History output format (TABULAR or TEXT)"
        ).default_value("TABULAR").build()

    def adjust_command_definition(self, builder: CommandBuilder) -> None:
        builder.short_description(
            "List all deployed changesets and their deployment ID"
        )
