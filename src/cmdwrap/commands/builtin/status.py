"""Report changesets that have not been deployed yet."""

from cmdwrap.commands.builtin.connection import define_connection_arguments
from cmdwrap.commands.cli_wrapper import CliWrapperCommand
from cmdwrap.commands.definition import CommandBuilder, NamePath


class StatusCommand(CliWrapperCommand):
    """Wraps ``status``; ``verbose`` is a switch of the command itself."""

    command_arguments = frozenset({"verbose"})

    def define_command_names(self) -> list[NamePath]:
        return [("status",)]

    def define_arguments(self, builder: CommandBuilder) -> None:
        define_connection_arguments(builder)
        builder.argument("changelogFile", str).required().description(
            "The root changelog"
        ).build()
        builder.argument("contexts", str).description(
            "Changeset contexts to match"
        ).build()
        builder.argument("labels", str).description(
            "Changeset labels to match"
        ).add_alias("labelFilter").build()
        builder.argument("verbose", bool).description(
            "List each pending changeset"
        ).build()

    def adjust_command_definition(self, builder: CommandBuilder) -> None:
        builder.short_description("Generate a list of pending changesets")
