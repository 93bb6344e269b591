"""List changesets applied to the database but missing from the changelog."""

from cmdwrap.commands.builtin.connection import define_connection_arguments
from cmdwrap.commands.cli_wrapper import CliWrapperCommand
from cmdwrap.commands.definition import CommandBuilder, NamePath


class UnexpectedChangesetsCommand(CliWrapperCommand):
    """Wraps ``unexpectedChangesets``.

    ``verbose`` is accepted for compatibility with the other reporting
    commands but the tool has no such switch for this command.
    """

    excluded_arguments = frozenset({"verbose"})

    def define_command_names(self) -> list[NamePath]:
        return [("unexpectedChangesets",)]

    def define_arguments(self, builder: CommandBuilder) -> None:
        define_connection_arguments(builder)
        builder.argument("changelogFile", str).required().description(
            "The root changelog"
        ).build()
        builder.argument("contexts", str).description(
            "Changeset contexts to match"
        ).build()
        builder.argument("verbose", bool).description("Verbose flag").build()

    def adjust_command_definition(self, builder: CommandBuilder) -> None:
        builder.short_description(
            "Generate a list of changesets that have been executed but are not "
            "in the current changelog"
        )
