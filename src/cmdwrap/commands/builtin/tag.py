"""Mark the current database state with a tag."""

from cmdwrap.commands.builtin.connection import define_connection_arguments
from cmdwrap.commands.cli_wrapper import CliWrapperCommand
from cmdwrap.commands.definition import CommandBuilder, NamePath


class TagCommand(CliWrapperCommand):
    """Wraps ``tag``; the tool takes the tag name as a bare value."""

    positional_argument = "tag"

    def define_command_names(self) -> list[NamePath]:
        return [("tag",)]

    def define_arguments(self, builder: CommandBuilder) -> None:
        define_connection_arguments(builder)
        builder.argument("tag", str).required().description(
            "Tag to add to the database changelog table"
        ).build()

    def adjust_command_definition(self, builder: CommandBuilder) -> None:
        builder.short_description(
            "Mark the current database state with the specified tag"
        )
