"""Check a changelog for errors."""

from cmdwrap.commands.builtin.connection import define_connection_arguments
from cmdwrap.commands.cli_wrapper import CliWrapperCommand
from cmdwrap.commands.definition import CommandBuilder, NamePath


class ValidateCommand(CliWrapperCommand):
    def define_command_names(self) -> list[NamePath]:
        return [("validate",)]

    def define_arguments(self, builder: CommandBuilder) -> None:
        define_connection_arguments(builder)
        builder.argument("changelogFile", str).required().description(
            "The root changelog"
        ).build()

    def adjust_command_definition(self, builder: CommandBuilder) -> None:
        builder.short_description("Validate the changelog for errors")
