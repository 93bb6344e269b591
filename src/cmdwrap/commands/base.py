"""Base command step implementation.

This module provides the foundation for all cmdwrap commands: the
CommandResult returned by a successful execution, and the CommandStep
abstract class every command variant implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from cmdwrap.commands.definition import (
    CommandBuilder,
    CommandDefinition,
    NamePath,
    normalize_name_path,
)
from cmdwrap.commands.scope import CommandScope
from cmdwrap.exceptions import CmdWrapError, InvalidStateError
from cmdwrap.output.base import OutputData
from cmdwrap.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Result of a command execution.

    Attributes:
        success: Whether the command succeeded.
        data: The result data (captured output for CLI wrappers).
        error: Error message if command failed.
        exit_code: Exit status of the external process, if one ran.
        metadata: Additional metadata about the execution.
    """

    success: bool
    data: Any = None
    error: str | None = None
    exit_code: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: Any,
        exit_code: int | None = 0,
        **metadata: Any,
    ) -> "CommandResult":
        """Create a successful result."""
        return cls(
            success=True,
            data=data,
            exit_code=exit_code,
            metadata=metadata,
        )

    @classmethod
    def fail(
        cls, error: str, exit_code: int | None = None, **metadata: Any
    ) -> "CommandResult":
        """Create a failed result."""
        return cls(
            success=False,
            error=error,
            exit_code=exit_code,
            metadata=metadata,
        )

    @classmethod
    def from_error(cls, error: CmdWrapError) -> "CommandResult":
        """Create a failed result from a cmdwrap exception."""
        exit_code = getattr(error, "exit_code", None)
        metadata: dict[str, Any] = {"error_type": type(error).__name__}
        stderr = getattr(error, "stderr", None)
        if stderr:
            metadata["stderr"] = stderr
        return cls.fail(str(error), exit_code=exit_code, **metadata)

    def to_output_data(self, title: str | None = None) -> OutputData:
        """Convert to OutputData for formatting."""
        command_line = self.metadata.get("command_line")
        stderr = self.metadata.get("stderr")
        if not self.success:
            return OutputData.failed(
                self.error or "Unknown error",
                title,
                exit_code=self.exit_code,
                stderr=stderr,
            )
        content = self.data if self.data is not None else ""
        if not isinstance(content, (str, dict)):
            content = str(content)
        return OutputData(
            content=content,
            title=title,
            command_line=command_line,
            exit_code=self.exit_code,
            stderr=stderr,
        )


class CommandStep(ABC):
    """Abstract base class for all cmdwrap commands.

    A step declares its names and arguments once, when it is registered,
    and afterwards executes any number of scopes built from the
    resulting definition.

    Example:
        class EchoCommand(CommandStep):
            def define_command_names(self) -> list[tuple[str, ...]]:
                return [("echo",)]

            def define_arguments(self, builder: CommandBuilder) -> None:
                builder.argument("message", str).required().build()

            def perform(self, scope: CommandScope) -> CommandResult:
                return CommandResult.ok(scope.get("message"))
    """

    @abstractmethod
    def define_command_names(self) -> list[NamePath]:
        """Name paths this command is reachable by, primary first."""
        pass

    @abstractmethod
    def define_arguments(self, builder: CommandBuilder) -> None:
        """Declare the command's arguments on builder."""
        pass

    def adjust_command_definition(self, builder: CommandBuilder) -> None:
        """Hook to set descriptions or other command-level metadata."""
        return None

    @abstractmethod
    def perform(self, scope: CommandScope) -> CommandResult:
        """Do the work for a validated scope.

        Raise a CmdWrapError subclass on failure.
        """
        pass

    def create_definition(self) -> CommandDefinition:
        """Run the definition hooks and build the command's definition.

        Raises:
            ConfigurationError: If the declared arguments are malformed.
        """
        builder = CommandBuilder(*self.define_command_names())
        self.define_arguments(builder)
        self.adjust_command_definition(builder)
        return builder.build()

    def execute(self, scope: CommandScope) -> CommandResult:
        """Validate scope and run the command.

        Raises:
            InvalidArgumentError: If validation fails; nothing is run.
            InvalidStateError: If the scope already ran or belongs to
                another command.
            CmdWrapError: Whatever perform() raises.
        """
        names = self.define_command_names()
        if not any(
            scope.definition.matches(normalize_name_path(name)) for name in names
        ):
            raise InvalidStateError(
                f"Scope for '{scope.definition.display_name}' cannot be "
                f"executed by {type(self).__name__}"
            )

        scope.validate()
        scope.mark_invoking()
        try:
            result = self.perform(scope)
        except BaseException:
            scope.mark_failed()
            raise

        if result.success:
            scope.mark_succeeded()
        else:
            scope.mark_failed()
        logger.debug(
            "Command %s finished: %s", scope.definition.display_name, scope.state.value
        )
        return result

    def __repr__(self) -> str:
        names = self.define_command_names()
        primary = " ".join(normalize_name_path(names[0])) if names else ""
        return f"{self.__class__.__name__}(name={primary!r})"
