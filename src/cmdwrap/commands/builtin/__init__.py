"""Built-in commands wrapping the database migration tool."""

from collections.abc import Iterable

from cmdwrap.commands.adapter import CliInvocationAdapter
from cmdwrap.commands.base import CommandStep
from cmdwrap.commands.builtin.history import HistoryCommand
from cmdwrap.commands.builtin.status import StatusCommand
from cmdwrap.commands.builtin.tag import TagCommand
from cmdwrap.commands.builtin.unexpected_changesets import UnexpectedChangesetsCommand
from cmdwrap.commands.builtin.validate import ValidateCommand
from cmdwrap.commands.cli_wrapper import CliWrapperCommand
from cmdwrap.commands.registry import CommandRegistry

BUILTIN_COMMANDS: tuple[type[CliWrapperCommand], ...] = (
    UnexpectedChangesetsCommand,
    StatusCommand,
    ValidateCommand,
    HistoryCommand,
    TagCommand,
)


def create_registry(
    adapter: CliInvocationAdapter,
    extra_steps: Iterable[CommandStep] = (),
) -> CommandRegistry:
    """Build the frozen, process-wide command registry.

    Every built-in command shares the given adapter.

    Args:
        adapter: Adapter the built-in commands invoke the tool through.
        extra_steps: Additional steps to register after the built-ins.

    Returns:
        A frozen registry.

    Raises:
        ConfigurationError: If any command definition is malformed.
    """
    registry = CommandRegistry()
    for command_class in BUILTIN_COMMANDS:
        registry.register(command_class(adapter))
    registry.register_all(extra_steps)
    return registry.freeze()


__all__ = [
    "BUILTIN_COMMANDS",
    "HistoryCommand",
    "StatusCommand",
    "TagCommand",
    "UnexpectedChangesetsCommand",
    "ValidateCommand",
    "create_registry",
]
