"""Command steps that delegate their work to the external CLI tool."""

from abc import abstractmethod

from cmdwrap.commands.adapter import CliInvocationAdapter, Invocation, TokenLayout
from cmdwrap.commands.base import CommandResult, CommandStep
from cmdwrap.commands.definition import CommandBuilder, NamePath, normalize_name_path
from cmdwrap.commands.scope import CommandScope


class CliWrapperCommand(CommandStep):
    """A command implemented by running the external tool.

    Subclasses declare names and arguments; argument placement is
    controlled by class attributes:

    * ``external_command``: words naming the command for the tool.
      Defaults to the primary name path.
    * ``command_arguments``: arguments emitted after the command token
      instead of before it.
    * ``positional_argument``: argument emitted as a bare value.
    * ``excluded_arguments``: arguments that exist for the caller only
      and are never passed to the tool.

    All instances share whichever CliInvocationAdapter they are given.
    """

    external_command: tuple[str, ...] | None = None
    command_arguments: frozenset[str] = frozenset()
    positional_argument: str | None = None
    excluded_arguments: frozenset[str] = frozenset()

    def __init__(self, adapter: CliInvocationAdapter) -> None:
        self._adapter = adapter

    @property
    def adapter(self) -> CliInvocationAdapter:
        return self._adapter

    @abstractmethod
    def define_command_names(self) -> list[NamePath]:
        pass

    @abstractmethod
    def define_arguments(self, builder: CommandBuilder) -> None:
        pass

    def token_layout(self) -> TokenLayout:
        """Placement rules for this command's arguments."""
        command_token = self.external_command
        if command_token is None:
            command_token = normalize_name_path(self.define_command_names()[0])
        return TokenLayout(
            command_token=tuple(command_token),
            command_arguments=frozenset(self.command_arguments),
            positional_argument=self.positional_argument,
            excluded=frozenset(self.excluded_arguments),
        )

    def collect_arguments(self, scope: CommandScope) -> list[str]:
        """Argument tokens the tool would receive for scope."""
        return self._adapter.collect_arguments(scope, self.token_layout())

    def plan(self, scope: CommandScope) -> Invocation:
        """Full invocation for scope, without running it."""
        return self._adapter.plan(scope, self.token_layout())

    def perform(self, scope: CommandScope) -> CommandResult:
        return self._adapter.invoke(self.plan(scope))
