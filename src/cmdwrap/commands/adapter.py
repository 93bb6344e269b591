"""Translation of command scopes into external tool invocations.

The adapter owns the conventions of the external tool: every argument
becomes a long-form ``--name=value`` flag, global flags come before the
command token and command-level flags after it. Values are transmitted
raw; obfuscation is applied only to the display copy of the command
line that ends up in logs and dry-run output.
"""

import logging
import shlex
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cmdwrap.commands.arguments import render_value
from cmdwrap.commands.base import CommandResult
from cmdwrap.commands.obfuscation import obfuscate
from cmdwrap.commands.scope import CommandScope
from cmdwrap.exceptions import CommandExecutionError
from cmdwrap.runner import ProcessRunner, SubprocessRunner
from cmdwrap.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from cmdwrap.config.schema import CmdWrapConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenLayout:
    """Where each argument of a command goes on the tool's command line.

    Attributes:
        command_token: Words naming the command for the external tool.
        command_arguments: Arguments emitted after the command token.
        positional_argument: Argument emitted as a bare value at the end.
        excluded: Arguments never passed to the tool.
    """

    command_token: tuple[str, ...] = ()
    command_arguments: frozenset[str] = field(default_factory=frozenset)
    positional_argument: str | None = None
    excluded: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Invocation:
    """A fully assembled call of the external tool.

    Attributes:
        executable: Program (and any fixed prefix) to run.
        arguments: Raw argument tokens, as passed to the process.
        display_arguments: The same tokens with sensitive values masked.
    """

    executable: tuple[str, ...]
    arguments: tuple[str, ...]
    display_arguments: tuple[str, ...]

    @property
    def argv(self) -> tuple[str, ...]:
        return (*self.executable, *self.arguments)

    @property
    def command_line(self) -> str:
        """Shell-quoted, masked command line for humans."""
        return shlex.join((*self.executable, *self.display_arguments))


class CliInvocationAdapter:
    """Runs commands by invoking an external command-line tool.

    Usage:
        adapter = CliInvocationAdapter("liquibase")
        layout = TokenLayout(command_token=("status",))
        result = adapter.execute(scope, layout)
    """

    def __init__(
        self,
        executable: str | Sequence[str],
        runner: ProcessRunner | None = None,
        *,
        working_dir: Path | None = None,
        env: Mapping[str, str] | None = None,
        global_arguments: Iterable[str] = (),
    ) -> None:
        """Initialize the adapter.

        Args:
            executable: Tool to run, either a single program name or a
                prefix such as ``["java", "-jar", "tool.jar"]``.
            runner: Process runner; defaults to SubprocessRunner.
            working_dir: Working directory for the tool.
            env: Extra environment variables for the tool.
            global_arguments: Tokens placed before every command.
        """
        if isinstance(executable, str):
            self._executable: tuple[str, ...] = (executable,)
        else:
            self._executable = tuple(executable)
        self._runner = runner or SubprocessRunner()
        self._working_dir = working_dir
        self._env = dict(env) if env else {}
        self._global_arguments = tuple(global_arguments)

    @classmethod
    def from_config(
        cls, config: "CmdWrapConfig", runner: ProcessRunner | None = None
    ) -> "CliInvocationAdapter":
        """Create an adapter from the ``[tool]`` configuration section."""
        tool = config.tool
        return cls(
            tool.executable,
            runner or SubprocessRunner(timeout=tool.timeout),
            working_dir=tool.working_dir,
            env=tool.env,
            global_arguments=tool.global_arguments,
        )

    @property
    def executable(self) -> tuple[str, ...]:
        return self._executable

    @property
    def runner(self) -> ProcessRunner:
        return self._runner

    def collect_arguments(
        self, scope: CommandScope, layout: TokenLayout | None = None
    ) -> list[str]:
        """Raw argument tokens for scope, without the executable."""
        return self._assemble(scope, layout or TokenLayout(), masked=False)

    def plan(
        self, scope: CommandScope, layout: TokenLayout | None = None
    ) -> Invocation:
        """Assemble raw and masked argument vectors for scope."""
        layout = layout or TokenLayout()
        return Invocation(
            executable=self._executable,
            arguments=tuple(self._assemble(scope, layout, masked=False)),
            display_arguments=tuple(self._assemble(scope, layout, masked=True)),
        )

    def render_command_line(
        self, scope: CommandScope, layout: TokenLayout | None = None
    ) -> str:
        """Masked command line that would be run for scope."""
        return self.plan(scope, layout).command_line

    def invoke(self, invocation: Invocation) -> CommandResult:
        """Run a planned invocation and interpret its exit status.

        Raises:
            CommandExecutionError: If the tool exits non-zero.
            AdapterError: If the tool cannot be started.
            CommandCancelledError: If the tool was terminated early.
        """
        log_with_context(
            logger,
            logging.INFO,
            "Running external command",
            command_line=invocation.command_line,
        )
        outcome = self._runner.run(
            invocation.argv,
            cwd=self._working_dir,
            env=self._env or None,
        )

        if outcome.returncode != 0:
            logger.warning(
                "%s exited with status %d", self._executable[0], outcome.returncode
            )
            raise CommandExecutionError(
                f"{invocation.command_line} exited with status {outcome.returncode}",
                exit_code=outcome.returncode,
                stdout=outcome.stdout,
                stderr=outcome.stderr,
            )

        logger.debug("%s exited with status 0", self._executable[0])
        return CommandResult.ok(
            outcome.stdout,
            exit_code=outcome.returncode,
            stderr=outcome.stderr,
            command_line=invocation.command_line,
        )

    def execute(
        self, scope: CommandScope, layout: TokenLayout | None = None
    ) -> CommandResult:
        """Plan and invoke in one step."""
        return self.invoke(self.plan(scope, layout))

    def _assemble(
        self, scope: CommandScope, layout: TokenLayout, *, masked: bool
    ) -> list[str]:
        definition = scope.definition
        values: Mapping[str, Any] = scope.effective_values()

        declared = {arg.name for arg in definition.arguments.values() if arg.included}
        eligible = declared - layout.excluded

        global_tokens: list[str] = []
        command_tokens: list[str] = []
        positional_tokens: list[str] = []

        for argument in definition.arguments.values():
            if argument.name not in eligible:
                continue
            value = values.get(argument.name)
            if value is None:
                continue
            if masked:
                value = obfuscate(argument, value)
            rendered = render_value(value)

            if argument.name == layout.positional_argument:
                positional_tokens.append(rendered)
            elif argument.name in layout.command_arguments:
                command_tokens.append(f"--{argument.name}={rendered}")
            else:
                global_tokens.append(f"--{argument.name}={rendered}")

        return [
            *self._global_arguments,
            *global_tokens,
            *layout.command_token,
            *command_tokens,
            *positional_tokens,
        ]

    def __repr__(self) -> str:
        return f"CliInvocationAdapter(executable={' '.join(self._executable)!r})"
