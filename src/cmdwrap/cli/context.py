"""Context factory for running commands from CLI options.

This module wires configuration, the invocation adapter, the command
registry and an output formatter into a single CliContext.
"""

from dataclasses import dataclass
from typing import Any

from cmdwrap.cli.options import FormatChoice, get_output_format
from cmdwrap.commands.adapter import CliInvocationAdapter
from cmdwrap.commands.builtin import create_registry
from cmdwrap.commands.obfuscation import MASK
from cmdwrap.commands.registry import CommandRegistry
from cmdwrap.commands.scope import CommandScope
from cmdwrap.config import get_config
from cmdwrap.config.schema import CmdWrapConfig
from cmdwrap.exceptions import InvalidArgumentError
from cmdwrap.output import get_formatter
from cmdwrap.output.base import OutputFormatter
from cmdwrap.runner import ProcessRunner
from cmdwrap.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class CliContext:
    """Everything a CLI command needs to run.

    Attributes:
        config: Loaded configuration.
        adapter: Adapter shared by all registered commands.
        registry: Frozen command registry.
        formatter: Output formatter.
        verbose: Whether verbose output is enabled.
    """

    config: CmdWrapConfig
    adapter: CliInvocationAdapter
    registry: CommandRegistry
    formatter: OutputFormatter
    verbose: bool = False

    def create_scope(self, name: str, assignments: dict[str, str]) -> CommandScope:
        """Create a scope for a command from textual NAME=VALUE input.

        Values given on the command line win; configured defaults from
        the ``[arguments]`` section fill in the rest.

        Raises:
            CommandNotFoundError: If the command is not registered.
            InvalidArgumentError: If an argument is undeclared or its
                value cannot be converted.
        """
        scope = self.registry.create_scope(name)
        definition = scope.definition

        for key, raw in assignments.items():
            argument = definition.get_argument(key)
            if argument is None:
                raise InvalidArgumentError(
                    f"Command '{definition.display_name}' has no argument '{key}'",
                    argument_name=key,
                )
            scope.set(key, argument.convert(raw))

        apply_configured_defaults(scope, self.config)
        return scope


def apply_configured_defaults(scope: CommandScope, config: CmdWrapConfig) -> None:
    """Fill unset arguments of scope from the ``[arguments]`` section.

    Names the command does not declare are ignored. Text values are
    converted to the argument's declared type.
    """
    definition = scope.definition
    for key, value in config.arguments.items():
        argument = definition.get_argument(key)
        if argument is None or scope.has_value(argument.name):
            continue
        if isinstance(value, str) and argument.value_type is not str:
            value = argument.convert(value)
        scope.set(argument.name, value)
        logger.debug("Using configured default for %s", argument.name)


def sensitive_argument_names(registry: CommandRegistry) -> set[str]:
    """Names (and aliases) of arguments masked by any registered command."""
    names: set[str] = set()
    for definition in registry.list_definitions(include_hidden=True):
        for argument in definition.arguments.values():
            if argument.is_sensitive:
                names.add(argument.name)
                names.update(argument.aliases)
    return names


def describe_config(config: CmdWrapConfig, registry: CommandRegistry) -> dict[str, Any]:
    """Summarize configuration for display, masking sensitive defaults."""
    from cmdwrap.config.defaults import get_config_path
    from cmdwrap.runner import locate_executable

    tool = config.tool
    executable = tool.executable
    program = executable if isinstance(executable, str) else executable[0]
    located = locate_executable(program)

    sensitive = sensitive_argument_names(registry)
    arguments = {
        key: MASK if key in sensitive else value
        for key, value in config.arguments.items()
    }

    return {
        "config_file": str(get_config_path()),
        "executable": program if isinstance(executable, str) else " ".join(executable),
        "resolved_executable": str(located) if located else "(not found on PATH)",
        "working_dir": str(tool.working_dir) if tool.working_dir else "(current)",
        "global_arguments": " ".join(tool.global_arguments) or "(none)",
        "timeout": f"{tool.timeout}s" if tool.timeout else "(none)",
        "output_format": str(config.output.default_format),
        "log_level": config.logging.level,
        "argument_defaults": ", ".join(f"{k}={v}" for k, v in arguments.items())
        or "(none)",
    }


def create_adapter(
    config: CmdWrapConfig | None = None,
    runner: ProcessRunner | None = None,
) -> CliInvocationAdapter:
    """Create the invocation adapter from the ``[tool]`` section."""
    if config is None:
        config = get_config()
    return CliInvocationAdapter.from_config(config, runner)


def create_formatter(
    format_choice: FormatChoice | None = None,
    verbose: bool = False,
    config: CmdWrapConfig | None = None,
) -> OutputFormatter:
    """Create an output formatter from configuration.

    Args:
        format_choice: CLI format choice override.
        verbose: Whether to enable verbose output.
        config: Configuration to use. If None, uses global config.

    Returns:
        Configured OutputFormatter instance.
    """
    if config is None:
        config = get_config()

    output_format = get_output_format(format_choice, config.output.default_format)
    kwargs: dict[str, Any] = {}
    if output_format.value == "rich":
        kwargs["color"] = config.output.color
    return get_formatter(output_format, verbose=verbose, **kwargs)


def configure_logging(config: CmdWrapConfig, verbose: bool = False) -> None:
    """Apply the ``[logging]`` section; --verbose lowers the level to INFO."""
    level = config.logging.level
    if verbose and level.upper() in ("WARNING", "ERROR", "CRITICAL"):
        level = "INFO"
    setup_logging(
        level=level,
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        use_color=config.output.color,
    )


def create_context(
    *,
    format_choice: FormatChoice | None = None,
    verbose: bool = False,
    config: CmdWrapConfig | None = None,
    runner: ProcessRunner | None = None,
) -> CliContext:
    """Create a CliContext from CLI options.

    This is the main factory function for CLI commands.

    Args:
        format_choice: Output format override.
        verbose: Whether to enable verbose output.
        config: Configuration to use. If None, uses global config.
        runner: Process runner override; defaults to a SubprocessRunner
            honouring the configured timeout.

    Returns:
        Fully configured CliContext.

    Raises:
        ConfigurationError: If configuration or a command definition
            is invalid.

    Example:
        ctx = create_context(format_choice=FormatChoice.PLAIN)
        scope = ctx.create_scope("status", {"url": "jdbc:h2:mem:db"})
        result = ctx.registry.get_step("status").execute(scope)
    """
    if config is None:
        config = get_config()

    configure_logging(config, verbose)
    adapter = create_adapter(config, runner)

    return CliContext(
        config=config,
        adapter=adapter,
        registry=create_registry(adapter),
        formatter=create_formatter(format_choice, verbose, config),
        verbose=verbose,
    )
