"""Command definitions, scopes and the steps that execute them.

This module provides the declarative command framework: commands
declare typed arguments once, callers fill a CommandScope per
invocation, and CLI wrapper steps turn the scope into a call of the
external tool.

Usage:
    from cmdwrap.commands import CliInvocationAdapter, create_registry

    registry = create_registry(CliInvocationAdapter("liquibase"))

    scope = registry.create_scope("status")
    scope.set("url", "jdbc:h2:mem:test").set("changelogFile", "master.xml")
    result = registry.get_step("status").execute(scope)
"""

from cmdwrap.commands.adapter import CliInvocationAdapter, Invocation, TokenLayout
from cmdwrap.commands.arguments import ArgumentDefinition, ArgumentDefinitionBuilder
from cmdwrap.commands.base import CommandResult, CommandStep
from cmdwrap.commands.builtin import BUILTIN_COMMANDS, create_registry
from cmdwrap.commands.cli_wrapper import CliWrapperCommand
from cmdwrap.commands.definition import CommandBuilder, CommandDefinition
from cmdwrap.commands.registry import CommandRegistry
from cmdwrap.commands.scope import CommandScope, CommandState

__all__ = [
    # Definitions
    "ArgumentDefinition",
    "ArgumentDefinitionBuilder",
    "CommandBuilder",
    "CommandDefinition",
    # Execution
    "CommandResult",
    "CommandScope",
    "CommandState",
    "CommandStep",
    "CliWrapperCommand",
    "CliInvocationAdapter",
    "Invocation",
    "TokenLayout",
    # Registry
    "BUILTIN_COMMANDS",
    "CommandRegistry",
    "create_registry",
]
