"""Command registry for discovering and looking up commands."""

from collections.abc import Iterable

from cmdwrap.commands.base import CommandStep
from cmdwrap.commands.definition import (
    CommandDefinition,
    NamePath,
    format_name_path,
    normalize_name_path,
)
from cmdwrap.commands.scope import CommandScope
from cmdwrap.exceptions import CommandNotFoundError, ConfigurationError
from cmdwrap.utils.logging import get_logger

logger = get_logger(__name__)


def _not_found(name: str | Iterable[str]) -> CommandNotFoundError:
    display = name if isinstance(name, str) else " ".join(name)
    return CommandNotFoundError(
        f"Unknown command '{display}'",
        user_message=f"Unknown command '{display}'. Run 'cmdwrap commands'.",
    )


class CommandRegistry:
    """Catalog of command definitions and the steps that execute them.

    A registry is filled once at startup and then frozen; after that it
    is only read, so it can be shared between threads without locking.
    Name paths are case-sensitive.

    Usage:
        registry = CommandRegistry()
        registry.register(StatusCommand(adapter))
        registry.freeze()

        definition = registry.get("status")
        scope = registry.create_scope("status")
        scope.set("url", "jdbc:h2:mem:test")
        registry.get_step("status").execute(scope)
    """

    def __init__(self) -> None:
        self._definitions: dict[NamePath, CommandDefinition] = {}
        self._steps: dict[NamePath, CommandStep] = {}
        self._aliases: dict[NamePath, NamePath] = {}  # alias -> primary name
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "CommandRegistry":
        """Refuse further registrations."""
        self._frozen = True
        return self

    def register(self, step: CommandStep) -> CommandDefinition:
        """Build a step's definition and register it under all its names.

        Args:
            step: The command step to register.

        Returns:
            The definition built for the step.

        Raises:
            ConfigurationError: If the registry is frozen, the step's
                arguments are malformed, or a name is already taken.
        """
        if self._frozen:
            raise ConfigurationError("Command registry is frozen")

        definition = step.create_definition()
        primary = definition.name

        for name in definition.names:
            if name in self._definitions or name in self._aliases:
                raise ConfigurationError(
                    f"Command '{format_name_path(name)}' is already registered"
                )

        self._definitions[primary] = definition
        self._steps[primary] = step
        for alias in definition.names[1:]:
            self._aliases[alias] = primary

        logger.debug(
            "Registered command %s with %d arguments",
            format_name_path(primary),
            len(definition.arguments),
        )
        return definition

    def register_all(self, steps: Iterable[CommandStep]) -> None:
        for step in steps:
            self.register(step)

    def _resolve(self, name: str | Iterable[str]) -> NamePath | None:
        try:
            path = normalize_name_path(name)
        except ConfigurationError:
            return None
        if path in self._definitions:
            return path
        return self._aliases.get(path)

    def get(self, name: str | Iterable[str]) -> CommandDefinition | None:
        """Get a command definition by name path or alias.

        Args:
            name: ``"status"``, ``"diff changelog"`` or a tuple of words.

        Returns:
            The definition, or None if not found.
        """
        primary = self._resolve(name)
        if primary is None:
            return None
        return self._definitions[primary]

    def get_step(self, name: str | Iterable[str]) -> CommandStep | None:
        """Get the step that executes a command, or None if not found."""
        primary = self._resolve(name)
        if primary is None:
            return None
        return self._steps[primary]

    def require(self, name: str | Iterable[str]) -> CommandDefinition:
        """Like get(), but raise CommandNotFoundError when missing."""
        definition = self.get(name)
        if definition is None:
            raise _not_found(name)
        return definition

    def require_step(self, name: str | Iterable[str]) -> CommandStep:
        """Like get_step(), but raise CommandNotFoundError when missing."""
        step = self.get_step(name)
        if step is None:
            raise _not_found(name)
        return step

    def create_scope(self, name: str | Iterable[str]) -> CommandScope:
        """Create an empty scope for a registered command."""
        return CommandScope(self.require(name))

    def is_registered(self, name: str | Iterable[str]) -> bool:
        return self._resolve(name) is not None

    def list_definitions(self, include_hidden: bool = False) -> list[CommandDefinition]:
        """List definitions in registration order."""
        return [
            definition
            for definition in self._definitions.values()
            if include_hidden or not definition.hidden
        ]

    def list_names(self) -> list[str]:
        """List primary command names (not aliases)."""
        return [format_name_path(name) for name in self._definitions]

    def unregister(self, name: str | Iterable[str]) -> bool:
        """Unregister a command by its primary name.

        Returns:
            True if unregistered, False if not found.

        Raises:
            ConfigurationError: If the registry is frozen.
        """
        if self._frozen:
            raise ConfigurationError("Command registry is frozen")

        path = normalize_name_path(name)
        if path not in self._definitions:
            return False

        definition = self._definitions.pop(path)
        del self._steps[path]
        for alias in definition.names[1:]:
            self._aliases.pop(alias, None)
        return True

    def get_command_info(self) -> list[dict[str, str]]:
        """Get info about all visible commands.

        Returns:
            List of dicts with name, description, and aliases.
        """
        info = []
        for definition in self.list_definitions():
            aliases = [format_name_path(alias) for alias in definition.names[1:]]
            info.append(
                {
                    "name": definition.display_name,
                    "description": definition.description,
                    "aliases": ", ".join(aliases),
                }
            )
        return info

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, tuple, list)):
            return False
        return self.is_registered(name)
