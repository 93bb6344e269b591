"""Command definitions and the builder that produces them."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from cmdwrap.commands.arguments import ArgumentDefinition, ArgumentDefinitionBuilder
from cmdwrap.exceptions import ConfigurationError

NamePath = tuple[str, ...]


def normalize_name_path(name: str | Iterable[str]) -> NamePath:
    """Turn ``"diff changelog"`` or ``["diff", "changelog"]`` into a path tuple."""
    if isinstance(name, str):
        path = tuple(name.split())
    else:
        path = tuple(name)
    if not path or not all(isinstance(part, str) and part for part in path):
        raise ConfigurationError(f"Invalid command name: {name!r}")
    return path


def format_name_path(path: NamePath) -> str:
    """Render a name path for display."""
    return " ".join(path)


@dataclass(frozen=True, eq=False)
class CommandDefinition:
    """Read-only catalog entry for one command.

    Attributes:
        names: Every name path the command is reachable by; the first
            one is the primary name.
        arguments: Argument definitions in declaration order.
        short_description: One-line summary for listings.
        long_description: Extended help text.
        hidden: Whether the command is omitted from listings.
    """

    names: tuple[NamePath, ...]
    arguments: Mapping[str, ArgumentDefinition] = field(
        default_factory=lambda: MappingProxyType({})
    )
    short_description: str | None = None
    long_description: str | None = None
    hidden: bool = False

    @property
    def name(self) -> NamePath:
        """The primary name path."""
        return self.names[0]

    @property
    def display_name(self) -> str:
        return format_name_path(self.name)

    @property
    def description(self) -> str:
        """Short human-readable summary, never None."""
        return self.short_description or self.long_description or ""

    def get_argument(self, name: str) -> ArgumentDefinition | None:
        """Look up an argument by name or alias."""
        argument = self.arguments.get(name)
        if argument is not None:
            return argument
        for candidate in self.arguments.values():
            if name in candidate.aliases:
                return candidate
        return None

    def required_arguments(self) -> list[ArgumentDefinition]:
        return [arg for arg in self.arguments.values() if arg.required]

    def visible_arguments(self) -> list[ArgumentDefinition]:
        return [arg for arg in self.arguments.values() if not arg.hidden]

    def matches(self, name_path: NamePath) -> bool:
        return name_path in self.names


class CommandBuilder:
    """Accumulates argument definitions into a CommandDefinition.

    Usage:
        builder = CommandBuilder(("unexpectedChangesets",))
        builder.argument("url", str).required().build()
        builder.short_description("List unexpected changesets")
        definition = builder.build()
    """

    def __init__(self, *names: str | Iterable[str]) -> None:
        if not names:
            raise ConfigurationError("A command needs at least one name")
        self._names: list[NamePath] = []
        for name in names:
            path = normalize_name_path(name)
            if path in self._names:
                raise ConfigurationError(
                    f"Command name '{format_name_path(path)}' given twice"
                )
            self._names.append(path)
        self._arguments: dict[str, ArgumentDefinition] = {}
        self._short_description: str | None = None
        self._long_description: str | None = None
        self._hidden = False
        self._definition: CommandDefinition | None = None

    @property
    def names(self) -> tuple[NamePath, ...]:
        return tuple(self._names)

    @property
    def arguments(self) -> Mapping[str, ArgumentDefinition]:
        return MappingProxyType(self._arguments)

    def argument(self, name: str, value_type: type) -> ArgumentDefinitionBuilder:
        """Start defining a new argument."""
        self._check_open()
        return ArgumentDefinitionBuilder(self, name, value_type)

    def add_argument(self, definition: ArgumentDefinition) -> None:
        """Register a finished argument definition.

        Raises:
            ConfigurationError: If the name or one of the aliases is
                already taken within this command.
        """
        self._check_open()
        taken = set(self._arguments)
        for existing in self._arguments.values():
            taken.update(existing.aliases)

        for candidate in (definition.name, *definition.aliases):
            if candidate in taken:
                raise ConfigurationError(
                    f"Duplicate argument '{candidate}' in command "
                    f"'{format_name_path(self._names[0])}'"
                )
        self._arguments[definition.name] = definition

    def short_description(self, text: str) -> "CommandBuilder":
        self._check_open()
        self._short_description = text
        return self

    def long_description(self, text: str) -> "CommandBuilder":
        self._check_open()
        self._long_description = text
        return self

    def hidden(self) -> "CommandBuilder":
        self._check_open()
        self._hidden = True
        return self

    def build(self) -> CommandDefinition:
        """Freeze the accumulated state into a CommandDefinition.

        Calling build() again returns the same definition.
        """
        if self._definition is None:
            self._definition = CommandDefinition(
                names=tuple(self._names),
                arguments=MappingProxyType(dict(self._arguments)),
                short_description=self._short_description,
                long_description=self._long_description,
                hidden=self._hidden,
            )
        return self._definition

    def _check_open(self) -> None:
        if self._definition is not None:
            raise ConfigurationError(
                f"Command '{format_name_path(self._names[0])}' is already built"
            )
