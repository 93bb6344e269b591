"""Argument definitions and their fluent builder.

An ArgumentDefinition describes one named, typed parameter of a
command. Definitions are immutable and are created only through
``CommandBuilder.argument(...)``, which hands back an
ArgumentDefinitionBuilder:

    builder = CommandBuilder(("status",))
    url = builder.argument("url", str).required().description("JDBC URL").build()
    password = (
        builder.argument("password", str)
        .description("Database password")
        .set_value_obfuscator(obfuscation.STANDARD)
        .build()
    )
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cmdwrap.commands.obfuscation import ValueObfuscator, obfuscate
from cmdwrap.exceptions import ConfigurationError, InvalidArgumentError

if TYPE_CHECKING:
    from cmdwrap.commands.definition import CommandBuilder

ARGUMENT_NAME_PATTERN = re.compile(r"^[a-z][a-zA-Z0-9]*$")

_TRUE_VALUES = frozenset({"true", "yes", "1", "on"})
_FALSE_VALUES = frozenset({"false", "no", "0", "off"})


def type_name(value_type: type) -> str:
    """Short, human-readable name of a type."""
    return getattr(value_type, "__name__", str(value_type))


def conforms(value: Any, value_type: type) -> bool:
    """Check whether value is acceptable for an argument of value_type.

    ``bool`` is a subclass of ``int`` in Python but is never accepted
    for numeric arguments. Integers are accepted where a float is
    declared.
    """
    if value_type in (int, float) and isinstance(value, bool):
        return False
    if value_type is float:
        return isinstance(value, (int, float))
    return isinstance(value, value_type)


def render_value(value: Any) -> str:
    """Render a value the way the external tool expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class ArgumentDefinition:
    """Immutable descriptor of one command argument.

    Attributes:
        name: Case-sensitive name, unique within its command.
        value_type: Declared type of the value.
        required: Whether a value must be present at execution time.
        default_value: Value used when the caller assigns none.
        default_value_description: Human description of the default.
        description: Help text.
        value_obfuscator: Masking function for display, if sensitive.
        included: Whether the argument is passed to the external tool.
        hidden: Whether the argument is omitted from help listings.
        aliases: Alternative names accepted when setting values.
    """

    name: str
    value_type: type
    required: bool = False
    default_value: Any = None
    default_value_description: str | None = None
    description: str | None = None
    value_obfuscator: ValueObfuscator | None = None
    included: bool = True
    hidden: bool = False
    aliases: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_sensitive(self) -> bool:
        """Whether values of this argument are masked for display."""
        return self.value_obfuscator is not None

    def accepts(self, value: Any) -> bool:
        """Check a runtime value against the declared type."""
        return conforms(value, self.value_type)

    def convert(self, raw: str) -> Any:
        """Convert textual input (CLI, config file) to the declared type.

        Raises:
            InvalidArgumentError: If the text cannot be converted.
        """
        if self.value_type is str:
            return raw
        if self.value_type is bool:
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise InvalidArgumentError(
                f"Invalid value for '{self.name}': expected a boolean, "
                f"got {self._shown(raw)}",
                argument_name=self.name,
            )
        try:
            if self.value_type is Path:
                return Path(raw).expanduser()
            return self.value_type(raw)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(
                f"Invalid value for '{self.name}': expected "
                f"{type_name(self.value_type)}, got {self._shown(raw)}",
                argument_name=self.name,
            ) from e

    def _shown(self, raw: str) -> str:
        """Input text as quoted in error messages, masked if sensitive."""
        return repr(obfuscate(self, raw))

    def display_default(self) -> str | None:
        """Default value as shown in help output (masked if sensitive)."""
        if self.default_value_description:
            return self.default_value_description
        if self.default_value is None:
            return None
        value = self.default_value
        if self.value_obfuscator is not None:
            value = self.value_obfuscator(value)
        return render_value(value)

    def __str__(self) -> str:
        text = self.name
        if self.required:
            text += " (required)"
        return text


class ArgumentDefinitionBuilder:
    """Fluent builder for a single ArgumentDefinition.

    Obtained from ``CommandBuilder.argument``. Calling ``build()``
    validates the definition and registers it with the command builder.
    """

    def __init__(self, owner: "CommandBuilder", name: str, value_type: type) -> None:
        if not isinstance(name, str) or not ARGUMENT_NAME_PATTERN.match(name):
            raise ConfigurationError(
                f"Invalid argument name {name!r}: must be camelCase letters and digits"
            )
        if not isinstance(value_type, type):
            raise ConfigurationError(
                f"Argument '{name}' must declare a type, got {value_type!r}"
            )
        self._owner = owner
        self._name = name
        self._value_type = value_type
        self._required = False
        self._default_value: Any = None
        self._default_value_description: str | None = None
        self._description: str | None = None
        self._value_obfuscator: ValueObfuscator | None = None
        self._included = True
        self._hidden = False
        self._aliases: list[str] = []
        self._built = False

    def required(self) -> "ArgumentDefinitionBuilder":
        """Mark the argument as mandatory."""
        self._required = True
        return self

    def optional(self) -> "ArgumentDefinitionBuilder":
        """Mark the argument as optional (the default)."""
        self._required = False
        return self

    def description(self, text: str) -> "ArgumentDefinitionBuilder":
        """Attach help text."""
        self._description = text
        return self

    def default_value(
        self, value: Any, description: str | None = None
    ) -> "ArgumentDefinitionBuilder":
        """Value to use when the caller assigns none."""
        self._default_value = value
        self._default_value_description = description
        return self

    def set_value_obfuscator(
        self, obfuscator: ValueObfuscator
    ) -> "ArgumentDefinitionBuilder":
        """Mask values of this argument whenever they are displayed."""
        self._value_obfuscator = obfuscator
        return self

    def internal(self) -> "ArgumentDefinitionBuilder":
        """Keep the argument out of the external tool's argument list."""
        self._included = False
        return self

    def hidden(self) -> "ArgumentDefinitionBuilder":
        """Leave the argument out of help listings."""
        self._hidden = True
        return self

    def add_alias(self, alias: str) -> "ArgumentDefinitionBuilder":
        """Accept an alternative name when values are set."""
        if not ARGUMENT_NAME_PATTERN.match(alias):
            raise ConfigurationError(
                f"Invalid alias {alias!r} for argument '{self._name}'"
            )
        self._aliases.append(alias)
        return self

    def build(self) -> ArgumentDefinition:
        """Finalize the definition and register it with the command.

        Raises:
            ConfigurationError: On a duplicate name, a default of the
                wrong type, or a second call to build().
        """
        if self._built:
            raise ConfigurationError(f"Argument '{self._name}' was already built")

        if self._default_value is not None and not conforms(
            self._default_value, self._value_type
        ):
            shown = self._default_value
            if self._value_obfuscator is not None:
                shown = self._value_obfuscator(shown)
            raise ConfigurationError(
                f"Default value {shown!r} for argument "
                f"'{self._name}' is not a {type_name(self._value_type)}"
            )

        definition = ArgumentDefinition(
            name=self._name,
            value_type=self._value_type,
            required=self._required,
            default_value=self._default_value,
            default_value_description=self._default_value_description,
            description=self._description,
            value_obfuscator=self._value_obfuscator,
            included=self._included,
            hidden=self._hidden,
            aliases=tuple(self._aliases),
        )
        self._owner.add_argument(definition)
        self._built = True
        return definition
