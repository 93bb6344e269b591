"""Per-invocation argument values and their validation."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from cmdwrap.commands.arguments import ArgumentDefinition, type_name
from cmdwrap.commands.definition import CommandDefinition
from cmdwrap.exceptions import InvalidArgumentError, InvalidStateError


class CommandState(str, Enum):
    """Lifecycle of a single command invocation."""

    UNVALIDATED = "unvalidated"
    VALIDATED = "validated"
    INVOKING = "invoking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (CommandState.SUCCEEDED, CommandState.FAILED)


class CommandScope:
    """Values for one execution of a command.

    A scope is bound to exactly one CommandDefinition. Values may only
    be set for declared arguments (or their aliases); they are stored
    under the canonical argument name.

    Example:
        scope = CommandScope(definition)
        scope.set("url", "jdbc:h2:mem:test").set("changelogFile", "master.xml")
        scope.validate()
    """

    def __init__(
        self,
        definition: CommandDefinition,
        values: Mapping[str, Any] | None = None,
    ) -> None:
        self._definition = definition
        self._values: dict[str, Any] = {}
        self._state = CommandState.UNVALIDATED
        for name, value in (values or {}).items():
            self.set(name, value)

    @property
    def definition(self) -> CommandDefinition:
        return self._definition

    @property
    def state(self) -> CommandState:
        return self._state

    def set(self, name: str, value: Any) -> "CommandScope":
        """Assign a value to a declared argument.

        Setting a value on a validated scope sends it back to
        UNVALIDATED.

        Raises:
            InvalidArgumentError: If no such argument is declared.
            InvalidStateError: If the scope is executing or finished.
        """
        if self._state not in (CommandState.UNVALIDATED, CommandState.VALIDATED):
            raise InvalidStateError(
                f"Cannot change arguments of a command that is {self._state.value}"
            )
        argument = self._require_argument(name)
        self._values[argument.name] = value
        self._state = CommandState.UNVALIDATED
        return self

    def get(self, name: str, default: Any = None) -> Any:
        """Return the assigned value, else the declared default, else default."""
        argument = self._require_argument(name)
        value = self._values.get(argument.name)
        if value is None:
            value = argument.default_value
        return default if value is None else value

    def has_value(self, name: str) -> bool:
        """Whether a value was explicitly assigned."""
        argument = self._require_argument(name)
        return self._values.get(argument.name) is not None

    def values(self) -> Mapping[str, Any]:
        """Read-only snapshot of the explicitly assigned values."""
        return MappingProxyType(dict(self._values))

    def effective_values(self) -> Mapping[str, Any]:
        """Read-only snapshot of assigned values with defaults filled in.

        Arguments without a value or default are left out. Ordering
        follows the declaration order of the definition.
        """
        effective: dict[str, Any] = {}
        for name in self._definition.arguments:
            value = self.get(name)
            if value is not None:
                effective[name] = value
        return MappingProxyType(effective)

    def validate(self) -> None:
        """Check required arguments and value types.

        Raises:
            InvalidArgumentError: Naming the first offending argument.
            InvalidStateError: If the scope already ran.
        """
        if self._state not in (CommandState.UNVALIDATED, CommandState.VALIDATED):
            raise InvalidStateError(
                f"Cannot validate a command that is {self._state.value}"
            )

        for argument in self._definition.arguments.values():
            value = self.get(argument.name)
            if value is None:
                if argument.required:
                    raise InvalidArgumentError(
                        f"Missing required argument '{argument.name}' for "
                        f"command '{self._definition.display_name}'",
                        argument_name=argument.name,
                    )
                continue
            if not argument.accepts(value):
                raise InvalidArgumentError(
                    f"Argument '{argument.name}' expects "
                    f"{type_name(argument.value_type)}, got "
                    f"{type(value).__name__}",
                    argument_name=argument.name,
                )

        self._state = CommandState.VALIDATED

    def mark_invoking(self) -> None:
        if self._state is not CommandState.VALIDATED:
            raise InvalidStateError(
                f"Command must be validated before it runs (state: {self._state.value})"
            )
        self._state = CommandState.INVOKING

    def mark_succeeded(self) -> None:
        self._finish(CommandState.SUCCEEDED)

    def mark_failed(self) -> None:
        self._finish(CommandState.FAILED)

    def _finish(self, state: CommandState) -> None:
        if self._state is not CommandState.INVOKING:
            raise InvalidStateError(
                f"Command is not running (state: {self._state.value})"
            )
        self._state = state

    def _require_argument(self, name: str) -> ArgumentDefinition:
        argument = self._definition.get_argument(name)
        if argument is None:
            raise InvalidArgumentError(
                f"Unknown argument '{name}' for command "
                f"'{self._definition.display_name}'",
                argument_name=name,
            )
        return argument

    def __repr__(self) -> str:
        return (
            f"CommandScope(command={self._definition.display_name!r}, "
            f"state={self._state.value!r})"
        )
