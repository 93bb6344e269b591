"""Display-only masking of argument values.

Obfuscators are applied when a value is rendered for a human: log
records, echoed command lines and help output. The value handed to the
external process is always the raw one.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cmdwrap.commands.arguments import ArgumentDefinition

ValueObfuscator = Callable[[Any], Any]

MASK = "*****"


def standard(value: Any) -> Any:
    """Replace any non-None value with a fixed placeholder.

    The placeholder never varies with the input, so the length of a
    secret is not leaked either.
    """
    if value is None:
        return None
    return MASK


def none(value: Any) -> Any:
    """Return the value unchanged."""
    return value


STANDARD: ValueObfuscator = standard
NONE: ValueObfuscator = none


def obfuscate(definition: "ArgumentDefinition", value: Any) -> Any:
    """Apply the definition's obfuscator to value, if it has one."""
    if definition.value_obfuscator is None:
        return value
    return definition.value_obfuscator(value)
