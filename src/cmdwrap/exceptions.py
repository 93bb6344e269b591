"""Exception hierarchy for cmdwrap."""


class CmdWrapError(Exception):
    """Base exception for all cmdwrap errors."""

    exit_code: int = 1
    user_message: str = "An error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


# Configuration Errors
class ConfigurationError(CmdWrapError):
    """Command or registry definition is malformed.

    Raised while commands are being built and registered, so it is
    fatal to startup rather than to a single invocation.
    """

    exit_code = 20
    user_message = "Configuration error"


class ConfigFileError(ConfigurationError):
    """Configuration file could not be read."""

    exit_code = 21
    user_message = "Cannot read configuration file"


class ConfigValidationError(ConfigurationError):
    """Configuration file content is invalid."""

    exit_code = 22
    user_message = "Invalid configuration"


# Command Errors
class CommandError(CmdWrapError):
    """Command invocation errors."""

    exit_code = 40
    user_message = "Command error"


class CommandNotFoundError(CommandError):
    """No command is registered under the requested name."""

    exit_code = 41
    user_message = "Unknown command"


class InvalidArgumentError(CommandError):
    """An argument value is missing, undeclared or of the wrong type."""

    exit_code = 42
    user_message = "Invalid argument"

    def __init__(
        self,
        message: str | None = None,
        *,
        argument_name: str | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message, user_message=user_message)
        self.argument_name = argument_name


class InvalidStateError(CommandError):
    """A command scope was used outside its lifecycle."""

    exit_code = 43
    user_message = "Command scope is in an invalid state"


class CommandExecutionError(CommandError):
    """The external tool exited with a non-zero status."""

    exit_code = 44
    user_message = "External command failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        user_message: str | None = None,
    ) -> None:
        super().__init__(
            message or f"External command exited with status {exit_code}",
            user_message=user_message,
        )
        # Instance attribute shadows the class-level CLI exit code.
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

    @property
    def output(self) -> str:
        """Captured diagnostic output, stderr first."""
        return "\n".join(part for part in (self.stderr, self.stdout) if part)


class CommandCancelledError(CommandError):
    """The external tool was terminated before it finished."""

    exit_code = 45
    user_message = "Command was cancelled"


# Adapter Errors
class AdapterError(CmdWrapError):
    """The external tool could not be started."""

    exit_code = 50
    user_message = "Cannot start external command"
