"""Pydantic models for cmdwrap configuration."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cmdwrap.config.defaults import DEFAULT_EXECUTABLE
from cmdwrap.output.base import OutputFormat

ArgumentValue = str | bool | int | float


class ToolConfig(BaseModel):
    """External tool configuration."""

    executable: str | list[str] = DEFAULT_EXECUTABLE
    working_dir: Path | None = None
    env: dict[str, str] = Field(default_factory=dict)
    global_arguments: list[str] = Field(default_factory=list)
    timeout: float | None = None  # seconds; None waits forever

    @field_validator("executable")
    @classmethod
    def _executable_not_empty(cls, value: str | list[str]) -> str | list[str]:
        if not value or (isinstance(value, list) and not all(value)):
            raise ValueError("executable must not be empty")
        return value

    @field_validator("timeout")
    @classmethod
    def _timeout_positive(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("timeout must be positive")
        return value


class OutputConfig(BaseModel):
    """Output configuration."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    default_format: OutputFormat = OutputFormat.RICH
    color: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    file: Path | None = None  # Default: no file logging
    json_format: bool = False


class CmdWrapConfig(BaseModel):
    """Root configuration for cmdwrap."""

    tool: ToolConfig = Field(default_factory=ToolConfig)
    arguments: dict[str, ArgumentValue] = Field(default_factory=dict)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
