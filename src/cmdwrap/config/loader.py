"""Configuration loading from TOML files and environment variables."""

import os
from pathlib import Path

from pydantic import ValidationError

from cmdwrap.config.defaults import (
    DEFAULT_CONFIG_TOML,
    ENV_EXECUTABLE,
    ENV_LOG_LEVEL,
    ENV_TIMEOUT,
    ensure_directories,
    get_config_path,
)
from cmdwrap.config.schema import CmdWrapConfig
from cmdwrap.exceptions import ConfigFileError, ConfigValidationError
from cmdwrap.utils.logging import get_logger

logger = get_logger(__name__)

# Global config instance (singleton)
_config: CmdWrapConfig | None = None


def load_config(
    config_path: Path | None = None,
    *,
    create_if_missing: bool = True,
) -> CmdWrapConfig:
    """Load configuration from TOML file and environment variables.

    Args:
        config_path: Path to config file. If None, uses default.
        create_if_missing: Create default config if file doesn't exist.

    Returns:
        Loaded and validated configuration.

    Raises:
        ConfigFileError: If the configuration file cannot be read.
        ConfigValidationError: If configuration is invalid.
    """
    # Use Python 3.11+ tomllib or fallback
    try:
        import tomllib
    except ImportError:
        try:
            import tomli as tomllib
        except ImportError as err:
            raise ConfigFileError(
                "tomllib not available. Install 'tomli' for Python < 3.11"
            ) from err

    path = config_path or get_config_path()

    # Create default config if missing
    if not path.exists():
        if create_if_missing:
            if config_path is None:
                ensure_directories()
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(DEFAULT_CONFIG_TOML)
            logger.debug("Wrote default configuration to %s", path)
        else:
            # Return default config without file
            return _apply_env_overrides(CmdWrapConfig())

    # Load TOML file
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(f"Failed to load config from {path}: {e}") from e

    # Parse into Pydantic model
    try:
        config = CmdWrapConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {path}: {e}") from e

    return _apply_env_overrides(config)


def _apply_env_overrides(config: CmdWrapConfig) -> CmdWrapConfig:
    """Apply environment variable overrides to configuration."""
    executable = os.environ.get(ENV_EXECUTABLE)
    if executable:
        config.tool.executable = executable

    log_level = os.environ.get(ENV_LOG_LEVEL)
    if log_level:
        config.logging.level = log_level.upper()

    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        try:
            config.tool.timeout = float(timeout)
        except ValueError as e:
            raise ConfigValidationError(
                f"{ENV_TIMEOUT} must be a number of seconds, got {timeout!r}"
            ) from e

    return config


def get_config() -> CmdWrapConfig:
    """Get the current configuration (singleton).

    Loads config on first access, caches for subsequent calls.

    Returns:
        Current configuration.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Path | None = None) -> CmdWrapConfig:
    """Reload configuration from disk.

    Args:
        config_path: Path to config file. If None, uses default.

    Returns:
        Reloaded configuration.
    """
    global _config
    _config = load_config(config_path)
    return _config


def reset_config() -> None:
    """Reset the configuration singleton (mainly for testing)."""
    global _config
    _config = None
