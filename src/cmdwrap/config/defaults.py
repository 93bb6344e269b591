"""Default configuration values and paths."""

import os
from pathlib import Path
from typing import Final

# Default directories
DEFAULT_CONFIG_DIR: Final[Path] = Path.home() / ".config" / "cmdwrap"

# Default file paths
DEFAULT_CONFIG_FILE: Final[Path] = DEFAULT_CONFIG_DIR / "config.toml"

# Environment variable names
ENV_CONFIG_PATH: Final[str] = "CMDWRAP_CONFIG"
ENV_EXECUTABLE: Final[str] = "CMDWRAP_EXECUTABLE"
ENV_LOG_LEVEL: Final[str] = "CMDWRAP_LOG_LEVEL"
ENV_TIMEOUT: Final[str] = "CMDWRAP_TIMEOUT"

DEFAULT_EXECUTABLE: Final[str] = "liquibase"

# Default config content (TOML)
DEFAULT_CONFIG_TOML: Final[str] = """\
# cmdwrap configuration

[tool]
executable = "liquibase"
# working_dir = "/path/to/project"
# global_arguments = ["--log-level=warning"]
# timeout = 600.0

[tool.env]
# JAVA_OPTS = "-Xmx1g"

[arguments]
# Defaults for any command declaring an argument of the same name
# url = "jdbc:postgresql://localhost:5432/app"
# changelogFile = "db/changelog/master.xml"

[output]
default_format = "rich"
color = true

[logging]
level = "WARNING"
json_format = false
"""


def ensure_directories() -> None:
    """Ensure all default directories exist."""
    DEFAULT_CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def get_config_path() -> Path:
    """Get the configuration file path."""
    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_FILE
