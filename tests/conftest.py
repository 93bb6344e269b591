"""Pytest fixtures for cmdwrap tests."""

import logging
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from cmdwrap.commands.adapter import CliInvocationAdapter
from cmdwrap.commands.builtin import create_registry
from cmdwrap.commands.registry import CommandRegistry
from cmdwrap.config import reset_config
from cmdwrap.config.schema import CmdWrapConfig
from cmdwrap.runner import MockRunner


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def default_config() -> CmdWrapConfig:
    """Get default configuration."""
    return CmdWrapConfig()


@pytest.fixture(autouse=True)
def reset_config_fixture() -> Generator[None, None, None]:
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo setup_logging() so handlers don't leak between tests."""
    yield
    logger = logging.getLogger("cmdwrap")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    """Create a test config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""
[tool]
executable = "liquibase"
global_arguments = ["--log-level=warning"]
timeout = 30

[tool.env]
JAVA_OPTS = "-Xmx512m"

[arguments]
url = "jdbc:h2:mem:testdb"
changelogFile = "db/master.xml"

[output]
default_format = "plain"
""")
    return config_path


@pytest.fixture
def mock_runner() -> MockRunner:
    """Create a process runner that records calls."""
    return MockRunner(stdout="ok\n")


@pytest.fixture
def adapter(mock_runner: MockRunner) -> CliInvocationAdapter:
    """Create an adapter for a fake 'liquibase' backed by mock_runner."""
    return CliInvocationAdapter("liquibase", mock_runner)


@pytest.fixture
def registry(adapter: CliInvocationAdapter) -> CommandRegistry:
    """Create the built-in registry sharing the mocked adapter."""
    return create_registry(adapter)
