"""Tests for CliInvocationAdapter and token assembly."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cmdwrap.commands import obfuscation
from cmdwrap.commands.adapter import CliInvocationAdapter, Invocation, TokenLayout
from cmdwrap.commands.definition import CommandBuilder, CommandDefinition
from cmdwrap.commands.scope import CommandScope
from cmdwrap.config.schema import CmdWrapConfig
from cmdwrap.exceptions import AdapterError, CommandExecutionError
from cmdwrap.runner import MockRunner, ProcessRunner, SubprocessRunner


@pytest.fixture
def definition() -> CommandDefinition:
    builder = CommandBuilder("update")
    builder.argument("url", str).required().build()
    builder.argument("username", str).build()
    builder.argument("password", str).set_value_obfuscator(
        obfuscation.STANDARD
    ).build()
    builder.argument("changelogFile", str).required().build()
    builder.argument("verbose", bool).build()
    builder.argument("retries", int).default_value(2).build()
    builder.argument("dryRunOnly", bool).internal().build()
    return builder.build()


@pytest.fixture
def scope(definition: CommandDefinition) -> CommandScope:
    scope = CommandScope(definition)
    scope.set("url", "jdbc:test").set("changelogFile", "master.xml")
    return scope


class TestCollectArguments:
    """Tests for argument token assembly."""

    def test_declaration_order_with_defaults(
        self, adapter: CliInvocationAdapter, scope: CommandScope
    ) -> None:
        """Test tokens follow declaration order and include defaults."""
        scope.set("verbose", True).set("username", "admin")

        assert adapter.collect_arguments(scope) == [
            "--url=jdbc:test",
            "--username=admin",
            "--changelogFile=master.xml",
            "--verbose=true",
            "--retries=2",
        ]

    def test_unset_optional_arguments_omitted(
        self, adapter: CliInvocationAdapter, scope: CommandScope
    ) -> None:
        """Test arguments with no value produce no token."""
        tokens = adapter.collect_arguments(scope)

        assert not any(token.startswith("--username") for token in tokens)
        assert not any(token.startswith("--verbose") for token in tokens)

    def test_internal_arguments_never_emitted(
        self, adapter: CliInvocationAdapter, scope: CommandScope
    ) -> None:
        """Test arguments marked internal stay out of the tool's argv."""
        scope.set("dryRunOnly", True)

        assert "--dryRunOnly=true" not in adapter.collect_arguments(scope)

    def test_excluded_arguments_filtered(
        self, adapter: CliInvocationAdapter, scope: CommandScope
    ) -> None:
        """Test the exclusion set is applied by name."""
        scope.set("verbose", True)
        layout = TokenLayout(excluded=frozenset({"verbose", "retries"}))

        assert adapter.collect_arguments(scope, layout) == [
            "--url=jdbc:test",
            "--changelogFile=master.xml",
        ]

    def test_layout_placement(
        self, adapter: CliInvocationAdapter, scope: CommandScope
    ) -> None:
        """Test global flags, command token, command flags, positional."""
        scope.set("verbose", False)
        layout = TokenLayout(
            command_token=("update",),
            command_arguments=frozenset({"verbose"}),
            positional_argument="changelogFile",
        )

        assert adapter.collect_arguments(scope, layout) == [
            "--url=jdbc:test",
            "--retries=2",
            "update",
            "--verbose=false",
            "master.xml",
        ]

    def test_global_arguments_come_first(
        self, mock_runner: MockRunner, scope: CommandScope
    ) -> None:
        """Test configured global arguments lead the argument list."""
        adapter = CliInvocationAdapter(
            "liquibase", mock_runner, global_arguments=["--log-level=warning"]
        )

        assert adapter.collect_arguments(scope)[0] == "--log-level=warning"

    def test_raw_secret_reaches_tool(
        self, adapter: CliInvocationAdapter, scope: CommandScope
    ) -> None:
        """Test obfuscation never alters the transmitted value."""
        scope.set("password", "hunter2")

        assert "--password=hunter2" in adapter.collect_arguments(scope)


class TestPlan:
    """Tests for invocation planning."""

    def test_plan(self, adapter: CliInvocationAdapter, scope: CommandScope) -> None:
        """Test the planned argv starts with the executable."""
        invocation = adapter.plan(scope, TokenLayout(command_token=("update",)))

        assert isinstance(invocation, Invocation)
        assert invocation.executable == ("liquibase",)
        assert invocation.argv[0] == "liquibase"
        assert invocation.argv[-1] == "update"

    def test_display_copy_is_masked(
        self, adapter: CliInvocationAdapter, scope: CommandScope
    ) -> None:
        """Test the display copy hides secrets without leaking length."""
        scope.set("password", "hunter2")
        invocation = adapter.plan(scope)

        assert "--password=hunter2" in invocation.arguments
        assert "--password=*****" in invocation.display_arguments
        assert "hunter2" not in invocation.command_line
        assert "*******" not in invocation.command_line

    def test_command_line_is_shell_quoted(
        self, adapter: CliInvocationAdapter, definition: CommandDefinition
    ) -> None:
        """Test values with spaces are quoted for display."""
        scope = CommandScope(definition)
        scope.set("url", "jdbc:test").set("changelogFile", "my changes.xml")

        command_line = adapter.render_command_line(scope)

        assert command_line == (
            "liquibase --url=jdbc:test '--changelogFile=my changes.xml' --retries=2"
        )

    def test_executable_prefix(
        self, mock_runner: MockRunner, scope: CommandScope
    ) -> None:
        """Test a multi-word executable is kept as a prefix."""
        adapter = CliInvocationAdapter(["java", "-jar", "tool.jar"], mock_runner)

        argv = adapter.plan(scope).argv
        assert argv[:3] == ("java", "-jar", "tool.jar")
        assert argv[3] == "--url=jdbc:test"


class TestInvoke:
    """Tests for running the tool and interpreting its exit status."""

    def test_success(
        self,
        adapter: CliInvocationAdapter,
        mock_runner: MockRunner,
        scope: CommandScope,
    ) -> None:
        """Test exit status 0 produces a successful result."""
        result = adapter.execute(scope, TokenLayout(command_token=("update",)))

        assert result.success is True
        assert result.data == "ok\n"
        assert result.exit_code == 0
        assert result.metadata["command_line"].endswith("update")
        assert mock_runner.call_count == 1
        assert mock_runner.last_argv == (
            "liquibase",
            "--url=jdbc:test",
            "--changelogFile=master.xml",
            "--retries=2",
            "update",
        )

    @pytest.mark.parametrize("returncode", [1, 2, 127])
    def test_failure_carries_exit_code(
        self, scope: CommandScope, returncode: int
    ) -> None:
        """Test a non-zero exit raises with exactly that code."""
        runner = MockRunner(returncode=returncode, stdout="partial", stderr="boom")
        adapter = CliInvocationAdapter("liquibase", runner)

        with pytest.raises(CommandExecutionError) as exc_info:
            adapter.execute(scope)

        error = exc_info.value
        assert error.exit_code == returncode
        assert error.stdout == "partial"
        assert error.stderr == "boom"
        assert str(returncode) in str(error)

    def test_failure_message_is_masked(self, scope: CommandScope) -> None:
        """Test the error message never contains a secret."""
        scope.set("password", "hunter2")
        adapter = CliInvocationAdapter("liquibase", MockRunner(returncode=1))

        with pytest.raises(CommandExecutionError) as exc_info:
            adapter.execute(scope)
        assert "hunter2" not in str(exc_info.value)

    def test_spawn_errors_propagate(self, scope: CommandScope) -> None:
        """Test runner failures reach the caller unchanged."""
        runner = MockRunner(error=AdapterError("Executable not found"))
        adapter = CliInvocationAdapter("liquibase", runner)

        with pytest.raises(AdapterError, match="not found"):
            adapter.execute(scope)

    def test_working_dir_and_env_passed(
        self, mock_runner: MockRunner, scope: CommandScope, temp_dir: Path
    ) -> None:
        """Test the runner receives the configured cwd and environment."""
        adapter = CliInvocationAdapter(
            "liquibase", mock_runner, working_dir=temp_dir, env={"JAVA_OPTS": "-Xmx1g"}
        )
        adapter.execute(scope)

        call = mock_runner.call_history[0]
        assert call["cwd"] == temp_dir
        assert call["env"] == {"JAVA_OPTS": "-Xmx1g"}

    def test_log_contains_masked_command_line(
        self,
        adapter: CliInvocationAdapter,
        scope: CommandScope,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test the INFO log record shows the masked command line only."""
        scope.set("password", "hunter2")

        with caplog.at_level(logging.DEBUG, logger="cmdwrap"):
            adapter.execute(scope)

        assert "hunter2" not in caplog.text
        records = [
            r for r in caplog.records if r.getMessage() == "Running external command"
        ]
        assert len(records) == 1
        assert "--password=*****" in records[0].context["command_line"]

    def test_runner_spy(self, scope: CommandScope) -> None:
        """Test the adapter calls the runner's run() with the argv."""
        runner = MagicMock(spec=ProcessRunner)
        runner.run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        adapter = CliInvocationAdapter("liquibase", runner)

        adapter.execute(scope)

        runner.run.assert_called_once()
        argv = runner.run.call_args.args[0]
        assert argv[0] == "liquibase"


class TestFromConfig:
    """Tests for building an adapter from configuration."""

    def test_from_config(self) -> None:
        """Test tool settings are applied."""
        config = CmdWrapConfig.model_validate(
            {
                "tool": {
                    "executable": ["java", "-jar", "liquibase.jar"],
                    "global_arguments": ["--log-level=warning"],
                    "timeout": 5,
                }
            }
        )

        adapter = CliInvocationAdapter.from_config(config)

        assert adapter.executable == ("java", "-jar", "liquibase.jar")
        assert isinstance(adapter.runner, SubprocessRunner)
        assert adapter.runner.timeout == 5

    def test_from_config_with_runner(self, mock_runner: MockRunner) -> None:
        """Test an explicit runner takes precedence."""
        adapter = CliInvocationAdapter.from_config(CmdWrapConfig(), mock_runner)

        assert adapter.runner is mock_runner
        assert adapter.executable == ("liquibase",)
        assert repr(adapter) == "CliInvocationAdapter(executable='liquibase')"
