"""Tests for the built-in commands wrapping the migration tool."""

import pytest

from cmdwrap.commands.adapter import CliInvocationAdapter
from cmdwrap.commands.base import CommandResult, CommandStep
from cmdwrap.commands.builtin import (
    BUILTIN_COMMANDS,
    HistoryCommand,
    StatusCommand,
    TagCommand,
    UnexpectedChangesetsCommand,
    create_registry,
)
from cmdwrap.commands.definition import CommandBuilder, NamePath
from cmdwrap.commands.registry import CommandRegistry
from cmdwrap.commands.scope import CommandScope, CommandState
from cmdwrap.exceptions import (
    CommandExecutionError,
    ConfigurationError,
    InvalidArgumentError,
)
from cmdwrap.runner import MockRunner


class TestCreateRegistry:
    """Tests for create_registry()."""

    def test_all_builtins_registered(self, registry: CommandRegistry) -> None:
        """Test every built-in command is available and the registry frozen."""
        assert len(registry) == len(BUILTIN_COMMANDS)
        assert registry.frozen is True
        assert registry.list_names() == [
            "unexpectedChangesets",
            "status",
            "validate",
            "history",
            "tag",
        ]

    def test_shared_adapter(
        self, registry: CommandRegistry, adapter: CliInvocationAdapter
    ) -> None:
        """Test every built-in command invokes through the same adapter."""
        for name in registry.list_names():
            step = registry.get_step(name)
            assert step.adapter is adapter  # type: ignore[union-attr]

    def test_extra_steps(self, adapter: CliInvocationAdapter) -> None:
        """Test additional steps are registered after the built-ins."""

        class PingCommand(CommandStep):
            def define_command_names(self) -> list[NamePath]:
                return [("ping",)]

            def define_arguments(self, builder: CommandBuilder) -> None:
                pass

            def perform(self, scope: CommandScope) -> CommandResult:
                return CommandResult.ok("pong")

        registry = create_registry(adapter, extra_steps=[PingCommand()])

        assert registry.list_names()[-1] == "ping"

    def test_extra_step_name_clash(self, adapter: CliInvocationAdapter) -> None:
        """Test extra steps may not shadow a built-in."""
        with pytest.raises(ConfigurationError):
            create_registry(adapter, extra_steps=[StatusCommand(adapter)])


class TestUnexpectedChangesets:
    """Tests for the unexpectedChangesets command."""

    def test_definition(self) -> None:
        """Test names, required arguments and description."""
        definition = UnexpectedChangesetsCommand(
            CliInvocationAdapter("liquibase", MockRunner())
        ).create_definition()

        assert definition.name == ("unexpectedChangesets",)
        assert {arg.name for arg in definition.required_arguments()} == {
            "url",
            "changelogFile",
        }
        assert definition.arguments["password"].is_sensitive is True
        assert definition.short_description == (
            "Generate a list of changesets that have been executed but are not "
            "in the current changelog"
        )

    def test_verbose_is_never_passed(
        self, registry: CommandRegistry, mock_runner: MockRunner
    ) -> None:
        """Test the excluded verbose flag stays out of the argv."""
        scope = registry.create_scope("unexpectedChangesets")
        scope.set("url", "jdbc:test")
        scope.set("changelogFile", "master.xml")
        scope.set("verbose", True)

        step = registry.get_step("unexpectedChangesets")
        assert step is not None
        result = step.execute(scope)

        assert result.success is True
        assert mock_runner.last_argv == (
            "liquibase",
            "--url=jdbc:test",
            "--changelogFile=master.xml",
            "unexpectedChangesets",
        )
        assert not any("verbose" in token for token in mock_runner.last_argv)
        assert scope.state is CommandState.SUCCEEDED

    def test_missing_required_never_spawns(
        self, registry: CommandRegistry, mock_runner: MockRunner
    ) -> None:
        """Test validation failures happen before the tool is started."""
        scope = registry.create_scope("unexpectedChangesets")
        scope.set("url", "jdbc:test")
        step = registry.get_step("unexpectedChangesets")

        with pytest.raises(InvalidArgumentError) as exc_info:
            step.execute(scope)  # type: ignore[union-attr]

        assert exc_info.value.argument_name == "changelogFile"
        assert mock_runner.call_count == 0

    def test_password_masked_in_plan(self, registry: CommandRegistry) -> None:
        """Test the password is sent raw but displayed masked."""
        step = registry.get_step("unexpectedChangesets")
        assert isinstance(step, UnexpectedChangesetsCommand)
        scope = registry.create_scope("unexpectedChangesets")
        scope.set("url", "jdbc:test").set("changelogFile", "master.xml")
        scope.set("password", "hunter2")

        invocation = step.plan(scope)

        assert "--password=hunter2" in invocation.argv
        assert "hunter2" not in invocation.command_line
        assert "--password=*****" in invocation.command_line

    def test_tool_failure(self) -> None:
        """Test a failing tool run surfaces its exit code."""
        failing = CliInvocationAdapter("liquibase", MockRunner(returncode=1))
        step = UnexpectedChangesetsCommand(failing)
        scope = CommandScope(
            step.create_definition(),
            {"url": "jdbc:test", "changelogFile": "master.xml"},
        )

        with pytest.raises(CommandExecutionError) as exc_info:
            step.execute(scope)

        assert exc_info.value.exit_code == 1
        assert scope.state is CommandState.FAILED


class TestOtherBuiltins:
    """Tests for token layout of the remaining built-ins."""

    def test_status_verbose_after_command(
        self, registry: CommandRegistry, mock_runner: MockRunner
    ) -> None:
        """Test status passes verbose as a command-level flag."""
        scope = registry.create_scope("status")
        scope.set("url", "jdbc:test").set("changelogFile", "master.xml")
        scope.set("labelFilter", "smoke").set("verbose", True)

        registry.get_step("status").execute(scope)  # type: ignore[union-attr]

        assert mock_runner.last_argv == (
            "liquibase",
            "--url=jdbc:test",
            "--changelogFile=master.xml",
            "--labels=smoke",
            "status",
            "--verbose=true",
        )

    def test_history_alias_and_default_format(
        self, registry: CommandRegistry, mock_runner: MockRunner
    ) -> None:
        """Test the deployments alias runs history with its default format."""
        step = registry.get_step("deployments")
        assert isinstance(step, HistoryCommand)
        scope = registry.create_scope("deployments")
        scope.set("url", "jdbc:test")

        step.execute(scope)

        assert mock_runner.last_argv == (
            "liquibase",
            "--url=jdbc:test",
            "history",
            "--format=TABULAR",
        )

    def test_tag_is_positional(
        self, registry: CommandRegistry, mock_runner: MockRunner
    ) -> None:
        """Test the tag name is passed as a bare value."""
        step = registry.get_step("tag")
        assert isinstance(step, TagCommand)
        scope = registry.create_scope("tag")
        scope.set("url", "jdbc:test").set("tag", "v1.0")

        assert step.collect_arguments(scope) == ["--url=jdbc:test", "tag", "v1.0"]

    def test_validate(self, registry: CommandRegistry, mock_runner: MockRunner) -> None:
        """Test validate runs with the connection arguments only."""
        scope = registry.create_scope("validate")
        scope.set("url", "jdbc:test").set("changelogFile", "master.xml")
        scope.set("username", "admin")

        registry.get_step("validate").execute(scope)  # type: ignore[union-attr]

        assert mock_runner.last_argv == (
            "liquibase",
            "--url=jdbc:test",
            "--username=admin",
            "--changelogFile=master.xml",
            "validate",
        )
