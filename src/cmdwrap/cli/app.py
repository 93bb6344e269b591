"""Main CLI application for cmdwrap."""

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from cmdwrap import __version__
from cmdwrap.cli.context import CliContext, create_context, describe_config
from cmdwrap.cli.options import (
    ArgumentOption,
    DryRunOption,
    FormatOption,
    VerboseOption,
    parse_assignments,
)
from cmdwrap.commands.cli_wrapper import CliWrapperCommand
from cmdwrap.commands.definition import CommandDefinition
from cmdwrap.exceptions import CmdWrapError, CommandExecutionError, InvalidStateError
from cmdwrap.output import OutputData

# Create Typer app
app = typer.Typer(
    name="cmdwrap",
    help="Run a legacy command-line tool through declared commands.",
    add_completion=True,
    no_args_is_help=True,
)

# Rich console for output
console = Console()
err_console = Console(stderr=True)

NameArgument = Annotated[
    str,
    typer.Argument(help="Command name, e.g. 'status' or 'diff changelog'."),
]

ARGUMENT_COLUMNS = ["Argument", "Type", "Required", "Default", "Aliases", "Description"]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"cmdwrap version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Run a legacy command-line tool through declared commands."""
    pass


def _fail(error: CmdWrapError) -> typer.Exit:
    """Report error on stderr and build the matching exit."""
    if isinstance(error, CommandExecutionError):
        output = error.output.rstrip()
        if output:
            err_console.print(output, markup=False, highlight=False)
    message = error.user_message
    if message == type(error).user_message and str(error) != message:
        # No tailored user message; append the technical detail
        message = f"{message}: {error}"
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    return typer.Exit(error.exit_code)


def _argument_rows(definition: CommandDefinition) -> list[dict[str, str]]:
    rows = []
    for argument in definition.visible_arguments():
        rows.append(
            {
                "Argument": argument.name,
                "Type": argument.value_type.__name__,
                "Required": "yes" if argument.required else "",
                "Default": argument.display_default() or "",
                "Aliases": ", ".join(argument.aliases),
                "Description": argument.description or "",
            }
        )
    return rows


@app.command()
def commands(format: FormatOption = None) -> None:
    """List all available commands."""
    try:
        ctx = create_context(format_choice=format)
    except CmdWrapError as e:
        raise _fail(e) from None

    info_list = ctx.registry.get_command_info()
    if not info_list:
        err_console.print("[dim]No commands registered[/dim]")
        return

    ctx.formatter.print_text(
        ctx.formatter.format_table(
            info_list,
            columns=["name", "aliases", "description"],
            title="Available Commands",
        )
    )


@app.command()
def describe(name: NameArgument, format: FormatOption = None) -> None:
    """Show a command's description and arguments."""
    try:
        ctx = create_context(format_choice=format)
        definition = ctx.registry.require(name)
    except CmdWrapError as e:
        raise _fail(e) from None

    formatter = ctx.formatter
    if definition.description:
        formatter.print(
            OutputData(definition.description, title=definition.display_name)
        )
    rows = _argument_rows(definition)
    if rows:
        formatter.print_text(
            formatter.format_table(rows, ARGUMENT_COLUMNS, title="Arguments")
        )
    else:
        formatter.print_text("No arguments")


def _run(
    ctx: CliContext, name: str, assignments: dict[str, str], dry_run: bool
) -> None:
    scope = ctx.create_scope(name, assignments)
    step = ctx.registry.require_step(scope.definition.name)
    title = scope.definition.display_name

    if dry_run:
        if not isinstance(step, CliWrapperCommand):
            raise InvalidStateError(
                f"Command '{title}' does not run an external tool",
                user_message=f"'{title}' cannot be shown as a dry run",
            )
        scope.validate()
        invocation = step.plan(scope)
        ctx.formatter.print(OutputData.planned(invocation.command_line, title))
        return

    result = step.execute(scope)
    ctx.formatter.print(result.to_output_data(title))


@app.command()
def run(
    name: NameArgument,
    arg: ArgumentOption = None,
    dry_run: DryRunOption = False,
    format: FormatOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Run a command, passing arguments as NAME=VALUE pairs."""
    assignments = parse_assignments(arg)
    try:
        ctx = create_context(format_choice=format, verbose=verbose)
        _run(ctx, name, assignments, dry_run)
    except CmdWrapError as e:
        raise _fail(e) from None


@app.command("config")
def config_cmd(
    show_path: bool = typer.Option(
        False,
        "--path",
        "-p",
        help="Show config file path.",
    ),
    format: FormatOption = None,
) -> None:
    """Show current configuration."""
    from cmdwrap.config.defaults import get_config_path

    if show_path:
        console.print(str(get_config_path()), highlight=False)
        return

    try:
        ctx = create_context(format_choice=format)
    except CmdWrapError as e:
        raise _fail(e) from None

    summary = describe_config(ctx.config, ctx.registry)
    ctx.formatter.print(OutputData(summary, title="cmdwrap configuration"))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
