"""Main CLI application for balanceline."""

from __future__ import annotations

import asyncio
from enum import IntEnum

import typer

from balanceline.cli.atyper import ATyper
from balanceline.config.logging_config import setup_logging

# Create the main app
app = ATyper(
    name="balanceline",
    help="Show the relay account balance in your statusline",
    add_completion=False,
    no_args_is_help=False,
    invoke_without_command=True,
)


class ExitCode(IntEnum):
    """Exit codes for balanceline."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIG_ERROR = 4


@app.callback()
def main(
    ctx: typer.Context,
    json: bool = typer.Option(False, "--json", "-j", help="Enable JSON output mode"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log resolution attempts to stderr"
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Balanceline - relay account balance for your statusline."""
    if version:
        from balanceline import __version__

        typer.echo(f"balanceline {__version__}")
        raise typer.Exit()

    setup_logging(verbose)

    # Store options in context
    ctx.meta["json"] = json
    ctx.meta["no_color"] = no_color
    ctx.meta["verbose"] = verbose

    # If no command provided, print the statusline segment
    if ctx.invoked_subcommand is None:
        from balanceline.cli.commands.show import run_statusline

        asyncio.run(run_statusline(ctx))


def run_app() -> None:
    """Run the CLI app."""
    app()


# Import commands to register them with the app
# These imports must come after app is defined
from balanceline.cli.commands import show  # noqa: E402,F401 (registers show command)
from balanceline.cli.commands import cache as cache_cmd  # noqa: E402
from balanceline.cli.commands import config as config_cmd  # noqa: E402

# Register typer groups for cache and config commands
app.add_typer(cache_cmd.cache_app, name="cache")
app.add_typer(config_cmd.config_app, name="config")
