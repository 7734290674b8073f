"""CLI entry point for standupnote.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from standupnote import __version__
from standupnote.cli.config import config_app
from standupnote.cli.repos import repos_command
from standupnote.cli.summarize import (
    complexity_command,
    prompt_command,
    summarize_command,
    test_key_command,
    tickets_command,
)
from standupnote.cli.utils import setup_logging
from standupnote.config import load_config
from standupnote.global_config import GlobalConfigError

# Main application
app = typer.Typer(
    name="standupnote",
    help="standupnote: AI stand-up summaries of your commits, grouped by ticket",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", help="Show the version and exit"),
) -> None:
    """Load configuration before running a command."""
    if version:
        typer.echo(f"standupnote {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    setup_logging(verbose)
    try:
        load_config()
    except GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("summarize")(summarize_command)
app.command("prompt")(prompt_command)
app.command("complexity")(complexity_command)
app.command("tickets")(tickets_command)
app.command("test-key")(test_key_command)
app.command("repos")(repos_command)


__all__ = ["app", "config_app"]
