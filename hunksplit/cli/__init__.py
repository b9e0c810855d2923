"""CLI entry point for hunksplit.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

from typing import Optional

import typer

from hunksplit import __version__
from hunksplit.cli.config import config_app
from hunksplit.cli.split import hunks_command, split_command
from hunksplit.git import DiffScope

# Main application
app = typer.Typer(
    name="hunksplit",
    help="hunksplit: split uncommitted changes into focused commits",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("split")(split_command)
app.command("hunks")(hunks_command)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hunksplit {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_command(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Split uncommitted changes into focused commits.

    Running 'hunksplit' without a command is the same as 'hunksplit split'
    with default options.
    """
    if ctx.invoked_subcommand is None:
        split_command(
            scope=DiffScope.ALL,
            from_plan=None,
            show_json=False,
            dry_run=False,
            yes=False,
            author=None,
            provider=None,
            model=None,
            verbose=0,
            debug=False,
        )


__all__ = [
    "app",
    "config_app",
    "split_command",
    "hunks_command",
    "main_command",
]
