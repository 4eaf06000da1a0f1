"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from pkgview import __version__
from pkgview.cli.commands import config, listing, managers, update
from pkgview.utils.formatting import setup_logging

# Create main Typer app
app = typer.Typer(
    name="pkgview",
    help="Inspect and upgrade npm, Homebrew and pip packages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pkgview version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config.toml (default: ~/.config/pkgview/config.toml).",
        ),
    ] = None,
) -> None:
    """pkgview - Inspect and upgrade npm, Homebrew and pip packages.

    Lists what each package manager has installed, checks the registries
    for newer versions and runs upgrades.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path


# Register commands
app.add_typer(managers.app, name="managers")
app.add_typer(listing.app, name="list")
app.add_typer(config.app, name="config")
app.command(name="update", help="Update packages to their latest version.")(
    update.update_packages
)


if __name__ == "__main__":
    app()
