"""Config command implementation.

Shows, creates and locates the pkgview configuration file.
"""

from pathlib import Path
from typing import Annotated

import typer

from pkgview.cli.types import load_cli_config
from pkgview.core.config import ConfigError, ViewerConfig, save_config
from pkgview.core.paths import get_config_path
from pkgview.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Show or create the configuration file.",
    no_args_is_help=True,
)


def _target_path(ctx: typer.Context) -> Path:
    path: Path | None = (ctx.obj or {}).get("config_path")
    return path or get_config_path()


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration as JSON."""
    config = load_cli_config(ctx)
    console.print_json(config.model_dump_json())


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the configuration file path."""
    console.print(str(_target_path(ctx)), highlight=False)


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing configuration file."),
    ] = False,
) -> None:
    """Write a configuration file with default values."""
    target = _target_path(ctx)
    if target.exists() and not force:
        print_warning(f"Config already exists: {target} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(ViewerConfig(), target)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
