"""Managers command implementation.

Shows which package managers are available on this system.
"""

import asyncio
from typing import Annotated

import typer
from rich.table import Table

from pkgview.cli.types import ManagerChoice, get_managers, load_cli_config
from pkgview.core.config import ViewerConfig
from pkgview.models.package import PackageManager
from pkgview.repositories import create_repository
from pkgview.utils.formatting import console

app = typer.Typer(
    help="Show which package managers are available.",
    invoke_without_command=True,
)


async def _probe_all(
    managers: list[PackageManager],
    config: ViewerConfig,
) -> list[bool]:
    repositories = [create_repository(manager, config) for manager in managers]
    return list(await asyncio.gather(*(repo.is_available() for repo in repositories)))


@app.callback(invoke_without_command=True)
def show_managers(
    ctx: typer.Context,
    manager: Annotated[
        ManagerChoice,
        typer.Option(
            "--manager",
            "-m",
            help="Package manager to probe: npm, homebrew, pip, or all.",
            case_sensitive=False,
        ),
    ] = ManagerChoice.ALL,
) -> None:
    """Probe each package manager with its version command."""
    if ctx.invoked_subcommand is not None:
        return

    config = load_cli_config(ctx)
    managers = get_managers(manager)
    available = asyncio.run(_probe_all(managers, config))

    table = Table(
        title="Package Managers",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Manager", no_wrap=True)
    table.add_column("Command", style="muted")
    table.add_column("Status", justify="center")

    for pkg_manager, is_available in zip(managers, available, strict=True):
        status = "[success]available[/]" if is_available else "[error]not installed[/]"
        table.add_row(pkg_manager.display_name, pkg_manager.command, status)

    console.print(table)

    if not any(available):
        raise typer.Exit(code=1)
