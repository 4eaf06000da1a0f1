"""List command implementation.

Lists installed packages from one or more package managers, optionally
checking each visible package for a newer version.
"""

import asyncio
import json
from enum import Enum
from typing import Annotated, Any

import typer
from rich.markup import escape

from pkgview.cli.types import (
    ManagerChoice,
    get_catalogs,
    load_cli_config,
    report_catalog_problem,
)
from pkgview.core.catalog import CatalogState, PackageCatalog
from pkgview.models.package import Package
from pkgview.utils.filesystem import directory_size
from pkgview.utils.formatting import (
    console,
    create_package_table,
    format_bytes,
    format_package_row,
    print_error,
    print_info,
)

app = typer.Typer(
    help="List installed packages.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


async def _load_catalogs(
    catalogs: list[PackageCatalog],
    query: str | None,
    check_latest: bool,
    max_parallel: int,
) -> None:
    """Load every catalog, apply the search and run latest-version checks."""
    await asyncio.gather(*(catalog.load() for catalog in catalogs))

    if query:
        for catalog in catalogs:
            catalog.search(query)

    if not check_latest:
        return

    semaphore = asyncio.Semaphore(max_parallel)

    async def check(catalog: PackageCatalog, package: Package) -> None:
        async with semaphore:
            await catalog.check_latest_version(package)

    await asyncio.gather(
        *(check(catalog, pkg) for catalog in catalogs for pkg in catalog.visible_packages)
    )


async def _measure_sizes(packages: list[Package]) -> dict[str, int | None]:
    """Measure install directories in worker threads, keyed by identity."""
    sizes = await asyncio.gather(
        *(
            asyncio.to_thread(directory_size, pkg.install_path) if pkg.install_path else _none()
            for pkg in packages
        )
    )
    return {pkg.identity: size for pkg, size in zip(packages, sizes, strict=True)}


async def _none() -> None:
    return None


def _package_to_dict(pkg: Package, size: int | None, include_size: bool) -> dict[str, Any]:
    data: dict[str, Any] = {
        "manager": pkg.manager.value,
        "name": pkg.name,
        "version": pkg.version,
        "latest_version": pkg.latest_version,
        "update_available": pkg.update_available,
        "install_path": pkg.install_path,
        "install_date": pkg.install_date.isoformat() if pkg.install_date else None,
    }
    if include_size:
        data["size_bytes"] = size
    return data


@app.callback(invoke_without_command=True)
def list_packages(
    ctx: typer.Context,
    manager: Annotated[
        ManagerChoice,
        typer.Option(
            "--manager",
            "-m",
            help="Package manager to list: npm, homebrew, pip, or all.",
            case_sensitive=False,
        ),
    ] = ManagerChoice.ALL,
    search: Annotated[
        str | None,
        typer.Option(
            "--search",
            "-s",
            help="Only show packages whose name contains this text.",
        ),
    ] = None,
    latest: Annotated[
        bool,
        typer.Option(
            "--latest",
            "-l",
            help="Look up the latest version of every listed package.",
        ),
    ] = False,
    outdated: Annotated[
        bool,
        typer.Option(
            "--outdated",
            "-o",
            help="Only show packages with a newer version (implies --latest).",
        ),
    ] = False,
    sizes: Annotated[
        bool,
        typer.Option(
            "--sizes",
            help="Show the on-disk size of each package.",
        ),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Limit number of packages to display.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List installed packages.

    Examples:
        pkgview list                        # All managers, table output
        pkgview list -m pip -s flask        # pip packages matching "flask"
        pkgview list --outdated             # Packages with a newer version
        pkgview list -f json --sizes        # JSON including on-disk sizes
    """
    if ctx.invoked_subcommand is not None:
        return

    config = load_cli_config(ctx)
    check_latest = latest or outdated
    catalogs = get_catalogs(manager, config)

    asyncio.run(_load_catalogs(catalogs, search, check_latest, config.max_parallel_checks))

    failed = False
    for catalog in catalogs:
        failed = report_catalog_problem(catalog) or failed

    ready = [c for c in catalogs if c.state == CatalogState.READY]
    if not ready:
        print_error("No package managers could be listed.")
        raise typer.Exit(code=1)

    packages = [pkg for catalog in ready for pkg in catalog.visible_packages]
    if outdated:
        packages = [pkg for pkg in packages if pkg.update_available]
    if limit:
        packages = packages[:limit]

    size_by_identity = asyncio.run(_measure_sizes(packages)) if sizes else {}

    if output_format == OutputFormat.JSON:
        data = [
            _package_to_dict(pkg, size_by_identity.get(pkg.identity), sizes) for pkg in packages
        ]
        console.print_json(json.dumps(data))
    else:
        _print_tables(ready, packages, check_latest, sizes, size_by_identity)

    if failed:
        raise typer.Exit(code=1)


def _print_tables(
    catalogs: list[PackageCatalog],
    packages: list[Package],
    show_latest: bool,
    show_size: bool,
    size_by_identity: dict[str, int | None],
) -> None:
    """Print one table per catalog with the selected packages."""
    shown = {pkg.identity for pkg in packages}
    for catalog in catalogs:
        rows = [pkg for pkg in catalog.visible_packages if pkg.identity in shown]
        if not rows:
            if catalog.query:
                print_info(f'No {catalog.manager.display_name} packages match "{catalog.query}"')
            else:
                print_info(f"No {catalog.manager.display_name} packages to show.")
            continue

        table = create_package_table(
            f"{catalog.manager.display_name} Packages",
            show_latest=show_latest,
            show_size=show_size,
        )
        for pkg in rows:
            size = format_bytes(size_by_identity.get(pkg.identity)) if show_size else None
            table.add_row(*format_package_row(pkg, show_latest=show_latest, size=size))
        console.print(table)

        suffix = f" matching '{escape(catalog.query)}'" if catalog.query else ""
        console.print(f"[muted]{len(rows)} of {len(catalog.packages)} packages{suffix}[/]\n")
