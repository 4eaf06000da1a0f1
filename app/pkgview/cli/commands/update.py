"""Update command implementation.

Upgrades named packages of one package manager through its catalog.
"""

import asyncio
from typing import Annotated

import typer

from pkgview.cli.types import ManagerName, load_cli_config, report_catalog_problem
from pkgview.core.catalog import CatalogState, PackageCatalog, UpdateNotice
from pkgview.models.package import PackageManager
from pkgview.repositories import create_repository
from pkgview.utils.formatting import print_error, print_info, print_success


async def _update_all(catalog: PackageCatalog, names: list[str]) -> list[UpdateNotice]:
    """Update packages one after another, collecting each outcome.

    Each lookup happens after the previous update's reload, so it always
    targets the current package record.
    """
    notices: list[UpdateNotice] = []
    for name in names:
        package = catalog.get(name)
        if package is None:
            notices.append(
                UpdateNotice(name, success=False, error="Package is not installed")
            )
            continue
        print_info(f"Updating {package.name} ({package.version or 'unknown version'})...")
        await catalog.update_package(package)
        notice = catalog.acknowledge_notice()
        if notice is not None:
            notices.append(notice)
    return notices


async def _load_and_update(catalog: PackageCatalog, names: list[str]) -> list[UpdateNotice]:
    await catalog.load()
    if catalog.state != CatalogState.READY:
        return []
    return await _update_all(catalog, names)


def update_packages(
    ctx: typer.Context,
    manager: Annotated[
        ManagerName,
        typer.Argument(help="Package manager: npm, homebrew, or pip.", case_sensitive=False),
    ],
    names: Annotated[
        list[str],
        typer.Argument(help="Names of the packages to update."),
    ],
) -> None:
    """Update one or more packages.

    Examples:
        pkgview update npm typescript       # npm install -g typescript@latest
        pkgview update pip flask requests   # pip3 install --upgrade, one by one
    """
    config = load_cli_config(ctx)
    catalog = PackageCatalog(create_repository(PackageManager(manager.value), config))

    notices = asyncio.run(_load_and_update(catalog, names))

    if catalog.state != CatalogState.READY:
        report_catalog_problem(catalog)
        raise typer.Exit(code=1)

    failed = 0
    for notice in notices:
        if notice.success:
            print_success(notice.text)
        else:
            failed += 1
            print_error(notice.text)

    if failed:
        raise typer.Exit(code=1)
