"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from pkgview.core.catalog import CatalogState, PackageCatalog
from pkgview.core.config import ConfigError, ViewerConfig, get_config
from pkgview.models.package import PackageManager
from pkgview.repositories import create_repository
from pkgview.utils.formatting import print_error, print_warning


_MANAGER_MEMBERS = {manager.name: manager.value for manager in PackageManager}

# Exactly one package manager (update)
ManagerName = Enum("ManagerName", _MANAGER_MEMBERS, type=str)

# One package manager or all of them (list, managers)
ManagerChoice = Enum("ManagerChoice", {**_MANAGER_MEMBERS, "ALL": "all"}, type=str)


def get_managers(choice: ManagerChoice = ManagerChoice.ALL) -> list[PackageManager]:
    """Resolve a CLI choice into package managers.

    Args:
        choice: The manager choice (npm, homebrew, pip, or all).

    Returns:
        Package managers in declaration order.
    """
    if choice == ManagerChoice.ALL:
        return list(PackageManager)
    return [PackageManager(choice.value)]


def get_catalogs(
    choice: ManagerChoice = ManagerChoice.ALL,
    config: ViewerConfig | None = None,
) -> list[PackageCatalog]:
    """Create one catalog per selected package manager.

    Args:
        choice: The manager choice (npm, homebrew, pip, or all).
        config: Configuration passed to every repository.

    Returns:
        List of catalogs, not yet loaded.
    """
    return [PackageCatalog(create_repository(m, config)) for m in get_managers(choice)]


def load_cli_config(ctx: typer.Context) -> ViewerConfig:
    """Load configuration for a command, exiting on invalid files.

    Args:
        ctx: Typer context carrying the global ``--config`` option.

    Returns:
        Loaded or default ViewerConfig.

    Raises:
        typer.Exit: If the config file is invalid.
    """
    path: Path | None = (ctx.obj or {}).get("config_path")
    try:
        return get_config(path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def report_catalog_problem(catalog: PackageCatalog) -> bool:
    """Print the catalog's load problem, if any.

    Unavailable managers produce a warning; failed loads an error with its
    recovery suggestion.

    Args:
        catalog: A catalog after :meth:`PackageCatalog.load`.

    Returns:
        True if the catalog failed with a (retryable) error.
    """
    name = catalog.manager.display_name
    if catalog.state == CatalogState.UNAVAILABLE:
        print_warning(f"{name} is not installed on this system.")
        return False
    if catalog.state == CatalogState.ERROR and catalog.error is not None:
        print_error(f"{name}: {catalog.error.message}")
        print_warning(catalog.error.recovery_suggestion)
        return True
    return False
