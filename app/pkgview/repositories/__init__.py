"""Package repositories for different package managers.

This module exports the repository contract, its three implementations
and a factory selecting one by package manager.
"""

from pkgview.core.config import ViewerConfig
from pkgview.models.package import PackageManager
from pkgview.repositories.base import PackageRepository
from pkgview.repositories.errors import (
    CommandFailedError,
    ManagerNotInstalledError,
    PackageError,
    PackageTimeoutError,
    ParseFailedError,
    UnknownPackageError,
    to_package_error,
)
from pkgview.repositories.homebrew import HomebrewRepository
from pkgview.repositories.npm import NpmRepository
from pkgview.repositories.pip import PipRepository

REPOSITORIES: dict[PackageManager, type[PackageRepository]] = {
    PackageManager.NPM: NpmRepository,
    PackageManager.HOMEBREW: HomebrewRepository,
    PackageManager.PIP: PipRepository,
}


def create_repository(
    manager: PackageManager,
    config: ViewerConfig | None = None,
) -> PackageRepository:
    """Create the repository implementation for a package manager.

    Args:
        manager: Package manager to drive.
        config: Configuration passed to the repository.

    Returns:
        A repository instance for ``manager``.
    """
    return REPOSITORIES[manager](config)


__all__ = [
    "REPOSITORIES",
    "CommandFailedError",
    "HomebrewRepository",
    "ManagerNotInstalledError",
    "NpmRepository",
    "PackageError",
    "PackageRepository",
    "PackageTimeoutError",
    "ParseFailedError",
    "PipRepository",
    "UnknownPackageError",
    "create_repository",
    "to_package_error",
]
