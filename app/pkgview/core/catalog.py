"""Per-manager package catalog.

A PackageCatalog owns the authoritative package list of one package manager.
It loads the list through a PackageRepository, keeps a filtered view for the
current search query and runs per-package latest-version checks and upgrades
as independent asyncio tasks.

Re-entrancy is guarded per operation rather than with a global lock: one
load at a time per catalog, and one check plus one update at a time per
package. A second request while one is in flight is a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pkgview.repositories.errors import (
    ManagerNotInstalledError,
    PackageError,
    to_package_error,
)

if TYPE_CHECKING:
    from pkgview.models.package import Package, PackageManager
    from pkgview.repositories.base import PackageRepository

logger = logging.getLogger(__name__)


class CatalogState(str, Enum):
    """Lifecycle state of a catalog.

    Attributes:
        IDLE: Nothing has been loaded yet.
        LOADING: A load is in flight.
        READY: The package list is loaded.
        UNAVAILABLE: The package manager is not installed.
        ERROR: The last load failed.
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class UpdateNotice:
    """One-shot outcome of an update for the presentation layer.

    Attributes:
        package_name: Name of the package that was updated.
        success: Whether the upgrade succeeded.
        error: Human-readable failure cause (failures only).
    """

    package_name: str
    success: bool
    error: str | None = None

    @property
    def text(self) -> str:
        """Message suitable for display."""
        if self.success:
            return f"{self.package_name} has been updated successfully!"
        return f"Failed to update {self.package_name}: {self.error or 'Unknown error'}"


def _sort_by_name(packages: list[Package]) -> list[Package]:
    return sorted(packages, key=lambda p: p.name.lower())


class PackageCatalog:
    """Authoritative package list and search view for one package manager.

    Example:
        >>> catalog = PackageCatalog(NpmRepository())
        >>> await catalog.load()
        >>> catalog.search("pad")
        >>> [p.name for p in catalog.visible_packages]
        ['left-pad']
    """

    def __init__(self, repository: PackageRepository) -> None:
        """Initialize an empty catalog.

        Args:
            repository: Repository used for every external operation.
        """
        self._repository = repository
        self._packages: list[Package] = []
        self._visible: list[Package] = []
        self._query = ""
        self._state = CatalogState.IDLE
        self._error: PackageError | None = None
        self._loaded = False
        self._load_task: asyncio.Task[None] | None = None
        self._load_count = 0
        self._notice: UpdateNotice | None = None

    @property
    def manager(self) -> PackageManager:
        """Package manager served by this catalog."""
        return self._repository.manager

    @property
    def repository(self) -> PackageRepository:
        """Repository used by this catalog."""
        return self._repository

    @property
    def state(self) -> CatalogState:
        """Current lifecycle state."""
        return self._state

    @property
    def error(self) -> PackageError | None:
        """Error of the last failed load, if any."""
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._state == CatalogState.LOADING

    @property
    def is_manager_installed(self) -> bool:
        return self._state != CatalogState.UNAVAILABLE

    @property
    def is_empty(self) -> bool:
        return not self._packages

    @property
    def packages(self) -> list[Package]:
        """Full, name-sorted package list."""
        return list(self._packages)

    @property
    def visible_packages(self) -> list[Package]:
        """Packages matching the current search query."""
        return list(self._visible)

    @property
    def package_count(self) -> int:
        """Number of visible packages."""
        return len(self._visible)

    @property
    def query(self) -> str:
        return self._query

    @property
    def notice(self) -> UpdateNotice | None:
        """Outcome of the most recent update, until acknowledged."""
        return self._notice

    def acknowledge_notice(self) -> UpdateNotice | None:
        """Return the pending update notice and clear it."""
        notice, self._notice = self._notice, None
        return notice

    def get(self, name: str) -> Package | None:
        """Find a loaded package by name (case-insensitive)."""
        wanted = name.strip().lower()
        for package in self._packages:
            if package.name.lower() == wanted:
                return package
        return None

    # =========================================================================
    # Loading
    # =========================================================================

    async def load(self) -> None:
        """Load the package list unless it is already loaded.

        Concurrent callers share one in-flight load. Errors never propagate;
        they are exposed through :attr:`state` and :attr:`error`.
        """
        if self._loaded and self._packages:
            return

        if self._load_task is None or self._load_task.done():
            self._start_load()
        await asyncio.shield(self._load_task)

    async def refresh(self) -> None:
        """Discard per-package state and reload unconditionally."""
        for package in self._packages:
            package.reset_state()
        await self._reload()

    async def retry(self) -> None:
        """Retry after an error; same as :meth:`refresh`."""
        await self.refresh()

    async def _reload(self) -> None:
        """Wait for a load that started after this call.

        A load already in flight may have fetched before the caller's change,
        so it is awaited and then followed by a fresh one.
        """
        requested_at = self._load_count
        while True:
            task = self._load_task
            if task is None or task.done():
                self._loaded = False
                task = self._start_load()
                await asyncio.shield(task)
                return
            started_later = self._load_count > requested_at
            await asyncio.shield(task)
            if started_later:
                return

    def _start_load(self) -> asyncio.Task[None]:
        self._load_count += 1
        self._load_task = asyncio.create_task(self._load())
        return self._load_task

    async def _load(self) -> None:
        self._state = CatalogState.LOADING
        self._error = None
        manager = self.manager.display_name

        if not await self._repository.is_available():
            logger.info("%s is not available", manager)
            self._fail(ManagerNotInstalledError())
            return

        try:
            fetched = await self._repository.fetch_packages()
        except Exception as e:
            error = to_package_error(e)
            logger.warning("Loading %s packages failed: %s", manager, error.message)
            self._fail(error)
            return

        # Sort the unpublished snapshot off the event loop
        packages = await asyncio.to_thread(_sort_by_name, fetched)

        self._packages = packages
        self._recompute_visible()
        self._loaded = True
        self._state = CatalogState.READY
        logger.debug("Loaded %d %s packages", len(packages), manager)

    def _fail(self, error: PackageError) -> None:
        self._packages = []
        self._recompute_visible()
        self._loaded = False
        self._error = error
        if isinstance(error, ManagerNotInstalledError):
            self._state = CatalogState.UNAVAILABLE
        else:
            self._state = CatalogState.ERROR

    # =========================================================================
    # Search
    # =========================================================================

    def search(self, query: str) -> None:
        """Replace the search query and recompute the visible packages."""
        self._query = query
        self._recompute_visible()

    def clear_search(self) -> None:
        self.search("")

    def _recompute_visible(self) -> None:
        if not self._query:
            self._visible = list(self._packages)
            return
        needle = self._query.casefold()
        self._visible = [p for p in self._packages if needle in p.display_name.casefold()]

    # =========================================================================
    # Per-package actions
    # =========================================================================

    async def check_latest_version(self, package: Package) -> None:
        """Query the latest version of one package.

        Failures are absorbed: the cached latest version is cleared and the
        check can simply be retried.
        """
        if package.check_in_progress:
            return

        package.check_in_progress = True
        try:
            package.latest_version = await self._repository.query_latest_version(package)
        except Exception as e:
            logger.debug(
                "Latest version check for %s failed: %s",
                package.identity,
                to_package_error(e).message,
            )
            package.latest_version = None
        finally:
            package.check_in_progress = False

    async def update_package(self, package: Package) -> None:
        """Upgrade one package and reload the catalog on success.

        The outcome is published as :attr:`notice`. A failed update leaves
        the package list untouched.
        """
        if package.update_in_progress:
            return

        package.update_in_progress = True
        try:
            await self._repository.update_package(package)
        except Exception as e:
            error = to_package_error(e)
            logger.warning("Update of %s failed: %s", package.identity, error.message)
            self._notice = UpdateNotice(package.name, success=False, error=error.message)
            return
        finally:
            package.update_in_progress = False

        logger.info("Updated %s", package.identity)
        await self._reload()
        self._notice = UpdateNotice(package.name, success=True)
