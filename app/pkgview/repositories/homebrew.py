"""Homebrew package repository implementation.

Lists installed formulae with ``brew list --formula`` and reads each
formula's installed version from its Cellar directory.
"""

import logging
from pathlib import Path

from pkgview.models.package import Package, PackageManager
from pkgview.repositories.base import PackageRepository, parse_json, split_lines
from pkgview.repositories.errors import ParseFailedError
from pkgview.utils.filesystem import latest_version_dir, modification_date
from pkgview.utils.shell import ExecutionError

logger = logging.getLogger(__name__)


class HomebrewRepository(PackageRepository):
    """Repository for Homebrew formulae (and casks, on upgrade).

    Versions come from the Cellar: ``<prefix>/Cellar/<name>/<version>/``.
    When several versions are kept, the numerically highest one wins.
    """

    @property
    def manager(self) -> PackageManager:
        """Return Homebrew as the package manager."""
        return PackageManager.HOMEBREW

    async def fetch_packages(self) -> list[Package]:
        """List installed formulae.

        Returns:
            One Package per formula name.

        Raises:
            ExecutionError: If ``brew list`` fails.
        """
        output = await self._run(["list", "--formula"])
        names = split_lines(output)

        prefix = await self._resolve_prefix(["--prefix"], self._config.homebrew_prefix)
        cellar = Path(prefix) / "Cellar"

        packages: list[Package] = []
        for name in names:
            package_dir = cellar / name
            version = latest_version_dir(package_dir)
            install_date = modification_date(package_dir / version) if version else None
            packages.append(
                Package(
                    name=name,
                    manager=PackageManager.HOMEBREW,
                    version=version,
                    install_path=str(package_dir),
                    install_date=install_date,
                )
            )

        logger.debug("Found %d Homebrew formulae in %s", len(packages), cellar)
        return packages

    async def query_latest_version(self, package: Package) -> str:
        """Read ``formulae[0].versions.stable`` from ``brew info --json=v2``."""
        output = await self._run(["info", "--json=v2", package.name])
        data = parse_json(output, "brew info")
        try:
            stable = data["formulae"][0]["versions"]["stable"]
        except (KeyError, IndexError, TypeError) as e:
            msg = "Could not parse version from brew info output"
            raise ParseFailedError(msg) from e
        if not isinstance(stable, str) or not stable:
            msg = "Could not parse version from brew info output"
            raise ParseFailedError(msg)
        return stable

    async def update_package(self, package: Package) -> None:
        """Upgrade a formula, retrying as a cask when that fails.

        The cask retry only happens when the name appears in
        ``brew list --cask``; otherwise the formula failure is re-raised.
        """
        logger.info("Updating Homebrew package: %s", package.name)
        try:
            await self._run(["upgrade", package.name], timeout=self._config.update_timeout)
        except ExecutionError as e:
            logger.debug("Formula upgrade of %s failed: %s", package.name, e)
            if package.name not in await self._list_casks():
                raise
            logger.info("Retrying %s as a cask", package.name)
            await self._run(
                ["upgrade", "--cask", package.name],
                timeout=self._config.update_timeout,
            )

    async def _list_casks(self) -> set[str]:
        """Get the set of installed cask names.

        Raises:
            ExecutionError: If ``brew list --cask`` fails.
        """
        return set(split_lines(await self._run(["list", "--cask"])))
