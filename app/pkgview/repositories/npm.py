"""npm package repository implementation.

Lists globally installed packages with ``npm list -g --json`` and resolves
install paths below the global ``lib/node_modules`` directory.
"""

import logging
from pathlib import Path

from pkgview.models.package import Package, PackageManager
from pkgview.repositories.base import PackageRepository, parse_json
from pkgview.repositories.errors import ParseFailedError
from pkgview.utils.filesystem import modification_date

logger = logging.getLogger(__name__)


class NpmRepository(PackageRepository):
    """Repository for globally installed npm packages."""

    @property
    def manager(self) -> PackageManager:
        """Return npm as the package manager."""
        return PackageManager.NPM

    async def fetch_packages(self) -> list[Package]:
        """List global npm packages.

        Returns:
            One Package per entry of the ``dependencies`` map.

        Raises:
            ExecutionError: If ``npm list`` fails.
            ParseFailedError: If the JSON output has an unexpected shape.
        """
        output = await self._run(["list", "-g", "--depth=0", "--json"])
        data = parse_json(output, "npm")
        if not isinstance(data, dict):
            msg = "Invalid npm output format: expected a JSON object"
            raise ParseFailedError(msg)

        # npm omits the key entirely when nothing is installed globally
        dependencies = data.get("dependencies", {})
        if not isinstance(dependencies, dict):
            msg = "Invalid npm output format: 'dependencies' is not an object"
            raise ParseFailedError(msg)

        prefix = await self._resolve_prefix(["prefix", "-g"], self._config.npm_prefix)
        modules_dir = Path(prefix) / "lib" / "node_modules"

        packages: list[Package] = []
        for name, info in dependencies.items():
            version = info.get("version") if isinstance(info, dict) else None
            if not isinstance(version, str):
                version = None
            package_path = modules_dir / name
            packages.append(
                Package(
                    name=name,
                    manager=PackageManager.NPM,
                    version=version,
                    install_path=str(package_path),
                    install_date=modification_date(package_path),
                )
            )

        logger.debug("Found %d global npm packages", len(packages))
        return packages

    async def query_latest_version(self, package: Package) -> str:
        """Look up the latest version with ``npm view <name> version``."""
        output = await self._run(["view", package.name, "version"])
        version = output.strip()
        if not version:
            msg = f"npm view returned no version for {package.name}"
            raise ParseFailedError(msg)
        return version

    async def update_package(self, package: Package) -> None:
        """Upgrade a global package with ``npm install -g <name>@latest``."""
        logger.info("Updating npm package: %s", package.name)
        await self._run(
            ["install", "-g", f"{package.name}@latest"],
            timeout=self._config.npm_update_timeout,
        )
