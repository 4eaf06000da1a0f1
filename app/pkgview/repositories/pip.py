"""pip package repository implementation.

Lists installed distributions with ``pip3 list --format=json`` and locates
them in the interpreter's site-packages directory.
"""

import logging
from pathlib import Path

from pkgview.models.package import Package, PackageManager
from pkgview.repositories.base import PackageRepository, parse_json
from pkgview.repositories.errors import ParseFailedError
from pkgview.utils.filesystem import modification_date
from pkgview.utils.shell import ExecutionError

logger = logging.getLogger(__name__)

# Prefix of the line carrying the newest version in `pip index versions`
_LATEST_PREFIX = "LATEST:"


class PipRepository(PackageRepository):
    """Repository for pip-installed Python distributions."""

    @property
    def manager(self) -> PackageManager:
        """Return pip as the package manager."""
        return PackageManager.PIP

    async def fetch_packages(self) -> list[Package]:
        """List installed distributions.

        Returns:
            One Package per entry that carries a name.

        Raises:
            ExecutionError: If ``pip3 list`` fails.
            ParseFailedError: If the output is not a JSON array.
        """
        output = await self._run(["list", "--format=json"])
        data = parse_json(output, "pip")
        if not isinstance(data, list):
            msg = "Invalid pip output format: expected a JSON array"
            raise ParseFailedError(msg)

        site_packages = Path(await self._site_packages())

        packages: list[Package] = []
        for entry in data:
            name = entry.get("name") if isinstance(entry, dict) else None
            if not isinstance(name, str) or not name.strip():
                logger.debug("Skipping pip entry without a name: %r", entry)
                continue
            version = entry.get("version")
            package_path = site_packages / name.replace("-", "_")
            packages.append(
                Package(
                    name=name,
                    manager=PackageManager.PIP,
                    version=version if isinstance(version, str) else None,
                    install_path=str(package_path),
                    install_date=modification_date(package_path),
                )
            )

        logger.debug("Found %d pip packages in %s", len(packages), site_packages)
        return packages

    async def query_latest_version(self, package: Package) -> str:
        """Find the ``LATEST:`` line of ``pip3 index versions <name>``."""
        output = await self._run(
            ["index", "versions", package.name],
            timeout=self._config.query_timeout,
        )
        for line in output.splitlines():
            stripped = line.strip()
            if stripped.startswith(_LATEST_PREFIX):
                version = stripped.removeprefix(_LATEST_PREFIX).strip()
                if version:
                    return version

        msg = "Could not find latest version in pip index output"
        raise ParseFailedError(msg)

    async def update_package(self, package: Package) -> None:
        """Upgrade a distribution with ``pip3 install --upgrade <name>``."""
        logger.info("Updating pip package: %s", package.name)
        await self._run(
            ["install", "--upgrade", package.name],
            timeout=self._config.update_timeout,
        )

    async def _site_packages(self) -> str:
        """Discover site-packages from ``python3 -m site``, with a fallback."""
        try:
            output = await self._run(["-m", "site"], command="python3")
        except ExecutionError as e:
            logger.warning(
                "Could not query site-packages, using %s: %s",
                self._config.site_packages,
                e,
            )
            return self._config.site_packages

        return parse_site_packages(output) or self._config.site_packages


def parse_site_packages(output: str) -> str | None:
    """Extract the first site-packages directory from ``python -m site``.

    Args:
        output: Output of ``python3 -m site``.

    Returns:
        First absolute path containing ``site-packages`` or
        ``dist-packages``, or None.
    """
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("sys.path", "[", "]")):
            continue
        path = line.replace("'", "").replace('"', "").replace(",", "")
        if path.startswith("/") and ("site-packages" in path or "dist-packages" in path):
            return path
    return None
