"""Abstract base class for package repositories.

This module defines the PackageRepository interface that every package
manager adapter implements. Catalogs program against this contract only.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from pkgview.core.config import ViewerConfig
from pkgview.models.package import Package, PackageManager
from pkgview.repositories.errors import ParseFailedError
from pkgview.utils.shell import ExecutionError, execute

logger = logging.getLogger(__name__)


class PackageRepository(ABC):
    """Abstract base class for all package repositories.

    Repositories drive one package manager's CLI and translate its output
    into Package records.

    Attributes:
        config: Search path, timeouts and fallback paths.

    Example:
        >>> repository = NpmRepository()
        >>> if await repository.is_available():
        ...     for pkg in await repository.fetch_packages():
        ...         print(f"{pkg.name}: {pkg.version}")
    """

    def __init__(self, config: ViewerConfig | None = None) -> None:
        """Initialize the repository.

        Args:
            config: Configuration to use. Defaults to ViewerConfig().
        """
        self._config = config or ViewerConfig()

    @property
    def config(self) -> ViewerConfig:
        """Configuration used by this repository."""
        return self._config

    @property
    @abstractmethod
    def manager(self) -> PackageManager:
        """Return the package manager this repository handles."""

    @abstractmethod
    async def fetch_packages(self) -> list[Package]:
        """List all installed packages for this manager.

        Returns:
            Unsorted list of Package records.

        Raises:
            ExecutionError: If the list command fails.
            ParseFailedError: If the list output is malformed.
        """

    @abstractmethod
    async def query_latest_version(self, package: Package) -> str:
        """Look up the latest published version of one package.

        Args:
            package: Package to look up.

        Returns:
            Latest version string.

        Raises:
            ExecutionError: If the lookup command fails.
            ParseFailedError: If no version can be found in the output.
        """

    @abstractmethod
    async def update_package(self, package: Package) -> None:
        """Upgrade one package to its latest version.

        Args:
            package: Package to upgrade.

        Raises:
            ExecutionError: If the upgrade command fails.
        """

    async def is_available(self) -> bool:
        """Check if this package manager responds to a version probe.

        Returns:
            True if ``<command> --version`` succeeds, False otherwise.
        """
        try:
            await self._run(["--version"])
        except ExecutionError as e:
            logger.debug("%s probe failed: %s", self.manager.display_name, e)
            return False
        return True

    async def _run(
        self,
        args: Sequence[str],
        *,
        command: str | None = None,
        timeout: float | None = None,
    ) -> str:
        """Run a command with this repository's search path.

        Args:
            args: Arguments passed verbatim.
            command: Program to run. Defaults to the manager's executable.
            timeout: Timeout in seconds. Defaults to ``config.command_timeout``.

        Returns:
            Decoded standard output.
        """
        return await execute(
            command or self.manager.command,
            args,
            timeout=timeout or self._config.command_timeout,
            search_path=self._config.search_path,
        )

    async def _resolve_prefix(self, args: Sequence[str], fallback: str) -> str:
        """Ask the manager for its install prefix, falling back on failure.

        Args:
            args: Arguments of the prefix probe command.
            fallback: Prefix used when the probe fails or prints nothing.

        Returns:
            The reported prefix, or ``fallback``.
        """
        try:
            prefix = (await self._run(args)).strip()
        except ExecutionError as e:
            logger.warning(
                "Could not resolve %s prefix, using %s: %s",
                self.manager.display_name,
                fallback,
                e,
            )
            return fallback
        return prefix or fallback


def parse_json(output: str, source: str) -> Any:
    """Decode JSON command output.

    Args:
        output: Raw command output.
        source: Description of the output used in error messages.

    Returns:
        The decoded JSON value.

    Raises:
        ParseFailedError: If the output is not valid JSON.
    """
    try:
        return json.loads(output)
    except json.JSONDecodeError as e:
        msg = f"Invalid {source} output format: {e}"
        raise ParseFailedError(msg) from e


def split_lines(output: str) -> list[str]:
    """Split command output into trimmed, non-empty lines."""
    return [line.strip() for line in output.splitlines() if line.strip()]
