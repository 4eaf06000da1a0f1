"""Package models for package-manager catalogs.

This module defines the core data structures for representing packages
managed by npm, Homebrew and pip.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class PackageManager(Enum):
    """Enumeration of supported package managers."""

    NPM = "npm"
    HOMEBREW = "homebrew"
    PIP = "pip"

    @property
    def display_name(self) -> str:
        """Human-readable manager name."""
        return _DISPLAY_NAMES[self]

    @property
    def command(self) -> str:
        """Executable used to drive this manager."""
        return _COMMANDS[self]


_DISPLAY_NAMES: dict[PackageManager, str] = {
    PackageManager.NPM: "npm",
    PackageManager.HOMEBREW: "Homebrew",
    PackageManager.PIP: "pip",
}

_COMMANDS: dict[PackageManager, str] = {
    PackageManager.NPM: "npm",
    PackageManager.HOMEBREW: "brew",
    PackageManager.PIP: "pip3",
}

# Fields that make up a package's identity and may not change after creation
_IDENTITY_FIELDS = frozenset({"name", "manager"})


@dataclass(slots=True, eq=False)
class Package:
    """Represents one installed package of a single package manager.

    ``name`` and ``manager`` form the identity and are read-only once set.
    The remaining trailing fields are per-record state owned by the catalog.

    Attributes:
        name: Package name as reported by the manager (whitespace-trimmed).
        manager: Package manager that owns this package.
        version: Installed version string (if known).
        description: Human-readable package description (if available).
        install_path: Filesystem location of the installed package (if known).
        install_date: Modification time of the install path (if available).
        latest_version: Latest registry version, set only by a successful query.
        check_in_progress: A latest-version query is in flight.
        update_in_progress: An upgrade is in flight.
    """

    name: str
    manager: PackageManager
    version: str | None = field(default=None)
    description: str | None = field(default=None)
    install_path: str | None = field(default=None)
    install_date: datetime | None = field(default=None)
    latest_version: str | None = field(default=None)
    check_in_progress: bool = field(default=False)
    update_in_progress: bool = field(default=False)

    def __post_init__(self) -> None:
        """Normalize and validate the package name."""
        name = self.name.strip()
        if not name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        object.__setattr__(self, "name", name)

    def __setattr__(self, key: str, value: object) -> None:
        if key in _IDENTITY_FIELDS and hasattr(self, key):
            msg = f"Cannot modify package identity field '{key}'"
            raise AttributeError(msg)
        object.__setattr__(self, key, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    @property
    def identity(self) -> str:
        """Stable key combining manager and name, e.g. ``npm/left-pad``."""
        return f"{self.manager.value}/{self.name}"

    @property
    def display_name(self) -> str:
        """Name shown to the user and matched by search."""
        return self.name

    @property
    def update_available(self) -> bool:
        """Check if a different, non-empty latest version is known."""
        if not self.version or not self.latest_version:
            return False
        return self.version != self.latest_version

    def reset_state(self) -> None:
        """Forget the cached latest version and clear in-flight flags."""
        self.latest_version = None
        self.check_in_progress = False
        self.update_in_progress = False
