"""Unit tests for package models."""

import pytest
from pkgview.models.package import Package, PackageManager


class TestPackageManager:
    """Tests for PackageManager enum."""

    def test_values(self) -> None:
        assert PackageManager.NPM.value == "npm"
        assert PackageManager.HOMEBREW.value == "homebrew"
        assert PackageManager.PIP.value == "pip"

    def test_commands(self) -> None:
        """Each manager maps to its executable."""
        assert PackageManager.NPM.command == "npm"
        assert PackageManager.HOMEBREW.command == "brew"
        assert PackageManager.PIP.command == "pip3"

    def test_display_names(self) -> None:
        assert PackageManager.HOMEBREW.display_name == "Homebrew"


class TestPackage:
    """Tests for Package dataclass."""

    def test_identity_combines_manager_and_name(self) -> None:
        pkg = Package(name="left-pad", manager=PackageManager.NPM)
        assert pkg.identity == "npm/left-pad"

    def test_name_is_trimmed(self) -> None:
        pkg = Package(name="  wget \t", manager=PackageManager.HOMEBREW)
        assert pkg.name == "wget"
        assert pkg.identity == "homebrew/wget"

    def test_empty_name_raises(self) -> None:
        with pytest.raises(ValueError, match="name cannot be empty"):
            Package(name="   ", manager=PackageManager.PIP)

    def test_identity_is_read_only(self) -> None:
        """name and manager cannot be reassigned."""
        pkg = Package(name="left-pad", manager=PackageManager.NPM)

        with pytest.raises(AttributeError):
            pkg.name = "right-pad"
        with pytest.raises(AttributeError):
            pkg.manager = PackageManager.PIP

    def test_state_is_mutable(self) -> None:
        pkg = Package(name="left-pad", manager=PackageManager.NPM)

        pkg.latest_version = "1.3.0"
        pkg.check_in_progress = True

        assert pkg.latest_version == "1.3.0"
        assert pkg.check_in_progress is True

    def test_equality_uses_identity(self) -> None:
        """Records with the same identity are equal regardless of state."""
        a = Package(name="flask", manager=PackageManager.PIP, version="2.0.1")
        b = Package(name="flask", manager=PackageManager.PIP, version="3.0.0")
        c = Package(name="flask", manager=PackageManager.HOMEBREW, version="2.0.1")

        assert a == b
        assert hash(a) == hash(b)
        assert a != c

    def test_defaults(self) -> None:
        pkg = Package(name="flask", manager=PackageManager.PIP)

        assert pkg.version is None
        assert pkg.description is None
        assert pkg.install_path is None
        assert pkg.install_date is None
        assert pkg.latest_version is None
        assert pkg.check_in_progress is False
        assert pkg.update_in_progress is False

    def test_reset_state(self) -> None:
        pkg = Package(
            name="flask",
            manager=PackageManager.PIP,
            latest_version="3.0.0",
            check_in_progress=True,
            update_in_progress=True,
        )

        pkg.reset_state()

        assert pkg.latest_version is None
        assert pkg.check_in_progress is False
        assert pkg.update_in_progress is False


class TestUpdateAvailable:
    """Tests for the update_available property."""

    @pytest.mark.parametrize(
        ("version", "latest", "expected"),
        [
            ("1.0", "1.0", False),
            ("1.0", "1.1", True),
            ("1.0", "", False),
            ("", "1.1", False),
            (None, "1.1", False),
            ("1.0", None, False),
        ],
    )
    def test_derivation(self, version: str | None, latest: str | None, expected: bool) -> None:
        pkg = Package(
            name="flask",
            manager=PackageManager.PIP,
            version=version,
            latest_version=latest,
        )
        assert pkg.update_available is expected
