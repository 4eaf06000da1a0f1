"""Unit tests for the list command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from pkgview.cli.main import app
from pkgview.models.package import Package, PackageManager
from pkgview.utils.shell import ExecutionFailedError
from typer.testing import CliRunner

if TYPE_CHECKING:
    from collections.abc import Callable

    from tests.conftest import FakeRepository

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's config file out of CLI runs."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))


class TestListTable:
    """Tests for table output."""

    def test_lists_sorted_packages(self, fake_repository: FakeRepository) -> None:
        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm"])

        assert result.exit_code == 0
        assert "npm Packages" in result.stdout
        positions = [result.stdout.index(n) for n in ("left-pad", "typescript", "Yarn")]
        assert positions == sorted(positions)
        assert "3 of 3 packages" in result.stdout

    def test_search_filters_rows(self, fake_repository: FakeRepository) -> None:
        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm", "--search", "PAD"])

        assert result.exit_code == 0
        assert "left-pad" in result.stdout
        assert "typescript" not in result.stdout
        assert "1 of 3 packages matching 'PAD'" in result.stdout

    def test_search_without_match(self, fake_repository: FakeRepository) -> None:
        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm", "-s", "zzz"])

        assert result.exit_code == 0
        assert 'No npm packages match "zzz"' in result.stdout

    def test_latest_column(self, fake_repository: FakeRepository) -> None:
        fake_repository.latest = {"left-pad": "1.4.0", "typescript": "5.4.5", "Yarn": "1.22.19"}

        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm", "--latest"])

        assert result.exit_code == 0
        assert "Latest" in result.stdout
        assert "1.4.0" in result.stdout
        assert sorted(fake_repository.query_calls) == ["Yarn", "left-pad", "typescript"]

    def test_limit(self, fake_repository: FakeRepository) -> None:
        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm", "-n", "1"])

        assert result.exit_code == 0
        assert "left-pad" in result.stdout
        assert "Yarn" not in result.stdout


    @pytest.mark.parametrize("limit", ["0", "-1"])
    def test_limit_must_be_positive(self, fake_repository: FakeRepository, limit: str) -> None:
        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm", "--limit", limit])

        assert result.exit_code == 2
        assert fake_repository.fetch_calls == 0


class TestListJson:
    """Tests for JSON output."""

    def test_json_output(self, fake_repository: FakeRepository) -> None:
        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm", "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [item["name"] for item in data] == ["left-pad", "typescript", "Yarn"]
        assert data[0] == {
            "manager": "npm",
            "name": "left-pad",
            "version": "1.3.0",
            "latest_version": None,
            "update_available": False,
            "install_path": None,
            "install_date": None,
        }

    def test_outdated_only(self, fake_repository: FakeRepository) -> None:
        fake_repository.latest = {"left-pad": "1.4.0", "typescript": "5.4.5", "Yarn": "1.22.19"}

        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm", "--outdated", "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [item["name"] for item in data] == ["left-pad"]
        assert data[0]["latest_version"] == "1.4.0"
        assert data[0]["update_available"] is True

    def test_sizes(self, tmp_path: Path, make_repository: Callable[..., FakeRepository]) -> None:
        install_dir = tmp_path / "left-pad"
        install_dir.mkdir()
        (install_dir / "index.js").write_bytes(b"x" * 100)
        repository = make_repository()
        repository.fetch_packages = _returning(
            Package(name="left-pad", manager=PackageManager.NPM, install_path=str(install_dir))
        )

        with patch("pkgview.cli.types.create_repository", return_value=repository):
            result = runner.invoke(app, ["list", "-m", "npm", "--sizes", "-f", "json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]["size_bytes"] == 100


class TestListProblems:
    """Tests for unavailable and failing package managers."""

    def test_unavailable_manager(self, fake_repository: FakeRepository) -> None:
        fake_repository.available = False

        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm"])

        assert result.exit_code == 1
        assert "npm is not installed on this system" in result.output
        assert "No package managers could be listed" in result.output

    def test_failed_load_shows_recovery(self, fake_repository: FakeRepository) -> None:
        fake_repository.fetch_error = ExecutionFailedError("npm", 1, "ERR! broken")

        with patch("pkgview.cli.types.create_repository", return_value=fake_repository):
            result = runner.invoke(app, ["list", "-m", "npm"])

        assert result.exit_code == 1
        assert "Command failed: Exit code 1: ERR! broken" in result.output
        assert "Check that the package manager is working correctly" in result.output

    def test_other_managers_still_listed(
        self, make_repository: Callable[..., FakeRepository]
    ) -> None:
        """An uninstalled manager does not hide the others."""

        def create(manager: PackageManager, config: object) -> FakeRepository:
            repository = make_repository(
                [Package(name=f"{manager.value}-tool", manager=manager, version="1.0")],
                manager,
            )
            repository.available = manager != PackageManager.PIP
            return repository

        with patch("pkgview.cli.types.create_repository", side_effect=create):
            result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "npm-tool" in result.stdout
        assert "homebrew-tool" in result.stdout
        assert "pip-tool" not in result.stdout
        assert "pip is not installed on this system" in result.output

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text("command_timeout = [[[")

        result = runner.invoke(app, ["--config", str(config_file), "list"])

        assert result.exit_code == 1
        assert "Invalid TOML syntax" in result.output


def _returning(*packages: Package):
    async def fetch_packages() -> list[Package]:
        return list(packages)

    return fetch_packages
