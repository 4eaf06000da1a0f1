"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import asyncio
import json
from collections.abc import Callable

import pytest
from pkgview.core.config import ViewerConfig
from pkgview.models.package import Package, PackageManager
from pkgview.repositories.base import PackageRepository


class FakeRepository(PackageRepository):
    """In-memory repository recording every call.

    Attributes:
        available: Result of is_available().
        packages: Packages returned by fetch_packages() (fresh copies each call).
        latest: Latest versions by package name.
        fetch_error: Raised by fetch_packages() when set.
        update_error: Raised by update_package() when set.
        gate: When set, query_latest_version() and update_package() wait on it.
        fetch_gate: When set, fetch_packages() waits on it after taking its snapshot.
    """

    def __init__(
        self,
        packages: list[Package] | None = None,
        manager: PackageManager = PackageManager.NPM,
    ) -> None:
        super().__init__(ViewerConfig())
        self._manager = manager
        self.available = True
        self.packages = packages or []
        self.latest: dict[str, str] = {}
        self.fetch_error: Exception | None = None
        self.query_error: Exception | None = None
        self.update_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.fetch_gate: asyncio.Event | None = None
        self.probe_calls = 0
        self.fetch_calls = 0
        self.query_calls: list[str] = []
        self.update_calls: list[str] = []

    @property
    def manager(self) -> PackageManager:
        return self._manager

    async def is_available(self) -> bool:
        self.probe_calls += 1
        return self.available

    async def fetch_packages(self) -> list[Package]:
        self.fetch_calls += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        snapshot = [
            Package(name=p.name, manager=p.manager, version=p.version) for p in self.packages
        ]
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        return snapshot

    async def query_latest_version(self, package: Package) -> str:
        self.query_calls.append(package.name)
        if self.gate is not None:
            await self.gate.wait()
        if self.query_error is not None:
            raise self.query_error
        return self.latest[package.name]

    async def update_package(self, package: Package) -> None:
        self.update_calls.append(package.name)
        if self.gate is not None:
            await self.gate.wait()
        if self.update_error is not None:
            raise self.update_error


@pytest.fixture
def make_repository() -> Callable[..., FakeRepository]:
    """Factory for empty FakeRepository instances."""
    return FakeRepository


@pytest.fixture
def fake_repository() -> FakeRepository:
    """Repository with three unsorted npm packages."""
    return FakeRepository(
        [
            Package(name="typescript", manager=PackageManager.NPM, version="5.4.5"),
            Package(name="Yarn", manager=PackageManager.NPM, version="1.22.19"),
            Package(name="left-pad", manager=PackageManager.NPM, version="1.3.0"),
        ]
    )


@pytest.fixture
def mock_npm_list_output() -> str:
    """Sample `npm list -g --depth=0 --json` output."""
    return json.dumps(
        {
            "name": "lib",
            "dependencies": {
                "left-pad": {"version": "1.3.0"},
                "typescript": {"version": "5.4.5", "overridden": False},
            },
        }
    )


@pytest.fixture
def mock_pip_list_output() -> str:
    """Sample `pip3 list --format=json` output."""
    return json.dumps(
        [
            {"name": "Flask", "version": "2.0.1"},
            {"name": "Foo-Bar", "version": "0.3"},
        ]
    )


@pytest.fixture
def mock_pip_index_output() -> str:
    """Sample `pip3 index versions` output."""
    return """WARNING: pip index is currently an experimental command.
Flask (3.0.3)
Available versions: 3.0.3, 3.0.2, 3.0.1, 2.0.1
  INSTALLED: 2.0.1
  LATEST:    3.0.3
"""


@pytest.fixture
def mock_python_site_output() -> str:
    """Sample `python3 -m site` output."""
    return """sys.path = [
    '/home/user',
    '/usr/lib/python312.zip',
    '/usr/lib/python3.12',
    '/home/user/.local/lib/python3.12/site-packages',
    '/usr/lib/python3/dist-packages',
]
USER_BASE: '/home/user/.local' (exists)
USER_SITE: '/home/user/.local/lib/python3.12/site-packages' (exists)
ENABLE_USER_SITE: True
"""


@pytest.fixture
def mock_brew_info_output() -> str:
    """Sample `brew info --json=v2 wget` output."""
    return json.dumps(
        {
            "formulae": [
                {
                    "name": "wget",
                    "versions": {"stable": "1.24.5", "head": "HEAD", "bottle": True},
                }
            ],
            "casks": [],
        }
    )
