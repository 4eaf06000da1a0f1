"""CLI commands for pkgview.

This package contains all subcommand implementations.
"""

from pkgview.cli.commands import config, listing, managers, update

__all__ = ["config", "listing", "managers", "update"]
