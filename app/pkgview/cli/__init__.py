"""CLI package for pkgview.

This package contains the Typer application and all subcommands.
"""

from pkgview.cli.main import app

__all__ = ["app"]
