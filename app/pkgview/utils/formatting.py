"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from pkgview.core.theme import get_theme

if TYPE_CHECKING:
    from pkgview.models.package import Package


def _detect_color_system() -> str | None:
    """Return "truecolor" for interactive terminals, None to let Rich decide."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to the stderr console.

    Args:
        verbose: Log at DEBUG level.
        quiet: Only log errors.
    """
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


def format_bytes(size_bytes: int | None) -> str:
    """Format a byte count as B, KB, MB or GB.

    Args:
        size_bytes: Size in bytes, or None if unknown.

    Returns:
        Human-readable size, or "-" when unknown.
    """
    if size_bytes is None:
        return "-"
    kb = size_bytes / 1024
    mb = kb / 1024
    gb = mb / 1024
    if gb >= 1:
        return f"{gb:.1f} GB"
    if mb >= 1:
        return f"{mb:.1f} MB"
    if kb >= 1:
        return f"{kb:.0f} KB"
    return f"{size_bytes} B"


def create_package_table(
    title: str = "Installed Packages",
    *,
    show_latest: bool = False,
    show_size: bool = False,
) -> Table:
    """Create a pre-configured table for displaying packages.

    Args:
        title: Table title.
        show_latest: Add a column for the latest known version.
        show_size: Add a column for the on-disk size.

    Returns:
        Rich Table configured for package display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="muted")
    if show_latest:
        table.add_column("Latest")
    table.add_column("Installed", style="muted")
    if show_size:
        table.add_column("Size", style="info", justify="right")
    table.add_column("Path", style="text", overflow="ellipsis")
    return table


def format_package_row(
    pkg: Package,
    *,
    show_latest: bool = False,
    size: str | None = None,
) -> list[str]:
    """Format a package as a table row with Rich markup.

    Args:
        pkg: The package to format.
        show_latest: Include the latest-version cell.
        size: Preformatted size cell; omitted when None.

    Returns:
        Cells matching the columns of :func:`create_package_table`.
    """
    row = [f"[package_name]{pkg.name}[/]", pkg.version or "-"]
    if show_latest:
        if pkg.latest_version is None:
            row.append("[muted]?[/]")
        elif pkg.update_available:
            row.append(f"[outdated]{pkg.latest_version}[/]")
        else:
            row.append(f"[current]{pkg.latest_version}[/]")
    row.append(pkg.install_date.strftime("%Y-%m-%d") if pkg.install_date else "-")
    if size is not None:
        row.append(size)
    row.append(pkg.install_path or "-")
    return row


def print_info(message: str) -> None:
    """Print an info message. Rich markup in the message is shown literally."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
