"""Utility modules for pkgview.

This module exports commonly used utility functions.
"""

from pkgview.utils.formatting import (
    console,
    create_package_table,
    err_console,
    format_bytes,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from pkgview.utils.shell import (
    CommandResult,
    ExecutionError,
    command_exists,
    execute,
    run_command,
)

__all__ = [
    "CommandResult",
    "ExecutionError",
    "command_exists",
    "console",
    "create_package_table",
    "err_console",
    "execute",
    "format_bytes",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
