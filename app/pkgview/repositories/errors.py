"""Domain errors surfaced by package repositories and catalogs.

Execution failures from :mod:`pkgview.utils.shell` are translated into this
taxonomy at the repository/catalog boundary by :func:`to_package_error`.
"""

from pkgview.utils.shell import (
    ExecutableNotFoundError,
    ExecutionFailedError,
    ExecutionTimeoutError,
    InvalidOutputError,
)


class PackageError(Exception):
    """Base exception for package operations.

    Attributes:
        message: Human-readable description of the failure.
        recovery_suggestion: Hint shown next to the message.
        is_retryable: Whether retrying the operation can succeed.
    """

    recovery_suggestion: str = "Please try again or contact support if the issue persists"
    is_retryable: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ManagerNotInstalledError(PackageError):
    """The package manager is not available on this system."""

    recovery_suggestion = "Please install the package manager to view its packages"
    is_retryable = False

    def __init__(self) -> None:
        super().__init__("Package manager is not installed on this system")


class PackageTimeoutError(PackageError):
    """A package manager command exceeded its deadline."""

    recovery_suggestion = "Try again with fewer packages or check system performance"

    def __init__(self, duration: float) -> None:
        super().__init__(f"Operation timed out after {duration:g} seconds")
        self.duration = duration


class CommandFailedError(PackageError):
    """A package manager command exited unsuccessfully."""

    recovery_suggestion = "Check that the package manager is working correctly"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Command failed: {detail}")
        self.detail = detail


class ParseFailedError(PackageError):
    """Package manager output did not have the expected shape."""

    recovery_suggestion = "Package data format may have changed"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to parse package data: {detail}")
        self.detail = detail


class UnknownPackageError(PackageError):
    """Any other failure, wrapping its cause."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"An unknown error occurred: {cause}")
        self.cause = cause


def to_package_error(error: BaseException) -> PackageError:
    """Classify an exception into the package error taxonomy.

    Args:
        error: Exception raised by a repository operation.

    Returns:
        The matching PackageError. PackageError instances pass through.
    """
    if isinstance(error, PackageError):
        return error
    if isinstance(error, ExecutableNotFoundError):
        return ManagerNotInstalledError()
    if isinstance(error, ExecutionTimeoutError):
        return PackageTimeoutError(error.timeout)
    if isinstance(error, ExecutionFailedError):
        return CommandFailedError(f"Exit code {error.returncode}: {error.output}")
    if isinstance(error, InvalidOutputError):
        return ParseFailedError(str(error))
    return UnknownPackageError(error)
