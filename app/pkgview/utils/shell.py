"""Shell execution utilities.

Provides bounded, cancellable subprocess execution with a typed failure
taxonomy. Commands are resolved against a fixed search path and arguments are
passed verbatim to the child process, never through a shell.
"""

import asyncio
import logging
import os
import shutil
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Search path used to resolve executables, independent of the caller's PATH
DEFAULT_SEARCH_PATH: tuple[str, ...] = (
    "/usr/local/bin",
    "/usr/bin",
    "/bin",
    "/usr/sbin",
    "/sbin",
    "/opt/homebrew/bin",
    "/usr/local/opt/node@18/bin",
)

DEFAULT_TIMEOUT: float = 30.0


class ExecutionError(Exception):
    """Base exception for external command execution failures."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(message)
        self.command = command


class ExecutableNotFoundError(ExecutionError):
    """Raised when the executable is missing or cannot be launched."""

    def __init__(self, command: str) -> None:
        super().__init__(command, f"Command not found: {command}")


class ExecutionTimeoutError(ExecutionError):
    """Raised when a command does not exit before its deadline."""

    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(command, f"Command timed out after {timeout:g}s: {command}")
        self.timeout = timeout


class ExecutionFailedError(ExecutionError):
    """Raised when a command exits with a non-zero status."""

    def __init__(self, command: str, returncode: int, message: str) -> None:
        super().__init__(command, f"Command failed with exit code {returncode}: {message}")
        self.returncode = returncode
        self.output = message


class InvalidOutputError(ExecutionError):
    """Raised when command output cannot be decoded as text."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(command, f"Invalid command output: {reason}")


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Raw result of a command execution.

    Output is kept as bytes so that decoding failures can be reported
    separately from non-zero exits.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: bytes
    stderr: bytes
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    def failure_message(self) -> str:
        """Return trimmed stderr, falling back to stdout when stderr is empty."""
        stderr = self.stderr.decode("utf-8", errors="replace").strip()
        if stderr:
            return stderr
        return self.stdout.decode("utf-8", errors="replace").strip()


def build_environment(search_path: Sequence[str]) -> dict[str, str]:
    """Build the child environment with PATH pinned to the search path.

    Args:
        search_path: Directories to expose as PATH.

    Returns:
        Copy of the current environment with PATH replaced.
    """
    return {**os.environ, "PATH": os.pathsep.join(search_path)}


def resolve_executable(name: str, search_path: Sequence[str] = DEFAULT_SEARCH_PATH) -> str | None:
    """Resolve a program name against the search path.

    Args:
        name: Program name (or absolute path).
        search_path: Directories to search, in order.

    Returns:
        Absolute path to the executable, or None if not found.
    """
    return shutil.which(name, path=os.pathsep.join(search_path))


def command_exists(name: str, search_path: Sequence[str] = DEFAULT_SEARCH_PATH) -> bool:
    """Check if a command exists on the search path.

    Args:
        name: Command name to check.
        search_path: Directories to search.

    Returns:
        True if command exists, False otherwise.
    """
    return resolve_executable(name, search_path) is not None


async def run_command(
    command: str,
    args: Sequence[str] = (),
    *,
    timeout: float = DEFAULT_TIMEOUT,
    search_path: Sequence[str] = DEFAULT_SEARCH_PATH,
) -> CommandResult:
    """Run one external command and capture its output.

    The process is killed and reaped if the timeout expires or the calling
    task is cancelled, so no child outlives the call.

    Args:
        command: Program name resolved against ``search_path``.
        args: Arguments passed verbatim to the program.
        timeout: Maximum time in seconds to wait for the process to exit.
        search_path: Directories used to resolve the program and as PATH.

    Returns:
        CommandResult with raw stdout, stderr, and returncode.

    Raises:
        ValueError: If timeout is not positive.
        ExecutableNotFoundError: If the program cannot be found or launched.
        ExecutionTimeoutError: If the process exceeds the timeout.
    """
    if timeout <= 0:
        msg = f"Timeout must be positive, got {timeout}"
        raise ValueError(msg)

    executable = resolve_executable(command, search_path)
    if executable is None:
        raise ExecutableNotFoundError(command)

    logger.debug("Running %s %s (timeout=%gs)", command, " ".join(args), timeout)
    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=build_environment(search_path),
        )
    except OSError as e:
        logger.debug("Failed to launch %s: %s", command, e)
        raise ExecutableNotFoundError(command) from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError as e:
        logger.warning("%s did not exit within %gs, killing it", command, timeout)
        raise ExecutionTimeoutError(command, timeout) from e
    finally:
        if process.returncode is None:
            process.kill()
            await process.wait()

    returncode = process.returncode
    logger.debug("%s exited with %d", command, returncode)
    return CommandResult(stdout=stdout, stderr=stderr, returncode=returncode)


async def execute(
    command: str,
    args: Sequence[str] = (),
    *,
    timeout: float = DEFAULT_TIMEOUT,
    search_path: Sequence[str] = DEFAULT_SEARCH_PATH,
) -> str:
    """Execute a command and return its standard output as text.

    Args:
        command: Program name resolved against ``search_path``.
        args: Arguments passed verbatim to the program.
        timeout: Maximum time in seconds to wait for the process to exit.
        search_path: Directories used to resolve the program and as PATH.

    Returns:
        Decoded standard output.

    Raises:
        ExecutableNotFoundError: If the program cannot be found or launched.
        ExecutionTimeoutError: If the process exceeds the timeout.
        ExecutionFailedError: If the process exits with a non-zero status.
        InvalidOutputError: If standard output is not valid UTF-8.
    """
    result = await run_command(command, args, timeout=timeout, search_path=search_path)

    if not result.success:
        raise ExecutionFailedError(command, result.returncode, result.failure_message())

    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidOutputError(command, "Could not decode command output") from e
