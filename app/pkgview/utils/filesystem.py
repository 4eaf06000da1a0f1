"""Best-effort filesystem helpers for package enrichment.

None of these functions raise for missing or unreadable paths; enrichment
degrades to an absent value instead.
"""

import logging
import os
import re
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def numeric_sort_key(value: str) -> list[int | str]:
    """Return a sort key that orders digit runs by numeric value.

    ``"1.10.0"`` sorts after ``"1.9.2"``, matching how version directories
    are expected to be ordered.
    """
    return [int(part) if part.isdigit() else part for part in _DIGITS.split(value)]


def latest_version_dir(package_dir: Path) -> str | None:
    """Return the highest numerically-sorted subdirectory name.

    Args:
        package_dir: Directory holding one subdirectory per installed version.

    Returns:
        Name of the last version directory, or None if none can be listed.
    """
    try:
        versions = [entry.name for entry in package_dir.iterdir() if entry.is_dir()]
    except OSError:
        return None
    if not versions:
        return None
    return sorted(versions, key=numeric_sort_key)[-1]


def modification_date(path: str | Path) -> datetime | None:
    """Get the modification date of a file or directory.

    Args:
        path: The path to check.

    Returns:
        Modification time as an aware UTC datetime, or None if unavailable.
    """
    try:
        mtime = os.stat(path).st_mtime
    except OSError:
        return None
    return datetime.fromtimestamp(mtime, tz=UTC)


def directory_size(path: str | Path) -> int | None:
    """Calculate the total size of all files below a directory.

    Args:
        path: Directory (or file) to measure.

    Returns:
        Total size in bytes, or None if the path is missing or empty.
    """
    root = Path(path)
    try:
        if not root.exists():
            return None
        if root.is_file():
            return root.stat().st_size or None
    except OSError as e:
        logger.debug("Cannot measure %s: %s", root, e)
        return None

    total = 0
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, filename)).st_size
            except OSError:
                logger.debug("Skipping unreadable file in %s: %s", dirpath, filename)
    return total or None
