"""XDG-compliant path management for pkgview.

XDG defaults:
- Config: ~/.config/pkgview/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "pkgview"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/pkgview/ (or XDG_CONFIG_HOME/pkgview/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/pkgview/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/pkgview/theme.toml.
    """
    return get_config_dir() / "theme.toml"
