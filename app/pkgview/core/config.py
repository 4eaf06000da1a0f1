"""Runtime configuration for pkgview.

Settings cover the executable search path, per-operation timeouts and the
fallback install roots used when a manager cannot report its own prefix.

Configuration is stored in ~/.config/pkgview/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pkgview.core.paths import get_config_path
from pkgview.utils.shell import DEFAULT_SEARCH_PATH, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class ViewerConfig(BaseModel):
    """Configuration for package catalogs and their repositories.

    Attributes:
        search_path: Directories used to resolve manager executables.
        command_timeout: Default timeout for list/probe/query commands.
        query_timeout: Timeout for registry lookups that support a shorter deadline.
        update_timeout: Timeout for upgrade commands.
        npm_update_timeout: Timeout for ``npm install -g`` upgrades.
        npm_prefix: Fallback global prefix when ``npm prefix -g`` fails.
        homebrew_prefix: Fallback prefix when ``brew --prefix`` fails.
        site_packages: Fallback site-packages when ``python3 -m site`` fails.
        max_parallel_checks: Latest-version queries the CLI runs at once.
    """

    model_config = ConfigDict(extra="forbid")

    search_path: Annotated[
        list[str],
        Field(min_length=1, description="Executable search path"),
    ] = list(DEFAULT_SEARCH_PATH)
    command_timeout: Annotated[float, Field(gt=0)] = DEFAULT_TIMEOUT
    query_timeout: Annotated[float, Field(gt=0)] = 15.0
    update_timeout: Annotated[float, Field(gt=0)] = 180.0
    npm_update_timeout: Annotated[float, Field(gt=0)] = 600.0
    npm_prefix: str = "/usr/local"
    homebrew_prefix: str = "/usr/local"
    site_packages: str = "/opt/anaconda3/lib/python3.13/site-packages"
    max_parallel_checks: Annotated[int, Field(ge=1, le=64)] = 8


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> ViewerConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated ViewerConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return ViewerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def get_config(path: Path | None = None) -> ViewerConfig:
    """Load configuration, falling back to defaults when no file exists.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Loaded or default ViewerConfig.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return ViewerConfig()


def save_config(config: ViewerConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file first and then moved into
    place with os.replace().

    Args:
        config: The ViewerConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(mode="json"), f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
