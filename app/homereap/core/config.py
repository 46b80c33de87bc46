"""Run configuration.

This module provides the configuration model and loader for a reclaim
pass. Configuration is stored in /etc/homereap/config.toml; a missing
file means every setting keeps its default.
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from homereap.core.paths import DEFAULT_LOG_DIR, get_config_path

logger = logging.getLogger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ReaperConfig(BaseModel):
    """Configuration for one reclaim pass.

    Attributes:
        home_root: Mountpoint prefix of the per-user home volumes.
        settle_seconds: Wait before each signal tier of the ladder.
        command_timeout: Timeout for each external command.
        log_dir: Directory for per-run log files.
        log_level: Logging level of the detached run.
        dry_run: Log destructive commands instead of running them.
        extra_operators: Account names that are never reclaimed.
    """

    model_config = ConfigDict(extra="forbid")

    home_root: Annotated[
        str,
        Field(min_length=1, description="Mountpoint prefix of home volumes"),
    ] = "/home"
    settle_seconds: Annotated[
        float,
        Field(ge=0, le=300, description="Seconds to wait before signalling (0-300)"),
    ] = 5.0
    command_timeout: Annotated[
        float,
        Field(ge=1, le=3600, description="Timeout per external command in seconds"),
    ] = 60.0
    log_dir: Annotated[
        str,
        Field(min_length=1, description="Directory for run logs"),
    ] = str(DEFAULT_LOG_DIR)
    log_level: Annotated[
        LogLevel,
        Field(description="Logging level"),
    ] = "INFO"
    dry_run: Annotated[
        bool,
        Field(description="Only log destructive commands"),
    ] = False
    extra_operators: Annotated[
        list[str],
        Field(description="Accounts always treated as the operator"),
    ] = []

    @property
    def log_path(self) -> Path:
        """Return the log directory as a Path."""
        return Path(self.log_dir)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> ReaperConfig:
    """Load the run configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated ReaperConfig; defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return ReaperConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return ReaperConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e
