"""Path management for homereap.

This module provides the locations homereap reads its configuration
from and writes its run logs to.

Defaults:
- Config: /etc/homereap/config.toml (override with HOMEREAP_CONFIG)
- Logs: /var/log/homereap/
"""

import os
from datetime import UTC, datetime
from pathlib import Path

# Application identifier for directory and file naming
APP_NAME = "homereap"

CONFIG_ENV_VAR = "HOMEREAP_CONFIG"
DEFAULT_CONFIG_PATH = Path("/etc") / APP_NAME / "config.toml"
DEFAULT_LOG_DIR = Path("/var/log") / APP_NAME


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path from HOMEREAP_CONFIG if set, else /etc/homereap/config.toml.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_log_dir(path: Path) -> Path:
    """Create the log directory if it doesn't exist.

    Args:
        path: Log directory.

    Returns:
        Path to the log directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(path, "log")


def new_log_path(log_dir: Path, now: datetime | None = None) -> Path:
    """Choose a fresh, timestamped log file path for one run.

    If a file with the same timestamp already exists, a numeric suffix is
    appended so that every run gets its own file.

    Args:
        log_dir: Directory the log file goes into.
        now: Timestamp to use (defaults to the current UTC time).

    Returns:
        Path like /var/log/homereap/homereap-20260101T120000Z.log.
    """
    stamp = (now or datetime.now(UTC)).strftime("%Y%m%dT%H%M%SZ")
    path = log_dir / f"{APP_NAME}-{stamp}.log"
    counter = 1
    while path.exists():
        path = log_dir / f"{APP_NAME}-{stamp}-{counter}.log"
        counter += 1
    return path
