"""Unit tests for config and log path handling."""

import os
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from homereap.core.paths import (
    APP_NAME,
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    ensure_log_dir,
    get_config_path,
    new_log_path,
)

NOW = datetime(2026, 3, 14, 9, 26, 53, tzinfo=UTC)


class TestGetConfigPath:
    """Tests for get_config_path function."""

    def test_default_config_path(self) -> None:
        """get_config_path returns /etc/homereap/config.toml by default."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_config_path()

        assert result == DEFAULT_CONFIG_PATH
        assert result == Path("/etc/homereap/config.toml")

    def test_respects_env_override(self, tmp_path: Path) -> None:
        """get_config_path honours HOMEREAP_CONFIG."""
        with patch.dict(os.environ, {CONFIG_ENV_VAR: str(tmp_path / "c.toml")}):
            result = get_config_path()

        assert result == tmp_path / "c.toml"

    def test_empty_override_ignored(self) -> None:
        """An empty HOMEREAP_CONFIG falls back to the default."""
        with patch.dict(os.environ, {CONFIG_ENV_VAR: ""}):
            assert get_config_path() == DEFAULT_CONFIG_PATH


class TestEnsureLogDir:
    """Tests for ensure_log_dir function."""

    def test_creates_directory(self, tmp_path: Path) -> None:
        """ensure_log_dir creates missing parents."""
        target = tmp_path / "var" / "log" / APP_NAME

        result = ensure_log_dir(target)

        assert result == target
        assert target.is_dir()

    def test_permission_error(self, tmp_path: Path) -> None:
        """ensure_log_dir raises RuntimeError on permission failures."""
        with (
            patch.object(Path, "mkdir", side_effect=PermissionError("denied")),
            pytest.raises(RuntimeError, match="Permission denied"),
        ):
            ensure_log_dir(tmp_path / "logs")


class TestNewLogPath:
    """Tests for new_log_path function."""

    def test_timestamped_name(self, tmp_path: Path) -> None:
        """Log files are named after the UTC start time."""
        assert new_log_path(tmp_path, NOW) == tmp_path / "homereap-20260314T092653Z.log"

    def test_never_reuses_existing_file(self, tmp_path: Path) -> None:
        """A clash with an existing log gets a numeric suffix."""
        (tmp_path / "homereap-20260314T092653Z.log").touch()
        (tmp_path / "homereap-20260314T092653Z-1.log").touch()

        assert new_log_path(tmp_path, NOW) == tmp_path / "homereap-20260314T092653Z-2.log"
