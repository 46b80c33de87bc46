"""Unit tests for ReaperConfig and load_config."""

from pathlib import Path

import pytest
from homereap.core.config import ConfigError, ConfigParseError, ReaperConfig, load_config
from homereap.core.paths import DEFAULT_LOG_DIR
from pydantic import ValidationError


class TestReaperConfig:
    """Tests for the ReaperConfig model."""

    def test_default_values(self) -> None:
        """ReaperConfig has the documented defaults."""
        config = ReaperConfig()

        assert config.home_root == "/home"
        assert config.settle_seconds == 5.0
        assert config.command_timeout == 60.0
        assert config.log_path == DEFAULT_LOG_DIR
        assert config.log_level == "INFO"
        assert config.dry_run is False
        assert config.extra_operators == []

    def test_settle_bounds(self) -> None:
        """settle_seconds must stay within 0-300."""
        assert ReaperConfig(settle_seconds=0).settle_seconds == 0
        with pytest.raises(ValidationError):
            ReaperConfig(settle_seconds=-1)
        with pytest.raises(ValidationError):
            ReaperConfig(settle_seconds=301)

    def test_timeout_minimum(self) -> None:
        """command_timeout below one second is rejected."""
        with pytest.raises(ValidationError):
            ReaperConfig(command_timeout=0.5)

    def test_unknown_log_level(self) -> None:
        """Only the known level names are accepted."""
        with pytest.raises(ValidationError):
            ReaperConfig(log_level="VERBOSE")  # type: ignore[arg-type]

    def test_extra_fields_forbidden(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ValidationError):
            ReaperConfig(home="/srv")  # type: ignore[call-arg]


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        """A missing config file is not an error."""
        config = load_config(tmp_path / "missing.toml")

        assert config == ReaperConfig()

    def test_loads_values(self, tmp_path: Path) -> None:
        """Values from the TOML file override defaults."""
        path = tmp_path / "config.toml"
        path.write_text(
            'home_root = "/export/home"\n'
            "settle_seconds = 1.5\n"
            'log_level = "DEBUG"\n'
            "dry_run = true\n"
            'extra_operators = ["backup"]\n'
        )

        config = load_config(path)

        assert config.home_root == "/export/home"
        assert config.settle_seconds == 1.5
        assert config.log_level == "DEBUG"
        assert config.dry_run is True
        assert config.extra_operators == ["backup"]

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ConfigParseError."""
        path = tmp_path / "config.toml"
        path.write_text("home_root = \n")

        with pytest.raises(ConfigParseError, match="Invalid TOML"):
            load_config(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise ConfigError."""
        path = tmp_path / "config.toml"
        path.write_text("settle_seconds = 1000\n")

        with pytest.raises(ConfigError, match="Invalid config content"):
            load_config(path)

    def test_uses_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without a path argument HOMEREAP_CONFIG is honoured."""
        path = tmp_path / "custom.toml"
        path.write_text('home_root = "/users"\n')
        monkeypatch.setenv("HOMEREAP_CONFIG", str(path))

        assert load_config().home_root == "/users"
