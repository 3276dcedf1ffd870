"""Tests for reading the TOML configuration file."""

from pathlib import Path

import pytest

from spotifystatus.config import StatusConfig
from spotifystatus.config_loader import (
    CONFIG_PATH_ENV,
    DEFAULT_CONFIG_FILE_NAME,
    ENV_OVERRIDES,
    apply_env_overrides,
    get_config_path,
    load_config,
    read_user_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the real home directory and environment."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    for env in ENV_OVERRIDES:
        monkeypatch.delenv(env, raising=False)


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / DEFAULT_CONFIG_FILE_NAME
    path.write_text(content, encoding="utf-8")
    return path


class TestGetConfigPath:
    """Test config file discovery."""

    def test_default_is_in_home(self, tmp_path):
        """Test that the default file lives in the home directory."""
        assert get_config_path() == tmp_path / ".spotify-status"

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        """Test precedence of the explicit argument over the environment."""
        monkeypatch.setenv(CONFIG_PATH_ENV, str(tmp_path / "from-env"))
        assert get_config_path(str(tmp_path / "explicit")) == tmp_path / "explicit"

    def test_env_path(self, tmp_path, monkeypatch):
        """Test that $SPOTIFY_STATUS_CONFIG replaces the default path."""
        monkeypatch.setenv(CONFIG_PATH_ENV, str(tmp_path / "from-env"))
        assert get_config_path() == tmp_path / "from-env"


class TestReadUserSettings:
    """Test TOML parsing and its failure modes."""

    def test_missing_file(self, tmp_path):
        """Test that a missing file reads as no settings."""
        assert read_user_settings(tmp_path / "nope") is None

    def test_no_path(self):
        """Test that no path at all reads as no settings."""
        assert read_user_settings(None) is None

    def test_valid_file(self, tmp_path):
        """Test reading a well-formed file."""
        path = write_config(tmp_path, 'icon = "X"\ncolor = "red"\nmax_length = 20\n')
        assert read_user_settings(path) == {"icon": "X", "color": "red", "max_length": 20}

    def test_invalid_toml(self, tmp_path):
        """Test that unparsable TOML reads as no settings."""
        path = write_config(tmp_path, "icon = \ncolor = [unterminated\n")
        assert read_user_settings(path) is None

    def test_invalid_utf8(self, tmp_path):
        """Test that a file of arbitrary bytes reads as no settings."""
        path = tmp_path / DEFAULT_CONFIG_FILE_NAME
        path.write_bytes(b'color = "\xff\xfe"\n')
        assert read_user_settings(path) is None

    def test_directory_instead_of_file(self, tmp_path):
        """Test that an unreadable path reads as no settings."""
        path = tmp_path / DEFAULT_CONFIG_FILE_NAME
        path.mkdir()
        assert read_user_settings(path) is None


class TestEnvOverrides:
    """Test SPOTIFY_STATUS_* environment overrides."""

    def test_no_overrides_returns_input(self):
        """Test that settings pass through untouched without overrides."""
        settings = {"color": "red"}
        assert apply_env_overrides(settings) is settings
        assert apply_env_overrides(None) is None

    def test_overrides_merge(self, monkeypatch):
        """Test that environment values replace file values."""
        monkeypatch.setenv("SPOTIFY_STATUS_COLOR", "blue")
        monkeypatch.setenv("SPOTIFY_STATUS_MAX_LENGTH", "12")
        settings = {"color": "red", "icon": "X"}
        merged = apply_env_overrides(settings)
        assert merged == {"color": "blue", "icon": "X", "max_length": "12"}
        assert settings == {"color": "red", "icon": "X"}


class TestLoadConfig:
    """Test the full load path."""

    def test_absent_file_gives_defaults(self):
        """Test that no config file resolves to the defaults."""
        assert load_config() == StatusConfig()

    def test_malformed_file_gives_defaults(self, tmp_path):
        """Test that a broken file is treated like an absent one."""
        write_config(tmp_path, 'color = "red"\nmax_length = = 3\n')
        assert load_config() == StatusConfig()

    def test_partial_file(self, tmp_path):
        """Test a file that sets only some keys."""
        write_config(tmp_path, 'color = "#ff0000"\n')
        assert load_config() == StatusConfig(color="#ff0000")

    def test_invalid_field_in_valid_file(self, tmp_path):
        """Test that one bad value does not discard the good ones."""
        write_config(tmp_path, 'icon = "I"\ncolor = "red"\nmax_length = -5\n')
        assert load_config() == StatusConfig(icon="I", color="red")

    def test_explicit_path(self, tmp_path):
        """Test loading from a path given on the command line."""
        path = tmp_path / "custom.toml"
        path.write_text("max_length = 10\nremove_feat = true\n", encoding="utf-8")
        assert load_config(str(path)) == StatusConfig(max_length=10, remove_feat=True)

    def test_env_max_length_parsed(self, monkeypatch):
        """Test that an environment max length is parsed as an integer."""
        monkeypatch.setenv("SPOTIFY_STATUS_MAX_LENGTH", "7")
        assert load_config().max_length == 7
