"""
Configuration loader for spotify-status.

Reads ``~/.spotify-status`` (TOML) and applies environment variable overrides.
A missing or broken file is never fatal: the block falls back to defaults.
"""

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from .config import StatusConfig, resolve_config
from .module_registry import module_registry

log = module_registry.get_module_info("config")["logger"]

DEFAULT_CONFIG_FILE_NAME = ".spotify-status"
CONFIG_PATH_ENV = "SPOTIFY_STATUS_CONFIG"

ENV_OVERRIDES = {
    "SPOTIFY_STATUS_ICON": "icon",
    "SPOTIFY_STATUS_COLOR": "color",
    "SPOTIFY_STATUS_MAX_LENGTH": "max_length",
}


def get_config_path(config_path: Optional[str] = None) -> Optional[Path]:
    """
    Work out which config file to read.

    Precedence: explicit argument, then $SPOTIFY_STATUS_CONFIG, then
    ``~/.spotify-status``. Returns None when no home directory can be found.
    """
    if config_path:
        return Path(config_path).expanduser()

    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()

    try:
        return Path.home() / DEFAULT_CONFIG_FILE_NAME
    except RuntimeError as e:
        log.warning("Could not find the home directory of the current user: %s", e)
        return None


def read_user_settings(path: Optional[Path]) -> Optional[Dict[str, Any]]:
    """Parse the TOML file at ``path``; None if it is absent or unusable."""
    if path is None:
        return None

    if not path.exists():
        log.debug("No config file at %s, using defaults", path)
        return None

    try:
        with open(path, "rb") as f:
            settings = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        log.warning("Failed to parse the configuration file %s: %s", path, e)
        return None
    except UnicodeDecodeError as e:
        log.warning("Configuration file %s is not valid UTF-8: %s", path, e)
        return None
    except OSError as e:
        log.warning("Unable to open the config file %s: %s", path, e)
        return None

    log.debug("Loaded settings from %s: %s", path, settings)
    return settings


def apply_env_overrides(settings: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return ``settings`` with any SPOTIFY_STATUS_* environment values applied."""
    overrides = {key: os.environ[env] for env, key in ENV_OVERRIDES.items() if os.environ.get(env)}
    if not overrides:
        return settings

    log.debug("Environment overrides: %s", overrides)
    merged = dict(settings or {})
    merged.update(overrides)
    return merged


def load_config(config_path: Optional[str] = None) -> StatusConfig:
    """
    Load the status configuration.

    Args:
        config_path: Path to a TOML config file. Defaults to ~/.spotify-status

    Returns:
        StatusConfig with user settings merged over the defaults
    """
    settings = read_user_settings(get_config_path(config_path))
    settings = apply_env_overrides(settings)
    return resolve_config(settings)
