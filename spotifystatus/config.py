"""
Configuration for the spotify-status block.

The resolved configuration is an immutable value passed explicitly to the
formatter; nothing here reads global state.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .module_registry import module_registry

log = module_registry.register_module(
    name="config",
    description="Configuration resolution (icon, color, max length, feat removal)",
    logger_name="spotifystatus.config",
    debug_flag="--debug-config",
)

# Font Awesome "spotify" glyph, written as a markup entity for the bar host
SPOTIFY_ICON_AWESOME_FONTS = "&#xf1bc;"
DEFAULT_COLOR = "white"
DEFAULT_MAX_LENGTH = 45
DEFAULT_REMOVE_FEAT = False
DEFAULT_FEAT_REGEX = r"\(feat\. [\w* ]*\)"


@dataclass(frozen=True)
class StatusConfig:
    """Resolved settings for one invocation."""

    icon: str = SPOTIFY_ICON_AWESOME_FONTS
    color: str = DEFAULT_COLOR

    # Counted in characters, not bytes
    max_length: int = DEFAULT_MAX_LENGTH

    # Strip "(feat. ...)" from titles
    remove_feat: bool = DEFAULT_REMOVE_FEAT
    feat_regex: str = DEFAULT_FEAT_REGEX

    @classmethod
    def create_default(cls) -> "StatusConfig":
        """Create a configuration holding only the built-in defaults."""
        return cls()


def _valid_text(value: Any) -> bool:
    return isinstance(value, str)


def _parse_max_length(value: Any) -> Optional[int]:
    """Return a non-negative integer for ``value`` or None if it is not one."""
    # bool is an int subclass; "max_length = true" is not a length
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def _valid_regex(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        re.compile(value)
    except re.error as e:
        log.warning("Invalid feat_regex %r: %s", value, e)
        return False
    return True


def resolve_config(user_settings: Optional[Mapping[str, Any]] = None) -> StatusConfig:
    """
    Merge user settings over the defaults, one field at a time.

    A value of the wrong type for its field falls back to that field's default
    without affecting the others.

    Args:
        user_settings: Partial settings, typically a parsed TOML table. None
            means no configuration source was available.

    Returns:
        Fully populated StatusConfig
    """
    defaults = StatusConfig.create_default()
    if not user_settings:
        return defaults

    for key in user_settings:
        if key not in StatusConfig.__dataclass_fields__:
            log.debug("Ignoring unknown config key: %s", key)

    resolved = {}

    for key in ("icon", "color"):
        if key in user_settings:
            value = user_settings[key]
            if _valid_text(value):
                resolved[key] = value
            else:
                log.warning("Invalid %s %r, using default %r", key, value, getattr(defaults, key))

    if "max_length" in user_settings:
        max_length = _parse_max_length(user_settings["max_length"])
        if max_length is None:
            log.warning(
                "Invalid max_length %r, using default %d", user_settings["max_length"], defaults.max_length
            )
        else:
            resolved["max_length"] = max_length

    if "remove_feat" in user_settings:
        value = user_settings["remove_feat"]
        if isinstance(value, bool):
            resolved["remove_feat"] = value
        else:
            log.warning("Invalid remove_feat %r, using default %s", value, defaults.remove_feat)

    if "feat_regex" in user_settings:
        value = user_settings["feat_regex"]
        if _valid_regex(value):
            resolved["feat_regex"] = value
        else:
            log.warning("Falling back to default feat_regex %r", defaults.feat_regex)

    config = StatusConfig(**resolved)
    log.debug("Resolved config: %s", config)
    return config
