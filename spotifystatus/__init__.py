"""i3bar status block showing the track currently playing in Spotify."""

from .config import StatusConfig, resolve_config
from .config_loader import load_config
from .formatter import format_status
from .metadata import TrackMetadata, parse_metadata

__version__ = "0.1.0"

__all__ = [
    "StatusConfig",
    "TrackMetadata",
    "format_status",
    "load_config",
    "parse_metadata",
    "resolve_config",
]
