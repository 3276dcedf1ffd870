"""
Rendering of the status line.

The output is Pango markup for i3bar-style hosts::

    <span color="COLOR">ICON TITLE (ARTIST, ARTIST)</span>

``max_length`` bounds the visible track text (title plus artist suffix) in
characters. Truncation is silent: no ellipsis is added, and a cut inside the
artist suffix may leave an unmatched ``(``.
"""

import html
import re
from typing import Optional, Sequence

from .config import StatusConfig
from .metadata import TrackMetadata
from .module_registry import module_registry

log = module_registry.register_module(
    name="formatter",
    description="Status line formatting",
    logger_name="spotifystatus.formatter",
    debug_flag="--debug-formatter",
)

MARKUP_OPEN = '<span color="{color}">'
MARKUP_CLOSE = "</span>"


def remove_feat(title: str, config: StatusConfig) -> str:
    """Remove "(feat. ...)" credits from a title when the config asks for it."""
    if not config.remove_feat:
        return title

    cleaned = re.sub(config.feat_regex, "", title).strip()
    if not cleaned:
        # A title that is nothing but a credit is still a title
        return title
    return cleaned


def build_artist_suffix(artists: Sequence[str]) -> str:
    """Return ``" (A, B)"`` for the given artists, or ``""`` when there are none."""
    if not artists:
        return ""
    return f" ({', '.join(artists)})"


def build_track_text(metadata: TrackMetadata, config: StatusConfig) -> str:
    title = remove_feat(metadata.title, config)
    return title + build_artist_suffix(metadata.artists)


def trim_to_length(text: str, max_length: int) -> str:
    """
    Cut ``text`` to at most ``max_length`` characters.

    Python strings index by code point, so a slice can never split a
    multi-byte character the way byte slicing would.
    """
    if max_length <= 0:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length]


def escape_markup(text: str) -> str:
    """Escape the characters Pango markup treats specially."""
    return html.escape(text, quote=False)


def wrap_markup(text: str, config: StatusConfig) -> str:
    """Prefix the icon and wrap everything in a colored span.

    The color is attribute-escaped; the icon is inserted as markup.
    """
    return f"{MARKUP_OPEN.format(color=html.escape(config.color))}{config.icon} {text}{MARKUP_CLOSE}"


def format_status(metadata: Optional[TrackMetadata], config: StatusConfig) -> Optional[str]:
    """
    Render the status line for a track.

    Args:
        metadata: Current track, or None when nothing is playing
        config: Resolved configuration

    Returns:
        The decorated status line, or None when there is nothing to show
    """
    if metadata is None or not metadata.title:
        log.debug("Nothing playing, no output")
        return None

    track_text = build_track_text(metadata, config)
    trimmed = trim_to_length(track_text, config.max_length)
    if trimmed != track_text:
        log.debug("Truncated %r to %d characters: %r", track_text, config.max_length, trimmed)

    # Escape after trimming so the cut never lands inside an entity
    return wrap_markup(escape_markup(trimmed), config)
