"""
Track metadata parsed from an MPRIS ``Metadata`` property bag.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from .module_registry import module_registry

TITLE_PROPERTY = "xesam:title"
ARTISTS_PROPERTY = "xesam:artist"

log = module_registry.register_module(
    name="metadata",
    description="MPRIS metadata parsing (title, artists)",
    logger_name="spotifystatus.metadata",
    debug_flag="--debug-metadata",
)


class MetadataParsingError(Exception):
    """Specific error for metadata parsing issues."""

    pass


class InvalidFieldTypeError(MetadataParsingError):
    """A metadata field held something other than text."""

    pass


@dataclass(frozen=True)
class TrackMetadata:
    """The currently loaded track."""

    title: Optional[str]
    artists: Tuple[str, ...] = ()


def _unwrap(value: Any) -> Any:
    """Strip a dbus-next Variant down to its Python value."""
    # Nested variants are legal in a{sv}
    while hasattr(value, "signature") and hasattr(value, "value"):
        value = value.value
    return value


def _parse_title(raw: Any) -> Optional[str]:
    title = _unwrap(raw)
    if title is None:
        return None
    if not isinstance(title, str):
        raise InvalidFieldTypeError(f"{TITLE_PROPERTY} is {type(title).__name__}, expected text")
    return title


def _parse_artists(raw: Any) -> Tuple[str, ...]:
    artists = _unwrap(raw)
    if artists is None:
        return ()

    # Some players send a plain string instead of an array
    if isinstance(artists, str):
        artists = [artists]

    if not isinstance(artists, (list, tuple)):
        raise InvalidFieldTypeError(f"{ARTISTS_PROPERTY} is {type(artists).__name__}, expected a list of text")

    names = []
    for artist in artists:
        artist = _unwrap(artist)
        if not isinstance(artist, str):
            raise InvalidFieldTypeError(f"{ARTISTS_PROPERTY} entry is {type(artist).__name__}, expected text")
        if artist:
            names.append(artist)
    return tuple(names)


def parse_metadata(payload: Optional[Mapping[str, Any]]) -> Optional[TrackMetadata]:
    """
    Build a TrackMetadata from a raw ``a{sv}`` metadata dictionary.

    Args:
        payload: Property bag as returned by the bus, values may be Variants

    Returns:
        TrackMetadata, or None when no track is loaded (no payload, or no title)

    Raises:
        InvalidFieldTypeError: title or artist values are not text
    """
    if not payload:
        log.debug("Empty metadata payload")
        return None

    title = _parse_title(payload.get(TITLE_PROPERTY))
    if not title:
        log.debug("No title in metadata, nothing is playing")
        return None

    artists = _parse_artists(payload.get(ARTISTS_PROPERTY))
    metadata = TrackMetadata(title=title, artists=artists)
    log.debug("Parsed metadata: %s", metadata)
    return metadata
