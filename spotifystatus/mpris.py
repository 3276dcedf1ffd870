"""
Session-bus query for the Spotify MPRIS ``Metadata`` property.
"""

import asyncio
from typing import Any, Dict, Optional

from dbus_next import BusType, Message, MessageType
from dbus_next.aio import MessageBus

from .metadata import MetadataParsingError, TrackMetadata, parse_metadata
from .module_registry import module_registry

SPOTIFY_BUS_NAME = "org.mpris.MediaPlayer2.spotify"
MPRIS_OBJECT_PATH = "/org/mpris/MediaPlayer2"
MPRIS_PLAYER_INTERFACE = "org.mpris.MediaPlayer2.Player"
METADATA_PROPERTY = "Metadata"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

DEFAULT_TIMEOUT_SECONDS = 5.0

# Errors meaning "the player is not running" rather than "the bus is broken"
NO_PLAYER_ERRORS = {
    "org.freedesktop.DBus.Error.ServiceUnknown",
    "org.freedesktop.DBus.Error.NameHasNoOwner",
}

log = module_registry.register_module(
    name="mpris",
    description="D-Bus MPRIS metadata query",
    logger_name="spotifystatus.mpris",
    debug_flag="--debug-mpris",
)


class MetadataQueryError(Exception):
    """The metadata query failed at the transport level."""

    pass


async def _get_metadata(bus: MessageBus, bus_name: str) -> Optional[Dict[str, Any]]:
    reply = await bus.call(
        Message(
            destination=bus_name,
            path=MPRIS_OBJECT_PATH,
            interface=PROPERTIES_INTERFACE,
            member="Get",
            signature="ss",
            body=[MPRIS_PLAYER_INTERFACE, METADATA_PROPERTY],
        )
    )

    if reply.message_type == MessageType.ERROR:
        if reply.error_name in NO_PLAYER_ERRORS:
            log.debug("No owner for %s: %s", bus_name, reply.error_name)
            return None
        detail = reply.body[0] if reply.body else ""
        raise MetadataQueryError(f"{reply.error_name}: {detail}")

    if reply.signature != "v" or not reply.body:
        raise MetadataQueryError(f"Unexpected reply signature {reply.signature!r}")

    variant = reply.body[0]
    if variant.signature != "a{sv}":
        raise MetadataQueryError(f"Metadata has signature {variant.signature!r}, expected 'a{{sv}}'")

    return variant.value


async def fetch_metadata(
    bus_name: str = SPOTIFY_BUS_NAME,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    bus_address: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Fetch the raw metadata dictionary of a player.

    Args:
        bus_name: Well-known name of the player
        timeout: Seconds allowed for connecting and for the property call
        bus_address: Explicit bus address; the session bus when None

    Returns:
        The ``a{sv}`` metadata dictionary, or None if no player owns the name

    Raises:
        MetadataQueryError: the bus could not be reached, the call failed,
            timed out, or returned something that is not a metadata dictionary
    """
    try:
        bus = await asyncio.wait_for(
            MessageBus(bus_type=BusType.SESSION, bus_address=bus_address).connect(), timeout
        )
    except asyncio.TimeoutError as e:
        raise MetadataQueryError(f"Timed out connecting to the session bus after {timeout}s") from e
    except Exception as e:
        raise MetadataQueryError(f"Could not connect to the session bus: {e}") from e

    try:
        return await asyncio.wait_for(_get_metadata(bus, bus_name), timeout)
    except asyncio.TimeoutError as e:
        raise MetadataQueryError(f"Timed out querying {bus_name} after {timeout}s") from e
    except MetadataQueryError:
        raise
    except Exception as e:
        # The connection dropping mid-call surfaces as EOFError, OSError etc.
        raise MetadataQueryError(f"Querying {bus_name} failed: {e}") from e
    finally:
        bus.disconnect()


def query_track(
    bus_name: str = SPOTIFY_BUS_NAME,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    bus_address: Optional[str] = None,
) -> Optional[TrackMetadata]:
    """
    Query the player and parse its current track.

    Every failure (no player, transport error, malformed reply) is reported
    as None so the status block goes quiet instead of erroring.
    """
    try:
        payload = asyncio.run(fetch_metadata(bus_name, timeout, bus_address))
    except MetadataQueryError as e:
        log.warning("Metadata query failed: %s", e)
        return None

    if payload is None:
        log.info("Player %s is not running", bus_name)
        return None

    try:
        return parse_metadata(payload)
    except MetadataParsingError as e:
        log.warning("Malformed metadata from %s: %s", bus_name, e)
        return None
