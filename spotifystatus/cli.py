#!/usr/bin/env python3
"""Command-line entry point for the spotify-status i3bar block."""

import argparse
import logging
import sys
from typing import List, Optional

from .config_loader import load_config
from .formatter import format_status
from .module_registry import module_registry
from .mpris import DEFAULT_TIMEOUT_SECONDS, SPOTIFY_BUS_NAME, query_track

log = module_registry.register_module(
    name="cli",
    description="Command-line entry point",
    logger_name="spotifystatus.cli",
    debug_flag="--debug-cli",
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spotify-status",
        description="Print the current Spotify track as an i3bar status block",
    )
    parser.add_argument("--config", help="Path to config file (default: ~/.spotify-status)")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help=f"Seconds to wait for the player (default: {DEFAULT_TIMEOUT_SECONDS})",
    )
    parser.add_argument(
        "--bus-name",
        default=SPOTIFY_BUS_NAME,
        help=f"MPRIS bus name to query (default: {SPOTIFY_BUS_NAME})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging for all modules")

    debug_group = parser.add_argument_group("per-module debug logging")
    for flag, name in sorted(module_registry.get_debug_flags().items()):
        info = module_registry.get_module_info(name)
        debug_group.add_argument(flag, action="store_true", dest=f"debug_{name}", help=info["description"])

    return parser


def setup_logging(args: argparse.Namespace) -> None:
    """Log to stderr; stdout is reserved for the status line."""
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )
    for name in module_registry.get_module_names():
        if getattr(args, f"debug_{name}", False):
            module_registry.enable_debug(name)


def run(args: argparse.Namespace) -> Optional[str]:
    """Resolve config, query the player and render the status line."""
    config = load_config(args.config)
    metadata = query_track(bus_name=args.bus_name, timeout=args.timeout)
    return format_status(metadata, config)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the spotify-status command."""
    args = build_parser().parse_args(argv)
    setup_logging(args)

    status = run(args)
    if status is not None:
        print(status)
    else:
        log.debug("No status to print")
    return 0


if __name__ == "__main__":
    sys.exit(main())
