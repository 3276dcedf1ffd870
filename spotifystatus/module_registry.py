"""
Registry of the spotify-status modules and their loggers.

Each module registers itself on import so the CLI can build one
``--debug-<module>`` flag per logger without hard-coding the list.
"""

import logging
from typing import Dict, Set


class ModuleRegistry:
    """Registry for spotify-status modules and their debug loggers."""

    def __init__(self):
        """Initialize an empty registry."""
        self._modules: Dict[str, dict] = {}

    def register_module(
        self,
        name: str,
        description: str,
        logger_name: str,
        debug_flag: str,
    ) -> logging.Logger:
        """Register a module and return its logger."""
        logger = logging.getLogger(logger_name)
        self._modules[name] = {
            "description": description,
            "logger_name": logger_name,
            "debug_flag": debug_flag,
            "logger": logger,
        }
        return logger

    def get_module_info(self, name: str) -> dict:
        """Get information about a specific module."""
        return self._modules.get(name, {})

    def get_module_names(self) -> Set[str]:
        return set(self._modules.keys())

    def get_debug_flags(self) -> Dict[str, str]:
        """Get mapping of debug CLI flags to module names."""
        return {info["debug_flag"]: name for name, info in self._modules.items()}

    def enable_debug(self, name: str) -> bool:
        """Switch a module's logger to DEBUG; returns False for unknown modules."""
        info = self._modules.get(name)
        if not info:
            return False
        info["logger"].setLevel(logging.DEBUG)
        return True


# Global registry instance
module_registry = ModuleRegistry()
