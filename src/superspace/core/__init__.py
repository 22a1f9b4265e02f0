"""
Core module for the superspace package.

Provides the exception hierarchy and logging helpers shared by every layer.
"""

from superspace.core.exceptions import (
    AppDiscoveryError,
    ConfigError,
    LaunchError,
    SubmenuError,
    SubmenuNotFoundError,
    SuperspaceError,
)
from superspace.core.logging import configure_logging, log_exception, reset_logging

__all__ = [
    # Exceptions
    "SuperspaceError",
    "ConfigError",
    "SubmenuError",
    "SubmenuNotFoundError",
    "AppDiscoveryError",
    "LaunchError",
    # Logging
    "configure_logging",
    "reset_logging",
    "log_exception",
]
