"""
Exception classes for the launcher.
"""


class SuperspaceError(Exception):
    """Base exception for launcher errors."""


class ConfigError(SuperspaceError):
    """Configuration file missing or invalid."""


class SubmenuError(SuperspaceError):
    """Submenu definition could not be parsed."""


class SubmenuNotFoundError(SubmenuError):
    """Submenu file does not exist."""


class AppDiscoveryError(SuperspaceError):
    """Installed applications could not be enumerated."""


class LaunchError(SuperspaceError):
    """A process or application failed to start."""
