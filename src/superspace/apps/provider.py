"""Application provider selection.

The state machine only depends on the AppProvider protocol; whether discovery
is available is decided once at startup from the configuration.
"""
from __future__ import annotations

from pathlib import Path
from typing import Protocol

from superspace.apps.desktop_entries import AppCommand, DesktopEntryProvider
from superspace.config.models import AppItem, Config
from superspace.core.exceptions import LaunchError

DISABLED_MESSAGE = "applications are disabled in the config."


class AppProvider(Protocol):
    """Capability for listing and launching installed applications."""

    available: bool

    def list_apps(self) -> list[AppItem]:
        """Return launchable applications as list items."""
        ...

    def command_for(self, path: Path) -> AppCommand:
        """Return the command that launches the application at path."""
        ...


class DisabledAppProvider:
    """Provider used when application discovery is turned off."""

    available = False

    def list_apps(self) -> list[AppItem]:
        return []

    def command_for(self, path: Path) -> AppCommand:
        raise LaunchError(DISABLED_MESSAGE)


def select_provider(config: Config) -> AppProvider:
    """Pick the provider matching ``general.search_apps``."""
    if config.general.search_apps:
        return DesktopEntryProvider()
    return DisabledAppProvider()
