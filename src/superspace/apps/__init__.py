"""Application discovery for the ``list_applications`` action."""

from superspace.apps.desktop_entries import (
    AppCommand,
    DesktopEntryProvider,
    locale_variants,
    localized,
    read_desktop_entry,
    terminal_command,
)
from superspace.apps.provider import (
    DISABLED_MESSAGE,
    AppProvider,
    DisabledAppProvider,
    select_provider,
)

__all__ = [
    "AppCommand",
    "AppProvider",
    "DesktopEntryProvider",
    "DisabledAppProvider",
    "DISABLED_MESSAGE",
    "locale_variants",
    "localized",
    "read_desktop_entry",
    "select_provider",
    "terminal_command",
]
