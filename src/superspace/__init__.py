"""
superspace - keystroke-driven launcher backend

Owns the menu state of an application launcher: narrows commands as the user
types, expands command templates, launches processes and renders every state
as one JSON line for an external front-end.

Example usage:
    from superspace import ConfigManager, State, render

    config = ConfigManager().load()
    state = State(config)
    state.process_character("w")
    print(render(state))
"""

__version__ = "0.1.0"

from superspace.config import Config, ConfigManager, SubmenuStore
from superspace.core import (
    AppDiscoveryError,
    ConfigError,
    LaunchError,
    SubmenuError,
    SubmenuNotFoundError,
    SuperspaceError,
)
from superspace.engine import CommandExecutor, State, render

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    "ConfigManager",
    "SubmenuStore",
    # Engine
    "State",
    "CommandExecutor",
    "render",
    # Exceptions
    "SuperspaceError",
    "ConfigError",
    "SubmenuError",
    "SubmenuNotFoundError",
    "AppDiscoveryError",
    "LaunchError",
]
