"""Configuration models and loading for superspace."""

from superspace.config.loader import (
    CONFIG_FILE_NAME,
    ConfigManager,
    SubmenuStore,
    apply_variable_overrides,
    default_config_dir,
)
from superspace.config.models import (
    NAVIGABLE_ACTIONS,
    Action,
    AppItem,
    CommandEntry,
    Config,
    ConfigAction,
    ExecAction,
    ExitAction,
    GeneralConfig,
    LaunchAppAction,
    ListAction,
    ListApplicationsAction,
    ListItem,
    OutputMode,
    PromptAction,
    Submenu,
    SubmenuAction,
)

__all__ = [
    # Loading
    "CONFIG_FILE_NAME",
    "ConfigManager",
    "SubmenuStore",
    "apply_variable_overrides",
    "default_config_dir",
    # Models
    "Action",
    "ConfigAction",
    "NAVIGABLE_ACTIONS",
    "AppItem",
    "CommandEntry",
    "Config",
    "GeneralConfig",
    "ListItem",
    "OutputMode",
    "Submenu",
    "ListApplicationsAction",
    "ListAction",
    "PromptAction",
    "ExecAction",
    "ExitAction",
    "SubmenuAction",
    "LaunchAppAction",
]
