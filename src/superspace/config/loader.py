"""
Loading of the main config file and of submenu files.

Files live in ``$XDG_CONFIG_HOME/superspace`` (``~/.config/superspace`` by
default): ``config.yaml`` for the main menu and ``<name>.yaml`` per submenu.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml
from pydantic import ValidationError

from superspace.config.models import Config, Submenu
from superspace.core.exceptions import ConfigError, SubmenuError, SubmenuNotFoundError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.yaml"


def default_config_dir() -> Path:
    """Return the launcher's config directory, honoring XDG_CONFIG_HOME."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "superspace"


def describe_validation_error(error: ValidationError) -> str:
    """Condense a pydantic error into one line per failing field."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def _read_yaml(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


class ConfigManager:
    """Loads the main configuration file."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or default_config_dir()

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def load(self, path: Optional[Path] = None) -> Config:
        """Load and validate a configuration file.

        Args:
            path: Explicit config file. Defaults to ``config.yaml`` in the
                config directory.

        Returns:
            The validated Config.

        Raises:
            ConfigError: The file is missing, unreadable or invalid.
        """
        path = Path(path) if path is not None else self.config_file
        logger.debug(f"Loading config from {path}")

        try:
            data = _read_yaml(path)
        except OSError:
            raise ConfigError("failed to find config file.") from None
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise ConfigError(f"invalid config file: {e}") from e

        try:
            config = Config.model_validate(data or {})
        except ValidationError as e:
            raise ConfigError(describe_validation_error(e)) from e

        logger.info(f"Loaded {len(config.commands)} commands from {path}")
        return config


def apply_variable_overrides(config: Config, assignments: Iterable[str]) -> Config:
    """Return a copy of config with ``KEY=VALUE`` assignments added to its variables.

    Assignments without ``=`` are ignored. The value is everything after the
    first ``=``.
    """
    variables = dict(config.variables)
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep:
            logger.warning(f"Ignoring variable without '=': {assignment}")
            continue
        variables[key] = value
    return config.model_copy(update={"variables": variables})


class SubmenuStore:
    """Process-lifetime cache of parsed submenus.

    Entries are added on first successful load and are never replaced or
    evicted, so a name maps to the same Submenu for the life of the store.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or default_config_dir()
        self._menus: dict[str, Submenu] = {}

    def path_for(self, name: str) -> Path:
        return self.config_dir / f"{name}.yaml"

    def get(self, name: str) -> Submenu:
        """Return the named submenu, loading it on first use.

        Raises:
            SubmenuNotFoundError: No file exists for the name.
            SubmenuError: The file could not be parsed.
        """
        cached = self._menus.get(name)
        if cached is not None:
            return cached

        path = self.path_for(name)
        try:
            data = _read_yaml(path)
        except OSError:
            raise SubmenuNotFoundError(f"file not found: {path}") from None
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise SubmenuError(f"invalid submenu '{name}': {e}") from e

        try:
            submenu = Submenu.model_validate(data or {})
        except ValidationError as e:
            raise SubmenuError(describe_validation_error(e)) from e

        logger.debug(f"Cached submenu '{name}' from {path}")
        self._menus[name] = submenu
        return submenu

    def __contains__(self, name: str) -> bool:
        return name in self._menus

    def __len__(self) -> int:
        return len(self._menus)
