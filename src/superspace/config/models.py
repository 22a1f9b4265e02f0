"""
Typed configuration for the launcher.

Actions are a tagged union keyed by ``type``:

    commands:
      - prefix: web
        description: Search the web
        action:
          type: prompt
          command: ["xdg-open", "https://duckduckgo.com/?q={{INPUT}}"]
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class OutputMode(str, Enum):
    """How a prompt's command output is surfaced."""

    HIDDEN = "hidden"
    DISPLAY = "display"
    CONTINUOUS = "continuous"


class _ActionBase(BaseModel):
    model_config = {"frozen": True}


class ListApplicationsAction(_ActionBase):
    """List the applications found by the application provider."""
    type: Literal["list_applications"] = "list_applications"


class ListAction(_ActionBase):
    """A fixed list of named items, each with its own action."""
    type: Literal["list"] = "list"
    items: list[ListItem]


class PromptAction(_ActionBase):
    """Free-text capture feeding a command template through ``{{INPUT}}``."""
    type: Literal["prompt"] = "prompt"
    command: list[str]
    output: OutputMode = OutputMode.HIDDEN


class ExecAction(_ActionBase):
    """Run a literal command."""
    type: Literal["exec"] = "exec"
    command: list[str]


class ExitAction(_ActionBase):
    type: Literal["exit"] = "exit"


class SubmenuAction(_ActionBase):
    """Load a menu from ``<config dir>/<name>.yaml`` and enter it."""
    type: Literal["submenu"] = "submenu"
    name: str
    variables: dict[str, str] = Field(default_factory=dict)


class LaunchAppAction(_ActionBase):
    """Launch a discovered application from its desktop entry.

    Only produced by application discovery, never read from config files.
    """
    type: Literal["launch_app"] = "launch_app"
    path: Path


# Actions that may appear in config and submenu files
ConfigAction = Annotated[
    Union[
        ListApplicationsAction,
        ListAction,
        PromptAction,
        ExecAction,
        ExitAction,
        SubmenuAction,
    ],
    Field(discriminator="type"),
]

Action = Union[
    ListApplicationsAction,
    ListAction,
    PromptAction,
    ExecAction,
    ExitAction,
    SubmenuAction,
    LaunchAppAction,
]

# Actions whose result is something the user keeps typing into
NAVIGABLE_ACTIONS = (ListAction, PromptAction, ListApplicationsAction)


class ListItem(BaseModel):
    """A named entry of a list menu."""
    model_config = {"frozen": True}

    name: str
    action: ConfigAction


class AppItem(ListItem):
    """A discovered application in the ``list_applications`` menu."""

    action: LaunchAppAction


class CommandEntry(BaseModel):
    """A top-level command selected by typing its prefix.

    ``index`` is the declaration position in the config file and is the only
    ordering key for prefix-filtered results.
    """
    model_config = {"frozen": True}

    prefix: str
    description: str
    action: ConfigAction
    index: int = 0


class GeneralConfig(BaseModel):
    """General launcher settings."""
    model_config = {"frozen": True, "extra": "ignore"}

    default_command: Optional[str] = Field(
        default=None,
        description="Command run when space is pressed on an empty input"
    )
    prompt: Optional[str] = Field(
        default=None,
        description="Prompt text shown by the front-end"
    )
    search_apps: bool = Field(
        default=True,
        description="Enable discovery of installed applications"
    )


class Config(BaseModel):
    """Top-level configuration.

    ``commands`` is written as a list in the file and stored keyed by prefix.
    """
    model_config = {"frozen": True, "extra": "ignore"}

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    variables: dict[str, str] = Field(default_factory=dict)
    commands: dict[str, CommandEntry]

    @field_validator("commands", mode="before")
    @classmethod
    def _index_commands(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value

        commands: dict[str, Any] = {}
        for i, raw in enumerate(value):
            if isinstance(raw, CommandEntry):
                raw = raw.model_dump()
            if not isinstance(raw, dict):
                raise ValueError(f"command {i} must be a mapping")
            prefix = raw.get("prefix")
            if prefix in commands:
                raise ValueError(f"duplicate command {prefix}")
            commands[prefix] = {**raw, "index": i}
        return commands

    def ordered_commands(self) -> list[CommandEntry]:
        """Commands in declaration order."""
        return sorted(self.commands.values(), key=lambda entry: entry.index)


class Submenu(BaseModel):
    """A menu loaded from its own file.

    The file holds an optional ``prompt`` next to the action's own keys.
    """
    model_config = {"frozen": True}

    prompt: Optional[str] = None
    action: ConfigAction

    @model_validator(mode="before")
    @classmethod
    def _split_prompt(cls, data: Any) -> Any:
        if isinstance(data, dict) and "action" not in data:
            action = dict(data)
            prompt = action.pop("prompt", None)
            return {"prompt": prompt, "action": action}
        return data


ListAction.model_rebuild()
ListItem.model_rebuild()
AppItem.model_rebuild()
