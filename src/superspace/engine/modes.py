"""
Menu modes of the state machine.

Exactly one mode is active at a time. Modes reference configuration data
(commands, items, templates) rather than copying it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, NoReturn, Optional, Sequence, Union

from superspace.config.models import CommandEntry, ListItem, OutputMode


@dataclass
class MainMenuMode:
    """Top-level commands narrowed by prefix.

    ``filtered`` is None until a filter has been started, and holds matching
    prefixes in declaration order afterwards.
    """
    commands: Mapping[str, CommandEntry]
    filtered: Optional[list[str]] = None


@dataclass
class PromptMode:
    """Free-text entry for a command template."""
    prefix_len: int
    command: Sequence[str]
    output_mode: OutputMode = OutputMode.HIDDEN


@dataclass
class ListMode:
    """A list of items narrowed by fuzzy matching, best match first."""
    prefix_len: int
    items: Sequence[ListItem]
    filtered: Optional[list[ListItem]] = None


@dataclass
class ErrorMode:
    message: str


MenuMode = Union[MainMenuMode, PromptMode, ListMode, ErrorMode]


def unhandled_mode(mode: object) -> NoReturn:
    raise TypeError(f"Unhandled menu mode: {type(mode).__name__}")
