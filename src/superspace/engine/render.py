"""
Wire messages describing the launcher state.

Each state renders as one line of JSON with a ``type`` discriminator:

    {"type":"main_menu","input":"w","items":[{"prefix":"web","description":"Search"}]}
    {"type":"prompt","input":"web cats","prefix":"web ","output":"..."}
    {"type":"list","input":"apps fi","items":["Firefox","Files"]}
    {"type":"error","message":"file not found: ..."}

Optional fields are omitted when unset. String escaping is left to the JSON
serializer, so quotes and backslashes in user text always round-trip.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Optional, Union

from pydantic import BaseModel

from superspace.engine.modes import ErrorMode, ListMode, MainMenuMode, PromptMode, unhandled_mode

if TYPE_CHECKING:
    from superspace.engine.state import State


class CommandView(BaseModel):
    prefix: str
    description: str


class MainMenuMessage(BaseModel):
    type: Literal["main_menu"] = "main_menu"
    input: str
    items: list[CommandView]
    prompt: Optional[str] = None


class PromptMessage(BaseModel):
    type: Literal["prompt"] = "prompt"
    input: str
    prefix: str
    output: Optional[str] = None
    prompt: Optional[str] = None


class ListMessage(BaseModel):
    type: Literal["list"] = "list"
    input: str
    items: list[str]
    prompt: Optional[str] = None


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


Message = Union[MainMenuMessage, PromptMessage, ListMessage, ErrorMessage]


def build_message(state: State) -> Message:
    """Snapshot the state's current mode as a wire message."""
    mode = state.mode

    if isinstance(mode, MainMenuMode):
        if mode.filtered is None:
            entries = state.config.ordered_commands()
        else:
            entries = [mode.commands[prefix] for prefix in mode.filtered]
        return MainMenuMessage(
            input=state.input,
            items=[CommandView(prefix=e.prefix, description=e.description) for e in entries],
            prompt=state.prompt,
        )
    if isinstance(mode, PromptMode):
        return PromptMessage(
            input=state.input,
            prefix=state.input[:mode.prefix_len],
            output=state.preview,
            prompt=state.prompt,
        )
    if isinstance(mode, ListMode):
        items = mode.items if mode.filtered is None else mode.filtered
        return ListMessage(
            input=state.input,
            items=[item.name for item in items],
            prompt=state.prompt,
        )
    if isinstance(mode, ErrorMode):
        return ErrorMessage(message=mode.message)
    unhandled_mode(mode)


def render(state: State) -> str:
    """Render the state as one line of JSON."""
    return build_message(state).model_dump_json(exclude_none=True)


def render_error(message: str) -> str:
    """Render a standalone error, used before any state exists."""
    return ErrorMessage(message=message).model_dump_json()
