"""
Line-oriented event loop between the front-end and the state machine.

Each state is written as one JSON line on stdout; each line read from stdin
is one event: ``backspace``, ``enter``, or a typed character (the first
character of the line).
"""
from __future__ import annotations

import logging
from typing import TextIO

from superspace.engine.render import render
from superspace.engine.state import State

logger = logging.getLogger(__name__)

BACKSPACE = "backspace"
ENTER = "enter"


def dispatch_line(state: State, line: str) -> None:
    """Feed one line of front-end input to the state machine."""
    token = line.rstrip("\r\n")
    if token == BACKSPACE:
        state.process_delete()
    elif token == ENTER:
        state.process_commit()
    elif line:
        state.process_character(line[0])


def run_event_loop(state: State, stdin: TextIO, stdout: TextIO) -> None:
    """Render, read, dispatch until the state asks to exit or stdin closes."""
    while not state.should_exit:
        stdout.write(render(state) + "\n")
        stdout.flush()

        line = stdin.readline()
        if not line:
            logger.debug("Input closed, stopping")
            break
        dispatch_line(state, line)
