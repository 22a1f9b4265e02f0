"""
Launcher engine: state machine, narrowing, command execution and rendering.
"""

from superspace.engine.executor import ColdRun, CommandExecutor, expand_template
from superspace.engine.matching import FuzzyMatcher, prefix_matches
from superspace.engine.modes import ErrorMode, ListMode, MainMenuMode, MenuMode, PromptMode
from superspace.engine.render import build_message, render, render_error
from superspace.engine.state import DELIMITER, INPUT_VARIABLE, State

__all__ = [
    # State machine
    "State",
    "DELIMITER",
    "INPUT_VARIABLE",
    # Modes
    "MenuMode",
    "MainMenuMode",
    "PromptMode",
    "ListMode",
    "ErrorMode",
    # Matching
    "FuzzyMatcher",
    "prefix_matches",
    # Execution
    "CommandExecutor",
    "ColdRun",
    "expand_template",
    # Rendering
    "build_message",
    "render",
    "render_error",
]
