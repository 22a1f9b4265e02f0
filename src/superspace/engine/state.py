"""
Keystroke-driven state machine of the launcher.

The front-end feeds one event at a time (a typed character, a delete or a
commit) and reads the resulting snapshot through ``superspace.engine.render``.

Typing in the main menu narrows commands by prefix; a space selects the
exact match, else the first filtered command, else the default command.
Actions either finish the session (exec, exit, launch) or open a list or a
prompt whose text continues after the part of the input that named it.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from superspace.apps.provider import DISABLED_MESSAGE, AppProvider
from superspace.config.loader import SubmenuStore
from superspace.config.models import (
    NAVIGABLE_ACTIONS,
    Action,
    Config,
    ExecAction,
    ExitAction,
    LaunchAppAction,
    ListAction,
    ListApplicationsAction,
    ListItem,
    OutputMode,
    PromptAction,
    SubmenuAction,
)
from superspace.core.exceptions import LaunchError, SubmenuError
from superspace.core.logging import log_exception
from superspace.engine.executor import CommandExecutor
from superspace.engine.matching import FuzzyMatcher, prefix_matches
from superspace.engine.modes import (
    ErrorMode,
    ListMode,
    MainMenuMode,
    MenuMode,
    PromptMode,
    unhandled_mode,
)

logger = logging.getLogger(__name__)

DELIMITER = " "
INPUT_VARIABLE = "INPUT"


class State:
    """Current menu, input buffer and variable overlay of a launcher session.

    Usage:
        state = State(config, apps)
        for c in "web ":
            state.process_character(c)
        print(render(state))
    """

    def __init__(
        self,
        config: Config,
        apps: Optional[Sequence[ListItem]] = None,
        *,
        provider: Optional[AppProvider] = None,
        submenus: Optional[SubmenuStore] = None,
        executor: Optional[CommandExecutor] = None,
        cold_run: bool = False,
        max_items: Optional[int] = None,
    ):
        """Initialize the state in the main menu.

        Args:
            config: Loaded configuration.
            apps: Discovered applications, or None when discovery is disabled.
            provider: Application provider used to launch discovered apps.
            submenus: Submenu cache. Defaults to one reading the config dir.
            executor: Command executor. Defaults to one over config.variables.
            cold_run: Report commands instead of running them.
            max_items: Accepted for the front-end; no truncation is applied.
        """
        self.config = config
        self.apps = apps
        self.provider = provider
        self.submenus = submenus if submenus is not None else SubmenuStore()
        self.executor = executor or CommandExecutor(config.variables, cold_run=cold_run)
        self.max_items = max_items

        self.mode: MenuMode = MainMenuMode(config.commands)
        self.input = ""
        self.prompt: Optional[str] = config.general.prompt
        self.should_exit = False

        # Per-scope variables, consulted before config.variables
        self.overlay: dict[str, str] = {}
        # Live output of a continuous prompt; render data, not part of the mode
        self.preview: Optional[str] = None

        self._matcher = FuzzyMatcher()

    # === Events ===

    def process_character(self, c: str) -> None:
        """Handle one typed character."""
        mode = self.mode
        if isinstance(mode, ErrorMode):
            return
        self.input += c

        if isinstance(mode, MainMenuMode):
            self._main_menu_character(mode, c)
        elif isinstance(mode, ListMode):
            mode.filtered = self._matcher.rank(self.input[mode.prefix_len:], mode.items)
        elif isinstance(mode, PromptMode):
            pass
        else:
            unhandled_mode(mode)

        self._update_preview()

    def process_delete(self) -> None:
        """Handle deletion of the last input character."""
        mode = self.mode
        if not self.input or isinstance(mode, ErrorMode):
            return
        self.input = self.input[:-1]

        if isinstance(mode, MainMenuMode):
            mode.filtered = prefix_matches(self.input, mode.commands) if self.input else None
        elif isinstance(mode, ListMode):
            if len(self.input) <= mode.prefix_len:
                self._return_to_main_menu()
            else:
                query = self.input[mode.prefix_len:]
                mode.filtered = self._matcher.rank(query, mode.items) if query else None
        elif isinstance(mode, PromptMode):
            if len(self.input) <= mode.prefix_len:
                self._return_to_main_menu()
        else:
            unhandled_mode(mode)

        self._update_preview()

    def process_commit(self) -> None:
        """Handle enter."""
        self.preview = None
        mode = self.mode

        if isinstance(mode, MainMenuMode):
            if not mode.filtered:
                return
            entry = mode.commands[mode.filtered[0]]
            if isinstance(entry.action, NAVIGABLE_ACTIONS):
                self.input = entry.prefix + DELIMITER
            self._run_action(entry.action)
        elif isinstance(mode, ListMode):
            if mode.filtered is None:
                if not mode.items:
                    return
                item = mode.items[0]
            elif mode.filtered:
                item = mode.filtered[0]
            else:
                return
            if isinstance(item.action, NAVIGABLE_ACTIONS):
                # Keep everything up to the first delimiter, replace the rest
                cut = self.input.find(DELIMITER) + 1
                self.input = self.input[:cut] + item.name + DELIMITER
            self._run_action(item.action)
        elif isinstance(mode, PromptMode):
            self._commit_prompt(mode)
        elif isinstance(mode, ErrorMode):
            self.should_exit = True
        else:
            unhandled_mode(mode)

    # === Main menu ===

    def _main_menu_character(self, mode: MainMenuMode, c: str) -> None:
        if c != DELIMITER:
            # An empty result can only stay empty as the input grows
            if mode.filtered is None or mode.filtered:
                mode.filtered = prefix_matches(self.input, mode.commands)
            return

        entry = mode.commands.get(self.input[:-1])
        if entry is None:
            if mode.filtered is not None:
                if not mode.filtered:
                    return
                entry = mode.commands[mode.filtered[0]]
                self.input = entry.prefix + DELIMITER
            elif self.config.general.default_command is not None:
                default = self.config.general.default_command
                entry = mode.commands.get(default)
                if entry is None:
                    self._fail(f"command '{default}' doesn't exist.")
                    return
                self.input = default + DELIMITER
            else:
                mode.filtered = None
                return

        logger.debug(f"Selected command '{entry.prefix}'")
        self._run_action(entry.action)

    def _return_to_main_menu(self) -> None:
        commands = self.config.commands
        self.mode = MainMenuMode(commands, prefix_matches(self.input, commands))
        self.prompt = self.config.general.prompt

    # === Actions ===

    def _run_action(self, action: Action) -> None:
        if isinstance(action, ListApplicationsAction):
            if self.apps is None:
                self._fail(DISABLED_MESSAGE)
            else:
                self.mode = ListMode(len(self.input), self.apps)
        elif isinstance(action, ListAction):
            self.mode = ListMode(len(self.input), action.items)
        elif isinstance(action, PromptAction):
            self.mode = PromptMode(len(self.input), action.command, action.output)
        elif isinstance(action, ExecAction):
            self._execute(action.command)
        elif isinstance(action, ExitAction):
            self.should_exit = True
        elif isinstance(action, SubmenuAction):
            self._enter_submenu(action)
        elif isinstance(action, LaunchAppAction):
            self._launch_app(action)
        else:
            raise TypeError(f"Unhandled action: {type(action).__name__}")

    def _execute(self, command: Sequence[str]) -> None:
        try:
            self.executor.run_detached(command, self.overlay)
        except LaunchError as e:
            self._fail_with(e)
            return
        self.should_exit = True

    def _commit_prompt(self, mode: PromptMode) -> None:
        had_input = INPUT_VARIABLE in self.overlay
        previous = self.overlay.get(INPUT_VARIABLE)
        self.overlay[INPUT_VARIABLE] = self.input[mode.prefix_len:]
        try:
            self._execute(mode.command)
        finally:
            if had_input:
                self.overlay[INPUT_VARIABLE] = previous
            else:
                del self.overlay[INPUT_VARIABLE]

    def _enter_submenu(self, action: SubmenuAction) -> None:
        # Overrides of keys that already existed are put back once the
        # submenu is set up; only brand-new keys stay in the overlay.
        displaced: dict[str, str] = {}
        for key, value in action.variables.items():
            if key in self.overlay:
                displaced[key] = self.overlay[key]
            self.overlay[key] = value

        try:
            submenu = self.submenus.get(action.name)
        except SubmenuError as e:
            self._fail_with(e)
        else:
            self.prompt = submenu.prompt
            self.input = ""
            sub_action = submenu.action
            if isinstance(sub_action, ListAction):
                self.mode = ListMode(0, sub_action.items)
            elif isinstance(sub_action, PromptAction):
                self.mode = PromptMode(0, sub_action.command, sub_action.output)
            else:
                self._fail(
                    "submenus must be a list or a prompt. "
                    f"(encountered in submenu '{action.name}')"
                )

        self.overlay.update(displaced)

    def _launch_app(self, action: LaunchAppAction) -> None:
        if self.provider is None:
            self._fail(DISABLED_MESSAGE)
            return
        try:
            command = self.provider.command_for(action.path)
            self.executor.spawn(command.argv, overlay=self.overlay, cwd=command.cwd)
        except LaunchError as e:
            self._fail_with(e, "failed to launch app")
            return
        self.should_exit = True

    def _fail(self, message: str) -> None:
        logger.warning(f"Error: {message}")
        self.mode = ErrorMode(message)

    def _fail_with(self, error: Exception, context: str = "") -> None:
        self.mode = ErrorMode(log_exception(error, context))

    # === Preview ===

    def _update_preview(self) -> None:
        mode = self.mode
        if (
            isinstance(mode, PromptMode)
            and mode.output_mode == OutputMode.CONTINUOUS
            and len(self.input) > mode.prefix_len
        ):
            overlay = dict(self.overlay)
            overlay[INPUT_VARIABLE] = self.input[mode.prefix_len:]
            self.preview = self.executor.capture(mode.command, overlay)
        else:
            self.preview = None
