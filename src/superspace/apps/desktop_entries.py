"""Discovery of installed applications from freedesktop ``.desktop`` entries."""
from __future__ import annotations

import configparser
import logging
import os
import re
import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from superspace.config.models import AppItem, LaunchAppAction
from superspace.core.exceptions import AppDiscoveryError, LaunchError

logger = logging.getLogger(__name__)

DESKTOP_SECTION = "Desktop Entry"

# %f %u %F %U and the deprecated codes expand to nothing
_FIELD_CODE_RE = re.compile(r"%(.)")

# Emulators tried for Terminal=true entries, with the arguments that
# precede the wrapped command
TERMINALS = (
    ("xdg-terminal-exec", []),
    ("x-terminal-emulator", ["-e"]),
    ("foot", []),
    ("kitty", []),
    ("alacritty", ["-e"]),
    ("gnome-terminal", ["--"]),
    ("konsole", ["-e"]),
    ("xterm", ["-e"]),
)


@dataclass(frozen=True)
class AppCommand:
    """Argument vector and working directory that launch an application."""
    argv: list[str]
    cwd: Optional[Path] = None


def read_desktop_entry(path: Path) -> dict[str, str]:
    """Parse the ``[Desktop Entry]`` group of a desktop file.

    Raises:
        OSError, UnicodeDecodeError, configparser.Error: unreadable file.
        KeyError: the file has no ``[Desktop Entry]`` group.
    """
    parser = configparser.RawConfigParser(strict=False, interpolation=None, delimiters=("=",))
    parser.optionxform = str  # keys are case-sensitive
    with open(path, encoding="utf-8") as f:
        parser.read_file(f)
    return dict(parser[DESKTOP_SECTION])


def locale_variants() -> list[str]:
    """Locale suffixes to try for localized keys, most specific first.

    ``de_DE.UTF-8@euro`` yields ``de_DE@euro``, ``de_DE``, ``de@euro``, ``de``.
    """
    value = ""
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var, "")
        if value:
            break

    lang, _, modifier = value.partition("@")
    lang = lang.split(".", 1)[0]
    if not lang or lang in ("C", "POSIX"):
        return []

    base, _, country = lang.partition("_")
    variants = []
    if country and modifier:
        variants.append(f"{base}_{country}@{modifier}")
    if country:
        variants.append(f"{base}_{country}")
    if modifier:
        variants.append(f"{base}@{modifier}")
    variants.append(base)
    return variants


def localized(entry: dict[str, str], key: str) -> Optional[str]:
    """Value of key for the current locale, falling back to the plain key."""
    for variant in locale_variants():
        value = entry.get(f"{key}[{variant}]")
        if value:
            return value
    return entry.get(key)


def _is_true(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() == "true"


def _unusable_reason(entry: dict[str, str]) -> Optional[str]:
    """Why entry is not a launchable, installed application, or None."""
    if entry.get("Type") != "Application":
        return "not an application"
    if _is_true(entry.get("Hidden")):
        return "hidden"
    if not entry.get("Name"):
        return "missing Name"

    exec_line = entry.get("Exec")
    if not exec_line:
        return "missing Exec"
    try_exec = entry.get("TryExec")
    if try_exec and shutil.which(try_exec) is None:
        return f"{try_exec} is not installed"
    try:
        args = shlex.split(exec_line)
    except ValueError as e:
        return f"invalid Exec line: {e}"
    if not args:
        return "empty Exec line"
    if shutil.which(args[0]) is None:
        return f"{args[0]} is not installed"
    return None


def _expand_field_codes(args: list[str], entry: dict[str, str], path: Path) -> list[str]:
    """Replace desktop-entry field codes in an already split Exec line."""
    def substitute(match: re.Match) -> str:
        code = match.group(1)
        if code == "%":
            return "%"
        if code == "c":
            return localized(entry, "Name") or ""
        if code == "k":
            return str(path)
        return ""

    argv: list[str] = []
    for arg in args:
        if arg == "%i":
            icon = entry.get("Icon")
            if icon:
                argv.extend(["--icon", icon])
            continue
        expanded = _FIELD_CODE_RE.sub(substitute, arg)
        if expanded or not _FIELD_CODE_RE.search(arg):
            argv.append(expanded)
    return argv


def terminal_command() -> list[str]:
    """Command prefix that runs a program inside a terminal emulator.

    Raises:
        LaunchError: No known terminal emulator is installed.
    """
    for name, args in TERMINALS:
        if shutil.which(name):
            return [name, *args]
    raise LaunchError("no terminal emulator found")


class DesktopEntryProvider:
    """Application provider backed by ``$XDG_DATA_DIRS/*/applications``.

    Entries are listed only when they describe an installed application:
    ``Type=Application``, not ``Hidden``, with ``TryExec`` and the ``Exec``
    program found on PATH.
    """

    available = True

    def __init__(self, data_dirs: Optional[str] = None):
        """Initialize the provider.

        Args:
            data_dirs: Colon-separated data directories. Defaults to the
                ``XDG_DATA_DIRS`` environment variable.
        """
        self.data_dirs = data_dirs

    def application_dirs(self) -> list[Path]:
        data_dirs = self.data_dirs
        if data_dirs is None:
            data_dirs = os.environ.get("XDG_DATA_DIRS")
        if data_dirs is None:
            raise AppDiscoveryError("no applications found.")
        return [Path(d) / "applications" for d in data_dirs.split(":") if d]

    def list_apps(self) -> list[AppItem]:
        """Enumerate launchable applications.

        Unreadable directories and broken entries are skipped; one bad file
        never hides the rest.

        Raises:
            AppDiscoveryError: No data directories are configured.
        """
        items: list[AppItem] = []
        for app_dir in self.application_dirs():
            try:
                files = sorted(app_dir.iterdir())
            except OSError:
                continue

            for path in files:
                if path.suffix != ".desktop":
                    continue
                try:
                    entry = read_desktop_entry(path)
                except (OSError, UnicodeDecodeError, configparser.Error, KeyError) as e:
                    logger.warning(f"Skipped {path}: {e}")
                    continue

                reason = _unusable_reason(entry)
                if reason is not None:
                    logger.debug(f"Skipped {path}: {reason}")
                    continue

                items.append(AppItem(
                    name=localized(entry, "Name"),
                    action=LaunchAppAction(path=path),
                ))

        logger.info(f"Discovered {len(items)} applications")
        return items

    def command_for(self, path: Path) -> AppCommand:
        """Build the command that launches a desktop entry.

        ``Terminal=true`` entries are wrapped in a terminal emulator and
        ``Path`` becomes the working directory.

        Raises:
            LaunchError: The entry is unreadable or not a usable application.
        """
        try:
            entry = read_desktop_entry(path)
        except (OSError, UnicodeDecodeError, configparser.Error, KeyError) as e:
            raise LaunchError(f"cannot read {path}: {e}") from e

        reason = _unusable_reason(entry)
        if reason is not None:
            raise LaunchError(f"{path}: {reason}")

        argv = _expand_field_codes(shlex.split(entry["Exec"]), entry, path)
        if _is_true(entry.get("Terminal")):
            argv = terminal_command() + argv

        work_dir = entry.get("Path")
        return AppCommand(argv=argv, cwd=Path(work_dir) if work_dir else None)
