"""Shared fixtures for the superspace tests."""

import io
import os

import pytest

from superspace.config import Config, SubmenuStore
from superspace.engine import CommandExecutor, State


SAMPLE_CONFIG = {
    "general": {"prompt": "Run", "search_apps": False},
    "variables": {"browser": "firefox", "term": "foot"},
    "commands": [
        {
            "prefix": "open",
            "description": "Open a file",
            "action": {"type": "exec", "command": ["xdg-open", "{{file}}"]},
        },
        {
            "prefix": "close",
            "description": "Close the launcher",
            "action": {"type": "exit"},
        },
        {
            "prefix": "web",
            "description": "Search the web",
            "action": {"type": "prompt", "command": ["{{browser}}", "--search", "{{INPUT}}"]},
        },
        {
            "prefix": "apps",
            "description": "Installed applications",
            "action": {"type": "list_applications"},
        },
        {
            "prefix": "power",
            "description": "Power menu",
            "action": {
                "type": "list",
                "items": [
                    {"name": "Lock", "action": {"type": "exec", "command": ["loginctl", "lock-session"]}},
                    {"name": "Reboot", "action": {"type": "exec", "command": ["systemctl", "reboot"]}},
                    {
                        "name": "Timer",
                        "action": {"type": "prompt", "command": ["sleep", "{{INPUT}}"]},
                    },
                ],
            },
        },
    ],
}


def _build_config(**overrides) -> Config:
    """Build a Config from SAMPLE_CONFIG with top-level keys replaced."""
    data = {**SAMPLE_CONFIG, **overrides}
    return Config.model_validate(data)


@pytest.fixture
def make_config():
    return _build_config


@pytest.fixture
def config():
    return _build_config()


@pytest.fixture
def install_programs(tmp_path, monkeypatch):
    """Put empty executables with the given names first on PATH."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def install(*names):
        for name in names:
            program = bin_dir / name
            program.write_text("#!/bin/sh\n")
            program.chmod(0o755)
        return bin_dir
    return install


@pytest.fixture
def report_stream():
    return io.StringIO()


@pytest.fixture
def make_state(tmp_path, report_stream):
    """Factory for cold-run states reading submenus from tmp_path."""
    def factory(config=None, apps=None, cold_run=True, **kwargs):
        config = config or _build_config()
        executor = CommandExecutor(config.variables, cold_run=cold_run, report_stream=report_stream)
        return State(
            config,
            apps,
            submenus=SubmenuStore(tmp_path),
            executor=executor,
            **kwargs,
        )
    return factory