"""
Tests for the command-line entry point and the stdin event loop.
"""

import io
import json
import sys
from unittest.mock import MagicMock

import pytest

from superspace.cli import build_parser, dispatch_line, main, run_event_loop
from superspace.core import reset_logging


CONFIG_YAML = """\
general:
  prompt: Run
  search_apps: false
variables:
  browser: firefox
commands:
  - prefix: web
    description: Search the web
    action:
      type: prompt
      command: ["{{browser}}", "{{INPUT}}"]
  - prefix: close
    description: Close
    action: {type: exit}
"""


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    return path


def _lines(text):
    return [json.loads(line) for line in text.splitlines() if line]


# ============================================================================
# Event Loop Tests
# ============================================================================

class TestDispatchLine:
    """Tests for dispatch_line."""

    def test_backspace(self):
        state = MagicMock()
        dispatch_line(state, "backspace\n")
        state.process_delete.assert_called_once_with()

    def test_enter(self):
        state = MagicMock()
        dispatch_line(state, "enter\r\n")
        state.process_commit.assert_called_once_with()

    def test_character(self):
        """Test that other lines type their first character."""
        state = MagicMock()
        dispatch_line(state, "xyz\n")
        state.process_character.assert_called_once_with("x")

    def test_space(self):
        state = MagicMock()
        dispatch_line(state, " \n")
        state.process_character.assert_called_once_with(" ")

    def test_keyword_prefix_is_a_character(self):
        """Test that only the exact keywords are events."""
        state = MagicMock()
        dispatch_line(state, "entered\n")
        state.process_commit.assert_not_called()
        state.process_character.assert_called_once_with("e")


class TestRunEventLoop:
    """Tests for run_event_loop."""

    def test_renders_each_step_until_exit(self, make_state):
        """Test one render per event, stopping when the state exits."""
        state = make_state()
        stdout = io.StringIO()
        run_event_loop(state, io.StringIO("c\nl\nenter\nw\n"), stdout)

        messages = _lines(stdout.getvalue())
        assert len(messages) == 3
        assert messages[-1]["items"] == [{"prefix": "close", "description": "Close the launcher"}]
        assert state.should_exit is True

    def test_stops_at_end_of_input(self, make_state):
        """Test that closing stdin ends the loop."""
        state = make_state()
        stdout = io.StringIO()
        run_event_loop(state, io.StringIO("w\n"), stdout)
        assert len(_lines(stdout.getvalue())) == 2
        assert state.should_exit is False


# ============================================================================
# Entry Point Tests
# ============================================================================

class TestMain:
    """Tests for main()."""

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.config is None
        assert args.variables == []
        assert args.max_items is None
        assert args.cold_run is False

    def test_parser_repeated_variables(self):
        args = build_parser().parse_args(["-v", "a=1", "--var", "b=2", "-n", "10"])
        assert args.variables == ["a=1", "b=2"]
        assert args.max_items == 10

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "superspace" in capsys.readouterr().out

    def test_cold_run_session(self, config_file, monkeypatch, capsys):
        """Test a full session from typed keys to the reported command."""
        monkeypatch.setattr(sys, "stdin", io.StringIO("w\n \nc\na\nt\nenter\n"))

        code = main(["-c", str(config_file), "--cold-run", "-v", "browser=lynx"])
        captured = capsys.readouterr()

        assert code == 0
        messages = _lines(captured.out)
        assert messages[0]["type"] == "main_menu"
        assert messages[-1] == {"type": "prompt", "input": "web cat", "prefix": "web ", "prompt": "Run"}

        report = json.loads(captured.err.strip().splitlines()[-1])
        assert report["command"] == ["lynx", "cat"]
        assert report["variables"] == {"browser": "lynx"}

    def test_missing_config(self, tmp_path, capsys):
        """Test that a missing config file is reported and exits 1."""
        code = main(["-c", str(tmp_path / "nope.yaml")])
        assert code == 1
        assert _lines(capsys.readouterr().out) == [
            {"type": "error", "message": "failed to find config file."}
        ]

    def test_discovery_failure(self, tmp_path, monkeypatch, capsys):
        """Test that failing app discovery stops startup."""
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML.replace("search_apps: false", "search_apps: true"))
        monkeypatch.delenv("XDG_DATA_DIRS", raising=False)

        assert main(["-c", str(path)]) == 1
        assert _lines(capsys.readouterr().out)[0]["message"] == "no applications found."

    def test_submenus_next_to_config(self, config_file, monkeypatch, capsys):
        """Test that submenus are read from the config file's directory."""
        config_file.write_text(CONFIG_YAML + (
            "  - prefix: tools\n"
            "    description: Tools\n"
            "    action: {type: submenu, name: tools}\n"
        ))
        (config_file.parent / "tools.yaml").write_text("prompt: Tools\ntype: prompt\ncommand: [echo]\n")
        monkeypatch.setattr(sys, "stdin", io.StringIO("t\no\n \n"))

        assert main(["-c", str(config_file), "--cold-run"]) == 0
        last = _lines(capsys.readouterr().out)[-1]
        assert last == {"type": "prompt", "input": "", "prefix": "", "prompt": "Tools"}

    def test_log_file(self, config_file, tmp_path, monkeypatch, capsys):
        """Test that --log-file receives diagnostics."""
        log_file = tmp_path / "superspace.log"
        monkeypatch.setattr(sys, "stdin", io.StringIO(""))

        assert main(["-c", str(config_file), "--log-file", str(log_file)]) == 0
        reset_logging()
        assert "Loaded 2 commands" in log_file.read_text()
