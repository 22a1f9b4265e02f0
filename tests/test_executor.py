"""
Tests for template expansion and command execution.
"""

import io
import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from superspace.core import LaunchError
from superspace.engine import CommandExecutor, expand_template


# ============================================================================
# Template Expansion Tests
# ============================================================================

class TestExpandTemplate:
    """Tests for expand_template."""

    def test_overlay_wins(self):
        """Test that overlay values shadow global variables."""
        argv = expand_template(["{{x}}"], {"x": "local"}, {"x": "global"})
        assert argv == ["local"]

    def test_falls_back_to_variables(self):
        """Test lookup in global variables."""
        argv = expand_template(["{{browser}}", "--new"], {}, {"browser": "firefox"})
        assert argv == ["firefox", "--new"]

    def test_missing_is_empty(self):
        """Test that unknown names expand to the empty string."""
        assert expand_template(["a{{nope}}b"], {}, {}) == ["ab"]

    def test_several_placeholders_in_one_argument(self):
        """Test mixed literal text and placeholders."""
        argv = expand_template(["{{a}}-{{b}}.txt"], {"a": "1"}, {"b": "2"})
        assert argv == ["1-2.txt"]

    def test_values_stay_one_argument(self):
        """Test that values with spaces or shell syntax are never split."""
        argv = expand_template(["echo", "{{INPUT}}"], {"INPUT": "a b; rm -rf ~"}, {})
        assert argv == ["echo", "a b; rm -rf ~"]

    def test_values_not_reexpanded(self):
        """Test that placeholder syntax inside a value is kept literally."""
        argv = expand_template(["{{INPUT}}"], {"INPUT": "{{secret}}"}, {"secret": "x"})
        assert argv == ["{{secret}}"]

    def test_unbalanced_braces_literal(self):
        """Test that text not matching the placeholder form is untouched."""
        assert expand_template(["{{x}", "{x}}"], {"x": "1"}, {}) == ["{{x}", "{x}}"]


# ============================================================================
# Detached Execution Tests
# ============================================================================

class TestSpawn:
    """Tests for detached execution."""

    def test_spawn_uses_argv(self):
        """Test that the expanded argv is passed to Popen without a shell."""
        executor = CommandExecutor({"browser": "firefox"})
        with patch("superspace.engine.executor.subprocess.Popen") as popen:
            executor.run_detached(["{{browser}}", "{{INPUT}}"], {"INPUT": "cats"})

        popen.assert_called_once()
        args, kwargs = popen.call_args
        assert args[0] == ["firefox", "cats"]
        assert kwargs["stdin"] is subprocess.DEVNULL
        assert kwargs["stdout"] is subprocess.DEVNULL
        assert kwargs["stderr"] is subprocess.DEVNULL
        assert kwargs["start_new_session"] is True
        assert "shell" not in kwargs
        assert kwargs["cwd"] is None

    def test_spawn_in_directory(self, tmp_path):
        """Test that the working directory is handed to Popen."""
        executor = CommandExecutor({})
        with patch("superspace.engine.executor.subprocess.Popen") as popen:
            executor.spawn(["foot"], cwd=tmp_path)
        assert popen.call_args.kwargs["cwd"] == tmp_path

    def test_spawn_failure(self):
        """Test that spawn errors become LaunchError."""
        executor = CommandExecutor({})
        with patch(
            "superspace.engine.executor.subprocess.Popen",
            side_effect=FileNotFoundError("No such file or directory: 'nope'"),
        ):
            with pytest.raises(LaunchError, match="No such file"):
                executor.run_detached(["nope"], {})

    def test_empty_command(self):
        """Test that an empty template runs nothing."""
        executor = CommandExecutor({})
        with patch("superspace.engine.executor.subprocess.Popen") as popen:
            executor.run_detached([], {})
        popen.assert_not_called()


class TestColdRun:
    """Tests for cold-run reporting."""

    def test_reports_instead_of_running(self):
        """Test that cold run writes a JSON report and spawns nothing."""
        stream = io.StringIO()
        executor = CommandExecutor({"browser": "firefox"}, cold_run=True, report_stream=stream)
        with patch("superspace.engine.executor.subprocess.Popen") as popen:
            executor.run_detached(["{{browser}}", "{{INPUT}}"], {"INPUT": "cats"})
        popen.assert_not_called()

        report = json.loads(stream.getvalue())
        assert report == {
            "command": ["firefox", "cats"],
            "template": ["{{browser}}", "{{INPUT}}"],
            "variables": {"browser": "firefox"},
            "overrides": {"INPUT": "cats"},
            "cwd": None,
        }
        assert executor.last_cold_run.command == ["firefox", "cats"]

    def test_report_is_a_snapshot(self):
        """Test that later overlay changes do not alter the report."""
        executor = CommandExecutor({}, cold_run=True, report_stream=io.StringIO())
        overlay = {"INPUT": "one"}
        executor.run_detached(["{{INPUT}}"], overlay)
        overlay["INPUT"] = "two"
        assert executor.last_cold_run.overrides == {"INPUT": "one"}

    def test_spawn_without_template(self):
        """Test reporting a ready-made argv."""
        executor = CommandExecutor({}, cold_run=True, report_stream=io.StringIO())
        executor.spawn(["foot"])
        assert executor.last_cold_run.command == ["foot"]
        assert executor.last_cold_run.template == ["foot"]

    def test_reports_working_directory(self, tmp_path):
        """Test that the working directory appears in the report."""
        stream = io.StringIO()
        executor = CommandExecutor({}, cold_run=True, report_stream=stream)
        executor.spawn(["foot"], cwd=tmp_path)
        assert json.loads(stream.getvalue())["cwd"] == str(tmp_path)

    def test_capture_disabled(self):
        """Test that previews never run in cold run."""
        executor = CommandExecutor({}, cold_run=True, report_stream=io.StringIO())
        with patch("superspace.engine.executor.subprocess.run") as run:
            assert executor.capture(["date"], {}) is None
        run.assert_not_called()


# ============================================================================
# Capture Tests
# ============================================================================

class TestCapture:
    """Tests for synchronous capture used by previews."""

    def test_returns_stdout_trimmed(self):
        """Test that trailing whitespace is removed."""
        executor = CommandExecutor({})
        result = MagicMock(stdout="  42\n\n")
        with patch("superspace.engine.executor.subprocess.run", return_value=result) as run:
            assert executor.capture(["qalc", "{{INPUT}}"], {"INPUT": "6*7"}) == "  42"

        args, kwargs = run.call_args
        assert args[0] == ["qalc", "6*7"]
        assert kwargs["stdout"] is subprocess.PIPE
        assert kwargs["stdin"] is subprocess.DEVNULL

    def test_failure_yields_none(self):
        """Test that a failing preview command yields no output."""
        executor = CommandExecutor({})
        with patch("superspace.engine.executor.subprocess.run", side_effect=OSError("boom")):
            assert executor.capture(["nope"], {}) is None

    def test_empty_template(self):
        """Test that an empty template yields no output."""
        assert CommandExecutor({}).capture([], {}) is None
