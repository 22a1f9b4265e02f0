"""Command-line front door: argument parsing and the stdin/stdout loop."""

from superspace.cli.loop import dispatch_line, run_event_loop
from superspace.cli.main import build_parser, main

__all__ = ["build_parser", "dispatch_line", "main", "run_event_loop"]
