#!/usr/bin/env python3
"""CLI entry point for the launcher backend (superspace command).

Reads events from stdin and writes one JSON state per line to stdout, for a
front-end shell to display.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from superspace import __version__

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="superspace",
        description="Keystroke-driven launcher backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    superspace                          # Use ~/.config/superspace/config.yaml
    superspace -c menu.yaml             # Use another config file
    superspace -v browser=firefox       # Set a template variable
    superspace --cold-run               # Print commands instead of running them

Input protocol (one event per line on stdin):
    backspace       delete the last character
    enter           commit the current selection
    anything else   type the first character of the line
        """,
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Config file (default: ~/.config/superspace/config.yaml)"
    )
    parser.add_argument(
        "--var", "-v",
        dest="variables",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a template variable (repeatable)"
    )
    parser.add_argument(
        "--max-items", "-n",
        type=int,
        help="Maximum number of items the front-end should show"
    )
    parser.add_argument(
        "--cold-run",
        action="store_true",
        help="Report commands and variables on stderr instead of running them"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Append log records to this file"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the superspace CLI."""
    args = build_parser().parse_args(argv)

    # Import here to keep --help fast
    from superspace.apps import select_provider
    from superspace.cli.loop import run_event_loop
    from superspace.config import ConfigManager, SubmenuStore, apply_variable_overrides
    from superspace.core import SuperspaceError, configure_logging
    from superspace.engine import State, render_error

    configure_logging(verbose=args.verbose, log_file=args.log_file)

    manager = ConfigManager()
    config_path = args.config or manager.config_file

    try:
        config = manager.load(config_path)
        config = apply_variable_overrides(config, args.variables)
        provider = select_provider(config)
        apps = provider.list_apps() if provider.available else None
    except SuperspaceError as e:
        logger.error(f"Startup failed: {e}")
        print(render_error(str(e)), flush=True)
        return 1

    state = State(
        config,
        apps,
        provider=provider,
        submenus=SubmenuStore(config_path.parent),
        cold_run=args.cold_run,
        max_items=args.max_items,
    )
    try:
        run_event_loop(state, sys.stdin, sys.stdout)
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
