"""
Command template expansion and process execution.

Templates are lists of literal arguments with ``{{name}}`` placeholders.
Expansion never goes through a shell: the result is always used as an
argument vector, so variable values cannot inject extra commands.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence, TextIO

from superspace.core.exceptions import LaunchError

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def expand_template(
    template: Sequence[str],
    overlay: Mapping[str, str],
    variables: Mapping[str, str],
) -> list[str]:
    """Resolve ``{{name}}`` placeholders in every template argument.

    Names resolve against overlay first, then variables, then to "".
    """
    def resolve(match: re.Match) -> str:
        name = match.group(1)
        if name in overlay:
            return overlay[name]
        return variables.get(name, "")

    return [PLACEHOLDER_RE.sub(resolve, arg) for arg in template]


@dataclass
class ColdRun:
    """What a cold run would have executed."""
    command: list[str]
    template: list[str]
    variables: dict[str, str] = field(default_factory=dict)
    overrides: dict[str, str] = field(default_factory=dict)
    cwd: Optional[str] = None


class CommandExecutor:
    """Runs expanded command templates.

    In cold-run mode nothing is executed: the would-be command and the
    variable state are written to ``report_stream`` (stderr by default) and
    kept as ``last_cold_run``.
    """

    def __init__(
        self,
        variables: Mapping[str, str],
        cold_run: bool = False,
        report_stream: Optional[TextIO] = None,
    ):
        self.variables = variables
        self.cold_run = cold_run
        self.report_stream = report_stream
        self.last_cold_run: Optional[ColdRun] = None

    def expand(self, template: Sequence[str], overlay: Mapping[str, str]) -> list[str]:
        return expand_template(template, overlay, self.variables)

    def run_detached(self, template: Sequence[str], overlay: Mapping[str, str]) -> None:
        """Expand a template and start it without waiting.

        Raises:
            LaunchError: The process could not be spawned.
        """
        self.spawn(self.expand(template, overlay), template=template, overlay=overlay)

    def spawn(
        self,
        argv: Sequence[str],
        template: Optional[Sequence[str]] = None,
        overlay: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> None:
        """Start argv detached with null standard streams.

        Args:
            argv: Ready-made argument vector.
            template: Template argv was expanded from, for cold-run reports.
            overlay: Overlay used for the expansion, for cold-run reports.
            cwd: Working directory of the new process.

        Raises:
            LaunchError: The process could not be spawned.
        """
        if self.cold_run:
            self._report(argv, template if template is not None else argv, overlay or {}, cwd)
            return
        if not argv:
            logger.warning("Empty command, nothing to run")
            return

        logger.info(f"Spawning {list(argv)}")
        try:
            subprocess.Popen(
                list(argv),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
                cwd=cwd,
            )
        except (OSError, ValueError) as e:
            raise LaunchError(str(e)) from e

    def capture(self, template: Sequence[str], overlay: Mapping[str, str]) -> Optional[str]:
        """Run a template synchronously and return its stdout.

        Trailing whitespace is stripped. Any failure yields None; a preview
        is never worth an error screen.
        """
        if self.cold_run:
            return None
        argv = self.expand(template, overlay)
        if not argv:
            return None

        try:
            result = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Preview command {argv} failed: {e}")
            return None
        return result.stdout.rstrip()

    def _report(
        self,
        argv: Sequence[str],
        template: Sequence[str],
        overlay: Mapping[str, str],
        cwd: Optional[Path] = None,
    ) -> None:
        report = ColdRun(
            command=list(argv),
            template=list(template),
            variables=dict(self.variables),
            overrides=dict(overlay),
            cwd=str(cwd) if cwd is not None else None,
        )
        self.last_cold_run = report
        logger.info(f"Cold run: {report.command}")

        stream = self.report_stream or sys.stderr
        print(json.dumps(asdict(report), ensure_ascii=False), file=stream)
