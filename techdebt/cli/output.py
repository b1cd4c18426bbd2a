"""Status lines printed around a report.

Reporters own the report body. This module prints the lines around it,
such as auto-fix progress and fatal errors. Color follows the NO_COLOR
convention (https://no-color.org/) unless `--no-color` decides it.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import TextIO

import click


def should_use_color(
    explicit_flag: bool | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Decide whether status lines are colored.

    An explicit flag wins. Otherwise NO_COLOR (any value, even empty)
    disables color, FORCE_COLOR enables it, and failing both the answer
    is whether `stream` (stdout by default) is a terminal.
    """
    if explicit_flag is not None:
        return explicit_flag
    if "NO_COLOR" in os.environ:
        return False
    if "FORCE_COLOR" in os.environ:
        return True

    target = stream if stream is not None else sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(isatty and isatty())


@dataclass
class OutputConfig:
    """Where status lines go and how they look."""

    use_color: bool = True
    quiet: bool = False
    verbose: bool = False
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    err_stream: TextIO = field(default_factory=lambda: sys.stderr)

    @classmethod
    def from_flags(
        cls,
        verbose: bool = False,
        quiet: bool = False,
        no_color: bool = False,
    ) -> OutputConfig:
        """Build the config from the scan/report command flags."""
        use_color = should_use_color(explicit_flag=False if no_color else None)
        return cls(use_color=use_color, quiet=quiet, verbose=verbose)


class OutputManager:
    """Prefixed status lines for the CLI.

    Example:
        >>> output = OutputManager(OutputConfig(use_color=False))
        >>> output.skip("prettier: not installed")
        [SKIP] prettier: not installed
    """

    # kind -> (colored prefix, plain prefix)
    PREFIXES = {
        "success": ("\033[92m✓\033[0m", "[OK]"),
        "warning": ("\033[93m⚠\033[0m", "[WARN]"),
        "info": ("\033[94mℹ\033[0m", "[INFO]"),
        "skip": ("\033[2m○\033[0m", "[SKIP]"),
    }

    def __init__(self, config: OutputConfig | None = None):
        self.config = config or OutputConfig()

    def _prefix(self, kind: str) -> str:
        colored, plain = self.PREFIXES[kind]
        return colored if self.config.use_color else plain

    def _status(self, kind: str, message: str) -> None:
        if self.config.quiet:
            return
        click.echo(f"{self._prefix(kind)} {message}", file=self.config.stream)

    def success(self, message: str) -> None:
        self._status("success", message)

    def warning(self, message: str) -> None:
        self._status("warning", message)

    def info(self, message: str) -> None:
        self._status("info", message)

    def skip(self, message: str) -> None:
        self._status("skip", message)

    def error(self, message: str) -> None:
        """Write an error line to the error stream; quiet mode doesn't apply."""
        click.echo(message, file=self.config.err_stream)
