"""Auto-fix support for `techdebt scan --fix`.

Runs the safe, formatter-style fixers that are enabled in the `autoFix`
config section and installed on PATH. Fixers only ever see files that
the collector already accepted, so excluded directories are never
rewritten. A fixer failure is logged and reported; it never affects the
scan's exit code.
"""

import logging
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .capabilities import DEFAULT_TIMEOUT, run_tool
from .config import AutoFixConfig
from .errors import OptionalCollaboratorUnavailable
from .rules.base import SourceFile

logger = logging.getLogger(__name__)

# Files per fixer invocation, to stay well under OS argument limits
BATCH_SIZE = 200

SCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")


class FixStatus(Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class FixTool:
    """An external fixer: command prefix and the extensions it accepts."""

    name: str
    command: tuple[str, ...]
    extensions: tuple[str, ...]


@dataclass
class FixResult:
    """Outcome of one fixer over the collected files."""

    tool: str
    status: FixStatus
    files: int = 0
    detail: str | None = None


FIX_TOOLS = {
    "eslint": FixTool("eslint", ("eslint", "--fix"), SCRIPT_EXTENSIONS),
    "prettier": FixTool("prettier", ("prettier", "--write"), SCRIPT_EXTENSIONS),
    "ruff": FixTool("ruff", ("ruff", "check", "--fix"), (".py",)),
}


class AutoFixer:
    """Runs enabled fixers over the collected files.

    Example usage:
        fixer = AutoFixer(root, config.auto_fix)
        for result in fixer.run(files):
            print(result.tool, result.status.value)
    """

    def __init__(
        self,
        root: Path,
        config: AutoFixConfig,
        timeout: float = DEFAULT_TIMEOUT,
        which: Callable[[str], str | None] = shutil.which,
        runner: Callable[..., object] = run_tool,
    ):
        self.root = root
        self.config = config
        self.timeout = timeout
        self._which = which
        self._runner = runner

    def enabled_tools(self) -> list[FixTool]:
        return [tool for name, tool in FIX_TOOLS.items() if getattr(self.config, name)]

    def run(self, files: Sequence[SourceFile]) -> list[FixResult]:
        return [self._run_tool(tool, files) for tool in self.enabled_tools()]

    def _run_tool(self, tool: FixTool, files: Sequence[SourceFile]) -> FixResult:
        targets = [f.relative for f in files if f.suffix in tool.extensions]
        if not targets:
            return FixResult(tool.name, FixStatus.SKIPPED, detail="no matching files")
        if self._which(tool.command[0]) is None:
            logger.debug(f"{tool.name} not found on PATH; skipping auto-fix")
            return FixResult(tool.name, FixStatus.SKIPPED, detail="not installed")

        logger.info(f"Running {' '.join(tool.command)} on {len(targets)} files")
        failures = 0
        for start in range(0, len(targets), BATCH_SIZE):
            batch = targets[start : start + BATCH_SIZE]
            try:
                result = self._runner([*tool.command, *batch], self.root, self.timeout)
            except OptionalCollaboratorUnavailable as e:
                logger.warning(f"Auto-fix with {tool.name} failed: {e.message}")
                return FixResult(tool.name, FixStatus.FAILED, len(targets), e.message)
            # Linters exit nonzero when unfixable problems remain
            if getattr(result, "returncode", 0) != 0:
                failures += 1

        if failures:
            detail = f"{failures} batch(es) reported remaining problems"
            logger.debug(f"{tool.name}: {detail}")
            return FixResult(tool.name, FixStatus.APPLIED, len(targets), detail)
        return FixResult(tool.name, FixStatus.APPLIED, len(targets))
