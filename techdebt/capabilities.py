"""Capabilities wrapping optional external tools.

Each capability has a "not available" variant so rules never branch on
whether git or npm is installed. Every call is bounded by a timeout, and
any failure surfaces as OptionalCollaboratorUnavailable, which the calling
rule turns into "no finding".
"""

import json
import logging
import re
import shutil
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from .errors import OptionalCollaboratorUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


def run_tool(
    args: list[str],
    cwd: Path,
    timeout: float = DEFAULT_TIMEOUT,
) -> subprocess.CompletedProcess:
    """Run an external tool with a timeout.

    Args:
        args: Command line, tool name first
        cwd: Working directory
        timeout: Seconds before the call is abandoned

    Returns:
        The completed process; a nonzero return code is not an error here

    Raises:
        OptionalCollaboratorUnavailable: If the tool is missing, can't be
            started or times out
    """
    tool = args[0]
    try:
        return subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            text=True,
            # blame output embeds file contents, which need not be UTF-8
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise OptionalCollaboratorUnavailable(tool, "not installed") from e
    except subprocess.TimeoutExpired as e:
        raise OptionalCollaboratorUnavailable(tool, f"timed out after {timeout}s") from e
    except OSError as e:
        raise OptionalCollaboratorUnavailable(tool, str(e)) from e


# =============================================================================
# Blame (marker age)
# =============================================================================


class BlameSource(ABC):
    """Supplies last-modified timestamps for the lines of a file."""

    available: bool = True

    @abstractmethod
    def line_times(self, path: Path) -> Mapping[int, int]:
        """Map 1-indexed line numbers to unix author timestamps.

        Lines without an annotation are simply absent.

        Raises:
            OptionalCollaboratorUnavailable: If the source can't answer
        """


class NoBlame(BlameSource):
    """Blame source used when git is missing or the root isn't a repo."""

    available = False

    def line_times(self, path: Path) -> Mapping[int, int]:
        raise OptionalCollaboratorUnavailable("git", "no repository")


class GitBlame(BlameSource):
    """Blame annotations from `git blame --line-porcelain`."""

    HEADER_PATTERN = re.compile(r"^[0-9a-f]{40} \d+ (\d+)")

    def __init__(self, root: Path, timeout: float = DEFAULT_TIMEOUT):
        self.root = root
        self.timeout = timeout

    @classmethod
    def detect(cls, root: Path, timeout: float = DEFAULT_TIMEOUT) -> BlameSource:
        """Return a GitBlame if `root` is inside a git work tree, else NoBlame."""
        if shutil.which("git") is None:
            logger.debug("git not found; marker ages will be omitted")
            return NoBlame()
        try:
            result = run_tool(["git", "rev-parse", "--git-dir"], root, timeout)
        except OptionalCollaboratorUnavailable as e:
            logger.debug(f"Blame disabled: {e.message}")
            return NoBlame()
        if result.returncode != 0:
            logger.debug(f"{root} is not a git repository; marker ages omitted")
            return NoBlame()
        return cls(root, timeout)

    def line_times(self, path: Path) -> Mapping[int, int]:
        result = run_tool(
            ["git", "blame", "--line-porcelain", "--", path.name],
            path.parent,
            self.timeout,
        )
        if result.returncode != 0:
            # Untracked or ignored file
            return {}
        return self.parse_porcelain(result.stdout)

    @classmethod
    def parse_porcelain(cls, output: str) -> dict[int, int]:
        """Extract `{final_line: author_time}` from line-porcelain output."""
        times: dict[int, int] = {}
        current_line: int | None = None
        for raw in output.splitlines():
            header = cls.HEADER_PATTERN.match(raw)
            if header:
                current_line = int(header.group(1))
            elif raw.startswith("author-time ") and current_line is not None:
                try:
                    times[current_line] = int(raw.split(" ", 1)[1])
                except ValueError:
                    continue
        return times


# =============================================================================
# Dependency audit
# =============================================================================


class DependencyAuditor(ABC):
    """Answers dependency-health questions about a project root."""

    manifest_name = "package.json"
    available: bool = True

    def has_manifest(self, root: Path) -> bool:
        return (root / self.manifest_name).is_file()

    @abstractmethod
    def outdated_count(self, root: Path) -> int:
        """Number of outdated direct dependencies.

        Raises:
            OptionalCollaboratorUnavailable: If the tool can't answer
        """

    @abstractmethod
    def vulnerability_count(self, root: Path) -> int:
        """Total number of known vulnerabilities.

        Raises:
            OptionalCollaboratorUnavailable: If the tool can't answer
        """


class NoAuditor(DependencyAuditor):
    """Auditor used when the package manager is not installed."""

    available = False

    def outdated_count(self, root: Path) -> int:
        raise OptionalCollaboratorUnavailable("npm", "not installed")

    def vulnerability_count(self, root: Path) -> int:
        raise OptionalCollaboratorUnavailable("npm", "not installed")


class NpmAuditor(DependencyAuditor):
    """Dependency health from `npm outdated` and `npm audit`."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @classmethod
    def detect(cls, timeout: float = DEFAULT_TIMEOUT) -> DependencyAuditor:
        if shutil.which("npm") is None:
            logger.debug("npm not found; dependency checks disabled")
            return NoAuditor()
        return cls(timeout)

    def _run_json(self, args: list[str], root: Path) -> object:
        # npm exits nonzero when it finds something, so only stdout matters
        result = run_tool(args, root, self.timeout)
        output = result.stdout.strip()
        if not output:
            return {}
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise OptionalCollaboratorUnavailable(
                "npm", f"unparsable output from '{' '.join(args)}'"
            ) from e

    def outdated_count(self, root: Path) -> int:
        data = self._run_json(["npm", "outdated", "--json"], root)
        if not isinstance(data, dict):
            raise OptionalCollaboratorUnavailable("npm", "unexpected outdated report")
        if "error" in data:
            raise OptionalCollaboratorUnavailable("npm", "outdated check failed")
        return len(data)

    def vulnerability_count(self, root: Path) -> int:
        data = self._run_json(["npm", "audit", "--json"], root)
        if not isinstance(data, dict):
            raise OptionalCollaboratorUnavailable("npm", "unexpected audit report")
        if "error" in data:
            raise OptionalCollaboratorUnavailable("npm", "audit failed")
        total = data.get("metadata", {}).get("vulnerabilities", {}).get("total", 0)
        try:
            return int(total)
        except (TypeError, ValueError) as e:
            raise OptionalCollaboratorUnavailable("npm", "unexpected audit total") from e
