"""
Base classes and types for the tech-debt rule engine.

This module provides the foundational abstractions shared by every
detection rule: severities, finding kinds, immutable findings, the
read-only scan context, and the rule base classes.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..errors import InvalidConfigError, RuleExecutionError

if TYPE_CHECKING:
    from ..capabilities import BlameSource, DependencyAuditor
    from ..config import ScanConfig

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Severity levels for tech-debt findings."""

    CRITICAL = "critical"  # Must fix before merge
    HIGH = "high"  # Fix this sprint
    MEDIUM = "medium"  # Technical debt backlog
    LOW = "low"  # Nice to have

    @property
    def rank(self) -> int:
        return SEVERITY_ORDER.index(self)

    def __lt__(self, other: "Severity") -> bool:
        return self.rank < other.rank

    def __le__(self, other: "Severity") -> bool:
        return self.rank <= other.rank

    def __gt__(self, other: "Severity") -> bool:
        return self.rank > other.rank

    def __ge__(self, other: "Severity") -> bool:
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Parse a threshold level such as `high` (case-insensitive).

        Raises:
            InvalidConfigError: If the value is not a known level
        """
        try:
            return cls(value.lower())
        except (ValueError, AttributeError):
            raise InvalidConfigError(
                f"Invalid threshold level '{value}'",
                suggestion="Valid levels: critical, high, medium, low",
            ) from None


# Weakest to strongest
SEVERITY_ORDER = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]


class FindingKind(Enum):
    """What a finding is about. Declaration order is report order."""

    FILE_SIZE = "file_size"
    DEAD_CODE = "dead_code"
    MARKER = "marker"
    TYPE_GAP = "type_gap"
    DEPENDENCY = "dependency"
    DUPLICATE = "duplicate"

    @property
    def order(self) -> int:
        return list(FindingKind).index(self)


@dataclass(frozen=True)
class Location:
    """File path relative to the scanned root, with an optional line range."""

    path: str
    line: int | None = None
    end_line: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return self.path
        if self.end_line is not None and self.end_line != self.line:
            return f"{self.path}:{self.line}-{self.end_line}"
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class Finding:
    """One reported issue. Immutable once created."""

    kind: FindingKind
    severity: Severity
    location: Location
    message: str
    suggestion: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.name,
            "severity": self.severity.value,
            "location": str(self.location),
            "path": self.location.path,
            "line": self.location.line,
            "end_line": self.location.end_line,
            "message": self.message,
            "suggestion": self.suggestion,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class SourceFile:
    """A collected file: absolute path plus its root-relative posix form."""

    path: Path
    relative: str

    @property
    def suffix(self) -> str:
        return self.path.suffix.lower()

    def read_lines(self) -> list[str]:
        """Read the file as a list of lines without line terminators.

        Only LF, CRLF and CR end a line (read_text normalizes them to LF).
        Form feeds and the other breaks `str.splitlines` knows stay in the text.
        """
        text = self.path.read_text(encoding="utf-8", errors="replace")
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return lines


@dataclass(frozen=True)
class ScanContext:
    """Read-only input shared by every rule in one run."""

    root: Path
    files: tuple[SourceFile, ...]
    config: "ScanConfig"
    blame: "BlameSource"
    auditor: "DependencyAuditor"

    def files_for(self, extensions: Iterable[str] | None) -> list[SourceFile]:
        """Files whose extension is in `extensions` (all files if None)."""
        if extensions is None:
            return list(self.files)
        wanted = set(extensions)
        return [f for f in self.files if f.suffix in wanted]


class BaseRule(ABC):
    """Abstract base class for all detection rules."""

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier (e.g., 'TECH_DEBT.FILE_SIZE')."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable rule name."""

    @property
    @abstractmethod
    def kind(self) -> FindingKind:
        """Kind of finding this rule produces."""

    @property
    @abstractmethod
    def default_severity(self) -> Severity:
        """Default severity level for findings from this rule."""

    @property
    def extensions(self) -> Sequence[str] | None:
        """File extensions this rule inspects. None = every collected file."""
        return None

    @abstractmethod
    def check(self, context: ScanContext) -> list[Finding]:
        """Run the rule over the scan context and return findings.

        Args:
            context: ScanContext with the collected files and collaborators

        Returns:
            List of Finding objects in discovery order.
        """

    def _create_finding(
        self,
        message: str,
        path: str,
        line: int | None = None,
        end_line: int | None = None,
        suggestion: str | None = None,
        metadata: Mapping[str, Any] | None = None,
        severity: Severity | None = None,
    ) -> Finding:
        """Helper to create a Finding with this rule's kind and severity."""
        return Finding(
            kind=self.kind,
            severity=severity or self.default_severity,
            location=Location(path=path, line=line, end_line=end_line),
            message=message,
            suggestion=suggestion,
            metadata=metadata or {},
        )

    def _skip_file(self, source: SourceFile, exc: Exception) -> None:
        """Log a failure scoped to one file; the caller moves on to the next."""
        error = RuleExecutionError(self.rule_id, str(exc), source.relative)
        if isinstance(exc, OSError):
            logger.warning(f"Skipping unreadable file: {error}")
        else:
            logger.warning(f"Skipping {source.relative} after {type(exc).__name__}: {error}")


class FileRule(BaseRule):
    """A rule that inspects each file independently.

    Files are visited in collection order. A file that can't be read, or
    that makes `check_file` raise, is logged and skipped; the rule carries
    on with the rest. Heuristics that must be bounded declare a cap per
    `heuristic` metadata value, and only the first findings up to that cap
    are kept.
    """

    def caps(self, config: "ScanConfig") -> dict[str, int]:
        """Maximum number of findings per heuristic for one run."""
        return {}

    @abstractmethod
    def check_file(
        self, source: SourceFile, lines: list[str], context: ScanContext
    ) -> list[Finding]:
        """Inspect one file's lines."""

    def check(self, context: ScanContext) -> list[Finding]:
        findings: list[Finding] = []
        for source in context.files_for(self.extensions):
            try:
                lines = source.read_lines()
                findings.extend(self.check_file(source, lines, context))
            except Exception as e:
                self._skip_file(source, e)
        return self._apply_caps(findings, self.caps(context.config))

    @staticmethod
    def _apply_caps(findings: list[Finding], caps: dict[str, int]) -> list[Finding]:
        if not caps:
            return findings
        used: dict[str, int] = {}
        kept = []
        for finding in findings:
            heuristic = finding.metadata.get("heuristic")
            if heuristic in caps:
                if used.get(heuristic, 0) >= caps[heuristic]:
                    continue
                used[heuristic] = used.get(heuristic, 0) + 1
            kept.append(finding)
        return kept
