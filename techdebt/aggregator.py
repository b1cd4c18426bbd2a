"""Aggregation of rule results into a single scan report.

Findings are concatenated in finding-kind order (then each rule's own
discovery order), tallied per severity, and the tallies are filtered by
the optional threshold. The threshold never removes findings from the
report; it only zeroes the counts below it and drives the exit code.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from .rules.base import SEVERITY_ORDER, Finding, Severity
from .rules.engine import RuleError, RuleExecutionResult

EXIT_OK = 0
EXIT_CRITICAL = 1
EXIT_HIGH = 2


def compute_exit_code(counts: Mapping[Severity, int]) -> int:
    """Exit code for threshold-filtered counts: 1 critical, 2 high, else 0."""
    if counts.get(Severity.CRITICAL, 0) > 0:
        return EXIT_CRITICAL
    if counts.get(Severity.HIGH, 0) > 0:
        return EXIT_HIGH
    return EXIT_OK


def tally(
    findings: Iterable[Finding], threshold: Severity | None = None
) -> dict[Severity, int]:
    """Count findings per severity, zeroing severities below the threshold."""
    counts = {severity: 0 for severity in SEVERITY_ORDER}
    for finding in findings:
        counts[finding.severity] += 1
    if threshold is not None:
        for severity in counts:
            if severity < threshold:
                counts[severity] = 0
    return counts


@dataclass(frozen=True)
class ScanReport:
    """The complete, immutable result of one scan run."""

    findings: tuple[Finding, ...]
    counts: Mapping[Severity, int]
    threshold: Severity | None
    exit_code: int
    scanned_path: str
    duplicates_enabled: bool
    timestamp: datetime
    files_scanned: int = 0
    errors: tuple[RuleError, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def visible_findings(self) -> list[Finding]:
        """Findings at or above the threshold (all findings without one)."""
        if self.threshold is None:
            return list(self.findings)
        return [f for f in self.findings if f.severity >= self.threshold]

    def findings_by_severity(self, severity: Severity) -> list[Finding]:
        return [f for f in self.visible_findings if f.severity == severity]

    def count(self, severity: Severity) -> int:
        return self.counts.get(severity, 0)


def aggregate(
    results: Iterable[RuleExecutionResult],
    threshold: Severity | None,
    scanned_path: str,
    duplicates_enabled: bool = False,
    files_scanned: int = 0,
    timestamp: datetime | None = None,
) -> ScanReport:
    """Merge per-rule results into a ScanReport.

    Args:
        results: One result per rule, in any order
        threshold: Minimum severity that counts, or None for all
        scanned_path: Root as given on the command line
        duplicates_enabled: Whether the duplicate detector ran
        files_scanned: Number of collected files
        timestamp: Report time; defaults to now (UTC)

    Returns:
        Frozen ScanReport
    """
    # Stable sort keeps each rule's discovery order within its kind group
    ordered = sorted(results, key=lambda result: result.rule.kind.order)

    findings: list[Finding] = []
    errors: list[RuleError] = []
    for result in ordered:
        if result.error is not None:
            errors.append(result.error)
            continue
        findings.extend(result.findings)

    counts = tally(findings, threshold)

    return ScanReport(
        findings=tuple(findings),
        counts=counts,
        threshold=threshold,
        exit_code=compute_exit_code(counts),
        scanned_path=scanned_path,
        duplicates_enabled=duplicates_enabled,
        timestamp=timestamp or datetime.now(UTC),
        files_scanned=files_scanned,
        errors=tuple(errors),
    )
