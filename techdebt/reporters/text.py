"""Human-readable terminal report.

Format per finding:
    [KIND] path:line
      message
      -> suggestion

Sections are printed strongest first. The MEDIUM and LOW sections are
truncated with an "... and N more" line; the summary always shows the
full threshold-filtered counts.
"""

import sys
from typing import TextIO

from ..aggregator import ScanReport
from ..rules.base import SEVERITY_ORDER, Finding, Severity

RULE = "━" * 55
ARROW = "→"


class TextReporter:
    """Terminal reporter with color-coded severity sections."""

    COLORS = {
        Severity.CRITICAL: "\033[0;31m",  # Red
        Severity.HIGH: "\033[1;33m",  # Yellow
        Severity.MEDIUM: "\033[0;34m",  # Blue
        Severity.LOW: "\033[0;32m",  # Green
    }
    HEADER_COLOR = "\033[0;34m"
    RESET = "\033[0m"

    SECTION_TITLES = {
        Severity.CRITICAL: "CRITICAL (must fix before merge)",
        Severity.HIGH: "HIGH (fix this sprint)",
        Severity.MEDIUM: "MEDIUM (technical debt)",
        Severity.LOW: "LOW (nice to have)",
    }

    SECTION_LIMITS = {
        Severity.MEDIUM: 10,
        Severity.LOW: 5,
    }

    def __init__(
        self,
        stream: TextIO = sys.stdout,
        use_color: bool | None = None,
        program: str = "techdebt scan",
    ):
        """Initialize the text reporter.

        Args:
            stream: Output stream (default: stdout).
            use_color: Whether to use ANSI colors. Auto-detects if None.
            program: Command name used in the recommended actions.
        """
        self.stream = stream
        if use_color is None:
            self.use_color = hasattr(stream, "isatty") and stream.isatty()
        else:
            self.use_color = use_color
        self.program = program

    def _paint(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return f"{color}{text}{self.RESET}"

    def _print(self, line: str = "") -> None:
        print(line, file=self.stream)

    def report(self, report: ScanReport, summary_only: bool = False) -> None:
        """Write the report.

        Args:
            report: Scan report to render.
            summary_only: Skip the per-finding sections.
        """
        self._print_header(report)
        if not summary_only:
            for severity in reversed(SEVERITY_ORDER):
                self._print_section(report, severity)
        self._print_summary(report)
        self._print_actions(report)

    def _print_header(self, report: ScanReport) -> None:
        self._print(self._paint(RULE, self.HEADER_COLOR))
        self._print(self._paint("  TECHDEBT SCAN RESULTS", self.HEADER_COLOR))
        self._print(self._paint(RULE, self.HEADER_COLOR))
        self._print(f"Scanned: {report.scanned_path}")
        self._print(f"Date: {report.timestamp.strftime('%Y-%m-%d %H:%M:%S')}")
        self._print()

    def _print_section(self, report: ScanReport, severity: Severity) -> None:
        findings = report.findings_by_severity(severity)
        if not findings:
            return

        self._print(self._paint(self.SECTION_TITLES[severity], self.COLORS[severity]))
        self._print(RULE)

        limit = self.SECTION_LIMITS.get(severity)
        shown = findings if limit is None else findings[:limit]
        for finding in shown:
            self._print_finding(finding)

        if len(findings) > len(shown):
            self._print(f"... and {len(findings) - len(shown)} more")
            self._print()

    def _print_finding(self, finding: Finding) -> None:
        header = f"[{finding.kind.name}] {finding.location}"
        age = finding.metadata.get("age_days")
        if age is not None:
            header += f" ({age} days old)"
        self._print(header)
        self._print(f"  {finding.message}")
        if finding.suggestion:
            self._print(f"  {ARROW} {finding.suggestion}")
        self._print()

    def _print_summary(self, report: ScanReport) -> None:
        self._print(self._paint(RULE, self.HEADER_COLOR))
        self._print(self._paint("  SUMMARY", self.HEADER_COLOR))
        self._print(self._paint(RULE, self.HEADER_COLOR))
        for severity in reversed(SEVERITY_ORDER):
            label = f"{severity.value.capitalize()}:"
            self._print(
                f"{self._paint(label, self.COLORS[severity])}{' ' * (10 - len(label))}"
                f"{report.count(severity)}"
            )
        self._print(f"Total:    {report.total} issues")
        if report.threshold is not None:
            self._print(f"Threshold: {report.threshold.value}")
        if report.errors:
            self._print(f"Rule errors: {len(report.errors)}")
        self._print()

    def _print_actions(self, report: ScanReport) -> None:
        critical = report.count(Severity.CRITICAL)
        high = report.count(Severity.HIGH)
        if critical == 0 and high == 0:
            return

        self._print(self._paint("RECOMMENDED ACTIONS", self.HEADER_COLOR))
        self._print(RULE)
        if critical > 0:
            self._print("1. Fix critical issues before merging")
        if high > 0:
            self._print("2. Address high-priority issues this sprint")
        self._print(f"3. Run auto-fix: {self.program} --fix")
        self._print(f"4. Run with duplicates: {self.program} --duplicates")
        self._print(f"5. CI integration: {self.program} --json --threshold high")
        self._print()
