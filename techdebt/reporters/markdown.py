"""Markdown report for documentation and pull requests.

Renders an executive summary with a code health score, per-severity
issue sections, recommended actions and a one-row trend table that can
be appended to from previous reports.
"""

import sys
from dataclasses import dataclass
from typing import TextIO

from ..aggregator import ScanReport
from ..rules.base import Finding, Severity


@dataclass
class MarkdownReportConfig:
    """Configuration for markdown report generation."""

    title: str = "Technical Debt Report"
    max_medium: int = 10
    program: str = "techdebt scan"


def health_score(report: ScanReport) -> int:
    """Score out of 100: each finding costs 20/5/2/1 by severity."""
    penalty = (
        20 * report.count(Severity.CRITICAL)
        + 5 * report.count(Severity.HIGH)
        + 2 * report.count(Severity.MEDIUM)
        + report.count(Severity.LOW)
    )
    return max(0, 100 - penalty)


def health_label(score: int) -> str:
    if score >= 90:
        return "🟢 Excellent"
    if score >= 70:
        return "🟡 Good"
    if score >= 50:
        return "🟠 Fair"
    return "🔴 Needs Attention"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


class MarkdownReporter:
    """Generates a markdown technical debt report."""

    SECTIONS = [
        (Severity.CRITICAL, "🔴 Critical Issues", "critical issues"),
        (Severity.HIGH, "🟡 High Priority Issues", "high priority issues"),
        (Severity.MEDIUM, "🔵 Medium Priority Issues", "medium priority issues"),
    ]

    def __init__(
        self,
        stream: TextIO = sys.stdout,
        config: MarkdownReportConfig | None = None,
    ):
        self.stream = stream
        self.config = config or MarkdownReportConfig()

    def report(self, report: ScanReport) -> str:
        """Render the report and write it to the stream.

        Returns:
            The rendered markdown.
        """
        text = self.render(report)
        self.stream.write(text)
        return text

    def render(self, report: ScanReport) -> str:
        score = health_score(report)
        parts = [
            self._render_header(report),
            self._render_summary(report, score),
        ]
        for severity, title, noun in self.SECTIONS:
            parts.append(self._render_section(report, severity, title, noun))
        parts.append(self._render_low(report))
        parts.append(self._render_actions(report))
        parts.append(self._render_trend(report, score))
        return "\n---\n\n".join(parts)

    def _render_header(self, report: ScanReport) -> str:
        generated = report.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        lines = [
            f"# {self.config.title}",
            "",
            f"**Generated:** {generated}  ",
            f"**Repository:** {report.scanned_path}  ",
            f"**Files scanned:** {report.files_scanned}",
            "",
        ]
        return "\n".join(lines)

    def _render_summary(self, report: ScanReport, score: int) -> str:
        lines = [
            "## Executive Summary",
            "",
            "| Severity | Count | Priority |",
            "|----------|-------|----------|",
            f"| 🔴 Critical | {report.count(Severity.CRITICAL)} | **Must fix before merge** |",
            f"| 🟡 High | {report.count(Severity.HIGH)} | Fix this sprint |",
            f"| 🔵 Medium | {report.count(Severity.MEDIUM)} | Technical debt backlog |",
            f"| 🟢 Low | {report.count(Severity.LOW)} | Nice to have |",
            f"| **Total** | **{report.total}** | |",
            "",
            f"**Code Health Score:** {score}/100 ({health_label(score)})",
            "",
        ]
        return "\n".join(lines)

    def _render_finding(self, finding: Finding) -> str:
        lines = [f"### [{finding.kind.name}] {finding.location}", finding.message]
        if finding.suggestion:
            lines.append(f"**Fix:** {finding.suggestion}")
        return "\n".join(lines)

    def _render_section(
        self, report: ScanReport, severity: Severity, title: str, noun: str
    ) -> str:
        findings = report.findings_by_severity(severity)
        lines = [f"## {title}", ""]
        if not findings:
            lines.append(f"_No {noun} found._ ✅")
            lines.append("")
            return "\n".join(lines)

        limit = self.config.max_medium if severity == Severity.MEDIUM else None
        shown = findings if limit is None else findings[:limit]
        for finding in shown:
            lines.append(self._render_finding(finding))
            lines.append("")
        if len(findings) > len(shown):
            lines.append(f"_... and {len(findings) - len(shown)} more {noun}._")
            lines.append("")
        return "\n".join(lines)

    def _render_low(self, report: ScanReport) -> str:
        low = report.count(Severity.LOW)
        lines = ["## 🟢 Low Priority Issues", ""]
        if low:
            lines.append(
                f"_Found {_plural(low, 'low priority issue')}. "
                f"Run `{self.config.program}` for details._"
            )
        else:
            lines.append("_No low priority issues found._ ✅")
        lines.append("")
        return "\n".join(lines)

    def _render_actions(self, report: ScanReport) -> str:
        critical = report.count(Severity.CRITICAL)
        high = report.count(Severity.HIGH)
        medium = report.count(Severity.MEDIUM)
        lines = ["## 📋 Recommended Actions", ""]
        if critical or high:
            lines.extend(
                [
                    f"1. **Immediate:** Fix {_plural(critical, 'critical issue')} before merging",
                    f"2. **This Sprint:** Address {_plural(high, 'high priority issue')}",
                    f"3. **Automation:** Run `{self.config.program} --fix` for safe auto-fixes",
                    f"4. **Backlog:** Log {_plural(medium, 'medium issue')} to project tracker",
                    "5. **Monitoring:** Re-run scan after fixes to verify improvement",
                ]
            )
        else:
            lines.extend(
                [
                    "1. ✅ No critical or high priority issues detected",
                    f"2. 📝 Log {_plural(medium, 'medium issue')} to technical debt backlog",
                    "3. 🔄 Run scan regularly (post-commit, pre-PR)",
                    "4. 📊 Track health score over time",
                ]
            )
        lines.append("")
        return "\n".join(lines)

    def _render_trend(self, report: ScanReport, score: int) -> str:
        date = report.timestamp.strftime("%Y-%m-%d")
        lines = [
            "## 📊 Trend Analysis",
            "",
            "| Date | Critical | High | Medium | Low | Health Score |",
            "|------|----------|------|--------|-----|--------------|",
            f"| {date} | {report.count(Severity.CRITICAL)} | {report.count(Severity.HIGH)} "
            f"| {report.count(Severity.MEDIUM)} | {report.count(Severity.LOW)} | {score} |",
            "",
            "_Add previous scans to track improvement over time._",
            "",
        ]
        return "\n".join(lines)
