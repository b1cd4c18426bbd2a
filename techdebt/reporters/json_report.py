"""JSON summary report for CI consumption.

Output format:
{
    "timestamp": "2026-01-01T12:00:00Z",
    "scannedPath": ".",
    "summary": {"critical": 0, "high": 0, "medium": 0, "low": 0, "total": 0},
    "threshold": "high" | "none",
    "duplicatesEnabled": false,
    "exitCode": 0
}

Only the summary is emitted; individual findings are not part of the
JSON output.
"""

import json
import sys
from typing import Any, TextIO

from ..aggregator import ScanReport
from ..rules.base import Severity


def format_timestamp(report: ScanReport) -> str:
    """ISO-8601 UTC timestamp with a `Z` suffix, second precision."""
    return report.timestamp.strftime("%Y-%m-%dT%H:%M:%SZ")


class JSONReporter:
    """Writes the scan summary as one JSON document."""

    def __init__(self, stream: TextIO = sys.stdout, indent: int | None = 2):
        """Initialize the JSON reporter.

        Args:
            stream: Output stream (default: stdout).
            indent: Indentation passed to json.dump.
        """
        self.stream = stream
        self.indent = indent

    def build(self, report: ScanReport) -> dict[str, Any]:
        """Build the output dictionary without writing it."""
        return {
            "timestamp": format_timestamp(report),
            "scannedPath": report.scanned_path,
            "summary": {
                "critical": report.count(Severity.CRITICAL),
                "high": report.count(Severity.HIGH),
                "medium": report.count(Severity.MEDIUM),
                "low": report.count(Severity.LOW),
                "total": report.total,
            },
            "threshold": report.threshold.value if report.threshold else "none",
            "duplicatesEnabled": report.duplicates_enabled,
            "exitCode": report.exit_code,
        }

    def report(self, report: ScanReport) -> dict[str, Any]:
        """Output the summary as JSON.

        Returns:
            The output dictionary (also written to stream).
        """
        output = self.build(report)
        json.dump(output, self.stream, indent=self.indent)
        self.stream.write("\n")
        return output
