"""
File size detection rule.

Flags files whose line count crosses the configured limits. Tiering is
binary: crossing the critical limit is CRITICAL, crossing only the
warning limit is informational.
"""

from ..base import FileRule, Finding, FindingKind, ScanContext, Severity, SourceFile


class FileSizeRule(FileRule):
    """Detect files that are too large and may need splitting."""

    @property
    def rule_id(self) -> str:
        return "TECH_DEBT.FILE_SIZE"

    @property
    def name(self) -> str:
        return "File Size Detection"

    @property
    def kind(self) -> FindingKind:
        return FindingKind.FILE_SIZE

    @property
    def default_severity(self) -> Severity:
        return Severity.LOW

    def check_file(
        self, source: SourceFile, lines: list[str], context: ScanContext
    ) -> list[Finding]:
        config = context.config
        line_count = len(lines)

        if line_count >= config.file_size_critical:
            return [
                self._create_finding(
                    message=(
                        f"File exceeds critical size limit "
                        f"({line_count} lines, limit {config.file_size_critical})"
                    ),
                    path=source.relative,
                    suggestion="Split into smaller modules",
                    metadata={
                        "line_count": line_count,
                        "limit": config.file_size_critical,
                    },
                    severity=Severity.CRITICAL,
                )
            ]

        if line_count >= config.file_size_warning:
            return [
                self._create_finding(
                    message=(
                        f"Approaching size limit "
                        f"({line_count} lines, warning at {config.file_size_warning})"
                    ),
                    path=source.relative,
                    suggestion="Consider splitting",
                    metadata={
                        "line_count": line_count,
                        "limit": config.file_size_warning,
                    },
                )
            ]

        return []
