"""
Type safety gap detection rule.

Only typed sources (.ts, .tsx) are inspected. Three line heuristics:

- explicit `: any` annotations (HIGH, capped)
- type-check suppression directives (HIGH, uncapped)
- function declarations without an obvious return type (MEDIUM, capped)
"""

import re

from ..base import FileRule, Finding, FindingKind, ScanContext, Severity, SourceFile

TYPED_EXTENSIONS = (".ts", ".tsx")


class TypeGapRule(FileRule):
    """Detect weakened or missing TypeScript types."""

    ANY_ANNOTATION = re.compile(r":\s*any\b")
    SUPPRESSION = re.compile(r"@ts-(ignore|expect-error|nocheck)\b")
    FUNCTION_DECL = re.compile(r"function |const .* = \(")
    ARROW_RETURN = re.compile(r": .*=>")
    KNOWN_RETURN = re.compile(r"void|Promise|string|number|boolean")

    @property
    def rule_id(self) -> str:
        return "TECH_DEBT.TYPE_GAPS"

    @property
    def name(self) -> str:
        return "Type Safety Gap Detection"

    @property
    def kind(self) -> FindingKind:
        return FindingKind.TYPE_GAP

    @property
    def default_severity(self) -> Severity:
        return Severity.HIGH

    @property
    def extensions(self) -> tuple[str, ...]:
        return TYPED_EXTENSIONS

    def caps(self, config) -> dict[str, int]:
        return {
            "any": config.any_type_cap,
            "missing_return_type": config.missing_return_type_cap,
        }

    def check_file(
        self, source: SourceFile, lines: list[str], context: ScanContext
    ) -> list[Finding]:
        findings = []
        for line_num, line in enumerate(lines, start=1):
            if self.ANY_ANNOTATION.search(line):
                findings.append(
                    self._create_finding(
                        message="Explicit 'any' type",
                        path=source.relative,
                        line=line_num,
                        suggestion="Replace 'any' with a specific type or 'unknown'",
                        metadata={"heuristic": "any"},
                    )
                )

            suppression = self.SUPPRESSION.search(line)
            if suppression:
                directive = f"@ts-{suppression.group(1)}"
                findings.append(
                    self._create_finding(
                        message=f"Type check suppressed with {directive}",
                        path=source.relative,
                        line=line_num,
                        suggestion="Fix the underlying type error instead of suppressing it",
                        metadata={"heuristic": "suppression", "directive": directive},
                    )
                )

            if (
                self.FUNCTION_DECL.search(line)
                and not self.ARROW_RETURN.search(line)
                and not self.KNOWN_RETURN.search(line)
            ):
                findings.append(
                    self._create_finding(
                        message="Possible missing return type",
                        path=source.relative,
                        line=line_num,
                        suggestion="Add an explicit return type annotation",
                        metadata={"heuristic": "missing_return_type"},
                        severity=Severity.MEDIUM,
                    )
                )
        return findings
