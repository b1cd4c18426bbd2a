"""
Dead code detection rule.

Two textual heuristics, both HIGH severity:

- long runs of `//` comment lines, which are usually commented-out code
- lines where a `return ...;` is followed by more code on the same line

Neither is control-flow analysis; both over- and under-report. The
unreachable-code heuristic is capped per run.
"""

import re

from ..base import FileRule, Finding, FindingKind, ScanContext, Severity, SourceFile

SCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")


class DeadCodeRule(FileRule):
    """Detect commented-out blocks and possibly unreachable code."""

    COMMENT_LINE = re.compile(r"^\s*//")
    RETURN_THEN_CODE = re.compile(r"return.*;.*[^/]")
    DOUBLE_RETURN = re.compile(r"return.*return")

    @property
    def rule_id(self) -> str:
        return "TECH_DEBT.DEAD_CODE"

    @property
    def name(self) -> str:
        return "Dead Code Detection"

    @property
    def kind(self) -> FindingKind:
        return FindingKind.DEAD_CODE

    @property
    def default_severity(self) -> Severity:
        return Severity.HIGH

    @property
    def extensions(self) -> tuple[str, ...]:
        return SCRIPT_EXTENSIONS

    def caps(self, config) -> dict[str, int]:
        return {"unreachable": config.unreachable_cap}

    def check_file(
        self, source: SourceFile, lines: list[str], context: ScanContext
    ) -> list[Finding]:
        findings = self._comment_blocks(source, lines, context.config.comment_block_threshold)
        findings.extend(self._unreachable(source, lines))
        return findings

    def _comment_blocks(
        self, source: SourceFile, lines: list[str], threshold: int
    ) -> list[Finding]:
        findings = []
        run_start: int | None = None
        run_length = 0

        # Sentinel line flushes a run that reaches end of file
        for line_num, line in enumerate([*lines, ""], start=1):
            if line_num <= len(lines) and self.COMMENT_LINE.match(line):
                if run_start is None:
                    run_start = line_num
                run_length += 1
                continue

            if run_start is not None and run_length >= threshold:
                findings.append(
                    self._create_finding(
                        message=f"Commented-out block ({run_length} lines)",
                        path=source.relative,
                        line=run_start,
                        end_line=run_start + run_length - 1,
                        suggestion="Remove dead code",
                        metadata={"heuristic": "comment_block", "block_lines": run_length},
                    )
                )
            run_start = None
            run_length = 0

        return findings

    def _unreachable(self, source: SourceFile, lines: list[str]) -> list[Finding]:
        findings = []
        for line_num, line in enumerate(lines, start=1):
            if not self.RETURN_THEN_CODE.search(line):
                continue
            if self.DOUBLE_RETURN.search(line):
                continue
            findings.append(
                self._create_finding(
                    message="Possible unreachable code after return",
                    path=source.relative,
                    line=line_num,
                    suggestion="Remove statements that follow the return",
                    metadata={"heuristic": "unreachable", "code": line.strip()},
                )
            )
        return findings
