"""
Debt marker detection rule.

Detects TODO, FIXME, HACK, XXX, OPTIMIZE and BUG markers. When a blame
source is available, each finding carries the age of its line in days.
"""

import logging
import re
import time
from collections.abc import Callable, Mapping

from ...errors import OptionalCollaboratorUnavailable
from ..base import FileRule, Finding, FindingKind, ScanContext, Severity, SourceFile

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


class MarkerRule(FileRule):
    """Detect debt markers as case-sensitive whole tokens."""

    MARKERS = ("TODO", "FIXME", "HACK", "XXX", "OPTIMIZE", "BUG")
    MARKER_PATTERN = re.compile(r"\b(" + "|".join(MARKERS) + r")\b")

    def __init__(self, clock: Callable[[], float] = time.time):
        """Initialize the rule.

        Args:
            clock: Returns the current unix time; used for marker ages.
        """
        self._clock = clock

    @property
    def rule_id(self) -> str:
        return "TECH_DEBT.MARKERS"

    @property
    def name(self) -> str:
        return "Debt Marker Detection"

    @property
    def kind(self) -> FindingKind:
        return FindingKind.MARKER

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    def check_file(
        self, source: SourceFile, lines: list[str], context: ScanContext
    ) -> list[Finding]:
        matches = []
        for line_num, line in enumerate(lines, start=1):
            match = self.MARKER_PATTERN.search(line)
            if match:
                matches.append((line_num, match.group(1), line.strip()))

        if not matches:
            return []

        line_times = self._line_times(source, context)
        now = self._clock()

        findings = []
        for line_num, marker, text in matches:
            metadata: dict[str, object] = {"marker": marker}
            if line_num in line_times:
                metadata["age_days"] = int((now - line_times[line_num]) // SECONDS_PER_DAY)
            findings.append(
                self._create_finding(
                    message=f"{marker} marker: {text}",
                    path=source.relative,
                    line=line_num,
                    suggestion="Resolve the marker or track it in the issue tracker",
                    metadata=metadata,
                )
            )
        return findings

    def _line_times(self, source: SourceFile, context: ScanContext) -> Mapping[int, int]:
        if not context.blame.available:
            return {}
        try:
            return context.blame.line_times(source.path)
        except OptionalCollaboratorUnavailable as e:
            logger.debug(f"No marker ages for {source.relative}: {e.message}")
            return {}
        except Exception as e:
            # Ages are optional; a broken blame source never costs the findings
            logger.warning(f"Blame failed for {source.relative}: {e}")
            return {}
