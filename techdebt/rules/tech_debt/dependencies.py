"""
Dependency health rule.

Asks the dependency auditor capability how many direct dependencies are
outdated and how many known vulnerabilities the lock state carries.
Either answer may be unavailable; that only suppresses its finding.
"""

import logging

from ...errors import OptionalCollaboratorUnavailable
from ..base import BaseRule, Finding, FindingKind, ScanContext, Severity

logger = logging.getLogger(__name__)


class DependencyRule(BaseRule):
    """Report outdated and vulnerable dependencies of the scanned project."""

    @property
    def rule_id(self) -> str:
        return "TECH_DEBT.DEPENDENCIES"

    @property
    def name(self) -> str:
        return "Dependency Health"

    @property
    def kind(self) -> FindingKind:
        return FindingKind.DEPENDENCY

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    def check(self, context: ScanContext) -> list[Finding]:
        auditor = context.auditor
        if not auditor.has_manifest(context.root):
            return []

        manifest = auditor.manifest_name
        findings = []

        try:
            outdated = auditor.outdated_count(context.root)
        except OptionalCollaboratorUnavailable as e:
            logger.debug(f"Outdated check skipped: {e.message}")
            outdated = 0
        if outdated > 0:
            findings.append(
                self._create_finding(
                    message=f"{outdated} outdated dependencies",
                    path=manifest,
                    suggestion="Run: npm outdated && npm update",
                    metadata={"outdated": outdated},
                )
            )

        try:
            vulnerabilities = auditor.vulnerability_count(context.root)
        except OptionalCollaboratorUnavailable as e:
            logger.debug(f"Vulnerability audit skipped: {e.message}")
            vulnerabilities = 0
        if vulnerabilities > 0:
            findings.append(
                self._create_finding(
                    message=f"{vulnerabilities} known vulnerabilities",
                    path=manifest,
                    suggestion="Run: npm audit fix",
                    metadata={"vulnerabilities": vulnerabilities},
                    severity=Severity.CRITICAL,
                )
            )

        return findings
