"""Unit tests for TECH_DEBT.DEPENDENCIES."""

import pytest

from techdebt.rules.base import Severity
from techdebt.rules.tech_debt.dependencies import DependencyRule


class TestDependencyRule:
    """Tests for TECH_DEBT.DEPENDENCIES rule."""

    @pytest.fixture
    def rule(self):
        return DependencyRule()

    @pytest.fixture
    def npm_project(self, make_tree):
        return make_tree({"package.json": '{"name": "demo"}', "index.js": "run();\n"})

    def test_no_manifest_is_noop(self, rule, make_tree, build_context, fake_auditor):
        root = make_tree({"index.js": "run();\n"})
        context = build_context(root, auditor=fake_auditor(outdated=3, vulnerabilities=2))
        assert rule.check(context) == []

    def test_outdated_is_medium(self, rule, npm_project, build_context, fake_auditor):
        context = build_context(npm_project, auditor=fake_auditor(outdated=4))
        findings = rule.check(context)
        assert len(findings) == 1
        finding = findings[0]
        assert finding.severity == Severity.MEDIUM
        assert str(finding.location) == "package.json"
        assert finding.message == "4 outdated dependencies"
        assert finding.suggestion == "Run: npm outdated && npm update"

    def test_vulnerabilities_are_critical(self, rule, npm_project, build_context, fake_auditor):
        context = build_context(npm_project, auditor=fake_auditor(vulnerabilities=7))
        findings = rule.check(context)
        assert len(findings) == 1
        assert findings[0].severity == Severity.CRITICAL
        assert findings[0].metadata["vulnerabilities"] == 7
        assert findings[0].suggestion == "Run: npm audit fix"

    def test_both(self, rule, npm_project, build_context, fake_auditor):
        context = build_context(npm_project, auditor=fake_auditor(outdated=1, vulnerabilities=1))
        severities = [f.severity for f in rule.check(context)]
        assert severities == [Severity.MEDIUM, Severity.CRITICAL]

    def test_healthy_project(self, rule, npm_project, build_context, fake_auditor):
        assert rule.check(build_context(npm_project, auditor=fake_auditor())) == []

    def test_unavailable_answers_yield_nothing(
        self, rule, npm_project, build_context, fake_auditor
    ):
        auditor = fake_auditor(outdated=None, vulnerabilities=None)
        assert rule.check(build_context(npm_project, auditor=auditor)) == []

    def test_one_unavailable_answer_keeps_the_other(
        self, rule, npm_project, build_context, fake_auditor
    ):
        auditor = fake_auditor(outdated=None, vulnerabilities=2)
        findings = rule.check(build_context(npm_project, auditor=auditor))
        assert [f.severity for f in findings] == [Severity.CRITICAL]

    def test_missing_npm(self, rule, npm_project, build_context):
        # build_context defaults to NoAuditor
        assert rule.check(build_context(npm_project)) == []
