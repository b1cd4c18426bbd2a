"""Unit tests for TECH_DEBT.FILE_SIZE."""

import pytest

from techdebt.config import ScanConfig
from techdebt.rules.base import FindingKind, Severity
from techdebt.rules.tech_debt.file_size import FileSizeRule


class TestFileSizeRule:
    """Tests for TECH_DEBT.FILE_SIZE rule."""

    @pytest.fixture
    def rule(self):
        return FileSizeRule()

    def test_has_correct_metadata(self, rule):
        assert rule.rule_id == "TECH_DEBT.FILE_SIZE"
        assert rule.kind == FindingKind.FILE_SIZE
        assert rule.extensions is None

    def test_critical_at_exact_limit(self, rule, make_tree, build_context, lines_of):
        root = make_tree({"big.py": lines_of(500)})
        findings = rule.check(build_context(root))
        assert len(findings) == 1
        finding = findings[0]
        assert finding.severity == Severity.CRITICAL
        assert "500 lines" in finding.message
        assert finding.suggestion == "Split into smaller modules"
        assert finding.metadata["line_count"] == 500
        assert finding.metadata["limit"] == 500
        assert str(finding.location) == "big.py"

    def test_low_at_exact_warning(self, rule, make_tree, build_context, lines_of):
        root = make_tree({"mid.go": lines_of(300)})
        findings = rule.check(build_context(root))
        assert len(findings) == 1
        assert findings[0].severity == Severity.LOW
        assert findings[0].suggestion == "Consider splitting"

    def test_just_below_warning_is_clean(self, rule, make_tree, build_context, lines_of):
        root = make_tree({"small.rs": lines_of(299)})
        assert rule.check(build_context(root)) == []

    def test_just_below_critical_is_low(self, rule, make_tree, build_context, lines_of):
        root = make_tree({"almost.java": lines_of(499)})
        findings = rule.check(build_context(root))
        assert [f.severity for f in findings] == [Severity.LOW]

    def test_never_medium_or_high(self, rule, make_tree, build_context, lines_of):
        root = make_tree(
            {f"f{n}.ts": lines_of(n) for n in (10, 300, 450, 500, 900)}
        )
        severities = {f.severity for f in rule.check(build_context(root))}
        assert severities <= {Severity.LOW, Severity.CRITICAL}

    def test_uses_configured_limits(self, rule, make_tree, build_context, lines_of):
        config = ScanConfig(fileSize={"warning": 5, "critical": 10})
        root = make_tree({"a.py": lines_of(6), "b.py": lines_of(10)})
        findings = rule.check(build_context(root, config))
        assert [(f.location.path, f.severity) for f in findings] == [
            ("a.py", Severity.LOW),
            ("b.py", Severity.CRITICAL),
        ]

    def test_empty_file(self, rule, make_tree, build_context):
        root = make_tree({"empty.js": ""})
        assert rule.check(build_context(root)) == []
