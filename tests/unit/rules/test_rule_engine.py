"""Unit tests for techdebt.rules.engine module."""

import threading
import time

import pytest

from techdebt.rules.base import BaseRule, Finding, FindingKind, Location, Severity
from techdebt.rules.engine import (
    RuleEngine,
    RuleEngineResult,
    RuleError,
    RuleExecutionResult,
)


class MockRule(BaseRule):
    """A mock rule for testing."""

    def __init__(
        self,
        rule_id: str = "TEST.MOCK",
        kind: FindingKind = FindingKind.MARKER,
        findings: list[Finding] | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
    ):
        self._rule_id = rule_id
        self._kind = kind
        self._findings = findings or []
        self._delay = delay
        self._error = error
        self.threads: list[str] = []

    @property
    def rule_id(self) -> str:
        return self._rule_id

    @property
    def name(self) -> str:
        return "Mock Rule"

    @property
    def kind(self) -> FindingKind:
        return self._kind

    @property
    def default_severity(self) -> Severity:
        return Severity.LOW

    def check(self, context) -> list[Finding]:
        self.threads.append(threading.current_thread().name)
        if self._delay:
            time.sleep(self._delay)
        if self._error:
            raise self._error
        return list(self._findings)


def make_finding(path: str, kind: FindingKind = FindingKind.MARKER) -> Finding:
    return Finding(
        kind=kind,
        severity=Severity.MEDIUM,
        location=Location(path, 1),
        message=f"finding in {path}",
    )


class TestRuleError:
    def test_to_dict(self):
        error = RuleError("TEST.X", "boom", "RuntimeError")
        assert error.to_dict() == {
            "rule_id": "TEST.X",
            "error_message": "boom",
            "exception_type": "RuntimeError",
        }

    def test_str(self):
        assert str(RuleError("TEST.X", "boom")) == "TEST.X: boom"


class TestRuleExecutionResult:
    def test_success_and_count(self):
        rule = MockRule()
        result = RuleExecutionResult(rule=rule, findings=[make_finding("a.py")])
        assert result.success
        assert result.finding_count == 1
        assert result.rule_id == "TEST.MOCK"

    def test_failure(self):
        result = RuleExecutionResult(rule=MockRule(), error=RuleError("TEST.MOCK", "x"))
        assert not result.success


class TestRuleEngine:
    def test_rejects_zero_workers(self):
        with pytest.raises(ValueError):
            RuleEngine([MockRule()], max_workers=0)

    def test_sequential_with_one_worker(self):
        rules = [MockRule("A", findings=[make_finding("a")]), MockRule("B")]
        result = RuleEngine(rules, max_workers=1).run(context=None)
        assert isinstance(result, RuleEngineResult)
        assert result.rules_executed == 2
        assert [r.rule_id for r in result.results] == ["A", "B"]
        assert rules[0].threads == [threading.current_thread().name]

    def test_parallel_results_keep_rule_order(self):
        # First rule finishes last
        rules = [
            MockRule("SLOW", findings=[make_finding("slow")], delay=0.2),
            MockRule("FAST", findings=[make_finding("fast")]),
            MockRule("MID", findings=[make_finding("mid")], delay=0.05),
        ]
        result = RuleEngine(rules, max_workers=3).run(context=None)
        assert [r.rule_id for r in result.results] == ["SLOW", "FAST", "MID"]
        assert [f.location.path for f in result.findings] == ["slow", "fast", "mid"]

    def test_parallel_uses_worker_threads(self):
        rules = [MockRule("A"), MockRule("B")]
        RuleEngine(rules, max_workers=2).run(context=None)
        main = threading.current_thread().name
        assert all(name != main for rule in rules for name in rule.threads)

    @pytest.mark.parametrize("workers", [1, 4])
    def test_failing_rule_is_isolated(self, workers):
        rules = [
            MockRule("OK.FIRST", findings=[make_finding("a")]),
            MockRule("BROKEN", error=RuntimeError("boom")),
            MockRule("OK.LAST", findings=[make_finding("b")]),
        ]
        result = RuleEngine(rules, max_workers=workers).run(context=None)

        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.rule_id == "BROKEN"
        assert error.error_message == "boom"
        assert error.exception_type == "RuntimeError"
        assert [f.location.path for f in result.findings] == ["a", "b"]

    def test_get_rule(self):
        rule = MockRule("TEST.FIND")
        engine = RuleEngine([rule])
        assert engine.get_rule("TEST.FIND") is rule
        assert engine.get_rule("TEST.MISSING") is None

    def test_empty_rule_set(self):
        result = RuleEngine([]).run(context=None)
        assert result.results == []
        assert result.findings == []
        assert result.errors == []
