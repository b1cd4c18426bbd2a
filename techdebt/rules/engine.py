"""
Rule engine coordinator for executing tech-debt rules.

This module provides the RuleEngine class that fans the enabled rules
out over a thread pool and gathers their results. Every rule reads the
same immutable ScanContext and returns its own list of findings, so
rules share no mutable state. Results are returned in registration
order regardless of which rule finished first.
"""

import logging
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from .base import BaseRule, Finding, ScanContext

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass
class RuleError:
    """A rule that raised; it contributes no findings to the report."""

    rule_id: str
    error_message: str
    exception_type: str | None = None

    def to_dict(self) -> dict:
        """Plain-dict form for structured logs."""
        return {
            "rule_id": self.rule_id,
            "error_message": self.error_message,
            "exception_type": self.exception_type,
        }

    def __str__(self) -> str:
        return f"{self.rule_id}: {self.error_message}"


@dataclass
class RuleExecutionResult:
    """Findings (or the error) from one rule, with its wall time."""

    rule: BaseRule
    findings: list[Finding] = field(default_factory=list)
    execution_time_ms: float = 0.0
    error: RuleError | None = None

    @property
    def rule_id(self) -> str:
        return self.rule.rule_id

    @property
    def success(self) -> bool:
        """True unless the rule raised."""
        return self.error is None

    @property
    def finding_count(self) -> int:
        """Number of findings the rule returned."""
        return len(self.findings)


@dataclass
class RuleEngineResult:
    """Result of rule engine execution, one entry per rule in rule order."""

    results: list[RuleExecutionResult] = field(default_factory=list)
    execution_time_ms: float = 0.0

    @property
    def errors(self) -> list[RuleError]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def findings(self) -> list[Finding]:
        findings: list[Finding] = []
        for result in self.results:
            findings.extend(result.findings)
        return findings

    @property
    def rules_executed(self) -> int:
        return len(self.results)


class RuleEngine:
    """Engine for executing tech-debt rules.

    Example usage:
        engine = RuleEngine(default_rules(config, duplicates_enabled=True))
        result = engine.run(context)
        for error in result.errors:
            print(error)
    """

    def __init__(self, rules: Sequence[BaseRule], max_workers: int = DEFAULT_MAX_WORKERS):
        """Set up the engine.

        Args:
            rules: Rules to run, in report order
            max_workers: Upper bound on concurrently running rules
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._rules = list(rules)
        self.max_workers = max_workers

    @property
    def rules(self) -> list[BaseRule]:
        return list(self._rules)

    def get_rule(self, rule_id: str) -> BaseRule | None:
        """Get a registered rule by ID."""
        for rule in self._rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def run(self, context: ScanContext) -> RuleEngineResult:
        """Run every rule against the context.

        Args:
            context: Shared read-only scan input

        Returns:
            RuleEngineResult with one RuleExecutionResult per rule
        """
        start_time = time.time()

        if self.max_workers > 1 and len(self._rules) > 1:
            results = self._execute_rules_parallel(context)
        else:
            results = [self._execute_rule(rule, context) for rule in self._rules]

        execution_time_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"Executed {len(results)} rules in {execution_time_ms:.1f}ms",
            extra={"duration_ms": round(execution_time_ms, 1)},
        )
        return RuleEngineResult(results=results, execution_time_ms=execution_time_ms)

    def _execute_rules_parallel(self, context: ScanContext) -> list[RuleExecutionResult]:
        """Run one task per rule on a thread pool.

        Completion order is discarded: each result is slotted back at its
        rule's index.
        """
        results: list[RuleExecutionResult | None] = [None] * len(self._rules)
        max_workers = min(self.max_workers, len(self._rules))

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_index = {
                executor.submit(self._execute_rule, rule, context): index
                for index, rule in enumerate(self._rules)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                # _execute_rule never raises
                results[index] = future.result()

        return [r for r in results if r is not None]

    def _execute_rule(self, rule: BaseRule, context: ScanContext) -> RuleExecutionResult:
        """Execute a single rule, converting any exception into a RuleError."""
        start_time = time.time()

        try:
            findings = rule.check(context)
            execution_time_ms = (time.time() - start_time) * 1000
            logger.debug(
                f"Rule {rule.rule_id} produced {len(findings)} findings",
                extra={
                    "rule_id": rule.rule_id,
                    "finding_count": len(findings),
                    "duration_ms": round(execution_time_ms, 1),
                },
            )
            return RuleExecutionResult(
                rule=rule,
                findings=list(findings),
                execution_time_ms=execution_time_ms,
            )

        except Exception as e:
            execution_time_ms = (time.time() - start_time) * 1000

            error = RuleError(
                rule_id=rule.rule_id,
                error_message=str(e),
                exception_type=type(e).__name__,
            )

            logger.warning(
                f"Rule {rule.rule_id} ({rule.name}) failed: {e}", extra={"rule_id": rule.rule_id}
            )

            return RuleExecutionResult(
                rule=rule,
                execution_time_ms=execution_time_ms,
                error=error,
            )
