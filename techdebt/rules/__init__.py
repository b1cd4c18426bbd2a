"""
Detection rules for the tech-debt scanner.

Each rule inspects the shared ScanContext and returns its own findings.
`default_rules` builds the enabled rule set in report order.
"""

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from .base import (
    BaseRule,
    FileRule,
    Finding,
    FindingKind,
    Location,
    ScanContext,
    Severity,
    SourceFile,
)
from .engine import RuleEngine, RuleEngineResult, RuleError, RuleExecutionResult
from .tech_debt import (
    DeadCodeRule,
    DependencyRule,
    DuplicateRule,
    FileSizeRule,
    MarkerRule,
    TypeGapRule,
)

if TYPE_CHECKING:
    from ..config import ScanConfig


def default_rules(
    config: "ScanConfig",
    duplicates_enabled: bool = False,
    clock: Callable[[], float] = time.time,
) -> list[BaseRule]:
    """Instantiate every enabled rule, ordered by finding kind.

    Args:
        config: Resolved scan configuration
        duplicates_enabled: Run-level switch for the duplicate detector
        clock: Current-time source passed to the marker rule

    Returns:
        Rules in report order
    """
    candidates: list[BaseRule] = [
        FileSizeRule(),
        DeadCodeRule(),
        MarkerRule(clock=clock),
        TypeGapRule(),
        DependencyRule(),
    ]
    if duplicates_enabled:
        candidates.append(DuplicateRule())

    rules = [rule for rule in candidates if config.is_enabled(rule.kind)]
    return sorted(rules, key=lambda rule: rule.kind.order)


__all__ = [
    "BaseRule",
    "FileRule",
    "Finding",
    "FindingKind",
    "Location",
    "RuleEngine",
    "RuleEngineResult",
    "RuleError",
    "RuleExecutionResult",
    "ScanContext",
    "Severity",
    "SourceFile",
    "default_rules",
]
