"""
Tech debt rules for detecting maintainability issues.

Rules in this module:
- TECH_DEBT.FILE_SIZE - Detects files over the warning/critical line limits
- TECH_DEBT.DEAD_CODE - Detects commented-out blocks and unreachable code
- TECH_DEBT.MARKERS - Detects TODO/FIXME/HACK/XXX/OPTIMIZE/BUG markers
- TECH_DEBT.TYPE_GAPS - Detects `any`, suppressions and missing return types
- TECH_DEBT.DEPENDENCIES - Reports outdated and vulnerable dependencies
- TECH_DEBT.DUPLICATES - Detects identical code blocks (opt-in)
"""

from .dead_code import DeadCodeRule
from .dependencies import DependencyRule
from .duplicates import DuplicateRule
from .file_size import FileSizeRule
from .markers import MarkerRule
from .type_gaps import TypeGapRule

__all__ = [
    "DeadCodeRule",
    "DependencyRule",
    "DuplicateRule",
    "FileSizeRule",
    "MarkerRule",
    "TypeGapRule",
]
