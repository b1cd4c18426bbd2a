"""
Duplicate code block detection rule.

Extracts brace-delimited blocks that start at a top-level
`function`/`const`/`let`/`var` opener, canonicalizes each block by
removing all whitespace, and groups blocks by the SHA-256 digest of
that canonical text. Every group member after the first (in file and
line order) is reported against the first.

Brace counting is purely textual, so braces inside strings, template
literals or comments shift the balance. Those spans are accepted as
noise.
"""

import hashlib
import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from ..base import BaseRule, Finding, FindingKind, ScanContext, Severity

logger = logging.getLogger(__name__)

SCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

BLOCK_OPENER = re.compile(r"^\s*(function|const|let|var)\b.*\{")
WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class CodeBlock:
    """A candidate block: its root-relative path, line range and digest."""

    path: str
    start_line: int
    end_line: int
    digest: str

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def __str__(self) -> str:
        return f"{self.path}:{self.start_line}"


def canonicalize(lines: Iterable[str]) -> str:
    """Canonical form of a span: its text with every whitespace run removed."""
    return WHITESPACE.sub("", "".join(lines))


def digest(canonical: str) -> str:
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def extract_blocks(path: str, lines: list[str], min_lines: int) -> Iterator[CodeBlock]:
    """Yield top-level blocks of at least `min_lines` lines.

    Openers inside an open span are nested and never start a span of
    their own. A span still open at end of file is dropped.
    """
    start: int | None = None
    balance = 0

    for line_num, line in enumerate(lines, start=1):
        if start is None:
            if not BLOCK_OPENER.match(line):
                continue
            start = line_num
            balance = 0

        balance += line.count("{") - line.count("}")
        if balance > 0:
            continue

        end = line_num
        if end - start + 1 >= min_lines:
            yield CodeBlock(
                path=path,
                start_line=start,
                end_line=end,
                digest=digest(canonicalize(lines[start - 1 : end])),
            )
        start = None


def group_duplicates(blocks: Iterable[CodeBlock]) -> dict[str, list[CodeBlock]]:
    """Group blocks by digest, keeping only digests seen more than once.

    Members keep their input order, so the first member of each group is
    the earliest occurrence.
    """
    groups: dict[str, list[CodeBlock]] = {}
    for block in blocks:
        groups.setdefault(block.digest, []).append(block)
    return {key: members for key, members in groups.items() if len(members) > 1}


class DuplicateRule(BaseRule):
    """Detect identical code blocks across the scanned files."""

    @property
    def rule_id(self) -> str:
        return "TECH_DEBT.DUPLICATES"

    @property
    def name(self) -> str:
        return "Duplicate Code Detection"

    @property
    def kind(self) -> FindingKind:
        return FindingKind.DUPLICATE

    @property
    def default_severity(self) -> Severity:
        return Severity.CRITICAL

    @property
    def extensions(self) -> tuple[str, ...]:
        return SCRIPT_EXTENSIONS

    def check(self, context: ScanContext) -> list[Finding]:
        min_lines = context.config.duplicate_threshold
        blocks: list[CodeBlock] = []

        for source in context.files_for(self.extensions):
            try:
                lines = source.read_lines()
                # Materialize first so a failing file contributes no partial spans
                blocks.extend(list(extract_blocks(source.relative, lines, min_lines)))
            except Exception as e:
                self._skip_file(source, e)

        logger.debug(f"Extracted {len(blocks)} candidate blocks")

        findings = []
        for members in group_duplicates(blocks).values():
            first = members[0]
            for block in members[1:]:
                findings.append(
                    self._create_finding(
                        message=f"Similar to {first}",
                        path=block.path,
                        line=block.start_line,
                        end_line=block.end_line,
                        suggestion="Extract to shared utility",
                        metadata={
                            "duplicate_of": str(first),
                            "block_lines": block.line_count,
                        },
                    )
                )

        findings.sort(key=lambda f: (f.location.path, f.location.line or 0))
        return findings
