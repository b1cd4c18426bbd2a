"""Scan orchestration.

Wires the pipeline together:

    config -> collector -> rule engine -> aggregator -> ScanReport

Invalid input (bad threshold, missing root) is rejected before any rule
runs. External collaborators are detected lazily and can be injected for
tests.
"""

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from functools import cached_property
from pathlib import Path

from .aggregator import ScanReport, aggregate
from .capabilities import BlameSource, DependencyAuditor, GitBlame, NoBlame, NpmAuditor
from .collector import FileCollector
from .config import ScanConfig, load_scan_config
from .errors import InvalidRootError
from .rules import RuleEngine, default_rules
from .rules.base import FindingKind, ScanContext, Severity, SourceFile

logger = logging.getLogger(__name__)


class Scanner:
    """Runs one tech-debt scan over a directory.

    Example usage:
        scanner = Scanner(Path("."), load_scan_config(Path(".")))
        report = scanner.scan(threshold="high", duplicates=True)
        sys.exit(report.exit_code)
    """

    def __init__(
        self,
        root: Path,
        config: ScanConfig | None = None,
        blame: BlameSource | None = None,
        auditor: DependencyAuditor | None = None,
        clock: Callable[[], float] = time.time,
        scanned_path: str | None = None,
    ):
        """Initialize the scanner.

        Args:
            root: Directory to scan
            config: Resolved configuration (defaults if None)
            blame: Blame source for marker ages; detected from git if None
            auditor: Dependency auditor; detected from npm if None
            clock: Current unix time, used for timestamps and marker ages
            scanned_path: Root as the user typed it, for display
        """
        self.root = Path(root)
        self.config = config or ScanConfig()
        self._blame = blame
        self._auditor = auditor
        self._clock = clock
        self.scanned_path = scanned_path if scanned_path is not None else str(root)

    @classmethod
    def from_path(cls, root: Path, config_path: Path | None = None, **kwargs) -> "Scanner":
        """Create a scanner, loading `.techdebt.json` (or `config_path`) first."""
        if not Path(root).is_dir():
            raise InvalidRootError(str(root))
        return cls(root, load_scan_config(Path(root), config_path), **kwargs)

    @cached_property
    def files(self) -> tuple[SourceFile, ...]:
        """Collected files, gathered once per scanner."""
        collector = FileCollector(self.root, self.config.exclude, self.config.extensions)
        return collector.collect()

    def _resolve_blame(self) -> BlameSource:
        if self._blame is not None:
            return self._blame
        if not self.config.is_enabled(FindingKind.MARKER):
            return NoBlame()
        return GitBlame.detect(self.root.resolve(), self.config.external_timeout)

    def _resolve_auditor(self) -> DependencyAuditor:
        if self._auditor is not None:
            return self._auditor
        return NpmAuditor.detect(self.config.external_timeout)

    def scan(
        self,
        threshold: Severity | str | None = None,
        duplicates: bool = False,
    ) -> ScanReport:
        """Run every enabled rule and aggregate the results.

        Args:
            threshold: Minimum severity that counts toward the summary and
                the exit code; a level name is parsed case-insensitively
            duplicates: Enable the duplicate detector for this run

        Returns:
            Frozen ScanReport

        Raises:
            InvalidConfigError: If the threshold is not a known level
            InvalidRootError: If the root is not a directory
        """
        if isinstance(threshold, str):
            threshold = Severity.parse(threshold)

        files = self.files
        rules = default_rules(self.config, duplicates_enabled=duplicates, clock=self._clock)
        context = ScanContext(
            root=self.root.resolve(),
            files=files,
            config=self.config,
            blame=self._resolve_blame(),
            auditor=self._resolve_auditor(),
        )

        logger.info(f"Scanning {len(files)} files with {len(rules)} rules")
        engine = RuleEngine(rules, max_workers=self.config.workers)
        result = engine.run(context)

        for error in result.errors:
            logger.warning(f"Rule error: {error}")

        report = aggregate(
            result.results,
            threshold=threshold,
            scanned_path=self.scanned_path,
            duplicates_enabled=duplicates,
            files_scanned=len(files),
            timestamp=datetime.fromtimestamp(self._clock(), UTC),
        )
        logger.info(
            f"Scan complete: {report.total} findings, exit code {report.exit_code}",
            extra={"finding_count": report.total, "duration_ms": round(result.execution_time_ms, 1)},
        )
        return report
