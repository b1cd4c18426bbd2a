"""
Shared fixtures for the techdebt test suite.

Provides test fixtures for:
- Temporary source trees
- Fake blame and dependency-audit capabilities
- ScanContext construction over a tree
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from techdebt.capabilities import BlameSource, DependencyAuditor, NoAuditor, NoBlame
from techdebt.collector import FileCollector
from techdebt.config import ScanConfig
from techdebt.errors import OptionalCollaboratorUnavailable
from techdebt.rules.base import ScanContext
from techdebt.scan_logging import LOGGER_NAME

# Fixed "now" for marker ages: 2026-01-01T00:00:00Z
FIXED_NOW = 1767225600.0


class FakeBlame(BlameSource):
    """Blame source returning canned timestamps per file name."""

    def __init__(
        self,
        times: Mapping[str, Mapping[int, int]] | None = None,
        fail: bool = False,
        error: Exception | None = None,
    ):
        self.times = times or {}
        self.fail = fail
        self.error = error
        self.calls: list[Path] = []

    def line_times(self, path: Path) -> Mapping[int, int]:
        self.calls.append(path)
        if self.fail:
            raise OptionalCollaboratorUnavailable("git", "blame failed")
        if self.error is not None:
            raise self.error
        return self.times.get(path.name, {})


class FakeAuditor(DependencyAuditor):
    """Dependency auditor with canned answers; None means unavailable."""

    def __init__(self, outdated: int | None = 0, vulnerabilities: int | None = 0):
        self.outdated = outdated
        self.vulnerabilities = vulnerabilities

    def outdated_count(self, root: Path) -> int:
        if self.outdated is None:
            raise OptionalCollaboratorUnavailable("npm", "not installed")
        return self.outdated

    def vulnerability_count(self, root: Path) -> int:
        if self.vulnerabilities is None:
            raise OptionalCollaboratorUnavailable("npm", "timed out after 60s")
        return self.vulnerabilities


@pytest.fixture(autouse=True)
def reset_techdebt_logging():
    """Drop handlers bound to streams that a CLI test may have swapped out."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def fixed_now() -> Callable[[], float]:
    return lambda: FIXED_NOW


@pytest.fixture
def make_tree(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Write `{relative_path: content}` under a fresh root and return it."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def build_context() -> Callable[..., ScanContext]:
    """Collect a tree and wrap it in a ScanContext with fake collaborators."""

    def _build(
        root: Path,
        config: ScanConfig | None = None,
        blame: BlameSource | None = None,
        auditor: DependencyAuditor | None = None,
    ) -> ScanContext:
        config = config or ScanConfig()
        files = FileCollector(root, config.exclude, config.extensions).collect()
        return ScanContext(
            root=root.resolve(),
            files=files,
            config=config,
            blame=blame or NoBlame(),
            auditor=auditor or NoAuditor(),
        )

    return _build


@pytest.fixture
def lines_of() -> Callable[..., str]:
    """Build file content with exactly `count` lines."""

    def _lines(count: int, text: str = "let value = 1;") -> str:
        return "".join(f"{text}\n" for _ in range(count))

    return _lines


@pytest.fixture
def fake_blame() -> type[FakeBlame]:
    return FakeBlame


@pytest.fixture
def fake_auditor() -> type[FakeAuditor]:
    return FakeAuditor
