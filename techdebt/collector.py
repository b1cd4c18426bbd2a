"""File collection for a scan run.

Walks the scan root once, pruning excluded directories instead of
filtering their contents afterwards, so dependency caches such as
node_modules are never descended into. Exclude patterns use gitignore
semantics via the pathspec library: a bare name like `dist` or
`*.min.js` matches at any depth.

Example usage:
    collector = FileCollector(root, exclude=["node_modules"], extensions=[".ts"])
    for source in collector.collect():
        print(source.relative)
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

import pathspec

from .errors import InvalidRootError
from .rules.base import SourceFile

logger = logging.getLogger(__name__)


class FileCollector:
    """Enumerates candidate source files under a root directory."""

    def __init__(
        self,
        root: Path | str,
        exclude: Iterable[str],
        extensions: Iterable[str],
    ):
        """Initialize the collector.

        Args:
            root: Directory to scan.
            exclude: Gitignore-style patterns to skip at any depth.
            extensions: Extensions (with leading dot) to collect.
        """
        self.root = Path(root)
        self.extensions = {ext.lower() for ext in extensions}
        patterns = [p.strip() for p in exclude if p.strip() and not p.startswith("#")]
        self._spec: pathspec.GitIgnoreSpec | None = (
            pathspec.GitIgnoreSpec.from_lines(patterns)
            if patterns
            else None
        )

    def is_excluded(self, relative: str, is_dir: bool = False) -> bool:
        """Check a root-relative posix path against the exclude patterns."""
        if self._spec is None:
            return False
        return self._spec.match_file(f"{relative}/" if is_dir else relative)

    def collect(self) -> tuple[SourceFile, ...]:
        """Collect matching files, sorted by relative path.

        Returns:
            Tuple of SourceFile entries.

        Raises:
            InvalidRootError: If the root is missing or not a directory.
        """
        if not self.root.is_dir():
            raise InvalidRootError(str(self.root))

        root = self.root.resolve()
        collected: list[SourceFile] = []
        pruned = 0

        for dirpath, dirnames, filenames in os.walk(root, topdown=True, followlinks=False):
            dir_path = Path(dirpath)
            rel_dir = dir_path.relative_to(root).as_posix()
            prefix = "" if rel_dir == "." else f"{rel_dir}/"

            kept_dirs = []
            for name in sorted(dirnames):
                if self.is_excluded(f"{prefix}{name}", is_dir=True):
                    pruned += 1
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                relative = f"{prefix}{filename}"
                if Path(filename).suffix.lower() not in self.extensions:
                    continue
                if self.is_excluded(relative):
                    continue
                file_path = dir_path / filename
                if not file_path.is_file():
                    continue
                collected.append(SourceFile(path=file_path, relative=relative))

        collected.sort(key=lambda source: source.relative)
        logger.debug(
            f"Collected {len(collected)} files under {root} ({pruned} directories pruned)"
        )
        return tuple(collected)
