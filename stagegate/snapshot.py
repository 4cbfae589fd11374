"""Staging area: a scratch tree holding the staged contents of selected files.

Analyzers run against this tree instead of the working tree, so they see
exactly what will be committed, including partially staged files.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .errors import SnapshotError
from .gate_types import StagedFile
from .git import read_blob

logger = logging.getLogger(__name__)

STAGING_DIRNAME = "stagegate-staging"


class StagingArea:
    """Context manager owning the scratch directory for one hook run.

    Usage:
        with StagingArea(root, cwd=repo) as staging:
            staging.add_all(files)
            run_tools(staging.root, staging.files)
    """

    def __init__(self, root: Path, cwd: Path | None = None):
        self.root = Path(root)
        self.cwd = cwd
        self.files: list[str] = []

    def __enter__(self) -> StagingArea:
        if self.root.exists():
            logger.info("Removing stale staging area %s", self.root)
            shutil.rmtree(self.root)
        self.root.mkdir(parents=True)
        return self

    def __exit__(self, *_: object) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        """Remove the scratch directory if it still exists."""
        if self.root.exists():
            shutil.rmtree(self.root)
            logger.debug("Removed staging area %s", self.root)

    def _target(self, path: str) -> Path:
        root = self.root.resolve()
        target = (root / path).resolve()
        try:
            target.relative_to(root)
        except ValueError as e:
            raise SnapshotError(f"Refusing to write outside staging area: {path}") from e
        return target

    def add(self, entry: StagedFile) -> Path:
        """Write the staged blob of one entry at its relative path."""
        target = self._target(entry.path)
        data = read_blob(entry.blob, self.cwd)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        self.files.append(entry.path)
        return target

    def add_all(self, entries: list[StagedFile]) -> list[str]:
        """Write every entry and return the relative paths written."""
        for entry in entries:
            self.add(entry)
        logger.debug("Staged %d file(s) into %s", len(entries), self.root)
        return self.files


def default_staging_root(parent: Path) -> Path:
    """Scratch location under parent (the git directory unless configured)."""
    return parent / STAGING_DIRNAME
