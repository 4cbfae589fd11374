"""Git plumbing for stagegate: commit base, staged entries, blob contents."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path

from .config import HookConfig
from .errors import ConfigError, GitError
from .gate_types import DIFF_FILTER, EMPTY_TREE, StagedFile

logger = logging.getLogger(__name__)


def run_git(
    args: list[str],
    cwd: Path | None = None,
) -> tuple[bool, str]:
    """Run a git command, return (success, stdout)."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return False, ""
    return result.returncode == 0, result.stdout.strip()


def _git_checked(args: list[str], cwd: Path | None = None) -> str:
    """Run a git command whose failure aborts the hook."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    if result.returncode != 0:
        raise GitError(f"git {args[0]} failed: {result.stderr.strip()}")
    return result.stdout


def is_git_repo(cwd: Path | None = None) -> bool:
    """Check if cwd is inside a git repository."""
    ok, _ = run_git(["rev-parse", "--git-dir"], cwd)
    return ok


def repo_root(cwd: Path | None = None) -> Path:
    """Return the top level of the working tree."""
    ok, out = run_git(["rev-parse", "--show-toplevel"], cwd)
    if not ok:
        raise GitError("Not a git repository")
    return Path(out)


def git_dir(cwd: Path | None = None) -> Path:
    """Return the absolute path of the repository's git directory."""
    ok, out = run_git(["rev-parse", "--absolute-git-dir"], cwd)
    if not ok:
        raise GitError("Not a git repository")
    return Path(out)


def commit_base(cwd: Path | None = None) -> str:
    """Return HEAD, or the empty tree when the repository has no commits yet."""
    ok, _ = run_git(["rev-parse", "--verify", "--quiet", "HEAD"], cwd)
    if ok:
        return "HEAD"
    logger.debug("No HEAD commit, diffing against the empty tree")
    return EMPTY_TREE


def parse_diff_index(output: str) -> list[StagedFile]:
    """Parse ``git diff-index --cached -z`` raw output.

    Each record is ``:<mode> <mode> <sha> <sha> <status>`` followed by one
    path, or two for copies and renames (source, then destination).
    """
    entries = []
    tokens = output.split("\0")
    i = 0
    while i < len(tokens):
        header = tokens[i]
        if not header.startswith(":"):
            i += 1
            continue
        meta = header[1:].split()
        if len(meta) < 5:
            raise GitError(f"Unexpected diff-index record: {header!r}")
        blob, status = meta[3], meta[4][0]
        if status in ("C", "R"):
            path = tokens[i + 2]
            i += 3
        else:
            path = tokens[i + 1]
            i += 2
        entries.append(StagedFile(path=path, blob=blob, status=status))
    return entries


def staged_entries(base: str, cwd: Path | None = None) -> list[StagedFile]:
    """List index entries added, copied, modified or renamed against base."""
    output = _git_checked(
        ["diff-index", "--cached", "-z", f"--diff-filter={DIFF_FILTER}", base],
        cwd,
    )
    return [e for e in parse_diff_index(output) if e.status in DIFF_FILTER]


def _compile(key: str, pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"{key}: invalid regex: {e}") from e


def filter_entries(entries: list[StagedFile], config: HookConfig) -> list[StagedFile]:
    """Apply the exclusion pattern, then the inclusion pattern.

    Both are unanchored regex searches over the repo-relative path.
    """
    if config.exclude_pattern:
        excluded = _compile("exclude_pattern", config.exclude_pattern)
        entries = [e for e in entries if not excluded.search(e.path)]

    included = _compile("file_pattern", config.file_pattern)
    return [e for e in entries if included.search(e.path)]


def select_files(config: HookConfig, cwd: Path | None = None) -> list[StagedFile]:
    """Return the staged files the analyzers should inspect."""
    if not is_git_repo(cwd):
        raise GitError("Not a git repository")

    entries = staged_entries(commit_base(cwd), cwd)
    selected = filter_entries(entries, config)
    logger.debug("%d staged file(s), %d selected", len(entries), len(selected))
    return selected


def read_blob(blob: str, cwd: Path | None = None) -> bytes:
    """Return the raw bytes of a blob from the object store."""
    try:
        result = subprocess.run(
            ["git", "cat-file", "blob", blob],
            cwd=cwd,
            capture_output=True,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    if result.returncode != 0:
        raise GitError(
            f"git cat-file failed for {blob}: {result.stderr.decode(errors='replace').strip()}"
        )
    return result.stdout
