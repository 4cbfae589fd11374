"""Shared test fixtures for stagegate tests."""

import logging
import os
import stat
import subprocess
import sys
from pathlib import Path

import pytest

import stagegate.logger


class _StdoutHandler(logging.Handler):
    """A handler that always writes to the *current* sys.stdout.

    Unlike StreamHandler(sys.stdout), this resolves sys.stdout at emit-time
    so it works with pytest's capsys fixture.
    """

    def emit(self, record):
        try:
            msg = self.format(record)
            sys.stdout.write(msg + "\n")
            sys.stdout.flush()
        except Exception:
            self.handleError(record)


@pytest.fixture(autouse=True)
def _setup_logging(monkeypatch):
    """Route all stagegate loggers to stdout so capsys can capture them."""
    monkeypatch.setattr(stagegate.logger, "_CONFIGURED", True)
    monkeypatch.delenv("STAGEGATE_CONFIG", raising=False)

    handler = _StdoutHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(logging.DEBUG)

    root_logger = logging.getLogger("stagegate")
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)
    root_logger.propagate = False

    yield

    root_logger.removeHandler(handler)


def git(repo: Path, *args: str) -> str:
    """Run a git command in repo and return stdout."""
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True,
    )
    return result.stdout


def init_repo(path: Path, commit: bool = True) -> Path:
    """Initialize a real git repo, optionally with a first commit."""
    git(path, "init", "-q")
    git(path, "config", "user.email", "test@test.com")
    git(path, "config", "user.name", "Test")
    git(path, "config", "commit.gpgsign", "false")
    if commit:
        (path / "README.md").write_text("# test\n")
        git(path, "add", "README.md")
        git(path, "commit", "-q", "-m", "initial commit")
    return path


def stage(repo: Path, relpath: str, content: str) -> Path:
    """Write a file and add it to the index."""
    target = repo / relpath
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    git(repo, "add", relpath)
    return target


def make_tool(directory: Path, name: str, exit_code: int = 0, message: str = "") -> Path:
    """Create a fake analyzer script.

    It appends its arguments to <name>.calls, prints message followed by the
    contents of every argument that names an existing file, and exits with
    exit_code.
    """
    directory.mkdir(parents=True, exist_ok=True)
    script = directory / name
    calls = directory / f"{name}.calls"
    script.write_text(
        "#!/bin/sh\n"
        f'echo "$@" >> "{calls}"\n'
        f'echo "{message}"\n'
        'for a in "$@"; do\n'
        '  if [ -f "$a" ]; then cat "$a"; fi\n'
        "done\n"
        f"exit {exit_code}\n"
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


def tool_calls(script: Path) -> list[str]:
    """Return the recorded argument lines of a fake analyzer."""
    calls = script.parent / f"{script.name}.calls"
    if not calls.exists():
        return []
    return calls.read_text().splitlines()


@pytest.fixture
def repo(tmp_path):
    """A git repository with one commit, used as the working directory."""
    path = tmp_path / "repo"
    path.mkdir()
    init_repo(path)
    original_cwd = os.getcwd()
    os.chdir(path)
    yield path
    os.chdir(original_cwd)


@pytest.fixture
def tools_dir(tmp_path):
    """Directory outside the repository for fake analyzer scripts."""
    path = tmp_path / "bin"
    path.mkdir()
    return path
