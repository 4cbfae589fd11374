"""Preflight check: both analyzer executables must exist and be executable."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .config import HookConfig


def resolve_tool(tool: str, cwd: Path | None = None) -> str | None:
    """Resolve a configured tool path to an executable, or None.

    A bare command name is looked up on PATH. Anything containing a path
    separator is taken relative to cwd.
    """
    if not tool:
        return None

    if os.sep not in tool and (os.altsep is None or os.altsep not in tool):
        return shutil.which(tool)

    path = Path(tool)
    if not path.is_absolute() and cwd is not None:
        path = Path(cwd) / path
    if path.is_file() and os.access(path, os.X_OK):
        return str(path.resolve())
    return None


def check_tools(config: HookConfig, cwd: Path | None = None) -> list[str]:
    """Return the configured analyzer paths that are missing or not executable."""
    return [
        tool
        for tool in (config.phpcs_bin, config.phpmd_bin)
        if resolve_tool(tool, cwd) is None
    ]
