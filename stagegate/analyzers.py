#!/usr/bin/env python3
"""
Analyzer adapters for stagegate.

Each adapter turns the resolved config into an argv list for its tool and
runs it against the staging area. Options are passed as discrete arguments,
never through a shell, and omitted when unset.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from .config import HookConfig
from .gate_types import ToolResult
from .preflight import resolve_tool

logger = logging.getLogger(__name__)


class AnalyzerAdapter:
    """Common interface to an external PHP analyzer."""

    name = ""

    def __init__(self, config: HookConfig):
        self.config = config

    @property
    def enabled(self) -> bool:
        return getattr(self.config, f"{self.name}_active")

    @property
    def binary(self) -> str:
        return getattr(self.config, f"{self.name}_bin")

    def build_command(self, files: List[str], binary: Optional[str] = None) -> List[str]:
        raise NotImplementedError

    def run(self, files: List[str], staging_root: Path, repo_root: Optional[Path] = None) -> ToolResult:
        """
        Run the analyzer on files, relative to staging_root.

        Args:
            files: Repo-relative paths present under staging_root
            staging_root: Working directory for the tool
            repo_root: Base for resolving a relative binary path

        Returns:
            ToolResult with the exit code and combined stdout/stderr
        """
        binary = resolve_tool(self.binary, repo_root) or self.binary
        cmd = self.build_command(files, binary)
        logger.debug("Running %s: %s", self.name, cmd)

        result = subprocess.run(
            cmd,
            cwd=staging_root,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
        logger.debug("%s exited with %d", self.name, result.returncode)
        return ToolResult(tool=self.name, returncode=result.returncode, output=result.stdout)


class PhpcsAdapter(AnalyzerAdapter):
    """Interface to PHP_CodeSniffer."""

    name = "phpcs"

    def build_command(self, files: List[str], binary: Optional[str] = None) -> List[str]:
        """Build the phpcs command line."""
        c = self.config
        cmd = [binary or c.phpcs_bin, "-s"]
        if c.phpcs_ignore_warnings:
            cmd.append("-n")
        if c.phpcs_standard:
            cmd.append(f"--standard={c.phpcs_standard}")
        if c.phpcs_encoding:
            cmd.append(f"--encoding={c.phpcs_encoding}")
        if c.phpcs_ignore:
            cmd.append(f"--ignore={c.phpcs_ignore}")
        if c.phpcs_sniffs:
            cmd.append(f"--sniffs={c.phpcs_sniffs}")
        cmd.extend(files)
        return cmd


class PhpmdAdapter(AnalyzerAdapter):
    """Interface to PHP Mess Detector.

    phpmd takes its inputs positionally: a comma-separated path list, the
    report format, then the rulesets.
    """

    name = "phpmd"

    def build_command(self, files: List[str], binary: Optional[str] = None) -> List[str]:
        """Build the phpmd command line."""
        c = self.config
        cmd = [binary or c.phpmd_bin, ",".join(files), c.phpmd_output or "text", c.phpmd_rulesets]
        if c.phpmd_suffixes:
            cmd.extend(["--suffixes", c.phpmd_suffixes])
        if c.phpmd_exclude:
            cmd.extend(["--exclude", c.phpmd_exclude])
        return cmd


def get_analyzers(config: HookConfig) -> List[AnalyzerAdapter]:
    """Analyzers in the order they run: phpcs strictly before phpmd."""
    return [PhpcsAdapter(config), PhpmdAdapter(config)]
