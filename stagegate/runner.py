"""Inspection logic for stagegate.

Runs phpcs, then phpmd, against the staging area and stops at the first
analyzer that reports issues.
"""

import logging
from pathlib import Path

from .analyzers import get_analyzers
from .config import HookConfig
from .gate_types import BLUE, GREEN, NC, RED, YELLOW
from .snapshot import StagingArea

logger = logging.getLogger(__name__)


def run_inspection(config: HookConfig, staging: StagingArea, repo_root: Path | None = None) -> int:
    """Run both analyzers in order and return the hook's exit code."""
    for analyzer in get_analyzers(config):
        if not analyzer.enabled:
            print(f"{YELLOW}{analyzer.name}: off{NC}")
            continue

        result = analyzer.run(staging.files, staging.root, repo_root)
        if result.returncode != 0:
            print(f"{RED}{analyzer.name}: issues found{NC}")
            print(result.output.rstrip())
            print(f"\n{RED}Fix the {analyzer.name} issues or use: git commit --no-verify{NC}")
            logger.info("%s failed with exit code %d", analyzer.name, result.returncode)
            return result.returncode

        print(f"{GREEN}{analyzer.name}: OK{NC}")

    return 0


def print_header(count: int) -> None:
    """Print the banner shown before the analyzers run."""
    print(f"{BLUE}stagegate - PHP lint{NC}")
    print("=" * 30)
    print(f"Inspecting {count} staged file(s)...")
