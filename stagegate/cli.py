#!/usr/bin/env python3
"""
stagegate CLI - entry point for the git pre-commit hook.

Loads config, checks the analyzers are installed, stages the selected files
and delegates to the inspection runner.
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import (
    CONFIG_FILENAME,
    HookConfig,
    dump_config,
    load_config,
    validate_config,
)
from .errors import StagegateError
from .gate_types import GREEN, NC, RED, YELLOW
from .git import git_dir, is_git_repo, repo_root, select_files
from .logger import configure_logging
from .preflight import check_tools
from .runner import print_header, run_inspection
from .snapshot import StagingArea, default_staging_root


def init_config(target: Path = Path(CONFIG_FILENAME)) -> bool:
    """Write a stagegate.yaml holding the default options."""
    if target.exists():
        print(f"{YELLOW}{target} already exists{NC}")
        return False

    target.write_text(dump_config(HookConfig()), encoding="utf-8")
    print(f"{GREEN}Created {target}{NC}")
    return True


def staging_root(config: HookConfig, root: Path, gitdir: Path) -> Path:
    """Resolve the scratch directory for this run.

    A configured staging_dir is only a parent: the scratch tree is always its
    stagegate-staging child, so wiping it never touches the user's files.
    """
    if config.staging_dir:
        parent = Path(config.staging_dir)
        if not parent.is_absolute():
            parent = root / parent
        return default_staging_root(parent)
    return default_staging_root(gitdir)


def run_hook(config: HookConfig, root: Path, gitdir: Path) -> int:
    """Run the full pre-commit pipeline and return the exit code."""
    missing = check_tools(config, root)
    if missing:
        print(f"{RED}ERROR: PHP analyzers not found or not executable{NC}")
        print(f"  phpcs: {config.phpcs_bin}")
        print(f"  phpmd: {config.phpmd_bin}")
        print("  Install them (composer require --dev squizlabs/php_codesniffer phpmd/phpmd)")
        print(f"  or set phpcs_bin / phpmd_bin in {CONFIG_FILENAME}")
        return 1

    files = select_files(config, root)
    if not files:
        print(f"{GREEN}No PHP files to inspect{NC}")
        return 0

    print_header(len(files))
    with StagingArea(staging_root(config, root, gitdir), cwd=root) as staging:
        staging.add_all(files)
        return run_inspection(config, staging, root)


def main():
    configure_logging()

    parser = argparse.ArgumentParser(
        description="stagegate - run phpcs and phpmd on staged files before commit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stagegate              Inspect staged files (pre-commit hook mode)
  stagegate --show       Show the resolved configuration
  stagegate --validate   Check the configuration's regex options
  stagegate --init       Write stagegate.yaml with the defaults
        """,
    )
    parser.add_argument("--version", "-v", action="version", version=f"stagegate {__version__}")
    parser.add_argument("--config", "-c", help=f"Path to {CONFIG_FILENAME}")
    parser.add_argument("--show", action="store_true", help="Show the resolved configuration")
    parser.add_argument("--validate", action="store_true", help="Validate the configuration")
    parser.add_argument("--init", action="store_true", help=f"Initialize {CONFIG_FILENAME}")
    args = parser.parse_args()

    # Handle init (doesn't need a repository)
    if args.init:
        sys.exit(0 if init_config() else 1)

    try:
        root = gitdir = None
        if is_git_repo():
            root, gitdir = repo_root(), git_dir()

        config = load_config(args.config, repo_root=root, git_dir=gitdir)

        if args.show:
            print(dump_config(config), end="")
            sys.exit(0)

        if args.validate:
            errors = validate_config(config)
            for e in errors:
                print(f"{RED}  - {e}{NC}")
            if not errors:
                print(f"{GREEN}Configuration is valid{NC}")
            sys.exit(1 if errors else 0)

        if root is None:
            print(f"{RED}ERROR: Not a git repository{NC}")
            sys.exit(1)

        sys.exit(run_hook(config, root, gitdir))
    except StagegateError as e:
        print(f"{RED}ERROR: {e}{NC}")
        sys.exit(1)


if __name__ == "__main__":
    main()
