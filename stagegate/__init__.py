# stagegate: PHP lint gate for git commits
"""
stagegate - Block commits that fail PHP_CodeSniffer or PHP Mess Detector.

Runs both analyzers against the staged contents of a commit, never the
working tree.
"""

__version__ = "1.0.0"

from .config import HookConfig, load_config, validate_config
from .gate_types import StagedFile
from .git import commit_base, select_files
from .runner import run_inspection
from .snapshot import StagingArea

__all__ = [
    "HookConfig",
    "load_config",
    "validate_config",
    "StagedFile",
    "commit_base",
    "select_files",
    "StagingArea",
    "run_inspection",
    "__version__",
]
