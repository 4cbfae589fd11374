"""Type definitions and constants for stagegate."""

from typing import NamedTuple

# Colors for terminal output
RED = "\033[0;31m"
YELLOW = "\033[1;33m"
GREEN = "\033[0;32m"
BLUE = "\033[0;34m"
NC = "\033[0m"  # No Color

# Hash of git's empty tree, the diff base before the first commit
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

# Change types eligible for inspection (Added, Copied, Modified, Renamed)
DIFF_FILTER = "ACMR"


class StagedFile(NamedTuple):
    """A path recorded in the index for the next commit."""

    path: str
    blob: str
    status: str  # "A", "C", "M" or "R"


class ToolResult(NamedTuple):
    """Exit status and combined output of one analyzer run."""

    tool: str
    returncode: int
    output: str
