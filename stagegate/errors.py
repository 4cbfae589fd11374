"""Exceptions raised by stagegate stages."""


class StagegateError(Exception):
    """Base class for errors that abort the hook with exit code 1."""


class ConfigError(StagegateError):
    """The override file could not be read or parsed."""


class GitError(StagegateError):
    """A git plumbing command failed."""


class SnapshotError(StagegateError):
    """A staged file could not be written into the staging area."""
