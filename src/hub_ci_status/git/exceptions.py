"""Custom exceptions for git helpers."""


class GitError(Exception):
    """Base exception for git command errors."""


class RevisionError(GitError):
    """A revision name could not be resolved to a commit hash."""


class ConfigParseError(GitError):
    """Output of ``git config --list --null`` could not be parsed."""
