"""Custom exceptions for the GitHub layer."""


class GitHubError(Exception):
    """Base exception for GitHub errors."""


class StatusRequestError(GitHubError):
    """A status or check-run request returned an unexpected response."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnknownProjectError(GitHubError):
    """No git remote points at a recognized GitHub project."""

    def __init__(self) -> None:
        super().__init__(
            "Unable to determine GitHub project name: No GitHub remote URLs recognized."
        )
