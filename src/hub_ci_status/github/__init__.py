"""GitHub - Status API client and project identity from git remotes."""

from hub_ci_status.github.client import GitHubClient, StatusSource
from hub_ci_status.github.exceptions import (
    GitHubError,
    StatusRequestError,
    UnknownProjectError,
)
from hub_ci_status.github.models import CheckRun, CheckRunList, CombinedStatus, CommitStatus
from hub_ci_status.github.project import get_project_name

__all__ = [
    "CheckRun",
    "CheckRunList",
    "CombinedStatus",
    "CommitStatus",
    "GitHubClient",
    "GitHubError",
    "StatusRequestError",
    "StatusSource",
    "UnknownProjectError",
    "get_project_name",
]
