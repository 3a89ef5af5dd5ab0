"""Git helpers - Revision resolution and repository configuration."""

from hub_ci_status.git.exceptions import ConfigParseError, GitError, RevisionError
from hub_ci_status.git.utils import (
    GitUrl,
    get_branch,
    get_config,
    parse_config_output,
    parse_git_url,
    resolve_commit,
)

__all__ = [
    "ConfigParseError",
    "GitError",
    "GitUrl",
    "RevisionError",
    "get_branch",
    "get_config",
    "parse_config_output",
    "parse_git_url",
    "resolve_commit",
]
