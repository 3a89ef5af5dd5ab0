"""Determine the GitHub owner and repository from local git remotes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from hub_ci_status.git import GitError, GitUrl, get_branch, get_config, parse_git_url
from hub_ci_status.github.exceptions import UnknownProjectError
from hub_ci_status.logging import get_logger

logger = get_logger("github.project")

# Remote names tried first, in this order, after the current branch's remote
REMOTE_LOOKUP_ORDER = ("upstream", "github", "origin")

_REMOTE_URL_KEY = re.compile(r"^remote\.(.*)\.((?:push)?url)$")


@dataclass(frozen=True)
class _Remote:
    name: str
    is_push: bool
    url: str


def _sort_key(remote: _Remote, branch_remote: str | None) -> tuple[bool, int, str, bool]:
    if remote.name in REMOTE_LOOKUP_ORDER:
        order = REMOTE_LOOKUP_ORDER.index(remote.name)
    else:
        order = len(REMOTE_LOOKUP_ORDER)
    return (remote.name != branch_remote, order, remote.name, not remote.is_push)


def get_remote_urls(config: dict[str, str], branch_remote: str | None = None) -> list[str]:
    """List remote URLs from git config in lookup order.

    The current branch's remote comes first, then REMOTE_LOOKUP_ORDER, then
    all other remotes by name. Push URLs precede fetch URLs of the same remote.
    """
    remotes = []
    for key, value in config.items():
        match = _REMOTE_URL_KEY.match(key)
        if match:
            remotes.append(_Remote(name=match.group(1), is_push=match.group(2) == "pushurl", url=value))

    remotes.sort(key=lambda remote: _sort_key(remote, branch_remote))
    return [remote.url for remote in remotes]


def is_github_host(hostname: str, github_host: str | None = None) -> bool:
    """Whether a host name belongs to GitHub (or the configured enterprise host)."""
    return (
        hostname == "github.com"
        or hostname.endswith(".github.com")
        or (bool(github_host) and hostname == github_host)
    )


def get_github_urls(
    config: dict[str, str],
    branch_remote: str | None = None,
    github_host: str | None = None,
) -> list[GitUrl]:
    """Parse remote URLs and keep those pointing at GitHub, in lookup order."""
    github_urls = []
    for remote_url in get_remote_urls(config, branch_remote):
        try:
            parsed = parse_git_url(remote_url)
        except ValueError as e:
            logger.debug("Error parsing remote URL <%s>: %s", remote_url, e)
            continue
        if is_github_host(parsed.hostname, github_host):
            github_urls.append(parsed)
    return github_urls


def _try_get_branch(cwd: str | Path | None) -> str | None:
    try:
        return get_branch(cwd)
    except GitError as e:
        logger.debug("Unable to get current branch name: %s", e)
        return None


def get_project_name(
    cwd: str | Path | None = None,
    github_host: str | None = None,
) -> tuple[str, str]:
    """Get the GitHub owner and repository name for a git working directory.

    Args:
        cwd: Working directory inside the repository.
        github_host: Additional host to treat as GitHub (GITHUB_HOST).

    Returns:
        ``(owner, repo)``.

    Raises:
        UnknownProjectError: If no remote URL names a GitHub project.
        GitError: If the repository configuration can not be read.
    """
    branch = _try_get_branch(cwd)
    config = get_config("local", cwd)

    branch_remote = config.get(f"branch.{branch}.remote") if branch else None
    if branch and not branch_remote:
        logger.debug("No remote configured for current branch (%s)", branch)

    for remote_url in get_github_urls(config, branch_remote, github_host):
        path_parts = remote_url.path.split("/")
        if len(path_parts) != 3 or path_parts[0] or not path_parts[1] or not path_parts[2]:
            logger.debug(
                "Skipping GitHub URL <%s>: Need exactly 2 non-empty path segments.",
                remote_url.path,
            )
            continue

        owner, repo = path_parts[1], path_parts[2]
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        if not repo:
            logger.debug("Skipping GitHub URL <%s>: Empty repo name.", remote_url.path)
            continue

        return owner, repo

    raise UnknownProjectError()
