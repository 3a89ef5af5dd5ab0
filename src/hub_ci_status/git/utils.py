"""Git helpers: revision resolution, branch and config lookup, URL parsing."""

from __future__ import annotations

import re
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from hub_ci_status.git.exceptions import ConfigParseError, GitError, RevisionError
from hub_ci_status.logging import get_logger

logger = get_logger("git")

CONFIG_SCOPES = ("global", "local", "system", "worktree")

_IS_WINDOWS = sys.platform.startswith("win")


def _run_git(*args: str, cwd: str | Path | None = None) -> bytes:
    """Run a git command and return its raw stdout.

    Raises:
        subprocess.CalledProcessError: If the command fails.
    """
    logger.debug("running git %s", " ".join(args))
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        check=True,
    )
    return result.stdout


def _stderr_text(error: subprocess.CalledProcessError) -> str:
    stderr = error.stderr or b""
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    return stderr.strip() or str(error)


def resolve_commit(name: str, cwd: str | Path | None = None) -> str:
    """Resolve a revision name to its commit hash.

    Args:
        name: Any revision ``git rev-parse`` understands (e.g. ``HEAD``).
        cwd: Working directory inside the repository.

    Returns:
        The full commit hash.

    Raises:
        RevisionError: If the name can not be resolved.
    """
    try:
        out = _run_git("rev-parse", "--verify", name, cwd=cwd)
    except (OSError, subprocess.CalledProcessError) as e:
        detail = _stderr_text(e) if isinstance(e, subprocess.CalledProcessError) else str(e)
        raise RevisionError(f"Unable to resolve '{name}' to a commit hash: {detail}") from e
    return out.decode("utf-8").strip()


def get_branch(cwd: str | Path | None = None) -> str:
    """Get the short name of the current branch.

    Raises:
        GitError: If HEAD is detached, cwd is not a repository, or git fails.
    """
    try:
        out = _run_git("symbolic-ref", "-q", "--short", "HEAD", cwd=cwd)
    except (OSError, subprocess.CalledProcessError) as e:
        detail = _stderr_text(e) if isinstance(e, subprocess.CalledProcessError) else str(e)
        raise GitError(f"Unable to determine current branch: {detail}") from e
    return out.decode("utf-8").strip()


def parse_config_output(data: bytes) -> dict[str, str]:
    """Parse the output of ``git config --list --null``.

    Each entry is ``key\\nvalue\\0``.

    Raises:
        ConfigParseError: If an entry has no newline or data follows the last NUL.
    """
    config: dict[str, str] = {}
    key_start = 0
    value_end = data.find(b"\0", key_start)
    while value_end >= key_start:
        key_end = data.find(b"\n", key_start, value_end)
        if key_end < 0:
            raise ConfigParseError(
                f"Invalid config output: '\\n' not found in {data[key_start:value_end]!r} "
                f"(byte offset {key_start} to {value_end})"
            )
        key = data[key_start:key_end].decode("utf-8")
        config[key] = data[key_end + 1 : value_end].decode("utf-8")
        key_start = value_end + 1
        value_end = data.find(b"\0", key_start)

    if key_start != len(data):
        raise ConfigParseError(f"Invalid config output: data after last '\\0': {data[key_start:]!r}")
    return config


def get_config(scope: str | None = None, cwd: str | Path | None = None) -> dict[str, str]:
    """Get git configuration values.

    Args:
        scope: One of CONFIG_SCOPES, or None for the merged configuration.
        cwd: Working directory inside the repository.

    Returns:
        Mapping of configuration keys to values.

    Raises:
        ValueError: If scope is not recognized.
        GitError: If git fails.
        ConfigParseError: If the output can not be parsed.
    """
    if scope is not None and scope not in CONFIG_SCOPES:
        raise ValueError(f'Invalid scope "{scope}"')

    args = ["config", "--list", "--null"]
    if scope:
        args.append(f"--{scope}")

    try:
        out = _run_git(*args, cwd=cwd)
    except subprocess.CalledProcessError as e:
        raise GitError(f"Unable to read git config: {_stderr_text(e)}") from e
    return parse_config_output(out)


@dataclass(frozen=True)
class GitUrl:
    """A parsed git remote URL."""

    scheme: str
    hostname: str
    path: str
    helper: str | None = None


def git_url_is_local_not_ssh(git_url: str) -> bool:
    """Whether a git URL is a local path rather than a remote (scp-like or URL)."""
    return not re.match(r"^[^/]*:", git_url) or bool(
        _IS_WINDOWS and re.match(r"^[A-Za-z]:", git_url)
    )


def parse_git_url(git_url: str) -> GitUrl:
    """Parse a git URL, including remote helpers, scp-like syntax and local paths.

    Raises:
        ValueError: If the URL can not be parsed.
    """
    if git_url_is_local_not_ssh(git_url):
        return GitUrl(scheme="file", hostname="", path=Path(git_url).absolute().as_posix())

    helper = None
    helper_match = re.match(r"^([A-Za-z0-9][A-Za-z0-9+.-]*)::(.*)$", git_url)
    if helper_match:
        helper, git_url = helper_match.group(1), helper_match.group(2)

    # scp-like syntax; the host may be wrapped in [] to disambiguate the path
    scp_match = re.match(r"^([^@/]+@(?:\[[^\]/]+\]|[^:/]+)):(.*)$", git_url)
    if scp_match:
        git_url = f"ssh://{scp_match.group(1)}/{scp_match.group(2)}"

    parts = urlsplit(git_url)
    if not parts.scheme:
        raise ValueError(f"Invalid git URL: {git_url!r}")
    return GitUrl(
        scheme=parts.scheme,
        hostname=(parts.hostname or "").strip("[]"),
        path=parts.path,
        helper=helper,
    )
