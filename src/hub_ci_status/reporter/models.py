"""Data models for the status reporter."""

from dataclasses import dataclass
from pathlib import Path

from hub_ci_status.config import DEFAULT_API_URL


@dataclass
class ReportOptions:
    """Options for one status report.

    Attributes:
        verbosity: Net verbosity. Below 0 prints nothing, above 0 lists each
            status, above 1 also logs polling progress.
        use_color: Force color on or off. None colors when stdout is a TTY.
        wait_ms: Poll for up to this many milliseconds (may be infinite).
            None makes a single request.
        wait_all: Keep waiting after a failure until nothing is pending.
        token: GitHub token.
        api_url: GitHub API base URL.
        github_host: Additional host name treated as GitHub.
        cwd: Working directory of the git repository.
    """

    verbosity: int = 0
    use_color: bool | None = None
    wait_ms: float | None = None
    wait_all: bool = False
    token: str | None = None
    api_url: str = DEFAULT_API_URL
    github_host: str | None = None
    cwd: str | Path | None = None
