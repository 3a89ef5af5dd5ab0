"""StatusReporter - Resolve a commit, fetch its CI status and print it."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TextIO

from hub_ci_status.git import resolve_commit
from hub_ci_status.github import get_project_name
from hub_ci_status.logging import PROGRESS_LOGGER, get_logger
from hub_ci_status.reporter.models import ReportOptions
from hub_ci_status.retry import RetryPolicy
from hub_ci_status.status import (
    CommitRef,
    combine_statuses,
    fetch_ci_status,
    format_statuses,
    get_state,
    state_to_exit_code,
)

logger = get_logger("reporter")

NO_STATUS = "no status"

FetchFn = Callable[..., Awaitable[Any]]


class StatusReporter:
    """Prints the CI status of a commit and maps it to an exit code.

    Collaborators are injected so each can be replaced independently:
    the git identity lookups, the status fetcher, the output stream and the
    logger that receives polling progress.
    """

    def __init__(
        self,
        fetch: FetchFn = fetch_ci_status,
        resolve_commit: Callable[[str, str | Path | None], str] = resolve_commit,
        get_project_name: Callable[
            [str | Path | None, str | None], tuple[str, str]
        ] = get_project_name,
        stdout: TextIO | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            fetch: Coroutine function with the signature of fetch_ci_status.
            resolve_commit: Resolves a revision name to a commit hash.
            get_project_name: Returns (owner, repo) for a working directory.
            stdout: Stream for the report. Defaults to sys.stdout at run time.
            logger: Receives polling progress at debug level.
        """
        self.fetch = fetch
        self.resolve_commit = resolve_commit
        self.get_project_name = get_project_name
        self.stdout = stdout
        self.logger = logger or logging.getLogger(PROGRESS_LOGGER)

    def _use_color(self, stdout: TextIO, use_color: bool | None) -> bool:
        if use_color is not None:
            return use_color
        isatty = getattr(stdout, "isatty", None)
        return bool(isatty and isatty())

    async def run(self, ref: str | None = None, options: ReportOptions | None = None) -> int:
        """Report the CI status of ``ref`` (default ``HEAD``).

        Returns:
            0 for success/neutral, 1 for a failure state, 2 if still pending,
            3 if no status was found.

        Raises:
            UnknownProjectError: If no GitHub remote is configured.
            RevisionError: If ref can not be resolved.
            StatusRequestError: If the API request fails.
        """
        options = options or ReportOptions()
        stdout = self.stdout if self.stdout is not None else sys.stdout
        ref = ref or "HEAD"

        owner, repo = await asyncio.to_thread(
            self.get_project_name, options.cwd, options.github_host
        )
        sha = await asyncio.to_thread(self.resolve_commit, ref, options.cwd)
        logger.debug("resolved %s to %s in %s/%s", ref, sha, owner, repo)

        fetch_kwargs: dict[str, Any] = {
            "token": options.token,
            "base_url": options.api_url,
            "wait_all": options.wait_all,
        }
        if options.wait_ms is not None:
            fetch_kwargs["retry"] = RetryPolicy(max_total_ms=options.wait_ms)
        if options.verbosity > 1:
            fetch_kwargs["debug"] = self.logger.debug

        combined, checks = await self.fetch(CommitRef(owner=owner, repo=repo, ref=sha), **fetch_kwargs)

        statuses = combine_statuses(combined, checks)
        state = get_state(statuses)

        if options.verbosity > 0 and statuses:
            use_color = self._use_color(stdout, options.use_color)
            stdout.write(format_statuses(statuses, use_color) + "\n")
        elif options.verbosity >= 0:
            stdout.write(f"{state or NO_STATUS}\n")

        return state_to_exit_code(state)
