"""Fetch the combined status and check runs for a commit, optionally polling.

Both collections are read concurrently on every attempt. When a retry policy
is given the pair is re-read until nothing is pending, or (unless waiting for
all) until something has definitively failed.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import httpx

from hub_ci_status.config import DEFAULT_API_URL
from hub_ci_status.github.client import GitHubClient, StatusSource
from hub_ci_status.github.models import CheckRunList, CombinedStatus
from hub_ci_status.logging import get_logger
from hub_ci_status.retry import RetryPolicy, retry_async
from hub_ci_status.status.models import CommitRef, State

logger = get_logger("status.fetcher")

PENDING_CHECK_STATUSES = frozenset({"queued", "in_progress"})
ACCEPTABLE_CONCLUSIONS = frozenset({State.SUCCESS.value, State.NEUTRAL.value})

StatusPair = tuple[CombinedStatus, CheckRunList]


@dataclass
class PollProgress:
    """Counts from the most recent attempt, used to describe what is awaited."""

    status_count: int = 0
    status_wait_count: int = 0
    check_count: int = 0
    check_wait_count: int = 0

    def describe(self) -> str:
        if self.status_count == 0 and self.check_count == 0:
            return "any CI status or check"

        waiting_for = []
        if self.status_wait_count > 0:
            waiting_for.append(f"{self.status_wait_count}/{self.status_count} CI statuses")
        if self.check_wait_count > 0:
            waiting_for.append(f"{self.check_wait_count}/{self.check_count} checks")
        return " and ".join(waiting_for)


def make_should_retry(progress: PollProgress, wait_all: bool) -> Callable[[StatusPair], bool]:
    """Build the predicate deciding whether a fetched pair is still unsettled.

    Args:
        progress: Updated with the counts of each evaluated pair.
        wait_all: Keep waiting for pending entries even after a failure.
    """

    def should_retry(result: StatusPair) -> bool:
        combined, checks = result

        progress.status_count = len(combined.statuses)
        progress.status_wait_count = 0
        for status in combined.statuses:
            if status.state == State.PENDING.value:
                progress.status_wait_count += 1
            elif not wait_all and status.state != State.SUCCESS.value:
                return False

        progress.check_count = len(checks.check_runs)
        progress.check_wait_count = 0
        for check_run in checks.check_runs:
            if check_run.status in PENDING_CHECK_STATUSES:
                progress.check_wait_count += 1
            elif not wait_all and check_run.conclusion not in ACCEPTABLE_CONCLUSIONS:
                return False

        # Nothing registered yet usually means CI has not picked the commit up
        return (
            progress.status_wait_count > 0
            or progress.check_wait_count > 0
            or (progress.status_count == 0 and progress.check_count == 0)
        )

    return should_retry


def format_seconds(seconds: float) -> str:
    """Render a wait without a trailing ``.0`` and without rounding."""
    if float(seconds).is_integer():
        return str(int(seconds))
    return repr(float(seconds))


def _keep_alive_transport(base_url: str) -> httpx.AsyncHTTPTransport | None:
    if urlsplit(base_url).scheme not in ("http", "https"):
        return None
    return httpx.AsyncHTTPTransport(limits=httpx.Limits(keepalive_expiry=60.0))


async def fetch_ci_status(
    commit: CommitRef,
    *,
    client: StatusSource | None = None,
    token: str | None = None,
    base_url: str = DEFAULT_API_URL,
    transport: httpx.AsyncBaseTransport | None = None,
    retry: RetryPolicy | None = None,
    wait_all: bool = False,
    debug: Callable[[str], Any] | None = None,
) -> StatusPair:
    """Fetch the combined status and check runs for a commit.

    Args:
        commit: Owner, repository and ref to query.
        client: Status source to read from. Built from token/base_url/transport
            (and closed afterwards) when omitted.
        token: GitHub token for a client built here.
        base_url: API base URL for a client built here.
        transport: httpx transport for a client built here.
        retry: Poll until settled using this policy. A single attempt is made
            when omitted. The policy's should_retry is replaced.
        wait_all: Keep polling after a failure until nothing is pending.
        debug: Called with a progress line before every wait.

    Returns:
        ``(combined_status, check_runs)`` from the last attempt.

    Raises:
        StatusRequestError: If either request fails.
        httpx.HTTPError: On transport failures.
    """
    owned_client: GitHubClient | None = None
    owned_transport: httpx.AsyncHTTPTransport | None = None
    if client is None:
        if retry is not None and transport is None:
            # Reuse connections across polls
            owned_transport = _keep_alive_transport(base_url)
            transport = owned_transport
        owned_client = GitHubClient(token=token, base_url=base_url, transport=transport)
        client = owned_client
    source = client

    async def get_both() -> StatusPair:
        tasks = [
            asyncio.ensure_future(
                source.get_combined_status(commit.owner, commit.repo, commit.ref)
            ),
            asyncio.ensure_future(source.list_check_runs(commit.owner, commit.repo, commit.ref)),
        ]
        try:
            combined, checks = await asyncio.gather(*tasks)
        except BaseException:
            # Neither read may outlive the client
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return combined, checks

    try:
        if retry is None:
            return await get_both()

        progress = PollProgress()
        policy = dataclasses.replace(retry, should_retry=make_should_retry(progress, wait_all))

        if debug is not None:
            sleep = retry.sleep

            async def sleep_with_progress(seconds: float) -> Any:
                wait = format_seconds(seconds)
                debug(f"Waiting for {progress.describe()}.  Retry in {wait} seconds...")
                return await sleep(seconds)

            policy = dataclasses.replace(policy, sleep=sleep_with_progress)

        logger.debug(
            "polling %s/%s@%s (max %s ms, wait_all=%s)",
            commit.owner,
            commit.repo,
            commit.ref,
            policy.max_total_ms,
            wait_all,
        )
        return await retry_async(get_both, policy)
    finally:
        if owned_client is not None:
            await owned_client.aclose()
        if owned_transport is not None:
            await owned_transport.aclose()
