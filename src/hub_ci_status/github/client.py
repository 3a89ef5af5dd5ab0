"""GitHubClient - Async reads of commit statuses and check runs."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from hub_ci_status import __version__
from hub_ci_status.config import DEFAULT_API_URL
from hub_ci_status.github.exceptions import StatusRequestError
from hub_ci_status.github.models import CheckRunList, CombinedStatus
from hub_ci_status.logging import get_logger, sanitize_for_log, truncate_output

logger = get_logger("github.client")

USER_AGENT = f"hub-ci-status/{__version__}"

# Check-run lists are read as a single page
CHECK_RUNS_PER_PAGE = 100


class StatusSource(Protocol):
    """The two reads the status fetcher needs."""

    async def get_combined_status(self, owner: str, repo: str, ref: str) -> CombinedStatus:
        """Get the combined commit status for a ref."""
        ...

    async def list_check_runs(self, owner: str, repo: str, ref: str) -> CheckRunList:
        """List the check runs for a ref."""
        ...


class GitHubClient:
    """Reads CI status information from the GitHub REST API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            token: GitHub token sent as a bearer credential, if any.
            base_url: GitHub API base URL (for testing/enterprise).
            transport: httpx transport to send requests through. The caller
                keeps ownership; closing this client does not close it.
            timeout: Request timeout in seconds.
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client for the GitHub API."""
        if self._client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
                "X-GitHub-Api-Version": "2022-11-28",
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            # A caller-supplied transport holds the connections and is closed by its owner
            if self.transport is None:
                await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self.client.get(path, params=params)
        if response.status_code != 200:
            body = sanitize_for_log(truncate_output(response.text))
            logger.debug("GET %s failed: %s", path, response.status_code)
            raise StatusRequestError(
                f"GET {path} failed: {response.status_code} - {body}",
                status_code=response.status_code,
            )
        return response.json()

    async def get_combined_status(self, owner: str, repo: str, ref: str) -> CombinedStatus:
        """Get the combined status for a ref.

        Raises:
            StatusRequestError: If the API does not answer 200.
        """
        data = await self._get_json(f"/repos/{owner}/{repo}/commits/{ref}/status")
        status = CombinedStatus.model_validate(data)
        logger.debug(
            "combined status for %s/%s@%s: %s (%d statuses)",
            owner,
            repo,
            ref,
            status.state,
            len(status.statuses),
        )
        return status

    async def list_check_runs(self, owner: str, repo: str, ref: str) -> CheckRunList:
        """List check runs for a ref (first page only).

        Raises:
            StatusRequestError: If the API does not answer 200.
        """
        data = await self._get_json(
            f"/repos/{owner}/{repo}/commits/{ref}/check-runs",
            params={"per_page": CHECK_RUNS_PER_PAGE},
        )
        checks = CheckRunList.model_validate(data)
        logger.debug(
            "check runs for %s/%s@%s: %d of %d",
            owner,
            repo,
            ref,
            len(checks.check_runs),
            checks.total_count,
        )
        return checks
