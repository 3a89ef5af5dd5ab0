"""Pydantic models for the GitHub status and checks API responses.

Only the fields this tool reads are declared; everything else in the
payload is ignored.
"""

from pydantic import BaseModel, Field


class CommitStatus(BaseModel):
    """One entry of a combined status."""

    state: str
    context: str = ""
    target_url: str | None = None
    description: str | None = None


class CombinedStatus(BaseModel):
    """Response of "Get the combined status for a specific reference"."""

    state: str = ""
    sha: str | None = None
    total_count: int = 0
    statuses: list[CommitStatus] = Field(default_factory=list)


class CheckRun(BaseModel):
    """One entry of a check-run list.

    ``conclusion`` is only set once ``status`` is ``completed``.
    """

    name: str = ""
    status: str
    conclusion: str | None = None
    html_url: str | None = None


class CheckRunList(BaseModel):
    """Response of "List check runs for a Git reference"."""

    total_count: int = 0
    check_runs: list[CheckRun] = Field(default_factory=list)
