"""Shared pytest fixtures and configuration."""

import logging
from collections.abc import Callable, Iterator

import pytest

from hub_ci_status.github.models import CheckRunList, CombinedStatus
from hub_ci_status.logging import ROOT_LOGGER

STATUS_CONTEXT = "continuous-integration/jenkins"
STATUS_URL = "https://ci.example.com/1000/output"
CHECK_NAME = "mighty_readme"
CHECK_URL = "https://github.com/github/hello-world/runs/4"


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests (real git)")


class FakeClock:
    """Millisecond clock whose sleep advances time instead of waiting."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.now_ms

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now_ms += seconds * 1000


@pytest.fixture
def clock() -> FakeClock:
    """A fresh fake clock."""
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo setup_logging() so handlers don't leak between tests."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def make_combined_status() -> Callable[..., CombinedStatus]:
    """Factory for combined status responses with one status per given state."""

    def make(*states: str) -> CombinedStatus:
        statuses = [
            {
                "state": state,
                "context": STATUS_CONTEXT,
                "target_url": STATUS_URL,
                "description": "Build has completed",
            }
            for state in states
        ]
        return CombinedStatus.model_validate(
            {
                "state": states[0] if states else "pending",
                "sha": "6dcb09b5b57875f334f61aebed695e2e4193db5e",
                "total_count": len(statuses),
                "statuses": statuses,
            }
        )

    return make


@pytest.fixture
def make_check_runs() -> Callable[..., CheckRunList]:
    """Factory for check-run lists with one run per given conclusion.

    "queued" and "in_progress" are used as the run status instead, with a
    neutral conclusion.
    """

    def make(*conclusions: str) -> CheckRunList:
        runs = []
        for conclusion in conclusions:
            if conclusion in ("queued", "in_progress"):
                status, conclusion = conclusion, "neutral"
            else:
                status = "completed"
            runs.append(
                {
                    "id": 4,
                    "name": CHECK_NAME,
                    "html_url": CHECK_URL,
                    "status": status,
                    "conclusion": conclusion,
                }
            )
        return CheckRunList.model_validate({"total_count": len(runs), "check_runs": runs})

    return make
