"""Status - Polling for CI results and folding them into one state."""

from hub_ci_status.status.aggregator import (
    check_run_to_status,
    combine_statuses,
    format_statuses,
    get_state,
    state_to_exit_code,
)
from hub_ci_status.status.fetcher import PollProgress, fetch_ci_status
from hub_ci_status.status.models import SEVERITY_ORDER, CommitRef, State, StatusRecord

__all__ = [
    "SEVERITY_ORDER",
    "CommitRef",
    "PollProgress",
    "State",
    "StatusRecord",
    "check_run_to_status",
    "combine_statuses",
    "fetch_ci_status",
    "format_statuses",
    "get_state",
    "state_to_exit_code",
]
