"""Fold statuses and check runs into one state, exit code and listing."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import click

from hub_ci_status.github.models import CheckRun, CheckRunList, CombinedStatus
from hub_ci_status.status.models import FAILURE_STATES, SEVERITY_ORDER, State, StatusRecord

_SEVERITY = {state: index for index, state in enumerate(SEVERITY_ORDER)}

SUCCESS_MARKER = "✔︎"
FAILURE_MARKER = "✖︎"
NEUTRAL_MARKER = "◦"
PENDING_MARKER = "●"


def check_run_to_status(check_run: CheckRun) -> StatusRecord:
    """Convert a check run to a status record.

    Runs that have not completed are pending whatever their conclusion says.
    """
    if check_run.status != "completed":
        state = State.PENDING.value
    else:
        state = check_run.conclusion or ""
    return StatusRecord(state=state, context=check_run.name, target_url=check_run.html_url)


def combine_statuses(combined: CombinedStatus, checks: CheckRunList) -> list[StatusRecord]:
    """Commit statuses (in API order) followed by the converted check runs."""
    records = [
        StatusRecord(state=status.state, context=status.context, target_url=status.target_url)
        for status in combined.statuses
    ]
    records.extend(check_run_to_status(check_run) for check_run in checks.check_runs)
    return records


def get_state(statuses: Iterable[StatusRecord]) -> str:
    """Most severe known state among the records, or "" if there is none."""
    worst = ""
    worst_severity = -1
    for status in statuses:
        severity = _SEVERITY.get(status.state, -1)
        if severity > worst_severity:
            worst = status.state
            worst_severity = severity
    return worst


def state_to_exit_code(state: str) -> int:
    """Process exit code for an aggregate state."""
    if state in (State.NEUTRAL.value, State.SUCCESS.value):
        return 0
    if state in FAILURE_STATES:
        return 1
    if state == State.PENDING.value:
        return 2
    return 3


def state_marker(state: str) -> str:
    if state == State.SUCCESS.value:
        return SUCCESS_MARKER
    if state in FAILURE_STATES:
        return FAILURE_MARKER
    if state == State.NEUTRAL.value:
        return NEUTRAL_MARKER
    if state == State.PENDING.value:
        return PENDING_MARKER
    return ""


def state_color(state: str) -> str | None:
    if state == State.SUCCESS.value:
        return "green"
    if state in FAILURE_STATES:
        return "red"
    if state == State.NEUTRAL.value:
        return "black"
    if state == State.PENDING.value:
        return "yellow"
    return None


def format_statuses(statuses: Sequence[StatusRecord], use_color: bool = False) -> str:
    """Render one tab-separated line per record: marker, context, URL.

    When any record has a URL, contexts are padded to a common width so the
    URLs line up. Without URLs there is neither padding nor a URL column.
    Only the marker is colorized.
    """
    has_urls = any(status.target_url for status in statuses)
    width = max((len(status.context) for status in statuses), default=0) if has_urls else 0

    lines = []
    for status in statuses:
        marker = state_marker(status.state)
        color = state_color(status.state)
        if use_color and color and marker:
            marker = click.style(marker, fg=color)

        line = f"{marker}\t{status.context.ljust(width)}"
        if status.target_url:
            line += f"\t{status.target_url}"
        lines.append(line)

    return "\n".join(lines)
