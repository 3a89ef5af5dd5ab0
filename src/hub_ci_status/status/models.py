"""Data models for status aggregation."""

from dataclasses import dataclass
from enum import Enum


class State(str, Enum):
    """Status and check-run states, in order of increasing severity."""

    NEUTRAL = "neutral"
    SUCCESS = "success"
    PENDING = "pending"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"
    FAILURE = "failure"
    ERROR = "error"


# Least to most severe
SEVERITY_ORDER: tuple[str, ...] = tuple(state.value for state in State)

FAILURE_STATES = frozenset(
    {
        State.CANCELLED.value,
        State.TIMED_OUT.value,
        State.ACTION_REQUIRED.value,
        State.FAILURE.value,
        State.ERROR.value,
    }
)


@dataclass(frozen=True)
class CommitRef:
    """A commit in a GitHub repository."""

    owner: str
    repo: str
    ref: str


@dataclass
class StatusRecord:
    """A commit status or check run, normalized for display.

    ``state`` is usually a State value but is kept as the raw string so
    states this tool does not know about are still shown.
    """

    state: str
    context: str
    target_url: str | None = None
