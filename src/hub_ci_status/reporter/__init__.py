"""Reporter - Resolve, fetch, aggregate and print the CI status of a commit."""

from hub_ci_status.reporter.models import ReportOptions
from hub_ci_status.reporter.reporter import NO_STATUS, StatusReporter

__all__ = [
    "NO_STATUS",
    "ReportOptions",
    "StatusReporter",
]
