"""Centralized logging configuration for hub-ci-status.

Console output goes to stderr as ``LEVEL: message`` so that progress lines
read ``DEBUG: Waiting for ...``. Debug output of the other components is
kept off the console and only written to the optional rotating log file.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

# Default configuration
DEFAULT_LOG_FILE = "hub-ci-status.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5

# Log formats
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "hub_ci_status"

# Only this logger reaches the console below WARNING
PROGRESS_LOGGER = f"{ROOT_LOGGER}.progress"


def verbosity_to_level(verbosity: int) -> int:
    """Map the command-line verbosity count to a logging level.

    ``-vv`` and above shows debug progress. Everything else only surfaces
    warnings, since normal output is written to stdout rather than logged.
    """
    if verbosity > 1:
        return logging.DEBUG
    return logging.WARNING


class ConsoleFilter(logging.Filter):
    """Keep component internals off the console.

    Warnings and errors from any component pass, as do progress lines.
    Everything else only reaches the log file.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.WARNING or record.name == PROGRESS_LOGGER


def setup_logging(
    verbosity: int = 0,
    stream: TextIO | None = None,
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """Set up logging for the command.

    Args:
        verbosity: Net verbosity (``-v`` count minus ``-q`` count).
        stream: Console stream. Defaults to ``sys.stderr``.
        log_dir: Directory for a rotating log file. No file is written
                 unless this (or HUB_CI_STATUS_LOG_DIR) is set.
        log_file: Log file name. Defaults to 'hub-ci-status.log'.
        max_bytes: Maximum size per log file before rotation. Defaults to 10MB.
        backup_count: Number of backup files to keep. Defaults to 5.

    Returns:
        The root hub_ci_status logger.
    """
    if log_dir is None:
        log_dir = os.environ.get("HUB_CI_STATUS_LOG_DIR") or None

    log_level = verbosity_to_level(verbosity)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.addFilter(ConsoleFilter())
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        # The file keeps full detail regardless of console verbosity
        logger.setLevel(logging.DEBUG)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)
        logger.debug("file logging enabled (file=%s)", log_path / log_file)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Args:
        name: Component name (e.g., 'retry', 'github.client').
              Will be prefixed with 'hub_ci_status.'.

    Returns:
        Logger instance for the component.
    """
    if not name.startswith(f"{ROOT_LOGGER}.") and name != ROOT_LOGGER:
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Truncate long output (e.g. an API error body) for messages and logs."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"\n... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Remove credentials from text before it is logged or raised."""
    patterns = [
        (r"ghp_[a-zA-Z0-9]{36}", "[GITHUB_TOKEN]"),  # GitHub PAT
        (r"gho_[a-zA-Z0-9]{36}", "[GITHUB_TOKEN]"),  # GitHub OAuth
        (r"ghs_[a-zA-Z0-9]{36}", "[GITHUB_TOKEN]"),  # Actions installation token
        (r"github_pat_[a-zA-Z0-9_]{82}", "[GITHUB_TOKEN]"),  # Fine-grained PAT
        (r"Bearer [a-zA-Z0-9._-]+", "Bearer [REDACTED]"),
        (r"token=[a-zA-Z0-9._-]+", "token=[REDACTED]"),
        (r"(https?://)[^/@\s:]+(:[^/@\s]*)?@", r"\1[REDACTED]@"),  # userinfo in URLs
    ]

    result = text
    for pat, replacement in patterns:
        result = re.sub(pat, replacement, result)

    return result
