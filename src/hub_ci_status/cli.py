"""CLI entry point for hub-ci-status."""

from __future__ import annotations

import asyncio
import math
import sys
import traceback
from typing import Any

import click

from hub_ci_status import __version__
from hub_ci_status.config import Settings
from hub_ci_status.logging import get_logger, setup_logging
from hub_ci_status.reporter import ReportOptions, StatusReporter

# Same --color choices as hub(1)
COLOR_CHOICES = ("always", "never", "auto")

logger = get_logger("cli")


class WaitSeconds(click.ParamType):
    """Non-negative number of seconds, or ``inf`` for no limit."""

    name = "seconds"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            seconds = float(value)
        else:
            # Don't treat '' as 0 (no wait), it is more likely a mistake
            try:
                seconds = float(value) if str(value).strip() else math.nan
            except ValueError:
                seconds = math.nan
            if math.isnan(seconds):
                self.fail(f'Invalid number "{value}"', param, ctx)
        if seconds < 0:
            self.fail("--wait must not be negative", param, ctx)
        return seconds


def color_option_to_use_color(color: str | None) -> bool | None:
    """Map --color to ReportOptions.use_color (None means decide by TTY)."""
    if color == "always":
        return True
    if color == "never":
        return False
    return None


def wait_to_ms(wait: float | None, wait_all: bool) -> float | None:
    """Polling budget in milliseconds. --wait-all alone waits forever."""
    if wait is not None:
        return wait * 1000
    if wait_all:
        return math.inf
    return None


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("ref", required=False)
@click.option(
    "--color",
    type=click.Choice(COLOR_CHOICES),
    is_flag=False,
    flag_value="always",
    default=None,
    help="Colorize verbose output.",
)
@click.option("-q", "--quiet", count=True, help="Print less output.")
@click.option("-v", "--verbose", count=True, help="Print more output.")
@click.option(
    "-w",
    "--wait",
    type=WaitSeconds(),
    is_flag=False,
    flag_value="inf",
    default=None,
    help="Retry while combined status is pending (with optional max time in sec).",
)
@click.option(
    "-W",
    "--wait-all",
    is_flag=True,
    default=False,
    help="Retry while any status is pending (implies --wait).",
)
@click.version_option(__version__, "-V", "--version", message="%(version)s")
def cli(
    ref: str | None,
    color: str | None,
    quiet: int,
    verbose: int,
    wait: float | None,
    wait_all: bool,
) -> int:
    """Print the CI status of REF (default HEAD) on GitHub.

    Exits 0 for success, 1 for failure, 2 if still pending and 3 if no
    status was found.
    """
    verbosity = verbose - quiet
    setup_logging(verbosity)

    settings = Settings.from_env()
    options = ReportOptions(
        verbosity=verbosity,
        use_color=color_option_to_use_color(color),
        wait_ms=wait_to_ms(wait, wait_all),
        wait_all=wait_all,
        token=settings.github_token,
        api_url=settings.api_url,
        github_host=settings.github_host,
    )

    reporter = StatusReporter()
    return asyncio.run(reporter.run(ref, options))


def main(argv: list[str] | None = None) -> int:
    """Run the command and return its exit code.

    Usage errors and runtime errors are written to stderr and exit 1.
    """
    args = sys.argv[1:] if argv is None else argv
    verbosity = 0
    try:
        with cli.make_context("hub-ci-status", list(args)) as ctx:
            verbosity = ctx.params.get("verbose", 0) - ctx.params.get("quiet", 0)
            result = cli.invoke(ctx)
    except click.exceptions.Exit as e:
        # --help and --version
        return e.exit_code
    except click.ClickException as e:
        e.show()
        return 1
    except (KeyboardInterrupt, click.exceptions.Abort):
        return 130
    except Exception as e:
        logger.debug("command failed", exc_info=True)
        if verbosity > 1:
            click.echo("".join(traceback.format_exception(e)).rstrip("\n"), err=True)
        else:
            click.echo(f"{type(e).__name__}: {e}", err=True)
        return 1
    return int(result)


if __name__ == "__main__":
    raise SystemExit(main())
