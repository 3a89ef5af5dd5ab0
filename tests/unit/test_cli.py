"""Unit tests for the hub-ci-status command line."""

import math
import os
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hub_ci_status import __version__
from hub_ci_status.cli import main, wait_to_ms
from hub_ci_status.config import DEFAULT_API_URL
from hub_ci_status.github import UnknownProjectError
from hub_ci_status.reporter import ReportOptions


@pytest.fixture
def reporter() -> Iterator[MagicMock]:
    """Patch StatusReporter; yields the instance whose run() is awaited."""
    with (
        patch("hub_ci_status.cli.StatusReporter") as reporter_cls,
        patch("hub_ci_status.cli.setup_logging") as mock_setup,
        patch.dict(os.environ, {}, clear=True),
    ):
        instance = reporter_cls.return_value
        instance.run = AsyncMock(return_value=0)
        instance.setup_logging = mock_setup
        yield instance


def run_options(reporter: MagicMock) -> ReportOptions:
    return reporter.run.await_args.args[1]


@pytest.mark.unit
class TestArguments:
    """Tests for option parsing."""

    def test_defaults(self, reporter: MagicMock) -> None:
        """No arguments reports HEAD once with default options."""
        assert main([]) == 0

        reporter.run.assert_awaited_once_with(
            None,
            ReportOptions(
                verbosity=0,
                use_color=None,
                wait_ms=None,
                wait_all=False,
                token=None,
                api_url=DEFAULT_API_URL,
                github_host=None,
            ),
        )
        reporter.setup_logging.assert_called_once_with(0)

    def test_ref(self, reporter: MagicMock) -> None:
        """The positional argument is the ref."""
        main(["feature-branch"])

        assert reporter.run.await_args.args[0] == "feature-branch"

    def test_exit_code_from_report(self, reporter: MagicMock) -> None:
        """The report's exit code is returned."""
        reporter.run.return_value = 2

        assert main([]) == 2

    @pytest.mark.parametrize(
        ("args", "verbosity"),
        [(["-v"], 1), (["-vv"], 2), (["-q"], -1), (["-v", "-v", "-q"], 1), (["--verbose", "--quiet"], 0)],
    )
    def test_verbosity(self, reporter: MagicMock, args: list[str], verbosity: int) -> None:
        """-v and -q count against each other."""
        main(args)

        assert run_options(reporter).verbosity == verbosity
        reporter.setup_logging.assert_called_once_with(verbosity)

    @pytest.mark.parametrize(
        ("args", "use_color"),
        [
            ([], None),
            (["--color"], True),
            (["--color=always"], True),
            (["--color=never"], False),
            (["--color=auto"], None),
        ],
    )
    def test_color(self, reporter: MagicMock, args: list[str], use_color: bool | None) -> None:
        """--color maps to forced or automatic color."""
        main(args)

        assert run_options(reporter).use_color is use_color

    @pytest.mark.parametrize(
        ("args", "wait_ms", "wait_all"),
        [
            (["-w"], math.inf, False),
            (["--wait"], math.inf, False),
            (["--wait=30"], 30000, False),
            (["-w", "1.5"], 1500, False),
            (["--wait=0"], 0, False),
            (["--wait=inf"], math.inf, False),
            (["-W"], math.inf, True),
            (["--wait-all", "--wait=10"], 10000, True),
        ],
    )
    def test_wait(
        self, reporter: MagicMock, args: list[str], wait_ms: float, wait_all: bool
    ) -> None:
        """--wait takes optional seconds; --wait-all implies waiting."""
        main(args)

        options = run_options(reporter)
        assert options.wait_ms == wait_ms
        assert options.wait_all is wait_all

    def test_environment(self, reporter: MagicMock) -> None:
        """Token, host and API URL come from the environment."""
        env = {
            "GITHUB_TOKEN": "t0ken",
            "GITHUB_HOST": "ghe.example.com",
            "GITHUB_API_URL": "https://ghe.example.com/api/v3/",
        }
        with patch.dict(os.environ, env):
            main([])

        options = run_options(reporter)
        assert options.token == "t0ken"
        assert options.github_host == "ghe.example.com"
        assert options.api_url == "https://ghe.example.com/api/v3"


@pytest.mark.unit
class TestUsageErrors:
    """Tests for invalid invocations."""

    @pytest.mark.parametrize(
        ("args", "message"),
        [
            (["--wait="], 'Invalid number ""'),
            (["--wait=soon"], 'Invalid number "soon"'),
            (["--wait=nan"], 'Invalid number "nan"'),
            (["--wait=-1"], "must not be negative"),
            (["--color=sometimes"], "sometimes"),
            (["--bogus"], "No such option"),
            (["a", "b"], "unexpected extra argument"),
        ],
    )
    def test_usage_error(
        self, reporter: MagicMock, capsys: pytest.CaptureFixture[str], args: list[str], message: str
    ) -> None:
        """Usage errors print a message and exit 1 without reporting."""
        assert main(args) == 1

        assert message in capsys.readouterr().err
        reporter.run.assert_not_awaited()

    def test_help(self, reporter: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        """-h prints usage and exits 0."""
        assert main(["-h"]) == 0

        out = capsys.readouterr().out
        assert "Usage:" in out
        assert "--wait-all" in out
        reporter.run.assert_not_awaited()

    def test_version(self, reporter: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        """-V prints the version and exits 0."""
        assert main(["-V"]) == 0

        assert capsys.readouterr().out.strip() == __version__


@pytest.mark.unit
class TestRuntimeErrors:
    """Tests for failures while reporting."""

    def test_error_message(self, reporter: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        """Errors print their type and message and exit 1."""
        reporter.run.side_effect = UnknownProjectError()

        assert main([]) == 1

        assert capsys.readouterr().err == (
            "UnknownProjectError: Unable to determine GitHub project name: "
            "No GitHub remote URLs recognized.\n"
        )

    def test_traceback_when_very_verbose(
        self, reporter: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """At -vv the full traceback is printed."""
        reporter.run.side_effect = RuntimeError("boom")

        assert main(["-vv"]) == 1

        err = capsys.readouterr().err
        assert "Traceback (most recent call last)" in err
        assert "RuntimeError: boom" in err

    def test_invalid_api_url(self, reporter: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        """A bad GITHUB_API_URL is reported as a configuration error."""
        with patch.dict(os.environ, {"GITHUB_API_URL": "api.github.com"}):
            assert main([]) == 1

        assert capsys.readouterr().err.startswith("ConfigError: GITHUB_API_URL")
        reporter.run.assert_not_awaited()

    def test_interrupted(self, reporter: MagicMock) -> None:
        """Ctrl-C exits 130."""
        reporter.run.side_effect = KeyboardInterrupt

        assert main([]) == 130


@pytest.mark.unit
class TestWaitToMs:
    """Tests for wait_to_ms."""

    def test_no_wait(self) -> None:
        assert wait_to_ms(None, False) is None

    def test_seconds(self) -> None:
        assert wait_to_ms(2.5, True) == 2500
