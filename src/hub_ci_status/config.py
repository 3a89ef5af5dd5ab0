"""Configuration read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlsplit

DEFAULT_API_URL = "https://api.github.com"


class ConfigError(Exception):
    """Raised when an environment setting is invalid."""


@dataclass
class Settings:
    """Runtime settings.

    Attributes:
        github_token: Bearer token sent to the API, if any.
        github_host: Additional host name to recognize as GitHub in remotes.
        api_url: Base URL of the GitHub REST API.
    """

    github_token: str | None = None
    github_host: str | None = None
    api_url: str = DEFAULT_API_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Empty values are treated as unset.

        Raises:
            ConfigError: If GITHUB_API_URL is not an absolute http(s) URL.
        """
        env = os.environ if environ is None else environ
        api_url = env.get("GITHUB_API_URL") or DEFAULT_API_URL
        parts = urlsplit(api_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigError(f"GITHUB_API_URL must be an absolute http(s) URL, got {api_url!r}")

        return cls(
            github_token=env.get("GITHUB_TOKEN") or None,
            github_host=env.get("GITHUB_HOST") or None,
            api_url=api_url.rstrip("/"),
        )
