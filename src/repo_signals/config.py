"""GitHub API configuration, resolved once at startup and passed explicitly."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from repo_signals.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WEB_HOST = "github.com"
DEFAULT_TIMEOUT = 10.0
DEFAULT_CONNECT_TIMEOUT = 5.0


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Credential, endpoints and time bounds for every outbound GitHub call."""

    token: str | None = None
    token_source: str = "none"  # env | gh_cli | none
    api_base_url: str = DEFAULT_API_URL
    web_host: str = DEFAULT_WEB_HOST
    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    @property
    def http_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.timeout, connect=self.connect_timeout)

    def headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        """Request headers; the bearer token is attached only when one is configured."""
        headers = {"Accept": accept, "X-GitHub-Api-Version": "2022-11-28"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GitHubConfig:
        """Build config from environment variables.

        Token resolution order: ``GITHUB_TOKEN``, then ``gh auth token``.
        Raises ConfigError when a timeout variable is not a positive number.
        """
        env = os.environ if environ is None else environ
        token, source = _resolve_github_token(env)
        return cls(
            token=token,
            token_source=source,
            api_base_url=env.get("REPO_SIGNALS_API_URL", "").strip().rstrip("/")
            or DEFAULT_API_URL,
            web_host=env.get("REPO_SIGNALS_WEB_HOST", "").strip().lower() or DEFAULT_WEB_HOST,
            timeout=_read_timeout(env, "REPO_SIGNALS_TIMEOUT", DEFAULT_TIMEOUT),
            connect_timeout=_read_timeout(
                env, "REPO_SIGNALS_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT
            ),
        )


def _read_timeout(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number of seconds, got '{raw}'.") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be greater than zero, got '{raw}'.")
    return value


# ─── Auth resolution ───────────────────────────────────────


def _resolve_github_token(env: Mapping[str, str]) -> tuple[str | None, str]:
    """Resolve auth token: env first, then `gh auth token` fallback."""
    env_token = env.get("GITHUB_TOKEN", "").strip()
    if env_token:
        return env_token, "env"

    gh_token = _resolve_gh_cli_token()
    if gh_token:
        logger.info("Using GitHub token from `gh auth token` fallback.")
        return gh_token, "gh_cli"

    logger.info(
        "No GitHub auth token found (checked GITHUB_TOKEN and `gh auth token`). "
        "Requests are unauthenticated and subject to lower rate limits."
    )
    return None, "none"


_GH_TOKEN_COMMAND = ("gh", "auth", "token")
_GH_TIMEOUT_SECONDS = 2


def _resolve_gh_cli_token() -> str | None:
    """Token of the user logged in to the GitHub CLI, if any.

    A missing ``gh`` binary, a logged-out CLI or a hung process all yield None.
    """
    try:
        result = subprocess.run(
            _GH_TOKEN_COMMAND, capture_output=True, text=True, timeout=_GH_TIMEOUT_SECONDS
        )
        result.check_returncode()
    except (OSError, subprocess.SubprocessError):
        return None
    return result.stdout.strip() or None
