"""Fetch repository signals from the GitHub REST API."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import math
import re
import tomllib
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import TypeVar

import httpx

from repo_signals.config import DEFAULT_WEB_HOST, GitHubConfig
from repo_signals.errors import InvalidUrlError, RepoFetchError, RepoNotFoundError
from repo_signals.models import FetchedRepo, RepoFacts, RepoIdentifier, RepoSummary

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PAGE_SIZE = 100  # GitHub's per_page maximum; counts above it are undercounted
_COMMIT_WINDOW = timedelta(days=30)
_CI_PATH = ".github/workflows"
_TOP_LANGUAGES = 5
_README_EXCERPT_CHARS = 500
_RAW_MEDIA_TYPE = "application/vnd.github.raw+json"

# ─── URL parsing ───────────────────────────────────────────

_REPO_URL_RE = re.compile(
    r"^https?://(?:www\.)?(?P<host>[^/?#]+)/(?P<owner>[^/?#]+)/(?P<repo>[^/?#]+?)"
    r"(?:\.git)?(?:[/?#].*)?$",
    re.IGNORECASE,
)


def parse_repo_url(repo_url: str, web_host: str = DEFAULT_WEB_HOST) -> RepoIdentifier:
    """Extract (owner, repo) from a repository URL on ``web_host``.

    Accepts ``https://<host>/<owner>/<repo>[.git][/...]``.
    Raises InvalidUrlError for anything else.
    """
    url = (repo_url or "").strip()
    if not url:
        raise InvalidUrlError("Missing repository URL.")

    m = _REPO_URL_RE.match(url)
    host = web_host.lower().removeprefix("www.")
    if not m or m.group("host").lower() != host:
        raise InvalidUrlError(
            f"Invalid repository URL '{url}'. Expected https://{host}/<owner>/<repo>."
        )
    return RepoIdentifier(owner=m.group("owner"), repo=m.group("repo"))


# ─── Best-effort helpers ───────────────────────────────────


class _LookupMiss(Exception):
    """A best-effort lookup answered with a non-success status."""


async def with_default(call: Awaitable[T], default: T, *, lookup: str) -> T:
    """Await a best-effort lookup, collapsing any failure into ``default``."""
    try:
        return await call
    except Exception:
        logger.debug("Lookup '%s' failed; using default %r", lookup, default, exc_info=True)
        return default


def _check_rate_limit(resp: httpx.Response, token_source: str) -> None:
    """Warn when GitHub reports the rate limit as exhausted.

    Called once per fetch, on the repository metadata response; every lookup
    of the same fetch draws on the same quota.
    """
    remaining = resp.headers.get("X-RateLimit-Remaining")
    if remaining is None:
        return
    try:
        remaining_value = int(remaining)
    except ValueError:
        return
    if remaining_value != 0:
        return

    source_hint = (
        "env GITHUB_TOKEN"
        if token_source == "env"
        else "gh auth token"
        if token_source == "gh_cli"
        else "no auth token"
    )
    logger.warning(
        "GitHub API rate limit exhausted (%s). Repository signals degrade until reset.",
        source_hint,
    )


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def _top_languages(languages: dict[str, int]) -> tuple[str, ...]:
    """Format the largest languages as ``"Name (NN%)"`` by byte share."""
    total = sum(languages.values())
    ranked = sorted(languages.items(), key=lambda item: item[1], reverse=True)
    return tuple(
        f"{name} ({math.floor(count * 100 / total + 0.5) if total else 0}%)"
        for name, count in ranked[:_TOP_LANGUAGES]
    )


# ─── Manifest readers ──────────────────────────────────────


def _package_json_has_scripts(text: str) -> bool:
    scripts = json.loads(text).get("scripts")
    return isinstance(scripts, dict) and len(scripts) > 0


def _pyproject_has_scripts(text: str) -> bool:
    data = tomllib.loads(text)
    candidates = (
        data.get("project", {}).get("scripts"),
        data.get("tool", {}).get("poetry", {}).get("scripts"),
    )
    return any(isinstance(scripts, dict) and scripts for scripts in candidates)


_MANIFESTS: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("package.json", _package_json_has_scripts),
    ("pyproject.toml", _pyproject_has_scripts),
)


# ─── Fetcher ───────────────────────────────────────────────


class GitHubRepoFetcher:
    """Adapter for RepoFetcherPort -- holds httpx client and GitHubConfig."""

    def __init__(self, http_client: httpx.AsyncClient, config: GitHubConfig | None = None) -> None:
        self._http = http_client
        self._config = config or GitHubConfig()

    async def fetch(self, repo_url: str, now: datetime | None = None) -> FetchedRepo:
        """Gather summary and raw signals for a GitHub repository.

        The repository metadata lookup is mandatory: a 404 raises
        RepoNotFoundError and any other failure raises RepoFetchError.
        The other seven lookups are best-effort and fall back to
        absent/false/zero/one. All eight run concurrently; if the
        mandatory lookup fails, the pending lookups are cancelled.
        """
        identifier = parse_repo_url(repo_url, self._config.web_host)
        if now is None:
            now = datetime.now(tz=UTC)
        base = f"{self._config.api_base_url}/repos/{identifier.owner}/{identifier.repo}"

        lookups = [
            asyncio.ensure_future(call)
            for call in (
                with_default(self._fetch_languages(base), {}, lookup="languages"),
                with_default(self._fetch_readme(base), None, lookup="readme"),
                with_default(self._exists(f"{base}/license"), False, lookup="license"),
                with_default(self._has_workflows(base), False, lookup="ci"),
                with_default(self._count_commits(base, now - _COMMIT_WINDOW), 0, lookup="commits"),
                with_default(self._count_contributors(base), 1, lookup="contributors"),
                with_default(self._has_package_scripts(base), False, lookup="manifest"),
            )
        ]
        try:
            data = await self._fetch_repo(base, identifier)
        except BaseException:
            # The request is over; no lookup may outlive it.
            for task in lookups:
                task.cancel()
            raise

        (
            languages,
            readme,
            has_license,
            has_ci,
            commits_last_30,
            contributors_count,
            has_package_scripts,
        ) = await asyncio.gather(*lookups)

        pushed_at = (
            _parse_timestamp(data.get("pushed_at"))
            or _parse_timestamp(data.get("updated_at"))
            or _parse_timestamp(data.get("created_at"))
        )
        if pushed_at is None:
            raise RepoFetchError(
                f"GitHub returned no usable push timestamp for '{identifier.full_name}'."
            )
        open_issues = max(0, int(data.get("open_issues_count") or 0))

        summary = RepoSummary(
            full_name=str(data.get("full_name") or identifier.full_name),
            description=str(data.get("description") or ""),
            stars=int(data.get("stargazers_count") or 0),
            forks=int(data.get("forks_count") or 0),
            open_issues=open_issues,
            pushed_at=pushed_at,
            languages=languages,
            top_languages=_top_languages(languages),
            readme_excerpt=(readme or "")[:_README_EXCERPT_CHARS],
        )
        facts = RepoFacts(
            has_readme=readme is not None,
            has_license=has_license,
            has_ci=has_ci,
            pushed_at=pushed_at,
            open_issues=open_issues,
            commits_last_30=commits_last_30,
            contributors_count=contributors_count,
            languages_count=len(languages),
            has_package_scripts=has_package_scripts,
        )
        return FetchedRepo(identifier=identifier, summary=summary, facts=facts)

    # ── HTTP helpers ─────────────────────────────────────────

    async def _get(
        self,
        url: str,
        *,
        params: dict[str, object] | None = None,
        accept: str = "application/vnd.github+json",
    ) -> httpx.Response:
        return await self._http.get(
            url,
            params=params,
            headers=self._config.headers(accept),
            timeout=self._config.http_timeout,
        )

    async def _get_ok(
        self,
        url: str,
        *,
        params: dict[str, object] | None = None,
        accept: str = "application/vnd.github+json",
    ) -> httpx.Response:
        resp = await self._get(url, params=params, accept=accept)
        if resp.status_code != 200:
            raise _LookupMiss(f"HTTP {resp.status_code} from {url}")
        return resp

    # ── Mandatory lookup ─────────────────────────────────────

    async def _fetch_repo(self, base: str, identifier: RepoIdentifier) -> dict:
        try:
            resp = await self._get(base)
        except httpx.HTTPError as exc:
            raise RepoFetchError(
                f"Failed to fetch repository '{identifier.full_name}' from GitHub: {exc}"
            ) from exc
        _check_rate_limit(resp, self._config.token_source)

        if resp.status_code == 404:
            raise RepoNotFoundError(
                f"Repository '{identifier.full_name}' not found. Check the URL, "
                "or set GITHUB_TOKEN if the repository is private."
            )
        if resp.status_code != 200:
            raise RepoFetchError(
                f"GitHub returned HTTP {resp.status_code} for repository "
                f"'{identifier.full_name}'."
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise RepoFetchError(
                f"GitHub returned malformed JSON for repository '{identifier.full_name}'."
            ) from exc
        if not isinstance(data, dict):
            raise RepoFetchError(
                f"GitHub returned an unexpected payload for repository '{identifier.full_name}'."
            )
        return data

    # ── Best-effort lookups ──────────────────────────────────

    async def _fetch_languages(self, base: str) -> dict[str, int]:
        data = (await self._get_ok(f"{base}/languages")).json()
        return {str(name): int(count) for name, count in data.items()}

    async def _fetch_readme(self, base: str) -> str:
        return (await self._get_ok(f"{base}/readme", accept=_RAW_MEDIA_TYPE)).text

    async def _exists(self, url: str) -> bool:
        await self._get_ok(url)
        return True

    async def _has_workflows(self, base: str) -> bool:
        """Whether the CI path is a directory listing with at least one entry."""
        data = (await self._get_ok(f"{base}/contents/{_CI_PATH}")).json()
        return isinstance(data, list) and len(data) > 0

    async def _count_commits(self, base: str, since: datetime) -> int:
        resp = await self._get_ok(
            f"{base}/commits",
            params={"since": since.isoformat().replace("+00:00", "Z"), "per_page": _PAGE_SIZE},
        )
        return len(resp.json())

    async def _count_contributors(self, base: str) -> int:
        resp = await self._get_ok(f"{base}/contributors", params={"per_page": _PAGE_SIZE})
        return max(1, len(resp.json()))

    async def _fetch_file(self, base: str, path: str) -> str:
        data = (await self._get_ok(f"{base}/contents/{path}")).json()
        return base64.b64decode(data["content"]).decode("utf-8")

    async def _has_package_scripts(self, base: str) -> bool:
        """Whether package.json (or, failing that, pyproject.toml) declares scripts."""
        for path, has_scripts in _MANIFESTS:
            try:
                if has_scripts(await self._fetch_file(base, path)):
                    return True
            except Exception:
                logger.debug("Manifest %s unusable for %s", path, base, exc_info=True)
        return False
