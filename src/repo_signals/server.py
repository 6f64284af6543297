"""MCP server that scores GitHub repositories from observable signals."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from repo_signals.config import GitHubConfig
from repo_signals.evaluation.base import RepoFetcherPort
from repo_signals.evaluation.github import GitHubRepoFetcher
from repo_signals.tools.score import score_repository
from repo_signals.tools.signals import score_signals


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared state across all tool invocations.

    Everything here is immutable or safe to share between concurrent
    requests; no per-request state lives on it.
    """

    http_client: httpx.AsyncClient
    config: GitHubConfig
    repo_fetcher: RepoFetcherPort


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage shared adapter lifecycle — the composition root."""
    config = GitHubConfig.from_env()
    async with httpx.AsyncClient(
        timeout=config.http_timeout,
        follow_redirects=True,
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
        transport=httpx.AsyncHTTPTransport(retries=0),
    ) as http_client:
        yield AppContext(
            http_client=http_client,
            config=config,
            repo_fetcher=GitHubRepoFetcher(http_client, config),
        )


mcp = FastMCP(
    "repo-signals",
    instructions=(
        "repo-signals scores a GitHub repository from 0 to 10 using observable "
        "signals: documentation, recent activity, engineering hygiene and "
        "delivery readiness.\n\n"
        "## Tools\n"
        "- **score_repository** — Give it a repository URL. Returns a summary "
        "(stars, forks, languages, days since last push), the raw signals, "
        "bucket scores and one explanation per lost point.\n"
        "- **score_signals** — Score signals you already have, without calling "
        "GitHub.\n\n"
        "## Presenting results\n"
        "- Lead with score10 and the weakest bucket.\n"
        "- Turn each explanation into a concrete next step for the user.\n"
        "- A missing signal may mean the lookup failed (rate limit, private "
        "repository) rather than the file being absent. If many signals are "
        "missing, suggest setting GITHUB_TOKEN."
    ),
    lifespan=app_lifespan,
)

# ─── Read-only tools ──────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(score_repository)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(score_signals)
