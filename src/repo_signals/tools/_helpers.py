"""Shared plumbing for the scoring tools: app state lookup and error payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import Context

from repo_signals.errors import RepoSignalsError

if TYPE_CHECKING:
    from repo_signals.server import AppContext


def get_context(ctx: Context) -> AppContext:
    """The fetcher, config and HTTP client that ``app_lifespan`` built for this server."""
    from repo_signals.server import AppContext

    state = ctx.request_context.lifespan_context
    if isinstance(state, AppContext):
        return state
    raise TypeError(
        f"Scoring tools need the repo-signals lifespan state, not {type(state).__name__}; "
        "create the FastMCP server with lifespan=app_lifespan."
    )


def error_result(exc: RepoSignalsError) -> dict[str, object]:
    """Tool payload for a known failure, carrying its HTTP-style status."""
    return {"success": False, "error": str(exc), "status": exc.status}


async def internal_error(ctx: Context, tool: str, exc: Exception) -> dict[str, object]:
    """Report an unexpected failure to the client and hide its details from the payload."""
    await ctx.error(f"Unexpected error in {tool}: {exc}")
    return {"success": False, "error": f"Internal error: {type(exc).__name__}", "status": 500}
