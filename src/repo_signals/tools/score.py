"""score_repository tool -- fetch GitHub signals and score a repository."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from repo_signals.errors import RepoSignalsError
from repo_signals.evaluation.report import evaluate_repository
from repo_signals.tools._helpers import error_result, get_context, internal_error


async def score_repository(
    repository_url: str,
    ctx: Context,
) -> dict[str, object]:
    """Score a GitHub repository from 0 to 10 with reasons for every lost point.

    Looks up the repository plus its README, LICENSE, CI workflows, commits
    from the last 30 days, contributors, languages and build manifest, then
    scores four buckets: documentation (0-2), activity (0-3), hygiene (0-3)
    and delivery_readiness (0-2). Lookups other than the repository itself
    are best-effort: when one fails, its signal falls back to a default
    instead of failing the request.

    Args:
        repository_url: GitHub repository URL
            (e.g. "https://github.com/owner/repo").

    Returns:
        Dict with: input (url, owner, repo), summary (fullName, stars,
        forks, openIssues, pushedAt, daysSincePush, languages), signals
        (the raw facts), and score (bucket scores, score10, explanations).
        On failure: success=False, error, and status (400 invalid URL,
        404 repository not found, 500 other failures).
    """
    try:
        app = get_context(ctx)
        report = await evaluate_repository(repository_url, app.repo_fetcher)
        await ctx.info(
            f"Scored {report.identifier.full_name}: {report.score.score10}/10"
        )
        return {"success": True, **report.to_dict()}

    except RepoSignalsError as exc:
        return error_result(exc)
    except Exception as exc:
        return await internal_error(ctx, "score_repository", exc)
