"""score_signals tool -- score a caller-supplied signal bundle without network access."""

from __future__ import annotations

from datetime import UTC, datetime

from mcp.server.fastmcp import Context

from repo_signals.errors import InvalidSignalsError, RepoSignalsError
from repo_signals.evaluation.scorer import days_since, score_repo_signals
from repo_signals.models import RepoFacts
from repo_signals.tools._helpers import error_result, internal_error


def _parse_pushed_at(value: str) -> datetime:
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidSignalsError(
            f"pushed_at must be an ISO 8601 timestamp, got '{value}'."
        ) from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


async def score_signals(
    pushed_at: str,
    ctx: Context,
    has_readme: bool = False,
    has_license: bool = False,
    has_ci: bool = False,
    open_issues: int = 0,
    commits_last_30: int = 0,
    contributors_count: int | None = None,
    languages_count: int = 0,
    has_package_scripts: bool = False,
) -> dict[str, object]:
    """Score repository signals you already collected, without calling GitHub.

    Use this when the repository facts came from somewhere other than
    score_repository (another host, a cached snapshot, a local clone).

    Args:
        pushed_at: ISO 8601 timestamp of the last push
            (e.g. "2026-01-31T12:00:00Z").
        has_readme: Whether the repository has a README.
        has_license: Whether the repository has a LICENSE.
        has_ci: Whether a CI configuration exists.
        open_issues: Number of open issues (>= 0).
        commits_last_30: Commits in the last 30 days (>= 0).
        contributors_count: Number of contributors. Defaults to 1 when
            unknown; a repository always has at least one author.
        languages_count: Number of detected languages (>= 0).
        has_package_scripts: Whether a build manifest declares scripts.

    Returns:
        Dict with: signals (normalized facts), daysSincePush, and score
        (bucket scores, score10, explanations). On failure: success=False,
        error, and status 400.
    """
    try:
        for name, value in (
            ("open_issues", open_issues),
            ("commits_last_30", commits_last_30),
            ("languages_count", languages_count),
        ):
            if value < 0:
                raise InvalidSignalsError(f"{name} must be >= 0, got {value}.")

        facts = RepoFacts(
            pushed_at=_parse_pushed_at(pushed_at),
            has_readme=has_readme,
            has_license=has_license,
            has_ci=has_ci,
            open_issues=open_issues,
            commits_last_30=commits_last_30,
            contributors_count=max(1, contributors_count or 1),
            languages_count=languages_count,
            has_package_scripts=has_package_scripts,
        )
        now = datetime.now(tz=UTC)
        score = score_repo_signals(facts, now)
        return {
            "success": True,
            "signals": facts.to_dict(),
            "daysSincePush": days_since(facts.pushed_at, now),
            "score": score.to_dict(),
        }

    except RepoSignalsError as exc:
        return error_result(exc)
    except Exception as exc:
        return await internal_error(ctx, "score_signals", exc)
