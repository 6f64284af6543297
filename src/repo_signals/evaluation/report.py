"""Assemble the final score report and run the fetch -> score -> assemble pipeline."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from repo_signals.evaluation.base import RepoFetcherPort, SignalScorerPort
from repo_signals.evaluation.scorer import DefaultSignalScorer, days_since
from repo_signals.models import (
    RepoFacts,
    RepoIdentifier,
    RepoSummary,
    ScoreBreakdown,
    ScoreReport,
)

logger = logging.getLogger(__name__)


def assemble_report(
    identifier: RepoIdentifier,
    url: str,
    summary: RepoSummary,
    facts: RepoFacts,
    score: ScoreBreakdown,
    now: datetime | None = None,
) -> ScoreReport:
    """Merge repository summary, raw signals and score into one report.

    ``days_since_push`` uses the same day arithmetic as activity scoring,
    so pass the ``now`` the scorer saw to keep the two consistent.
    """
    return ScoreReport(
        url=url,
        identifier=identifier,
        summary=summary,
        days_since_push=days_since(summary.pushed_at, now),
        signals=facts,
        score=score,
    )


async def evaluate_repository(
    repo_url: str,
    fetcher: RepoFetcherPort,
    scorer: SignalScorerPort | None = None,
    now: datetime | None = None,
) -> ScoreReport:
    """Fetch, score and assemble a report for ``repo_url``.

    A single ``now`` is captured up front and shared by the commit window,
    activity scoring and ``daysSincePush``.
    """
    if now is None:
        now = datetime.now(tz=UTC)
    if scorer is None:
        scorer = DefaultSignalScorer()

    fetched = await fetcher.fetch(repo_url, now=now)
    score = scorer.score(fetched.facts, now=now)
    logger.debug(
        "Scored %s: %d/10 (%d explanations)",
        fetched.identifier.full_name,
        score.score10,
        len(score.explanations),
    )
    return assemble_report(
        fetched.identifier,
        repo_url,
        fetched.summary,
        fetched.facts,
        score,
        now=now,
    )
