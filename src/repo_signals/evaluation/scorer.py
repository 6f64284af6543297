"""Compute a bounded 0-10 repository score from collected signals."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from repo_signals.models import RepoFacts, ScoreBreakdown

_DOCUMENTATION_CAP = 2
_ACTIVITY_CAP = 3
_HYGIENE_CAP = 3
_DELIVERY_CAP = 2
_TOTAL_CAP = 10

_FRESH_PUSH_DAYS = 7
_RECENT_PUSH_DAYS = 30
_ACTIVE_COMMITS = 10


def days_since(then: datetime, now: datetime | None = None) -> int:
    """Whole days elapsed from ``then`` to ``now``, floored.

    Equivalent to floor(elapsed milliseconds / 86_400_000). Negative when
    ``then`` lies in the future.
    """
    if now is None:
        now = datetime.now(tz=UTC)
    return (now - then) // timedelta(days=1)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def score_repo_signals(facts: RepoFacts, now: datetime | None = None) -> ScoreBreakdown:
    """Score a repository from its raw signals.

    Buckets (each clamped to its cap):
    - documentation (2): README +1, LICENSE +1
    - activity (3): pushed within 7 days +2 / within 30 days +1,
      10+ commits in the last 30 days +1
    - hygiene (3): CI +1, package scripts +1, two or more contributors +1
    - delivery_readiness (2): open issues +1, at least one language +1

    Explanations are emitted for every point not awarded, in
    documentation -> activity -> hygiene order. delivery_readiness
    never explains itself.
    """
    explanations: list[str] = []

    # Documentation
    documentation = 0
    if facts.has_readme:
        documentation += 1
    else:
        explanations.append(
            "Missing README: add one describing what the project does and how to run it."
        )
    if facts.has_license:
        documentation += 1
    else:
        explanations.append("Missing LICENSE: without one, others cannot legally reuse the code.")
    documentation = _clamp(documentation, 0, _DOCUMENTATION_CAP)

    # Activity
    activity = 0
    days = days_since(facts.pushed_at, now)
    if days <= _FRESH_PUSH_DAYS:
        activity += 2
    elif days <= _RECENT_PUSH_DAYS:
        activity += 1
    else:
        explanations.append(f"Stale repository: last push was {days} days ago.")
    if facts.commits_last_30 >= _ACTIVE_COMMITS:
        activity += 1
    elif facts.commits_last_30 == 0:
        explanations.append("No commits in the last 30 days.")
    activity = _clamp(activity, 0, _ACTIVITY_CAP)

    # Hygiene
    hygiene = 0
    if facts.has_ci:
        hygiene += 1
    else:
        explanations.append("No CI configuration found (.github/workflows).")
    if facts.has_package_scripts:
        hygiene += 1
    else:
        explanations.append("No build or run scripts declared in the project manifest.")
    if facts.contributors_count >= 2:
        hygiene += 1
    else:
        explanations.append("Only a single contributor: no evidence of collaboration or review.")
    hygiene = _clamp(hygiene, 0, _HYGIENE_CAP)

    # Delivery readiness
    delivery_readiness = 0
    if facts.open_issues > 0:
        delivery_readiness += 1
    if facts.languages_count >= 1:
        delivery_readiness += 1
    delivery_readiness = _clamp(delivery_readiness, 0, _DELIVERY_CAP)

    total = _clamp(documentation + activity + hygiene + delivery_readiness, 0, _TOTAL_CAP)

    return ScoreBreakdown(
        documentation=documentation,
        activity=activity,
        hygiene=hygiene,
        delivery_readiness=delivery_readiness,
        score10=total,
        explanations=tuple(explanations),
    )


class DefaultSignalScorer:
    """Adapter for SignalScorerPort -- stateless wrapper around score_repo_signals."""

    def score(self, facts: RepoFacts, now: datetime | None = None) -> ScoreBreakdown:
        return score_repo_signals(facts, now)
