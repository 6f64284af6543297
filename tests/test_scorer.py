"""Tests for the repository signal scorer."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta

import pytest

from repo_signals.evaluation.scorer import DefaultSignalScorer, days_since, score_repo_signals
from repo_signals.models import RepoFacts

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _facts(**overrides: object) -> RepoFacts:
    """A fully healthy repository, with selected signals overridden."""
    values: dict[str, object] = {
        "has_readme": True,
        "has_license": True,
        "has_ci": True,
        "pushed_at": NOW,
        "open_issues": 1,
        "commits_last_30": 12,
        "contributors_count": 3,
        "languages_count": 2,
        "has_package_scripts": True,
    }
    values.update(overrides)
    return RepoFacts(**values)  # type: ignore[arg-type]


def _pushed(days_ago: int, hours: int = 0) -> datetime:
    return NOW - timedelta(days=days_ago, hours=hours)


# ─── Day arithmetic ──────────────────────────────────────────


class TestDaysSince:
    def test_same_instant_is_zero(self) -> None:
        assert days_since(NOW, NOW) == 0

    def test_floors_partial_days(self) -> None:
        assert days_since(_pushed(7, hours=23), NOW) == 7

    def test_just_under_one_day_is_zero(self) -> None:
        assert days_since(NOW - timedelta(hours=23, minutes=59), NOW) == 0

    def test_future_timestamp_is_negative(self) -> None:
        assert days_since(NOW + timedelta(hours=1), NOW) == -1

    def test_defaults_to_current_time(self) -> None:
        pushed = datetime.now(tz=UTC) - timedelta(days=3, hours=1)
        assert days_since(pushed) == 3


# ─── Scenarios ───────────────────────────────────────────────


class TestScenarios:
    def test_healthy_repository_scores_ten(self) -> None:
        score = score_repo_signals(_facts(), NOW)

        assert score.documentation == 2
        assert score.activity == 3
        assert score.hygiene == 3
        assert score.delivery_readiness == 2
        assert score.score10 == 10
        assert score.explanations == ()

    def test_neglected_repository_scores_zero(self) -> None:
        facts = RepoFacts(
            has_readme=False,
            has_license=False,
            has_ci=False,
            pushed_at=_pushed(90),
            open_issues=0,
            commits_last_30=0,
            contributors_count=1,
            languages_count=0,
            has_package_scripts=False,
        )
        score = score_repo_signals(facts, NOW)

        assert score.documentation == 0
        assert score.activity == 0
        assert score.hygiene == 0
        assert score.delivery_readiness == 0
        assert score.score10 == 0
        assert len(score.explanations) == 7
        joined = " ".join(score.explanations)
        for needle in ("README", "LICENSE", "90 days", "No commits", "CI", "scripts", "single"):
            assert needle in joined


# ─── Boundaries ──────────────────────────────────────────────


class TestActivityBoundaries:
    @pytest.mark.parametrize(
        ("days_ago", "expected"),
        [(0, 2), (7, 2), (8, 1), (30, 1), (31, 0)],
    )
    def test_push_recency_points(self, days_ago: int, expected: int) -> None:
        score = score_repo_signals(_facts(pushed_at=_pushed(days_ago), commits_last_30=5), NOW)
        assert score.activity == expected

    def test_stale_push_explains_with_day_count(self) -> None:
        score = score_repo_signals(_facts(pushed_at=_pushed(31)), NOW)
        assert score.explanations == ("Stale repository: last push was 31 days ago.",)

    def test_thirty_days_is_not_stale(self) -> None:
        score = score_repo_signals(_facts(pushed_at=_pushed(30)), NOW)
        assert score.explanations == ()

    def test_ten_commits_earn_bonus(self) -> None:
        score = score_repo_signals(_facts(pushed_at=_pushed(20), commits_last_30=10), NOW)
        assert score.activity == 2

    def test_nine_commits_do_not(self) -> None:
        score = score_repo_signals(_facts(pushed_at=_pushed(20), commits_last_30=9), NOW)
        assert score.activity == 1
        assert score.explanations == ()

    def test_zero_commits_explains_without_penalty(self) -> None:
        score = score_repo_signals(_facts(commits_last_30=0), NOW)
        assert score.activity == 2
        assert score.explanations == ("No commits in the last 30 days.",)

    def test_future_push_counts_as_fresh(self) -> None:
        score = score_repo_signals(_facts(pushed_at=NOW + timedelta(days=2)), NOW)
        assert score.activity == 3


class TestHygiene:
    def test_single_contributor_loses_a_point(self) -> None:
        score = score_repo_signals(_facts(contributors_count=1), NOW)
        assert score.hygiene == 2
        assert len(score.explanations) == 1
        assert "single contributor" in score.explanations[0]

    def test_two_contributors_earn_point(self) -> None:
        assert score_repo_signals(_facts(contributors_count=2), NOW).hygiene == 3

    def test_default_contributor_count_is_one(self) -> None:
        facts = RepoFacts(pushed_at=NOW)
        assert facts.contributors_count == 1
        assert score_repo_signals(facts, NOW).hygiene == 0


class TestDeliveryReadiness:
    def test_never_explains(self) -> None:
        score = score_repo_signals(_facts(open_issues=0, languages_count=0), NOW)
        assert score.delivery_readiness == 0
        assert score.score10 == 8
        assert score.explanations == ()

    def test_issues_and_languages_each_add_a_point(self) -> None:
        assert score_repo_signals(_facts(open_issues=0), NOW).delivery_readiness == 1
        assert score_repo_signals(_facts(languages_count=0), NOW).delivery_readiness == 1


# ─── Invariants ──────────────────────────────────────────────


class TestInvariants:
    def test_buckets_stay_within_caps(self) -> None:
        for readme, ci, scripts, days_ago, commits, contributors, issues in itertools.product(
            (True, False),
            (True, False),
            (True, False),
            (0, 8, 400),
            (0, 9, 100),
            (1, 5),
            (0, 3),
        ):
            score = score_repo_signals(
                _facts(
                    has_readme=readme,
                    has_license=not readme,
                    has_ci=ci,
                    has_package_scripts=scripts,
                    pushed_at=_pushed(days_ago),
                    commits_last_30=commits,
                    contributors_count=contributors,
                    open_issues=issues,
                ),
                NOW,
            )
            assert 0 <= score.documentation <= 2
            assert 0 <= score.activity <= 3
            assert 0 <= score.hygiene <= 3
            assert 0 <= score.delivery_readiness <= 2
            assert score.score10 == (
                score.documentation + score.activity + score.hygiene + score.delivery_readiness
            )
            assert 0 <= score.score10 <= 10

    def test_explanations_follow_bucket_order(self) -> None:
        facts = _facts(
            has_license=False,
            pushed_at=_pushed(60),
            commits_last_30=0,
            has_ci=False,
            contributors_count=1,
        )
        explanations = score_repo_signals(facts, NOW).explanations

        assert [e.split(":")[0].split(" ")[0] for e in explanations] == [
            "Missing",
            "Stale",
            "No",
            "No",
            "Only",
        ]
        assert "LICENSE" in explanations[0]
        assert "commits" in explanations[2]
        assert "CI" in explanations[3]

    def test_scoring_is_idempotent(self) -> None:
        facts = _facts(has_ci=False, pushed_at=_pushed(12))
        assert score_repo_signals(facts, NOW) == score_repo_signals(facts, NOW)

    def test_default_scorer_delegates(self) -> None:
        facts = _facts(has_readme=False)
        assert DefaultSignalScorer().score(facts, NOW) == score_repo_signals(facts, NOW)
