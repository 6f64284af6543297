"""Ports: repository metadata fetching and signal scoring."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from repo_signals.models import FetchedRepo, RepoFacts, ScoreBreakdown


class RepoFetcherPort(Protocol):
    """Port for gathering repository facts from a hosting API."""

    async def fetch(
        self,
        repo_url: str,
        now: datetime | None = None,
    ) -> FetchedRepo:
        """Fetch summary and raw signals for a repository URL."""
        ...


class SignalScorerPort(Protocol):
    """Port for computing a score breakdown from raw signals."""

    def score(self, facts: RepoFacts, now: datetime | None = None) -> ScoreBreakdown:
        """Compute a bounded score from a facts bundle."""
        ...
