"""Domain models for repo-signals. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# ─── Repository Models ────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RepoIdentifier:
    """Owner/repo pair parsed from a repository URL."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class RepoSummary:
    """Display fields taken from the repository metadata lookup."""

    full_name: str
    pushed_at: datetime
    description: str = ""
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    languages: dict[str, int] = field(default_factory=dict)
    top_languages: tuple[str, ...] = ()
    readme_excerpt: str = ""


@dataclass(frozen=True, slots=True)
class RepoFacts:
    """Raw signal bundle consumed by the scorer."""

    pushed_at: datetime
    has_readme: bool = False
    has_license: bool = False
    has_ci: bool = False
    open_issues: int = 0
    commits_last_30: int = 0
    contributors_count: int = 1
    languages_count: int = 0
    has_package_scripts: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "hasReadme": self.has_readme,
            "hasLicense": self.has_license,
            "hasCI": self.has_ci,
            "pushedAt": _isoformat(self.pushed_at),
            "openIssues": self.open_issues,
            "commitsLast30": self.commits_last_30,
            "contributorsCount": self.contributors_count,
            "languagesCount": self.languages_count,
            "hasPackageScripts": self.has_package_scripts,
        }


@dataclass(frozen=True, slots=True)
class FetchedRepo:
    """Everything the fetcher learned about one repository."""

    identifier: RepoIdentifier
    summary: RepoSummary
    facts: RepoFacts


# ─── Scoring Models ───────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Bucketed score with the reasons for every point not awarded."""

    documentation: int
    activity: int
    hygiene: int
    delivery_readiness: int
    score10: int
    explanations: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "documentation": self.documentation,
            "activity": self.activity,
            "hygiene": self.hygiene,
            "delivery_readiness": self.delivery_readiness,
            "score10": self.score10,
            "explanations": list(self.explanations),
        }


@dataclass(frozen=True, slots=True)
class ScoreReport:
    """Final response for one scoring request."""

    url: str
    identifier: RepoIdentifier
    summary: RepoSummary
    days_since_push: int
    signals: RepoFacts
    score: ScoreBreakdown

    def to_dict(self) -> dict[str, object]:
        return {
            "input": {
                "url": self.url,
                "owner": self.identifier.owner,
                "repo": self.identifier.repo,
            },
            "summary": {
                "fullName": self.summary.full_name,
                "description": self.summary.description,
                "stars": self.summary.stars,
                "forks": self.summary.forks,
                "openIssues": self.summary.open_issues,
                "pushedAt": _isoformat(self.summary.pushed_at),
                "daysSincePush": self.days_since_push,
                "languages": dict(self.summary.languages),
                "topLanguages": list(self.summary.top_languages),
                "readmeExcerpt": self.summary.readme_excerpt,
            },
            "signals": self.signals.to_dict(),
            "score": self.score.to_dict(),
        }


def _isoformat(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")
