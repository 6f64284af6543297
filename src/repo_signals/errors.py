"""Exception hierarchy for repo-signals.

All exceptions inherit from RepoSignalsError (single catch point).
Each class carries an HTTP-style ``status`` that tools surface to callers.
Messages are written for LLM consumption -- clear, actionable, no stack traces.
"""

from __future__ import annotations


class RepoSignalsError(Exception):
    """Base exception for all repo-signals errors."""

    status: int = 500


class InvalidUrlError(RepoSignalsError):
    """The supplied URL does not point at an owner/repo on the configured host."""

    status = 400


class InvalidSignalsError(RepoSignalsError):
    """A caller-supplied signal bundle is malformed."""

    status = 400


class RepoNotFoundError(RepoSignalsError):
    """The mandatory repository metadata lookup returned 404."""

    status = 404


class RepoFetchError(RepoSignalsError):
    """The mandatory repository metadata lookup failed for any other reason."""


class ConfigError(RepoSignalsError):
    """Environment configuration is malformed."""
