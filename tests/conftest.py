"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def _no_gh_cli_token():
    """Keep token resolution from shelling out to a locally installed `gh`."""
    with patch("repo_signals.config._resolve_gh_cli_token", return_value=None):
        yield
