"""repo-signals: explainable 0-10 scores for GitHub repositories."""

from __future__ import annotations

from importlib import metadata

DISTRIBUTION = "repo-signals"
UNINSTALLED_VERSION = "0.0.dev0"


def _installed_version(distribution: str = DISTRIBUTION) -> str:
    """Version recorded by the installer, or UNINSTALLED_VERSION for a bare source tree."""
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return UNINSTALLED_VERSION


__version__ = _installed_version()


def main() -> None:
    """Serve the scoring tools to an MCP client over stdin/stdout."""
    from repo_signals.server import mcp

    mcp.run(transport="stdio")
