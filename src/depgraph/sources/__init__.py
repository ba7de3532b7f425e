"""Manifest sources: local fixtures and remote hosts."""

from __future__ import annotations

from pathlib import Path

from depgraph.config import Settings
from depgraph.sources.base import ManifestSource
from depgraph.sources.fixture import FixtureSource
from depgraph.sources.remote import RemoteSource

__all__ = ["FixtureSource", "ManifestSource", "RemoteSource", "open_source"]


def open_source(
    root: str,
    location: str | None,
    *,
    test_mode: bool,
    settings: Settings | None = None,
) -> ManifestSource:
    """Return the backend matching the command-line options."""
    settings = settings or Settings()
    if test_mode:
        return FixtureSource(Path(location or "."))
    return RemoteSource(
        root,
        location,
        registry=settings.registry,
        timeout=settings.timeout,
    )
