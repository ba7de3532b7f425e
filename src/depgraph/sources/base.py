"""Manifest source protocol: every backend conforms to this interface."""

from __future__ import annotations

from typing import Protocol


class ManifestSource(Protocol):
    """Protocol for looking up a package's direct dependencies."""

    def fetch_dependencies(self, name: str, version: str | None = None) -> dict[str, str]:
        """Return ``{dependency name: version label}`` for *name*.

        Raises a :class:`~depgraph.errors.ManifestError` subclass when the
        manifest is missing or unusable.
        """
        ...
