"""Data model shared by the graph builder, order computer and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field

from depgraph.errors import ManifestError


def normalize_name(name: str) -> str:
    """Return the canonical (case-insensitive) form of a package name."""
    return name.strip().lower()


@dataclass
class DependencyGraph:
    """Breadth-first reachability graph rooted at a single package."""

    root: str
    adjacency: dict[str, list[str]] = field(default_factory=dict)
    depths: dict[str, int] = field(default_factory=dict)

    def edges(self) -> list[tuple[str, str]]:
        return [
            (parent, child)
            for parent, children in self.adjacency.items()
            for child in children
        ]


@dataclass
class InstallOrder:
    """Dependencies-first linearization plus the cycles found on the way."""

    order: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)


@dataclass
class FetchResult:
    """Outcome of looking up one node's direct dependencies.

    Exactly one of *dependencies* / *error* is meaningful: a failed lookup
    carries the reason and no dependencies.
    """

    name: str
    dependencies: dict[str, str] = field(default_factory=dict)
    error: ManifestError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
