"""Breadth-first discovery of a package's transitive dependency graph."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from depgraph.errors import ConfigError, ManifestError
from depgraph.model import DependencyGraph, FetchResult, normalize_name
from depgraph.sources.base import ManifestSource

logger = logging.getLogger(__name__)


@dataclass
class _Traversal:
    """Mutable state owned by a single ``build_graph`` call."""

    graph: DependencyGraph
    filter: str | None
    queue: deque[tuple[str, int]] = field(default_factory=deque)
    visited: set[str] = field(default_factory=set)


def is_excluded(name: str, name_filter: str | None) -> bool:
    """Return True if *name* contains *name_filter* (case-insensitive)."""
    if not name_filter:
        return False
    return name_filter.lower() in name.lower()


def build_graph(
    root: str,
    source: ManifestSource,
    *,
    max_depth: int = 0,
    name_filter: str | None = None,
    version: str | None = None,
) -> DependencyGraph:
    """Discover the dependency graph of *root* breadth-first.

    *max_depth* of 0 means unlimited.  Nodes whose name contains
    *name_filter* are neither expanded nor listed as anyone's dependency.
    *version* pins the root lookup only; transitive packages are queried
    unpinned.  A filter that matches *root* itself is rejected.

    A lookup failure for the root raises :class:`ManifestError`; for any
    other node it is logged and the node is kept as a leaf.
    """
    root = normalize_name(root)
    if not root:
        raise ConfigError("Package name must not be empty")
    if max_depth < 0:
        raise ConfigError("max_depth must be a non-negative integer")
    if is_excluded(root, name_filter):
        raise ConfigError(f"Filter {name_filter!r} excludes the root package '{root}'")

    state = _Traversal(graph=DependencyGraph(root=root), filter=name_filter or None)
    state.queue.append((root, 0))

    while state.queue:
        name, depth = state.queue.popleft()
        if name in state.visited:
            continue
        state.visited.add(name)

        if is_excluded(name, state.filter):
            logger.debug("Skipping %s (matches filter %r)", name, state.filter)
            continue

        state.graph.adjacency.setdefault(name, [])
        state.graph.depths.setdefault(name, depth)

        if max_depth and depth >= max_depth:
            continue

        result = _fetch(source, name, version if name == root else None)
        if not result.ok:
            if name == root:
                raise result.error
            logger.warning("No dependencies for %s: %s", name, result.error)
            continue

        logger.debug("%s (depth %d): %d dependencies", name, depth, len(result.dependencies))
        _enqueue_dependencies(name, depth, result.dependencies, state)

    return state.graph


def _fetch(source: ManifestSource, name: str, version: str | None) -> FetchResult:
    try:
        deps = source.fetch_dependencies(name, version)
    except ManifestError as e:
        return FetchResult(name=name, error=e)
    return FetchResult(name=name, dependencies=deps)


def _enqueue_dependencies(
    parent: str, parent_depth: int, dependencies: dict[str, str], state: _Traversal
) -> None:
    children = state.graph.adjacency[parent]
    for raw_name in dependencies:
        child = normalize_name(raw_name)
        if not child or is_excluded(child, state.filter):
            continue
        children.append(child)
        state.graph.depths.setdefault(child, parent_depth + 1)
        if child not in state.visited:
            state.queue.append((child, parent_depth + 1))
