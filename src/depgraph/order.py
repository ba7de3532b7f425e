"""Dependencies-first install order with cycle detection."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from depgraph.graph import build_graph
from depgraph.model import InstallOrder, normalize_name
from depgraph.sources.base import ManifestSource

logger = logging.getLogger(__name__)


def compute_install_order(
    adjacency: Mapping[str, Sequence[str]], root: str
) -> InstallOrder:
    """Return the depth-first post-order of *adjacency* starting at *root*.

    Every node appears after all of its dependencies.  An edge into a node
    that is still on the active path closes a cycle; the path from that node
    back to itself is recorded and the edge is not followed.  Nodes without
    an adjacency entry are leaves.
    """
    graph = _normalized(adjacency)
    result = InstallOrder()
    finished: set[str] = set()
    in_progress: set[str] = set()

    root = normalize_name(root)
    # Each frame is [node, index of the next child to visit]
    stack: list[list] = [[root, 0]]
    in_progress.add(root)

    while stack:
        frame = stack[-1]
        node, index = frame
        children = graph.get(node, [])

        if index < len(children):
            frame[1] += 1
            child = children[index]
            if child in finished:
                continue
            if child in in_progress:
                path = [f[0] for f in stack]
                cycle = path[path.index(child):] + [child]
                logger.debug("Cycle: %s", " -> ".join(cycle))
                result.cycles.append(cycle)
                continue
            in_progress.add(child)
            stack.append([child, 0])
            continue

        stack.pop()
        in_progress.discard(node)
        finished.add(node)
        result.order.append(node)

    return result


def install_order(
    root: str,
    adjacency: Mapping[str, Sequence[str]] | None = None,
    *,
    source: ManifestSource | None = None,
    max_depth: int = 0,
    name_filter: str | None = None,
    version: str | None = None,
) -> InstallOrder:
    """Compute the install order, building the graph first when none is given."""
    if adjacency is None:
        if source is None:
            raise ValueError("install_order needs either an adjacency mapping or a source")
        adjacency = build_graph(
            root,
            source,
            max_depth=max_depth,
            name_filter=name_filter,
            version=version,
        ).adjacency
    return compute_install_order(adjacency, root)


def _normalized(adjacency: Mapping[str, Sequence[str]]) -> dict[str, list[str]]:
    graph: dict[str, list[str]] = {}
    for name, children in adjacency.items():
        graph.setdefault(normalize_name(name), []).extend(
            normalize_name(c) for c in children
        )
    return graph
