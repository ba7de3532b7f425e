"""Plain-text listings printed by the command line."""

from __future__ import annotations

from depgraph.model import DependencyGraph, InstallOrder


def format_depths(graph: DependencyGraph) -> str:
    lines = ["Dependency graph (node : depth):"]
    for name, depth in sorted(graph.depths.items(), key=lambda kv: (kv[1], kv[0])):
        lines.append(f"{name} : {depth}")
    return "\n".join(lines)


def format_edges(graph: DependencyGraph) -> str:
    lines = ["Edges (parent -> child):"]
    for parent in sorted(graph.adjacency):
        for child in graph.adjacency[parent]:
            lines.append(f"{parent} -> {child}")
    return "\n".join(lines)


def format_install_order(result: InstallOrder) -> str:
    """Numbered install order, followed by any detected cycles."""
    lines = ["Install / load order (dependencies first):"]
    lines += [f"{i}. {name}" for i, name in enumerate(result.order, start=1)]
    if result.cycles:
        lines += ["", "Detected cycles:"]
        lines += [f"Cycle: {' -> '.join(cycle)}" for cycle in result.cycles]
    return "\n".join(lines)
