"""Mermaid flowchart source for an adjacency mapping."""

from __future__ import annotations

from collections.abc import Mapping, Sequence


def _label(name: str) -> str:
    return name.replace('"', "#quot;")


def generate_mermaid(adjacency: Mapping[str, Sequence[str]]) -> str:
    """Return a ``graph TD`` definition with one edge per adjacency entry.

    Package names may contain characters Mermaid does not accept in node
    ids (``@``, ``/``, ``.``), so every node gets a generated id and the
    name becomes its label.
    """
    ids: dict[str, str] = {}

    def node(name: str) -> str:
        if name not in ids:
            ids[name] = f"n{len(ids)}"
            return f'{ids[name]}["{_label(name)}"]'
        return ids[name]

    lines = ["graph TD"]
    for parent, children in adjacency.items():
        if not children and parent not in ids:
            lines.append(f"    {node(parent)}")
        for child in children:
            lines.append(f"    {node(parent)} --> {node(child)}")
    return "\n".join(lines) + "\n"
