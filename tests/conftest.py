from __future__ import annotations

import pytest

from depgraph.errors import ManifestNotFoundError


class DictSource:
    """In-memory manifest source that records every lookup."""

    def __init__(self, packages: dict[str, list[str]], failing: set[str] | None = None) -> None:
        self.packages = packages
        self.failing = failing or set()
        self.calls: list[tuple[str, str | None]] = []

    def fetch_dependencies(self, name: str, version: str | None = None) -> dict[str, str]:
        self.calls.append((name, version))
        if name in self.failing or name not in self.packages:
            raise ManifestNotFoundError(f"no manifest for {name}")
        return {dep: "" for dep in self.packages[name]}


@pytest.fixture
def scenario_graph() -> dict[str, list[str]]:
    return {"a": ["b", "c"], "b": ["d"], "c": [], "d": []}
