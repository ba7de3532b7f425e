from __future__ import annotations

import json

import pytest

from depgraph.errors import MalformedManifestError, ManifestNotFoundError
from depgraph.graph import build_graph
from depgraph.order import compute_install_order
from depgraph.sources.fixture import FixtureSource, parse_text_graph


def test_json_mapping_of_lists(tmp_path) -> None:
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"A": ["B", "C"], "B": ["D"], "C": [], "D": []}), encoding="utf-8")

    source = FixtureSource(path)

    assert source.fetch_dependencies("a") == {"b": "", "c": ""}
    assert source.fetch_dependencies("B", "9.9.9") == {"d": ""}


def test_json_mapping_of_nested_objects(tmp_path) -> None:
    path = tmp_path / "graph.json"
    path.write_text(
        json.dumps(
            {
                "app": {"version": "1.0.0", "dependencies": {"left-pad": "^1.3.0"}},
                "left-pad": {"version": "1.3.0"},
            }
        ),
        encoding="utf-8",
    )

    source = FixtureSource(path)

    assert source.fetch_dependencies("app") == {"left-pad": "^1.3.0"}
    assert source.fetch_dependencies("left-pad") == {}


def test_single_package_object(tmp_path) -> None:
    path = tmp_path / "package.json"
    path.write_text(
        json.dumps({"name": "My-App", "version": "0.1.0", "dependencies": {"react": "^18"}}),
        encoding="utf-8",
    )

    assert FixtureSource(path).fetch_dependencies("my-app") == {"react": "^18"}


def test_text_format() -> None:
    text = """
# comment
A: B, C D
B:\tD
C:
D
"""
    assert parse_text_graph(text) == {
        "a": {"b": "", "c": "", "d": ""},
        "b": {"d": ""},
        "c": {},
        "d": {},
    }


def test_yaml_fixture(tmp_path) -> None:
    path = tmp_path / "graph.yaml"
    path.write_text("a:\n  - b\nb:\n  dependencies:\n    c: '1.0'\nc: []\n", encoding="utf-8")

    source = FixtureSource(path)

    assert source.fetch_dependencies("a") == {"b": ""}
    assert source.fetch_dependencies("b") == {"c": "1.0"}


def test_directory_fixture(tmp_path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "app", "dependencies": {"web": "1", "db": "2"}}),
        encoding="utf-8",
    )
    (tmp_path / "graph.txt").write_text("web: http\nhttp:\n", encoding="utf-8")
    module = tmp_path / "node_modules" / "db"
    module.mkdir(parents=True)
    (module / "package.json").write_text(
        json.dumps({"name": "db", "dependencies": {}}), encoding="utf-8"
    )

    source = FixtureSource(tmp_path)

    assert source.fetch_dependencies("app") == {"web": "1", "db": "2"}
    assert source.fetch_dependencies("web") == {"http": ""}
    assert source.fetch_dependencies("db") == {}


def test_undeclared_package_is_not_found(tmp_path) -> None:
    path = tmp_path / "graph.json"
    path.write_text('{"a": ["ghost"]}', encoding="utf-8")

    with pytest.raises(ManifestNotFoundError):
        FixtureSource(path).fetch_dependencies("ghost")


def test_bad_dependencies_section(tmp_path) -> None:
    path = tmp_path / "graph.json"
    path.write_text('{"a": {"dependencies": 5}}', encoding="utf-8")

    with pytest.raises(MalformedManifestError):
        FixtureSource(path)


def test_missing_fixture(tmp_path) -> None:
    with pytest.raises(ManifestNotFoundError):
        FixtureSource(tmp_path / "nope.json")


def test_cycle_scenario_end_to_end(tmp_path) -> None:
    path = tmp_path / "graph.json"
    path.write_text('{"A": ["B"], "B": ["A"]}', encoding="utf-8")

    graph = build_graph("A", FixtureSource(path), max_depth=0)
    result = compute_install_order(graph.adjacency, graph.root)

    assert graph.adjacency == {"a": ["b"], "b": ["a"]}
    assert sorted(result.order) == ["a", "b"]
    assert len(result.cycles) == 1


def test_undeclared_dependency_becomes_leaf(tmp_path) -> None:
    path = tmp_path / "graph.txt"
    path.write_text("a: b ghost\nb:\n", encoding="utf-8")

    graph = build_graph("a", FixtureSource(path), max_depth=0)

    assert graph.adjacency == {"a": ["b", "ghost"], "b": [], "ghost": []}
    assert graph.depths == {"a": 0, "b": 1, "ghost": 1}


def test_node_modules_leaf_without_dependencies(tmp_path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "app", "dependencies": {"leaf": "^1.0.0"}}), encoding="utf-8"
    )
    leaf = tmp_path / "node_modules" / "leaf"
    leaf.mkdir(parents=True)
    (leaf / "package.json").write_text(
        json.dumps({"name": "leaf", "version": "1.0.0"}), encoding="utf-8"
    )

    graph = build_graph("app", FixtureSource(tmp_path), max_depth=0)

    assert graph.adjacency == {"app": ["leaf"], "leaf": []}


def test_package_object_without_dependencies_section(tmp_path) -> None:
    path = tmp_path / "package.json"
    path.write_text(json.dumps({"name": "Solo", "version": "0.0.1"}), encoding="utf-8")

    assert FixtureSource(path).fetch_dependencies("solo") == {}


def test_project_directory_with_lockfile_and_tsconfig(tmp_path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "app", "dependencies": {"web": "1"}}), encoding="utf-8"
    )
    (tmp_path / "package-lock.json").write_text(
        json.dumps({"name": "app", "lockfileVersion": 3, "packages": {"": {"name": "app"}}}),
        encoding="utf-8",
    )
    (tmp_path / "tsconfig.json").write_text(
        json.dumps({"compilerOptions": {"strict": True}}), encoding="utf-8"
    )
    (tmp_path / "graph.txt").write_text("web:\n", encoding="utf-8")

    source = FixtureSource(tmp_path)

    assert source.fetch_dependencies("app") == {"web": "1"}
    assert "compileroptions" not in source.packages


def test_unusable_secondary_file_is_skipped(tmp_path, caplog) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "app", "dependencies": {}}), encoding="utf-8"
    )
    (tmp_path / "notes.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "list.json").write_text("[1, 2, 3]", encoding="utf-8")

    source = FixtureSource(tmp_path)

    assert source.fetch_dependencies("app") == {}
    assert "Skipping" in caplog.text


def test_mapping_ignores_scalar_entries(tmp_path) -> None:
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"a": ["b"], "b": [], "comment": "generated"}), encoding="utf-8")

    source = FixtureSource(path)

    assert set(source.packages) == {"a", "b"}
