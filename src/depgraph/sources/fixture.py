"""Local fixture backend: synthetic dependency graphs read from disk."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

import yaml

from depgraph.errors import MalformedManifestError, ManifestError, ManifestNotFoundError
from depgraph.model import normalize_name

logger = logging.getLogger(__name__)

_TEXT_SEPARATORS = re.compile(r"[,\s]+")
_GRAPH_SUFFIXES = (".json", ".yaml", ".yml", ".txt")
# Well-known JSON files in a project directory that do not describe a graph
_NON_GRAPH_FILES = frozenset(
    {"package-lock.json", "npm-shrinkwrap.json", "tsconfig.json", "jsconfig.json"}
)


class FixtureSource:
    """Serve dependencies from a fixture file or directory.

    The whole fixture is loaded once; lookups are case-insensitive and ignore
    the requested version.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.packages: dict[str, dict[str, str]] = {}

        if path.is_dir():
            self._load_directory(path)
        elif path.is_file():
            self._merge(_parse_file(path), path)
        else:
            raise ManifestNotFoundError(f"Fixture does not exist: {path}")

        logger.debug("Fixture %s declares %d packages", path, len(self.packages))

    def fetch_dependencies(self, name: str, version: str | None = None) -> dict[str, str]:
        key = normalize_name(name)
        if key not in self.packages:
            raise ManifestNotFoundError(f"Package '{name}' is not declared in {self.path}")
        return dict(self.packages[key])

    def _load_directory(self, directory: Path) -> None:
        package_json = directory / "package.json"
        if package_json.is_file():
            self._merge(_parse_file(package_json), package_json)

        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            raise ManifestNotFoundError(f"Could not list fixture directory {directory}: {e}") from e

        for child in children:
            if child == package_json or not child.is_file():
                continue
            if child.name.lower() in _NON_GRAPH_FILES:
                continue
            if child.suffix.lower() in _GRAPH_SUFFIXES:
                self._merge_optional(child)

        node_modules = directory / "node_modules"
        if node_modules.is_dir():
            manifests = sorted(node_modules.glob("*/package.json"))
            manifests += sorted(node_modules.glob("@*/*/package.json"))
            for manifest in manifests:
                self._merge_optional(manifest)

    def _merge_optional(self, path: Path) -> None:
        """Merge a secondary file, skipping it if it is not a usable graph."""
        try:
            declared = _parse_file(path)
        except ManifestError as e:
            logger.warning("Skipping %s: %s", path, e)
            return
        self._merge(declared, path)

    def _merge(self, declared: dict[str, dict[str, str]], origin: Path) -> None:
        for name, deps in declared.items():
            if name in self.packages:
                logger.debug("%s: '%s' already declared, keeping first entry", origin, name)
                continue
            self.packages[name] = deps


def _parse_file(path: Path) -> dict[str, dict[str, str]]:
    """Parse one fixture file into ``{package: {dependency: version label}}``."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestNotFoundError(f"Could not read fixture {path}: {e}") from e

    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedManifestError(f"{path}: invalid JSON: {e}") from e
        return _parse_structured(data, path)
    if suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise MalformedManifestError(f"{path}: invalid YAML: {e}") from e
        return _parse_structured(data or {}, path)
    return parse_text_graph(text)


def _parse_structured(data: object, path: Path) -> dict[str, dict[str, str]]:
    if not isinstance(data, dict):
        raise MalformedManifestError(f"{path}: expected an object at the top level")

    # A single package.json-style object; a missing section means no dependencies
    if isinstance(data.get("name"), str):
        return {normalize_name(data["name"]): _dependency_map(data.get("dependencies"), path)}

    packages: dict[str, dict[str, str]] = {}
    for name, entry in data.items():
        if not isinstance(name, str) or not name.strip():
            continue
        if isinstance(entry, dict):
            entry = entry.get("dependencies")
        elif entry is not None and not isinstance(entry, list):
            logger.debug("%s: ignoring non-package entry %r", path, name)
            continue
        packages.setdefault(normalize_name(name), _dependency_map(entry, path))
    return packages


def _dependency_map(section: object, path: Path) -> dict[str, str]:
    if section is None:
        return {}
    if isinstance(section, dict):
        return {
            normalize_name(k): v if isinstance(v, str) else ""
            for k, v in section.items()
            if isinstance(k, str) and k.strip()
        }
    if isinstance(section, list):
        deps: dict[str, str] = {}
        for item in section:
            if isinstance(item, str) and item.strip():
                deps.setdefault(normalize_name(item), "")
        return deps
    raise MalformedManifestError(
        f"{path}: dependencies must be an object or a list, got {type(section).__name__}"
    )


def parse_text_graph(text: str) -> dict[str, dict[str, str]]:
    """Parse the ``NAME: DEP1, DEP2 DEP3`` line format."""
    packages: dict[str, dict[str, str]] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        name, _, rest = line.partition(":")
        name = normalize_name(name)
        if not name:
            continue
        deps = packages.setdefault(name, {})
        for dep in _TEXT_SEPARATORS.split(rest.strip()):
            if dep:
                deps.setdefault(normalize_name(dep), "")
    return packages
