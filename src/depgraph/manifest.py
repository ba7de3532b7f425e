"""Extract the ``dependencies`` section from package manifest text."""

from __future__ import annotations

import json

from depgraph.errors import MalformedManifestError


def extract_dependencies(text: str, version: str | None = None) -> dict[str, str]:
    """Return ``{dependency name: version label}`` declared in *text*.

    Accepts a plain package.json as well as a registry document where the
    per-version manifests sit under ``versions``.  When several versions are
    present, *version* is preferred, then ``dist-tags.latest``, then the first
    version object that declares dependencies.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedManifestError(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedManifestError("Manifest is not a JSON object")

    if "dependencies" in data:
        return _read_dependencies(data["dependencies"])

    versions = data.get("versions")
    if isinstance(versions, dict):
        manifest = _pick_version(versions, version, data.get("dist-tags"))
        if manifest is not None:
            return _read_dependencies(manifest["dependencies"])

    raise MalformedManifestError("Manifest has no dependencies section")


def _pick_version(
    versions: dict, version: str | None, dist_tags: object
) -> dict | None:
    candidates: list[str] = []
    if version:
        candidates += [version, version.removeprefix("v")]
    if isinstance(dist_tags, dict) and isinstance(dist_tags.get("latest"), str):
        candidates.append(dist_tags["latest"])

    # The first listed version that exists wins, even without dependencies
    for key in candidates:
        manifest = versions.get(key)
        if isinstance(manifest, dict):
            return {"dependencies": manifest.get("dependencies", {})}

    for manifest in versions.values():
        if isinstance(manifest, dict) and "dependencies" in manifest:
            return manifest
    return None


def _read_dependencies(section: object) -> dict[str, str]:
    if not isinstance(section, dict):
        raise MalformedManifestError(
            f"dependencies section must be an object, got {type(section).__name__}"
        )
    return {
        name: label
        for name, label in section.items()
        if isinstance(name, str) and name and isinstance(label, str)
    }
