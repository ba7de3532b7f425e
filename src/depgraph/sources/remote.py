"""Remote backend: manifests from a package registry or a GitHub repository."""

from __future__ import annotations

import logging
from urllib.parse import quote, urlparse

import requests

from depgraph.config import DEFAULT_REGISTRY, DEFAULT_TIMEOUT
from depgraph.errors import ManifestNotFoundError
from depgraph.manifest import extract_dependencies
from depgraph.model import normalize_name

logger = logging.getLogger(__name__)

GITHUB_RAW = "https://raw.githubusercontent.com"
_DEFAULT_BRANCHES = ("main", "master")


class RemoteSource:
    """Fetch manifests over HTTP.

    The root package is resolved through *location* when one is given (a
    GitHub repository, a registry URL or a raw manifest URL); every other
    package is looked up unpinned in *registry*.
    """

    def __init__(
        self,
        root: str,
        location: str | None = None,
        *,
        registry: str = DEFAULT_REGISTRY,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.root = normalize_name(root)
        self.location = location
        self.registry = registry.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._cache: dict[tuple[str, str | None], dict[str, str]] = {}

    def fetch_dependencies(self, name: str, version: str | None = None) -> dict[str, str]:
        key = (normalize_name(name), version)
        if key in self._cache:
            return dict(self._cache[key])

        if key[0] == self.root and self.location:
            urls = self.root_candidates(version)
        else:
            urls = self.registry_candidates(key[0], version)

        text = self._fetch_first(name, urls)
        deps = extract_dependencies(text, version)
        self._cache[key] = deps
        return dict(deps)

    def root_candidates(self, version: str | None) -> list[str]:
        """Return the URLs tried, in order, for the root package's manifest."""
        if not self.location:
            return self.registry_candidates(self.root, version)
        parsed = urlparse(self.location)
        host = parsed.netloc.lower()
        segments = [s for s in parsed.path.split("/") if s]

        if host in ("github.com", "www.github.com") and len(segments) >= 2:
            owner, repo = segments[0], segments[1].removesuffix(".git")
            tags = _version_tags(version) + list(_DEFAULT_BRANCHES)
            return [f"{GITHUB_RAW}/{owner}/{repo}/{tag}/package.json" for tag in tags]

        registry_host = urlparse(self.registry).netloc.lower()
        if segments and (host == registry_host or host.endswith("npmjs.org")):
            if segments[0].startswith("@") and len(segments) >= 2:
                package, rest = f"{segments[0]}/{segments[1]}", segments[2:]
            else:
                package, rest = segments[0], segments[1:]
            pinned = rest[0] if rest else version
            base = f"{parsed.scheme}://{parsed.netloc}"
            return self.registry_candidates(package, pinned, base=base)

        return [self.location]

    def registry_candidates(
        self, name: str, version: str | None, *, base: str | None = None
    ) -> list[str]:
        """Return registry URLs for *name*: pinned, ``v``-prefixed, then latest."""
        base = (base or self.registry).rstrip("/")
        package = quote(name, safe="@")
        tags = _version_tags(version) + ["latest"]
        return [f"{base}/{package}/{tag}" for tag in tags]

    def _fetch_first(self, name: str, urls: list[str]) -> str:
        for url in urls:
            logger.debug("GET %s", url)
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                logger.debug("Request to %s failed: %s", url, e)
                continue
            if response.status_code != 200:
                logger.debug("%s returned HTTP %d", url, response.status_code)
                continue
            if response.text.strip():
                return response.text
        raise ManifestNotFoundError(
            f"Could not fetch a manifest for '{name}' (tried {len(urls)} URLs)"
        )


def _version_tags(version: str | None) -> list[str]:
    if not version:
        return []
    if version.startswith("v"):
        return [version]
    return [version, f"v{version}"]
