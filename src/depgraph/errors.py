"""Exception hierarchy for depgraph."""

from __future__ import annotations


class DepgraphError(Exception):
    """Base class for errors reported to the user."""


class ConfigError(DepgraphError):
    """Invalid command-line options or configuration values."""


class ManifestError(DepgraphError):
    """A package manifest could not be obtained or understood."""


class ManifestNotFoundError(ManifestError):
    """No manifest exists for the requested package/version."""


class MalformedManifestError(ManifestError):
    """The manifest text is not valid or lacks a usable dependencies section."""


class OutputError(DepgraphError):
    """A report or diagram could not be written."""
