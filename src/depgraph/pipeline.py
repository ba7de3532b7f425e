"""Orchestrator: validate → build graph → install order → render."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO
from urllib.parse import urlparse

from depgraph.config import Settings
from depgraph.errors import ConfigError
from depgraph.graph import build_graph, is_excluded
from depgraph.model import DependencyGraph, InstallOrder
from depgraph.order import install_order
from depgraph.renderer.html import default_output_path, open_in_browser, render_html
from depgraph.renderer.mermaid import generate_mermaid
from depgraph.renderer.text import format_depths, format_edges, format_install_order
from depgraph.sources import open_source

logger = logging.getLogger(__name__)

_PACKAGE_NAME_RE = re.compile(r"^(@[A-Za-z0-9._-]+/)?[A-Za-z0-9._-]+$")


@dataclass
class Options:
    """Effective options for one run, after merging CLI and config."""

    package_name: str
    repo: str | None = None
    test_mode: bool = False
    version: str | None = None
    max_depth: int = 5
    name_filter: str | None = None
    order: bool = False
    visualize: bool = False
    output: Path | None = None
    open_browser: bool = True


@dataclass
class RunResult:
    graph: DependencyGraph
    install_order: InstallOrder | None = None
    html_path: Path | None = None


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_options(options: Options) -> None:
    """Raise :class:`ConfigError` if *options* cannot start a traversal."""
    name = options.package_name or ""
    if not name.strip() or not _PACKAGE_NAME_RE.match(name):
        raise ConfigError(
            "Package name is required and must contain only letters, digits, "
            "'.', '-' or '_' (optionally with an @scope/ prefix)."
        )

    if options.max_depth < 0:
        raise ConfigError("--max-depth must be a non-negative integer.")

    if is_excluded(name, options.name_filter):
        raise ConfigError(f"--filter {options.name_filter!r} excludes the package being analyzed.")

    if options.test_mode:
        if not options.repo:
            raise ConfigError("--test mode requires --repo with a fixture file or directory.")
        if _is_http_url(options.repo):
            raise ConfigError(
                "--test mode requires a file path to a test repository, not an HTTP/HTTPS URL."
            )
        if not Path(options.repo).exists():
            raise ConfigError(f"Test repository file or directory does not exist: {options.repo}")
    elif options.repo and not _is_http_url(options.repo):
        raise ConfigError(
            f"--repo must be an HTTP/HTTPS URL unless --test is given: {options.repo}"
        )


def describe_options(options: Options) -> str:
    lines = [
        f"package_name={options.package_name}",
        f"test_repo_mode={options.test_mode}",
    ]
    if options.repo:
        lines.append(f"repo={options.repo}")
    lines += [
        f"version={options.version or ''}",
        f"max_depth={options.max_depth}",
        f"filter={options.name_filter or ''}",
    ]
    return "\n".join(lines)


def run(
    options: Options,
    *,
    settings: Settings | None = None,
    out: TextIO | None = None,
) -> RunResult:
    """Run the full analysis and print the report to *out*."""
    out = out or sys.stdout
    settings = settings or Settings()
    validate_options(options)

    print(describe_options(options), file=out)

    source = open_source(
        options.package_name,
        options.repo,
        test_mode=options.test_mode,
        settings=settings,
    )
    graph = build_graph(
        options.package_name,
        source,
        max_depth=options.max_depth,
        name_filter=options.name_filter,
        version=options.version,
    )
    logger.debug("Graph: %d nodes, %d edges", len(graph.adjacency), len(graph.edges()))
    result = RunResult(graph=graph)

    print(file=out)
    print(format_depths(graph), file=out)
    print(file=out)
    print(format_edges(graph), file=out)

    if options.order:
        result.install_order = install_order(graph.root, graph.adjacency)
        logger.debug("Cycles detected: %d", len(result.install_order.cycles))
        print(file=out)
        print(format_install_order(result.install_order), file=out)

    if options.visualize:
        mermaid_source = generate_mermaid(graph.adjacency)
        print(file=out)
        print(mermaid_source, file=out, end="")

        out_path = options.output or settings.output or default_output_path(graph.root)
        render_html(mermaid_source, f"Dependencies of {graph.root}", out_path)
        result.html_path = out_path
        logger.info("Generated %s", out_path)

        if not options.open_browser or not open_in_browser(out_path):
            print(f"HTML output written to: {out_path}", file=out)

    return result
