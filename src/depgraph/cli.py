"""Command-line interface for depgraph."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from depgraph.config import load_settings
from depgraph.errors import DepgraphError
from depgraph.pipeline import Options, run


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.exit_with_error(message)

    def exit_with_error(self, message: str) -> None:
        sys.stderr.write(f"Error: {message}\n\n")
        self.print_help(sys.stderr)
        sys.exit(1)


def _build_parser() -> _ArgumentParser:
    parser = _ArgumentParser(
        prog="depgraph",
        description="Transitive dependency graph and install order for a package.",
    )
    parser.add_argument(
        "-n",
        "--name",
        required=True,
        help="Name of the package to analyze",
    )
    parser.add_argument(
        "-r",
        "--repo",
        default=None,
        help="Repository URL, or path to a fixture file/directory with --test",
    )
    parser.add_argument(
        "-t",
        "--test",
        action="store_true",
        help="Test-repository mode: read the graph from a local fixture",
    )
    parser.add_argument(
        "-v",
        "--version",
        default=None,
        help="Package version (pins the root package only)",
    )
    parser.add_argument(
        "-d",
        "--max-depth",
        type=int,
        default=None,
        help="Maximum dependency depth, 0 for unlimited (default: 5)",
    )
    parser.add_argument(
        "-f",
        "--filter",
        default=None,
        help="Skip packages whose name contains this substring",
    )
    parser.add_argument(
        "-o",
        "--order",
        action="store_true",
        help="Show the install order (dependencies first)",
    )
    parser.add_argument(
        "-m",
        "--mermaid",
        action="store_true",
        help="Print a Mermaid diagram and open it as HTML",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="HTML output path for --mermaid (default: temp directory)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_false",
        dest="open_browser",
        help="Write the HTML page without opening a browser",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: .depgraph.toml or [tool.depgraph] in pyproject.toml)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("depgraph").setLevel(logging.DEBUG)

    try:
        settings = load_settings(config_path=args.config)
        options = Options(
            package_name=args.name,
            repo=args.repo,
            test_mode=args.test,
            version=args.version,
            max_depth=settings.max_depth if args.max_depth is None else args.max_depth,
            name_filter=args.filter if args.filter is not None else settings.filter,
            order=args.order,
            visualize=args.mermaid,
            output=args.output,
            open_browser=args.open_browser,
        )
        run(options, settings=settings)
    except DepgraphError as e:
        parser.exit_with_error(str(e))

    return 0


if __name__ == "__main__":
    sys.exit(main())
