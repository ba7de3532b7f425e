"""Render a Mermaid diagram into a standalone HTML page."""

from __future__ import annotations

import html
import logging
import tempfile
import webbrowser
from pathlib import Path
from string import Template

from depgraph.errors import OutputError

logger = logging.getLogger(__name__)

_TEMPLATE_PATH = Path(__file__).with_name("template.html")


def default_output_path(package_name: str) -> Path:
    safe = package_name.replace("/", "_").replace("@", "")
    return Path(tempfile.gettempdir()) / f"depgraph_{safe}.html"


def render_html(mermaid_source: str, title: str, output_path: Path) -> None:
    """Write the HTML page for *mermaid_source* to *output_path*."""
    template = Template(_TEMPLATE_PATH.read_text(encoding="utf-8"))
    page = template.safe_substitute(
        TITLE=html.escape(title),
        DIAGRAM=html.escape(mermaid_source, quote=False),
    )
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(page, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Could not write {output_path}: {e}") from e


def open_in_browser(path: Path) -> bool:
    """Open *path* in the default browser; return False if that failed."""
    try:
        opened = webbrowser.open(path.resolve().as_uri())
    except webbrowser.Error as e:
        logger.warning("Failed to open browser: %s", e)
        return False
    if not opened:
        logger.warning("No browser available to open %s", path)
    return opened
