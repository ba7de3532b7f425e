"""Optional settings from .depgraph.toml or [tool.depgraph] in pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

from depgraph.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5
DEFAULT_REGISTRY = "https://registry.npmjs.org"
DEFAULT_TIMEOUT = 30.0


@dataclass
class Settings:
    """Defaults that command-line options may override."""

    max_depth: int = DEFAULT_MAX_DEPTH
    filter: str | None = None
    registry: str = DEFAULT_REGISTRY
    timeout: float = DEFAULT_TIMEOUT
    output: Path | None = None


def load_settings(base_dir: Path | None = None, config_path: Path | None = None) -> Settings:
    """Read settings, preferring *config_path*, then .depgraph.toml, then pyproject.toml."""
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file does not exist: {config_path}")
        table = _read_table(config_path, ("depgraph",))
        return _settings_from_table(table or {}, config_path)

    base_dir = base_dir or Path.cwd()

    depgraph_toml = base_dir / ".depgraph.toml"
    if depgraph_toml.exists():
        table = _read_table(depgraph_toml, ("depgraph",))
        if table is not None:
            return _settings_from_table(table, depgraph_toml)

    pyproject = base_dir / "pyproject.toml"
    if pyproject.exists():
        table = _read_table(pyproject, ("tool", "depgraph"))
        if table is not None:
            return _settings_from_table(table, pyproject)

    return Settings()


def _read_table(path: Path, keys: tuple[str, ...]) -> dict | None:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Could not parse %s: %s", path, e)
        return None

    for key in keys:
        data = data.get(key)
        if not isinstance(data, dict):
            return None
    return data


def _settings_from_table(table: dict, source: Path) -> Settings:
    settings = Settings()
    logger.debug("Loading settings from %s", source)

    if "max_depth" in table:
        value = table["max_depth"]
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ConfigError(
                f"{source}: max_depth must be a non-negative integer, got {value!r}"
            )
        settings.max_depth = value

    if "filter" in table:
        value = table["filter"]
        if not isinstance(value, str):
            raise ConfigError(f"{source}: filter must be a string, got {value!r}")
        settings.filter = value or None

    if "registry" in table:
        value = table["registry"]
        if not isinstance(value, str) or not value.startswith(("http://", "https://")):
            raise ConfigError(f"{source}: registry must be an HTTP(S) URL, got {value!r}")
        settings.registry = value.rstrip("/")

    if "timeout" in table:
        value = table["timeout"]
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            raise ConfigError(f"{source}: timeout must be a positive number, got {value!r}")
        settings.timeout = float(value)

    if "output" in table:
        value = table["output"]
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{source}: output must be a path string, got {value!r}")
        settings.output = Path(value)

    return settings
