"""Loading pipeline configuration from JSON or YAML files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    """Raised when a configuration file cannot be understood."""


def parse_config(path: str | Path) -> Any:
    """Load a ``.json`` or ``.yaml`` config file and return its contents as plain Python data."""
    path = Path(path)
    suffix = path.suffix
    if suffix not in (".json", ".yaml"):
        raise ConfigError(f"Weird config format: {str(path)!r}")
    with path.open("r", encoding="utf-8") as handle:
        if suffix == ".json":
            return json.load(handle)
        return yaml.safe_load(handle)