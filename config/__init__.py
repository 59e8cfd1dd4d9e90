"""Configuration loading utilities."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML file from the config/ directory.

    Results are cached: static config is read once per process and must
    not be mutated by callers.
    """
    with open(CONFIG_DIR / filename) as f:
        return yaml.safe_load(f) or {}
