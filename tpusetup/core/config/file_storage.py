from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import ConfigError


def load_config_settings(
    *,
    config_file: Path,
    defaults: dict[str, Any],
    required: bool = False,
) -> dict[str, Any]:
    """Load config JSON merged over *defaults*.

    Returns a copy of `defaults` when the file does not exist and is not
    required. Raises ConfigError when a required file is missing, or when any
    file that exists cannot be read or is not a JSON object.
    """

    if not config_file.exists():
        if required:
            raise ConfigError(f"Config file not found: {config_file}")
        return dict(defaults)

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            loaded = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_file}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config {config_file} must contain a JSON object")

    # A space-separated string is accepted as shorthand for the package list.
    if isinstance(loaded.get("packages"), str):
        loaded["packages"] = loaded["packages"].split()

    return {**defaults, **loaded}
